"""
VeRange 증명 집계 (Aggregation)
================================

같은 (J, K)로 만든 T개의 증명을 무작위 선형결합으로 하나의
AggregateProof로 합친다. 검증 비용은 T와 무관하게 O(J + K)이다.

**집계 계수**:
  gamma_t = SHA-256(enc(Cm_t) ‖ t) mod n   (0이면 재해싱)

**결합 규칙**:
  각 증명의 검증 방정식은 증명마다 다른 챌린지 eps_t를 사용하므로,
  챌린지를 W, T 쪽에 미리 접어 넣는다 (eps-folding).

    Cm*      = Σ_t γ_t·Cm_t
    W*[k]    = Σ_t γ_t·eps_t[k]·W_t[k]
    T*[k]    = Σ_t γ_t·eps_t[k]·T_t[k]
    R*       = Σ_t γ_t·R_t
    S*       = Σ_t γ_t·S_t
    η1*      = Σ_t γ_t·η1_t
    η2*      = Σ_t γ_t·η2_t
    vPrime*  = Σ_t γ_t·vPrime_t[k]      (k < K)
    hExp*    = Σ_t γ_t·hExp_t[j]        (j < J)

**집계 검증 방정식** (단일 증명의 세 검사를 γ로 선형결합한 것):
  T-검사:   Q·η1*              == Σ_k T*[k]
  R/W-검사: R* + Σ_k W*[k]     == G·Σ_k vPrime*[k] + Q·η2*
  S-검사:   S*                 == Σⱼ Hⱼ·hExp*[j]

  개별 증명 t의 방정식에 오차 Δ_t가 있으면 집계 방정식의 오차는
  Σ_t γ_t·Δ_t 이고, 이것이 0이 될 확률은 무시할 만하다.

사용 예시:
    >>> agg = aggregate([proof1, proof2], crs, J=8, K=8)
    >>> verify_aggregate(agg, crs)   # True
"""

import logging
from collections import namedtuple

from zkp.verange.errors import DimensionMismatch, EncodingError, NoProofsProvided
from zkp.verange.transcript import derive_challenges, hash_to_scalar
from zkp.verange.utils import h_exponents, v_prime_scalars

logger = logging.getLogger(__name__)


class AggregateProof(namedtuple("AggregateProof", [
        "aggregated_cm", "W", "T", "R", "S", "eta1", "eta2",
        "v_prime", "h_exponents", "count"])):
    """집계 증명 (불변).

    속성:
        aggregated_cm: Σ γ_t·Cm_t — 개별 투표자의 Cm이 아닌 결합 커밋먼트
        W, T: eps가 접힌 K개의 점 튜플
        R, S: 결합된 점
        eta1, eta2: 결합된 응답 스칼라
        v_prime: K개의 결합 스칼라
        h_exponents: J개의 결합 스칼라
        count: 집계된 증명 수 T
    """

    __slots__ = ()


def aggregation_coefficients(proofs, curve):
    """증명별 집계 계수 gamma_t를 계산한다.

    Args:
        proofs: Proof 리스트
        curve: CurveGroup (증명과 CRS의 곡선)

    Returns:
        list[Fr]: 길이 len(proofs), 모두 0이 아님
    """
    return [
        curve.Fr(hash_to_scalar(curve.encode_point(proof.cm) + t.to_bytes(4, "big"),
                                curve.order))
        for t, proof in enumerate(proofs)
    ]


def _check_dimensions(proofs, crs, J, K):
    if J < 1 or K < 1:
        raise DimensionMismatch("J, K는 1 이상이어야 합니다", {"J": J, "K": K})
    if crs.J != J:
        raise DimensionMismatch("CRS의 H 생성자 개수가 J와 다릅니다",
                                {"J": J, "crs_J": crs.J})
    for t, proof in enumerate(proofs):
        if len(proof.W) != K or len(proof.T) != K:
            raise DimensionMismatch(
                "증명의 W/T 배열 길이가 K와 다릅니다",
                {"proof": t, "K": K, "W": len(proof.W), "T": len(proof.T)},
            )
        if len(proof.v) != J * K:
            raise DimensionMismatch(
                "증명의 v-행렬 길이가 J·K와 다릅니다",
                {"proof": t, "J": J, "K": K, "v": len(proof.v)},
            )


def _check_curve(proofs, curve):
    for t, proof in enumerate(proofs):
        points = (proof.cm, proof.R, proof.S) + tuple(proof.W) + tuple(proof.T)
        if not all(curve.owns(point) for point in points):
            raise EncodingError("증명의 점이 CRS 곡선에 속하지 않습니다",
                                {"proof": t, "curve": curve.name})


def aggregate(proofs, crs, J, K):
    """증명들을 하나의 AggregateProof로 결합한다.

    챌린지, 집계 계수, 군 연산은 모두 crs.curve 위에서 계산된다.

    Args:
        proofs: 같은 (J, K)로 생성된 Proof 리스트 (순서 유지)
        crs: 증명 생성에 사용한 CRS
        J: 행 수 (= crs.J)
        K: 열 수

    Returns:
        AggregateProof

    Raises:
        NoProofsProvided: proofs가 비어 있을 때
        DimensionMismatch: 어떤 증명의 배열 길이가 (J, K)와 맞지 않거나
                           J가 CRS와 다를 때
        EncodingError: 증명의 점이 CRS와 다른 곡선의 점일 때
    """
    proofs = list(proofs)
    if not proofs:
        raise NoProofsProvided("집계할 증명이 없습니다")
    curve = crs.curve
    _check_curve(proofs, curve)
    _check_dimensions(proofs, crs, J, K)

    gammas = aggregation_coefficients(proofs, curve)
    zero = curve.Fr.zero()

    agg_cm = curve.identity
    agg_W = [curve.identity] * K
    agg_T = [curve.identity] * K
    agg_R = curve.identity
    agg_S = curve.identity
    agg_eta1 = zero
    agg_eta2 = zero
    agg_v_prime = [zero] * K
    agg_h_exp = [zero] * J

    for proof, gamma in zip(proofs, gammas):
        # 각 증명의 챌린지는 자신의 트랜스크립트에서 재유도한다
        eps = derive_challenges(curve, proof.cm, proof.W, proof.T)
        v = [curve.scalar(x) for x in proof.v]
        v_prime = v_prime_scalars(curve, v, J, K)
        h_exp = h_exponents(curve, v, eps, J, K)

        agg_cm = curve.add(agg_cm, curve.mul(proof.cm, gamma))
        agg_R = curve.add(agg_R, curve.mul(proof.R, gamma))
        agg_S = curve.add(agg_S, curve.mul(proof.S, gamma))

        for k in range(K):
            weight = gamma * eps[k]
            agg_W[k] = curve.add(agg_W[k], curve.mul(proof.W[k], weight))
            agg_T[k] = curve.add(agg_T[k], curve.mul(proof.T[k], weight))
            agg_v_prime[k] = agg_v_prime[k] + gamma * v_prime[k]

        for j in range(J):
            agg_h_exp[j] = agg_h_exp[j] + gamma * h_exp[j]

        agg_eta1 = agg_eta1 + gamma * curve.scalar(proof.eta1)
        agg_eta2 = agg_eta2 + gamma * curve.scalar(proof.eta2)

    logger.debug("aggregated %d VeRange proofs (J=%d, K=%d)", len(proofs), J, K)
    return AggregateProof(
        aggregated_cm=agg_cm,
        W=tuple(agg_W),
        T=tuple(agg_T),
        R=agg_R,
        S=agg_S,
        eta1=agg_eta1,
        eta2=agg_eta2,
        v_prime=tuple(agg_v_prime),
        h_exponents=tuple(agg_h_exp),
        count=len(proofs),
    )


def check_aggregate_equations(agg, crs):
    """집계 증명의 세 방정식을 각각 평가한다.

    Returns:
        dict: {"t_check": bool, "rw_check": bool, "s_check": bool}
    """
    curve = crs.curve
    K = len(agg.W)
    if len(agg.T) != K or len(agg.v_prime) != K:
        raise DimensionMismatch("집계 증명의 W/T/v_prime 길이가 다릅니다",
                                {"W": K, "T": len(agg.T), "v_prime": len(agg.v_prime)})
    if len(agg.h_exponents) != crs.J:
        raise DimensionMismatch("집계 증명의 H_exponents 길이가 J와 다릅니다",
                                {"J": crs.J, "H_exponents": len(agg.h_exponents)})

    ones = [1] * K

    t_ok = curve.eq(curve.mul(crs.Q, agg.eta1), curve.lincomb(agg.T, ones))

    sum_v_prime = sum((curve.scalar(x) for x in agg.v_prime), curve.Fr.zero())
    rw_lhs = curve.add(agg.R, curve.lincomb(agg.W, ones))
    rw_rhs = curve.add(curve.mul(crs.G, sum_v_prime), curve.mul(crs.Q, agg.eta2))
    rw_ok = curve.eq(rw_lhs, rw_rhs)

    s_ok = curve.eq(agg.S, curve.lincomb(crs.H, agg.h_exponents))

    return {"t_check": t_ok, "rw_check": rw_ok, "s_check": s_ok}


def verify_aggregate(agg, crs):
    """집계 증명을 검증한다. 세 방정식이 모두 성립하면 True."""
    results = check_aggregate_equations(agg, crs)
    if not all(results.values()):
        logger.debug("aggregate proof rejected: %s",
                     [name for name, ok in results.items() if not ok])
    return all(results.values())
