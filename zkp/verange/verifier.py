"""
VeRange Verifier
================

VeRange 증명을 검증한다. 온체인 검증 컨트랙트가 수행해야 하는 것과
같은 대수 검사를 파이썬으로 재현한다.

**검증 과정**:
  1. (Cm, W, T)로 Fiat-Shamir 챌린지 eps[0..K) 재유도
  2. 공개된 v-행렬로 vPrime[k], hExp[j] 재계산
  3. 세 방정식 검사

**핵심 방정식**:
  T-검사:   Q·η1                 == Σ_k eps[k]·T[k]
  R/W-검사: R + Σ_k eps[k]·W[k]   == G·Σ_k vPrime[k] + Q·η2
  S-검사:   S                    == Σⱼ Hⱼ·hExp[j]

  하나라도 성립하지 않으면 거부한다 (부분 점수 없음).
  점의 동등성은 사영 좌표를 정규화한 정확한 비교이다.

**오류와 거부의 구분**:
  - 방정식 불성립 → False 반환 (정상적인 부정 결과)
  - 배열 길이가 J, K와 맞지 않음 → DimensionMismatch 예외

사용 예시:
    >>> from zkp.verange.verifier import verify
    >>> verify(proof, crs)   # True / False
"""

import logging

from zkp.verange.errors import DimensionMismatch
from zkp.verange.transcript import derive_challenges
from zkp.verange.utils import h_exponents, v_prime_scalars

logger = logging.getLogger(__name__)

CHECK_NAMES = ("t_check", "rw_check", "s_check")


def check_shape(proof, crs):
    """증명의 배열 길이가 CRS의 J, 증명의 K와 맞는지 확인한다.

    Returns:
        (J, K)
    """
    J = crs.J
    K = len(proof.W)
    if K < 1:
        raise DimensionMismatch("W 배열이 비어 있습니다", {"K": K})
    if len(proof.T) != K:
        raise DimensionMismatch("T 배열 길이가 K와 다릅니다",
                                {"K": K, "T": len(proof.T)})
    if len(proof.v) != J * K:
        raise DimensionMismatch("v-행렬 길이가 J·K와 다릅니다",
                                {"J": J, "K": K, "v": len(proof.v)})
    return J, K


def check_equations(proof, crs):
    """세 검증 방정식을 각각 평가한다.

    Args:
        proof: Proof
        crs: CRS

    Returns:
        dict: {"t_check": bool, "rw_check": bool, "s_check": bool}
    """
    J, K = check_shape(proof, crs)
    curve = crs.curve
    G, Q, H = crs.G, crs.Q, crs.H

    # ── Step 1: Fiat-Shamir 챌린지 재유도 ──
    eps = derive_challenges(curve, proof.cm, proof.W, proof.T)

    # ── Step 2: v-행렬에서 공개 스칼라 재계산 ──
    v = [curve.scalar(x) for x in proof.v]
    v_prime = v_prime_scalars(curve, v, J, K)
    h_exp = h_exponents(curve, v, eps, J, K)
    sum_v_prime = sum(v_prime, curve.Fr.zero())

    # ── Step 3: 방정식 검사 ──
    # T-검사: Q·η1 == Σ eps[k]·T[k]
    t_lhs = curve.mul(Q, proof.eta1)
    t_rhs = curve.lincomb(proof.T, eps)
    t_ok = curve.eq(t_lhs, t_rhs)

    # R/W-검사: R + Σ eps[k]·W[k] == G·ΣvPrime + Q·η2
    rw_lhs = curve.add(proof.R, curve.lincomb(proof.W, eps))
    rw_rhs = curve.add(curve.mul(G, sum_v_prime), curve.mul(Q, proof.eta2))
    rw_ok = curve.eq(rw_lhs, rw_rhs)

    # S-검사: S == Σ Hⱼ·hExp[j]
    s_ok = curve.eq(proof.S, curve.lincomb(H, h_exp))

    results = {"t_check": t_ok, "rw_check": rw_ok, "s_check": s_ok}
    if not all(results.values()):
        logger.debug("VeRange proof rejected: %s",
                     [name for name in CHECK_NAMES if not results[name]])
    return results


def verify(proof, crs):
    """VeRange 증명을 검증한다.

    Args:
        proof: Proof
        crs: CRS

    Returns:
        bool: 세 방정식이 모두 성립하면 True

    Raises:
        DimensionMismatch: 배열 길이가 맞지 않을 때
    """
    return all(check_equations(proof, crs).values())


def verify_with_commitment(cm, proof, crs):
    """공개 커밋먼트 Cm을 별도 인자로 받는 검증 진입점.

    온체인 verifyVeRange(Cm, proof)와 같은 모양이다. 증명 안의 cm 대신
    호출자가 넘긴 Cm으로 트랜스크립트를 구성한다.
    """
    return verify(proof._replace(cm=cm), crs)
