"""
VeRange Type-1 Prover — 3-라운드 오케스트레이터
================================================

비밀값 ω ∈ [0, 2^N) 에 대한 범위 증명을 생성한다.

  ┌─────────────────────────────────────────────────────┐
  │  Round 1: 비트 분해 + 커밋                           │
  │  Prover → Verifier: Cm, W[0..K), T[0..K)            │
  ├─────────────────────────────────────────────────────┤
  │  Round 2: 챌린지                                     │
  │  Verifier → Prover: eps[0..K)  (Fiat-Shamir)        │
  ├─────────────────────────────────────────────────────┤
  │  Round 3: 응답                                       │
  │  Prover → Verifier: R, S, η1, η2, v[0..J·K)         │
  └─────────────────────────────────────────────────────┘

**증명 구성**:
  Cm          = G·ω + Q·r_ω              (ω에 대한 페더슨 커밋먼트)
  W[k]        = G·w_k + Q·r_w[k]         (열 k의 가중 비트합 커밋먼트)
  T[k]        = Q·r_t[k]
  S           = Σⱼ Hⱼ·hExp[j]
  R           = G·δ_R + Q·r_R
  η1, η2      = 응답 스칼라
  v[0..J·K)   = 공개되는 블라인딩 행렬

사용 예시:
    >>> from zkp.verange.crs import generate_crs
    >>> from zkp.verange.prover import prove
    >>> crs = generate_crs(8)
    >>> proof = prove(5, crs, J=8, K=8)
"""

import logging
from collections import namedtuple

from zkp.verange.transcript import Transcript
from zkp.verange.prover import round1, round2, round3

logger = logging.getLogger(__name__)


class Proof(namedtuple("Proof", ["cm", "W", "T", "R", "S", "eta1", "eta2", "v"])):
    """VeRange 증명 (불변).

    Round 1 (커밋먼트):
        cm: ω에 대한 커밋먼트 Cm
        W: K개의 열 커밋먼트 튜플
        T: K개의 보조 커밋먼트 튜플

    Round 3 (응답):
        R, S: 곡선 점
        eta1, eta2: Fr 스칼라
        v: 길이 J·K의 Fr 튜플 (v-행렬, 평문 공개)
    """

    __slots__ = ()

    @property
    def K(self):
        return len(self.W)


Witness = namedtuple("Witness", ["r_w", "r_omega", "r_t", "v", "r_R"])
Witness.__doc__ = """Prover 전용 블라인딩 값. 직렬화되거나 반환되지 않는다."""


class ProverState:
    """라운드 간 공유되는 Prover 상태.

    속성 (입력):
        omega: 비밀값
        crs: CRS
        J, K, N: 차원 (N = J·K)
        rand: 랜덤 테이프 (인자 없는 callable, None이면 secrets 사용)

    속성 (라운드 간 생성):
        bits: J×K 비트 행렬 (Round 1)
        w_vals: 열별 가중합 w_k (Round 1)
        witness: Witness (Round 1)
        eps: 챌린지 벡터 (Round 2)
        h_exp, v_prime: 응답 계산용 스칼라 (Round 3)

    속성 (출력):
        cm, W, T, R, S, eta1, eta2
    """

    def __init__(self, omega, crs, J, K, rand=None):
        # 입력
        self.omega = omega
        self.crs = crs
        self.curve = crs.curve
        self.J = J
        self.K = K
        self.N = J * K
        self.rand = rand

        # Fiat-Shamir 트랜스크립트
        self.transcript = Transcript(curve=self.curve)

        # 라운드별 결과
        self.bits = None
        self.w_vals = None
        self.witness = None
        self.eps = None
        self.h_exp = None
        self.v_prime = None

        # 증명 요소
        self.cm = None
        self.W = None
        self.T = None
        self.R = None
        self.S = None
        self.eta1 = None
        self.eta2 = None

    def set_witness(self, r_w, r_omega, r_t, v, r_R):
        self.witness = Witness(tuple(r_w), r_omega, tuple(r_t), tuple(v), r_R)

    def sample_scalar(self):
        """[1, n) 범위의 블라인딩 스칼라를 하나 뽑는다."""
        if self.rand is None:
            return self.curve.random_scalar()
        return self.curve.scalar(self.rand())

    def build_proof(self):
        """최종 증명 객체를 반환한다."""
        return Proof(
            cm=self.cm,
            W=tuple(self.W),
            T=tuple(self.T),
            R=self.R,
            S=self.S,
            eta1=self.eta1,
            eta2=self.eta2,
            v=tuple(self.witness.v),
        )


def prove(omega, crs, J, K, rand=None):
    """VeRange Type-1 범위 증명을 생성한다.

    Args:
        omega: 비밀값, 0 ≤ ω < 2^(J·K)
        crs: CRS (len(crs.H) == J)
        J: 행 수
        K: 열 수
        rand: 선택적 랜덤 테이프. 인자 없이 [1, n) 정수를 돌려주는 callable.
              테스트에서 결정론적 증명을 만들 때만 사용한다.

    Returns:
        Proof

    Raises:
        RangeViolation: ω가 범위를 벗어날 때
        DimensionMismatch: N ≠ J·K 이거나 CRS의 H 개수가 J와 다를 때
        ConfigurationError: 2^N 이 스칼라 필드 위수를 넘을 때
    """
    state = ProverState(omega, crs, J, K, rand)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 1: 비트 분해 → Cm, W, T 커밋                  │
    # └─────────────────────────────────────────────────────┘
    round1.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 2: eps[0..K) 챌린지                           │
    # └─────────────────────────────────────────────────────┘
    round2.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 3: S, R, η1, η2                               │
    # └─────────────────────────────────────────────────────┘
    round3.execute(state)

    logger.debug("generated VeRange proof (J=%d, K=%d, curve=%s)",
                 J, K, state.curve.name)
    return state.build_proof()
