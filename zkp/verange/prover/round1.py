"""
VeRange Prover Round 1: 비트 분해와 커밋먼트
============================================

  ┌─────────────────────────────────────────────────┐
  │  Prover → Verifier: Cm, W[0..K), T[0..K)        │
  │                                                 │
  │  입력:  ω, CRS, J, K                             │
  │  출력:  1 + 2K개의 곡선 점                        │
  └─────────────────────────────────────────────────┘

**과정**:
  1. 차원/범위 확인 후 ω를 J×K 비트 행렬로 분해
  2. 블라인딩 샘플링 (모두 [1, n) 균등)
     - r_w[k], r_t[k]  (k < K)
     - v[kJ+j]          (J·K개, v-행렬)
     - r_R
     - r_ω = Σ_k r_w[k]
  3. 열 가중합 w_k = Σⱼ b[j][k]·2^(kJ+j)
  4. 커밋
     - Cm   = G·ω   + Q·r_ω
     - W[k] = G·w_k + Q·r_w[k]
     - T[k] = Q·r_t[k]
  5. Cm, W, T를 트랜스크립트에 추가

**r_ω = Σ r_w[k] 인 이유**:
  Σ_k W[k] = G·Σw_k + Q·Σr_w[k] = G·ω + Q·r_ω = Cm
  열 커밋먼트들의 합이 정확히 값 커밋먼트가 된다.

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""

from zkp.verange.encoder import check_dimensions, column_values, decompose
from zkp.verange.errors import ConfigurationError, DimensionMismatch
from zkp.verange.utils import pedersen_commit


def execute(state):
    """Round 1을 실행한다.

    Args:
        state: ProverState — omega, crs를 읽고
               bits, w_vals, witness, cm, W, T를 기록한다.
    """
    crs = state.crs
    curve = state.curve
    J, K, N = state.J, state.K, state.N

    # ── 1. 차원/범위 확인 ──
    check_dimensions(N, J, K)
    if crs.J != J:
        raise DimensionMismatch("CRS의 H 생성자 개수가 J와 다릅니다",
                                {"J": J, "crs_J": crs.J})
    if (1 << N) > curve.order:
        raise ConfigurationError("2^N이 스칼라 필드 위수를 넘습니다",
                                 {"N": N, "curve": curve.name})
    state.bits = decompose(state.omega, N, J, K)

    # ── 2. 블라인딩 샘플링 ──
    r_w = [state.sample_scalar() for _ in range(K)]
    r_t = [state.sample_scalar() for _ in range(K)]
    v = [state.sample_scalar() for _ in range(J * K)]
    r_R = state.sample_scalar()
    r_omega = sum(r_w, curve.Fr.zero())
    state.set_witness(r_w, r_omega, r_t, v, r_R)

    # ── 3. 열 가중합 ──
    state.w_vals = [curve.scalar(w) for w in column_values(state.bits, J, K, curve.order)]

    # ── 4. 커밋 ──
    G, Q = crs.G, crs.Q
    state.cm = pedersen_commit(curve, G, Q, state.omega, r_omega)
    state.W = [pedersen_commit(curve, G, Q, state.w_vals[k], r_w[k]) for k in range(K)]
    state.T = [curve.mul(Q, r_t[k]) for k in range(K)]

    # ── 5. 트랜스크립트에 커밋먼트 추가 ──
    state.transcript.append_point(state.cm)
    state.transcript.append_points(state.W)
    state.transcript.append_points(state.T)
