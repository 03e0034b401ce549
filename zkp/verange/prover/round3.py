"""
VeRange Prover Round 3: 응답
============================

  ┌─────────────────────────────────────────────────┐
  │  Prover → Verifier: R, S, η1, η2, v[0..J·K)     │
  │                                                 │
  │  입력:  eps, witness, w_k, CRS                    │
  │  출력:  2개의 곡선 점 + 2개의 응답 스칼라          │
  └─────────────────────────────────────────────────┘

**계산** (모든 스칼라 연산은 mod n):

  1. S (비트 일관성 점)
       u[j][k]  = 2^(kJ+j)·eps[k] − v[kJ+j]
       hExp[j]  = Σ_k v[kJ+j]·u[j][k]
       S        = Σⱼ Hⱼ·hExp[j]

  2. R (값 연결 점)
       vPrime[k] = Σⱼ v[kJ+j]
       δ_R       = Σ_k vPrime[k] − Σ_k w_k·eps[k]
       R         = G·δ_R + Q·r_R

  3. 응답 스칼라
       η1 = Σ_k r_t[k]·eps[k]
       η2 = r_R + Σ_k r_w[k]·eps[k]

**검증 방정식과의 관계**:
  R + Σ_k eps[k]·W[k]
    = G·(δ_R + Σ w_k·eps[k]) + Q·(r_R + Σ r_w[k]·eps[k])
    = G·Σ vPrime[k] + Q·η2
  Q·η1 = Σ_k eps[k]·T[k]

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""

from zkp.verange.utils import h_exponents, pedersen_commit, v_prime_scalars


def execute(state):
    """Round 3을 실행한다.

    Args:
        state: ProverState — eps, witness, w_vals를 읽고
               h_exp, v_prime, S, R, eta1, eta2를 기록한다.
    """
    crs = state.crs
    curve = state.curve
    J, K = state.J, state.K
    eps = state.eps
    witness = state.witness
    zero = curve.Fr.zero()

    # ── 1. S = Σⱼ Hⱼ·hExp[j] ──
    state.h_exp = h_exponents(curve, witness.v, eps, J, K)
    state.S = curve.lincomb(crs.H, state.h_exp)

    # ── 2. R = G·δ_R + Q·r_R ──
    state.v_prime = v_prime_scalars(curve, witness.v, J, K)
    sum_v_prime = sum(state.v_prime, zero)
    sum_w_eps = sum((state.w_vals[k] * eps[k] for k in range(K)), zero)
    delta_R = sum_v_prime - sum_w_eps
    state.R = pedersen_commit(curve, crs.G, crs.Q, delta_R, witness.r_R)

    # ── 3. 응답 스칼라 ──
    state.eta1 = sum((witness.r_t[k] * eps[k] for k in range(K)), zero)
    state.eta2 = witness.r_R + sum((witness.r_w[k] * eps[k] for k in range(K)), zero)
