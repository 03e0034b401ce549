"""
VeRange 공유 유틸리티
=====================

Prover, Verifier, Aggregator가 똑같이 계산해야 하는 스칼라 식을 모은다.

**주요 기능**:
  - pedersen_commit: G·m + Q·r
  - v_prime_scalars: 열별 v-행렬 합 vPrime[k] = Σⱼ v[kJ+j]
  - h_exponents:     행별 지수 hExp[j] = Σ_k v[kJ+j]·(2^(kJ+j)·eps[k] − v[kJ+j])

**v-행렬 인덱스**:
  v는 길이 J·K의 평탄(flat) 리스트이며 (j, k) 원소는 v[k·J + j]이다.
  비트 행렬과 같은 인덱스 규칙을 사용한다.
"""

from zkp.verange.encoder import bit_index


def pedersen_commit(curve, G, Q, m, r):
    """페더슨 커밋먼트 G·m + Q·r.

    m = 0 이면 G항은 항등원이 되어 Q·r만 남는다.
    """
    return curve.add(curve.mul(G, m), curve.mul(Q, r))


def v_prime_scalars(curve, v, J, K):
    """vPrime[k] = Σⱼ v[kJ+j] mod n

    Returns:
        list[Fr]: 길이 K
    """
    return [
        sum((v[bit_index(j, k, J)] for j in range(J)), curve.Fr.zero())
        for k in range(K)
    ]


def h_exponents(curve, v, eps, J, K):
    """hExp[j] = Σ_k v[kJ+j] · ((2^(kJ+j)·eps[k] − v[kJ+j]) mod n) mod n

    S = Σⱼ Hⱼ·hExp[j] 의 지수로 사용된다.

    Returns:
        list[Fr]: 길이 J
    """
    exponents = []
    for j in range(J):
        acc = curve.Fr.zero()
        for k in range(K):
            idx = bit_index(j, k, J)
            u_jk = curve.scalar(1 << idx) * eps[k] - v[idx]
            acc = acc + v[idx] * u_jk
        exponents.append(acc)
    return exponents
