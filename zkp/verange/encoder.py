"""
비트 분해 인코더
================

N비트 비밀값 ω를 J×K 비트 행렬로 펼친다 (N = J·K).

**인덱스 규칙**:
  b[j][k] = bit(idx),  idx = k·J + j   (리틀 엔디안, idx ≥ N 이면 0)

  즉 열(column) k는 ω의 비트 [k·J, (k+1)·J) 구간을 담는다.

  예시 (N=64, J=K=8, ω=5 = 0b101):
      idx 0 → b[0][0] = 1
      idx 2 → b[2][0] = 1
      나머지 = 0

**열 가중합**:
  w_k = Σⱼ b[j][k] · 2^(k·J + j)  (mod n)
  Σ_k w_k = ω 이므로 열별 커밋먼트 W[k]의 합이 Cm이 된다.

이 모듈의 출력은 Prover 내부에서만 사용되며 전송되지 않는다.
"""

from zkp.verange.errors import DimensionMismatch, RangeViolation


def bit_index(j, k, J):
    """(행 j, 열 k) → ω의 비트 위치."""
    return k * J + j


def check_dimensions(N, J, K):
    """N = J·K, J ≥ 1, K ≥ 1 을 확인한다."""
    if J < 1 or K < 1:
        raise DimensionMismatch("J, K는 1 이상이어야 합니다", {"J": J, "K": K})
    if N != J * K:
        raise DimensionMismatch("N은 J·K와 같아야 합니다", {"N": N, "J": J, "K": K})


def check_range(omega, N):
    """0 ≤ ω < 2^N 을 확인한다.

    Raises:
        TypeError: ω가 정수가 아닐 때 (bool 포함)
        RangeViolation: ω가 범위를 벗어날 때
    """
    if isinstance(omega, bool) or not isinstance(omega, int):
        raise TypeError(f"omega는 정수여야 합니다: {type(omega).__name__}")
    if omega < 0 or omega >= (1 << N):
        raise RangeViolation(
            f"omega는 [0, 2^{N}) 범위여야 합니다",
            {"omega": str(omega), "N": N},
        )


def decompose(omega, N, J, K):
    """ω를 J×K 비트 행렬로 분해한다.

    Args:
        omega: 비밀값 (정수)
        N: 비트 길이 (= J·K)
        J: 행 수
        K: 열 수

    Returns:
        list[list[int]]: bits[j][k] ∈ {0, 1}

    Raises:
        DimensionMismatch: N ≠ J·K
        RangeViolation: ω ∉ [0, 2^N)
    """
    check_dimensions(N, J, K)
    check_range(omega, N)
    return [
        [(omega >> bit_index(j, k, J)) & 1 if bit_index(j, k, J) < N else 0
         for k in range(K)]
        for j in range(J)
    ]


def recompose(bits, J, K):
    """비트 행렬 → ω (decompose의 역연산)."""
    omega = 0
    for j in range(J):
        for k in range(K):
            if bits[j][k]:
                omega |= 1 << bit_index(j, k, J)
    return omega


def column_values(bits, J, K, order):
    """열별 가중합 w_k = Σⱼ b[j][k]·2^(kJ+j) mod n 을 계산한다.

    Returns:
        list[int]: 길이 K
    """
    values = []
    for k in range(K):
        w_k = 0
        for j in range(J):
            if bits[j][k]:
                w_k += 1 << bit_index(j, k, J)
        values.append(w_k % order)
    return values
