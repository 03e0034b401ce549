"""
VeRange Fiat-Shamir Transcript
================================

대화식 시그마 프로토콜을 비대화식으로 바꾸기 위한 챌린지 유도.

**입력 순서** (Prover, Verifier, Aggregator 모두 동일해야 함):

  seed = SHA-256( "VeRange_ty1_eps_v1" ‖ Cm ‖ W[0] ‖ ... ‖ W[K-1]
                                        ‖ T[0] ‖ ... ‖ T[K-1] )

  각 점은 CurveGroup.encode_point()의 압축 인코딩으로 추가된다.
  S는 챌린지 이후에 계산되므로 트랜스크립트에 포함하지 않는다.

**챌린지 벡터**:
  eps[k] = SHA-256(seed ‖ k) mod n      (k: 4바이트 빅엔디안)

  결과가 0이면 "retry" 태그와 시도 횟수를 덧붙여 다시 해싱한다.
  챌린지 0은 해당 열의 검사를 무력화하므로 허용하지 않는다.

항목별 레이블은 붙이지 않는다.
온체인 검증자가 같은 바이트열을 재구성해야 하므로 도메인 태그 하나로
전체 입력을 분리한다.
"""

import hashlib

from zkp.verange.errors import ConfigurationError
from zkp.verange.field import BN128

EPS_DOMAIN_TAG = b"VeRange_ty1_eps_v1"
RETRY_TAG = b"retry"
MAX_SCALAR_ATTEMPTS = 64


def hash_to_scalar(data, order):
    """바이트열 → [1, n) 범위의 0이 아닌 스칼라 (정수).

    Args:
        data: 해시 입력 바이트열
        order: 스칼라 필드 위수 n

    Returns:
        int: 0이 아닌 스칼라

    Raises:
        ConfigurationError: 재시도 한도까지 0만 나왔을 때 (사실상 불가능)
    """
    value = int.from_bytes(hashlib.sha256(data).digest(), "big") % order
    attempt = 0
    while value == 0:
        attempt += 1
        if attempt > MAX_SCALAR_ATTEMPTS:
            raise ConfigurationError("0이 아닌 스칼라를 유도하지 못했습니다",
                                     {"attempts": MAX_SCALAR_ATTEMPTS})
        retry_input = data + RETRY_TAG + attempt.to_bytes(4, "big")
        value = int.from_bytes(hashlib.sha256(retry_input).digest(), "big") % order
    return value


class Transcript:
    """SHA-256 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state: 누적된 해시 입력 바이트열
        curve: 점 인코딩과 스칼라 위수에 사용할 CurveGroup
    """

    def __init__(self, label=EPS_DOMAIN_TAG, curve=BN128):
        self.curve = curve
        self.state = bytearray()
        self.state.extend(label)

    def append_point(self, point):
        """곡선 점의 압축 인코딩을 추가한다."""
        self.state.extend(self.curve.encode_point(point))

    def append_points(self, points):
        for point in points:
            self.append_point(point)

    def seed(self):
        """현재 상태의 SHA-256 다이제스트."""
        return hashlib.sha256(bytes(self.state)).digest()

    def challenge_scalars(self, count):
        """count개의 0이 아닌 챌린지 스칼라를 유도한다.

        Returns:
            list[Fr]: eps[0..count)
        """
        seed = self.seed()
        order = self.curve.order
        return [
            self.curve.Fr(hash_to_scalar(seed + k.to_bytes(4, "big"), order))
            for k in range(count)
        ]


def derive_challenges(curve, cm, W, T):
    """(Cm, W, T)로부터 eps[0..K)를 유도한다.

    Prover Round 2, Verifier, Aggregator가 모두 이 함수를 사용한다.
    """
    transcript = Transcript(curve=curve)
    transcript.append_point(cm)
    transcript.append_points(W)
    transcript.append_points(T)
    return transcript.challenge_scalars(len(W))
