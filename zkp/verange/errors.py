"""
VeRange 예외 계층
==================

증명 생성/집계 과정에서 발생하는 오류를 구분하기 위한 예외 클래스.

  VeRangeError
  ├── ConfigurationError   hash-to-curve 재시도 소진, 잘못된 CRS
  ├── RangeViolation       ω ∉ [0, 2^N)
  ├── DimensionMismatch    J, K 불일치 (증명 배열 길이 포함)
  ├── NoProofsProvided     빈 집계 입력
  └── EncodingError        wire 포맷(JSON) 디코딩 실패

**검증 실패는 예외가 아니다**:
  verify()는 방정식이 성립하지 않으면 False를 반환한다.
  위 예외들은 입력이나 설정 자체가 잘못된 경우에만 발생한다.
"""


class VeRangeError(Exception):
    """VeRange 코어 예외의 기반 클래스.

    속성:
        message: 사람이 읽을 수 있는 설명
        context: JSON 응답에 실을 수 있는 작은 dict (선택)
    """

    def __init__(self, message, context=None):
        super().__init__(message)
        self.message = message
        self.context = dict(context) if context else {}

    def to_dict(self):
        """HTTP 응답용 dict 표현."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(VeRangeError):
    """공개 파라미터(CRS) 구성이 불가능하거나 잘못됨. 재시도 대상이 아니다."""


class RangeViolation(VeRangeError, ValueError):
    """증명하려는 값이 [0, 2^N) 밖에 있음."""


class DimensionMismatch(VeRangeError, ValueError):
    """J, K 차원이 맞지 않음."""


class NoProofsProvided(VeRangeError, ValueError):
    """집계할 증명이 하나도 없음."""


class EncodingError(VeRangeError, ValueError):
    """wire 포맷을 점/스칼라로 복원할 수 없음."""
