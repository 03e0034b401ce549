"""
VeRange Common Reference String (CRS)
======================================

투명한(transparent) 설정으로 공개 파라미터를 생성한다.

  CRS = { G, Q, H₁, ..., H_J }

  - G:  곡선의 표준 생성자 (고정)
  - Q:  블라인딩 생성자       = hash_to_curve("VeRange-Type1-Q")
  - Hⱼ: 비트 일관성 생성자    = hash_to_curve("VeRange-Type1-H{j}")

**KZG 방식 SRS와의 차이**:
  KZG SRS는 비밀 τ(toxic waste)로 만들어져 신뢰 설정이 필요하지만,
  VeRange CRS는 해시에서 직접 점을 얻으므로 trapdoor가 없다.
  누구나 generate_crs(J)를 다시 실행해 같은 바이트를 얻을 수 있다.

**불변 조건** (생성 시 한 번 확인, 증명마다 다시 확인하지 않음):
  - Q, Hⱼ 중 항등원이 없다
  - Q, Hⱼ 중 G와 같은 점이 없다
  - Q, H₁, ..., H_J 는 서로 모두 다르다

사용 예시:
    >>> crs = generate_crs(8)
    >>> crs.J     # 8
"""

import functools
import logging
from collections import namedtuple

from zkp.verange.errors import ConfigurationError, DimensionMismatch
from zkp.verange.field import BN128
from zkp.verange.hash_to_curve import hash_to_curve

logger = logging.getLogger(__name__)

DEFAULT_J = 8
MAX_J = 256
CRS_CACHE_SIZE = 16

Q_MESSAGE = b"VeRange-Type1-Q"
Q_DOMAIN = "VeRange-T1-Q"
H_MESSAGE = "VeRange-Type1-H{index}"
H_DOMAIN = "VeRange-T1-H{index}"


class CRS(namedtuple("CRS", ["curve", "G", "Q", "H"])):
    """불변 공개 파라미터 (G, Q, H[0..J)).

    속성:
        curve: CurveGroup — 모든 프로토콜 연산이 이 객체를 사용한다
        G: 표준 생성자
        Q: 블라인딩 생성자
        H: J개의 보조 생성자 튜플
    """

    __slots__ = ()

    @property
    def J(self):
        return len(self.H)

    def validate(self):
        """CRS 불변 조건을 확인한다.

        Raises:
            ConfigurationError: 항등원이거나 중복된 생성자가 있을 때
        """
        curve = self.curve
        named = [("Q", self.Q)] + [(f"H{j + 1}", h) for j, h in enumerate(self.H)]

        for name, point in named:
            if curve.is_identity(point):
                raise ConfigurationError("CRS 생성자가 항등원입니다", {"generator": name})
            if curve.eq(point, self.G):
                raise ConfigurationError("CRS 생성자가 G와 같습니다", {"generator": name})

        for i in range(len(named)):
            for k in range(i + 1, len(named)):
                if curve.eq(named[i][1], named[k][1]):
                    raise ConfigurationError(
                        "CRS 생성자가 중복되었습니다",
                        {"generators": [named[i][0], named[k][0]]},
                    )
        return self


@functools.lru_cache(maxsize=CRS_CACHE_SIZE)
def generate_crs(J=DEFAULT_J, curve=BN128):
    """J개의 H 생성자를 갖는 CRS를 생성한다.

    J와 고정 도메인 문자열만의 순수 함수이므로 최근 CRS_CACHE_SIZE개의
    결과를 캐시한다.

    Args:
        J: 행(row) 수 = H 생성자 개수
        curve: CurveGroup (기본값: BN128)

    Returns:
        CRS: 검증된 공개 파라미터

    Raises:
        DimensionMismatch: J가 [1, MAX_J] 범위를 벗어날 때
        ConfigurationError: hash-to-curve 실패 또는 불변 조건 위반
    """
    if J < 1 or J > MAX_J:
        raise DimensionMismatch(f"J는 1 이상 {MAX_J} 이하여야 합니다",
                                {"J": J, "max_J": MAX_J})

    Q = hash_to_curve(Q_MESSAGE, Q_DOMAIN, curve)
    H = tuple(
        hash_to_curve(H_MESSAGE.format(index=j + 1), H_DOMAIN.format(index=j + 1), curve)
        for j in range(J)
    )
    crs = CRS(curve, curve.generator, Q, H).validate()
    logger.debug("generated CRS on %s with J=%d", curve.name, J)
    return crs
