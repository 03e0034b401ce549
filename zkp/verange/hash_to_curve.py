"""
Hash-to-Curve (try-and-increment)
==================================

임의의 바이트열을 곡선 위의 점으로 결정론적으로 사상한다.
CRS의 보조 생성자(Q, H₁..H_J)를 만들 때만 사용한다.

**알고리즘**:
  counter = 0, 1, 2, ... 에 대해
    1. x = SHA-256(domain_tag ‖ msg ‖ counter) mod p
    2. y² = x³ + b 의 제곱근 y를 구한다
       - 제곱근이 없으면 (확률 ≈ 1/2) counter를 증가시켜 재시도
    3. y와 p - y 중 작은 값을 정규(canonical) 근으로 선택
    4. 여인수(cofactor)를 곱해 소수 위수 부분군으로 보낸다

**왜 trapdoor가 없는가?**
  Q = q·G 인 q를 아무도 모른다. 해시 출력에서 곧바로 x좌표를 얻기 때문에
  누구나 같은 입력으로 같은 점을 재계산하여 감사(audit)할 수 있다.

**재시도 한도**:
  counter는 1바이트이므로 최대 256회 시도한다.
  모두 실패할 확률은 약 2^-256이며, 실패 시 ConfigurationError로
  치명적 설정 오류를 알린다 (호출자가 재시도할 대상이 아니다).
"""

import hashlib
import logging

from zkp.verange.errors import ConfigurationError
from zkp.verange.field import BN128

logger = logging.getLogger(__name__)

MAX_HASH_TO_CURVE_ATTEMPTS = 256


def _to_bytes(value):
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def hash_to_curve(msg, domain_tag, curve=BN128):
    """메시지를 도메인 분리된 곡선 점으로 사상한다.

    Args:
        msg: 입력 바이트열 (str이면 UTF-8 인코딩)
        domain_tag: 도메인 분리 태그 (str 또는 bytes)
        curve: CurveGroup (기본값: BN128)

    Returns:
        항등원이 아닌 곡선 점 (사영 좌표)

    Raises:
        ConfigurationError: 재시도 한도 내에서 점을 찾지 못했을 때

    예시:
        >>> Q = hash_to_curve(b"VeRange-Type1-Q", "VeRange-T1-Q")
    """
    tag = _to_bytes(domain_tag)
    data = _to_bytes(msg)
    p = curve.field_modulus

    for counter in range(MAX_HASH_TO_CURVE_ATTEMPTS):
        digest = hashlib.sha256(tag + data + bytes([counter])).digest()
        x = int.from_bytes(digest, "big") % p

        rhs = curve.fq(x) ** 3 + curve.b
        y = curve.sqrt(rhs)
        if y is None:
            continue

        y_int = min(int(y), p - int(y))
        point = (curve.fq(x), curve.fq(y_int), curve.fq.one())
        if curve.cofactor != 1:
            point = curve.mul(point, curve.cofactor)
        if curve.is_identity(point):
            continue

        logger.debug("hash_to_curve(%r) succeeded after %d attempt(s)",
                     tag, counter + 1)
        return point

    raise ConfigurationError(
        "hash-to-curve 재시도 한도를 초과했습니다",
        {"domain_tag": tag.decode("utf-8", "replace"),
         "attempts": MAX_HASH_TO_CURVE_ATTEMPTS},
    )
