"""
VeRange 기반 모듈: 스칼라 필드 및 타원곡선 군 연산
====================================================

VeRange 프로토콜이 필요로 하는 대수 연산을 하나의 "곡선 능력(capability)"
객체로 묶는다. 프로토콜 코드(crs, prover, verifier, aggregator)는 특정
곡선을 import하지 않고 CRS에 붙어 있는 CurveGroup만 사용한다.

**곡선 형태**:
  y² = x³ + b  (짧은 바이어슈트라스, a = 0)
  기반체 소수 p ≡ 3 (mod 4) → 제곱근은 a^((p+1)/4) 한 번으로 계산된다.

**점 표현**:
  - 내부: py_ecc.optimized_bn128의 사영(projective) 좌표 (X, Y, Z)
          Z = 0 이면 항등원(무한원점)
  - 외부: 아핀 (x, y) 정수 쌍. 항등원은 (0, 0)으로 표현한다.
          b ≠ 0 이므로 (0, 0)은 곡선 위의 점이 될 수 없어 구분이 보장된다.

**제공 곡선**:
  - BN128:     py_ecc의 bn128(BN254) G1, 위수 n ≈ 2^254
  - TOY_CURVE: y² = x³ + 3 over p = 10099, 위수 n = 9967 (소수), 생성자 (1, 2)
               프로토콜이 곡선에 독립적인지 빠르게 확인하기 위한 테스트용 곡선

사용 예시:
    >>> from zkp.verange.field import BN128
    >>> P = BN128.mul(BN128.generator, 5)      # 5·G
    >>> BN128.to_affine(BN128.identity)         # (0, 0)
"""

import logging
import secrets

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import optimized_bn128

from zkp.verange.errors import EncodingError

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 유한체 정의
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 원소 (mod curve_order)."""
    field_modulus = optimized_bn128.curve_order


class ToyFQ(FQ):
    """테스트 곡선의 기반체 원소 (mod 10099)."""
    field_modulus = 10099


class ToyFR(FQ):
    """테스트 곡선의 스칼라 필드 원소 (mod 9967)."""
    field_modulus = 9967


CURVE_ORDER = optimized_bn128.curve_order


# ─────────────────────────────────────────────────────────────────────
# 곡선 능력 객체
# ─────────────────────────────────────────────────────────────────────

class CurveGroup:
    """y² = x³ + b 곡선 위 소수 위수 군의 연산 모음.

    점 덧셈/스칼라 곱은 py_ecc.optimized_bn128의 사영 좌표 함수를 그대로
    사용한다. 이 함수들은 좌표의 체(field) 클래스에만 의존하므로
    기반체 클래스를 바꿔 끼우면 다른 곡선에도 동작한다.

    속성:
        name: 곡선 이름
        fq: 기반체 클래스 (py_ecc FQ 서브클래스)
        Fr: 스칼라 필드 클래스 (위수 n)
        b: 곡선 상수 (fq 원소)
        generator: 표준 생성자 G (사영 좌표)
        cofactor: 여인수 (BN128, TOY_CURVE 모두 1)
    """

    def __init__(self, name, fq, fr, b, generator, cofactor=1):
        self.name = name
        self.fq = fq
        self.Fr = fr
        self.b = fq(int(b))
        self.cofactor = cofactor
        self.field_modulus = fq.field_modulus
        self.order = fr.field_modulus
        self.coordinate_size = (self.field_modulus.bit_length() + 7) // 8
        if self.field_modulus % 4 != 3:
            raise ValueError(f"p ≡ 3 (mod 4) 곡선만 지원합니다: {name}")
        x, y = generator
        self.generator = (fq(int(x)), fq(int(y)), fq.one())
        if not optimized_bn128.is_on_curve(self.generator, self.b):
            raise ValueError(f"생성자가 곡선 위에 있지 않습니다: {name}")

    def __repr__(self):
        return f"CurveGroup({self.name!r})"

    # ── 스칼라 ──

    def scalar(self, value):
        """정수 → 스칼라 필드 원소 (mod n, 음수도 정규화)."""
        return self.Fr(int(value) % self.order)

    def random_scalar(self):
        """[1, n) 범위의 균등 랜덤 스칼라 (secrets 기반)."""
        return self.Fr(secrets.randbelow(self.order - 1) + 1)

    # ── 군 연산 ──

    @property
    def identity(self):
        return (self.fq.one(), self.fq.one(), self.fq.zero())

    def is_identity(self, point):
        return optimized_bn128.is_inf(point)

    def add(self, p1, p2):
        return optimized_bn128.add(p1, p2)

    def neg(self, point):
        return optimized_bn128.neg(point)

    def mul(self, point, scalar):
        """스칼라 곱 scalar · point. scalar는 int 또는 Fr 원소."""
        return optimized_bn128.multiply(point, int(scalar) % self.order)

    def eq(self, p1, p2):
        return optimized_bn128.eq(p1, p2)

    def lincomb(self, points, scalars):
        """Σᵢ scalars[i] · points[i]"""
        acc = self.identity
        for point, scalar in zip(points, scalars):
            acc = self.add(acc, self.mul(point, scalar))
        return acc

    def is_on_curve(self, point):
        return optimized_bn128.is_on_curve(point, self.b)

    def owns(self, point):
        """점의 좌표가 이 곡선의 기반체 원소인지 확인한다.

        ToyFQ는 bn128 FQ의 서브클래스이므로 isinstance가 아닌
        정확한 타입 비교를 사용한다.
        """
        return len(point) == 3 and all(type(c) is self.fq for c in point)

    # ── 아핀 변환 ──

    def to_affine(self, point):
        """사영 → 아핀 (x, y) 정수 쌍. 항등원은 (0, 0)."""
        if self.is_identity(point):
            return (0, 0)
        x, y = optimized_bn128.normalize(point)
        return (int(x), int(y))

    def from_affine(self, x, y):
        """아핀 정수 쌍 → 사영 좌표 점.

        Raises:
            EncodingError: 좌표가 범위를 벗어나거나 점이 곡선/부분군 위에 없을 때
        """
        if x == 0 and y == 0:
            return self.identity
        p = self.field_modulus
        if not (0 <= x < p and 0 <= y < p):
            raise EncodingError("좌표가 기반체 범위를 벗어났습니다",
                                {"curve": self.name, "x": hex(x), "y": hex(y)})
        point = (self.fq(x), self.fq(y), self.fq.one())
        if not self.is_on_curve(point):
            raise EncodingError("점이 곡선 위에 있지 않습니다",
                                {"curve": self.name, "x": hex(x), "y": hex(y)})
        if self.cofactor != 1 and not self.is_identity(
                optimized_bn128.multiply(point, self.order)):
            raise EncodingError("점이 소수 위수 부분군에 속하지 않습니다",
                                {"curve": self.name})
        return point

    # ── 기반체 제곱근 ──

    def sqrt(self, value):
        """기반체 제곱근. 이차 비잉여이면 None.

        p ≡ 3 (mod 4) 이므로 y = a^((p+1)/4) 가 제곱근 후보이다.
        """
        a = self.fq(int(value))
        y = a ** ((self.field_modulus + 1) // 4)
        if y * y != a:
            return None
        return y

    # ── 바이트 인코딩 ──

    def encode_point(self, point):
        """압축 인코딩: prefix(1바이트) ‖ x (coordinate_size 바이트, 빅엔디안).

        prefix: 0x02 (y 짝수), 0x03 (y 홀수), 항등원은 전부 0 바이트.
        """
        if self.is_identity(point):
            return b"\x00" * (1 + self.coordinate_size)
        x, y = self.to_affine(point)
        prefix = b"\x03" if y & 1 else b"\x02"
        return prefix + x.to_bytes(self.coordinate_size, "big")


# ─────────────────────────────────────────────────────────────────────
# 곡선 인스턴스
# ─────────────────────────────────────────────────────────────────────

BN128 = CurveGroup(
    "bn128",
    FQ,
    FR,
    b=int(optimized_bn128.b),
    generator=optimized_bn128.normalize(optimized_bn128.G1),
)

TOY_CURVE = CurveGroup(
    "toy10099",
    ToyFQ,
    ToyFR,
    b=3,
    generator=(1, 2),
)
