"""
Foundation module tests: field.py, hash_to_curve.py, encoder.py, transcript.py
"""
import pytest

from zkp.verange.errors import (
    ConfigurationError, DimensionMismatch, EncodingError, RangeViolation,
)
from zkp.verange.field import BN128, TOY_CURVE, CURVE_ORDER, FR
from zkp.verange.hash_to_curve import hash_to_curve, MAX_HASH_TO_CURVE_ATTEMPTS
from zkp.verange.encoder import (
    bit_index, column_values, decompose, recompose,
)
from zkp.verange.transcript import (
    Transcript, derive_challenges, hash_to_scalar,
)


CURVES = [BN128, TOY_CURVE]


# =====================================================================
# CurveGroup
# =====================================================================

class TestCurveGroup:
    @pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
    def test_generator_on_curve(self, curve):
        assert curve.is_on_curve(curve.generator)
        assert not curve.is_identity(curve.generator)

    @pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
    def test_order_annihilates_generator(self, curve):
        assert curve.is_identity(curve.mul(curve.generator, curve.order))
        # mul은 스칼라를 mod n 으로 줄인다
        assert curve.is_identity(curve.mul(curve.generator, 0))

    @pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
    def test_add_neg_is_identity(self, curve):
        P = curve.mul(curve.generator, 7)
        assert curve.is_identity(curve.add(P, curve.neg(P)))

    @pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
    def test_identity_is_neutral(self, curve):
        P = curve.mul(curve.generator, 11)
        assert curve.eq(curve.add(P, curve.identity), P)
        assert curve.eq(curve.add(curve.identity, P), P)

    def test_bn128_generator_uses_base_field_class(self):
        """optimized_bn128의 생성자 좌표가 CurveGroup의 기반체 클래스로 변환된다."""
        assert all(type(c) is BN128.fq for c in BN128.generator)
        assert BN128.to_affine(BN128.generator) == (1, 2)

    @pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
    def test_owns_own_points(self, curve):
        assert curve.owns(curve.generator)
        assert curve.owns(curve.identity)
        assert curve.owns(curve.mul(curve.generator, 3))

    def test_owns_rejects_other_curve(self):
        assert not BN128.owns(TOY_CURVE.generator)
        assert not TOY_CURVE.owns(BN128.generator)

    def test_scalar_distributes(self):
        G = BN128.generator
        lhs = BN128.mul(G, 3 + 5)
        rhs = BN128.add(BN128.mul(G, 3), BN128.mul(G, 5))
        assert BN128.eq(lhs, rhs)

    def test_negative_scalar_normalized(self):
        G = BN128.generator
        assert BN128.eq(BN128.mul(G, -1), BN128.neg(G))
        assert BN128.scalar(-1) == FR(CURVE_ORDER - 1)

    def test_lincomb(self):
        G = BN128.generator
        P = BN128.mul(G, 2)
        result = BN128.lincomb([G, P], [3, 4])
        assert BN128.eq(result, BN128.mul(G, 11))

    def test_lincomb_empty_is_identity(self):
        assert BN128.is_identity(BN128.lincomb([], []))

    def test_identity_affine_is_zero_pair(self):
        assert BN128.to_affine(BN128.identity) == (0, 0)
        assert BN128.is_identity(BN128.from_affine(0, 0))

    def test_affine_roundtrip(self):
        P = BN128.mul(BN128.generator, 123456789)
        x, y = BN128.to_affine(P)
        assert BN128.eq(BN128.from_affine(x, y), P)

    def test_generator_affine(self):
        assert BN128.to_affine(BN128.generator) == (1, 2)
        assert TOY_CURVE.to_affine(TOY_CURVE.generator) == (1, 2)

    def test_from_affine_off_curve(self):
        with pytest.raises(EncodingError):
            BN128.from_affine(1, 3)

    def test_from_affine_out_of_range(self):
        with pytest.raises(EncodingError):
            BN128.from_affine(BN128.field_modulus + 1, 2)

    def test_sqrt_non_residue(self):
        # p ≡ 3 (mod 4) 이면 -1은 이차 비잉여
        assert BN128.sqrt(BN128.field_modulus - 1) is None
        assert TOY_CURVE.sqrt(TOY_CURVE.field_modulus - 1) is None

    def test_sqrt_residue(self):
        y = BN128.sqrt(9)
        assert y is not None
        assert int(y * y) == 9

    def test_encode_identity(self):
        assert BN128.encode_point(BN128.identity) == b"\x00" * 33

    def test_encode_generator(self):
        # G = (1, 2): y 짝수 → prefix 0x02
        assert BN128.encode_point(BN128.generator) == b"\x02" + (1).to_bytes(32, "big")
        assert TOY_CURVE.encode_point(TOY_CURVE.generator) == b"\x02\x00\x01"

    def test_encode_negated_point_differs(self):
        G = BN128.generator
        assert BN128.encode_point(G) != BN128.encode_point(BN128.neg(G))

    def test_random_scalar_range(self):
        for _ in range(20):
            s = int(BN128.random_scalar())
            assert 1 <= s < CURVE_ORDER


# =====================================================================
# Hash-to-Curve
# =====================================================================

class TestHashToCurve:
    def test_deterministic(self):
        P1 = hash_to_curve(b"msg", "tag")
        P2 = hash_to_curve(b"msg", "tag")
        assert BN128.to_affine(P1) == BN128.to_affine(P2)

    def test_on_curve_and_not_identity(self):
        P = hash_to_curve(b"VeRange-Type1-Q", "VeRange-T1-Q")
        assert BN128.is_on_curve(P)
        assert not BN128.is_identity(P)

    def test_domain_separation(self):
        P1 = hash_to_curve(b"msg", "tag-A")
        P2 = hash_to_curve(b"msg", "tag-B")
        assert not BN128.eq(P1, P2)

    def test_message_separation(self):
        P1 = hash_to_curve(b"msg-1", "tag")
        P2 = hash_to_curve(b"msg-2", "tag")
        assert not BN128.eq(P1, P2)

    def test_str_and_bytes_equivalent(self):
        P1 = hash_to_curve("msg", b"tag")
        P2 = hash_to_curve(b"msg", "tag")
        assert BN128.eq(P1, P2)

    def test_canonical_root(self):
        x, y = BN128.to_affine(hash_to_curve(b"msg", "tag"))
        assert y <= BN128.field_modulus - y

    def test_toy_curve(self):
        P = hash_to_curve(b"msg", "tag", TOY_CURVE)
        assert TOY_CURVE.is_on_curve(P)
        assert TOY_CURVE.is_identity(TOY_CURVE.mul(P, TOY_CURVE.order))

    def test_exhaustion_is_configuration_error(self, monkeypatch):
        calls = []

        def no_root(value):
            calls.append(value)
            return None

        monkeypatch.setattr(TOY_CURVE, "sqrt", no_root)
        with pytest.raises(ConfigurationError):
            hash_to_curve(b"msg", "tag", TOY_CURVE)
        assert len(calls) == MAX_HASH_TO_CURVE_ATTEMPTS


# =====================================================================
# Bit-Decomposition Encoder
# =====================================================================

class TestEncoder:
    def test_bit_index(self):
        assert bit_index(0, 0, 8) == 0
        assert bit_index(5, 0, 8) == 5
        assert bit_index(0, 1, 8) == 8
        assert bit_index(7, 7, 8) == 63

    def test_omega_5(self):
        """ω = 5 = 0b101 → b[0][0] = b[2][0] = 1"""
        bits = decompose(5, 64, 8, 8)
        assert len(bits) == 8 and all(len(row) == 8 for row in bits)
        assert bits[0][0] == 1
        assert bits[2][0] == 1
        assert sum(sum(row) for row in bits) == 2

    def test_single_bit_at_index_5(self):
        """ω = 2^5 → 전역 인덱스 5 한 곳만 1: b[5 mod 8][5 div 8] = b[5][0]"""
        bits = decompose(1 << 5, 64, 8, 8)
        assert bits[5][0] == 1
        assert sum(sum(row) for row in bits) == 1

    def test_column_layout(self):
        # 비트 8은 열 1의 첫 행
        bits = decompose(1 << 8, 64, 8, 8)
        assert bits[0][1] == 1
        assert sum(sum(row) for row in bits) == 1

    def test_zero(self):
        bits = decompose(0, 64, 8, 8)
        assert all(b == 0 for row in bits for b in row)

    def test_max_value(self):
        bits = decompose((1 << 64) - 1, 64, 8, 8)
        assert all(b == 1 for row in bits for b in row)

    @pytest.mark.parametrize("omega", [0, 1, 5, 255, 256, 0xDEADBEEF, (1 << 64) - 1])
    def test_recompose(self, omega):
        assert recompose(decompose(omega, 64, 8, 8), 8, 8) == omega

    def test_rectangular(self):
        bits = decompose(0b110101, 6, 2, 3)
        assert len(bits) == 2 and len(bits[0]) == 3
        assert recompose(bits, 2, 3) == 0b110101

    def test_one_past_max(self):
        with pytest.raises(RangeViolation):
            decompose(1 << 64, 64, 8, 8)

    def test_negative(self):
        with pytest.raises(RangeViolation):
            decompose(-1, 64, 8, 8)

    def test_range_violation_is_value_error(self):
        with pytest.raises(ValueError):
            decompose(-1, 64, 8, 8)

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatch):
            decompose(5, 63, 8, 8)

    def test_non_integer(self):
        with pytest.raises(TypeError):
            decompose(5.0, 64, 8, 8)
        with pytest.raises(TypeError):
            decompose(True, 64, 8, 8)

    def test_column_values_omega_5(self):
        bits = decompose(5, 64, 8, 8)
        w = column_values(bits, 8, 8, CURVE_ORDER)
        assert w == [5, 0, 0, 0, 0, 0, 0, 0]

    def test_column_values_sum_to_omega(self):
        omega = 0x0123456789ABCDEF
        bits = decompose(omega, 64, 8, 8)
        w = column_values(bits, 8, 8, CURVE_ORDER)
        assert sum(w) == omega
        assert w[1] == omega & 0xFF00


# =====================================================================
# Fiat-Shamir Transcript
# =====================================================================

class TestTranscript:
    def _points(self, curve=BN128):
        G = curve.generator
        cm = curve.mul(G, 5)
        W = [curve.mul(G, 10 + k) for k in range(4)]
        T = [curve.mul(G, 20 + k) for k in range(4)]
        return cm, W, T

    def test_challenges_deterministic(self):
        cm, W, T = self._points()
        assert derive_challenges(BN128, cm, W, T) == derive_challenges(BN128, cm, W, T)

    def test_challenge_count_and_nonzero(self):
        cm, W, T = self._points()
        eps = derive_challenges(BN128, cm, W, T)
        assert len(eps) == 4
        assert all(int(e) != 0 for e in eps)

    def test_challenges_distinct(self):
        cm, W, T = self._points()
        eps = derive_challenges(BN128, cm, W, T)
        assert len({int(e) for e in eps}) == 4

    def test_commitment_changes_challenges(self):
        cm, W, T = self._points()
        other_cm = BN128.mul(BN128.generator, 6)
        assert derive_challenges(BN128, cm, W, T) != derive_challenges(BN128, other_cm, W, T)

    def test_order_matters(self):
        cm, W, T = self._points()
        assert derive_challenges(BN128, cm, W, T) != derive_challenges(BN128, cm, T, W)

    def test_incremental_matches_helper(self):
        cm, W, T = self._points()
        t = Transcript()
        t.append_point(cm)
        t.append_points(W)
        t.append_points(T)
        assert t.challenge_scalars(4) == derive_challenges(BN128, cm, W, T)

    def test_label_in_state(self):
        t = Transcript(label=b"custom")
        assert bytes(t.state) == b"custom"

    def test_toy_curve_challenges_in_range(self):
        cm, W, T = self._points(TOY_CURVE)
        eps = derive_challenges(TOY_CURVE, cm, W, T)
        assert all(0 < int(e) < TOY_CURVE.order for e in eps)

    def test_hash_to_scalar_retries_zero(self):
        # mod 2 → 0 이 나오면 재해싱, 결과는 항상 1
        assert hash_to_scalar(b"anything", 2) == 1
        assert hash_to_scalar(b"something else", 2) == 1

    def test_hash_to_scalar_exhaustion(self):
        with pytest.raises(ConfigurationError):
            hash_to_scalar(b"x", 1)
