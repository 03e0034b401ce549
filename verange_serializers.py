"""
VeRange 데이터 직렬화/역직렬화 헬퍼
====================================

CRS, Proof, AggregateProof를 JSON wire 포맷으로 변환한다.
온체인 검증 컨트랙트와 TinyDB 저장소가 같은 포맷을 사용한다.

**포맷**:
  - 스칼라/좌표: 0x 접두사 빅엔디안 16진수 문자열 ("0x0"은 0)
  - 점: {"x": hex, "y": hex}, 항등원은 {"x": "0x0", "y": "0x0"}
  - CRS: {"Q": 점, "H": [점, ...]}   (G는 곡선 표준 생성자이므로 전송하지 않음)
  - Proof: {"commitmentCmOmega", "W_points", "T_points", "R_point",
            "S_point", "eta1", "eta2", "vMatrix"}
  - AggregateProof: {"aggregatedCmOmega", "W_points", "T_points", "R_point",
                     "S_point", "eta1", "eta2", "v_prime_scalars",
                     "H_exponents", "proofCount"}

역직렬화 실패(키 누락, 잘못된 16진수, 곡선 밖의 점, 범위 밖 스칼라)는
모두 EncodingError로 보고된다.
"""

from zkp.verange.aggregator import AggregateProof
from zkp.verange.crs import CRS
from zkp.verange.errors import EncodingError
from zkp.verange.field import BN128
from zkp.verange.prover import Proof


# ─── 16진수 ───

def to_hex(value):
    """int/Fr → "0x..." """
    return "0x" + format(int(value), "x")


def from_hex(s):
    """"0x..." → int"""
    if not isinstance(s, str) or not s[:2].lower() == "0x":
        raise EncodingError("0x 접두사 16진수 문자열이 필요합니다", {"value": repr(s)})
    try:
        value = int(s[2:], 16)
    except ValueError as exc:
        raise EncodingError("16진수를 해석할 수 없습니다", {"value": s}) from exc
    if value < 0:
        raise EncodingError("음수는 허용되지 않습니다", {"value": s})
    return value


# ─── 스칼라 ───

def serialize_scalar(val):
    return to_hex(val)


def deserialize_scalar(s, curve=BN128):
    value = from_hex(s)
    if value >= curve.order:
        raise EncodingError("스칼라가 필드 위수 이상입니다", {"value": s})
    return curve.Fr(value)


def serialize_scalar_list(lst):
    return [to_hex(v) for v in lst]


def deserialize_scalar_list(data, curve=BN128):
    return tuple(deserialize_scalar(s, curve) for s in _require_list(data))


# ─── 점 ───

def serialize_point(point, curve=BN128):
    """점 → {"x": hex, "y": hex}"""
    x, y = curve.to_affine(point)
    return {"x": to_hex(x), "y": to_hex(y)}


def deserialize_point(data, curve=BN128):
    """{"x": hex, "y": hex} → 점 (곡선 위 검증 포함)"""
    if not isinstance(data, dict) or "x" not in data or "y" not in data:
        raise EncodingError("점은 {x, y} 객체여야 합니다", {"value": repr(data)})
    return curve.from_affine(from_hex(data["x"]), from_hex(data["y"]))


def serialize_point_list(points, curve=BN128):
    return [serialize_point(p, curve) for p in points]


def deserialize_point_list(data, curve=BN128):
    return tuple(deserialize_point(p, curve) for p in _require_list(data))


def _require_list(data):
    if not isinstance(data, list):
        raise EncodingError("배열이 필요합니다", {"value": repr(data)})
    return data


def _field(data, key):
    if not isinstance(data, dict):
        raise EncodingError("JSON 객체가 필요합니다", {"value": repr(data)})
    try:
        return data[key]
    except KeyError:
        raise EncodingError("필수 필드가 없습니다", {"field": key}) from None


# ─── CRS ───

def serialize_crs(crs):
    """CRS → dict"""
    return {
        "Q": serialize_point(crs.Q, crs.curve),
        "H": serialize_point_list(crs.H, crs.curve),
    }


def deserialize_crs(data, curve=BN128):
    """dict → CRS (불변 조건 재검증)"""
    Q = deserialize_point(_field(data, "Q"), curve)
    H = deserialize_point_list(_field(data, "H"), curve)
    return CRS(curve, curve.generator, Q, H).validate()


# ─── Proof ───

def serialize_proof(proof, curve=BN128):
    """Proof → dict"""
    return {
        "commitmentCmOmega": serialize_point(proof.cm, curve),
        "W_points": serialize_point_list(proof.W, curve),
        "T_points": serialize_point_list(proof.T, curve),
        "R_point": serialize_point(proof.R, curve),
        "S_point": serialize_point(proof.S, curve),
        "eta1": serialize_scalar(proof.eta1),
        "eta2": serialize_scalar(proof.eta2),
        "vMatrix": serialize_scalar_list(proof.v),
    }


def deserialize_proof(data, curve=BN128):
    """dict → Proof"""
    return Proof(
        cm=deserialize_point(_field(data, "commitmentCmOmega"), curve),
        W=deserialize_point_list(_field(data, "W_points"), curve),
        T=deserialize_point_list(_field(data, "T_points"), curve),
        R=deserialize_point(_field(data, "R_point"), curve),
        S=deserialize_point(_field(data, "S_point"), curve),
        eta1=deserialize_scalar(_field(data, "eta1"), curve),
        eta2=deserialize_scalar(_field(data, "eta2"), curve),
        v=deserialize_scalar_list(_field(data, "vMatrix"), curve),
    )


# ─── AggregateProof ───

def serialize_aggregate(agg, curve=BN128):
    """AggregateProof → dict"""
    return {
        "aggregatedCmOmega": serialize_point(agg.aggregated_cm, curve),
        "W_points": serialize_point_list(agg.W, curve),
        "T_points": serialize_point_list(agg.T, curve),
        "R_point": serialize_point(agg.R, curve),
        "S_point": serialize_point(agg.S, curve),
        "eta1": serialize_scalar(agg.eta1),
        "eta2": serialize_scalar(agg.eta2),
        "v_prime_scalars": serialize_scalar_list(agg.v_prime),
        "H_exponents": serialize_scalar_list(agg.h_exponents),
        "proofCount": agg.count,
    }


def deserialize_aggregate(data, curve=BN128):
    """dict → AggregateProof"""
    count = _field(data, "proofCount")
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise EncodingError("proofCount는 양의 정수여야 합니다", {"value": repr(count)})
    return AggregateProof(
        aggregated_cm=deserialize_point(_field(data, "aggregatedCmOmega"), curve),
        W=deserialize_point_list(_field(data, "W_points"), curve),
        T=deserialize_point_list(_field(data, "T_points"), curve),
        R=deserialize_point(_field(data, "R_point"), curve),
        S=deserialize_point(_field(data, "S_point"), curve),
        eta1=deserialize_scalar(_field(data, "eta1"), curve),
        eta2=deserialize_scalar(_field(data, "eta2"), curve),
        v_prime=deserialize_scalar_list(_field(data, "v_prime_scalars"), curve),
        h_exponents=deserialize_scalar_list(_field(data, "H_exponents"), curve),
        count=count,
    )


# ─── 표시용 헬퍼 ───

def _shorten(s, limit=8):
    if len(s) <= limit:
        return s
    return s[:4] + "..." + s[-4:]


def point_short(point, curve=BN128):
    """점 → 축약 문자열 (응답 요약용)"""
    if curve.is_identity(point):
        return "∞"
    x, y = curve.to_affine(point)
    return f"({_shorten(str(x))}, {_shorten(str(y))})"


def scalar_short(val):
    """스칼라 → 축약 문자열"""
    if val is None:
        return "None"
    return _shorten(str(int(val)), limit=10)
