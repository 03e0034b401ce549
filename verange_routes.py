"""
VeRange Flask Blueprint — JSON 엔드포인트
==========================================

투표/등록 서비스가 호출하는 얇은 HTTP 계층.
CRS와 생성된 증명은 TinyDB에 wire 포맷 그대로 저장된다.

  POST /verange/setup             CRS 생성 및 저장
  GET  /verange/setup             저장된 CRS 조회
  POST /verange/prove             증명 생성 및 저장
  POST /verange/verify            단일 증명 검증
  POST /verange/aggregate         증명 집계 및 저장
  POST /verange/verify-aggregate  집계 증명 검증
  POST /verange/clear             저장소 초기화
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from tinydb import Query

from zkp.verange.aggregator import aggregate, check_aggregate_equations
from zkp.verange.crs import generate_crs
from zkp.verange.errors import EncodingError, VeRangeError
from zkp.verange.field import BN128
from zkp.verange.prover import prove
from zkp.verange.verifier import check_equations

from verange_serializers import (
    serialize_crs, deserialize_crs,
    serialize_proof, deserialize_proof,
    serialize_aggregate, deserialize_aggregate,
    from_hex, point_short, scalar_short,
)

logger = logging.getLogger(__name__)

verange_bp = Blueprint("verange", __name__, url_prefix="/verange")

DATA = Query()

# DB는 app.py에서 주입
DB = None


def init_verange_bp(db):
    """app.py에서 TinyDB 인스턴스를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def _state():
    return DB.table("verange")


def _proofs():
    return DB.table("verange_proofs")


def _aggregates():
    return DB.table("verange_aggregates")


def db_get(key):
    """키로 데이터를 조회한다."""
    result = _state().search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """키로 데이터를 저장한다."""
    _state().upsert({"type": key, "data": data}, DATA.type == key)


def _load_crs():
    crs_raw = db_get("verange.crs.raw")
    if crs_raw is None:
        return None
    return deserialize_crs(crs_raw, BN128)


def _request_json():
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise EncodingError("요청 본문은 JSON 객체여야 합니다")
    return payload


def _int_param(payload, key, default):
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError("정수 파라미터가 필요합니다", {"field": key})
    return value


def _no_crs():
    return jsonify({"error": "NoCRS", "message": "CRS가 아직 생성되지 않았습니다"}), 409


def _lookup(table, doc_id, name):
    if isinstance(doc_id, bool) or not isinstance(doc_id, int):
        raise EncodingError(f"{name} id는 정수여야 합니다", {"id": repr(doc_id)})
    doc = table.get(doc_id=doc_id)
    if doc is None:
        raise EncodingError(f"{name}를 찾을 수 없습니다", {"id": doc_id})
    return doc["data"]


@verange_bp.errorhandler(VeRangeError)
def handle_verange_error(exc):
    logger.info("rejected %s %s: %s", request.method, request.path, exc.message)
    return jsonify(exc.to_dict()), 400


# ──────────────────────────────────────────────────────────────
# Setup
# ──────────────────────────────────────────────────────────────

@verange_bp.route("/setup", methods=["GET"])
def setup_get():
    """저장된 CRS를 반환한다."""
    crs_raw = db_get("verange.crs.raw")
    if crs_raw is None:
        return _no_crs()
    return jsonify({"crs": crs_raw, "info": db_get("verange.crs.info")})


@verange_bp.route("/setup", methods=["POST"])
def setup_post():
    """CRS를 생성한다 (투명 설정, 결정론적)."""
    payload = _request_json()
    J = _int_param(payload, "J", current_app.config["VERANGE_J"])

    crs = generate_crs(J, BN128)
    crs_raw = serialize_crs(crs)
    db_set("verange.crs.raw", crs_raw)

    # 표시용 정보
    crs_info = {
        "J": crs.J,
        "Q": point_short(crs.Q),
        "H": [point_short(h) for h in crs.H],
    }
    db_set("verange.crs.info", crs_info)

    # CRS 변경 시 하위 데이터 클리어
    _proofs().truncate()
    _aggregates().truncate()

    return jsonify({"crs": crs_raw, "info": crs_info})


# ──────────────────────────────────────────────────────────────
# Proving / Verifying
# ──────────────────────────────────────────────────────────────

@verange_bp.route("/prove", methods=["POST"])
def prove_post():
    """ω에 대한 범위 증명을 생성하고 저장한다."""
    crs = _load_crs()
    if crs is None:
        return _no_crs()

    payload = _request_json()
    if "omega" not in payload:
        raise EncodingError("omega가 필요합니다", {"field": "omega"})
    omega = payload["omega"]
    if isinstance(omega, str):
        omega = from_hex(omega)
    if isinstance(omega, bool) or not isinstance(omega, int):
        raise EncodingError("omega는 정수 또는 0x 16진수여야 합니다", {"field": "omega"})
    K = _int_param(payload, "K", current_app.config["VERANGE_K"])

    proof = prove(omega, crs, crs.J, K)
    proof_raw = serialize_proof(proof)
    proof_id = _proofs().insert({"J": crs.J, "K": K, "data": proof_raw})

    # 표시용 요약
    proof_info = {
        "Cm": point_short(proof.cm),
        "R": point_short(proof.R),
        "S": point_short(proof.S),
        "eta1": scalar_short(proof.eta1),
        "eta2": scalar_short(proof.eta2),
    }

    return jsonify({"id": proof_id, "proof": proof_raw, "info": proof_info})


@verange_bp.route("/verify", methods=["POST"])
def verify_post():
    """단일 증명을 검증한다. body: {proof} 또는 {proof_id}"""
    crs = _load_crs()
    if crs is None:
        return _no_crs()

    payload = _request_json()
    if "proof" in payload:
        proof_raw = payload["proof"]
    else:
        proof_raw = _lookup(_proofs(), payload.get("proof_id"), "proof")

    proof = deserialize_proof(proof_raw)
    checks = check_equations(proof, crs)
    return jsonify({"valid": all(checks.values()), "checks": checks})


# ──────────────────────────────────────────────────────────────
# Aggregation
# ──────────────────────────────────────────────────────────────

@verange_bp.route("/aggregate", methods=["POST"])
def aggregate_post():
    """증명들을 집계한다. body: {proof_ids: [...]} 또는 {proofs: [...]}"""
    crs = _load_crs()
    if crs is None:
        return _no_crs()

    payload = _request_json()
    if "proofs" in payload:
        raws = payload["proofs"]
    else:
        ids = payload.get("proof_ids", [])
        if not isinstance(ids, list):
            raise EncodingError("proof_ids는 배열이어야 합니다")
        raws = [_lookup(_proofs(), doc_id, "proof") for doc_id in ids]
    if not isinstance(raws, list):
        raise EncodingError("proofs는 배열이어야 합니다")

    proofs = [deserialize_proof(raw) for raw in raws]
    J = crs.J
    K = _int_param(payload, "K", len(proofs[0].W) if proofs else current_app.config["VERANGE_K"])

    agg = aggregate(proofs, crs, J, K)
    agg_raw = serialize_aggregate(agg)
    agg_id = _aggregates().insert({"J": J, "K": K, "data": agg_raw})

    return jsonify({"id": agg_id, "aggregate": agg_raw})


@verange_bp.route("/verify-aggregate", methods=["POST"])
def verify_aggregate_post():
    """집계 증명을 검증한다. body: {aggregate} 또는 {aggregate_id}"""
    crs = _load_crs()
    if crs is None:
        return _no_crs()

    payload = _request_json()
    if "aggregate" in payload:
        agg_raw = payload["aggregate"]
    else:
        agg_raw = _lookup(_aggregates(), payload.get("aggregate_id"), "aggregate")

    agg = deserialize_aggregate(agg_raw)
    checks = check_aggregate_equations(agg, crs)
    return jsonify({"valid": all(checks.values()), "checks": checks})


@verange_bp.route("/clear", methods=["POST"])
def clear_post():
    """CRS와 저장된 증명을 모두 삭제한다."""
    _state().truncate()
    _proofs().truncate()
    _aggregates().truncate()
    return jsonify({"cleared": True})
