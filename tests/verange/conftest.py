import sys
import os
import random

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkp.verange.crs import generate_crs
from zkp.verange.field import BN128, TOY_CURVE
from zkp.verange.prover import prove


# ── 테스트 상수 ──
J_DIM = 8
K_DIM = 8
N_BITS = J_DIM * K_DIM

TOY_J = 2
TOY_K = 2

EXAMPLE_OMEGA = 5


def _seeded_rand(seed, curve=BN128):
    """결정론적 랜덤 테이프: [1, n) 정수를 돌려주는 callable."""
    rng = random.Random(seed)
    return lambda: rng.randrange(1, curve.order)


@pytest.fixture
def seeded_rand():
    """시드 → 랜덤 테이프 팩토리."""
    return _seeded_rand


@pytest.fixture(scope="session")
def crs():
    """bn128 CRS (J=8)."""
    return generate_crs(J_DIM)


@pytest.fixture(scope="session")
def toy_crs():
    """테스트 곡선 CRS (J=2)."""
    return generate_crs(TOY_J, TOY_CURVE)


@pytest.fixture(scope="session")
def example_proof(crs):
    """ω=5 에 대한 유효한 증명."""
    return prove(EXAMPLE_OMEGA, crs, J_DIM, K_DIM)


@pytest.fixture(scope="session")
def other_proofs(crs):
    """집계 테스트용 유효한 증명 2개."""
    return [
        prove(123456789, crs, J_DIM, K_DIM),
        prove((1 << N_BITS) - 1, crs, J_DIM, K_DIM),
    ]
