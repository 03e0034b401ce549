"""
VeRange Prover Round 2: Fiat-Shamir 챌린지
==========================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: eps[0..K)  (Fiat-Shamir)    │
  │                                                 │
  │  입력:  트랜스크립트 (label ‖ Cm ‖ W ‖ T)         │
  │  출력:  K개의 0이 아닌 챌린지 스칼라              │
  └─────────────────────────────────────────────────┘

eps[k]는 열 k의 커밋먼트 W[k], T[k]를 결합하는 가중치이다.
Round 1의 커밋먼트가 모두 정해진 뒤에 유도되므로 Prover는
챌린지를 미리 알고 커밋먼트를 조작할 수 없다.

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""


def execute(state):
    """Round 2를 실행한다.

    Args:
        state: ProverState — transcript를 읽고 eps를 기록한다.
    """
    state.eps = state.transcript.challenge_scalars(state.K)
