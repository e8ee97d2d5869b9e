"""Fidelity score: a 0-100 completeness heuristic for a lead."""

from typing import Callable, List, Sequence, Tuple

from leadscan.core.models import NOT_AVAILABLE, Business

BASE_SCORE = 40
MAX_SCORE = 100

Bonus = Tuple[Callable[[Business], bool], int]


def _present(value: str) -> bool:
    return value != NOT_AVAILABLE


FIDELITY_BONUSES: Tuple[Bonus, ...] = (
    (lambda b: _present(b.email) and "@" in b.email, 20),
    (lambda b: _present(b.social_footprint.linkedin) and "linkedin.com" in b.social_footprint.linkedin, 15),
    (lambda b: _present(b.leader_name) and len(b.leader_name) > 3, 15),
    (lambda b: _present(b.phone) and len(b.phone) > 5, 10),
)


def fidelity_score(business: Business, bonuses: Sequence[Bonus] = FIDELITY_BONUSES) -> int:
    score = BASE_SCORE
    for condition, points in bonuses:
        if condition(business):
            score += points
    return min(score, MAX_SCORE)


def score_businesses(businesses: Sequence[Business]) -> List[Tuple[Business, int]]:
    return [(business, fidelity_score(business)) for business in businesses]
