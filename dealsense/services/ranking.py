"""Ranking service for combined-score ordering.

Combined score (sorting only, never persisted):
- 0.3 * trust
- 0.2 * popularity
- 0.5 * match (only when scored against a profile)

Without a profile the match weight contributes nothing, so trending lists
rank on trust + popularity alone.

Sorting is stable: equal combined scores keep their incoming order. Stores
return deals newest first (then by deal_id), which makes the final order
deterministic.
"""

from collections.abc import Callable, Sequence
from typing import TypeVar

from dealsense.schemas import Score

T = TypeVar("T")

TRUST_WEIGHT = 0.3
POPULARITY_WEIGHT = 0.2
MATCH_WEIGHT = 0.5


def clamp_unit(value: float) -> float:
    """Clamp a value to [0, 1]."""
    return max(0.0, min(1.0, value))


def create_score(popularity: float, trust: float, match: float | None = None) -> Score:
    """Build a Score with every component clamped to [0, 1]."""
    return Score(
        popularity=clamp_unit(popularity),
        trust=clamp_unit(trust),
        match=clamp_unit(match) if match is not None else None,
    )


def calculate_combined_score(score: Score) -> float:
    """Blend score components into a single sortable value."""
    combined = TRUST_WEIGHT * score.trust + POPULARITY_WEIGHT * score.popularity
    if score.match is not None:
        combined += MATCH_WEIGHT * score.match
    return round(combined, 4)


def rank_by_combined_score(
    items: Sequence[T],
    score_fn: Callable[[T], Score],
) -> list[T]:
    """Sort items best-first by combined score (stable)."""
    return sorted(
        items,
        key=lambda item: calculate_combined_score(score_fn(item)),
        reverse=True,
    )
