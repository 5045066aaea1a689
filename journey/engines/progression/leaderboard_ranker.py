"""
Leaderboard Ranker - orders learners by step count for the journey trail.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel


class TieBreak(str, Enum):
    """How learners with the same step count are ordered."""
    EARLIEST_COMPLETION = "earliest_completion"  # first to reach the step count leads
    INPUT_ORDER = "input_order"  # keep caller order


class LeaderboardEntry(BaseModel):
    """One learner's row on the leaderboard."""

    learner_id: str
    display_name: Optional[str] = None
    train_name: Optional[str] = None
    current_step: int = 0
    total_steps: int = 1
    percentage: float = 0.0
    reached_step_at: Optional[datetime] = None
    position: int = 0
    rank: int = 0


def _sort_key(tie_break: TieBreak):
    if tie_break == TieBreak.EARLIEST_COMPLETION:
        # Learners without a completion instant sort after those with one
        return lambda e: (
            -e.current_step,
            e.reached_step_at is None,
            e.reached_step_at.timestamp() if e.reached_step_at else 0.0,
        )
    return lambda e: -e.current_step


def rank(
    entries: Sequence[LeaderboardEntry],
    tie_break: TieBreak = TieBreak.EARLIEST_COMPLETION,
    limit: int = 0,
) -> List[LeaderboardEntry]:
    """
    Sort descending by current step. The sort is stable, so learners still
    tied after the tie-break keep their input order and repeated calls on the
    same input give the same order.

    Equal step counts share a rank (1, 2, 2, 4); position is the 1-based row.
    """
    ordered = sorted(entries, key=_sort_key(TieBreak(tie_break)))
    if limit > 0:
        ordered = ordered[:limit]

    ranked: List[LeaderboardEntry] = []
    previous_step: Optional[int] = None
    current_rank = 0
    for position, entry in enumerate(ordered, start=1):
        if entry.current_step != previous_step:
            current_rank = position
            previous_step = entry.current_step
        ranked.append(entry.model_copy(update={"position": position, "rank": current_rank}))
    return ranked
