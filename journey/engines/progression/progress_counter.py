"""
Progress Counter - a learner's step count and the denominator used for
percentage and leaderboard displays.

The denominator is the number of topics visible right now; it grows as
content is released, so it is recomputed on every read.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel

from journey.engines.progression.eligibility_resolver import ResolvedTopic, TopicStatus
from journey.schemas.curriculum import AnswerStatus, TopicAnswer


class LearnerProgress(BaseModel):
    """Step counters for one learner."""

    learner_id: str
    current_step: int = 0
    total_steps: int = 1  # never below 1, safe to divide by
    released_topics: int = 0
    steps_remaining: int = 0
    percentage: float = 0.0
    reached_step_at: Optional[datetime] = None


class CohortOverview(BaseModel):
    """Admin dashboard statistics for a group of learners."""

    total_learners: int = 0
    total_answers: int = 0
    pending_answers: int = 0
    average_progress: float = 0.0


def progress_percentage(current_step: int, released_topics: int) -> float:
    """Percentage of released topics completed; 0 when nothing is released."""
    if released_topics <= 0:
        return 0.0
    return round(min(current_step / released_topics, 1.0) * 100, 1)


def compute_progress(learner_id: str, resolved_topics: Iterable[ResolvedTopic]) -> LearnerProgress:
    """
    Summarize resolved topics into step counters.

    Only approved answers count as steps; answers pending review do not.
    """
    released = 0
    completed = 0
    reached_at: Optional[datetime] = None
    for topic in resolved_topics:
        if not topic.is_visible:
            continue
        released += 1
        if topic.status != TopicStatus.COMPLETED:
            continue
        completed += 1
        stamp = topic.reviewed_at or topic.submitted_at
        if stamp is not None and (reached_at is None or stamp > reached_at):
            reached_at = stamp

    return LearnerProgress(
        learner_id=learner_id,
        current_step=completed,
        total_steps=max(released, 1),
        released_topics=released,
        steps_remaining=max(released - completed, 0),
        percentage=progress_percentage(completed, released),
        reached_step_at=reached_at,
    )


def summarize_cohort(
    progress: List[LearnerProgress],
    topic_answers: Iterable[TopicAnswer] = (),
) -> CohortOverview:
    """Average progress across learners, plus answer counts for review queues."""
    answers = list(topic_answers)
    pending = sum(1 for a in answers if a.status == AnswerStatus.PENDING)
    if not progress:
        return CohortOverview(total_answers=len(answers), pending_answers=pending)

    average = sum(p.current_step / p.total_steps for p in progress) / len(progress) * 100
    return CohortOverview(
        total_learners=len(progress),
        total_answers=len(answers),
        pending_answers=pending,
        average_progress=round(average, 1),
    )
