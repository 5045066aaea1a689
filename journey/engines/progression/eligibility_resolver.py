"""
Topic Eligibility Resolver - per-learner status of every topic.

Statuses are recomputed on every evaluation; nothing here is persisted.
Priority order:

1. Module or topic unreleased, or topic malformed -> NOT_VISIBLE
2. Latest answer approved -> COMPLETED; pending or rejected -> SUBMITTED
3. Mini-questions outstanding (visible or still scheduled) -> MINI_QUESTIONS_REQUIRED
4. Otherwise -> AVAILABLE

Only the first AVAILABLE topic by (module number, topic number) is offered
as the target for submission.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from journey.engines.progression.mini_question_aggregator import (
    MiniQuestionAggregate,
    TopicMiniQuestionCounts,
)
from journey.engines.progression.release import malformed_reason
from journey.engines.progression.temporal_validator import release_date_ok
from journey.logging_config import get_logger
from journey.schemas.curriculum import (
    AnswerStatus,
    Curriculum,
    Module,
    Topic,
    TopicAnswer,
    as_utc,
)

logger = get_logger(__name__)


class TopicStatus(str, Enum):
    """Learner-facing status of a topic."""
    NOT_VISIBLE = "not_visible"
    MINI_QUESTIONS_REQUIRED = "mini_questions_required"  # locked by prerequisite
    AVAILABLE = "available"
    SUBMITTED = "submitted"
    COMPLETED = "completed"


class ResolvedTopic(BaseModel):
    """A topic annotated for one learner at one instant."""

    topic_id: str
    module_id: str
    module_number: int
    topic_number: Optional[int] = None
    title: str
    deadline: Optional[datetime] = None
    points: int = 0
    bonus_points: int = 0
    status: TopicStatus
    message: Optional[str] = None

    # Mini-question counts
    mini_questions_current: int = 0
    mini_questions_completed: int = 0
    mini_questions_total: int = 0
    mini_questions_completed_all: int = 0
    has_future_mini_questions: bool = False
    next_mini_question_release_at: Optional[datetime] = None

    # Answer
    answer_id: Optional[str] = None
    answer_status: Optional[AnswerStatus] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    submitted_late: bool = False

    # Flags
    deadline_passed: bool = False
    deadline_conflict: bool = False
    is_target: bool = False

    @property
    def is_visible(self) -> bool:
        return self.status != TopicStatus.NOT_VISIBLE

    @property
    def is_locked(self) -> bool:
        return self.status == TopicStatus.MINI_QUESTIONS_REQUIRED


def latest_answers_by_topic(topic_answers: Iterable[TopicAnswer]) -> Dict[str, TopicAnswer]:
    """Most recent answer per topic id (latest submitted_at wins)."""
    latest: Dict[str, TopicAnswer] = {}
    for answer in topic_answers:
        current = latest.get(answer.topic_id)
        if current is None or answer.submitted_at >= current.submitted_at:
            latest[answer.topic_id] = answer
    return latest


def unlock_message(counts: TopicMiniQuestionCounts) -> str:
    """Tell the learner how many activities stand between them and the assignment."""
    remaining = counts.remaining
    noun = "activity" if remaining == 1 else "activities"
    message = f"Complete {remaining} more {noun} to unlock"
    if counts.has_future_mini_questions:
        message += (
            f" ({counts.future_count} not yet released;"
            " more activities will become available soon)"
        )
    return message


def _has_deadline_conflict(topic: Topic) -> bool:
    return any(
        not release_date_ok(topic.deadline, mq.release_at)
        for _, mq in topic.iter_mini_questions()
    )


def resolve_topic(
    module: Module,
    topic: Topic,
    counts: TopicMiniQuestionCounts,
    answer: Optional[TopicAnswer],
    now: datetime,
) -> ResolvedTopic:
    """Resolve a single topic. Never raises for data-quality problems."""
    now = as_utc(now)
    resolved = ResolvedTopic(
        topic_id=topic.id,
        module_id=module.id,
        module_number=module.number,
        topic_number=topic.number,
        title=topic.title,
        deadline=topic.deadline,
        points=topic.points,
        bonus_points=topic.bonus_points,
        status=TopicStatus.NOT_VISIBLE,
        deadline_passed=topic.deadline is not None and now > topic.deadline,
        deadline_conflict=_has_deadline_conflict(topic),
    )

    reason = malformed_reason(module, topic)
    if reason is not None:
        if topic.is_released:
            logger.warning(
                "Skipping malformed topic",
                extra={"topic_id": topic.id, "module_id": module.id, "reason": reason},
            )
        return resolved
    if not (module.is_released and topic.is_released):
        return resolved

    resolved.mini_questions_current = counts.total_current
    resolved.mini_questions_completed = counts.completed_current
    resolved.mini_questions_total = counts.total_all
    resolved.mini_questions_completed_all = counts.completed_all
    resolved.has_future_mini_questions = counts.has_future_mini_questions
    resolved.next_mini_question_release_at = counts.next_release_at

    if answer is not None:
        resolved.answer_id = answer.id
        resolved.answer_status = answer.status
        resolved.submitted_at = answer.submitted_at
        resolved.reviewed_at = answer.reviewed_at
        resolved.submitted_late = (
            topic.deadline is not None and answer.submitted_at > topic.deadline
        )
        if answer.status == AnswerStatus.APPROVED:
            resolved.status = TopicStatus.COMPLETED
        else:
            resolved.status = TopicStatus.SUBMITTED
            resolved.message = (
                "Your answer is pending review"
                if answer.status == AnswerStatus.PENDING
                else "Your answer was not approved"
            )
        return resolved

    if counts.total_all > 0 and counts.completed_all < counts.total_all:
        resolved.status = TopicStatus.MINI_QUESTIONS_REQUIRED
        resolved.message = unlock_message(counts)
        return resolved

    resolved.status = TopicStatus.AVAILABLE
    return resolved


def resolve_topics(
    curriculum: Curriculum,
    aggregate: MiniQuestionAggregate,
    topic_answers: Iterable[TopicAnswer],
    now: datetime,
) -> List[ResolvedTopic]:
    """
    Resolve every topic in ascending (module number, topic number) order and
    mark the single target topic.

    Not-visible topics are included so callers can tell them apart from
    missing ones; learner-facing listings should filter on is_visible.
    """
    if curriculum is None:
        raise ValueError("curriculum snapshot is required")
    now = as_utc(now)
    latest = latest_answers_by_topic(topic_answers)

    resolved: List[ResolvedTopic] = []
    for module in curriculum.ordered_modules():
        topics = sorted(
            module.topics,
            key=lambda t: (t.number is None, t.number or 0),
        )
        for topic in topics:
            resolved.append(
                resolve_topic(
                    module,
                    topic,
                    aggregate.counts_for(topic.id),
                    latest.get(topic.id),
                    now,
                )
            )

    target = select_target(resolved)
    if target is not None:
        target.is_target = True
    return resolved


def select_target(resolved: Iterable[ResolvedTopic]) -> Optional[ResolvedTopic]:
    """First AVAILABLE topic by (module number, topic number), or None."""
    available = [r for r in resolved if r.status == TopicStatus.AVAILABLE]
    if not available:
        return None
    return min(available, key=lambda r: (r.module_number, r.topic_number))
