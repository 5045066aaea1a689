"""
Journey evaluation - runs the progression pipeline for one learner and
builds the leaderboard and cohort overview across learners.

Pipeline: aggregate mini-questions -> resolve topics -> count progress.
Everything is a pure function of (curriculum, answers, now).
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set

from pydantic import BaseModel

from journey.engines.progression.eligibility_resolver import (
    ResolvedTopic,
    resolve_topics,
)
from journey.engines.progression.leaderboard_ranker import (
    LeaderboardEntry,
    TieBreak,
    rank,
)
from journey.engines.progression.mini_question_aggregator import (
    MiniQuestionView,
    aggregate,
)
from journey.engines.progression.progress_counter import (
    CohortOverview,
    LearnerProgress,
    compute_progress,
    summarize_cohort,
)
from journey.logging_config import get_logger
from journey.schemas.curriculum import (
    Curriculum,
    LearnerRecord,
    MiniAnswer,
    TopicAnswer,
    as_utc,
)

logger = get_logger(__name__)


class LearnerJourney(BaseModel):
    """Everything the learner view renders for one request."""

    learner_id: str
    evaluated_at: datetime
    topics: List[ResolvedTopic] = []
    target_topic_id: Optional[str] = None
    progress: LearnerProgress
    mini_questions: List[MiniQuestionView] = []
    orphaned_answer_ids: List[str] = []

    @property
    def target_topic(self) -> Optional[ResolvedTopic]:
        for topic in self.topics:
            if topic.topic_id == self.target_topic_id:
                return topic
        return None

    def topic(self, topic_id: str) -> Optional[ResolvedTopic]:
        for topic in self.topics:
            if topic.topic_id == topic_id:
                return topic
        return None


def _known_ids(curriculum: Curriculum):
    topic_ids: Set[str] = set()
    mini_question_ids: Set[str] = set()
    for module in curriculum.modules:
        for topic in module.topics:
            topic_ids.add(topic.id)
            for _, mini_question in topic.iter_mini_questions():
                mini_question_ids.add(mini_question.id)
    return topic_ids, mini_question_ids


def evaluate_journey(
    curriculum: Curriculum,
    learner_id: str,
    topic_answers: Iterable[TopicAnswer] = (),
    mini_answers: Iterable[MiniAnswer] = (),
    now: Optional[datetime] = None,
) -> LearnerJourney:
    """
    Evaluate one learner against a curriculum snapshot.

    Answers belonging to other learners are ignored. Answers pointing at
    topics or mini-questions missing from the snapshot are reported as
    orphaned and left out of every count.
    """
    if curriculum is None:
        raise ValueError("curriculum snapshot is required")
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)

    topic_ids, mini_question_ids = _known_ids(curriculum)
    orphaned: List[str] = []

    own_topic_answers: List[TopicAnswer] = []
    for answer in topic_answers:
        if answer.learner_id != learner_id:
            continue
        if answer.topic_id not in topic_ids:
            orphaned.append(answer.id)
            continue
        own_topic_answers.append(answer)

    own_mini_answers: List[MiniAnswer] = []
    for answer in mini_answers:
        if answer.learner_id != learner_id:
            continue
        if answer.mini_question_id not in mini_question_ids:
            orphaned.append(answer.id)
            continue
        own_mini_answers.append(answer)

    if orphaned:
        logger.info(
            "Ignoring orphaned answers",
            extra={"learner_id": learner_id, "orphaned_count": len(orphaned)},
        )

    mini = aggregate(curriculum, now, own_mini_answers)
    resolved = resolve_topics(curriculum, mini, own_topic_answers, now)
    progress = compute_progress(learner_id, resolved)
    target = next((r for r in resolved if r.is_target), None)

    return LearnerJourney(
        learner_id=learner_id,
        evaluated_at=now,
        topics=[r for r in resolved if r.is_visible],
        target_topic_id=target.topic_id if target else None,
        progress=progress,
        mini_questions=mini.views,
        orphaned_answer_ids=orphaned,
    )


def build_leaderboard(
    curriculum: Curriculum,
    learners: Iterable[LearnerRecord],
    now: Optional[datetime] = None,
    tie_break: TieBreak = TieBreak.EARLIEST_COMPLETION,
    limit: int = 0,
) -> List[LeaderboardEntry]:
    """Evaluate each learner and rank them by step count."""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    entries: List[LeaderboardEntry] = []
    for learner in learners:
        journey = evaluate_journey(
            curriculum,
            learner.learner_id,
            learner.topic_answers,
            learner.mini_answers,
            now,
        )
        entries.append(
            LeaderboardEntry(
                learner_id=learner.learner_id,
                display_name=learner.display_name,
                train_name=learner.train_name,
                current_step=journey.progress.current_step,
                total_steps=journey.progress.total_steps,
                percentage=journey.progress.percentage,
                reached_step_at=journey.progress.reached_step_at,
            )
        )
    return rank(entries, tie_break=tie_break, limit=limit)


def build_overview(
    curriculum: Curriculum,
    learners: Iterable[LearnerRecord],
    now: Optional[datetime] = None,
) -> CohortOverview:
    """
    Cohort statistics for the admin dashboard.

    Answer counts use the same answers the journeys do: other learners'
    answers and orphaned answers are not counted.
    """
    if curriculum is None:
        raise ValueError("curriculum snapshot is required")
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    topic_ids, _ = _known_ids(curriculum)

    progress: List[LearnerProgress] = []
    counted: List[TopicAnswer] = []
    for learner in learners:
        journey = evaluate_journey(
            curriculum,
            learner.learner_id,
            learner.topic_answers,
            learner.mini_answers,
            now,
        )
        progress.append(journey.progress)
        counted.extend(
            a
            for a in learner.topic_answers
            if a.learner_id == learner.learner_id and a.topic_id in topic_ids
        )
    return summarize_cohort(progress, counted)
