"""
Mini-Question Aggregator - flattens the curriculum tree into the
self-learning activities a learner can currently see, plus per-topic counts
of what is visible now and what is still scheduled.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel

from journey.engines.progression.release import (
    is_mini_question_current,
    is_mini_question_future,
    is_topic_visible,
)
from journey.schemas.curriculum import Curriculum, MiniAnswer, as_utc


class MiniQuestionView(BaseModel):
    """A currently visible mini-question with a back-reference to its topic."""

    id: str
    title: str
    question: str
    description: Optional[str] = None
    resource_url: Optional[str] = None
    release_at: Optional[datetime] = None
    order_index: int = 0
    section_index: int
    section_title: str
    topic_id: str
    topic_number: int
    topic_title: str
    module_number: int
    has_answer: bool = False


class TopicMiniQuestionCounts(BaseModel):
    """Current and scheduled mini-question counts for one topic."""

    total_current: int = 0
    completed_current: int = 0
    future_count: int = 0
    completed_all: int = 0
    next_release_at: Optional[datetime] = None

    @property
    def total_all(self) -> int:
        return self.total_current + self.future_count

    @property
    def has_future_mini_questions(self) -> bool:
        return self.future_count > 0

    @property
    def remaining(self) -> int:
        return max(self.total_all - self.completed_all, 0)


class MiniQuestionAggregate(BaseModel):
    """Everything the resolver needs to know about mini-questions."""

    views: List[MiniQuestionView] = []
    counts: Dict[str, TopicMiniQuestionCounts] = {}

    def counts_for(self, topic_id: str) -> TopicMiniQuestionCounts:
        return self.counts.get(topic_id) or TopicMiniQuestionCounts()

    def views_for(self, topic_id: str) -> List[MiniQuestionView]:
        return [v for v in self.views if v.topic_id == topic_id]

    def is_visible(self, mini_question_id: str) -> bool:
        return any(v.id == mini_question_id for v in self.views)


def answered_ids(mini_answers: Iterable[MiniAnswer]) -> Set[str]:
    """Ids of mini-questions that have at least one answer."""
    return {a.mini_question_id for a in mini_answers}


def aggregate(
    curriculum: Curriculum,
    now: datetime,
    mini_answers: Iterable[MiniAnswer] = (),
) -> MiniQuestionAggregate:
    """
    Walk released modules and topics and collect their mini-questions.

    A mini-question is listed only when it is released AND its release
    instant has passed. Mini-questions whose instant is still ahead are
    counted as future regardless of their flag, so a topic stays gated until
    everything ever scheduled under it has been answered.
    """
    if curriculum is None:
        raise ValueError("curriculum snapshot is required")
    now = as_utc(now)
    answered = answered_ids(mini_answers)

    views: List[MiniQuestionView] = []
    counts: Dict[str, TopicMiniQuestionCounts] = {}

    for module in curriculum.ordered_modules():
        if not module.is_released:
            continue
        for topic in sorted(module.topics, key=lambda t: t.number or 0):
            if not is_topic_visible(module, topic):
                continue
            topic_counts = TopicMiniQuestionCounts()
            for index, mini_question in topic.iter_mini_questions():
                has_answer = mini_question.id in answered
                if is_mini_question_current(mini_question, now):
                    topic_counts.total_current += 1
                    if has_answer:
                        topic_counts.completed_current += 1
                        topic_counts.completed_all += 1
                    views.append(
                        MiniQuestionView(
                            id=mini_question.id,
                            title=mini_question.title,
                            question=mini_question.question,
                            description=mini_question.description,
                            resource_url=mini_question.resource_url,
                            release_at=mini_question.release_at,
                            order_index=mini_question.order_index,
                            section_index=index,
                            section_title=topic.content_sections[index].title,
                            topic_id=topic.id,
                            topic_number=topic.number,
                            topic_title=topic.title,
                            module_number=module.number,
                            has_answer=has_answer,
                        )
                    )
                elif is_mini_question_future(mini_question, now):
                    topic_counts.future_count += 1
                    if has_answer:
                        topic_counts.completed_all += 1
                    if (
                        topic_counts.next_release_at is None
                        or mini_question.release_at < topic_counts.next_release_at
                    ):
                        topic_counts.next_release_at = mini_question.release_at
            counts[topic.id] = topic_counts

    return MiniQuestionAggregate(views=views, counts=counts)
