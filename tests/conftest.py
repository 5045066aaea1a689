"""
Pytest fixtures for journey tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import pytest

from journey.schemas.curriculum import (
    AnswerStatus,
    ContentSection,
    Curriculum,
    MiniAnswer,
    MiniQuestion,
    Module,
    Topic,
    TopicAnswer,
)


NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant (mid-June 2025, noon UTC)."""
    return NOW


@pytest.fixture
def make_mini_question() -> Callable[..., MiniQuestion]:
    """Build a mini-question; released and due a day before NOW by default."""

    def _make(
        id: str,
        release_at: Optional[datetime] = NOW - timedelta(days=1),
        is_released: bool = True,
        title: Optional[str] = None,
    ) -> MiniQuestion:
        return MiniQuestion(
            id=id,
            title=title or f"Activity {id}",
            question=f"Share a link about {id}",
            release_at=release_at,
            is_released=is_released,
        )

    return _make


@pytest.fixture
def make_topic() -> Callable[..., Topic]:
    """Build a topic; each mini-question gets its own content section."""

    def _make(
        id: str,
        number: Optional[int],
        mini_questions: Optional[List[MiniQuestion]] = None,
        is_released: bool = True,
        deadline: Optional[datetime] = NOW + timedelta(days=30),
        module_id: Optional[str] = None,
    ) -> Topic:
        sections = [
            ContentSection(id=f"{id}-section-{i}", title=f"Section {i}", mini_questions=[mq])
            for i, mq in enumerate(mini_questions or [])
        ]
        return Topic(
            id=id,
            module_id=module_id,
            number=number,
            title=f"Topic {id}",
            deadline=deadline,
            points=10,
            is_released=is_released,
            content_sections=sections,
        )

    return _make


@pytest.fixture
def make_module() -> Callable[..., Module]:
    """Build a module around the given topics."""

    def _make(id: str, number: int, topics: List[Topic], is_released: bool = True) -> Module:
        return Module(
            id=id,
            number=number,
            title=f"Module {number}",
            is_released=is_released,
            topics=topics,
        )

    return _make


@pytest.fixture
def topic_answer() -> Callable[..., TopicAnswer]:
    """Build a main-assignment answer."""

    def _make(
        topic_id: str,
        learner_id: str = "learner-x",
        status: AnswerStatus = AnswerStatus.PENDING,
        submitted_at: datetime = NOW - timedelta(hours=2),
        reviewed_at: Optional[datetime] = None,
        id: Optional[str] = None,
    ) -> TopicAnswer:
        return TopicAnswer(
            id=id or f"answer-{learner_id}-{topic_id}-{status.value}",
            learner_id=learner_id,
            topic_id=topic_id,
            content="My answer",
            submitted_at=submitted_at,
            status=status,
            reviewed_at=reviewed_at,
        )

    return _make


@pytest.fixture
def mini_answer() -> Callable[..., MiniAnswer]:
    """Build a mini-question link answer."""

    def _make(mini_question_id: str, learner_id: str = "learner-x") -> MiniAnswer:
        return MiniAnswer(
            id=f"mini-{learner_id}-{mini_question_id}",
            learner_id=learner_id,
            mini_question_id=mini_question_id,
            link_url="https://example.com/notes",
            submitted_at=NOW - timedelta(hours=5),
        )

    return _make


@pytest.fixture
def scenario_curriculum(make_mini_question, make_topic, make_module) -> Curriculum:
    """
    Module 1 released; topic 1 released with deadline 2025-12-31 and one
    mini-question released on 2025-01-01.
    """
    mq = make_mini_question("mq-1", release_at=datetime(2025, 1, 1, 12, tzinfo=timezone.utc))
    topic = make_topic(
        "topic-1",
        1,
        [mq],
        deadline=datetime(2025, 12, 31, 12, tzinfo=timezone.utc),
    )
    return Curriculum(modules=[make_module("module-1", 1, [topic])])
