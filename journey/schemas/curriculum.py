"""
Curriculum and answer snapshot schemas.

The engines consume these as immutable snapshots supplied by the caller;
nothing here is persisted by this service.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so every instant is comparable."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class _Snapshot(BaseModel):
    """Base for snapshot entities: frozen, extra keys ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class MiniQuestion(_Snapshot):
    """A self-learning activity nested under a content section."""

    id: str
    title: str = ""
    question: str = ""
    description: Optional[str] = None
    resource_url: Optional[str] = None
    release_at: Optional[UtcDatetime] = None
    is_released: bool = False
    order_index: int = 0


class ContentSection(_Snapshot):
    """Learning material grouping under a topic."""

    id: str
    title: str = ""
    material: Optional[str] = None
    order_index: int = 0
    mini_questions: List[MiniQuestion] = Field(default_factory=list)


class Topic(_Snapshot):
    """A gradeable main assignment."""

    id: str
    module_id: Optional[str] = None
    number: Optional[int] = None
    title: str = ""
    content: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[UtcDatetime] = None
    points: int = 0
    bonus_points: int = 0
    is_released: bool = False
    content_sections: List[ContentSection] = Field(default_factory=list)

    def iter_mini_questions(self):
        """Yield (section_index, mini_question) in authoring order."""
        for index, section in enumerate(self.content_sections):
            for mini_question in section.mini_questions:
                yield index, mini_question


class Module(_Snapshot):
    """Top-level curriculum grouping."""

    id: str
    number: int
    title: str = ""
    description: Optional[str] = None
    is_released: bool = False
    deadline: Optional[UtcDatetime] = None
    topics: List[Topic] = Field(default_factory=list)


class Curriculum(_Snapshot):
    """A full curriculum snapshot as fetched for one request."""

    modules: List[Module] = Field(default_factory=list)

    def ordered_modules(self) -> List[Module]:
        """Modules by ascending number; input order breaks ties."""
        return sorted(self.modules, key=lambda m: m.number)


class AnswerStatus(str, Enum):
    """Review status of a main assignment answer."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TopicAnswer(_Snapshot):
    """A learner's submission for a topic's main assignment."""

    id: str
    learner_id: str
    topic_id: str
    content: str = ""
    notes: Optional[str] = None
    submitted_at: UtcDatetime
    status: AnswerStatus = AnswerStatus.PENDING
    reviewed_at: Optional[UtcDatetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _lower_status(cls, value):
        # Stored upper-case (PENDING/APPROVED/REJECTED) upstream
        return value.lower() if isinstance(value, str) else value


class MiniAnswer(_Snapshot):
    """A learner's link submission for a mini-question."""

    id: str
    learner_id: str
    mini_question_id: str
    link_url: str = ""
    notes: Optional[str] = None
    submitted_at: Optional[UtcDatetime] = None


class LearnerRecord(_Snapshot):
    """A learner and their answers, as fetched for leaderboard evaluation."""

    learner_id: str
    display_name: Optional[str] = None
    train_name: Optional[str] = None
    topic_answers: List[TopicAnswer] = Field(default_factory=list)
    mini_answers: List[MiniAnswer] = Field(default_factory=list)
