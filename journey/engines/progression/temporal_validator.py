"""
Temporal Validator - topic deadline vs. mini-question release dates.

A topic's deadline may not fall before the release instant of any
mini-question nested under it. Equal instants are allowed.
"""

from datetime import datetime
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel

from journey.config import get_settings
from journey.logging_config import get_logger
from journey.schemas.curriculum import ContentSection, Curriculum, as_utc

logger = get_logger(__name__)


class DeadlineValidation(BaseModel):
    """Outcome of checking a deadline against its mini-questions."""

    valid: bool
    conflicting_indices: List[int] = []
    message: Optional[str] = None


class DeadlineConflict(BaseModel):
    """A standing violation found in a stored curriculum."""

    module_number: int
    topic_id: str
    topic_number: Optional[int] = None
    section_index: int
    mini_question_id: str
    deadline: datetime
    release_at: datetime


class DeadlineConflictError(ValueError):
    """Raised to block a topic create/update whose deadline conflicts."""

    def __init__(self, validation: DeadlineValidation):
        super().__init__(validation.message)
        self.validation = validation


def _display_zone() -> ZoneInfo:
    name = get_settings().display_timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown display timezone, using UTC", extra={"timezone": name})
        return ZoneInfo("UTC")


def format_date(value: datetime) -> str:
    """Format an instant as M/D/YYYY in the display timezone."""
    local = as_utc(value).astimezone(_display_zone())
    return f"{local.month}/{local.day}/{local.year}"


def release_date_ok(
    topic_deadline: Optional[datetime],
    mini_release_at: Optional[datetime],
) -> bool:
    """True if either date is missing or the release is not after the deadline."""
    if topic_deadline is None or mini_release_at is None:
        return True
    return as_utc(mini_release_at) <= as_utc(topic_deadline)


def validate_deadline(
    topic_deadline: Optional[datetime],
    content_sections: Sequence[ContentSection],
) -> DeadlineValidation:
    """
    Check every mini-question under the given sections against the deadline.

    Args:
        topic_deadline: The topic's deadline (None means no constraint)
        content_sections: The topic's content sections, in authoring order

    Returns:
        DeadlineValidation listing the section index of each conflict once,
        with a message citing the first conflict
    """
    if topic_deadline is None or not content_sections:
        return DeadlineValidation(valid=True)

    conflicting: List[int] = []
    message: Optional[str] = None
    for index, section in enumerate(content_sections):
        for mini_question in section.mini_questions:
            if release_date_ok(topic_deadline, mini_question.release_at):
                continue
            if index not in conflicting:
                conflicting.append(index)
            if message is None:
                message = (
                    f"Assignment deadline ({format_date(topic_deadline)}) cannot be "
                    f"before mini question release date ({format_date(mini_question.release_at)}). "
                    "Please adjust the deadline or the self-learning release dates."
                )

    if conflicting:
        return DeadlineValidation(valid=False, conflicting_indices=conflicting, message=message)
    return DeadlineValidation(valid=True)


def ensure_valid_deadline(
    topic_deadline: Optional[datetime],
    content_sections: Sequence[ContentSection],
) -> DeadlineValidation:
    """Authoring gate: raise DeadlineConflictError instead of returning invalid."""
    validation = validate_deadline(topic_deadline, content_sections)
    if not validation.valid:
        raise DeadlineConflictError(validation)
    return validation


def find_deadline_conflicts(curriculum: Curriculum) -> List[DeadlineConflict]:
    """Scan a stored curriculum for topics that violate the deadline invariant."""
    conflicts: List[DeadlineConflict] = []
    for module in curriculum.ordered_modules():
        for topic in module.topics:
            if topic.deadline is None:
                continue
            for index, mini_question in topic.iter_mini_questions():
                if release_date_ok(topic.deadline, mini_question.release_at):
                    continue
                conflicts.append(
                    DeadlineConflict(
                        module_number=module.number,
                        topic_id=topic.id,
                        topic_number=topic.number,
                        section_index=index,
                        mini_question_id=mini_question.id,
                        deadline=topic.deadline,
                        release_at=mini_question.release_at,
                    )
                )
    if conflicts:
        logger.warning(
            "Curriculum has deadline conflicts",
            extra={"conflict_count": len(conflicts)},
        )
    return conflicts
