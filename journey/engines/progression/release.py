"""
Release cascade - effective visibility across the curriculum hierarchy.

A level is visible only when its own release flag and every ancestor's flag
are set. Mini-questions additionally carry a scheduled release instant that
must have passed.
"""

from datetime import datetime
from typing import Optional

from journey.schemas.curriculum import MiniQuestion, Module, Topic


class ReleaseCascadeError(ValueError):
    """Raised when a release change would break the module/topic invariant."""


def malformed_reason(module: Module, topic: Topic) -> Optional[str]:
    """Return why a topic cannot take part in progression, or None."""
    if topic.number is None:
        return "missing sequence number"
    if topic.module_id is not None and topic.module_id != module.id:
        return "dangling module reference"
    return None


def is_topic_visible(module: Module, topic: Topic) -> bool:
    """Module released AND topic released AND topic well-formed."""
    return (
        module.is_released
        and topic.is_released
        and malformed_reason(module, topic) is None
    )


def is_mini_question_current(mini_question: MiniQuestion, now: datetime) -> bool:
    """Released by an admin and its scheduled instant has passed."""
    if not mini_question.is_released:
        return False
    return mini_question.release_at is None or mini_question.release_at <= now


def is_mini_question_future(mini_question: MiniQuestion, now: datetime) -> bool:
    """Scheduled for later; the admin flag does not matter."""
    return mini_question.release_at is not None and mini_question.release_at > now


def set_module_release(module: Module, released: bool) -> Module:
    """
    Toggle a module's release flag.

    Unreleasing a module forces every child topic unreleased. Releasing a
    module leaves topic flags untouched; topics are released one by one.
    """
    if released:
        return module.model_copy(update={"is_released": True})
    topics = [t.model_copy(update={"is_released": False}) for t in module.topics]
    return module.model_copy(update={"is_released": False, "topics": topics})


def set_topic_release(module: Module, topic_id: str, released: bool) -> Module:
    """Toggle one topic's release flag inside its module."""
    if released and not module.is_released:
        raise ReleaseCascadeError(
            f"Cannot release a topic while module {module.number} is not released"
        )
    found = False
    topics = []
    for topic in module.topics:
        if topic.id == topic_id:
            found = True
            topic = topic.model_copy(update={"is_released": released})
        topics.append(topic)
    if not found:
        raise ReleaseCascadeError(f"Topic {topic_id} not found in module {module.number}")
    return module.model_copy(update={"topics": topics})
