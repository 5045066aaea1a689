"""
Pydantic schemas for curriculum snapshots and API request/response validation.
"""

from journey.schemas.curriculum import (
    AnswerStatus,
    ContentSection,
    Curriculum,
    LearnerRecord,
    MiniAnswer,
    MiniQuestion,
    Module,
    Topic,
    TopicAnswer,
)
from journey.schemas.common import ErrorResponse, HealthResponse

__all__ = [
    # Curriculum snapshot
    "AnswerStatus",
    "ContentSection",
    "Curriculum",
    "LearnerRecord",
    "MiniAnswer",
    "MiniQuestion",
    "Module",
    "Topic",
    "TopicAnswer",
    # Common
    "ErrorResponse",
    "HealthResponse",
]
