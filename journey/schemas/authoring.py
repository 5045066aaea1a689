"""Curriculum authoring schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from journey.engines.progression.temporal_validator import DeadlineConflict
from journey.schemas.curriculum import ContentSection, Module, UtcDatetime


class DeadlineCheckRequest(BaseModel):
    """Topic deadline plus the content sections being edited with it."""

    deadline: Optional[UtcDatetime] = None
    content_sections: List[ContentSection] = Field(default_factory=list)


class ConflictScanResponse(BaseModel):
    """Standing deadline violations in a curriculum snapshot."""

    conflicts: List[DeadlineConflict]


class ModuleReleaseRequest(BaseModel):
    """Toggle a module's release flag, or one of its topics' flags."""

    module: Module
    is_released: bool
    topic_id: Optional[str] = None
