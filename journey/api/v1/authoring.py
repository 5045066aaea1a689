"""
Authoring endpoints - deadline validation and release toggles.

The form layer calls these before saving a topic or module; a conflict
blocks the save and its message is shown to the admin.
"""

from fastapi import APIRouter, HTTPException, status

from journey.engines.progression import (
    DeadlineConflictError,
    DeadlineValidation,
    ReleaseCascadeError,
    ensure_valid_deadline,
    find_deadline_conflicts,
    set_module_release,
    set_topic_release,
    validate_deadline,
)
from journey.logging_config import get_logger
from journey.schemas.authoring import (
    ConflictScanResponse,
    DeadlineCheckRequest,
    ModuleReleaseRequest,
)
from journey.schemas.common import ErrorResponse
from journey.schemas.curriculum import Curriculum, Module, Topic

router = APIRouter()
logger = get_logger(__name__)


@router.post("/validate-deadline", response_model=DeadlineValidation)
async def check_deadline(body: DeadlineCheckRequest):
    """Inline validation for edit forms; always 200, inspect `valid`."""
    return validate_deadline(body.deadline, body.content_sections)


@router.post("/topics/check", response_model=Topic)
async def check_topic(body: Topic):
    """Gate a topic create/update: 422 with the conflict message if invalid."""
    try:
        ensure_valid_deadline(body.deadline, body.content_sections)
    except DeadlineConflictError as e:
        logger.info(
            "Blocked topic with deadline conflict",
            extra={
                "topic_id": body.id,
                "conflicting_indices": e.validation.conflicting_indices,
            },
        )
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.validation.model_dump(),
        )
    return body


@router.post("/conflicts", response_model=ConflictScanResponse)
async def scan_conflicts(body: Curriculum):
    """List standing deadline violations in a stored curriculum."""
    return ConflictScanResponse(conflicts=find_deadline_conflicts(body))


@router.post(
    "/modules/release",
    response_model=Module,
    responses={409: {"model": ErrorResponse}},
)
async def toggle_release(body: ModuleReleaseRequest):
    """Apply a release toggle and return the module with the cascade applied."""
    try:
        if body.topic_id is None:
            module = set_module_release(body.module, body.is_released)
        else:
            module = set_topic_release(body.module, body.topic_id, body.is_released)
    except ReleaseCascadeError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    logger.info(
        "Release toggled",
        extra={
            "module_id": module.id,
            "topic_id": body.topic_id,
            "is_released": body.is_released,
        },
    )
    return module
