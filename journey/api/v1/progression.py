"""
Progression endpoints - learner journey, leaderboard, cohort overview,
submission checks.

All endpoints are stateless: the caller posts the snapshot it fetched for
this request and gets the derived annotations back.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status

from journey.config import get_settings
from journey.engines.progression import (
    InvalidLinkError,
    LearnerJourney,
    SubmissionNotAllowedError,
    TieBreak,
    build_leaderboard,
    build_overview,
    check_mini_question_submission,
    check_topic_submission,
    evaluate_journey,
    normalize_link_url,
)
from journey.logging_config import get_logger
from journey.schemas.common import ErrorResponse
from journey.schemas.progression import (
    JourneyRequest,
    LeaderboardRequest,
    LeaderboardResponse,
    OverviewResponse,
    SubmissionCheckRequest,
    SubmissionCheckResponse,
)

router = APIRouter()
logger = get_logger(__name__)


def _now(value):
    return value or datetime.now(timezone.utc)


@router.post("/journey", response_model=LearnerJourney)
async def get_learner_journey(body: JourneyRequest):
    """Topic statuses, target topic and step counters for one learner."""
    journey = evaluate_journey(
        body.curriculum,
        body.learner_id,
        body.topic_answers,
        body.mini_answers,
        _now(body.now),
    )
    logger.info(
        "Evaluated journey",
        extra={
            "learner_id": body.learner_id,
            "current_step": journey.progress.current_step,
            "total_steps": journey.progress.total_steps,
            "target_topic_id": journey.target_topic_id,
        },
    )
    return journey


@router.post("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(body: LeaderboardRequest):
    """Learners ordered by step count."""
    settings = get_settings()
    now = _now(body.now)
    tie_break = body.tie_break or TieBreak(settings.leaderboard_tie_break)
    entries = build_leaderboard(
        body.curriculum,
        body.learners,
        now,
        tie_break=tie_break,
        limit=settings.leaderboard_limit,
    )
    return LeaderboardResponse(evaluated_at=now, tie_break=tie_break, entries=entries)


@router.post("/overview", response_model=OverviewResponse)
async def get_cohort_overview(body: LeaderboardRequest):
    """Average progress and answer counts across a cohort."""
    now = _now(body.now)
    overview = build_overview(body.curriculum, body.learners, now)
    return OverviewResponse(evaluated_at=now, overview=overview)


@router.post(
    "/submission-check",
    response_model=SubmissionCheckResponse,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def check_submission(body: SubmissionCheckRequest):
    """Refuse with 409 unless the learner may submit for the requested item."""
    journey = evaluate_journey(
        body.curriculum,
        body.learner_id,
        body.topic_answers,
        body.mini_answers,
        _now(body.now),
    )
    try:
        if body.topic_id is not None:
            check_topic_submission(journey, body.topic_id)
            return SubmissionCheckResponse(topic_id=body.topic_id)

        check_mini_question_submission(journey, body.mini_question_id)
        link_url = normalize_link_url(body.link_url) if body.link_url is not None else None
    except InvalidLinkError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except SubmissionNotAllowedError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    return SubmissionCheckResponse(mini_question_id=body.mini_question_id, link_url=link_url)
