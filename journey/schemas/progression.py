"""Progression request/response schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from journey.engines.progression.leaderboard_ranker import LeaderboardEntry, TieBreak
from journey.engines.progression.progress_counter import CohortOverview
from journey.schemas.curriculum import (
    Curriculum,
    LearnerRecord,
    MiniAnswer,
    TopicAnswer,
    UtcDatetime,
)


class JourneyRequest(BaseModel):
    """Evaluate one learner against a curriculum snapshot."""

    curriculum: Curriculum
    learner_id: str
    topic_answers: List[TopicAnswer] = Field(default_factory=list)
    mini_answers: List[MiniAnswer] = Field(default_factory=list)
    now: Optional[UtcDatetime] = None  # defaults to request time


class LeaderboardRequest(BaseModel):
    """Rank a group of learners."""

    curriculum: Curriculum
    learners: List[LearnerRecord] = Field(default_factory=list)
    now: Optional[UtcDatetime] = None
    tie_break: Optional[TieBreak] = None  # defaults to configured tie-break


class LeaderboardResponse(BaseModel):
    """Ordered leaderboard."""

    evaluated_at: datetime
    tie_break: TieBreak
    entries: List[LeaderboardEntry]


class OverviewResponse(BaseModel):
    """Cohort statistics for the admin dashboard."""

    evaluated_at: datetime
    overview: CohortOverview


class SubmissionCheckRequest(BaseModel):
    """Ask whether a learner may submit for a topic or a mini-question."""

    curriculum: Curriculum
    learner_id: str
    topic_answers: List[TopicAnswer] = Field(default_factory=list)
    mini_answers: List[MiniAnswer] = Field(default_factory=list)
    now: Optional[UtcDatetime] = None
    topic_id: Optional[str] = None
    mini_question_id: Optional[str] = None
    link_url: Optional[str] = None

    @model_validator(mode="after")
    def _one_target(self):
        if (self.topic_id is None) == (self.mini_question_id is None):
            raise ValueError("Provide exactly one of topic_id or mini_question_id")
        return self


class SubmissionCheckResponse(BaseModel):
    """Submission is allowed; link_url is normalized when one was given."""

    allowed: bool = True
    topic_id: Optional[str] = None
    mini_question_id: Optional[str] = None
    link_url: Optional[str] = None
