"""
Progression Engine - assignment progression and availability.

Given a curriculum snapshot, a learner's answers and the evaluation instant:
- Temporal Validator: topic deadline vs. mini-question release dates
- Mini-Question Aggregator: visible activities and current/future counts
- Topic Eligibility Resolver: per-topic status and the single target topic
- Progress Counter: current step and released-topic denominator
- Leaderboard Ranker: learners by step count
"""

from journey.engines.progression.eligibility_resolver import (
    ResolvedTopic,
    TopicStatus,
    resolve_topics,
    select_target,
)
from journey.engines.progression.evaluation import (
    LearnerJourney,
    build_leaderboard,
    build_overview,
    evaluate_journey,
)
from journey.engines.progression.leaderboard_ranker import LeaderboardEntry, TieBreak, rank
from journey.engines.progression.mini_question_aggregator import (
    MiniQuestionAggregate,
    MiniQuestionView,
    TopicMiniQuestionCounts,
    aggregate,
)
from journey.engines.progression.progress_counter import (
    CohortOverview,
    LearnerProgress,
    compute_progress,
    summarize_cohort,
)
from journey.engines.progression.release import (
    ReleaseCascadeError,
    set_module_release,
    set_topic_release,
)
from journey.engines.progression.submission_guard import (
    InvalidLinkError,
    SubmissionNotAllowedError,
    check_mini_question_submission,
    check_topic_submission,
    normalize_link_url,
)
from journey.engines.progression.temporal_validator import (
    DeadlineConflict,
    DeadlineConflictError,
    DeadlineValidation,
    ensure_valid_deadline,
    find_deadline_conflicts,
    release_date_ok,
    validate_deadline,
)

__all__ = [
    "ResolvedTopic",
    "TopicStatus",
    "resolve_topics",
    "select_target",
    "LearnerJourney",
    "build_leaderboard",
    "build_overview",
    "evaluate_journey",
    "LeaderboardEntry",
    "TieBreak",
    "rank",
    "MiniQuestionAggregate",
    "MiniQuestionView",
    "TopicMiniQuestionCounts",
    "aggregate",
    "CohortOverview",
    "LearnerProgress",
    "compute_progress",
    "summarize_cohort",
    "ReleaseCascadeError",
    "set_module_release",
    "set_topic_release",
    "InvalidLinkError",
    "SubmissionNotAllowedError",
    "check_mini_question_submission",
    "check_topic_submission",
    "normalize_link_url",
    "DeadlineConflict",
    "DeadlineConflictError",
    "DeadlineValidation",
    "ensure_valid_deadline",
    "find_deadline_conflicts",
    "release_date_ok",
    "validate_deadline",
]
