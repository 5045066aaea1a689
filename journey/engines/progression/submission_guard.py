"""
Submission Guard - decides whether a learner may submit right now.

Main assignments can only be submitted for the learner's target topic and
only once per review cycle. Mini-question answers can be submitted and
resubmitted while the mini-question is visible.
"""

import re

from journey.engines.progression.eligibility_resolver import TopicStatus
from journey.engines.progression.evaluation import LearnerJourney
from journey.schemas.curriculum import AnswerStatus

# dotted host, optional port, optional path/query/fragment
LINK_PATTERN = re.compile(
    r"^(https?://)?([\da-z-]+\.)+[a-z]{2,6}(:\d+)?([/?#]\S*)?$",
    re.IGNORECASE,
)


class SubmissionNotAllowedError(ValueError):
    """Raised when a learner may not submit for the requested item."""


class InvalidLinkError(ValueError):
    """Raised when a mini-question link answer is not a usable URL."""


def check_topic_submission(journey: LearnerJourney, topic_id: str) -> None:
    """Raise SubmissionNotAllowedError unless topic_id is the learner's target."""
    topic = journey.topic(topic_id)
    if topic is None:
        raise SubmissionNotAllowedError("Assignment is not available")

    if topic.status == TopicStatus.COMPLETED:
        raise SubmissionNotAllowedError("You have already successfully answered this assignment")
    if topic.status == TopicStatus.SUBMITTED:
        if topic.answer_status == AnswerStatus.REJECTED:
            raise SubmissionNotAllowedError(
                "Your answer for this assignment was not approved; contact your instructor"
            )
        raise SubmissionNotAllowedError(
            "You have already submitted an answer for this assignment and it is in review"
        )
    if topic.status == TopicStatus.MINI_QUESTIONS_REQUIRED:
        raise SubmissionNotAllowedError(topic.message or "Complete the learning activities first")
    if not topic.is_target:
        raise SubmissionNotAllowedError(
            "This assignment is not currently open; finish the earlier assignment first"
        )


def check_mini_question_submission(journey: LearnerJourney, mini_question_id: str) -> None:
    """Raise SubmissionNotAllowedError unless the mini-question is visible now."""
    if not any(v.id == mini_question_id for v in journey.mini_questions):
        raise SubmissionNotAllowedError("Learning activity is not available")


def normalize_link_url(url: str) -> str:
    """
    Validate a link answer and return it with a protocol.

    Links without http:// or https:// are accepted and get https:// added.
    """
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidLinkError("Link is required")
    if not LINK_PATTERN.match(candidate):
        raise InvalidLinkError("Please enter a valid URL (e.g., https://example.com)")
    if not candidate.lower().startswith(("http://", "https://")):
        candidate = f"https://{candidate}"
    return candidate
