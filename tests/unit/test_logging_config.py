"""Unit tests for structured logging."""

import json
import logging

from journey.engines.progression.eligibility_resolver import resolve_topic
from journey.engines.progression.mini_question_aggregator import TopicMiniQuestionCounts
from journey.logging_config import JsonFormatter, request_id_var


class TestJsonFormatter:
    def test_includes_extra_fields_and_request_id(self):
        record = logging.LogRecord("journey.test", logging.INFO, __file__, 1, "Evaluated journey", None, None)
        record.learner_id = "learner-x"
        record.request_id = "req-1"

        data = json.loads(JsonFormatter().format(record))

        assert data["message"] == "Evaluated journey"
        assert data["level"] == "INFO"
        assert data["learner_id"] == "learner-x"
        assert data["request_id"] == "req-1"

    def test_unserializable_extra_stringified(self, now):
        record = logging.LogRecord("journey.test", logging.INFO, __file__, 1, "msg", None, None)
        record.evaluated_at = now
        data = json.loads(JsonFormatter().format(record))
        assert data["evaluated_at"] == str(now)


def test_request_id_context_default():
    assert request_id_var.get() is None


def test_malformed_released_topic_logs_warning(caplog, now, make_topic, make_module):
    topic = make_topic("broken", None)
    module = make_module("m1", 1, [topic])

    with caplog.at_level(logging.WARNING, logger="journey.engines.progression.eligibility_resolver"):
        resolved = resolve_topic(module, topic, TopicMiniQuestionCounts(), None, now)

    assert not resolved.is_visible
    assert any(getattr(r, "topic_id", None) == "broken" for r in caplog.records)
