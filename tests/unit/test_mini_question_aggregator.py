"""Unit tests for the mini-question aggregator."""

from datetime import timedelta

import pytest

from journey.engines.progression.mini_question_aggregator import aggregate
from journey.schemas.curriculum import Curriculum


class TestAggregate:
    """Visibility filter and current/future counts."""

    def test_only_released_and_due_are_listed(self, now, make_mini_question, make_topic, make_module):
        topic = make_topic(
            "t1",
            1,
            [
                make_mini_question("due"),
                make_mini_question("scheduled", release_at=now + timedelta(days=1)),
                make_mini_question("flag-off", is_released=False),
                make_mini_question("flag-on-future", release_at=now + timedelta(hours=1)),
            ],
        )
        result = aggregate(Curriculum(modules=[make_module("m1", 1, [topic])]), now)

        assert [v.id for v in result.views] == ["due"]
        counts = result.counts_for("t1")
        assert counts.total_current == 1
        assert counts.future_count == 2
        assert counts.total_all == 3
        assert counts.has_future_mini_questions is True
        assert counts.next_release_at == now + timedelta(hours=1)

    def test_release_instant_equal_to_now_is_visible(self, now, make_mini_question, make_topic, make_module):
        topic = make_topic("t1", 1, [make_mini_question("edge", release_at=now)])
        result = aggregate(Curriculum(modules=[make_module("m1", 1, [topic])]), now)
        assert result.is_visible("edge")

    def test_no_release_instant_follows_flag(self, now, make_mini_question, make_topic, make_module):
        topic = make_topic(
            "t1",
            1,
            [
                make_mini_question("unscheduled-on", release_at=None),
                make_mini_question("unscheduled-off", release_at=None, is_released=False),
            ],
        )
        result = aggregate(Curriculum(modules=[make_module("m1", 1, [topic])]), now)
        assert [v.id for v in result.views] == ["unscheduled-on"]
        assert result.counts_for("t1").total_all == 1

    def test_unreleased_parents_hide_everything(self, now, make_mini_question, make_topic, make_module):
        hidden_topic = make_topic("t1", 1, [make_mini_question("a")], is_released=False)
        hidden_module = make_module(
            "m2", 2, [make_topic("t2", 1, [make_mini_question("b")])], is_released=False
        )
        curriculum = Curriculum(modules=[make_module("m1", 1, [hidden_topic]), hidden_module])

        result = aggregate(curriculum, now)

        assert result.views == []
        assert result.counts == {}

    def test_answers_counted_current_and_future(
        self, now, make_mini_question, make_topic, make_module, mini_answer
    ):
        topic = make_topic(
            "t1",
            1,
            [
                make_mini_question("a"),
                make_mini_question("b"),
                make_mini_question("later", release_at=now + timedelta(days=2)),
            ],
        )
        answers = [mini_answer("a"), mini_answer("later")]
        result = aggregate(Curriculum(modules=[make_module("m1", 1, [topic])]), now, answers)

        counts = result.counts_for("t1")
        assert counts.completed_current == 1
        assert counts.completed_all == 2
        assert counts.remaining == 1
        assert {v.id: v.has_answer for v in result.views} == {"a": True, "b": False}

    def test_views_carry_topic_back_reference(self, now, make_mini_question, make_topic, make_module):
        topic = make_topic("t9", 4, [make_mini_question("a"), make_mini_question("b")])
        result = aggregate(Curriculum(modules=[make_module("m3", 3, [topic])]), now)

        view = result.views_for("t9")[1]
        assert view.topic_number == 4
        assert view.topic_title == "Topic t9"
        assert view.module_number == 3
        assert view.section_index == 1

    def test_malformed_topic_is_skipped(self, now, make_mini_question, make_topic, make_module):
        topics = [
            make_topic("no-number", None, [make_mini_question("a")]),
            make_topic("dangling", 2, [make_mini_question("b")], module_id="elsewhere"),
            make_topic("fine", 3, [make_mini_question("c")], module_id="m1"),
        ]
        result = aggregate(Curriculum(modules=[make_module("m1", 1, topics)]), now)
        assert [v.id for v in result.views] == ["c"]

    def test_missing_snapshot_is_a_contract_violation(self, now):
        with pytest.raises(ValueError):
            aggregate(None, now)
