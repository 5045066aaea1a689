"""Unit tests for leaderboard ordering."""

from datetime import timedelta

import pytest

from journey.engines.progression.leaderboard_ranker import LeaderboardEntry, TieBreak, rank


def _entry(learner_id, step, reached_at=None):
    return LeaderboardEntry(learner_id=learner_id, current_step=step, total_steps=5, reached_step_at=reached_at)


class TestRank:
    """Sort order, tie-breaks and shared ranks."""

    def test_descending_by_step(self):
        ranked = rank([_entry("a", 1), _entry("b", 3), _entry("c", 2)])
        assert [e.learner_id for e in ranked] == ["b", "c", "a"]
        assert [e.position for e in ranked] == [1, 2, 3]

    def test_earliest_completion_breaks_ties(self, now):
        entries = [
            _entry("late", 2, now - timedelta(hours=1)),
            _entry("never", 2),
            _entry("early", 2, now - timedelta(days=2)),
        ]
        ranked = rank(entries, TieBreak.EARLIEST_COMPLETION)
        assert [e.learner_id for e in ranked] == ["early", "late", "never"]

    def test_input_order_tie_break_is_stable(self, now):
        entries = [
            _entry("first", 2, now),
            _entry("second", 2, now - timedelta(days=1)),
            _entry("top", 4),
        ]
        ranked = rank(entries, TieBreak.INPUT_ORDER)
        assert [e.learner_id for e in ranked] == ["top", "first", "second"]

    def test_ties_share_rank(self):
        ranked = rank([_entry("a", 3), _entry("b", 2), _entry("c", 2), _entry("d", 1)])
        assert [e.rank for e in ranked] == [1, 2, 2, 4]

    def test_deterministic(self, now):
        entries = [_entry(str(i), i % 3, now - timedelta(minutes=i % 2)) for i in range(10)]
        assert rank(entries) == rank(entries)

    def test_limit_truncates(self):
        ranked = rank([_entry("a", 1), _entry("b", 2), _entry("c", 3)], limit=2)
        assert [e.learner_id for e in ranked] == ["c", "b"]

    def test_empty_input(self):
        assert rank([]) == []

    def test_unknown_tie_break_rejected(self):
        with pytest.raises(ValueError):
            rank([_entry("a", 1)], tie_break="alphabetical")
