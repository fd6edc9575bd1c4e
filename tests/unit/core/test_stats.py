"""Tests for RewriteStatistics."""

import logging

import pytest

from eqrewrite.core.stats import RewriteEvent, RewriteStatistics, RuleExecution


class MockRule:
    """Mock rule for testing."""

    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name


class TestRecording:
    def test_record_search_and_apply(self):
        stats = RewriteStatistics()
        rule = MockRule("commute-add")

        stats.record_search(rule, 4)
        stats.record_apply(rule, 3, elapsed=0.5)

        execution = stats.get_rule_execution(rule)
        assert execution == RuleExecution(
            rule_name="commute-add",
            search_count=1,
            match_count=4,
            application_count=3,
            limit_hits=0,
            elapsed=0.5,
        )
        assert stats.get_rule_execution("commute-add") is execution

    def test_counts_accumulate(self):
        stats = RewriteStatistics()
        rule = MockRule("r")

        for n in (2, 0, 5):
            stats.record_search(rule, n)
            stats.record_apply(rule, n)

        assert stats.get_application_count(rule) == 7
        assert stats.get_rule_execution(rule).search_count == 3

    def test_limit_hits(self):
        stats = RewriteStatistics()
        stats.record_apply("r", 11, limit_exceeded=True)
        stats.record_apply("r", 2)
        assert stats.get_rule_execution("r").limit_hits == 1

    def test_execution_log_order(self):
        stats = RewriteStatistics()
        stats.record_apply(MockRule("First"), 1)
        stats.record_apply(MockRule("Second"), 0)
        stats.record_apply(MockRule("First"), 2)

        assert stats.get_execution_log() == [("First", 1), ("Second", 0), ("First", 2)]

    def test_fired_rules_excludes_idle_ones(self):
        stats = RewriteStatistics()
        stats.record_apply("busy", 1)
        stats.record_apply("idle", 0)

        assert stats.get_fired_rule_names() == ["busy"]
        assert stats.did_rule_fire("busy")
        assert not stats.did_rule_fire("idle")
        assert not stats.did_rule_fire("never-ran")

    def test_reset_keeps_handlers(self):
        stats = RewriteStatistics()
        seen = []
        stats.events.on(RewriteEvent.RULE_APPLIED, lambda rule, n: seen.append(n))
        stats.record_apply("r", 1)

        stats.reset()
        stats.record_apply("r", 2)

        assert seen == [1, 2]
        assert stats.get_application_count("r") == 2


class TestEvents:
    def test_events_carry_rule_and_count(self):
        stats = RewriteStatistics()
        rule = MockRule("r")
        events = []
        for event in RewriteEvent:
            stats.events.on(event, lambda r, n, event=event: events.append((event, r, n)))

        stats.record_search(rule, 6)
        stats.record_apply(rule, 4, limit_exceeded=True)

        assert events == [
            (RewriteEvent.RULE_SEARCHED, rule, 6),
            (RewriteEvent.RULE_APPLIED, rule, 4),
            (RewriteEvent.LIMIT_EXCEEDED, rule, 4),
        ]


class TestAssertions:
    def test_assert_rule_fired(self):
        stats = RewriteStatistics()
        stats.record_apply("r", 3)

        stats.assert_rule_fired("r")
        stats.assert_rule_fired("r", min_count=3, max_count=3)

    def test_assert_rule_fired_too_few(self):
        stats = RewriteStatistics()
        stats.record_apply("other", 1)
        with pytest.raises(AssertionError, match="at least 1"):
            stats.assert_rule_fired("r")

    def test_assert_rule_fired_too_many(self):
        stats = RewriteStatistics()
        stats.record_apply("r", 3)
        with pytest.raises(AssertionError, match="at most 2"):
            stats.assert_rule_fired(MockRule("r"), max_count=2)


class TestReporting:
    def test_summary(self):
        stats = RewriteStatistics()
        stats.record_apply("a", 2)
        stats.record_apply("b", 5, limit_exceeded=True)

        assert stats.summary() == {
            "rule_applications": {"a": 2, "b": 5},
            "limit_hits": {"b": 1},
            "total_applications": 7,
        }

    def test_json_round_trip(self):
        stats = RewriteStatistics()
        stats.record_search("a", 2)
        stats.record_apply("a", 1, elapsed=0.25)

        restored = RewriteStatistics.from_json(stats.to_json())

        assert restored.rule_executions == stats.rule_executions
        assert restored.get_execution_log() == [("a", 1)]

    def test_report_logs_each_rule(self, caplog):
        stats = RewriteStatistics()
        stats.record_search("a", 2)
        stats.record_apply("a", 2, limit_exceeded=True)

        with caplog.at_level(logging.INFO, logger="eqrewrite.stats"):
            stats.report()

        assert "Rule 'a': 1 searches, 2 matches, 2 applications" in caplog.text
        assert "Rule 'a' hit its application limit 1 times" in caplog.text
