from __future__ import annotations

import dataclasses
import json
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .logging import getLogger
from .registry import EventEmitter

logger = getLogger("eqrewrite.stats")


class RewriteEvent(Enum):
    """Events emitted while rules run, for instrumentation/testing."""

    RULE_SEARCHED = auto()  # A rule's patterns were searched
    RULE_APPLIED = auto()  # A rule's matches were applied
    LIMIT_EXCEEDED = auto()  # An apply call stopped at the application limit


def _rule_name(rule: object | str) -> str:
    if isinstance(rule, str):
        return rule
    return getattr(rule, "name", None) or rule.__class__.__name__


@dataclasses.dataclass
class RuleExecution:
    """Aggregated counters for one rule across every run it took part in."""

    rule_name: str
    search_count: int = 0
    match_count: int = 0
    application_count: int = 0
    limit_hits: int = 0
    elapsed: float = 0.0


@dataclasses.dataclass
class RewriteStatistics:
    """Statistics for rule search/apply cycles.

    Filled in by :meth:`Rewrite.run`; a saturation driver can share one
    instance across all of its rules and rounds, then ``report()`` at the end.
    """

    rule_executions: Dict[str, RuleExecution] = dataclasses.field(default_factory=dict)

    # ordered (rule_name, applications) pairs, one per apply
    rule_execution_log: List[tuple[str, int]] = dataclasses.field(default_factory=list)

    events: EventEmitter[RewriteEvent] = dataclasses.field(
        default_factory=lambda: EventEmitter[RewriteEvent]()
    )

    def reset(self) -> None:
        self.rule_executions.clear()
        self.rule_execution_log.clear()
        # event handlers persist across resets

    def _execution(self, rule: object | str) -> RuleExecution:
        name = _rule_name(rule)
        execution = self.rule_executions.get(name)
        if execution is None:
            execution = self.rule_executions[name] = RuleExecution(rule_name=name)
        return execution

    # -------------------------------------------------------------------------
    # Recording APIs
    # -------------------------------------------------------------------------

    def record_search(self, rule: object | str, nb_matches: int) -> None:
        execution = self._execution(rule)
        execution.search_count += 1
        execution.match_count += nb_matches
        self.events.emit(RewriteEvent.RULE_SEARCHED, rule, nb_matches)

    def record_apply(
        self,
        rule: object | str,
        nb_applications: int,
        elapsed: float = 0.0,
        limit_exceeded: bool = False,
    ) -> None:
        execution = self._execution(rule)
        execution.application_count += nb_applications
        execution.elapsed += elapsed
        self.rule_execution_log.append((execution.rule_name, nb_applications))
        self.events.emit(RewriteEvent.RULE_APPLIED, rule, nb_applications)
        if limit_exceeded:
            execution.limit_hits += 1
            self.events.emit(RewriteEvent.LIMIT_EXCEEDED, rule, nb_applications)

    # -------------------------------------------------------------------------
    # Query APIs
    # -------------------------------------------------------------------------

    def get_rule_execution(self, rule: object | str) -> Optional[RuleExecution]:
        return self.rule_executions.get(_rule_name(rule))

    def get_application_count(self, rule: object | str) -> int:
        execution = self.get_rule_execution(rule)
        return execution.application_count if execution else 0

    def get_fired_rule_names(self) -> List[str]:
        """Names of the rules that produced at least one application."""
        return [
            ex.rule_name
            for ex in self.rule_executions.values()
            if ex.application_count > 0
        ]

    def did_rule_fire(self, rule: object | str) -> bool:
        return self.get_application_count(rule) > 0

    def get_execution_log(self) -> List[tuple[str, int]]:
        return list(self.rule_execution_log)

    def assert_rule_fired(
        self,
        rule: object | str,
        min_count: int = 1,
        max_count: Optional[int] = None,
    ) -> None:
        """Assert that a rule produced a number of applications within bounds.

        Raises:
            AssertionError: If the rule's application count is out of bounds.
        """
        count = self.get_application_count(rule)
        rule_name = _rule_name(rule)

        if count < min_count:
            raise AssertionError(
                f"Expected rule '{rule_name}' to apply at least {min_count} time(s), "
                f"but it applied {count} time(s). "
                f"Rules that fired: {self.get_fired_rule_names()}"
            )

        if max_count is not None and count > max_count:
            raise AssertionError(
                f"Expected rule '{rule_name}' to apply at most {max_count} time(s), "
                f"but it applied {count} time(s)."
            )

    # -------------------------------------------------------------------------
    # Reporting APIs
    # -------------------------------------------------------------------------

    def report(self) -> None:
        for execution in self.rule_executions.values():
            logger.info(
                "Rule '%s': %d searches, %d matches, %d applications in %.3fs",
                execution.rule_name,
                execution.search_count,
                execution.match_count,
                execution.application_count,
                execution.elapsed,
            )
            if execution.limit_hits:
                logger.info(
                    "Rule '%s' hit its application limit %d times",
                    execution.rule_name,
                    execution.limit_hits,
                )

    def summary(self) -> Dict[str, Any]:
        """Get a summary dict for programmatic access."""
        return {
            "rule_applications": {
                ex.rule_name: ex.application_count
                for ex in self.rule_executions.values()
            },
            "limit_hits": {
                ex.rule_name: ex.limit_hits
                for ex in self.rule_executions.values()
                if ex.limit_hits
            },
            "total_applications": sum(n for _, n in self.rule_execution_log),
        }

    # -------------------------------------------------------------------------
    # JSON Serialization APIs
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_executions": {
                name: dataclasses.asdict(ex)
                for name, ex in self.rule_executions.items()
            },
            "rule_execution_log": [list(entry) for entry in self.rule_execution_log],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RewriteStatistics":
        stats = cls()
        for name, ex_data in data.get("rule_executions", {}).items():
            stats.rule_executions[name] = RuleExecution(**ex_data)
        stats.rule_execution_log.extend(
            (name, count) for name, count in data.get("rule_execution_log", [])
        )
        return stats

    @classmethod
    def from_json(cls, json_str: str) -> "RewriteStatistics":
        return cls.from_dict(json.loads(json_str))
