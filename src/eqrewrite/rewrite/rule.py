"""The rewrite rule and its search/apply protocol.

A :class:`Rewrite` pairs one or more left-hand patterns (alternatives) with
one or more appliers, optionally guarded by :class:`Condition` s. A driver
calls :meth:`Rewrite.search` on every rule first, then :meth:`Rewrite.apply`
with the matches, then rebuilds the graph before the next round.

Build rules with :class:`~eqrewrite.rewrite.builder.RewriteBuilder`::

    commute = rw("commute-add", parser=Pattern.parse).p("(+ ?a ?b)").a("(+ ?b ?a)").mk()
    matches = commute.search(egraph)
    leaders = commute.apply(egraph, matches)
    egraph.rebuild()
"""

from __future__ import annotations

import dataclasses
import time
from typing import Any, Iterable, Optional

from eqrewrite.core.config import DEFAULT_APPLICATION_LIMIT
from eqrewrite.core.logging import getLogger
from eqrewrite.core.stats import RewriteStatistics

from .applier import Applier
from .condition import Condition
from .errors import InvalidRewrite
from .protocols import Id, PatternProtocol, SearchMatches

logger = getLogger(__name__)


@dataclasses.dataclass(frozen=True, repr=False)
class Rewrite:
    """An immutable rewrite rule.

    Attributes:
        name: Diagnostic name; two rules may share one.
        patterns: Alternative left-hand sides, searched in order.
        appliers: Right-hand actions, run in order for every accepted mapping.
        conditions: All must hold for a mapping to be applied.
        application_limit: Per-``apply`` cap on recorded unions. The check is
            ``len(applications) > application_limit``, so one application
            past the limit is always recorded before the call stops.
    """

    name: str
    patterns: tuple[PatternProtocol, ...]
    appliers: tuple[Applier, ...]
    conditions: tuple[Condition, ...] = ()
    application_limit: int = DEFAULT_APPLICATION_LIMIT

    def __post_init__(self):
        for field in ("patterns", "appliers", "conditions"):
            object.__setattr__(self, field, tuple(getattr(self, field)))
        if not self.patterns:
            raise InvalidRewrite(self.name, "at least one pattern is required")
        if not self.appliers:
            raise InvalidRewrite(self.name, "at least one applier is required")
        limit = self.application_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise InvalidRewrite(
                self.name, f"application limit must be a positive integer, got {limit!r}"
            )

    def __repr__(self) -> str:
        return (
            f"Rewrite(name={self.name!r}, patterns={len(self.patterns)}, "
            f"appliers={len(self.appliers)}, conditions={len(self.conditions)}, "
            f"application_limit={self.application_limit})"
        )

    def search(self, egraph: Any) -> list[SearchMatches]:
        """Search every pattern, concatenating results in pattern order.

        Classes matched by more than one pattern appear once per pattern.
        """
        return [m for pattern in self.patterns for m in pattern.search(egraph)]

    def apply(self, egraph: Any, matches: Iterable[SearchMatches]) -> list[Id]:
        """Apply this rule to `matches`, returning the union leaders.

        Only applications that produce an id different from the matched
        e-class are unioned and recorded. Once more than
        ``application_limit`` have been recorded, a warning is logged and the
        whole call stops; what was recorded so far is returned.
        """
        applications: list[Id] = []
        for ematch in matches:
            for mapping in ematch.mappings:
                if not all(c.check(egraph, mapping) for c in self.conditions):
                    continue
                for applier in self.appliers:
                    for applied_root in applier.apply(egraph, mapping):
                        # only union and record the id if we learned something
                        if applied_root == ematch.eclass:
                            continue
                        leader = egraph.union(ematch.eclass, applied_root)
                        applications.append(leader)
                        logger.debug(
                            "%s: union(%s, %s) -> %s",
                            self.name,
                            ematch.eclass,
                            applied_root,
                            leader,
                        )
                        if len(applications) > self.application_limit:
                            logger.warning(
                                "Rule %s exceeded the limit: %d",
                                self.name,
                                len(applications),
                            )
                            return applications
        return applications

    def run(self, egraph: Any, stats: Optional[RewriteStatistics] = None) -> list[Id]:
        """Search then apply once, with timing logs; does not rebuild."""
        logger.update_rule(self.name)
        try:
            start = time.perf_counter()

            matches = self.search(egraph)
            logger.debug("Found rewrite %s %d times", self.name, len(matches))
            if stats is not None:
                stats.record_search(self, len(matches))

            ids = self.apply(egraph, matches)
            elapsed = time.perf_counter() - start
            logger.debug(
                "Applied rewrite %s %d times in %d.%03d",
                self.name,
                len(ids),
                int(elapsed),
                int(elapsed * 1000) % 1000,
            )
            if stats is not None:
                stats.record_apply(
                    self,
                    len(ids),
                    elapsed,
                    limit_exceeded=len(ids) > self.application_limit,
                )
            return ids
        finally:
            logger.reset_rule()
