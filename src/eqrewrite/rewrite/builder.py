from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from eqrewrite.core.config import DEFAULT_APPLICATION_LIMIT
from eqrewrite.core.logging import getLogger

from .applier import Applier, PatternApplier, as_applier
from .condition import Condition
from .errors import InvalidRewrite
from .protocols import PatternParser, PatternProtocol
from .rule import Rewrite

if TYPE_CHECKING:
    from eqrewrite.core.config import RewriteConfiguration

logger = getLogger(__name__)


class RewriteBuilder:
    """Fluent, mutable accumulator for a :class:`Rewrite`.

    Every ``with_*`` method returns the builder. ``build()`` validates and
    freezes the accumulated state; it is the only way this module produces
    a rule.

    The string helpers need a `parser` (text -> pattern). A malformed text
    raises the parser's :class:`ParseError` unchanged.

    Example::

        mul_to_shift = (
            rw("mul-to-shift", parser=Pattern.parse)
            .p("(* ?a ?b)")
            .a("(>> ?a (log2 ?b))")
            .with_condition_str("(is-power2 ?b)", "TRUE")
            .mk()
        )
    """

    def __init__(
        self,
        name: str,
        *,
        parser: Optional[PatternParser] = None,
        application_limit: int = DEFAULT_APPLICATION_LIMIT,
    ):
        self.name = name
        self.parser = parser
        self.patterns: list[PatternProtocol] = []
        self.appliers: list[Applier] = []
        self.conditions: list[Condition] = []
        self.application_limit = application_limit

    def __repr__(self) -> str:
        return (
            f"RewriteBuilder(name={self.name!r}, patterns={len(self.patterns)}, "
            f"appliers={len(self.appliers)}, conditions={len(self.conditions)})"
        )

    def _parse(self, text: str) -> PatternProtocol:
        if self.parser is None:
            raise InvalidRewrite(self.name, f"no pattern parser to read {text!r}")
        return self.parser(text)

    # ------------------------------------------------------------------
    # By value
    # ------------------------------------------------------------------
    def with_pattern(self, pattern: PatternProtocol) -> "RewriteBuilder":
        self.patterns.append(pattern)
        return self

    def with_applier(self, applier: Any) -> "RewriteBuilder":
        """Add an applier, a pattern (used as applier) or a plain callable.

        The object is stored by reference, not copied.
        """
        self.appliers.append(as_applier(applier))
        return self

    def with_condition(self, condition: Condition) -> "RewriteBuilder":
        self.conditions.append(condition)
        return self

    def with_application_limit(self, application_limit: int) -> "RewriteBuilder":
        """Default is 10_000."""
        self.application_limit = application_limit
        return self

    def with_configuration(self, config: "RewriteConfiguration") -> "RewriteBuilder":
        """Take the limit for this rule's name from `config`."""
        self.application_limit = config.limit_for(self.name)
        return self

    # ------------------------------------------------------------------
    # By text
    # ------------------------------------------------------------------
    def with_pattern_str(self, pattern_str: str) -> "RewriteBuilder":
        return self.with_pattern(self._parse(pattern_str))

    def with_applier_str(self, applier_str: str) -> "RewriteBuilder":
        return self.with_applier(PatternApplier(self._parse(applier_str)))

    def with_condition_str(self, lhs: str, rhs: str) -> "RewriteBuilder":
        return self.with_condition(Condition(self._parse(lhs), self._parse(rhs)))

    def p(self, pattern_str: str) -> "RewriteBuilder":
        """Shorthand for :meth:`with_pattern_str`."""
        return self.with_pattern_str(pattern_str)

    def a(self, applier_str: str) -> "RewriteBuilder":
        """Shorthand for :meth:`with_applier_str`."""
        return self.with_applier_str(applier_str)

    # ------------------------------------------------------------------
    # Finalize
    # ------------------------------------------------------------------
    def build(self) -> Rewrite:
        """Return the frozen rule.

        Raises:
            InvalidRewrite: No pattern, no applier, or a non-positive limit.
        """
        rewrite = Rewrite(
            name=self.name,
            patterns=tuple(self.patterns),
            appliers=tuple(self.appliers),
            conditions=tuple(self.conditions),
            application_limit=self.application_limit,
        )
        logger.debug("Built %r", rewrite)
        return rewrite

    def mk(self) -> Rewrite:
        """Shorthand for :meth:`build`."""
        return self.build()


def rw(name: str, **kwargs) -> RewriteBuilder:
    """Shorthand for ``RewriteBuilder(name, **kwargs)``."""
    return RewriteBuilder(name, **kwargs)
