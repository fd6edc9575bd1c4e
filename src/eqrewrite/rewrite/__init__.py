"""Rewrite rules for equality saturation.

- builder:   RewriteBuilder / rw, the only way to assemble a rule
- rule:      Rewrite, with search / apply / run
- condition: Condition, a per-mapping ``lhs == rhs`` guard
- applier:   Applier, PatternApplier, FnApplier
- protocols: structural types for the e-graph and pattern collaborators
- errors:    RewriteError, InvalidRewrite, ParseError
"""

from .applier import Applier, FnApplier, PatternApplier, as_applier
from .builder import RewriteBuilder, rw
from .condition import Condition
from .errors import InvalidRewrite, ParseError, RewriteError
from .protocols import (
    EGraphProtocol,
    Id,
    PatternParser,
    PatternProtocol,
    SearchMatches,
    WildMap,
)
from .rule import Rewrite

__all__ = [
    "Applier",
    "FnApplier",
    "PatternApplier",
    "as_applier",
    "RewriteBuilder",
    "rw",
    "Condition",
    "InvalidRewrite",
    "ParseError",
    "RewriteError",
    "EGraphProtocol",
    "Id",
    "PatternParser",
    "PatternProtocol",
    "SearchMatches",
    "WildMap",
    "Rewrite",
]
