"""eqrewrite - rewrite rules for equality saturation.

Rules search an e-graph for their left-hand patterns, filter the matches
through side conditions, and union whatever their appliers produce with the
matched e-classes. The e-graph, the pattern matcher and the saturation loop
are supplied by the caller; :mod:`eqrewrite.testing` has a small reference
implementation of the first two.
"""

__version__ = "0.1.0"

from .core import DEFAULT_APPLICATION_LIMIT, RewriteConfiguration, RewriteStatistics
from .rewrite import (
    Applier,
    Condition,
    FnApplier,
    InvalidRewrite,
    ParseError,
    PatternApplier,
    Rewrite,
    RewriteBuilder,
    RewriteError,
    SearchMatches,
    rw,
)

__all__ = [
    "DEFAULT_APPLICATION_LIMIT",
    "RewriteConfiguration",
    "RewriteStatistics",
    "Applier",
    "Condition",
    "FnApplier",
    "InvalidRewrite",
    "ParseError",
    "PatternApplier",
    "Rewrite",
    "RewriteBuilder",
    "RewriteError",
    "SearchMatches",
    "rw",
]
