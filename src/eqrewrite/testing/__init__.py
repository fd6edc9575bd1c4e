"""Reference collaborators for exercising rewrite rules.

The rule layer only needs something e-graph shaped and something pattern
shaped (see :mod:`eqrewrite.rewrite.protocols`). This package provides a
small, dependency-free pair of both, used by the test suite and handy for
prototyping rules::

    from eqrewrite import rw
    from eqrewrite.testing import EGraph, Pattern

    egraph = EGraph()
    root = egraph.add_expr("(* x 1)")
    mul_one = rw("mul-1", parser=Pattern.parse).p("(* ?a 1)").a("?a").mk()
    mul_one.run(egraph)
    egraph.rebuild()
"""

from .egraph import AddResult, EClass, EGraph, ENode, e
from .pattern import Pattern, PatternNode, Wildcard

__all__ = [
    "AddResult",
    "EClass",
    "EGraph",
    "ENode",
    "e",
    "Pattern",
    "PatternNode",
    "Wildcard",
]
