from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .protocols import PatternParser, PatternProtocol, WildMap


@dataclass(frozen=True)
class Condition:
    """Side condition ``lhs == rhs``, checked per mapping.

    Both sides are instantiated into the graph under the mapping, lhs first.
    Instantiation adds any missing terms, so a condition that fails still
    leaves its terms in the graph for later rounds to match against.
    """

    lhs: PatternProtocol
    rhs: PatternProtocol

    def check(self, egraph: Any, mapping: WildMap) -> bool:
        lhs_id = self.lhs.instantiate_and_find(egraph, mapping)
        rhs_id = self.rhs.instantiate_and_find(egraph, mapping)
        return lhs_id == rhs_id

    @classmethod
    def parse(cls, lhs: str, rhs: str, parser: PatternParser) -> "Condition":
        """Build a condition from pattern text; ``ParseError`` propagates."""
        return cls(parser(lhs), parser(rhs))

    def __str__(self) -> str:
        return f"{self.lhs} == {self.rhs}"
