"""Structural types for the collaborators a rewrite talks to.

The rule layer never imports a concrete e-graph or pattern matcher. Anything
with the right shape works; :mod:`eqrewrite.testing` ships a reference pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol, Sequence, runtime_checkable

Id = int

# wildcard name (with its leading "?") -> matched class ids
WildMap = Mapping[str, Sequence[Id]]


@dataclass(frozen=True, slots=True)
class SearchMatches:
    """Every mapping under which a pattern matched one e-class."""

    eclass: Id
    mappings: tuple[WildMap, ...]

    def __len__(self) -> int:
        return len(self.mappings)


@runtime_checkable
class EGraphProtocol(Protocol):
    """The subset of an e-graph used by conditions, appliers and ``apply``.

    ``rebuild`` belongs to the saturation driver; rules never call it.
    """

    def add(self, enode: Any) -> Any: ...

    def union(self, id1: Id, id2: Id) -> Id: ...

    def find(self, id: Id) -> Id: ...

    def __getitem__(self, id: Id) -> Any: ...

    def rebuild(self) -> Any: ...


@runtime_checkable
class PatternProtocol(Protocol):
    def search(self, egraph: Any) -> list[SearchMatches]: ...

    def instantiate_and_find(self, egraph: Any, mapping: WildMap) -> Id: ...


# Text -> pattern. Raises ParseError on malformed input.
PatternParser = Callable[[str], PatternProtocol]
