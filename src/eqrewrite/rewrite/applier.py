"""Appliers: the right-hand side of a rewrite.

An applier receives the e-graph and one substitution and returns the ids of
terms that should be equivalent to the matched e-class. It may add terms to
the graph, look them up, or compute them from the matched classes' nodes.

Appliers are held by reference in every :class:`Rewrite` that uses them and
are invoked again on every match and every saturation round, so they must be
deterministic for a given mapping and graph state. Any mutable state an
applier captures is its author's to keep safe for reuse.
"""

from __future__ import annotations

import abc
from typing import Any, Callable, Iterable, Optional, Union

from .protocols import Id, PatternProtocol, WildMap

ApplierResult = Union[Iterable[Id], Id, None]


class Applier(abc.ABC):
    """Action run for every mapping that survives a rule's conditions."""

    @abc.abstractmethod
    def apply(self, egraph: Any, mapping: WildMap) -> list[Id]:
        """Return the ids this mapping rewrites to, in order.

        An empty list means the applier had nothing useful to produce.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class PatternApplier(Applier):
    """Instantiate a pattern under the mapping, adding it if absent."""

    def __init__(self, pattern: PatternProtocol):
        self.pattern = pattern

    def apply(self, egraph: Any, mapping: WildMap) -> list[Id]:
        return [self.pattern.instantiate_and_find(egraph, mapping)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PatternApplier):
            return NotImplemented
        return self.pattern == other.pattern

    def __hash__(self) -> int:
        return hash((PatternApplier, self.pattern))

    def __repr__(self) -> str:
        return f"PatternApplier({self.pattern})"


class FnApplier(Applier):
    """Computed applier backed by a plain function.

    The function is called as ``fn(egraph, mapping)`` and may return an
    iterable of ids, a single id, or ``None`` for "produce nothing". Anything
    with an ``id`` attribute, such as the result of ``egraph.add``, counts as
    that id. Any other value (``bool`` included) raises :class:`TypeError`.

    Example::

        def fold(egraph, mapping):
            a = egraph[mapping["?a"][0]].nodes[0].op
            b = egraph[mapping["?b"][0]].nodes[0].op
            return egraph.add(e(a + b)).id

        concat = FnApplier(fold, name="concat")
    """

    def __init__(
        self,
        fn: Callable[[Any, WildMap], ApplierResult],
        name: Optional[str] = None,
    ):
        self.fn = fn
        self.name = name or getattr(fn, "__name__", fn.__class__.__name__)

    def apply(self, egraph: Any, mapping: WildMap) -> list[Id]:
        result = self.fn(egraph, mapping)
        if result is None:
            return []
        if hasattr(result, "id") or isinstance(result, int):
            return [self._as_id(result)]
        return [self._as_id(item) for item in result]

    def _as_id(self, value: Any) -> Id:
        # an add result (``AddResult(id, was_new)``) stands for its id
        if hasattr(value, "id"):
            value = value.id
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"{self!r} returned {value!r}; expected an e-class id or an add result"
            )
        return value

    def __repr__(self) -> str:
        return f"FnApplier({self.name})"


def as_applier(obj: Any) -> Applier:
    """Coerce `obj` into an :class:`Applier`.

    Accepts an ``Applier`` (returned as is, not copied), anything shaped like
    a pattern (wrapped in :class:`PatternApplier`), or a callable (wrapped in
    :class:`FnApplier`).
    """
    if isinstance(obj, Applier):
        return obj
    if isinstance(obj, PatternProtocol):
        return PatternApplier(obj)
    if callable(obj):
        return FnApplier(obj)
    raise TypeError(
        f"expected an Applier, a pattern or a callable, got {type(obj).__name__}"
    )
