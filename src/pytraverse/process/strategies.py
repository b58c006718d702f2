"""TraversalStrategies - ordered one-shot strategy pipeline.

A strategy rewrites a traversal or dispatches it for execution. The pipeline
applies its strategies in registration order; a strategy observes whatever
earlier strategies did to ``traversal.bytecode`` and ``traversal.traversers``.
The owning ``Traversal`` guarantees the pipeline runs at most once per
traversal.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pytraverse.process.traversal import Traversal

logger = logging.getLogger(__name__)


@runtime_checkable
class TraversalStrategy(Protocol):
    """A unit of client-side rewrite or dispatch.

    Strategies that need to suspend (for a round trip to a remote executor)
    may also define ``async def apply_async(traversal)``; the async pipeline
    prefers it when present.
    """

    def apply(self, traversal: Traversal) -> Any:
        """Mutate ``traversal`` in place."""


class TraversalStrategies:
    """Ordered collection of strategies applied once per traversal.

    Sources hold a template instance and hand each spawned traversal its own
    copy, so registering a strategy on one traversal never leaks into another.
    """

    def __init__(self, parent: TraversalStrategies | Iterable[TraversalStrategy] | None = None):
        """Create an empty pipeline, or a copy of ``parent``.

        Args:
            parent: Another pipeline or any iterable of strategies to copy.
        """
        self._strategies: list[TraversalStrategy] = list(parent) if parent is not None else []

    @property
    def strategies(self) -> tuple[TraversalStrategy, ...]:
        """Registered strategies in application order."""
        return tuple(self._strategies)

    def add_strategy(self, strategy: TraversalStrategy) -> TraversalStrategies:
        """Append ``strategy`` to the end of the pipeline."""
        if not callable(getattr(strategy, "apply", None)):
            raise TypeError(f"{type(strategy).__name__} does not define apply(traversal)")
        self._strategies.append(strategy)
        return self

    def copy(self) -> TraversalStrategies:
        return TraversalStrategies(self)

    def apply_strategies(self, traversal: Traversal) -> None:
        """Apply every strategy to ``traversal`` in order.

        The first exception aborts the remaining strategies and propagates.
        """
        for strategy in self._strategies:
            logger.debug("Applying %s to %r", type(strategy).__name__, traversal)
            strategy.apply(traversal)

    async def apply_strategies_async(self, traversal: Traversal) -> None:
        """Suspending variant of `apply_strategies`."""
        for strategy in self._strategies:
            logger.debug("Applying %s to %r", type(strategy).__name__, traversal)
            apply_async = getattr(strategy, "apply_async", None)
            if apply_async is not None:
                await apply_async(traversal)
            else:
                strategy.apply(traversal)

    def __iter__(self) -> Iterator[TraversalStrategy]:
        return iter(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)

    def __repr__(self) -> str:
        names = ", ".join(type(s).__name__ for s in self._strategies)
        return f"TraversalStrategies([{names}])"
