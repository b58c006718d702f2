"""Pytest configuration and test helpers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from pytraverse.process import Bytecode, Traversal, TraversalStrategies, Traverser


class PopulateStrategy:
    """Strategy that installs a fixed traverser queue and counts its calls.

    Fresh ``Traverser`` objects are built on every call since the engine
    decrements bulk in place.
    """

    def __init__(self, *items: tuple[Any, int]) -> None:
        self.items = items
        self.calls = 0

    def apply(self, traversal: Traversal) -> None:
        self.calls += 1
        traversal.traversers = [Traverser(value, bulk) for value, bulk in self.items]


class FailingStrategy:
    """Strategy that raises ``exc`` for the first ``failures`` calls."""

    def __init__(self, exc: BaseException, failures: int = 1) -> None:
        self.exc = exc
        self.failures = failures
        self.calls = 0

    def apply(self, traversal: Traversal) -> None:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc


class CallbackStrategy:
    """Strategy delegating to a plain function, for one-off assertions."""

    def __init__(self, fn: Callable[[Traversal], None]) -> None:
        self.fn = fn

    def apply(self, traversal: Traversal) -> None:
        self.fn(traversal)


def traversal_with(*strategies: Any, bytecode: Bytecode | None = None) -> Traversal:
    """Build an anonymous Traversal whose pipeline holds ``strategies``.

    Args:
        strategies: Strategies to register, in application order.
        bytecode: Optional bytecode; an empty one by default.

    Returns:
        A fresh, unapplied Traversal.
    """
    pipeline = TraversalStrategies()
    for strategy in strategies:
        pipeline.add_strategy(strategy)
    return Traversal(None, pipeline, bytecode)


def populated(*items: tuple[Any, int]) -> Traversal:
    """Return a traversal whose only strategy installs ``items`` as traversers."""
    return traversal_with(PopulateStrategy(*items))


def run(coro: Any) -> Any:
    """Run a coroutine to completion, as the async integration tests do."""
    return asyncio.run(coro)
