"""Traversal - the pull-driven iteration engine.

A traversal owns its bytecode, its strategy pipeline and a queue of
traversers. Nothing executes while steps are being added. The first
consuming call (``next``, ``has_next``, ``to_list``, ``to_set``, ``iterate``,
the iterator protocols, or their async variants) applies the strategies once;
strategies populate ``traversers`` and may rewrite ``bytecode``. Every
consuming call is built on one primitive that pulls a single occurrence off
the front of the queue, expanding bulk in place.

Application state machine::

    UNAPPLIED --first consume--> APPLYING --success--> APPLIED (terminal)
                                    |
                                    +--strategy raises--> UNAPPLIED

A traversal is single pass: once drained it reports done forever.
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

from pytraverse.process.bytecode import Bytecode
from pytraverse.process.errors import MalformedTraverserError, TraversalStateError
from pytraverse.process.strategies import TraversalStrategies
from pytraverse.process.traverser import Traverser

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

logger = logging.getLogger(__name__)


class AppliedState(Enum):
    """Strategy application progress of a traversal."""

    UNAPPLIED = "unapplied"
    APPLYING = "applying"
    APPLIED = "applied"


class TraversalItem(NamedTuple):
    """Result of one ``next()`` call.

    ``done`` is True (and ``value`` None) exactly when the traversal had no
    occurrences left at the time of the call.
    """

    value: Any
    done: bool


_DONE = TraversalItem(None, True)


class Traversal:
    """A recorded traversal plus its lazily-populated results.

    Attributes:
        graph: The graph this traversal is bound to, or None when anonymous.
        strategies: Pipeline applied on first consumption.
        bytecode: Recorded instructions; frozen once strategies are applied.
        side_effects: Side-effect values published by strategies.
    """

    def __init__(
        self,
        graph: Any = None,
        strategies: TraversalStrategies | None = None,
        bytecode: Bytecode | None = None,
    ) -> None:
        self.graph = graph
        self.strategies = strategies if strategies is not None else TraversalStrategies()
        self.bytecode = bytecode if bytecode is not None else Bytecode()
        self.side_effects: Mapping[str, Any] = {}
        self._traversers: deque[Traverser] | None = None
        self._applied_state = AppliedState.UNAPPLIED
        self._checkpoint: tuple[Bytecode, Mapping[str, Any]] | None = None

    @property
    def applied_state(self) -> AppliedState:
        return self._applied_state

    @property
    def is_anonymous(self) -> bool:
        """True when this traversal can be embedded as a child of another."""
        return self.graph is None

    @property
    def traversers(self) -> deque[Traverser] | None:
        """Pending traversers, front first; None until strategies populate it."""
        return self._traversers

    @traversers.setter
    def traversers(self, traversers: Iterable[Traverser] | None) -> None:
        if traversers is None:
            self._traversers = None
            return
        queue = deque(traversers)
        for traverser in queue:
            if not isinstance(traverser, Traverser):
                raise MalformedTraverserError(
                    f"Strategies must produce Traverser objects; got {type(traverser).__name__}"
                )
        self._traversers = queue

    # ------------------------------------------------------------------
    # Strategy application (one shot)
    # ------------------------------------------------------------------

    def _begin_apply(self) -> bool:
        """Enter APPLYING; return False if strategies were already applied."""
        if self._applied_state is AppliedState.APPLIED:
            return False
        if self._applied_state is AppliedState.APPLYING:
            raise TraversalStateError(
                "Traversal is already applying its strategies; wait for the pending "
                "call to finish before consuming it again"
            )
        self._applied_state = AppliedState.APPLYING
        self._checkpoint = (self.bytecode.copy(), copy.copy(self.side_effects))
        logger.debug("Applying %d strategies to %r", len(self.strategies), self)
        return True

    def _finish_apply(self) -> None:
        if self._traversers is None:
            self._traversers = deque()
        self.bytecode.freeze()
        self._checkpoint = None
        self._applied_state = AppliedState.APPLIED
        logger.debug("Applied strategies to %r (%d traversers)", self, len(self._traversers))

    def _abort_apply(self) -> None:
        """Undo everything the failed pipeline changed."""
        if self._checkpoint is not None:
            self.bytecode, self.side_effects = self._checkpoint
            self._checkpoint = None
        self._traversers = None
        self._applied_state = AppliedState.UNAPPLIED
        logger.debug("Rolled back strategy application for %r", self)

    def apply_strategies(self) -> None:
        """Apply the strategy pipeline unless it already ran.

        Raises:
            TraversalStateError: Called re-entrantly while applying.
        """
        if not self._begin_apply():
            return
        try:
            self.strategies.apply_strategies(self)
        except BaseException:
            self._abort_apply()
            raise
        self._finish_apply()

    async def apply_strategies_async(self) -> None:
        """Suspending variant of `apply_strategies`.

        Cancellation while suspended leaves the traversal UNAPPLIED.
        """
        if not self._begin_apply():
            return
        try:
            await self.strategies.apply_strategies_async(self)
        except BaseException:
            self._abort_apply()
            raise
        self._finish_apply()

    # ------------------------------------------------------------------
    # Pull primitive
    # ------------------------------------------------------------------

    def _front(self) -> Traverser | None:
        """Return the traverser the next pull would read, or None when drained."""
        if not self._traversers:
            return None
        traverser = self._traversers[0]
        if traverser.bulk < 1:
            raise MalformedTraverserError(
                f"Traverser for {traverser.value!r} has non-positive bulk {traverser.bulk}"
            )
        return traverser

    def _pull(self) -> TraversalItem:
        """Take one occurrence off the front of the queue."""
        traverser = self._front()
        if traverser is None:
            return _DONE
        traverser.bulk -= 1
        if traverser.bulk == 0:
            self._traversers.popleft()
        return TraversalItem(traverser.value, False)

    def _drain(self) -> Iterator[Any]:
        while True:
            item = self._pull()
            if item.done:
                return
            yield item.value

    # ------------------------------------------------------------------
    # Consuming operations
    # ------------------------------------------------------------------

    def next(self) -> TraversalItem:
        """Pull one occurrence; ``done`` once the traversal is exhausted."""
        self.apply_strategies()
        return self._pull()

    def take(self, amount: int) -> list[Any]:
        """Pull up to ``amount`` occurrences."""
        if amount < 0:
            raise ValueError("amount must be >= 0")
        self.apply_strategies()
        values = []
        for _ in range(amount):
            item = self._pull()
            if item.done:
                break
            values.append(item.value)
        return values

    def has_next(self) -> bool:
        """Return True if another occurrence is available, without consuming it."""
        self.apply_strategies()
        return self._front() is not None

    def to_list(self) -> list[Any]:
        """Drain the traversal into a list, bulk expanded in traverser order."""
        self.apply_strategies()
        return list(self._drain())

    def to_set(self) -> set[Any]:
        """Drain the traversal into a set of distinct values."""
        self.apply_strategies()
        return set(self._drain())

    def iterate(self) -> Traversal:
        """Drain the traversal for its side effects and return it."""
        self.apply_strategies()
        for _ in self._drain():
            pass
        return self

    async def next_async(self) -> TraversalItem:
        await self.apply_strategies_async()
        return self._pull()

    async def has_next_async(self) -> bool:
        await self.apply_strategies_async()
        return self._front() is not None

    async def to_list_async(self) -> list[Any]:
        await self.apply_strategies_async()
        return list(self._drain())

    async def to_set_async(self) -> set[Any]:
        await self.apply_strategies_async()
        return set(self._drain())

    async def iterate_async(self) -> Traversal:
        await self.apply_strategies_async()
        for _ in self._drain():
            pass
        return self

    def __iter__(self) -> TraversalIterator:
        return TraversalIterator(self)

    def __aiter__(self) -> TraversalIterator:
        return TraversalIterator(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.bytecode})"


class TraversalIterator:
    """Lazy single-pass iterator over a traversal's values.

    Supports both ``for`` and ``async for``. Each step is one ``next()`` on
    the underlying traversal, so exhaustion is permanent.
    """

    __slots__ = ("_traversal",)

    def __init__(self, traversal: Traversal) -> None:
        self._traversal = traversal

    @property
    def traversal(self) -> Traversal:
        return self._traversal

    def __iter__(self) -> TraversalIterator:
        return self

    def __next__(self) -> Any:
        item = self._traversal.next()
        if item.done:
            raise StopIteration
        return item.value

    def __aiter__(self) -> TraversalIterator:
        return self

    async def __anext__(self) -> Any:
        item = await self._traversal.next_async()
        if item.done:
            raise StopAsyncIteration
        return item.value
