"""Remote execution boundary.

A ``RemoteConnection`` accepts bytecode and returns the traversers the remote
executor produced. ``RemoteStrategy`` is the strategy that dispatches a
traversal over such a connection; sources install it via
``traversal().with_remote(connection)``. Serialization and transport belong
to the connection implementation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from pyrsistent import PMap, pmap

if TYPE_CHECKING:
    from pytraverse.process.bytecode import Bytecode
    from pytraverse.process.traversal import Traversal
    from pytraverse.process.traverser import Traverser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteTraversal:
    """Results returned by a remote executor for one submission."""

    traversers: Iterable[Traverser]
    side_effects: PMap = field(default_factory=pmap)


class RemoteConnection(Protocol):
    """Connection API consumed by ``RemoteStrategy``.

    Connections that can suspend instead of blocking also define
    ``async def submit_async(bytecode) -> RemoteTraversal``.
    """

    def submit(self, bytecode: Bytecode) -> RemoteTraversal:
        """Execute ``bytecode`` remotely and return its results."""


class RemoteStrategy:
    """Strategy that executes the traversal on a remote connection."""

    def __init__(self, connection: RemoteConnection) -> None:
        self.connection = connection

    def apply(self, traversal: Traversal) -> None:
        if traversal.traversers is not None:
            return
        logger.debug("Submitting %s to %r", traversal.bytecode, self.connection)
        self._install(traversal, self.connection.submit(traversal.bytecode))

    async def apply_async(self, traversal: Traversal) -> None:
        if traversal.traversers is not None:
            return
        logger.debug("Submitting %s to %r", traversal.bytecode, self.connection)
        submit_async = getattr(self.connection, "submit_async", None)
        if submit_async is not None:
            result = await submit_async(traversal.bytecode)
        else:
            result = await asyncio.to_thread(self.connection.submit, traversal.bytecode)
        self._install(traversal, result)

    @staticmethod
    def _install(traversal: Traversal, result: RemoteTraversal) -> None:
        traversal.traversers = result.traversers
        traversal.side_effects = result.side_effects

    def __repr__(self) -> str:
        return f"RemoteStrategy({self.connection!r})"


def as_side_effects(side_effects: Mapping[str, Any] | None) -> PMap:
    """Freeze a side-effect mapping for a ``RemoteTraversal``."""
    return pmap(side_effects or {})
