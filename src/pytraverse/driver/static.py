"""In-memory remote connection for tests and offline development."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pytraverse.driver.remote import RemoteTraversal, as_side_effects
from pytraverse.process.bytecode import Bytecode
from pytraverse.process.traverser import Traverser

ResultSource = Iterable[Any] | Callable[[Bytecode], Iterable[Any]]


class StaticRemoteConnection:
    """Connection that answers every submission from local data.

    ``results`` is either a fixed iterable or a function of the submitted
    bytecode. Each item is a ``Traverser`` or a bare value (bulk 1). Fresh
    traversers are built per submission, so one connection can serve many
    traversals.

    Attributes:
        submitted: Copies of every submitted bytecode, oldest first.
    """

    def __init__(
        self,
        results: ResultSource = (),
        *,
        side_effects: Mapping[str, Any] | None = None,
    ) -> None:
        self._results = results if callable(results) else list(results)
        self._side_effects = as_side_effects(side_effects)
        self.submitted: list[Bytecode] = []

    def submit(self, bytecode: Bytecode) -> RemoteTraversal:
        self.submitted.append(bytecode.copy())
        items = self._results(bytecode) if callable(self._results) else self._results
        return RemoteTraversal(
            traversers=[_as_traverser(item) for item in items],
            side_effects=self._side_effects,
        )

    async def submit_async(self, bytecode: Bytecode) -> RemoteTraversal:
        await asyncio.sleep(0)
        return self.submit(bytecode)

    def __repr__(self) -> str:
        return f"StaticRemoteConnection(submitted={len(self.submitted)})"


def _as_traverser(item: Any) -> Traverser:
    if isinstance(item, Traverser):
        return Traverser(item.value, item.bulk)
    return Traverser(item)
