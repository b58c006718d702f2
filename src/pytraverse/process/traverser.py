"""Traverser - the (value, bulk) unit flowing through iteration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pytraverse.process.errors import MalformedTraverserError


@dataclass
class Traverser:
    """A result value with a multiplicity.

    A traverser ``(v, b)`` stands for ``b`` consecutive occurrences of ``v``.
    The engine decrements ``bulk`` in place as occurrences are pulled.

    Attributes:
        value: Opaque result object.
        bulk: Remaining occurrences, at least 1 when constructed.
    """

    value: Any
    bulk: int = 1

    def __post_init__(self) -> None:
        if isinstance(self.bulk, bool) or not isinstance(self.bulk, int):
            raise MalformedTraverserError(
                f"Traverser bulk must be an int; got {type(self.bulk).__name__}"
            )
        if self.bulk < 1:
            raise MalformedTraverserError(f"Traverser bulk must be >= 1; got {self.bulk}")
