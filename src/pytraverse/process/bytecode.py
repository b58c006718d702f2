"""Bytecode - the portable instruction list of a traversal.

A traversal is recorded as two ordered instruction lists. Source instructions
configure the traversal source (``withBulk``, ``withSideEffect``...); step
instructions are the steps in call order. Each instruction is a tuple
``(name, *args)`` whose arguments have already been bound:

- enum members become ``EnumToken(type_name, element_name)``
- anonymous child traversals become their own ``Bytecode``
- everything else is stored as given

Both lists are persistent vectors, so copying a bytecode is O(1) and a copy
never observes later appends made to the original.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pyrsistent import PVector, pvector

from pytraverse.process.enums import EnumToken, GraphEnum
from pytraverse.process.errors import AnonymousTraversalError, BytecodeFrozenError

if TYPE_CHECKING:
    from collections.abc import Iterable

Instruction = tuple[Any, ...]


class Bytecode:
    """Append-only instruction list builder.

    Attributes:
        source_instructions: Traversal-source instructions, oldest first.
        step_instructions: Step instructions, in call order.
    """

    __slots__ = ("_source_instructions", "_step_instructions", "_frozen")

    def __init__(self, bytecode: Bytecode | None = None) -> None:
        """Create an empty bytecode, or an unfrozen copy of ``bytecode``."""
        if bytecode is None:
            self._source_instructions: PVector[Instruction] = pvector()
            self._step_instructions: PVector[Instruction] = pvector()
        else:
            self._source_instructions = bytecode._source_instructions
            self._step_instructions = bytecode._step_instructions
        self._frozen = False

    @property
    def source_instructions(self) -> PVector[Instruction]:
        return self._source_instructions

    @property
    def step_instructions(self) -> PVector[Instruction]:
        return self._step_instructions

    @property
    def frozen(self) -> bool:
        """True once the owning traversal has applied its strategies."""
        return self._frozen

    def freeze(self) -> None:
        """Freeze this bytecode and every child bytecode embedded in it."""
        self._frozen = True
        for instruction in (*self._source_instructions, *self._step_instructions):
            for arg in instruction[1:]:
                _freeze_nested(arg)

    def copy(self) -> Bytecode:
        """Return an unfrozen copy sharing structure with this bytecode."""
        return Bytecode(self)

    def add_source(self, source_name: str, *args: Any) -> None:
        """Append a traversal-source instruction."""
        self._require_unfrozen(source_name)
        self._source_instructions = self._source_instructions.append(
            _instruction(source_name, args)
        )

    def add_step(self, step_name: str, *args: Any) -> None:
        """Append a step instruction."""
        self._require_unfrozen(step_name)
        self._step_instructions = self._step_instructions.append(_instruction(step_name, args))

    def _require_unfrozen(self, name: str) -> None:
        if self._frozen:
            raise BytecodeFrozenError(
                f"Cannot add '{name}': strategies have already been applied to this traversal"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bytecode):
            return NotImplemented
        return (
            self._source_instructions == other._source_instructions
            and self._step_instructions == other._step_instructions
        )

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self._source_instructions) + len(self._step_instructions)

    def __str__(self) -> str:
        text = ""
        if self._source_instructions:
            text += _format_instructions(self._source_instructions)
        if self._step_instructions:
            text += _format_instructions(self._step_instructions)
        return text

    def __repr__(self) -> str:
        return (
            f"Bytecode(source_instructions={list(self._source_instructions)!r}, "
            f"step_instructions={list(self._step_instructions)!r})"
        )


def _instruction(name: str, args: Iterable[Any]) -> Instruction:
    return (name, *(bind_argument(arg) for arg in args))


def bind_argument(arg: Any) -> Any:
    """Translate one step argument into its bytecode form.

    Raises:
        AnonymousTraversalError: ``arg`` (or a traversal nested in a
            collection argument) is bound to a graph.
    """
    # Imported here to avoid a circular import; traversal.py builds on Bytecode.
    from pytraverse.process.traversal import Traversal

    if isinstance(arg, GraphEnum):
        return arg.token
    if isinstance(arg, Traversal):
        if not arg.is_anonymous:
            raise AnonymousTraversalError(
                f"The child traversal of {arg!r} was not spawned anonymously - use "
                "the __ class rather than a TraversalSource to construct the child "
                "traversal"
            )
        return arg.bytecode
    if isinstance(arg, dict):
        return {bind_argument(k): bind_argument(v) for k, v in arg.items()}
    if isinstance(arg, list):
        return [bind_argument(item) for item in arg]
    if isinstance(arg, tuple):
        return tuple(bind_argument(item) for item in arg)
    if isinstance(arg, (set, frozenset)):
        return type(arg)(bind_argument(item) for item in arg)
    return arg


def _freeze_nested(value: Any) -> None:
    if isinstance(value, Bytecode):
        if not value.frozen:
            value.freeze()
    elif isinstance(value, dict):
        for key, item in value.items():
            _freeze_nested(key)
            _freeze_nested(item)
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            _freeze_nested(item)


def _format_instructions(instructions: Iterable[Instruction]) -> str:
    return "[" + ", ".join(_format_instruction(i) for i in instructions) + "]"


def _format_instruction(instruction: Instruction) -> str:
    return "[" + ", ".join(_format_value(v) for v in instruction) + "]"


def _format_value(value: Any) -> str:
    if isinstance(value, (Bytecode, EnumToken)):
        return str(value)
    return repr(value)
