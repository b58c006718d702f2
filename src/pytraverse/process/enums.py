"""Enumerated Gremlin constants used as step arguments.

Each enumerable domain is a closed ``Enum``. A member knows its own bytecode
encoding, an ``EnumToken`` of ``(type_name, element_name)``, so bytecode
binding never has to inspect runtime type tags.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class EnumToken:
    """Bytecode encoding of an enum argument, e.g. ``EnumToken("Order", "desc")``."""

    type_name: str
    element_name: str

    def __str__(self) -> str:
        return f"{self.type_name}.{self.element_name}"


class GraphEnum(Enum):
    """Base for Gremlin enumerations.

    Member values are the Gremlin element names and the class name is the
    Gremlin type name.
    """

    @classmethod
    def type_name(cls) -> str:
        return cls.__name__

    @property
    def element_name(self) -> str:
        return self._value_

    @property
    def token(self) -> EnumToken:
        return EnumToken(self.type_name(), self.element_name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.name}"


class Order(GraphEnum):
    """Sort direction for ``order().by()``."""

    asc = "asc"
    desc = "desc"
    shuffle = "shuffle"


class Scope(GraphEnum):
    """Whether a step operates on the whole stream or on each collection locally."""

    global_ = "global"
    local = "local"


class T(GraphEnum):
    """Element tokens addressable like properties."""

    id = "id"
    label = "label"
    key = "key"
    value = "value"


class Column(GraphEnum):
    """Map entry columns."""

    keys = "keys"
    values = "values"


class Direction(GraphEnum):
    """Edge direction relative to a vertex."""

    OUT = "OUT"
    IN = "IN"
    BOTH = "BOTH"


class Cardinality(GraphEnum):
    """Vertex property cardinality for ``property()``."""

    single = "single"
    list_ = "list"
    set_ = "set"


class Pop(GraphEnum):
    """Which labeled object ``select()`` returns when a label repeats."""

    first = "first"
    last = "last"
    all_ = "all"
    mixed = "mixed"


class Barrier(GraphEnum):
    """Barrier kinds accepted by ``barrier()``."""

    normSack = "normSack"


class Operator(GraphEnum):
    """Reducing operators for sacks and side-effects."""

    sum_ = "sum"
    minus = "minus"
    mult = "mult"
    div = "div"
    min_ = "min"
    max_ = "max"
    assign = "assign"
    and_ = "and"
    or_ = "or"
    addAll = "addAll"
    sumLong = "sumLong"


class Pick(GraphEnum):
    """Option tokens for ``choose().option()``."""

    any_ = "any"
    none = "none"


__all__ = [
    "EnumToken",
    "GraphEnum",
    "Order",
    "Scope",
    "T",
    "Column",
    "Direction",
    "Cardinality",
    "Pop",
    "Barrier",
    "Operator",
    "Pick",
]
