"""Gremlin traversal engine.

Steps are recorded into portable bytecode as they are chained; nothing runs
until the traversal is consumed:

    Steps -> Bytecode -> TraversalStrategies (once) -> Traversers -> values

Strategies populate the traverser queue (for example by dispatching the
bytecode to a remote executor). Consumption pulls one occurrence at a time,
expanding each traverser's bulk in place.
"""

from pytraverse.process.bytecode import Bytecode, bind_argument
from pytraverse.process.enums import (
    Barrier,
    Cardinality,
    Column,
    Direction,
    EnumToken,
    GraphEnum,
    Operator,
    Order,
    Pick,
    Pop,
    Scope,
    T,
)
from pytraverse.process.errors import (
    AnonymousTraversalError,
    BytecodeFrozenError,
    MalformedTraverserError,
    TraversalError,
    TraversalStateError,
)
from pytraverse.process.graph_traversal import (
    AnonymousTraversalSource,
    GraphTraversal,
    GraphTraversalSource,
    __,
    traversal,
)
from pytraverse.process.strategies import TraversalStrategies, TraversalStrategy
from pytraverse.process.traversal import (
    AppliedState,
    Traversal,
    TraversalItem,
    TraversalIterator,
)
from pytraverse.process.traverser import Traverser

__all__ = [
    # Bytecode
    "Bytecode",
    "bind_argument",
    # Enumerations
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
    # Engine
    "Traversal",
    "TraversalItem",
    "TraversalIterator",
    "AppliedState",
    "Traverser",
    "TraversalStrategy",
    "TraversalStrategies",
    # DSL
    "traversal",
    "AnonymousTraversalSource",
    "GraphTraversalSource",
    "GraphTraversal",
    "__",
    # Errors
    "TraversalError",
    "AnonymousTraversalError",
    "BytecodeFrozenError",
    "TraversalStateError",
    "MalformedTraverserError",
]
