"""Exceptions raised by the traversal engine."""

from __future__ import annotations


class TraversalError(Exception):
    """Base class for errors raised by pytraverse itself."""


class AnonymousTraversalError(TraversalError, TypeError):
    """Raised when a bound traversal is passed where a child traversal is expected.

    Child traversals must be spawned from the anonymous ``__`` factory. A
    traversal spawned from a graph-bound source is an executable query of its
    own and cannot be embedded in another traversal's bytecode.
    """


class BytecodeFrozenError(TraversalError, RuntimeError):
    """Raised when instructions are appended after strategies have been applied."""


class TraversalStateError(TraversalError, RuntimeError):
    """Raised when a traversal is consumed while its strategies are still applying."""


class MalformedTraverserError(TraversalError, ValueError):
    """Raised when a strategy produces a traverser the engine cannot iterate."""
