"""Graph handle that traversal sources bind to.

The graph data model itself lives in the remote executor. On the client a
``Graph`` only marks a traversal source (and every traversal it spawns) as
bound.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pytraverse.process.graph_traversal import GraphTraversalSource


class Graph:
    """Opaque client-side graph handle."""

    def traversal(self) -> GraphTraversalSource:
        """Return a traversal source bound to this graph with no strategies."""
        from pytraverse.process.graph_traversal import traversal

        return traversal().with_graph(self)

    def __repr__(self) -> str:
        return "graph[]"
