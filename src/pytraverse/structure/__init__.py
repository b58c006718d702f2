"""Client-side graph structure."""

from pytraverse.structure.graph import Graph

__all__ = ["Graph"]
