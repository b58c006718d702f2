"""Evaluate traversals locally against the TinkerPop "modern" toy graph.

``ModernGraphStrategy`` reads a traversal's bytecode and produces bulked
traversers without any remote round trip. Identical results are merged into
one traverser, so ``g.V().out("created").values("name")`` yields a single
``("lop", 3)`` traverser that still iterates as three ``"lop"`` values.

Only a handful of steps are understood: ``V``, ``out``, ``in``, ``hasLabel``,
``has`` (equality), ``values`` and ``count``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pytraverse.process import Traversal, Traverser, traversal
from pytraverse.structure import Graph


@dataclass(frozen=True)
class Vertex:
    id: int
    label: str
    properties: tuple[tuple[str, Any], ...]

    def get(self, key: str) -> Any:
        return dict(self.properties).get(key)


VERTICES = {
    1: Vertex(1, "person", (("name", "marko"), ("age", 29))),
    2: Vertex(2, "person", (("name", "vadas"), ("age", 27))),
    3: Vertex(3, "software", (("name", "lop"), ("lang", "java"))),
    4: Vertex(4, "person", (("name", "josh"), ("age", 32))),
    5: Vertex(5, "software", (("name", "ripple"), ("lang", "java"))),
    6: Vertex(6, "person", (("name", "peter"), ("age", 35))),
}

# (out_vertex, label, in_vertex)
EDGES = (
    (1, "knows", 2),
    (1, "knows", 4),
    (1, "created", 3),
    (4, "created", 5),
    (4, "created", 3),
    (6, "created", 3),
)

Stream = list[tuple[Any, int]]


class ModernGraphStrategy:
    """Strategy that executes the supported steps in-process."""

    def apply(self, traversal: Traversal) -> None:
        stream: Stream = []
        for name, *args in traversal.bytecode.step_instructions:
            handler = _STEPS.get(name)
            if handler is None:
                raise NotImplementedError(f"ModernGraphStrategy does not support '{name}'")
            stream = handler(stream, args)
        traversal.traversers = [Traverser(value, bulk) for value, bulk in _merge(stream)]


def _merge(stream: Stream) -> Stream:
    """Combine equal values into one entry, keeping first-seen order."""
    merged: dict[Any, int] = {}
    for value, bulk in stream:
        merged[value] = merged.get(value, 0) + bulk
    return list(merged.items())


def _v(stream: Stream, args: list[Any]) -> Stream:
    ids = args or list(VERTICES)
    return [(VERTICES[i], 1) for i in ids if i in VERTICES]


def _adjacent(stream: Stream, labels: list[Any], *, outgoing: bool) -> Stream:
    result: Stream = []
    for vertex, bulk in stream:
        for out_id, label, in_id in EDGES:
            if labels and label not in labels:
                continue
            if outgoing and out_id == vertex.id:
                result.append((VERTICES[in_id], bulk))
            elif not outgoing and in_id == vertex.id:
                result.append((VERTICES[out_id], bulk))
    return result


def _has_label(stream: Stream, labels: list[Any]) -> Stream:
    return [(v, b) for v, b in stream if v.label in labels]


def _has(stream: Stream, args: list[Any]) -> Stream:
    key, value = args
    return [(v, b) for v, b in stream if v.get(key) == value]


def _values(stream: Stream, keys: list[Any]) -> Stream:
    return [(v.get(k), b) for v, b in stream for k in keys if v.get(k) is not None]


def _count(stream: Stream, args: list[Any]) -> Stream:
    return [(sum(b for _, b in stream), 1)]


_STEPS = {
    "V": _v,
    "out": lambda stream, args: _adjacent(stream, args, outgoing=True),
    "in": lambda stream, args: _adjacent(stream, args, outgoing=False),
    "hasLabel": _has_label,
    "has": _has,
    "values": _values,
    "count": _count,
}


def modern():
    """Return a traversal source over the modern graph."""
    return traversal().with_graph(Graph()).with_strategies(ModernGraphStrategy())


if __name__ == "__main__":
    g = modern()
    print(g.V().out("created").values("name").to_list())
    print(g.V().has_label("person").count().next().value)
