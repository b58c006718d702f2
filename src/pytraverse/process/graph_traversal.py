"""Gremlin step DSL.

``GraphTraversalSource`` spawns bound traversals (``g.V()``), ``__`` spawns
anonymous ones (``__.out("knows")``) for use as step arguments, and
``GraphTraversal`` records each chained step into its bytecode. Python method
names are snake_case; the bytecode always carries the Gremlin step name
(``has_label`` records ``hasLabel``, ``in_`` records ``in``).

Example:
    ```python
    g = traversal().with_graph(Graph())
    t = g.V().has_label("person").where(__.out("created")).values("name")
    t.bytecode.step_instructions[2]
    # ('where', Bytecode(...))
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pytraverse.process.bytecode import Bytecode
from pytraverse.process.strategies import TraversalStrategies
from pytraverse.process.traversal import Traversal

if TYPE_CHECKING:
    from pytraverse.driver.remote import RemoteConnection
    from pytraverse.process.strategies import TraversalStrategy
    from pytraverse.structure.graph import Graph


class GraphTraversalSource:
    """Entry point for bound traversals over one graph.

    Configuration methods (``with_*``) return a new source and leave the
    receiver untouched. Spawn methods (``V``, ``E``, ``add_v``, ``add_e``,
    ``inject``) start a traversal carrying a copy of the source bytecode and
    of the strategies.
    """

    def __init__(
        self,
        graph: Graph,
        strategies: TraversalStrategies,
        bytecode: Bytecode | None = None,
    ) -> None:
        self.graph = graph
        self.strategies = strategies
        self.bytecode = bytecode if bytecode is not None else Bytecode()

    def clone(self) -> GraphTraversalSource:
        return type(self)(self.graph, self.strategies.copy(), self.bytecode.copy())

    def get_graph_traversal(self) -> GraphTraversal:
        """Return an empty bound traversal inheriting this source's configuration."""
        return GraphTraversal(self.graph, self.strategies.copy(), self.bytecode.copy())

    # Configuration

    def with_(self, *args: Any) -> GraphTraversalSource:
        source = self.clone()
        source.bytecode.add_source("with", *args)
        return source

    def with_bulk(self, *args: Any) -> GraphTraversalSource:
        source = self.clone()
        source.bytecode.add_source("withBulk", *args)
        return source

    def with_path(self, *args: Any) -> GraphTraversalSource:
        source = self.clone()
        source.bytecode.add_source("withPath", *args)
        return source

    def with_sack(self, *args: Any) -> GraphTraversalSource:
        source = self.clone()
        source.bytecode.add_source("withSack", *args)
        return source

    def with_side_effect(self, *args: Any) -> GraphTraversalSource:
        source = self.clone()
        source.bytecode.add_source("withSideEffect", *args)
        return source

    def with_strategies(self, *strategies: TraversalStrategy) -> GraphTraversalSource:
        """Return a source whose traversals also apply ``strategies``, in order."""
        source = self.clone()
        for strategy in strategies:
            source.strategies.add_strategy(strategy)
        return source

    def with_remote(self, connection: RemoteConnection) -> GraphTraversalSource:
        """Return a source whose traversals execute on ``connection``."""
        from pytraverse.driver.remote import RemoteStrategy

        return self.with_strategies(RemoteStrategy(connection))

    # Spawn steps

    def E(self, *args: Any) -> GraphTraversal:
        traversal = self.get_graph_traversal()
        traversal.bytecode.add_step("E", *args)
        return traversal

    def V(self, *args: Any) -> GraphTraversal:
        traversal = self.get_graph_traversal()
        traversal.bytecode.add_step("V", *args)
        return traversal

    def add_e(self, *args: Any) -> GraphTraversal:
        traversal = self.get_graph_traversal()
        traversal.bytecode.add_step("addE", *args)
        return traversal

    def add_v(self, *args: Any) -> GraphTraversal:
        traversal = self.get_graph_traversal()
        traversal.bytecode.add_step("addV", *args)
        return traversal

    def inject(self, *args: Any) -> GraphTraversal:
        traversal = self.get_graph_traversal()
        traversal.bytecode.add_step("inject", *args)
        return traversal

    def __repr__(self) -> str:
        return f"graphtraversalsource[{self.graph!r}]"


class GraphTraversal(Traversal):
    """Traversal with one chaining method per Gremlin step."""

    def clone(self) -> GraphTraversal:
        """Return an unapplied copy with its own bytecode and strategies."""
        return type(self)(self.graph, self.strategies.copy(), self.bytecode.copy())

    def _add(self, step_name: str, args: tuple[Any, ...]) -> GraphTraversal:
        self.bytecode.add_step(step_name, *args)
        return self

    def E(self, *args: Any) -> GraphTraversal:
        return self._add("E", args)

    def V(self, *args: Any) -> GraphTraversal:
        return self._add("V", args)

    def add_e(self, *args: Any) -> GraphTraversal:
        return self._add("addE", args)

    def add_v(self, *args: Any) -> GraphTraversal:
        return self._add("addV", args)

    def aggregate(self, *args: Any) -> GraphTraversal:
        return self._add("aggregate", args)

    def and_(self, *args: Any) -> GraphTraversal:
        return self._add("and", args)

    def as_(self, *args: Any) -> GraphTraversal:
        return self._add("as", args)

    def barrier(self, *args: Any) -> GraphTraversal:
        return self._add("barrier", args)

    def both(self, *args: Any) -> GraphTraversal:
        return self._add("both", args)

    def both_e(self, *args: Any) -> GraphTraversal:
        return self._add("bothE", args)

    def both_v(self, *args: Any) -> GraphTraversal:
        return self._add("bothV", args)

    def by(self, *args: Any) -> GraphTraversal:
        return self._add("by", args)

    def cap(self, *args: Any) -> GraphTraversal:
        return self._add("cap", args)

    def choose(self, *args: Any) -> GraphTraversal:
        return self._add("choose", args)

    def coalesce(self, *args: Any) -> GraphTraversal:
        return self._add("coalesce", args)

    def constant(self, *args: Any) -> GraphTraversal:
        return self._add("constant", args)

    def count(self, *args: Any) -> GraphTraversal:
        return self._add("count", args)

    def dedup(self, *args: Any) -> GraphTraversal:
        return self._add("dedup", args)

    def drop(self, *args: Any) -> GraphTraversal:
        return self._add("drop", args)

    def element_map(self, *args: Any) -> GraphTraversal:
        return self._add("elementMap", args)

    def emit(self, *args: Any) -> GraphTraversal:
        return self._add("emit", args)

    def fold(self, *args: Any) -> GraphTraversal:
        return self._add("fold", args)

    def from_(self, *args: Any) -> GraphTraversal:
        return self._add("from", args)

    def group(self, *args: Any) -> GraphTraversal:
        return self._add("group", args)

    def group_count(self, *args: Any) -> GraphTraversal:
        return self._add("groupCount", args)

    def has(self, *args: Any) -> GraphTraversal:
        return self._add("has", args)

    def has_id(self, *args: Any) -> GraphTraversal:
        return self._add("hasId", args)

    def has_key(self, *args: Any) -> GraphTraversal:
        return self._add("hasKey", args)

    def has_label(self, *args: Any) -> GraphTraversal:
        return self._add("hasLabel", args)

    def has_not(self, *args: Any) -> GraphTraversal:
        return self._add("hasNot", args)

    def id_(self, *args: Any) -> GraphTraversal:
        return self._add("id", args)

    def identity(self, *args: Any) -> GraphTraversal:
        return self._add("identity", args)

    def in_(self, *args: Any) -> GraphTraversal:
        return self._add("in", args)

    def in_e(self, *args: Any) -> GraphTraversal:
        return self._add("inE", args)

    def in_v(self, *args: Any) -> GraphTraversal:
        return self._add("inV", args)

    def inject(self, *args: Any) -> GraphTraversal:
        return self._add("inject", args)

    def is_(self, *args: Any) -> GraphTraversal:
        return self._add("is", args)

    def key(self, *args: Any) -> GraphTraversal:
        return self._add("key", args)

    def label(self, *args: Any) -> GraphTraversal:
        return self._add("label", args)

    def limit(self, *args: Any) -> GraphTraversal:
        return self._add("limit", args)

    def local(self, *args: Any) -> GraphTraversal:
        return self._add("local", args)

    def loops(self, *args: Any) -> GraphTraversal:
        return self._add("loops", args)

    def map(self, *args: Any) -> GraphTraversal:
        return self._add("map", args)

    def max_(self, *args: Any) -> GraphTraversal:
        return self._add("max", args)

    def mean(self, *args: Any) -> GraphTraversal:
        return self._add("mean", args)

    def min_(self, *args: Any) -> GraphTraversal:
        return self._add("min", args)

    def none(self, *args: Any) -> GraphTraversal:
        return self._add("none", args)

    def not_(self, *args: Any) -> GraphTraversal:
        return self._add("not", args)

    def option(self, *args: Any) -> GraphTraversal:
        return self._add("option", args)

    def optional(self, *args: Any) -> GraphTraversal:
        return self._add("optional", args)

    def or_(self, *args: Any) -> GraphTraversal:
        return self._add("or", args)

    def order(self, *args: Any) -> GraphTraversal:
        return self._add("order", args)

    def other_v(self, *args: Any) -> GraphTraversal:
        return self._add("otherV", args)

    def out(self, *args: Any) -> GraphTraversal:
        return self._add("out", args)

    def out_e(self, *args: Any) -> GraphTraversal:
        return self._add("outE", args)

    def out_v(self, *args: Any) -> GraphTraversal:
        return self._add("outV", args)

    def path(self, *args: Any) -> GraphTraversal:
        return self._add("path", args)

    def project(self, *args: Any) -> GraphTraversal:
        return self._add("project", args)

    def properties(self, *args: Any) -> GraphTraversal:
        return self._add("properties", args)

    def property(self, *args: Any) -> GraphTraversal:
        return self._add("property", args)

    def range_(self, *args: Any) -> GraphTraversal:
        return self._add("range", args)

    def repeat(self, *args: Any) -> GraphTraversal:
        return self._add("repeat", args)

    def sack(self, *args: Any) -> GraphTraversal:
        return self._add("sack", args)

    def select(self, *args: Any) -> GraphTraversal:
        return self._add("select", args)

    def side_effect(self, *args: Any) -> GraphTraversal:
        return self._add("sideEffect", args)

    def simple_path(self, *args: Any) -> GraphTraversal:
        return self._add("simplePath", args)

    def skip(self, *args: Any) -> GraphTraversal:
        return self._add("skip", args)

    def store(self, *args: Any) -> GraphTraversal:
        return self._add("store", args)

    def sum_(self, *args: Any) -> GraphTraversal:
        return self._add("sum", args)

    def tail(self, *args: Any) -> GraphTraversal:
        return self._add("tail", args)

    def times(self, *args: Any) -> GraphTraversal:
        return self._add("times", args)

    def to(self, *args: Any) -> GraphTraversal:
        return self._add("to", args)

    def unfold(self, *args: Any) -> GraphTraversal:
        return self._add("unfold", args)

    def union(self, *args: Any) -> GraphTraversal:
        return self._add("union", args)

    def until(self, *args: Any) -> GraphTraversal:
        return self._add("until", args)

    def value(self, *args: Any) -> GraphTraversal:
        return self._add("value", args)

    def value_map(self, *args: Any) -> GraphTraversal:
        return self._add("valueMap", args)

    def values(self, *args: Any) -> GraphTraversal:
        return self._add("values", args)

    def where(self, *args: Any) -> GraphTraversal:
        return self._add("where", args)

    def with_(self, *args: Any) -> GraphTraversal:
        return self._add("with", args)


class __:  # noqa: N801
    """Anonymous traversal factory.

    Every method starts a fresh graph-less ``GraphTraversal`` with its own
    empty strategy pipeline, for use as a step argument::

        g.V().where(__.out("created").has("lang", "java"))
    """

    @classmethod
    def start(cls) -> GraphTraversal:
        return GraphTraversal(None, TraversalStrategies(), Bytecode())


def _spawner(method_name: str) -> classmethod:
    def spawn(cls: type[__], *args: Any) -> GraphTraversal:
        return getattr(cls.start(), method_name)(*args)

    spawn.__name__ = method_name
    spawn.__qualname__ = f"__.{method_name}"
    spawn.__doc__ = f"Start an anonymous traversal with ``{method_name}``."
    return classmethod(spawn)


# Every GraphTraversal step is also an anonymous start step.
for _name, _member in list(vars(GraphTraversal).items()):
    if not _name.startswith("_") and _name != "clone" and callable(_member):
        setattr(__, _name, _spawner(_name))
del _name, _member


class AnonymousTraversalSource:
    """Builds a ``GraphTraversalSource`` once the graph or connection is known."""

    def __init__(self, traversal_source_class: type[GraphTraversalSource] = GraphTraversalSource):
        self.traversal_source_class = traversal_source_class

    def with_graph(self, graph: Graph) -> GraphTraversalSource:
        return self.traversal_source_class(graph, TraversalStrategies())

    def with_remote(self, connection: RemoteConnection) -> GraphTraversalSource:
        from pytraverse.structure.graph import Graph

        return self.with_graph(Graph()).with_remote(connection)


def traversal(
    traversal_source_class: type[GraphTraversalSource] = GraphTraversalSource,
) -> AnonymousTraversalSource:
    """Begin building a traversal source.

    Example:
        ```python
        g = traversal().with_remote(connection)
        g.V().out("created").to_list()
        ```
    """
    return AnonymousTraversalSource(traversal_source_class)
