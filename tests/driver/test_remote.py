"""Tests for RemoteStrategy and StaticRemoteConnection."""

from __future__ import annotations

import pytest

from pytraverse.driver import RemoteStrategy, RemoteTraversal, StaticRemoteConnection
from pytraverse.process import Bytecode, Order, Traverser, __, traversal
from tests.conftest import run


class _BrokenConnection:
    def submit(self, bytecode):
        raise ConnectionError("connection refused")


class _BlockingConnection:
    """Connection without submit_async; the async path runs it in a thread."""

    def __init__(self):
        self.calls = 0

    def submit(self, bytecode):
        self.calls += 1
        return RemoteTraversal(traversers=[Traverser("threaded", 2)])


class TestRemoteTraversalSource:
    """Test traversal().with_remote(...)."""

    def test_with_remote_installs_remote_strategy(self):
        g = traversal().with_remote(StaticRemoteConnection())

        (strategy,) = g.strategies.strategies
        assert isinstance(strategy, RemoteStrategy)
        assert g.graph is not None

    def test_end_to_end_to_list(self):
        connection = StaticRemoteConnection([Traverser("marko", 2), "josh"])
        g = traversal().with_remote(connection)

        result = g.V().out("created").to_list()

        assert result == ["marko", "marko", "josh"]
        assert connection.submitted == [_expected_bytecode()]

    def test_submits_once_per_traversal(self):
        connection = StaticRemoteConnection([1, 2, 3])
        g = traversal().with_remote(connection)
        t = g.V()

        t.next()
        t.to_list()
        t.iterate()

        assert len(connection.submitted) == 1

    def test_connection_serves_many_traversals(self):
        """Fresh traversers per submission, so bulk is not shared."""
        connection = StaticRemoteConnection([Traverser("x", 2)])
        g = traversal().with_remote(connection)

        assert g.V().to_list() == ["x", "x"]
        assert g.V().to_list() == ["x", "x"]

    def test_results_may_depend_on_bytecode(self):
        def answer(bytecode: Bytecode):
            return [len(bytecode.step_instructions)]

        g = traversal().with_remote(StaticRemoteConnection(answer))

        assert g.V().out().out().to_list() == [3]

    def test_nested_bytecode_submitted(self):
        connection = StaticRemoteConnection()
        g = traversal().with_remote(connection)

        g.V().where(__.out("knows")).order().by("age", Order.desc).iterate()

        (submitted,) = connection.submitted
        nested = submitted.step_instructions[1][1]
        assert list(nested.step_instructions) == [("out", "knows")]

    def test_side_effects_published(self):
        g = traversal().with_remote(StaticRemoteConnection(side_effects={"x": [1]}))
        t = g.V()

        t.iterate()

        assert t.side_effects["x"] == [1]

    def test_connection_failure_propagates(self):
        g = traversal().with_remote(_BrokenConnection())

        with pytest.raises(ConnectionError):
            g.V().to_list()

    def test_remote_strategy_skips_populated_traversal(self):
        """A strategy earlier in the pipeline may answer locally."""
        connection = StaticRemoteConnection(["remote"])

        class _Local:
            def apply(self, traversal):
                traversal.traversers = [Traverser("local")]

        g = traversal().with_graph(object()).with_strategies(_Local()).with_remote(connection)

        assert g.V().to_list() == ["local"]
        assert connection.submitted == []


class TestRemoteAsync:
    """Test the suspending remote path."""

    def test_async_uses_submit_async(self):
        connection = StaticRemoteConnection(["a", Traverser("b", 2)])
        g = traversal().with_remote(connection)

        async def _collect():
            return [value async for value in g.V()]

        assert run(_collect()) == ["a", "b", "b"]
        assert len(connection.submitted) == 1

    def test_async_runs_blocking_connection_in_thread(self):
        connection = _BlockingConnection()
        g = traversal().with_remote(connection)

        assert run(g.V().to_list_async()) == ["threaded", "threaded"]
        assert connection.calls == 1


def _expected_bytecode() -> Bytecode:
    bytecode = Bytecode()
    bytecode.add_step("V")
    bytecode.add_step("out", "created")
    return bytecode
