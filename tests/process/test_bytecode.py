"""Tests for Bytecode recording and argument binding."""

import pytest

from pytraverse.process import (
    AnonymousTraversalError,
    Bytecode,
    BytecodeFrozenError,
    EnumToken,
    Order,
    Scope,
    T,
    __,
    traversal,
)
from pytraverse.structure import Graph


class TestBytecodeRecording:
    """Test add_step / add_source."""

    def test_new_bytecode_is_empty(self):
        """A new Bytecode has no instructions."""
        bytecode = Bytecode()

        assert len(bytecode.source_instructions) == 0
        assert len(bytecode.step_instructions) == 0
        assert len(bytecode) == 0

    def test_steps_recorded_in_call_order(self):
        """Each add_step appends (name, *args)."""
        bytecode = Bytecode()

        bytecode.add_step("V")
        bytecode.add_step("out", "created")
        bytecode.add_step("has", "age", 29)

        assert list(bytecode.step_instructions) == [
            ("V",),
            ("out", "created"),
            ("has", "age", 29),
        ]
        assert len(bytecode.source_instructions) == 0

    def test_source_instructions_are_separate(self):
        """add_source writes to source_instructions only."""
        bytecode = Bytecode()

        bytecode.add_source("withBulk", False)
        bytecode.add_step("V")

        assert list(bytecode.source_instructions) == [("withBulk", False)]
        assert list(bytecode.step_instructions) == [("V",)]

    def test_scalars_stored_as_is(self):
        """Primitive arguments are not translated."""
        bytecode = Bytecode()

        bytecode.add_step("inject", 1, 2.5, "x", None, True)

        assert bytecode.step_instructions[0] == ("inject", 1, 2.5, "x", None, True)


class TestArgumentBinding:
    """Test translation of enum and traversal arguments."""

    def test_enum_becomes_token(self):
        """Enum members become EnumToken(type_name, element_name)."""
        bytecode = Bytecode()

        bytecode.add_step("by", "age", Order.desc)

        token = bytecode.step_instructions[0][2]
        assert isinstance(token, EnumToken)
        assert token.type_name == "Order"
        assert token.element_name == "desc"

    def test_keyword_enum_uses_gremlin_element_name(self):
        """Scope.global_ encodes as 'global'."""
        bytecode = Bytecode()

        bytecode.add_step("count", Scope.global_)

        assert bytecode.step_instructions[0][1] == EnumToken("Scope", "global")

    def test_anonymous_traversal_becomes_nested_bytecode(self):
        """An anonymous child is embedded as its own Bytecode."""
        child = __.out("knows").has("age", 29)
        bytecode = Bytecode()

        bytecode.add_step("where", child)

        nested = bytecode.step_instructions[0][1]
        assert isinstance(nested, Bytecode)
        assert nested is child.bytecode
        assert list(nested.step_instructions) == [("out", "knows"), ("has", "age", 29)]

    def test_nested_child_arguments_are_translated(self):
        """Enum arguments inside a child are already tokens."""
        child = __.values("age").order().by(Order.asc)
        bytecode = Bytecode()

        bytecode.add_step("local", child)

        nested = bytecode.step_instructions[0][1]
        assert nested.step_instructions[2] == ("by", EnumToken("Order", "asc"))

    def test_collections_are_translated_elementwise(self):
        """Enums and children inside lists and dicts are bound too."""
        bytecode = Bytecode()

        bytecode.add_step("project", [T.id, __.out()], {"k": Order.desc})

        listed, mapped = bytecode.step_instructions[0][1:]
        assert listed[0] == EnumToken("T", "id")
        assert isinstance(listed[1], Bytecode)
        assert mapped == {"k": EnumToken("Order", "desc")}

    def test_bound_traversal_rejected(self):
        """A traversal spawned from a bound source cannot be an argument."""
        g = traversal().with_graph(Graph())
        bytecode = Bytecode()

        with pytest.raises(AnonymousTraversalError):
            bytecode.add_step("where", g.V(1))

        assert len(bytecode.step_instructions) == 0

    def test_bound_traversal_rejected_inside_collection(self):
        """The anonymity check reaches into collection arguments."""
        g = traversal().with_graph(Graph())
        bytecode = Bytecode()

        with pytest.raises(AnonymousTraversalError):
            bytecode.add_step("union", [__.out(), g.V()])

    def test_construction_error_is_a_type_error(self):
        """AnonymousTraversalError is catchable as TypeError."""
        g = traversal().with_graph(Graph())

        with pytest.raises(TypeError):
            Bytecode().add_source("withSideEffect", "x", g.V())


class TestBytecodeEquality:
    """Test structural equality and copies."""

    def test_equal_when_instructions_equal(self):
        """Bytecodes with the same instructions are equal."""
        a = Bytecode()
        b = Bytecode()
        for bytecode in (a, b):
            bytecode.add_source("withBulk", False)
            bytecode.add_step("V")
            bytecode.add_step("order")
            bytecode.add_step("by", "age", Order.desc)

        assert a == b

    def test_not_equal_when_enum_differs(self):
        """Enum tokens compare by (type_name, element_name)."""
        a = Bytecode()
        b = Bytecode()
        a.add_step("by", Order.desc)
        b.add_step("by", Order.asc)

        assert a != b

    def test_nested_bytecode_compared_recursively(self):
        """Children with equal programs make equal parents."""
        a = Bytecode()
        b = Bytecode()
        a.add_step("where", __.out("knows"))
        b.add_step("where", __.out("knows"))

        assert a == b

        c = Bytecode()
        c.add_step("where", __.out("created"))
        assert a != c

    def test_bytecode_is_unhashable(self):
        """Mutable builders cannot be dict keys."""
        with pytest.raises(TypeError):
            hash(Bytecode())

    def test_copy_does_not_see_later_appends(self):
        """A copy is independent of the original."""
        original = Bytecode()
        original.add_step("V")

        clone = original.copy()
        original.add_step("out")
        clone.add_step("in")

        assert list(original.step_instructions) == [("V",), ("out",)]
        assert list(clone.step_instructions) == [("V",), ("in",)]


class TestBytecodeFreeze:
    """Test the frozen-after-apply invariant."""

    def test_frozen_bytecode_rejects_appends(self):
        """add_step and add_source raise once frozen."""
        bytecode = Bytecode()
        bytecode.add_step("V")
        bytecode.freeze()

        with pytest.raises(BytecodeFrozenError):
            bytecode.add_step("out")
        with pytest.raises(BytecodeFrozenError):
            bytecode.add_source("withBulk", False)

        assert list(bytecode.step_instructions) == [("V",)]

    def test_copy_of_frozen_bytecode_is_unfrozen(self):
        """Cloning is how a frozen program is extended."""
        bytecode = Bytecode()
        bytecode.freeze()

        clone = bytecode.copy()
        clone.add_step("V")

        assert bytecode.frozen
        assert not clone.frozen

    def test_freeze_reaches_nested_bytecode(self):
        """Children embedded directly or inside collections freeze with the parent."""
        direct = __.out("knows")
        listed = __.in_("created")
        bytecode = Bytecode()
        bytecode.add_step("where", direct)
        bytecode.add_step("union", [listed])

        bytecode.freeze()

        assert direct.bytecode.frozen
        assert listed.bytecode.frozen
        with pytest.raises(BytecodeFrozenError):
            direct.out("created")


class TestBytecodeText:
    """Test str() rendering."""

    def test_empty_bytecode_renders_empty(self):
        assert str(Bytecode()) == ""

    def test_steps_render_as_nested_lists(self):
        """Strings are quoted, enum tokens render as Type.element."""
        bytecode = Bytecode()
        bytecode.add_step("V")
        bytecode.add_step("by", "age", Order.desc)

        assert str(bytecode) == "[['V'], ['by', 'age', Order.desc]]"

    def test_source_instructions_render_first(self):
        bytecode = Bytecode()
        bytecode.add_source("withBulk", False)
        bytecode.add_step("V")

        assert str(bytecode) == "[['withBulk', False]][['V']]"
