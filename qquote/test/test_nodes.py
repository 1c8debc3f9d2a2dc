# -*- coding: utf-8 -*-

import pickle

from ..core import UnrepresentableValue
from ..markers import Unquote, Splice
from ..nodes import (Literal, Reference, Call, Pairlist, Arg,
                     to_node, to_nodes, is_constant, node_name)


def test_structural_equality():
    assert Literal(1) == Literal(1)
    assert hash(Literal(1)) == hash(Literal(1))
    assert Reference("x") == Reference("x")
    assert Reference("x") != Reference("y")
    assert Literal("x") != Reference("x")

    # literals of different types never compare equal, even if Python's `==` says so
    assert Literal(1) != Literal(True)
    assert Literal(1) != Literal(1.0)

    a = Call(Reference("f"), [Literal(1), ("k", Reference("y"))])
    b = Call(Reference("f"), [Literal(1), ("k", Reference("y"))])
    assert a == b
    assert hash(a) == hash(b)
    assert a != Call(Reference("f"), [Literal(1), ("j", Reference("y"))])
    assert a != Call(Reference("f"), [("k", Reference("y")), Literal(1)])  # order matters


def test_construction():
    assert Literal([1, [2, 3]]).value == (1, (2, 3))
    assert Literal([1, 2]) == Literal((1, 2))

    call = Call(Reference("f"), [Literal(1), ("k", Reference("y")), Arg(None, Literal(2))])
    assert len(call.args) == 3
    assert call.args[0].name is None
    assert call.args[1].name == "k"
    name, value = call.args[1]
    assert name == "k" and value == Reference("y")
    assert list(call.children()) == [Reference("f"), Literal(1), Reference("y"), Literal(2)]

    # names need not be unique
    p = Pairlist([("a", Literal(1)), ("a", Literal(2))])
    assert len(p) == 2
    assert [arg.name for arg in p] == ["a", "a"]

    # a non-Reference head models an inlined function
    inlined = Call(Literal(len), [Literal("abc")])
    assert inlined.head.value is len


def test_invalid_construction():
    for thunk in (lambda: Reference(42),
                  lambda: Call(),
                  lambda: Call("f", []),
                  lambda: Call(Reference("f"), [42]),
                  lambda: Arg(42, Literal(1)),
                  lambda: Arg("k", 42),
                  lambda: Literal(Unquote(Literal(1))),
                  lambda: Literal([1, [Unquote(Literal(1))]]),
                  lambda: Literal((Splice(Literal(())),))):
        try:
            thunk()
        except TypeError:
            pass
        else:
            assert False


def test_immutability():
    ref = Reference("x")
    try:
        ref.name = "y"
    except AttributeError:
        pass
    else:
        assert False
    assert ref.name == "x"

    call = Call(Reference("f"), [Literal(1)])
    try:
        del call.head
    except AttributeError:
        pass
    else:
        assert False


def test_pickle():
    tree = Call(Reference("f"), [Literal(1), ("k", Pairlist([("a", Reference("b"))]))])
    assert pickle.loads(pickle.dumps(tree)) == tree


def test_to_node():
    assert to_node(42) == Literal(42)
    assert to_node("hello") == Literal("hello")
    assert to_node(None) == Literal(None)
    assert to_node([1, (2, "three")]) == Literal((1, (2, "three")))
    ref = Reference("x")
    assert to_node(ref) is ref

    # callables are inlined
    assert to_node(len) == Literal(len)

    for value in (object(), {"a": 1}, [1, object()]):
        try:
            to_node(value)
        except UnrepresentableValue:
            pass
        else:
            assert False

    # a bad element of a sequence is reported by its index
    for value, index in (([1, 2, object()], 2), ((object(),), 0), ((1, ("a", {})), 1)):
        try:
            to_node(value)
        except UnrepresentableValue as err:
            assert err.index == index
        else:
            assert False
    try:
        to_node({"a": 1})
    except UnrepresentableValue as err:
        assert err.index is None
    else:
        assert False

    # catchable also as a builtin error type
    try:
        to_node(object())
    except TypeError:
        pass
    else:
        assert False


def test_to_nodes():
    assert to_nodes([1, Reference("x")]) == [Literal(1), Reference("x")]
    try:
        to_nodes([1, 2, object()])
    except UnrepresentableValue as err:
        assert err.index == 2
        assert "index 2" in str(err)
    else:
        assert False


def test_is_constant():
    assert is_constant(1)
    assert is_constant(Ellipsis)
    assert is_constant((1, "a", None))
    assert not is_constant(object())
    assert not is_constant((1, object()))
    assert not is_constant({1: 2})


def test_node_name():
    assert node_name("x") == "x"
    assert node_name(["x"]) == "x"
    assert node_name(("x",)) == "x"
    assert node_name(Reference("x")) == "x"
    assert node_name(Literal("x")) == "x"
    assert node_name(42) is None
    assert node_name(("x", "y")) is None
    assert node_name(Literal(42)) is None


def runtests():
    test_structural_equality()
    test_construction()
    test_invalid_construction()
    test_immutability()
    test_pickle()
    test_to_node()
    test_to_nodes()
    test_is_constant()
    test_node_name()

if __name__ == '__main__':
    runtests()
