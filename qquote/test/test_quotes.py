# -*- coding: utf-8 -*-

from ..capture import CaptureResult, quote_now
from ..core import (InvalidDefineContext, InvalidName, InvalidSpliceContext,
                    NotASequence, UnrepresentableValue)
from ..env import as_environment
from ..markers import Unquote, Splice, Define, get_markers
from ..nodes import Literal, Reference, Call, Pairlist, Arg
from ..quotes import resolve


def test_unquote():
    tree = Call(Reference("f"), [Unquote(Literal(1)), Reference("y")])
    assert resolve(tree, {}) == Call(Reference("f"), [Literal(1), Reference("y")])

    tree = Call(Reference("f"), [Unquote(Reference("x"))])
    assert resolve(tree, {"x": 5}) == Call(Reference("f"), [Literal(5)])

    # an unquoted tree is inserted as-is
    tree = Call(Reference("f"), [Unquote(Reference("t"))])
    t = Call(Reference("g"), [Reference("y")])
    assert resolve(tree, {"t": t}) == Call(Reference("f"), [t])

    # markers are resolved at any depth, also in the head position
    tree = Call(Unquote(Reference("fname")), [Call(Reference("g"), [Unquote(Reference("x"))])])
    assert resolve(tree, {"fname": Reference("h"), "x": 1}) == Call(Reference("h"), [Call(Reference("g"), [Literal(1)])])

    # at the top level, too
    assert resolve(Unquote(Reference("x")), {"x": "hello"}) == Literal("hello")


def test_splice():
    tree = Call(Reference("f"), [Splice(Literal([-1, -2])), Reference("y")])
    assert resolve(tree, {}) == Call(Reference("f"), [Literal(-1), Literal(-2), Reference("y")])

    # empty splice removes the slot
    tree = Call(Reference("f"), [Reference("a"), Splice(Reference("xs"))])
    assert resolve(tree, {"xs": []}) == Call(Reference("f"), [Reference("a")])

    # elements that are trees are inserted as trees
    tree = Call(Reference("f"), [Splice(Reference("xs"))])
    assert resolve(tree, {"xs": [Reference("a"), 2]}) == Call(Reference("f"), [Reference("a"), Literal(2)])

    # a mapping supplies names
    tree = Call(Reference("f"), [Splice(Reference("kws"))])
    assert resolve(tree, {"kws": {"a": 1, "b": 2}}) == Call(Reference("f"), [("a", Literal(1)), ("b", Literal(2))])

    # a pairlist keeps its names
    tree = Pairlist([Splice(Reference("p")), ("c", Literal(3))])
    p = Pairlist([("a", Literal(1)), Literal(2)])
    assert resolve(tree, {"p": p}) == Pairlist([("a", Literal(1)), Literal(2), ("c", Literal(3))])


def test_splice_in_named_slot():
    # The slot's own name is discarded; unnamed elements stay unnamed.
    tree = Call(Reference("f"), [("k", Splice(Literal([1, 2])))])
    assert resolve(tree, {}) == Call(Reference("f"), [Literal(1), Literal(2)])

    # Names of the spliced elements win.
    tree = Call(Reference("f"), [("k", Splice(Reference("kws")))])
    assert resolve(tree, {"kws": {"a": 1}}) == Call(Reference("f"), [("a", Literal(1))])


def test_define():
    tree = Pairlist([Define(Reference("nm"), Unquote(Reference("v")))])
    assert resolve(tree, {"nm": "x", "v": 10}) == Pairlist([("x", Literal(10))])

    # the value is an ordinary argument value; without an unquote, it stays symbolic
    tree = Call(Reference("f"), [Define(Literal("x"), Reference("v"))])
    assert resolve(tree, {}) == Call(Reference("f"), [("x", Reference("v"))])

    # a name can also be given as a Reference, or a length-one sequence
    tree = Call(Reference("f"), [Define(Reference("nm"), Literal(1))])
    assert resolve(tree, {"nm": Reference("z")}) == Call(Reference("f"), [("z", Literal(1))])
    assert resolve(tree, {"nm": ["z"]}) == Call(Reference("f"), [("z", Literal(1))])

    # in a named slot, the computed name wins
    tree = Call(Reference("f"), [("k", Define(Literal("z"), Literal(1)))])
    assert resolve(tree, {}) == Call(Reference("f"), [("z", Literal(1))])


def test_marker_surface():
    xs = [1, 2]
    nm = "k"
    tree = quote_now("f(u[xs[0]], s[xs], d[nm, 3], x)")
    assert tree == Call(Reference("f"), [Literal(1), Literal(1), Literal(2), ("k", Literal(3)), Reference("x")])
    assert not get_markers(tree)


def test_nested_quote():
    tree = quote_now("f(u[quote(x + 1)])")
    assert tree == Call(Reference("f"), [Call(Reference("+"), [Reference("x"), Literal(1)])])

    # an unquote inside a nested quote is resolved by that quote
    y = 42
    tree = quote_now("f(u[quote(g(u[y]))])")
    assert tree == Call(Reference("f"), [Call(Reference("g"), [Literal(42)])])

    # markers inside a nested quote are left for that quote, also under a lazy callable
    flag = True
    tree = quote_now("f(u[quote(g(u[y])) if flag else None])")
    assert tree == Call(Reference("f"), [Call(Reference("g"), [Literal(42)])])


def test_not_idempotent():
    count = 0
    def tick():
        nonlocal count
        count += 1
        return count
    tree = Call(Reference("f"), [Unquote(Call(Reference("tick"), []))])
    env = {"tick": tick}
    assert resolve(tree, env) == Call(Reference("f"), [Literal(1)])
    assert resolve(tree, env) == Call(Reference("f"), [Literal(2)])


def test_sharing():
    unchanged = Call(Reference("g"), [Reference("a")])
    tree = Call(Reference("f"), [unchanged, Unquote(Literal(1))])
    out = resolve(tree, {})
    assert out.args[0].value is unchanged
    assert tree.args[1].value == Unquote(Literal(1))  # input not mutated

    # nothing to substitute: the very same tree comes back
    assert resolve(unchanged, {}) is unchanged


def test_capture_result_supplies_env():
    capture = CaptureResult(Call(Reference("f"), [Unquote(Reference("x"))]),
                            as_environment({"x": "captured"}))
    assert resolve(capture) == Call(Reference("f"), [Literal("captured")])


def test_local_variables():
    x = 23
    assert resolve(Unquote(Reference("x"))) == Literal(23)


def test_hook():
    log = []
    def hook(marker, replacement):
        log.append((marker, replacement))
    tree = Call(Reference("f"), [Unquote(Reference("x")), Splice(Reference("xs"))])
    resolve(tree, {"x": 1, "xs": [2]}, hook=hook)
    assert log == [(Unquote(Reference("x")), Literal(1)),
                   (Splice(Reference("xs")), [Arg(None, Literal(2))])]


def test_errors():
    def raises(exctype, tree, env):
        try:
            resolve(tree, env)
        except exctype:
            pass
        else:
            assert False

    raises(InvalidSpliceContext, Splice(Literal([1])), {})
    raises(InvalidSpliceContext, Call(Splice(Literal([1])), []), {})
    raises(InvalidDefineContext, Define(Literal("a"), Literal(1)), {})
    raises(InvalidDefineContext, Call(Define(Literal("a"), Literal(1)), []), {})
    raises(NotASequence, Call(Reference("f"), [Splice(Literal(42))]), {})
    raises(NotASequence, Call(Reference("f"), [Splice(Literal("abc"))]), {})
    raises(InvalidName, Call(Reference("f"), [Define(Literal(42), Literal(1))]), {})
    raises(InvalidName, Call(Reference("f"), [Splice(Reference("d"))]), {"d": {1: 2}})
    raises(UnrepresentableValue, Call(Reference("f"), [Unquote(Reference("o"))]), {"o": object()})
    raises(UnrepresentableValue, Call(Reference("f"), [Splice(Reference("xs"))]), {"xs": [1, object()]})

    # errors from evaluating the inner expression propagate unchanged
    raises(NameError, Unquote(Reference("nosuchname")), {})
    raises(ZeroDivisionError, Unquote(Call(Reference("/"), [Literal(1), Literal(0)])), {})

    # a misplaced splice is a syntax error
    raises(SyntaxError, Splice(Literal([1])), {})


def runtests():
    test_unquote()
    test_splice()
    test_splice_in_named_slot()
    test_define()
    test_marker_surface()
    test_nested_quote()
    test_not_idempotent()
    test_sharing()
    test_capture_result_supplies_env()
    test_local_variables()
    test_hook()
    test_errors()

if __name__ == '__main__':
    runtests()
