# -*- coding: utf-8 -*-

from ..capture import CaptureResult, MISSING, force, lazy
from ..core import UnresolvedMarker
from ..env import as_environment
from ..evaluator import evaluate, eval_tidy, as_data_mask
from ..markers import Unquote
from ..nodes import Literal, Reference, Call, Pairlist
from ..reader import read


@lazy
def matcher(a, b=5, *rest):
    return (a.value, force(b), [(p.name, p.value) for p in rest])

@lazy
def kwmatcher(a, **kw):
    return (a.value, {k: p.value for k, p in kw.items()})

@lazy
def optional(x, y):
    return y


def test_mask_precedence():
    assert evaluate(Reference("x"), {"x": 1}, mask={"x": 2}) == 2
    assert evaluate(Reference("x"), {"x": 1}, mask={}) == 1
    assert evaluate(Reference("x"), {"x": 1}) == 1
    # the mask applies at any depth, and only where it has the name
    assert evaluate(read("x + y"), {"x": 1, "y": 10}, mask={"x": 41}) == 51


def test_basics():
    assert evaluate(Literal(42), {}) == 42
    assert evaluate(read("x + 1"), {"x": 41}) == 42
    assert evaluate(read("-x"), {"x": 1}) == -1
    assert evaluate(read("2 ** 10")) == 1024
    assert evaluate(read("1 < x < 3"), {"x": 2}) is True
    assert evaluate(read("1 < x < 3"), {"x": 3}) is False
    assert evaluate(read("s.upper()"), {"s": "ab"}) == "AB"
    assert evaluate(read("xs[1:]"), {"xs": [1, 2, 3]}) == [2, 3]
    assert evaluate(read("xs[-1]"), {"xs": [1, 2, 3]}) == 3
    assert evaluate(read("[1, x]"), {"x": 2}) == [1, 2]
    assert evaluate(read("(1, x)"), {"x": 2}) == (1, 2)
    assert evaluate(read("{'a': x}"), {"x": 2}) == {"a": 2}
    assert evaluate(read("{1, 2}")) == {1, 2}
    assert evaluate(read("max(3, 1, key=neg)"), {"neg": lambda v: -v}) == 1

    # local variables of the calling frame are visible by default
    y = 23
    assert evaluate(read("y * 2")) == 46


def test_evaluation_order():
    log = []
    def note(v):
        log.append(v)
        return v
    def f(*args, **kwargs):
        return args, kwargs
    result = evaluate(read("f(note(1), note(2), k=note(3))"))
    assert result == ((1, 2), {"k": 3})
    assert log == [1, 2, 3]


def test_no_memoization():
    count = 0
    def tick():
        nonlocal count
        count += 1
        return count
    tree = read("tick() + tick()")
    assert evaluate(tree) == 3
    assert evaluate(tree) == 7


def test_short_circuit():
    called = []
    def boom():
        called.append(True)
        return "boom"
    x = 0
    assert evaluate(read("x and boom()")) == 0
    assert evaluate(read("x or boom()")) == "boom"
    assert called == [True]
    assert evaluate(read("'yes' if x else 'no'")) == "no"
    assert evaluate(read("'yes' if not x else boom()")) == "yes"
    assert called == [True]


def test_inlined():
    assert evaluate(Call(Literal(len), [Literal("abc")])) == 3

    # an inlined capture evaluates in its own environment
    capture = CaptureResult(Reference("x"), as_environment({"x": "inner"}))
    tree = Call(Reference("f"), [Literal(capture)])
    assert evaluate(tree, {"f": lambda v: v, "x": "outer"}) == "inner"

    # a capture can be evaluated directly, too
    assert evaluate(capture) == "inner"


def test_pairlist():
    p = Pairlist([("a", Literal(1))])
    assert evaluate(p, {}) is p


def test_lazy_matching():
    tree = Call(Reference("matcher"), [("b", Literal(2)), Literal(1), Literal(3), ("z", Literal(4))])
    assert evaluate(tree) == (1, 2, [(None, 3), ("z", 4)])
    assert evaluate(read("matcher(1)")) == (1, 5, [])

    assert evaluate(read("kwmatcher(1, z=2)")) == (1, {"z": 2})

    assert evaluate(read("optional(1)")) is MISSING

    try:
        evaluate(read("optional(1, 2, 3)"))
    except TypeError:
        pass
    else:
        assert False

    try:
        evaluate(read("optional(1, 2, w=3)"))
    except TypeError:
        pass
    else:
        assert False


def test_errors():
    def raises(exctype, tree, env=None, mask=None):
        try:
            evaluate(tree, env, mask)
        except exctype:
            pass
        else:
            assert False

    raises(UnresolvedMarker, Unquote(Literal(1)), {})
    raises(UnresolvedMarker, Call(Reference("f"), [Unquote(Literal(1))]), {"f": print})
    raises(ValueError, Call(Reference("f"), [Unquote(Literal(1))]), {"f": print})

    # a lazy callable is checked up front, even for arguments it never evaluates
    raises(UnresolvedMarker, Call(Reference("if"), [Literal(True), Literal(1), Unquote(Reference("y"))]), {})
    raises(UnresolvedMarker, read("x or f(u[y])"), {"x": 1})
    raises(UnresolvedMarker, Call(Reference("optional"), [Literal(1), Call(Reference("g"), [Unquote(Literal(2))])]))
    raises(NameError, Reference("nosuchname"), {})
    raises(TypeError, read("x(1)"), {"x": 5})
    raises(TypeError, Call(Reference("f"), [("k", Literal(1)), ("k", Literal(2))]), {"f": dict})
    raises(ZeroDivisionError, read("1 / 0"), {})
    raises(SyntaxError, read("f(...)"), {"f": print})
    raises(TypeError, Reference("x"), 42)


def test_data_mask():
    mask = as_data_mask({"x": 1}, {"x": 10})
    assert mask["x"] == 1
    assert mask["_data"].x == 1
    assert mask["_env"].x == 10
    assert mask["_env"]["x"] == 10
    try:
        mask["_env"].nosuchname
    except NameError:
        pass
    else:
        assert False
    try:
        mask["_env"].x = 2
    except AttributeError:
        pass
    else:
        assert False

    try:
        as_data_mask({1: 2})
    except TypeError:
        pass
    else:
        assert False


def test_eval_tidy():
    assert eval_tidy(read("x + _env.x"), {"x": 1}, {"x": 10}) == 11
    assert eval_tidy(read("_data.x * 2"), {"x": 21}, {}) == 42
    assert eval_tidy(read("y"), {"x": 1}, {"y": 2}) == 2

    try:
        eval_tidy(read("_data.y"), {"x": 1}, {"y": 2})
    except KeyError:
        pass
    else:
        assert False

    # a capture supplies its own environment
    capture = CaptureResult(read("x + y"), as_environment({"y": 100}))
    assert eval_tidy(capture, {"x": 1}) == 101


def runtests():
    test_mask_precedence()
    test_basics()
    test_evaluation_order()
    test_no_memoization()
    test_short_circuit()
    test_inlined()
    test_pairlist()
    test_lazy_matching()
    test_errors()
    test_data_mask()
    test_eval_tidy()

if __name__ == '__main__':
    runtests()
