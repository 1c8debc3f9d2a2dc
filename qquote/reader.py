# -*- coding: utf-8; -*-
"""The reader. Convert Python expression source code into a tree.

We let Python's own parser do the parsing, and then convert the Python AST
into our tree model. The mapping is as follows:

  - constants become `Literal`, and bare names become `Reference`;
  - `f(a, k=b)` becomes a `Call`, with the arguments in source order
    (positional and named arguments interleaved as written);
  - operators become calls of operator names: `a + b` is `+`(a, b),
    `-a` is `-`(a), `not a` is `not`(a), `a < b` is `<`(a, b).
    A chained comparison `a < b < c` becomes `and`(`<`(a, b), `<`(b, c));
  - `a and b`, `a or b`, `x if t else y` become calls of the lazy
    builtins `and`, `or`, `if`(t, x, y);
  - `x.y` becomes `getattr(x, "y")`, `x[i]` becomes `[`(x, i),
    and `x[a:b]` becomes `[`(x, slice(a, b, None));
  - displays `[a, b]`, `(a, b)`, `{k: v}` become calls of `[]`, `()`, `{}`
    (the last one with keys and values interleaved), and `{a, b}` becomes
    `set([](a, b))`;
  - `...` as a positional call argument becomes `Reference("...")`, which
    relays the variadic arguments of the enclosing lazy function.
    Anywhere else, it is the constant `Ellipsis`.

The quasiquote markers are spelled as subscripts:

  - `u[expr]` is `Unquote(expr)`,
  - `s[expr]` is `Splice(expr)`,
  - `d[name_expr, value_expr]` is `Define(name_expr, value_expr)`.

So in source code read by the reader, the names `u`, `s` and `d` cannot be
subscripted for any other purpose. Where the markers may appear is not
checked here; that is the job of `qquote.quotes.resolve`.

Syntax that has no counterpart in the tree model (lambdas, comprehensions,
f-strings, starred arguments, assignment expressions, ...) raises
`SyntaxError`.
"""

__all__ = ["read"]

import ast
import textwrap

from .markers import Unquote, Splice, Define
from .nodes import Literal, Reference, Call, Arg

_binops = {ast.Add: "+", ast.Sub: "-", ast.Mult: "*", ast.Div: "/",
           ast.FloorDiv: "//", ast.Mod: "%", ast.Pow: "**", ast.MatMult: "@",
           ast.LShift: "<<", ast.RShift: ">>", ast.BitAnd: "&", ast.BitOr: "|",
           ast.BitXor: "^"}
_unaryops = {ast.UAdd: "+", ast.USub: "-", ast.Not: "not", ast.Invert: "~"}
_cmpops = {ast.Eq: "==", ast.NotEq: "!=", ast.Lt: "<", ast.LtE: "<=",
           ast.Gt: ">", ast.GtE: ">=", ast.Is: "is", ast.IsNot: "is not",
           ast.In: "in", ast.NotIn: "not in"}
_boolops = {ast.And: "and", ast.Or: "or"}

_marker_names = {"u": Unquote, "s": Splice, "d": Define}


def read(source, filename="<string>"):
    """Read the Python expression `source` (`str`) into a tree. Return the tree.

    Leading indentation common to all lines is removed, so that a multi-line
    expression can be written in an indented triple-quoted string.

    `filename` is used in error messages.
    """
    if not isinstance(source, str):
        raise TypeError(f"expected source code as str, got {type(source)} with value {repr(source)}")
    source = textwrap.dedent(source).strip()
    tree = ast.parse(source, filename=filename, mode="eval")

    def unsupported(tree, what=None):
        what = what or f"'{type(tree).__name__}' syntax"
        code = ast.get_source_segment(source, tree)
        return SyntaxError(f"{filename}: {what} is not supported: {code}")

    def call(name, args):
        return Call(Reference(name), [Arg(None, arg) for arg in args])

    def recurse(tree):
        T = type(tree)
        if T is ast.Constant:
            return Literal(tree.value)
        elif T is ast.Name:
            return Reference(tree.id)
        elif T is ast.BinOp:
            return call(_binops[type(tree.op)], [recurse(tree.left), recurse(tree.right)])
        elif T is ast.UnaryOp:
            return call(_unaryops[type(tree.op)], [recurse(tree.operand)])
        elif T is ast.BoolOp:
            return call(_boolops[type(tree.op)], [recurse(x) for x in tree.values])
        elif T is ast.Compare:
            operands = [recurse(x) for x in [tree.left] + tree.comparators]
            comparisons = [call(_cmpops[type(op)], [a, b])
                           for op, a, b in zip(tree.ops, operands, operands[1:])]
            if len(comparisons) == 1:
                return comparisons[0]
            return call("and", comparisons)
        elif T is ast.IfExp:
            return call("if", [recurse(tree.test), recurse(tree.body), recurse(tree.orelse)])
        elif T is ast.Call:
            return Call(recurse(tree.func), recurse_args(tree))
        elif T is ast.Attribute:
            return call("getattr", [recurse(tree.value), Literal(tree.attr)])
        elif T is ast.Subscript:
            if type(tree.value) is ast.Name and tree.value.id in _marker_names:
                return marker(tree)
            return call("[", [recurse(tree.value), recurse(tree.slice)])
        elif T is ast.Slice:
            parts = [tree.lower, tree.upper, tree.step]
            return call("slice", [recurse(x) if x is not None else Literal(None) for x in parts])
        elif T is ast.List:
            return call("[]", [recurse(x) for x in tree.elts])
        elif T is ast.Tuple:
            return call("()", [recurse(x) for x in tree.elts])
        elif T is ast.Set:
            return call("set", [call("[]", [recurse(x) for x in tree.elts])])
        elif T is ast.Dict:
            if any(k is None for k in tree.keys):
                raise unsupported(tree, "dictionary unpacking")
            items = []
            for k, v in zip(tree.keys, tree.values):
                items.extend([recurse(k), recurse(v)])
            return call("{}", items)
        raise unsupported(tree)

    def recurse_args(tree):
        # Python's AST keeps positional and named arguments in separate lists;
        # restore the source order from the positions of the values.
        slots = []
        for arg in tree.args:
            if type(arg) is ast.Starred:
                raise unsupported(arg, "starred argument")
            if type(arg) is ast.Constant and arg.value is Ellipsis:
                node = Reference("...")
            else:
                node = recurse(arg)
            slots.append(((arg.lineno, arg.col_offset), Arg(None, node)))
        for kw in tree.keywords:
            if kw.arg is None:
                raise unsupported(kw.value, "keyword argument unpacking")
            slots.append(((kw.value.lineno, kw.value.col_offset), Arg(kw.arg, recurse(kw.value))))
        slots.sort(key=lambda slot: slot[0])
        return [arg for _, arg in slots]

    def marker(tree):
        cls = _marker_names[tree.value.id]
        body = tree.slice
        if cls is Define:
            if type(body) is not ast.Tuple or len(body.elts) != 2:
                raise SyntaxError(f"{filename}: expected d[name_expr, value_expr], got: {ast.get_source_segment(source, tree)}")
            return Define(recurse(body.elts[0]), recurse(body.elts[1]))
        return cls(recurse(body))

    return recurse(tree.body)
