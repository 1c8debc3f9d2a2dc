# -*- coding: utf-8; -*-
"""Quasiquotes. The substitution engine, which resolves quasiquote markers in a tree.

A tree being built may carry markers (see `qquote.markers`):

  - `Unquote(inner)`: replaced by the tree form of the value of `inner`.
  - `Splice(inner)`: in an argument list, replaced by zero or more arguments,
    one for each element of the sequence `inner` evaluates to.
  - `Define(name, body)`: in an argument list, an argument whose name is the
    value of `name`, and whose value is `body` (resolved).

`resolve` evaluates the inner expressions in the capturing environment, and
builds a new tree with no markers remaining. The input is never mutated;
subtrees with nothing to substitute are shared with the output.

In source code read by `qquote.reader`, the markers are spelled `u[...]`,
`s[...]` and `d[name, value]`::

    xs = [1, 2]
    quote_now("f(u[xs[0]], s[xs], d['k', 3])")
    # --> Call(Reference('f'), [Literal(1), Literal(1), Literal(2), k=Literal(3)])
"""

__all__ = ["resolve", "quote"]

from collections.abc import Mapping, Sequence
import sys

from .capture import CaptureResult, Promise, lazy
from .core import InvalidDefineContext, InvalidName, InvalidSpliceContext, NotASequence
from .env import Environment, as_environment, baseenv
from .evaluator import evaluate
from .markers import QuasiquoteMarker, Unquote, Splice, Define
from .nodes import Node, Literal, Reference, Call, Pairlist, Arg, to_node, to_nodes, node_name


def resolve(node, env=None, mask=None, *, hook=None):
    """Resolve all quasiquote markers in `node`. Return the new tree.

    `node`: a tree, possibly with markers, or a `CaptureResult`
            (which supplies its own environment).
    `env`: the capturing environment, in which the inner expressions of the
           markers are evaluated. If `None`, the Python frame that called
           `resolve` is used.
    `mask`: optional data mask for evaluating the inner expressions.
    `hook`: optional debug hook, called as `hook(marker, replacement)` after
            each marker is resolved. `replacement` is a `list` of `Arg`s for
            argument-position markers, else a single tree node.

    Inner expressions are evaluated afresh at each call; if one of them has
    side effects or is non-deterministic, so is `resolve`.

    Raises:

      - `InvalidSpliceContext` for a `Splice` outside an argument list.
      - `InvalidDefineContext` for a `Define` outside an argument list.
      - `NotASequence` if a `Splice` value is not a sequence.
      - `UnrepresentableValue` if a value has no tree representation.
      - `InvalidName` if a `Define` name is not a name.

    Errors raised while evaluating an inner expression propagate unchanged.
    On any error, no partial result is returned.
    """
    if isinstance(node, CaptureResult):
        node, env = node.node, node.env
    elif env is None:
        env = Environment.from_frame(sys._getframe(1))
    env = as_environment(env)

    def valueof(expr):
        # Values supplied by `build_call` are already materialized.
        if isinstance(expr, (Node, QuasiquoteMarker)):
            return evaluate(expr, env, mask)
        return expr

    def recurse(tree):
        T = type(tree)
        if T is Unquote:
            result = to_node(valueof(tree.body))
            if hook:
                hook(tree, result)
            return result
        elif T is Splice:
            raise InvalidSpliceContext(f"a splice can only appear in an argument list, got {repr(tree)}")
        elif T is Define:
            raise InvalidDefineContext(f"a define can only appear in argument position, got {repr(tree)}")
        elif T in (Literal, Reference):
            return tree
        elif T is Call:
            head = recurse(tree.head)
            args = recurse_args(tree.args)
            if head is tree.head and args is tree.args:
                return tree
            return Call(head, args)
        elif T is Pairlist:
            args = recurse_args(tree.args)
            if args is tree.args:
                return tree
            return Pairlist(args)
        raise TypeError(f"expected a tree node or a quasiquote marker, got {type(tree)} with value {repr(tree)}")

    def recurse_args(args):
        out = []
        changed = False
        for arg in args:
            value = arg.value
            T = type(value)
            if T is Splice:
                # Any name on the slot itself is discarded; only the spliced elements' names are kept.
                newargs = [Arg(name, node) for name, node in _splice_items(valueof(value.body))]
                if hook:
                    hook(value, newargs)
                out.extend(newargs)
                changed = True
            elif T is Define:
                name = _define_name(valueof(value.name))
                newarg = Arg(name, recurse(value.body))
                if hook:
                    hook(value, [newarg])
                out.append(newarg)
                changed = True
            else:
                newvalue = recurse(value)
                if newvalue is value:
                    out.append(arg)
                else:
                    out.append(Arg(arg.name, newvalue))
                    changed = True
        if not changed:
            return args
        return tuple(out)

    return recurse(node)


def _splice_items(value):
    """Convert the value of a splice into a `list` of `(name, node)` pairs.

    A `Pairlist` or a sequence of `Arg`s keeps its argument names; a mapping
    supplies names from its keys; elements of any other sequence are unnamed.
    """
    if isinstance(value, Pairlist):
        items = [(arg.name, arg.value) for arg in value.args]
    elif isinstance(value, Mapping):
        items = list(value.items())
        badkeys = [k for k, _ in items if not isinstance(k, str)]
        if badkeys:
            raise InvalidName(f"splice: names must be str, got {[repr(k) for k in badkeys]}")
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        items = [(elt.name, elt.value) if isinstance(elt, Arg) else (None, elt) for elt in value]
    else:
        raise NotASequence(f"splice: expected an ordered sequence, got {type(value)} with value {repr(value)}")
    names = [name for name, _ in items]
    nodes = to_nodes([v for _, v in items])
    return list(zip(names, nodes))


def _define_name(value):
    name = node_name(value)
    if name is None:
        raise InvalidName(f"define: expected a name (str, length-one sequence of str, or a Reference), got {type(value)} with value {repr(value)}")
    return name

# --------------------------------------------------------------------------------

@lazy
def quote(expr):
    """[lazy] Return the tree of `expr`, with its quasiquote markers resolved.

    This is `quote_now` for use inside trees; calls to it may be nested
    inside the inner expression of an unquote.
    """
    if not isinstance(expr, Promise):
        raise TypeError(f"`quote` must be called by the evaluator, got {type(expr)} with value {repr(expr)}")
    return resolve(expr.node, expr.env, expr.mask)
quote.__qquote_quoting__ = True

baseenv.define("quote", quote)
