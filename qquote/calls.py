# -*- coding: utf-8; -*-
"""The call constructor. Build call trees from a head and already materialized arguments.

`build_call` is sugar over `qquote.quotes.resolve`, specialized to building one
`Call` node::

    build_call("f", [1, ("k", Reference("y")), Splice([2, 3])])
    # --> Call(Reference('f'), [Literal(1), k=Reference('y'), Literal(2), Literal(3)])

If the head is a node that is not a `Reference` (e.g. a `Literal` holding a
function, or another `Call`), it is *inlined* as-is. Such a tree evaluates
fine, but has no faithful source code representation: no parser produces a
call whose head is an inlined value.
"""

__all__ = ["build_call", "call_modify", "call_args", "call_head", "call_name"]

import sys

from .env import Environment, as_environment
from .markers import QuasiquoteMarker, Define
from .nodes import Node, Reference, Call, Arg, to_node
from .quotes import resolve


def _as_node(value):
    if isinstance(value, (Node, QuasiquoteMarker)):
        return value
    return to_node(value)


def _normalize(args):
    """Convert argument specifications into `Arg`s.

    Each item of `args` is one of:

      - an `Arg`;
      - a quasiquote marker (`Splice`, `Define`, or `Unquote`), positional;
      - a `(name, value)` pair, where `name` is `str` or `None`;
      - any other value or node, positional.

    Note a 2-tuple whose first item is text is always a `(name, value)` pair;
    to pass such a tuple as a positional value, wrap it with `Literal`.
    """
    out = []
    for item in args:
        if isinstance(item, Arg):
            out.append(item)
        elif isinstance(item, tuple) and len(item) == 2 and (item[0] is None or isinstance(item[0], str)):
            name, value = item
            out.append(Arg(name, _as_materialized(value)))
        else:
            out.append(Arg(None, _as_materialized(item)))
    return out


def _as_materialized(value):
    # The value of a define is an ordinary argument value, so it must be a tree.
    if type(value) is Define and not isinstance(value.body, (Node, QuasiquoteMarker)):
        return Define(value.name, to_node(value.body))
    return _as_node(value)


def build_call(head, args=(), env=None):
    """Build a call to `head` with arguments `args`. Return the `Call` node.

    `head`: a function name (`str`, wrapped into a `Reference`), or a tree node.
            Any other value is lifted by `to_node`; a callable is inlined.
    `args`: iterable of argument specifications; see `_normalize`. Markers are
            resolved, so `Splice` and `Define` work in argument position.
    `env`: environment for evaluating any marker whose inner expression is a
           tree. If `None`, the Python frame that called `build_call` is used.
           Inner values that are not trees are used as-is.
    """
    if isinstance(head, str):
        head = Reference(head)
    else:
        head = _as_node(head)
    if env is None:
        env = Environment.from_frame(sys._getframe(1))
    return resolve(Call(head, _normalize(args)), as_environment(env))


def call_modify(call, *args, env=None):
    """Return a copy of `call`, with arguments replaced or added.

    Each named argument in `args` replaces the first existing argument of the
    same name; if there is none, it is appended. Unnamed arguments are
    appended. `args` are given as for `build_call`, and resolved the same way.
    """
    if not isinstance(call, Call):
        raise TypeError(f"expected a Call node, got {type(call)} with value {repr(call)}")
    if env is None:
        env = Environment.from_frame(sys._getframe(1))
    newargs = resolve(Call(call.head, _normalize(args)), as_environment(env)).args
    out = list(call.args)
    for arg in newargs:
        if arg.name is not None:
            for k, old in enumerate(out):
                if old.name == arg.name:
                    out[k] = arg
                    break
            else:
                out.append(arg)
        else:
            out.append(arg)
    return Call(call.head, out)


def call_args(call):
    """Return the arguments of `call` as a `list` of `(name, node)` pairs."""
    if not isinstance(call, Call):
        raise TypeError(f"expected a Call node, got {type(call)} with value {repr(call)}")
    return [tuple(arg) for arg in call.args]


def call_head(call):
    """Return the head node of `call`."""
    if not isinstance(call, Call):
        raise TypeError(f"expected a Call node, got {type(call)} with value {repr(call)}")
    return call.head


def call_name(call):
    """Return the function name of `call`, or `None` if its head is not a `Reference`."""
    head = call_head(call)
    if type(head) is Reference:
        return head.name
    return None
