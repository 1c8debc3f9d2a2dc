# -*- coding: utf-8; -*-
"""The evaluator. Evaluate a tree against an environment, with an optional data mask.

The evaluator only does variable lookup and argument passing itself. Actual
computation is delegated to host callables (Python functions), which are
invoked with the evaluated arguments. Errors raised by host callables
propagate unchanged.

A *data mask* is a mapping consulted before the environment, for plain name
lookups only. Names present in the mask shadow the environment; names absent
from the mask are looked up in the environment as usual::

    evaluate(quote_now("x + 1"), {"x": 1}, mask={"x": 41})  # --> 42
"""

__all__ = ["evaluate", "eval_tidy", "as_data_mask", "EnvPronoun"]

import inspect
import sys

from .bunch import Bunch
from .capture import CaptureResult, Promise, MISSING, lazy, is_lazy, is_quoting
from .core import UnresolvedMarker
from .env import Environment, as_environment, baseenv
from .markers import QuasiquoteMarker, check_no_markers_remaining
from .nodes import Literal, Reference, Call, Pairlist
from .walkers import ASTVisitor

_notfound = object()


def evaluate(node, env=None, mask=None):
    """Evaluate the tree `node`, and return its value.

    `node`: a tree node, or a `CaptureResult` (which supplies its own environment).
    `env`: an `Environment` or a mapping (see `qquote.env.as_environment`).
           If `None`, the Python frame that called `evaluate` is used.
    `mask`: optional data mask, a mapping consulted first for name lookups.

    Node types evaluate as follows:

      - `Literal`: its value. An inlined `CaptureResult` evaluates its own tree,
        in its own environment (under the same mask).
      - `Reference`: the value bound to the name, in the mask, else in the
        environment. If the value is an unevaluated lazy argument, it is
        forced.
      - `Call`: the head is evaluated to a callable. Then arguments are
        evaluated left to right, and the callable is invoked with them,
        positional arguments positionally and named ones by name. A `...`
        argument relays the variadic arguments of the enclosing lazy function.
        A `@lazy` callable receives its arguments unevaluated (see
        `qquote.capture.lazy`).
      - `Pairlist`: a bare argument list is data; it evaluates to itself.

    Nothing is memoized; evaluating the same tree twice runs every embedded
    call twice.

    Raises `UnresolvedMarker` if the tree still holds a quasiquote marker. The
    arguments of a lazy callable are checked before it is called, whether or
    not it ends up evaluating them; only a quoting callable such as `quote`
    may receive markers, since it resolves them itself.
    """
    if isinstance(node, CaptureResult):
        node, env = node.node, node.env
    elif env is None:
        env = Environment.from_frame(sys._getframe(1))
    return _eval(node, as_environment(env), mask)


def _eval(node, env, mask):
    T = type(node)
    if T is Literal:
        value = node.value
        if isinstance(value, CaptureResult):
            return _eval(value.node, value.env, mask)
        return value
    elif T is Reference:
        if node.name == "...":
            raise SyntaxError("'...' used in an incorrect context; it can only be passed on as a call argument")
        return _lookup(node.name, env, mask)
    elif T is Call:
        return _eval_call(node, env, mask)
    elif T is Pairlist:
        check_no_markers_remaining(node)
        return node
    elif isinstance(node, QuasiquoteMarker):
        raise UnresolvedMarker(f"cannot evaluate a quasiquote marker; resolve the tree first. Got {repr(node)}")
    raise TypeError(f"expected a tree node, got {type(node)} with value {repr(node)}")


def _lookup(name, env, mask):
    if mask is not None and name in mask:
        value = mask[name]
    else:
        value = env.find(name, _notfound)
        if value is _notfound:
            raise NameError(f"name '{name}' is not defined")
    if isinstance(value, Promise):
        value = value.value
    if value is MISSING:
        raise NameError(f"argument '{name}' is missing, with no default")
    return value


def _spread(args, env):
    """Yield `(name, item)` for each argument; `item` is a node, or a relayed `Promise`."""
    for arg in args:
        if type(arg.value) is Reference and arg.value.name == "...":
            dots = env.find("...", _notfound)
            if dots is _notfound:
                raise SyntaxError("'...' used in an incorrect context; no variadic arguments to relay here")
            for promise in dots:
                yield promise.name, promise
        else:
            yield arg.name, arg.value


def _eval_call(node, env, mask):
    head = node.head
    if type(head) is Reference:
        function = _lookup(head.name, env, mask)
    else:
        function = _eval(head, env, mask)
    if not callable(function):
        raise TypeError(f"attempt to call a non-callable, got {type(function)} with value {repr(function)}")

    if is_lazy(function):
        if not is_quoting(function):
            for arg in node.args:
                _check_unquoted_markers(arg.value, env, mask)
        promises = [item if isinstance(item, Promise) else Promise(item, env, mask, name)
                    for name, item in _spread(node.args, env)]
        return _call_lazy(function, promises)

    args = []
    kwargs = {}
    for name, item in _spread(node.args, env):
        value = item.value if isinstance(item, Promise) else _eval(item, env, mask)
        if name is None:
            args.append(value)
        elif name in kwargs:
            raise TypeError(f"duplicate argument name '{name}' in call to {repr(function)}")
        else:
            kwargs[name] = value
    return function(*args, **kwargs)


def _check_unquoted_markers(tree, env, mask):
    """Raise `UnresolvedMarker` if `tree` has quasiquote markers outside nested quotations.

    A lazy function might never evaluate some of its arguments, so they are
    checked up front. Lookups here never force a lazy argument.
    """
    def quoting(head):
        if type(head) is Literal:
            return is_quoting(head.value)
        if type(head) is not Reference:
            return False
        if mask is not None and head.name in mask:
            return is_quoting(mask[head.name])
        return is_quoting(env.find(head.name, None))

    class MarkerChecker(ASTVisitor):
        def examine(self, tree):
            if isinstance(tree, QuasiquoteMarker):
                raise UnresolvedMarker(f"cannot evaluate a quasiquote marker; resolve the tree first. Got {repr(tree)}")
            if type(tree) is Call and quoting(tree.head):
                return
            self.generic_visit(tree)
    MarkerChecker().visit(tree)


def _call_lazy(function, promises):
    """Match `promises` to the parameters of the lazy `function`, and call it."""
    P = inspect.Parameter
    parameters = list(inspect.signature(function).parameters.values())
    positionals = [p for p in parameters if p.kind in (P.POSITIONAL_ONLY, P.POSITIONAL_OR_KEYWORD)]
    keywordonlys = [p for p in parameters if p.kind is P.KEYWORD_ONLY]
    varargs = any(p.kind is P.VAR_POSITIONAL for p in parameters)
    varkw = any(p.kind is P.VAR_KEYWORD for p in parameters)
    bynames = {p.name for p in parameters if p.kind in (P.POSITIONAL_OR_KEYWORD, P.KEYWORD_ONLY)}

    bound = {}
    used = set()
    for k, promise in enumerate(promises):
        if promise.name in bynames and promise.name not in bound:
            bound[promise.name] = promise
            used.add(k)

    unbound_positionals = [p.name for p in positionals if p.name not in bound]
    rest = []
    extra_kwargs = {}
    for k, promise in enumerate(promises):
        if k in used:
            continue
        if promise.name is None and unbound_positionals:
            bound[unbound_positionals.pop(0)] = promise
        elif varargs:
            rest.append(promise)
        elif promise.name is not None and varkw and promise.name not in extra_kwargs:
            extra_kwargs[promise.name] = promise
        elif promise.name is not None:
            raise TypeError(f"{function.__name__}() got an unexpected argument '{promise.name}'")
        else:
            raise TypeError(f"{function.__name__}() got too many positional arguments")

    def valueof(p):
        if p.name in bound:
            return bound[p.name]
        if p.default is not P.empty:
            return p.default
        return MISSING

    args = [valueof(p) for p in positionals] + rest
    kwargs = {p.name: valueof(p) for p in keywordonlys}
    kwargs.update(extra_kwargs)
    return function(*args, **kwargs)

# --------------------------------------------------------------------------------
# Short-circuiting builtins. These are lazy, so they evaluate only what they need.

@lazy
def _and(*args):
    value = True
    for promise in args:
        value = promise.value
        if not value:
            return value
    return value

@lazy
def _or(*args):
    value = False
    for promise in args:
        value = promise.value
        if value:
            return value
    return value

@lazy
def _if(test, then, otherwise=None):
    if test.value:
        return then.value
    if isinstance(otherwise, Promise):
        return otherwise.value
    return otherwise

baseenv.define("and", _and)
baseenv.define("or", _or)
baseenv.define("if", _if)

# --------------------------------------------------------------------------------
# Data masks.

class EnvPronoun:
    """Look up names in an environment only, bypassing the data mask.

    Supports both `_env.x` and `_env["x"]`.
    """
    def __init__(self, env):
        object.__setattr__(self, "_env", env)

    def __getitem__(self, name):
        return self._env.lookup(name)

    def __getattr__(self, name):
        if name.startswith("__"):  # don't confuse `copy`, `pickle` et al.
            raise AttributeError(name)
        return self._env.lookup(name)

    def __setattr__(self, name, value):
        raise AttributeError("the environment pronoun is read-only")

    def __repr__(self):
        return f"<EnvPronoun for {self._env!r}>"


def as_data_mask(data, env=None):
    """Build a data mask from the mapping `data`.

    The mask contains the items of `data`, plus two pronouns, which allow
    expressions to say explicitly where a name should come from:

      - `_data`: the data only. `_data.x` and `_data["x"]` raise `KeyError`
        if `x` is not in `data`.
      - `_env`: the environment only (given by `env`), bypassing the mask.
        Omitted if `env` is `None`.

    The data is copied, so later changes to `data` do not affect the mask.
    """
    if data is None:
        data = {}
    if not all(isinstance(k, str) for k in data):
        raise TypeError(f"data mask keys must be str, got {[k for k in data if not isinstance(k, str)]}")
    mask = dict(data)
    mask["_data"] = Bunch(**data)
    if env is not None:
        mask["_env"] = EnvPronoun(as_environment(env))
    return mask


def eval_tidy(expr, data=None, env=None):
    """Evaluate `expr` with the mapping `data` as a data mask (see `as_data_mask`).

    `expr` is a tree node or a `CaptureResult`. If it is a tree node and `env`
    is `None`, the Python frame that called `eval_tidy` is used.
    """
    if isinstance(expr, CaptureResult):
        expr, env = expr.node, expr.env
    elif env is None:
        env = Environment.from_frame(sys._getframe(1))
    env = as_environment(env)
    return _eval(expr, env, as_data_mask(data, env))
