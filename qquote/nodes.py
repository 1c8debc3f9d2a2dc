# -*- coding: utf-8; -*-
"""The tree model: immutable nodes representing unevaluated code.

There are four node types:

  - `Literal(value)`: an atomic constant, or an inlined run-time value.
  - `Reference(name)`: a symbolic name, resolved at evaluation time.
  - `Call(head, args)`: a call. `head` is usually a `Reference`, but may be
    any node; a non-`Reference` head models an *inlined* function.
  - `Pairlist(args)`: a bare argument list, not attached to a call head.

Argument lists are tuples of `Arg(name, value)` slots. Names are optional
(`None`) and need not be unique; order is significant.

We inherit from `ast.AST`, as the quasiquote markers do, so that the walkers
and the dumper can treat nodes and markers uniformly via `ast.iter_fields`.
Unlike Python's own AST nodes, ours are immutable and compare structurally.
"""

__all__ = ["Node", "Literal", "Reference", "Call", "Pairlist", "Arg",
           "to_node", "to_nodes", "is_node", "is_constant", "node_name"]

import ast

from .core import UnrepresentableValue
from .markers import QuasiquoteMarker

NoneType = type(None)
EllipsisType = type(Ellipsis)

_constant_types = (int, float, complex, str, bytes, bool, NoneType, EllipsisType)


class _Frozen(ast.AST):
    """Base for tree elements. Attributes can be set only by the constructor."""
    _fields = ()

    def _init_fields(self, **fields):
        for k, v in fields.items():
            super().__setattr__(k, v)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable; cannot set attribute '{name}'")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable; cannot delete attribute '{name}'")

    def _key(self):
        return tuple(_valuekey(getattr(self, k)) for k in self._fields)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((type(self).__name__, _hashable(self._key())))

    def __reduce__(self):
        return (type(self), tuple(getattr(self, k) for k in self._fields))


def _valuekey(value):
    """Comparison key for a field value. Literals of different types never compare equal."""
    if isinstance(value, tuple):
        return (tuple, tuple(_valuekey(elt) for elt in value))
    if isinstance(value, (_Frozen, QuasiquoteMarker)):
        return value
    return (type(value), value)


def _hashable(key):
    try:
        hash(key)
    except TypeError:
        return repr(key)
    return key


class Node(_Frozen):
    """Base class for tree nodes."""

    def children(self):
        """Iterate over the child nodes of this node, in evaluation order."""
        return iter(())


class Literal(Node):
    """An atomic constant.

    A `list` value is frozen into a `tuple`. A literal may also hold an inlined
    run-time value, such as a function or a `CaptureResult`; see `to_node`.
    """
    _fields = ("value",)

    def __init__(self, value=None):
        if isinstance(value, list):
            value = _freeze(value)
        if _holds_marker(value):
            raise TypeError(f"a literal cannot hold a quasiquote marker, got {repr(value)}")
        self._init_fields(value=value)

    def __repr__(self):
        return f"Literal({self.value!r})"


def _freeze(lst):
    return tuple(_freeze(x) if isinstance(x, list) else x for x in lst)


def _holds_marker(value):
    if isinstance(value, QuasiquoteMarker):
        return True
    if isinstance(value, tuple):
        return any(_holds_marker(x) for x in value)
    return False


class Reference(Node):
    """A symbolic name, resolved at evaluation time."""
    _fields = ("name",)

    # Default, because `copy` and `deepcopy` may call `__init__` without arguments.
    def __init__(self, name=""):
        if not isinstance(name, str):
            raise TypeError(f"Reference name must be str, got {type(name)} with value {repr(name)}")
        self._init_fields(name=name)

    def __repr__(self):
        return f"Reference({self.name!r})"


class Arg(_Frozen):
    """An argument slot: an optional name, and a node (or, while building, a marker).

    Not a `Node` itself. Unpacks as a pair::

        name, value = arg
    """
    _fields = ("name", "value")

    def __init__(self, name=None, value=None):
        if name is not None and not isinstance(name, str):
            raise TypeError(f"argument name must be str or None, got {type(name)} with value {repr(name)}")
        if not isinstance(value, (Node, QuasiquoteMarker)):
            raise TypeError(f"argument value must be a node or a quasiquote marker, got {type(value)} with value {repr(value)}")
        self._init_fields(name=name, value=value)

    def __iter__(self):
        yield self.name
        yield self.value

    def __repr__(self):
        if self.name is None:
            return repr(self.value)
        return f"{self.name}={self.value!r}"


def _normalize_args(args):
    """Convert each item of `args` into an `Arg`.

    Accepted items: `Arg`, a `(name, value)` pair where `name` is `str` or `None`,
    or a bare node or marker (positional).
    """
    out = []
    for item in args:
        if isinstance(item, Arg):
            out.append(item)
        elif isinstance(item, (Node, QuasiquoteMarker)):
            out.append(Arg(None, item))
        elif isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], (str, NoneType)):
            out.append(Arg(*item))
        else:
            raise TypeError(f"expected Arg, (name, node) pair, or node; got {type(item)} with value {repr(item)}")
    return tuple(out)


class Call(Node):
    """A call. `head` is never `None`; it may be any node (or, while building, a marker)."""
    _fields = ("head", "args")

    def __init__(self, head=None, args=()):
        if not isinstance(head, (Node, QuasiquoteMarker)):
            raise TypeError(f"call head must be a node, got {type(head)} with value {repr(head)}")
        self._init_fields(head=head, args=_normalize_args(args))

    def children(self):
        yield self.head
        for arg in self.args:
            yield arg.value

    def __repr__(self):
        args = ", ".join(repr(arg) for arg in self.args)
        return f"Call({self.head!r}, [{args}])"


class Pairlist(Node):
    """A bare argument list, not attached to a call head."""
    _fields = ("args",)

    def __init__(self, args=()):
        self._init_fields(args=_normalize_args(args))

    def children(self):
        for arg in self.args:
            yield arg.value

    def __len__(self):
        return len(self.args)

    def __iter__(self):
        return iter(self.args)

    def __repr__(self):
        args = ", ".join(repr(arg) for arg in self.args)
        return f"Pairlist([{args}])"

# --------------------------------------------------------------------------------

def is_node(x):
    """Return whether `x` is a finished tree node."""
    return isinstance(x, Node)


def is_constant(x):
    """Return whether `x` is a constant that `to_node` lifts into a `Literal` of itself.

    Constants are numbers, text, bytes, booleans, `None`, `Ellipsis`, and
    tuples or lists consisting of constants only.
    """
    if type(x) in _constant_types:
        return True
    if type(x) in (tuple, list):
        return all(is_constant(elt) for elt in x)
    return False


def to_node(value):
    """Lift a run-time value into its tree representation, if possible.

    - A `Node` is returned as-is.
    - A constant (see `is_constant`) becomes a `Literal`.
    - A callable or a `CaptureResult` is inlined, as a `Literal` holding it.
      Such a tree has no faithful source code representation.

    Anything else raises `UnrepresentableValue`. For a `tuple` or `list` with a
    non-constant element, its `index` names the first such element.
    """
    from .capture import CaptureResult, Promise  # avoid import cycle

    if isinstance(value, Node):
        return value
    if isinstance(value, QuasiquoteMarker):
        raise UnrepresentableValue(f"a quasiquote marker cannot be used as a value, got {repr(value)}")
    if isinstance(value, Promise):
        raise UnrepresentableValue(f"an unforced lazy argument has no tree representation; use `force` or `quote_caller`, got {repr(value)}")
    if is_constant(value):
        return Literal(value)
    if isinstance(value, CaptureResult) or callable(value):
        return Literal(value)
    if type(value) in (tuple, list):
        k = next(k for k, elt in enumerate(value) if not is_constant(elt))
        raise UnrepresentableValue(f"element at index {k}: value has no tree representation, got {type(value[k])} with value {repr(value[k])}", index=k)
    raise UnrepresentableValue(f"value has no tree representation, got {type(value)} with value {repr(value)}")


def to_nodes(values):
    """Lift each element of the ordered sequence `values`; return a `list` of nodes.

    On failure, the `UnrepresentableValue` names the index of the offending
    element (also available as its `index` attribute).
    """
    out = []
    for k, value in enumerate(values):
        try:
            out.append(to_node(value))
        except UnrepresentableValue as err:
            raise UnrepresentableValue(f"element at index {k}: {err}", index=k) from err
    return out


def node_name(x):
    """Return the bare name that `x` represents, or `None` if it does not represent one.

    A bare name is an `str`, a length-one `tuple`/`list` containing one,
    a `Reference`, or a `Literal` holding text.
    """
    if isinstance(x, str):
        return x
    if isinstance(x, (tuple, list)) and len(x) == 1:
        return node_name(x[0])
    if isinstance(x, Reference):
        return x.name
    if isinstance(x, Literal) and isinstance(x.value, (str, tuple)):
        return node_name(x.value)
    return None
