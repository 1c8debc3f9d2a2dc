# -*- coding: utf-8; -*-
"""Quasiquote markers.

A marker annotates a position in a tree that is still being built, requesting
substitution when the tree is resolved. Markers are transient: it is a
postcondition of `qquote.quotes.resolve` that no markers remain in its output,
and the evaluator refuses to evaluate a marker.
"""

__all__ = ["QuasiquoteMarker", "Unquote", "Splice", "Define",
           "get_markers", "check_no_markers_remaining"]

import ast

from .core import UnresolvedMarker
from . import walkers


class QuasiquoteMarker(ast.AST):
    """Base class for quasiquote markers.

    We inherit from `ast.AST`, so that while a tree is being built, a marker
    behaves like a single tree node for the walkers and the dumper.
    """
    # Default `None`, because `copy` and `deepcopy` call `__init__` without arguments.
    def __init__(self, body=None):
        """body: the expression tree annotated by this marker"""
        self.body = body
        self._fields = ["body"]  # support ast.iter_fields

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, k) == getattr(other, k) for k in self._fields)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((type(self).__name__,) + tuple(getattr(self, k) for k in self._fields))

    def __repr__(self):
        fields = ", ".join(repr(getattr(self, k)) for k in self._fields)
        return f"{type(self).__name__}({fields})"


class Unquote(QuasiquoteMarker):
    """Replace this position with the tree form of the value of `body`.

    `body` is evaluated in the capturing environment when the tree is resolved.
    """
    pass


class Splice(QuasiquoteMarker):
    """Replace this argument slot with zero or more slots, from the sequence `body` evaluates to.

    Valid only as an element of an argument list.
    """
    pass


class Define(QuasiquoteMarker):
    """Produce one named argument whose name is computed.

    `name` is evaluated to obtain the argument name; `body` is the argument
    value, which is resolved like any other argument value (so it may contain
    markers of its own). Valid only in argument position.
    """
    def __init__(self, name=None, body=None):
        super().__init__(body)
        self.name = name
        self._fields = ["name", "body"]


def get_markers(tree, cls=QuasiquoteMarker):
    """Return a `list` of any `cls` instances found in `tree`. For output validation."""
    class MarkerCollector(walkers.ASTVisitor):
        def examine(self, tree):
            if isinstance(tree, cls):
                self.collect(tree)
            self.generic_visit(tree)
    w = MarkerCollector()
    w.visit(tree)
    return w.collected


def check_no_markers_remaining(tree, *, cls=None):
    """Check that `tree` has no quasiquote markers remaining.

    If a class `cls` is provided, only check for markers that `isinstance(cls)`.

    If there are any, raise `UnresolvedMarker`. No return value.
    """
    cls = cls or QuasiquoteMarker
    remaining_markers = get_markers(tree, cls)
    if remaining_markers:
        report = ", ".join(repr(marker) for marker in remaining_markers)
        raise UnresolvedMarker(f"quasiquote markers remaining in tree: {report}")
