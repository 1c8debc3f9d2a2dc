# -*- coding: utf-8; -*-
"""Dump a tree into a string, with pythonic indentation.

Based on Alex Leone's `astpp.py`, with changes to indentation logic.
    http://alexleone.blogspot.co.uk/2010/01/python-ast-pretty-printer.html
"""

__all__ = ["dump"]

from ast import AST, iter_fields

from .colorizer import colorize, ColorScheme
from .markers import QuasiquoteMarker
from .nodes import Arg, Literal

NoneType = type(None)


def dump(tree, *, multiline=True, color=False):
    """Return a formatted dump of `tree`, as a string.

    `tree` can be a tree node, a quasiquote marker, an `Arg`, or a `list`/`tuple`
    of those (e.g. an argument list).

    The output looks like the code to construct the tree::

        Call(head=Reference(name='f'),
             args=[Arg(name=None, value=Literal(value=1))])

    To put everything on one line, use `multiline=False`.

    If you're printing the result into a terminal, consider `color=True`.
    """
    def maybe_colorize(text, *colors):
        if not color:
            return text
        return colorize(text, *colors)

    def maybe_colorize_value(value):
        if type(value) in (str, bytes, NoneType, bool, int, float, complex):
            # Pass through an already formatted list-as-a-string from an inner level.
            if isinstance(value, str) and value.startswith("["):
                return value
            return maybe_colorize(str(value), ColorScheme.BAREVALUE)
        return str(value)

    def typename(tree):
        name = type(tree).__name__
        if isinstance(tree, QuasiquoteMarker):
            return maybe_colorize(name, ColorScheme.MARKER)
        return maybe_colorize(name, ColorScheme.NODETYPE)

    def recurse(tree, previndent=0):
        def separator():
            if multiline:
                return f",\n{(previndent + moreindent) * ' '}"
            return ", "

        if isinstance(tree, AST):
            moreindent = len(f"{type(tree).__name__}(")
            if isinstance(tree, Literal):  # the value is atomic, even if it is a tuple
                fields = [("value", repr(tree.value))]
            else:
                fields = [(k, recurse(v, previndent + moreindent + len(f"{k}="))) for k, v in iter_fields(tree)]
            fieldcolor = ColorScheme.ARGNAME if isinstance(tree, Arg) else ColorScheme.FIELDNAME
            colorized_fields = [(maybe_colorize(k, fieldcolor),
                                 maybe_colorize_value(v))
                                for k, v in fields]
            return "".join([
                typename(tree),
                "(",
                separator().join((f"{k}={v}" for k, v in colorized_fields)),
                ")"])

        # Argument lists are tuples; a literal's tuple value is rendered by `repr`.
        elif isinstance(tree, (list, tuple)) and all(isinstance(elt, AST) for elt in tree):
            moreindent = len("[")
            items = [recurse(elt, previndent + moreindent) for elt in tree]
            if items:
                items[0] = "[" + items[0].lstrip()
                items[-1] = items[-1] + "]"
                return separator().join(items)
            return "[]"

        return repr(tree)

    if not isinstance(tree, (AST, list, tuple)):
        raise TypeError(f"expected a tree node, got {type(tree).__name__!r}")
    return recurse(tree)
