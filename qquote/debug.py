# -*- coding: utf-8; -*-
"""Debugging utilities. All output goes to `sys.stderr`, colorized for a terminal."""

__all__ = ["step_resolution", "show_bindings", "format_bindings"]

import functools
import io
import sys
import textwrap

from .capture import CaptureResult
from .colorizer import setcolor, colorize, ColorScheme
from .dumper import dump
from .env import Environment, as_environment
from .markers import get_markers
from .quotes import resolve
from .utils import NestingLevelTracker, format_value

_step_resolution_level = NestingLevelTracker()


def step_resolution(tree, env=None, *, formatter=None, detailed=False):
    """Resolve the quasiquote markers in `tree`, showing the tree before and after.

    Return the resolved tree, exactly as `qquote.quotes.resolve` would.

    `tree`: a tree, or a `CaptureResult` (which supplies its own environment).
    `env`: the capturing environment. If `None`, the Python frame that called
           `step_resolution` is used.
    `formatter`: a one-argument function that renders a tree as text.
                 Default is `dump`, colorized.
    `detailed`: if `True`, also report each marker, and what it was replaced
                with, as it is resolved.

    Calls may nest (e.g. when an unquoted expression itself calls
    `step_resolution`); nested reports are indented.
    """
    if formatter is None:
        formatter = functools.partial(dump, color=True)
    if isinstance(tree, CaptureResult):
        tree, env = tree.node, tree.env
    elif env is None:
        env = Environment.from_frame(sys._getframe(1))
    env = as_environment(env)

    c, CS = setcolor, ColorScheme

    with _step_resolution_level.changed_by(+1):
        indent = 2 * _step_resolution_level.value
        stars = indent * '*'
        codeindent = indent
        tag = id(tree)

        n = len(get_markers(tree))
        plural = "s" if n != 1 else ""
        print(f"{c(CS.HEADING1)}{stars}Tree {c(CS.HEADING2)}0x{tag:x} {c(CS.HEADING1)}before resolution ({n} marker{plural}):{c()}",
              file=sys.stderr)
        print(textwrap.indent(formatter(tree), codeindent * ' '), file=sys.stderr)

        hook = None
        if detailed:
            step = 0
            def hook(marker, replacement):
                nonlocal step
                step += 1
                print(textwrap.indent(f"{c(CS.HEADING2)}Step {step}, resolved marker:{c()}", codeindent * ' '), file=sys.stderr)
                print(textwrap.indent(formatter(marker), (codeindent + 2) * ' '), file=sys.stderr)
                print(textwrap.indent(f"{c(CS.HEADING2)}Result:{c()}", codeindent * ' '), file=sys.stderr)
                print(textwrap.indent(formatter(replacement), (codeindent + 2) * ' '), file=sys.stderr)

        tree = resolve(tree, env, hook=hook)

        print(f"{c(CS.HEADING1)}{stars}Tree {c(CS.HEADING2)}0x{tag:x} {c(CS.HEADING1)}after resolution:{c()}",
              file=sys.stderr)
        print(textwrap.indent(formatter(tree), codeindent * ' '), file=sys.stderr)
    return tree


def show_bindings(env=None):
    """Print the local bindings of `env` to `sys.stderr`.

    If `env` is `None`, show the Python frame that called `show_bindings`.
    """
    if env is None:
        env = Environment.from_frame(sys._getframe(1))
    print(format_bindings(env, color=True), file=sys.stderr)


def format_bindings(env, *, color=False):
    """Return a human-readable report of the local bindings of `env` (not its parents).

    If `color=True`, colorize the output for printing into a terminal.

    If you want to access them programmatically, just access `env.bindings` directly.
    """
    def maybe_setcolor(*colors):
        if not color:
            return ""
        return setcolor(*colors)
    def maybe_colorize(text, *colors):
        if not color:
            return text
        return colorize(text, *colors)

    c, CS = maybe_setcolor, ColorScheme

    env = as_environment(env)
    depth = sum(1 for _ in env.frames()) - 1
    with io.StringIO() as output:
        output.write(f"{c(CS.HEADING1)}Bindings in environment {c(CS.HEADING2)}0x{id(env):x}{c(CS.HEADING1)} (depth {depth}):{c()}\n")
        if not env.bindings:
            output.write(maybe_colorize("    <no bindings>\n",
                                        ColorScheme.GREYEDOUT))
        else:
            for k, v in sorted(env.bindings.items(), key=lambda item: str(item[0])):
                k = maybe_colorize(k, ColorScheme.BINDINGNAME)
                output.write(f"    {k}: {format_value(v)}\n")
        return output.getvalue()
