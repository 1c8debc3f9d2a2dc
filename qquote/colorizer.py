# -*- coding: utf-8; -*-
"""Colorize terminal output, using Colorama."""

__all__ = ["setcolor", "colorize", "ColorScheme",
           "Fore", "Back", "Style"]

from colorama import Back, Fore, Style  # type: ignore[import]
from colorama import init as colorama_init  # type: ignore[import]

from .bunch import Bunch

colorama_init()


def setcolor(*colors, reset=True):
    """Return a string that, when printed into a terminal, sets the style and color.

    If `reset=True`, reset style and color before setting the requested ones;
    otherwise augment the current ones.

    For available `colors`, see `Fore`, `Back` and `Style`. Each entry can also
    be a tuple (arbitrarily nested), for defining compound styles.

    The style remains in effect until the next `setcolor`; to reset, use
    `setcolor()`. For auto-resetting output, use `colorize` instead.
    """
    def _setcolor(color):
        if isinstance(color, (list, tuple)):
            return "".join(_setcolor(elt) for elt in color)
        return color
    out = [Style.RESET_ALL] if reset else []
    out.append(_setcolor(colors))
    return "".join(out)


def colorize(text, *colors):
    """Colorize string `text` for terminal display. Reset style and color before and after `text`.

    Usage::

        print(colorize("I'm new here", Fore.GREEN))
        print(colorize("I'm bold and bluetiful", Style.BRIGHT, Fore.BLUE))

    Does not nest.
    """
    return f"{setcolor(colors)}{text}{setcolor()}"


class ColorScheme(Bunch):
    """The color scheme for terminal output in `qquote`'s debug utilities and test runner.

    Just a bunch of constants. To change the colors, assign new values to them;
    changes take effect immediately for any new output. To replace the whole
    scheme at once, fill in a `Bunch` and use the `replace` method.

    Don't replace the color scheme object itself; all the use sites
    from-import it.

    See `Fore`, `Back`, `Style` for valid values. To make a compound style,
    place the values into a tuple.
    """
    def __init__(self):
        super().__init__()

        # ------------------------------------------------------------
        # dump

        self.NODETYPE = (Style.BRIGHT, Fore.LIGHTBLUE_EX)
        self.FIELDNAME = Fore.YELLOW
        self.BAREVALUE = Fore.GREEN
        self.ARGNAME = Fore.CYAN
        self.MARKER = (Style.BRIGHT, Fore.YELLOW)  # Unquote, Splice, Define

        # ------------------------------------------------------------
        # step_resolution, format_bindings

        self.HEADING1 = (Style.BRIGHT, Fore.LIGHTBLUE_EX)  # main heading
        self.HEADING2 = Fore.LIGHTBLUE_EX  # subheading (tree ids, ...)
        self.BINDINGNAME = Style.BRIGHT
        self.GREYEDOUT = Style.DIM  # if no bindings

        # ------------------------------------------------------------
        # runtests

        self.TESTHEADING = self.HEADING1
        self.TESTPASS = (Style.BRIGHT, Fore.GREEN)
        self.TESTFAIL = (Style.BRIGHT, Fore.RED)
        self.TESTERROR = (Style.BRIGHT, Fore.YELLOW)
ColorScheme = ColorScheme()  # type: ignore[assignment, misc]
