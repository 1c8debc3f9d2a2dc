# -*- coding: utf-8 -*-
"""Run all tests for `qquote`."""

import os
import re
import sys
import traceback
from importlib import import_module

from qquote.colorizer import ColorScheme, colorize
from qquote.pycachecleaner import deletepycachedirs

# --------------------------------------------------------------------------------

def filename_to_modulename(path, filename):
    """Convert .py filename to module name.

    Example::
        "some/dir", "mod.py" --> "some.dir.mod"
    """
    modpath = re.sub(re.escape(os.path.sep), r".", path)
    themod = re.sub(r"\.py$", r"", filename)
    return ".".join([modpath, themod])

def filenames_to_modulenames(path, filenames):
    """Convert .py filenames to module names.

    Example::
        "some/dir", ["mod1.py", "mod2.py", ...] --> ["some.dir.mod1", "some.dir.mod2", ...]
    """
    return list(sorted(filename_to_modulename(path, fn) for fn in filenames))

# --------------------------------------------------------------------------------
# In the `qquote` codebase, test modules are placed in "test/" subfolders,
# and follow the naming pattern "test_*.py". Each test module has a `runtests`
# function, which runs all of its `test_*` functions.

def discovertestdirectories(root):
    pattern = f"{os.path.sep}test"
    out = []
    for path, dirs, files in os.walk(root):
        if path.endswith(pattern):
            out.append(path)
    return list(sorted(out))

def discovertestfiles_in(path):
    return [fn for fn in os.listdir(path) if fn.startswith("test_") and fn.endswith(".py")]

# --------------------------------------------------------------------------------

def runtests(clear_bytecode_cache=True):
    """Run the `runtests` function of every test module. Return whether all passed.

    Stale bytecode of deleted or renamed test modules would otherwise still be
    importable, so the cache in each test directory is cleared by default.
    """
    cache_note = "Bytecode cache will be cleared." if clear_bytecode_cache else "Using existing bytecode."
    print(colorize(f"Testing started. {cache_note}", ColorScheme.TESTHEADING), file=sys.stderr)
    errors = 0
    nmodules = 0
    for path in discovertestdirectories("."):
        modnames = filenames_to_modulenames(os.path.relpath(path), discovertestfiles_in(path))
        if clear_bytecode_cache:
            deletepycachedirs(path)
        for m in modnames:
            nmodules += 1
            try:
                print(colorize(f"  Running module '{m}'...", ColorScheme.TESTHEADING),
                      file=sys.stderr)
                mod = import_module(m)
                mod.runtests()
                print(colorize(f"    PASS '{m}'", ColorScheme.TESTPASS), file=sys.stderr)
            except ImportError:
                print(colorize(f"    ERROR '{m}': import failed", ColorScheme.TESTERROR),
                      file=sys.stderr)
                traceback.print_exc()
                errors += 1
            except AssertionError:
                print(colorize(f"    FAIL '{m}': at least one test failed",
                               ColorScheme.TESTFAIL),
                      file=sys.stderr)
                traceback.print_exc()
                errors += 1
            except Exception:
                print(colorize(f"    ERROR '{m}': unexpected exception", ColorScheme.TESTERROR),
                      file=sys.stderr)
                traceback.print_exc()
                errors += 1
    summary = f"Testing finished. {nmodules - errors} of {nmodules} modules passed."
    print(colorize(summary, ColorScheme.TESTHEADING if not errors else ColorScheme.TESTFAIL), file=sys.stderr)
    return errors == 0

if __name__ == '__main__':
    if not runtests(clear_bytecode_cache="--keep-cache" not in sys.argv[1:]):
        sys.exit(1)  # pragma: no cover, this only runs when the tests fail.
