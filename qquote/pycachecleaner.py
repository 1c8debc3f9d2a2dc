#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Python bytecode cache (`.pyc`) cleaner. Deletes `__pycache__` directories.

The test runner clears the caches of the test directories before running,
so that the tests always run against freshly compiled sources.
"""

__all__ = ["getpycachedirs", "deletepycachedirs"]

import os
import shutil


def getpycachedirs(path):
    """Return a sorted list of all `__pycache__` directories under `path` (str).

    Each of the entries starts with `path`.
    """
    if not os.path.isdir(path):
        raise OSError(f"No such directory: '{path}'")
    return sorted(os.path.join(root, "__pycache__")
                  for root, dirs, files in os.walk(path)
                  if "__pycache__" in dirs)


def deletepycachedirs(path):
    """Delete all `__pycache__` directories under `path` (str). Return how many were deleted.

    A directory that vanishes while we work (e.g. deleted by a concurrent
    process) is not an error. Other errors raise; if one occurs, some of the
    directories may already have been deleted.
    """
    count = 0
    for x in getpycachedirs(path):
        try:
            shutil.rmtree(x)
        except FileNotFoundError:
            continue
        count += 1
    return count
