#!/usr/bin/env python

import os
from setuptools import setup

def read(*relpath, **kwargs):
    with open(os.path.join(os.path.dirname(__file__), *relpath),
              encoding=kwargs.get("encoding", "utf8")) as fh:
        return fh.read()

# Extract __version__ from the package __init__.py
# (since it's not a good idea to actually run __init__.py during the build process).
import ast
init_py_path = os.path.join("qquote", "__init__.py")
version = None
try:
    with open(init_py_path) as f:
        for line in f:
            if line.startswith("__version__"):
                module = ast.parse(line)
                expr = module.body[0]
                v = expr.value
                if type(v) is ast.Constant:
                    version = v.value
                break
except FileNotFoundError:
    pass
if not version:
    raise RuntimeError(f"Version information not found in {init_py_path}")

setup(
    name="qquote",
    version=version,
    packages=["qquote", "qquote.test"],
    provides=["qquote"],
    keywords=["quasiquote", "quotation", "metaprogramming", "nonstandard-evaluation", "code-as-data"],
    install_requires=["colorama>=0.4.4"],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.9",
    description="Quasiquotation for Python: capture, build, and evaluate code as data",
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    license="MIT",
    platforms=["Any"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Other Environment",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Software Development :: Libraries",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Software Development :: Interpreters",
        "Topic :: Utilities"
    ],
    zip_safe=True
)
