# -*- coding: utf-8; -*-
"""Tree walkers.

These have a node collector, and understand the tuple-valued fields of our
tree nodes (argument lists). Otherwise they work like `ast.NodeVisitor`.

Our trees are immutable, so there is no transformer here; rewriting is done
by recursive functions that build new trees (see `qquote.quotes.resolve`).

Basic usage summary::

    def references(tree):
        class ReferenceCollector(ASTVisitor):
            def examine(self, tree):
                if type(tree) is Reference:
                    self.collect(tree.name)
                self.generic_visit(tree)
        w = ReferenceCollector()
        w.visit(tree)
        return w.collected
"""

__all__ = ["ASTVisitor"]

from abc import ABCMeta, abstractmethod
from ast import AST, NodeVisitor, iter_fields


class ASTVisitor(NodeVisitor, metaclass=ABCMeta):
    """Tree visitor, like `ast.NodeVisitor`, but with a node collector.

    Accepts also a `list` or `tuple` of nodes.
    """
    def __init__(self):
        self.collected = []

    def collect(self, value):
        """Collect a value. The values are placed in the list `self.collected`."""
        self.collected.append(value)
        return value

    def visit(self, tree):
        """Start visiting `tree`. **Do not override this method; see `examine` instead.**"""
        if isinstance(tree, (list, tuple)):
            for elt in tree:
                self.visit(elt)
            return
        return self.examine(tree)

    def generic_visit(self, tree):
        """Visit all children of `tree`, including those inside tuple-valued fields."""
        for fieldname, value in iter_fields(tree):
            if isinstance(value, (list, tuple)):
                for item in value:
                    if isinstance(item, AST):
                        self.visit(item)
            elif isinstance(value, AST):
                self.visit(value)

    @abstractmethod
    def examine(self, tree):
        """Examine one node. **Abstract method, override this.**

        There is only one `examine` method. To detect node type, use `type(tree)`.

        This method must recurse explicitly where needed. Use:

          - `self.generic_visit(tree)` to visit all children of `tree`.
          - `self.visit(tree.something)` to selectively visit only some children.

        As in `ast.NodeVisitor`:

          - Return value of `examine` is forwarded by `visit`.
          - `generic_visit` always returns `None`.
        """
