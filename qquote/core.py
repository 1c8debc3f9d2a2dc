# -*- coding: utf-8; -*-
"""Engine core; the error taxonomy shared by all parts of the quasiquote engine.

Every error here is raised synchronously, at the point of detection. Nothing
is retried; quasiquotation is a pure tree transform, so there are no transient
failures. Errors raised by host callables during evaluation are never wrapped
into any of these types; they propagate as-is.
"""

__all__ = ["QuasiquoteError",
           "UnrepresentableValue", "NotASequence", "InvalidName",
           "NoCapturableArgument",
           "UnresolvedMarker",
           "InvalidSpliceContext", "InvalidDefineContext"]


class QuasiquoteError(Exception):
    """Base class for errors specific to the quasiquote engine.

    Each concrete error type also inherits from the builtin exception type
    closest in meaning, so that client code that doesn't care about the
    quasiquote engine can still catch e.g. a `TypeError`:

     - `TypeError` for values that have the wrong type for what was asked
       of them (cannot become a tree, is not a sequence, is not a name).

     - `SyntaxError` for markers that appear in a position where the tree
       layout does not allow them.

     - `LookupError` when a deferred capture finds nothing to capture.

     - `ValueError` when a tree that still has markers is evaluated.
    """


class UnrepresentableValue(QuasiquoteError, TypeError):
    """A run-time value has no tree representation (e.g. an open file).

    When raised while converting a sequence, `index` is the position of the
    offending element; otherwise it is `None`.
    """
    def __init__(self, message, index=None):
        super().__init__(message)
        self.index = index


class NotASequence(QuasiquoteError, TypeError):
    """The inner expression of a splice did not evaluate to an ordered sequence."""


class InvalidName(QuasiquoteError, TypeError):
    """The name expression of a define did not evaluate to something usable as a name."""


class NoCapturableArgument(QuasiquoteError, LookupError):
    """Deferred capture was requested, but there is no caller or no supplied argument."""


class UnresolvedMarker(QuasiquoteError, ValueError):
    """Evaluation reached a quasiquote marker; the tree was not resolved first."""


class InvalidSpliceContext(QuasiquoteError, SyntaxError):
    """A splice appeared outside an argument list or element list."""


class InvalidDefineContext(QuasiquoteError, SyntaxError):
    """A define appeared outside an argument position."""
