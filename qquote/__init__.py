"""qquote: Quasiquotation for Python. Capture, build, and evaluate code as data."""

from .calls import build_call, call_args, call_head, call_modify, call_name  # noqa: F401
from .capture import (CaptureResult, Promise, MISSING, lazy, is_lazy, is_quoting, force,  # noqa: F401
                      quote_now, quote_caller, quote_caller_all, quote_caller_all_results)
from .core import (QuasiquoteError, UnrepresentableValue, NotASequence, InvalidName,  # noqa: F401
                   NoCapturableArgument, UnresolvedMarker,
                   InvalidSpliceContext, InvalidDefineContext)
from .dumper import dump  # noqa: F401
from .env import Environment, baseenv, caller_env  # noqa: F401
from .evaluator import evaluate, eval_tidy, as_data_mask  # noqa: F401
from .markers import Unquote, Splice, Define  # noqa: F401
from .nodes import Literal, Reference, Call, Pairlist, Arg, to_node  # noqa: F401
from .quotes import resolve  # noqa: F401
from .reader import read  # noqa: F401

# For public API inspection, import modules that wouldn't otherwise get imported.
from . import debug  # noqa: F401
from . import pycachecleaner  # noqa: F401

__version__ = "1.0.0"
