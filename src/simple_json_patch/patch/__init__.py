from .engine import JsonPatchEngine, apply_patch
from .error_log import ErrorSink, PatchErrorLog
from .exceptions import (JsonPatchException, PathNotFoundError, IndexOutOfRangeError, TestFailedError,
                         TypeMismatchError, InvalidOperationError)
