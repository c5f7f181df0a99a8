__version__ = '0.1.0'

from simple_json_patch.model.json_patch import JsonPatchEntry, JsonPatchDocument
from simple_json_patch.model.patch_error import JsonPatchError
from simple_json_patch.patch import (JsonPatchEngine, PatchErrorLog, apply_patch, JsonPatchException,
                                     PathNotFoundError, IndexOutOfRangeError, TestFailedError,
                                     TypeMismatchError, InvalidOperationError)
