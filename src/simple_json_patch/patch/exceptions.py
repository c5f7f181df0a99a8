"""
Exceptions raised while applying a JSON Patch document.

Every exception carries a ``PatchErrorType`` and, once the engine has
associated it with an operation, the ``JsonPatchError`` record describing
the failure.
"""

from simple_json_patch.etc.enums import PatchErrorType


class JsonPatchException(Exception):
    """
    Base class for all failures of a JSON Patch operation.
    """

    error_type: PatchErrorType = PatchErrorType.INVALID_OPERATION

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.error = None

    def __str__(self) -> str:
        return self.message


class PathNotFoundError(JsonPatchException):
    """
    A pointer segment does not resolve against the current graph.
    """

    error_type = PatchErrorType.PATH_NOT_FOUND


class IndexOutOfRangeError(JsonPatchException):
    """
    A sequence index is negative, not a number, or beyond the bounds.
    """

    error_type = PatchErrorType.INDEX_OUT_OF_RANGE


class TestFailedError(JsonPatchException):
    """
    The value at the location of a ``test`` operation is not the expected one.
    """

    __test__ = False
    error_type = PatchErrorType.TEST_FAILED


class TypeMismatchError(JsonPatchException):
    """
    The value does not fit the shape declared for the target location.
    """

    error_type = PatchErrorType.TYPE_MISMATCH


class InvalidOperationError(JsonPatchException):
    """
    The operation itself is malformed: unknown tag, missing member, bad
    pointer syntax, or a move into its own subtree.
    """

    error_type = PatchErrorType.INVALID_OPERATION
