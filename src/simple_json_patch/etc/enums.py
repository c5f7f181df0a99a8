from enum import Enum, StrEnum


class JsonPatchOperation(Enum):
    """
    Operations that can be performed in a JSON Patch.
    """
    ADD = 'add'
    REMOVE = 'remove'
    REPLACE = 'replace'
    MOVE = 'move'
    COPY = 'copy'
    TEST = 'test'


class PatchErrorType(Enum):
    """
    Categories of failures reported while applying a JSON Patch.
    """
    PATH_NOT_FOUND = 'path_not_found'
    INDEX_OUT_OF_RANGE = 'index_out_of_range'
    TEST_FAILED = 'test_failed'
    TYPE_MISMATCH = 'type_mismatch'
    INVALID_OPERATION = 'invalid_operation'


class PhoneNumberType(StrEnum):
    """
    Kinds of phone number held by a person record. Serialised by name.
    """
    MOBILE = 'Mobile'
    HOME = 'Home'
    WORK = 'Work'
    OTHER = 'Other'
