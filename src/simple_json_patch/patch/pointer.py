"""
JSON Pointer (RFC 6901) parsing and formatting.
"""

from .exceptions import InvalidOperationError, IndexOutOfRangeError

APPEND_TOKEN = '-'


def escape_token(token: str) -> str:
    """
    Escape a single reference token for use inside a pointer.
    :param token: The raw token, e.g. a mapping key.
    :return: The escaped token.
    """
    return token.replace('~', '~0').replace('/', '~1')


def unescape_token(token: str) -> str:
    """
    Unescape a single reference token taken from a pointer.

    ``~1`` is decoded before ``~0`` so that ``~01`` becomes ``~1``.
    :param token: The escaped token.
    :return: The raw token.
    :raises InvalidOperationError: If the token contains an invalid escape.
    """
    index = token.find('~')
    while index != -1:
        if index + 1 >= len(token) or token[index + 1] not in '01':
            raise InvalidOperationError(f'Invalid escape sequence in pointer token "{token}"')
        index = token.find('~', index + 2)

    return token.replace('~1', '/').replace('~0', '~')


def parse_pointer(pointer: str) -> list[str]:
    """
    Split a pointer into its unescaped reference tokens.
    :param pointer: The pointer, either empty for the whole document or starting with "/".
    :return: The list of tokens; empty for the whole document.
    :raises InvalidOperationError: If the pointer is malformed.
    """
    if not isinstance(pointer, str):
        raise InvalidOperationError(f'Pointer must be a string, got {type(pointer).__name__}')
    if pointer == '':
        return []
    if not pointer.startswith('/'):
        raise InvalidOperationError(f'Pointer "{pointer}" must be empty or start with "/"', pointer)

    return [unescape_token(t) for t in pointer[1:].split('/')]


def format_pointer(tokens: list[str | int]) -> str:
    """
    Build a pointer from a list of raw tokens.
    :param tokens: The tokens, mapping keys or sequence indices.
    :return: The pointer string.
    """
    return ''.join('/' + escape_token(str(t)) for t in tokens)


def is_proper_prefix(prefix: list[str], tokens: list[str]) -> bool:
    """
    Whether one token list addresses an ancestor of the other.
    :param prefix: Tokens of the candidate ancestor.
    :param tokens: Tokens of the candidate descendant.
    :return: True if ``prefix`` is strictly shorter and matches the start of ``tokens``.
    """
    return len(prefix) < len(tokens) and tokens[:len(prefix)] == prefix


def parse_index(token: str, length: int, allow_end: bool = False) -> int:
    """
    Interpret a reference token as a sequence index.
    :param token: The token, digits or "-".
    :param length: The current length of the sequence.
    :param allow_end: Whether the position one past the last element is valid,
        which is only the case when inserting.
    :return: The index.
    :raises IndexOutOfRangeError: If the token is not a valid index for the sequence.
    """
    if token == APPEND_TOKEN:
        if allow_end:
            return length
        raise IndexOutOfRangeError('The "-" index is only valid when adding to a sequence')

    if not token.isdigit() or not token.isascii() or (len(token) > 1 and token[0] == '0'):
        raise IndexOutOfRangeError(f'"{token}" is not a valid sequence index')

    # More digits than the length always means out of range, and keeps int() bounded
    if len(token) > len(str(length)):
        raise IndexOutOfRangeError(f'Index "{token[:20]}..." is out of range for a sequence of length {length}')

    index = int(token)
    limit = length if allow_end else length - 1
    if index > limit:
        raise IndexOutOfRangeError(
            f'Index {index} is out of range for a sequence of length {length}'
        )

    return index
