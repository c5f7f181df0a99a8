"""
Utility functions for comparing and copying values in a patch target.
"""

import copy
from enum import Enum
from typing import Any
from pydantic_core import to_jsonable_python


def to_plain(value: Any) -> Any:
    """
    Convert a value from a target graph into its JSON form.

    Pydantic models are dumped by alias, enums become their values, and
    containers are converted recursively.
    :param value: The value to convert.
    :return: The plain JSON representation (dict, list, str, number, bool or None).
    """
    if isinstance(value, Enum):
        return to_plain(value.value)
    if value is None or isinstance(value, (str, bool, int, float)):
        return value

    return to_jsonable_python(value, by_alias=True)


def json_equal(left: Any, right: Any) -> bool:
    """
    Deep structural equality using JSON semantics.

    Numbers compare by value regardless of int or float, booleans never equal
    numbers, and mapping key order is irrelevant.
    :param left: The first value, already in plain JSON form.
    :param right: The second value, already in plain JSON form.
    :return: True if both values represent the same JSON document.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right

    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right

    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(json_equal(left[k], right[k]) for k in left)

    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right))

    if type(left) is not type(right):
        return False

    return left == right


def detach(value: Any) -> Any:
    """
    Return an independent copy of a value so that the graph never shares
    mutable state with a patch document or with another location.
    :param value: The value to copy.
    :return: A deep copy of the value, or the value itself for immutable scalars.
    """
    if value is None or isinstance(value, (str, bool, int, float, Enum)):
        return value

    return copy.deepcopy(value)
