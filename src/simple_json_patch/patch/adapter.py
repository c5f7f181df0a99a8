"""
Adapters giving a uniform view over the containers of a target graph.

A target graph is built from mappings, lists and pydantic models. Each
adapter knows how one kind of container resolves a pointer token, and how
values are read, inserted, removed and replaced in it. Adapters also expose
the type annotation that constrains each slot, which is used to validate
values written into typed objects.
"""

import types
from abc import ABC, abstractmethod
from typing import Any, Annotated, Union, get_args, get_origin
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo

from .exceptions import PathNotFoundError, TypeMismatchError
from .pointer import parse_index


def unwrap_optional(annotation: Any) -> Any:
    """
    Strip ``Annotated`` metadata and ``None`` members from an annotation.
    :param annotation: The annotation to simplify.
    :return: The underlying annotation, or ``Any`` if nothing is left.
    """
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]

    if get_origin(annotation) in (Union, types.UnionType):
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            return unwrap_optional(members[0])

    return annotation


def item_annotation(annotation: Any, container: type) -> Any:
    """
    Get the annotation of the items held by a typed container.
    :param annotation: The annotation of the container, e.g. ``list[int]``.
    :param container: The abstract container type, ``Sequence`` or ``Mapping``.
    :return: The item (or mapping value) annotation, ``Any`` if unknown.
    """
    annotation = unwrap_optional(annotation)
    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is None or not isinstance(origin, type) or not issubclass(origin, container) or not args:
        return Any

    return args[-1]


def field_annotation(field: FieldInfo) -> Any:
    """
    Get the full annotation of a model field, including its constraints.
    :param field: The pydantic field.
    :return: The annotation to validate values against.
    """
    if field.metadata:
        return Annotated[field.annotation, *field.metadata]
    return field.annotation


def accepts_none(annotation: Any) -> bool:
    """
    Whether ``None`` is a valid value for an annotation.
    """
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]

    if annotation is Any or annotation is None or annotation is type(None):
        return True
    if get_origin(annotation) in (Union, types.UnionType):
        return any(accepts_none(a) for a in get_args(annotation))

    return False


class ContainerAdapter(ABC):
    """
    An interface over one container in a target graph.
    """

    def __init__(self,
                 container: Any,
                 annotation: Any = Any,
                 enforce_schema: bool = True,
                 ):
        self.container = container
        self.annotation = annotation
        self.enforce_schema = enforce_schema

    @abstractmethod
    def lookup(self, token: str) -> Any:
        """
        Resolve a token into the key of an existing slot.
        :param token: The unescaped pointer token.
        :return: The key (mapping key, list index or field name).
        :raises PathNotFoundError: If no slot matches the token.
        :raises IndexOutOfRangeError: If the token is not a valid index.
        """

    @abstractmethod
    def child_annotation(self, key: Any) -> Any:
        """
        The annotation constraining the slot at a key.
        :param key: A key returned by lookup, or the insertion token.
        :return: The annotation, ``Any`` when unconstrained.
        """

    @abstractmethod
    def get(self, key: Any) -> Any:
        """
        Read the value in a slot.
        :param key: A key returned by lookup.
        :return: The current value.
        """

    @abstractmethod
    def add(self, token: str, value: Any) -> Any:
        """
        Insert a value, with the semantics of the JSON Patch ``add`` operation.
        :param token: The unescaped pointer token of the new location.
        :param value: The value to insert, already validated.
        :return: The key the value was stored under.
        """

    @abstractmethod
    def remove(self, key: Any) -> Any:
        """
        Remove the value in a slot.
        :param key: A key returned by lookup.
        :return: The removed value.
        """

    @abstractmethod
    def replace(self, key: Any, value: Any) -> None:
        """
        Overwrite the value in an existing slot.
        :param key: A key returned by lookup.
        :param value: The new value, already validated.
        """

    def validate(self, key: Any, value: Any) -> Any:
        """
        Validate a value against the annotation of a slot.
        :param key: The key or insertion token of the slot.
        :param value: The value to validate.
        :return: The validated value, converted to the declared type.
        :raises TypeMismatchError: If the value does not fit the annotation.
        """
        annotation = self.child_annotation(key)

        if not self.enforce_schema or annotation is Any:
            return value

        try:
            return TypeAdapter(annotation).validate_python(value)
        except ValidationError as e:
            raise TypeMismatchError(
                f'The value {value!r} is not valid for "{key}" of {type(self.container).__name__}: '
                f'{e.error_count()} validation error(s), first: {e.errors()[0]["msg"]}'
            ) from e


class MappingAdapter(ContainerAdapter):
    """
    Adapter over a mutable mapping with string keys. Keys match exactly.
    """

    def lookup(self, token: str) -> str:
        if token not in self.container:
            raise PathNotFoundError(f'The key "{token}" was not found')
        return token

    def child_annotation(self, key: Any) -> Any:
        return item_annotation(self.annotation, Mapping)

    def get(self, key: str) -> Any:
        return self.container[key]

    def add(self, token: str, value: Any) -> str:
        self.container[token] = value
        return token

    def remove(self, key: str) -> Any:
        return self.container.pop(key)

    def replace(self, key: str, value: Any) -> None:
        self.container[key] = value


class SequenceAdapter(ContainerAdapter):
    """
    Adapter over a mutable sequence addressed by index.
    """

    def lookup(self, token: str) -> int:
        return parse_index(token, len(self.container))

    def child_annotation(self, key: Any) -> Any:
        return item_annotation(self.annotation, Sequence)

    def get(self, key: int) -> Any:
        return self.container[key]

    def add(self, token: str, value: Any) -> int:
        index = parse_index(token, len(self.container), allow_end=True)
        self.container.insert(index, value)
        return index

    def remove(self, key: int) -> Any:
        return self.container.pop(key)

    def replace(self, key: int, value: Any) -> None:
        self.container[key] = value


class ModelAdapter(ContainerAdapter):
    """
    Adapter over a pydantic model. Fields are fixed by the model class, so
    ``add`` overwrites an existing field and ``remove`` resets it to its
    default.
    """

    def __init__(self,
                 container: BaseModel,
                 annotation: Any = Any,
                 enforce_schema: bool = True,
                 case_insensitive: bool = True,
                 ):
        super().__init__(container, annotation, enforce_schema)
        self.case_insensitive = case_insensitive

    @property
    def fields(self) -> dict[str, FieldInfo]:
        return type(self.container).model_fields

    def lookup(self, token: str) -> str:
        for name, field in self.fields.items():
            if token in (name, field.alias):
                return name

        if self.case_insensitive:
            folded = token.replace('_', '').casefold()
            for name, field in self.fields.items():
                candidates = (name, field.alias or name)
                if any(c.replace('_', '').casefold() == folded for c in candidates):
                    return name

        raise PathNotFoundError(
            f'The target location "{token}" was not found on {type(self.container).__name__}'
        )

    def child_annotation(self, key: str) -> Any:
        return field_annotation(self.fields[self.lookup(key)])

    def get(self, key: str) -> Any:
        return getattr(self.container, key)

    def add(self, token: str, value: Any) -> str:
        key = self.lookup(token)
        self.replace(key, value)
        return key

    def remove(self, key: str) -> Any:
        field = self.fields[key]
        previous = getattr(self.container, key)

        if not field.is_required():
            default = field.get_default(call_default_factory=True)
        elif accepts_none(field.annotation):
            default = None
        else:
            raise TypeMismatchError(
                f'The required field "{key}" of {type(self.container).__name__} cannot be removed'
            )

        self.replace(key, default)
        return previous

    def replace(self, key: str, value: Any) -> None:
        # Field and model validators run even without validate_assignment
        previous = dict(self.container.__dict__)
        try:
            if self.enforce_schema:
                self.container.__pydantic_validator__.validate_assignment(self.container, key, value)
            else:
                setattr(self.container, key, value)
        except ValidationError as e:
            # An after model validator fails once the new value is already stored
            self.container.__dict__.update(previous)
            raise TypeMismatchError(
                f'The value {value!r} cannot be assigned to "{key}" of '
                f'{type(self.container).__name__}: {e.errors()[0]["msg"]}'
            ) from e


def get_adapter(container: Any,
                annotation: Any = Any,
                enforce_schema: bool = True,
                case_insensitive: bool = True,
                ) -> ContainerAdapter | None:
    """
    Pick the adapter for a container in the graph.
    :param container: The object to wrap.
    :param annotation: The annotation of the slot holding the container.
    :param enforce_schema: Whether values are validated against annotations.
    :param case_insensitive: Whether model fields match ignoring case.
    :return: The adapter, or None if the object is a leaf that cannot be traversed.
    """
    if isinstance(container, BaseModel):
        return ModelAdapter(container, type(container), enforce_schema, case_insensitive)
    if isinstance(container, MutableMapping):
        return MappingAdapter(container, annotation, enforce_schema)
    if isinstance(container, MutableSequence):
        return SequenceAdapter(container, annotation, enforce_schema)

    return None
