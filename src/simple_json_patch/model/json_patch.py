import json
from collections.abc import Mapping
from typing import Any, Iterator, Optional
import jsonpatch
from pydantic import Field, ConfigDict, RootModel, ValidationError, field_validator

from simple_json_patch.etc.enums import JsonPatchOperation
from simple_json_patch.etc.utils import to_plain
from .base import JsonModel


class JsonPatchEntry(JsonModel):
    """
    A single JSON Patch entry as per RFC 6902.

    Whether ``value`` was supplied is tracked through the set of explicitly
    set fields, so an explicit ``null`` is a valid value for add, replace
    and test.
    """

    model_config = ConfigDict(
        extra='forbid',
        serialize_by_alias=True,
    )

    op: JsonPatchOperation | str = Field(
        ...,
        description='The operation to be performed',
    )
    path: str = Field(
        ...,
        description='A JSON Pointer to the target field',
    )
    value: Any = Field(
        default=None,
        description='The value to be used in the operation. Not used for "remove", "move" and "copy".',
    )
    from_: Optional[str] = Field(
        default=None,
        alias='from',
        description='A JSON Pointer to the source location for "move" and "copy" operations',
    )

    @field_validator('op')
    @classmethod
    def _known_operation(cls, op: JsonPatchOperation | str) -> JsonPatchOperation | str:
        # Unknown tags are kept as text and rejected when the entry is applied
        if isinstance(op, str):
            try:
                return JsonPatchOperation(op)
            except ValueError:
                return op
        return op

    @property
    def has_value(self) -> bool:
        """
        Whether the entry carries a ``value`` member, even a null one.
        """
        return 'value' in self.model_fields_set

    @property
    def op_name(self) -> str:
        """
        The operation tag as it appears in the wire format.
        """
        if isinstance(self.op, JsonPatchOperation):
            return self.op.value
        return self.op

    def to_dict(self) -> dict:
        return self.model_dump(mode='json', by_alias=True, exclude_unset=True)

    def __str__(self) -> str:
        if self.from_ is not None:
            return f'{self.op_name} {self.from_} -> {self.path}'
        return f'{self.op_name} {self.path}'


class JsonPatchDocument(RootModel[list[JsonPatchEntry]]):
    """
    An ordered list of JSON Patch entries, applied strictly in sequence.
    """

    root: list[JsonPatchEntry] = Field(
        default_factory=list,
        description='The entries of the patch document, in application order',
    )

    def __iter__(self) -> Iterator[JsonPatchEntry]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> JsonPatchEntry:
        return self.root[index]

    @classmethod
    def from_json(cls, text: str | bytes) -> 'JsonPatchDocument':
        """
        Parse a patch document from its JSON representation.
        :param text: The raw JSON array of patch operations.
        :return: The parsed patch document.
        :raises InvalidOperationError: If the text is not a valid patch document.
        """
        from simple_json_patch.patch.exceptions import InvalidOperationError

        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise InvalidOperationError(f'Invalid JSON Patch document: {e}') from e

    @classmethod
    def from_entries(cls, entries) -> 'JsonPatchDocument':
        """
        Build a patch document from a document, or an iterable of entries or
        mappings.
        :param entries: The patch operations to wrap.
        :return: The patch document.
        :raises InvalidOperationError: If an entry cannot be parsed.
        """
        from simple_json_patch.patch.exceptions import InvalidOperationError

        if isinstance(entries, cls):
            return entries
        if isinstance(entries, (str, bytes)):
            return cls.from_json(entries)
        if isinstance(entries, Mapping):
            raise InvalidOperationError('A JSON Patch document must be an array of operations')

        try:
            return cls.model_validate(list(entries))
        except (ValidationError, TypeError) as e:
            raise InvalidOperationError(f'Invalid JSON Patch document: {e}') from e

    @classmethod
    def from_diff(cls, source: Any, target: Any) -> 'JsonPatchDocument':
        """
        Compute the patch document that turns ``source`` into ``target``.

        Models are compared in their JSON form, by alias.
        :param source: The original object.
        :param target: The desired object.
        :return: A patch document which, applied to ``source``, yields ``target``.
        """
        json_patch = jsonpatch.JsonPatch.from_diff(to_plain(source), to_plain(target))

        return cls.model_validate(list(json_patch))

    def to_list(self) -> list[dict]:
        """
        Serialise the document into its wire representation.
        :return: A list of patch operation dictionaries.
        """
        return [entry.to_dict() for entry in self.root]

    def to_json(self, indent: int | None = None) -> str:
        """
        Serialise the document into a JSON string.
        :param indent: Optional indentation for pretty printing.
        :return: The JSON array of patch operations.
        """
        return json.dumps(self.to_list(), indent=indent)

    def apply_to(self, target: Any, error_sink=None, dry_run: bool = False) -> Any:
        """
        Apply the document to a target with the default engine.
        :param target: The object graph to patch.
        :param error_sink: Optional sink collecting errors instead of raising.
        :param dry_run: Patch a copy of the target and leave the original untouched.
        :return: The patched object.
        """
        from simple_json_patch.patch.engine import apply_patch

        return apply_patch(target, self, error_sink=error_sink, dry_run=dry_run)
