"""
The JSON Patch (RFC 6902) engine.

Operations are applied strictly in document order to the target graph, which
is mutated in place. Nothing is rolled back when an operation fails: in
fail-fast mode the exception propagates after the earlier operations have
been applied, and in collect-errors mode the failure is recorded in the error
sink and processing continues with the next operation.
"""

import copy
from collections.abc import Mapping, MutableMapping, MutableSequence
from typing import Any
from pydantic import BaseModel, TypeAdapter, ValidationError

from simple_json_patch.etc.consts import LOGGER, CONFIG
from simple_json_patch.etc.enums import JsonPatchOperation
from simple_json_patch.etc.utils import to_plain, json_equal, detach
from simple_json_patch.model.json_patch import JsonPatchEntry, JsonPatchDocument
from simple_json_patch.model.patch_error import JsonPatchError
from .adapter import ContainerAdapter, get_adapter
from .error_log import ErrorSink, PatchErrorLog
from .exceptions import (JsonPatchException, PathNotFoundError, TestFailedError, TypeMismatchError,
                         InvalidOperationError)
from .pointer import parse_pointer, format_pointer, is_proper_prefix


class JsonPatchEngine:
    """
    Applies patch documents to object graphs of mappings, lists, scalars and
    pydantic models.

    The engine keeps no state between calls; one instance can be shared.
    """

    def __init__(self,
                 case_insensitive: bool | None = None,
                 enforce_schema: bool | None = None,
                 ):
        """
        :param case_insensitive: Match model fields ignoring case and underscores.
            Defaults to the configured value.
        :param enforce_schema: Validate values written into typed slots.
            Defaults to the configured value.
        """
        self.case_insensitive = CONFIG.case_insensitive_fields if case_insensitive is None else case_insensitive
        self.enforce_schema = CONFIG.enforce_schema if enforce_schema is None else enforce_schema

        self._handlers = {
            JsonPatchOperation.ADD: self._add,
            JsonPatchOperation.REMOVE: self._remove,
            JsonPatchOperation.REPLACE: self._replace,
            JsonPatchOperation.MOVE: self._move,
            JsonPatchOperation.COPY: self._copy,
            JsonPatchOperation.TEST: self._test,
        }

    def apply(self,
              target: Any,
              document,
              error_sink: ErrorSink | None = None,
              dry_run: bool = False,
              ) -> Any:
        """
        Apply a patch document to a target.

        Without an error sink the first failing operation raises, leaving the
        earlier operations applied. With a sink every failure is appended to
        it and the remaining operations still run.

        :param target: The object graph to patch, mutated in place.
        :param document: The patch document, as a JsonPatchDocument, a list of
            entries or mappings, or a JSON string.
        :param error_sink: Optional sink switching to collect-errors mode.
        :param dry_run: Patch a deep copy and leave the target untouched.
        :return: The patched object; the target itself unless dry_run is set.
        :raises JsonPatchException: In fail-fast mode, for the first failing operation.
        :raises InvalidOperationError: If the document cannot be parsed, in both modes.
        """
        document = JsonPatchDocument.from_entries(document)

        if dry_run:
            target = copy.deepcopy(target)

        failures = 0

        for index, entry in enumerate(document):
            LOGGER.debug('Applying JSON Patch operation %d: %s', index, entry)

            try:
                self.apply_operation(target, entry)
            except JsonPatchException as e:
                if e.path is None:
                    e.path = entry.path
                e.error = JsonPatchError(
                    error_type=e.error_type,
                    operation=entry,
                    affected_object=target,
                    message=e.message,
                )

                if error_sink is None:
                    LOGGER.debug('JSON Patch operation %d (%s) failed: %s', index, entry, e.message)
                    raise

                failures += 1
                LOGGER.warning('JSON Patch operation %d (%s) failed: %s', index, entry, e.message)
                error_sink.append(e.error)

        LOGGER.debug(
            'Applied %d of %d JSON Patch operations to %s',
            len(document) - failures,
            len(document),
            type(target).__name__,
        )

        return target

    def apply_collecting(self,
                         target: Any,
                         document,
                         dry_run: bool = False,
                         ) -> tuple[Any, PatchErrorLog]:
        """
        Apply a patch document in collect-errors mode with a fresh error log.
        :param target: The object graph to patch.
        :param document: The patch document.
        :param dry_run: Patch a deep copy and leave the target untouched.
        :return: The patched object and the log of failed operations.
        """
        error_log = PatchErrorLog()
        patched = self.apply(target, document, error_sink=error_log, dry_run=dry_run)

        return patched, error_log

    def apply_operation(self, target: Any, entry: JsonPatchEntry) -> None:
        """
        Apply a single operation to a target.
        :param target: The object graph to patch.
        :param entry: The operation.
        :raises JsonPatchException: If the operation fails; the target is left
            as it was before the operation.
        """
        try:
            op = JsonPatchOperation(entry.op)
        except ValueError:
            raise InvalidOperationError(f'Unknown operation "{entry.op_name}"', entry.path) from None

        self._handlers[op](target, entry)

    def _adapter(self, container: Any, annotation: Any = Any) -> ContainerAdapter | None:
        return get_adapter(
            container,
            annotation,
            enforce_schema=self.enforce_schema,
            case_insensitive=self.case_insensitive,
        )

    def _resolve_parent(self, target: Any, tokens: list[str]) -> tuple[ContainerAdapter, str]:
        """
        Walk the graph to the container holding the last token.
        :param target: The root of the graph.
        :param tokens: The pointer tokens, at least one.
        :return: The adapter of the parent container and the last token.
        """
        adapter = self._adapter(target)

        for depth, token in enumerate(tokens[:-1]):
            if adapter is None:
                raise PathNotFoundError(
                    f'The path "{format_pointer(tokens)}" cannot be resolved: '
                    f'"{format_pointer(tokens[:depth])}" is not a container'
                )

            key = adapter.lookup(token)
            adapter = self._adapter(adapter.get(key), adapter.child_annotation(key))

        if adapter is None:
            raise PathNotFoundError(
                f'The path "{format_pointer(tokens)}" cannot be resolved: '
                f'"{format_pointer(tokens[:-1])}" is not a container'
            )

        return adapter, tokens[-1]

    def _read(self, target: Any, tokens: list[str]) -> tuple[Any, Any]:
        """
        Read the value at a location.
        :return: The value and the annotation constraining its slot.
        """
        if not tokens:
            return target, type(target) if isinstance(target, BaseModel) else Any

        adapter, token = self._resolve_parent(target, tokens)
        key = adapter.lookup(token)

        return adapter.get(key), adapter.child_annotation(key)

    def _insert(self, target: Any, tokens: list[str], value: Any) -> None:
        if not tokens:
            self._replace_root(target, value)
            return

        adapter, token = self._resolve_parent(target, tokens)
        value = adapter.validate(token, value)
        adapter.add(token, value)

    def _delete(self, target: Any, tokens: list[str]) -> tuple[Any, ContainerAdapter, Any]:
        if not tokens:
            raise InvalidOperationError('The whole document cannot be removed')

        adapter, token = self._resolve_parent(target, tokens)
        key = adapter.lookup(token)

        return adapter.remove(key), adapter, key

    def _replace_root(self, target: Any, value: Any) -> None:
        """
        Replace the content of the root in place, keeping the caller's reference valid.
        """
        if isinstance(target, BaseModel):
            model_type = type(target)
            try:
                replacement = model_type.model_validate(value)
            except ValidationError as e:
                raise TypeMismatchError(
                    f'The value cannot replace the {model_type.__name__} document: '
                    f'{e.errors()[0]["msg"]}'
                ) from e

            for name in model_type.model_fields:
                setattr(target, name, getattr(replacement, name))
        elif isinstance(target, MutableMapping):
            if not isinstance(value, Mapping):
                raise TypeMismatchError(f'A {type(value).__name__} cannot replace a mapping document')
            target.clear()
            target.update(value)
        elif isinstance(target, MutableSequence):
            if not isinstance(value, list):
                raise TypeMismatchError(f'A {type(value).__name__} cannot replace a sequence document')
            target[:] = value
        else:
            raise InvalidOperationError(
                f'The {type(target).__name__} document cannot be replaced in place'
            )

    @staticmethod
    def _require_value(entry: JsonPatchEntry) -> Any:
        if not entry.has_value:
            raise InvalidOperationError(f'The "{entry.op_name}" operation requires a "value" member', entry.path)
        return entry.value

    @staticmethod
    def _require_from(entry: JsonPatchEntry) -> list[str]:
        if entry.from_ is None:
            raise InvalidOperationError(f'The "{entry.op_name}" operation requires a "from" member', entry.path)
        return parse_pointer(entry.from_)

    def _as_declared(self, annotation: Any, expected: Any) -> Any:
        """
        Bring a structured test value to the declared shape of its slot, so
        that defaults and alias spelling do not affect the comparison. Scalars
        and values that do not fit the declaration are compared as given.
        """
        if not self.enforce_schema or annotation is Any or not isinstance(expected, (dict, list)):
            return expected

        try:
            return TypeAdapter(annotation).validate_python(expected)
        except ValidationError as e:
            LOGGER.debug('Test value does not fit %s, comparing as given: %s', annotation, e)
            return expected

    def _add(self, target: Any, entry: JsonPatchEntry) -> None:
        tokens = parse_pointer(entry.path)
        self._insert(target, tokens, detach(self._require_value(entry)))

    def _remove(self, target: Any, entry: JsonPatchEntry) -> None:
        self._delete(target, parse_pointer(entry.path))

    def _replace(self, target: Any, entry: JsonPatchEntry) -> None:
        tokens = parse_pointer(entry.path)
        value = detach(self._require_value(entry))

        if not tokens:
            self._replace_root(target, value)
            return

        adapter, token = self._resolve_parent(target, tokens)
        key = adapter.lookup(token)
        adapter.replace(key, adapter.validate(key, value))

    def _move(self, target: Any, entry: JsonPatchEntry) -> None:
        from_tokens = self._require_from(entry)
        tokens = parse_pointer(entry.path)

        if from_tokens == tokens:
            self._read(target, from_tokens)
            return
        if is_proper_prefix(from_tokens, tokens):
            raise InvalidOperationError(
                f'Cannot move "{entry.from_}" into its own child location "{entry.path}"'
            )

        value, adapter, key = self._delete(target, from_tokens)

        try:
            self._insert(target, tokens, value)
        except JsonPatchException:
            adapter.add(str(key), value)
            raise

    def _copy(self, target: Any, entry: JsonPatchEntry) -> None:
        from_tokens = self._require_from(entry)
        tokens = parse_pointer(entry.path)
        value, _ = self._read(target, from_tokens)

        self._insert(target, tokens, detach(value))

    def _test(self, target: Any, entry: JsonPatchEntry) -> None:
        expected = self._require_value(entry)
        current, annotation = self._read(target, parse_pointer(entry.path))

        if not json_equal(to_plain(current), to_plain(self._as_declared(annotation, expected))):
            raise TestFailedError(
                f'The current value {to_plain(current)!r} at path "{entry.path}" is not equal '
                f'to the test value {to_plain(entry.value)!r}'
            )


def apply_patch(target: Any,
                document,
                error_sink: ErrorSink | None = None,
                dry_run: bool = False,
                ) -> Any:
    """
    Apply a patch document with an engine using the configured defaults.
    :param target: The object graph to patch, mutated in place.
    :param document: The patch document.
    :param error_sink: Optional sink switching to collect-errors mode.
    :param dry_run: Patch a deep copy and leave the target untouched.
    :return: The patched object.
    """
    return JsonPatchEngine().apply(target, document, error_sink=error_sink, dry_run=dry_run)
