from typing import Iterator, Protocol

from simple_json_patch.model.patch_error import JsonPatchError


class ErrorSink(Protocol):
    """
    Anything errors can be appended to; a plain ``list`` qualifies.
    """

    def append(self, error: JsonPatchError) -> None:
        ...


class PatchErrorLog:
    """
    An append-only, ordered log of the operations that failed while applying
    a patch document in collect-errors mode.
    """

    def __init__(self):
        self._errors: list[JsonPatchError] = []

    def __iter__(self) -> Iterator[JsonPatchError]:
        return iter(list(self._errors))

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __getitem__(self, index: int) -> JsonPatchError:
        return self._errors[index]

    def append(self, error: JsonPatchError) -> None:
        """
        Record a failed operation.
        :param error: The error describing the failure.
        """
        self._errors.append(error)

    @property
    def errors(self) -> list[JsonPatchError]:
        """
        A copy of the recorded errors, in the order they happened.
        """
        return list(self._errors)

    @property
    def messages(self) -> list[str]:
        """
        The messages of the recorded errors, in the order they happened.
        """
        return [e.message for e in self._errors]

    def by_affected_type(self) -> dict[str, list[str]]:
        """
        Group the error messages by the type name of the affected object.
        :return: A mapping from type name to the ordered list of messages.
        """
        grouped: dict[str, list[str]] = {}

        for error in self._errors:
            grouped.setdefault(error.affected_type, []).append(error.message)

        return grouped
