from typing import Any, Optional
from pydantic import Field, ConfigDict

from simple_json_patch.etc.enums import PatchErrorType
from .base import JsonModel
from .json_patch import JsonPatchEntry


class JsonPatchError(JsonModel):
    """
    A failure of a single operation while applying a JSON Patch document.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        serialize_by_alias=True,
    )

    error_type: PatchErrorType = Field(
        ...,
        alias='errorType',
        description='The category of the failure',
    )
    operation: Optional[JsonPatchEntry] = Field(
        default=None,
        description='The operation that failed, if the failure is tied to one',
    )
    affected_object: Any = Field(
        default=None,
        alias='affectedObject',
        exclude=True,
        description='The object the patch document was being applied to',
    )
    message: str = Field(
        ...,
        description='A human readable description of the failure',
    )

    @property
    def affected_type(self) -> str:
        """
        Name of the type of the affected object, used to group errors.
        """
        return type(self.affected_object).__name__
