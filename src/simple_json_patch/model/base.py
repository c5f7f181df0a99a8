from pydantic import BaseModel, ConfigDict


class JsonModel(BaseModel):
    """
    Base class for all models in the package, serialised by alias.
    """

    model_config = ConfigDict(
        populate_by_name=True,
    )

    def to_dict(self) -> dict:
        """
        Dump the model into a JSON compatible dictionary, omitting unset
        optional values.
        :return: The dictionary representation of the model.
        """
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)
