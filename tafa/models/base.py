from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Stored/transported records use camelCase keys (``createdAt``, ``xpToNextLevel``)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
