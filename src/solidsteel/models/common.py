"""Shared pydantic base for camelCase JSON records."""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def _assume_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


# Date-only and naive values are taken as UTC so records always compare
UtcDatetime = Annotated[datetime, AfterValidator(_assume_utc)]


class CamelModel(BaseModel):
    """Model whose JSON form uses camelCase keys.

    Accepts either camelCase or snake_case on input; dump with
    ``by_alias=True`` to get the wire format.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """Wire-format dict (camelCase keys, unset optionals dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
