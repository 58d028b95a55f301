from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Fields are snake_case in python and camelCase on the wire."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RequestContainer(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )
