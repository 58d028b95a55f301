from __future__ import annotations

from typing import Annotated

from pydantic import Field

from botanical_friend.shared.base_schema import BaseSchema, RequestContainer


class PlantCare(BaseSchema):
    light: str
    water: str
    soil: str
    humidity: str
    temperature: str
    toxicity: str


class PlantData(BaseSchema):
    """Identification result; only ever constructed complete, never partially."""

    name: str
    scientific_name: str
    description: str
    care: PlantCare
    quick_tips: list[str]


class UrlSubmission(RequestContainer):
    url: Annotated[str, Field(min_length=1, max_length=4_000)]


class UrlInputUpdate(RequestContainer):
    visible: bool
    text: Annotated[str, Field(max_length=4_000)] = ""
