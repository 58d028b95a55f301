"""Output schema handed to the AI model for plant identification.

It is part of the request contract and must describe exactly the shape PlantData
parses; tests compare both."""
from __future__ import annotations

from typing import Final

from google.genai import types

CARE_FIELDS: Final[tuple[str, ...]] = (
    "light",
    "water",
    "soil",
    "humidity",
    "temperature",
    "toxicity",
)
PLANT_DATA_FIELDS: Final[tuple[str, ...]] = (
    "name",
    "scientificName",
    "description",
    "care",
    "quickTips",
)

_CARE_DESCRIPTIONS: Final[dict[str, str]] = {
    "light": "Light requirements in Hebrew (e.g., 'אור מלא', 'צל חלקי')",
    "water": "Watering schedule and needs in Hebrew",
    "soil": "Soil type recommendations in Hebrew",
    "humidity": "Humidity preferences in Hebrew",
    "temperature": "Ideal temperature range in Hebrew (Celsius)",
    "toxicity": "Toxicity info for pets/humans in Hebrew",
}

PLANT_DATA_RESPONSE_SCHEMA: Final[types.Schema] = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "name": types.Schema(
            type=types.Type.STRING, description="Common name of the plant in Hebrew"
        ),
        "scientificName": types.Schema(
            type=types.Type.STRING, description="Scientific name of the plant (Latin)"
        ),
        "description": types.Schema(
            type=types.Type.STRING,
            description="A brief description of the plant's appearance and origin in Hebrew",
        ),
        "care": types.Schema(
            type=types.Type.OBJECT,
            properties={
                field: types.Schema(type=types.Type.STRING, description=description)
                for field, description in _CARE_DESCRIPTIONS.items()
            },
            required=list(CARE_FIELDS),
        ),
        "quickTips": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="List of 3-5 quick actionable tips for success in Hebrew",
        ),
    },
    required=list(PLANT_DATA_FIELDS),
)
