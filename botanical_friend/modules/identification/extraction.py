from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING

from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from botanical_friend import settings
from botanical_friend.constants import (
    EXTRACTION_INSTRUCTION,
    EXTRACTION_SYSTEM_INSTRUCTION,
    PROVIDER_IMAGE_MIME_TYPE,
)
from botanical_friend.exceptions import (
    ConfigurationError,
    EmptyResponseError,
    MalformedResponseError,
    ProviderRequestError,
)
from botanical_friend.extensions.ai import PROVIDER_TRANSPORT_ERRORS, is_credential_error
from botanical_friend.modules.identification.response_schema import PLANT_DATA_RESPONSE_SCHEMA
from botanical_friend.modules.identification.schemas import PlantData

if TYPE_CHECKING:
    from google import genai

logger = logging.getLogger(__name__)

RECOMMENDED_TIPS_COUNT = range(3, 6)


def parse_plant_data(text: str | None) -> PlantData:
    """Parse the model's raw response text; the result is either complete or an error is
    raised."""
    if not text or not text.strip():
        raise EmptyResponseError()

    try:
        plant_data = PlantData.model_validate_json(text)
    except ValidationError as exc:
        logger.error(f"Plant data failed validation: {exc}\nRaw response: {text[:2_000]}")
        raise MalformedResponseError(f"{exc.error_count()} validation errors") from exc

    if len(plant_data.quick_tips) not in RECOMMENDED_TIPS_COUNT:
        logger.warning(f"Got {len(plant_data.quick_tips)} quick tips for {plant_data.name}.")
    return plant_data


class PlantIdentifier:
    """Identifies the plant on an image and retrieves care guidance in a single structured
    output request. Callers must not run two analyses concurrently."""

    def __init__(self, client: genai.Client | None, model_name: str | None = None):
        self._client = client
        self.model_name = model_name or settings.ai.model_name

    def _build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=PLANT_DATA_RESPONSE_SCHEMA,
            system_instruction=EXTRACTION_SYSTEM_INSTRUCTION,
        )

    async def analyze(self, image_base64: str) -> PlantData:
        if self._client is None:
            raise ConfigurationError("No Gemini API client available for plant identification")

        contents = [
            types.Part.from_bytes(
                data=base64.b64decode(image_base64), mime_type=PROVIDER_IMAGE_MIME_TYPE
            ),
            types.Part.from_text(text=EXTRACTION_INSTRUCTION),
        ]
        logger.info(f"Requesting plant identification from {self.model_name}.")
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=self._build_config(),
            )
        except genai_errors.APIError as exc:
            if is_credential_error(exc):
                raise ConfigurationError(f"Gemini API rejected credentials: {exc}") from exc
            raise ProviderRequestError(f"{exc.code} {exc.status}: {exc.message}") from exc
        except PROVIDER_TRANSPORT_ERRORS as exc:
            raise ProviderRequestError(f"{type(exc).__name__}: {exc}") from exc

        plant_data = parse_plant_data(response.text)
        logger.info(f"Identified plant {plant_data.name} ({plant_data.scientific_name}).")
        return plant_data
