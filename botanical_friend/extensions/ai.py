from __future__ import annotations

import asyncio
import logging

import aiohttp
import httpx
from google import genai
from google.genai import errors, types
from pydantic import SecretStr

from botanical_friend.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# google-genai sends async requests through aiohttp when it is installed, httpx otherwise
PROVIDER_TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, httpx.HTTPError)


def create_genai_client(api_key: SecretStr | None, request_timeout_seconds: float) -> genai.Client:
    """Client for the Gemini API; one per process, shared by plant identification and
    the chat session."""
    if api_key is None or not api_key.get_secret_value().strip():
        raise ConfigurationError("GEMINI_API_KEY is not configured")
    logger.info("Creating Gemini API client.")
    return genai.Client(
        api_key=api_key.get_secret_value(),
        http_options=types.HttpOptions(timeout=int(request_timeout_seconds * 1000)),
    )


def is_credential_error(exc: errors.APIError) -> bool:
    """Gemini answers invalid keys with 400 API_KEY_INVALID, missing permissions with
    401/403."""
    return exc.code in (401, 403) or "API_KEY_INVALID" in str(exc)
