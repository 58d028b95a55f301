from __future__ import annotations

import logging
from typing import Final

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from botanical_friend import local_config, settings
from botanical_friend.exceptions import ConfigurationError
from botanical_friend.extensions.ai import create_genai_client
from botanical_friend.extensions.app_context import create_app_context
from botanical_friend.extensions.config_values import Environment
from botanical_friend.extensions.logging import configure_root_logger
from botanical_friend.modules.chatbot.routes import router as chatbot_router
from botanical_friend.modules.identification.routes import router as identification_router
from botanical_friend.modules.view.routes import router as view_router

configure_root_logger(
    log_severity_console=local_config.log_settings.log_level_console,
    log_severity_file=local_config.log_settings.log_level_file,
    log_file_path=local_config.log_settings.log_file_path,
)
logger = logging.getLogger(__name__)

COMMON_PREFIX: Final[str] = "/api"
app = FastAPI(
    title="Botanical Friend",
    docs_url=COMMON_PREFIX + "/docs" if local_config.environment == Environment.DEV else None,
    redoc_url=COMMON_PREFIX + "/redoc" if local_config.environment == Environment.DEV else None,
    openapi_url=COMMON_PREFIX + "/openapi.json"
    if local_config.environment == Environment.DEV
    else None,
)

ORIGINS: Final[list[str]] = list(settings.cors.origins)
# additional CORS for development only
if local_config.allow_cors:
    ORIGINS.extend(settings.cors.dev_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(view_router, prefix=COMMON_PREFIX)
app.include_router(identification_router, prefix=COMMON_PREFIX)
app.include_router(chatbot_router, prefix=COMMON_PREFIX)


@app.on_event("startup")
async def startup_event() -> None:
    logger.info("Starting up, creating Gemini client and chat session")
    try:
        client = create_genai_client(
            local_config.gemini_api_key,
            request_timeout_seconds=settings.ai.request_timeout_seconds,
        )
    except ConfigurationError as exc:
        # surfaces again at first use of identification or chat
        logger.critical(exc.detail)
        client = None
    app.state.context = create_app_context(client)
