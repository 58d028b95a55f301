from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, UploadFile

from botanical_friend.dependencies import get_chat_service, get_identification_service
from botanical_friend.exceptions import AnalysisInProgressError
from botanical_friend.modules.chatbot.services import ChatService
from botanical_friend.modules.identification.acquisition import FileSource, UrlSource
from botanical_friend.modules.identification.schemas import UrlInputUpdate, UrlSubmission
from botanical_friend.modules.identification.services import IdentificationService
from botanical_friend.modules.view.schemas import AppStateRead
from botanical_friend.modules.view.services import read_app_state

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/identification",
    tags=["identification"],
    responses={404: {"description": "Not found"}},
)


@router.post("/file", response_model=AppStateRead)
async def identify_from_file(
    file: UploadFile,
    identification: IdentificationService = Depends(get_identification_service),
    chat_service: ChatService = Depends(get_chat_service),
) -> Any:
    """Identify the plant on an uploaded photo; failures end up in the state's error."""
    logger.info(f"Received image file {file.filename} ({file.content_type}).")
    await identification.identify(FileSource(upload=file))
    return read_app_state(identification.view, chat_loading=chat_service.loading)


@router.post("/url", response_model=AppStateRead)
async def identify_from_url(
    submission: UrlSubmission,
    identification: IdentificationService = Depends(get_identification_service),
    chat_service: ChatService = Depends(get_chat_service),
) -> Any:
    """Identify the plant on an image downloaded from the submitted url."""
    if identification.view.analyzing:
        raise AnalysisInProgressError()
    identification.view.set_url_input(visible=True, text=submission.url)
    logger.info(f"Received image url {submission.url}.")
    await identification.identify(UrlSource(url=submission.url))
    return read_app_state(identification.view, chat_loading=chat_service.loading)


@router.put("/url-input", response_model=AppStateRead)
async def update_url_input(
    update: UrlInputUpdate,
    identification: IdentificationService = Depends(get_identification_service),
    chat_service: ChatService = Depends(get_chat_service),
) -> Any:
    identification.view.set_url_input(visible=update.visible, text=update.text)
    return read_app_state(identification.view, chat_loading=chat_service.loading)


@router.post("/reset", response_model=AppStateRead)
async def reset(
    identification: IdentificationService = Depends(get_identification_service),
    chat_service: ChatService = Depends(get_chat_service),
) -> Any:
    """Back to the initial screen; image, result, error and url text are cleared."""
    identification.view.reset()
    logger.info("Reset identification view.")
    return read_app_state(identification.view, chat_loading=chat_service.loading)
