from __future__ import annotations

from fastapi import HTTPException
from starlette import status

from botanical_friend.constants import (
    MSG_CHAT_FAILED,
    MSG_CROSS_ORIGIN_BLOCKED,
    MSG_EXTRACTION_FAILED,
    MSG_FETCH_FAILED,
    MSG_FILE_READ_FAILED,
    MSG_IMAGE_PROCESSING_FAILED,
    MSG_SERVICE_UNAVAILABLE,
)


class BaseError(HTTPException):
    """Base class for exceptions raised by this application.

    detail carries the diagnostic text for the log; user_message is the only text ever
    shown to the user."""

    user_message: str = MSG_SERVICE_UNAVAILABLE

    def __init__(self, detail: str, status_code: int = 400):
        super().__init__(status_code=status_code, detail=detail)


class ConfigurationError(BaseError):
    """Raised when the AI provider credential is missing or rejected."""

    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


class AcquisitionError(BaseError):
    """Raised when an image can not be read from a file or fetched from a url."""

    user_message = MSG_FETCH_FAILED


class FileReadError(AcquisitionError):
    """Raised when an uploaded file can not be read or is not a decodable image."""

    user_message = MSG_FILE_READ_FAILED

    def __init__(self, filename: str | None, reason: str):
        super().__init__(detail=f"Could not read image file {filename or '<unnamed>'}: {reason}")


class ImageTooLargeError(FileReadError):
    def __init__(self, filename: str | None, size: int, max_size: int):
        super().__init__(filename=filename, reason=f"{size} bytes exceed limit of {max_size}")


class FetchError(AcquisitionError):
    """Raised when the image url did not answer with a successful response."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            detail=f"Failed to load image from {url}: {reason}",
            status_code=status.HTTP_502_BAD_GATEWAY,
        )


class CrossOriginError(AcquisitionError):
    """Raised when the image host refuses to hand out the image to third parties."""

    user_message = MSG_CROSS_ORIGIN_BLOCKED

    def __init__(self, url: str, reason: str):
        super().__init__(
            detail=f"Image host blocked access to {url}: {reason}",
            status_code=status.HTTP_403_FORBIDDEN,
        )


class ImageProcessingError(AcquisitionError):
    """Raised when a downloaded image can not be decoded."""

    user_message = MSG_IMAGE_PROCESSING_FAILED

    def __init__(self, url: str, reason: str):
        super().__init__(detail=f"Could not process image from {url}: {reason}")


class ExtractionError(BaseError):
    """Base class for failures to derive plant data from the model's response."""

    user_message = MSG_EXTRACTION_FAILED

    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=status.HTTP_502_BAD_GATEWAY)


class EmptyResponseError(ExtractionError):
    def __init__(self) -> None:
        super().__init__(detail="No response text from AI model")


class MalformedResponseError(ExtractionError):
    def __init__(self, reason: str):
        super().__init__(detail=f"Malformed plant data from AI model: {reason}")


class ProviderRequestError(ExtractionError):
    def __init__(self, reason: str):
        super().__init__(detail=f"AI model request failed: {reason}")


class ChatTurnError(BaseError):
    """Raised when sending a chat turn or consuming its stream failed."""

    user_message = MSG_CHAT_FAILED

    def __init__(self, reason: str):
        super().__init__(detail=f"Chat turn failed: {reason}", status_code=status.HTTP_502_BAD_GATEWAY)


class ChatTurnInProgressError(BaseError):
    def __init__(self) -> None:
        super().__init__(
            detail="A chat turn is still in progress", status_code=status.HTTP_409_CONFLICT
        )


class AnalysisInProgressError(BaseError):
    def __init__(self) -> None:
        super().__init__(
            detail="An image is currently being analyzed", status_code=status.HTTP_409_CONFLICT
        )
