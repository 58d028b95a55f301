from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    NONE = "NONE"


class ProviderNoiseFilter(logging.Filter):
    """Keeps warnings of the AI provider and image download clients out of the console;
    they still reach the log file. Errors pass."""

    noisy_loggers = ("google_genai", "aiohttp.client")

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        if record.levelno >= logging.ERROR:
            return True
        return not record.name.startswith(self.noisy_loggers)


def configure_root_logger(
    log_severity_console: LogLevel,
    log_severity_file: LogLevel,
    log_file_path: Path = Path("./botanical_friend.log"),
) -> None:
    """Configure the root logger; each module's default (__name__) logger will inherit
    these settings."""
    logger = logging.getLogger()  # no name returns the root logger
    logger.setLevel(logging.DEBUG)  # global min. level
    logger.handlers = []

    if log_severity_file != LogLevel.NONE:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        format_fh = (
            "%(asctime)s - %(threadName)-9s - %(funcName)s - %(name)s - "
            "%(levelname)s - %(message)s"
        )
        file_handler.setFormatter(logging.Formatter(format_fh))
        file_handler.setLevel(log_severity_file.value)
        logger.addHandler(file_handler)

    if log_severity_console != LogLevel.NONE:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter("%(levelname)s - %(name)s - %(message)s"))
        stream_handler.setLevel(log_severity_console.value)
        stream_handler.addFilter(ProviderNoiseFilter())
        logger.addHandler(stream_handler)

    # mute some module's loggers
    logging.getLogger("multipart.multipart").setLevel(logging.WARNING)  # starlette file requests
    logging.getLogger("PIL").setLevel(logging.WARNING)  # image verification
    logging.getLogger("httpx").setLevel(logging.WARNING)  # used by google-genai
    logging.getLogger("google_genai").setLevel(logging.INFO)
    logging.getLogger("aiohttp.client").setLevel(logging.INFO)  # image urls
    logging.getLogger("asyncio").setLevel(logging.INFO)
