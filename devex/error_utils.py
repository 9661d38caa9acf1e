from __future__ import annotations

import asyncio
from typing import Any, Dict, Type

import aiohttp

from config import Strings
from devex.errors import (
    DeliveryError,
    InvalidConfigurationError,
    InvalidPayloadError,
    MissingRequiredOptionsParametersError,
    MissingRequiredParametersError,
)
from devex.logging_utils import get_logger


# Mapping of exception types to log categories
EXCEPTION_CATEGORY_MAP: Dict[Type[BaseException], str] = {
    DeliveryError: "delivery",
    aiohttp.ClientError: "delivery",
    asyncio.TimeoutError: "delivery",
    InvalidPayloadError: "payload",
    InvalidConfigurationError: "configuration",
    MissingRequiredOptionsParametersError: "configuration",
    MissingRequiredParametersError: "configuration",
}


def categorize(exc: BaseException) -> str:
    """Return the log category for an exception, ``unexpected`` if unknown."""

    for etype, category in EXCEPTION_CATEGORY_MAP.items():
        if isinstance(exc, etype):
            return category
    return "unexpected"


def map_exception_to_message(exc: BaseException) -> str:
    """Convert an exception into a user-facing message.

    Survey errors carry their own message; anything else falls back to a
    safe generic message.
    """

    if categorize(exc) in ("payload", "configuration"):
        return str(exc)
    return Strings.TRY_AGAIN_LATER


def log_exception_categorized(exc: BaseException, **context: Any) -> None:
    """Log an exception with a category and sanitized context.

    Only non-sensitive fields should be provided in context (e.g. team,
    channel, url host). Never pass tokens.
    """

    category = categorize(exc)
    log = get_logger(f"error.{category}")
    log.error("operation failed", exc_info=exc, extra={"category": category, **context})


def handle_exception(exc: BaseException, **context: Any) -> str:
    """Log a categorized exception and return a user-facing message."""

    log_exception_categorized(exc, **context)
    return map_exception_to_message(exc)
