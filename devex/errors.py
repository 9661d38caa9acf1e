from __future__ import annotations

from typing import Optional

from config import logger


class DevExSurveyError(Exception):
    """Base class for survey errors. Errors are logged when raised unless
    ``log_on_raise`` is off."""

    default_message = "Survey error"
    # Errors logged by whoever catches them opt out of logging on raise
    log_on_raise = True

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if self.log_on_raise:
            logger.error(self.message, extra={"error": type(self).__name__})


class MissingRequiredParametersError(DevExSurveyError):
    """Used when required constructor parameters are missing."""

    default_message = 'Missing required parameter "auth_token"!'


class InvalidConfigurationError(DevExSurveyError):
    """Used when the configuration has errors."""

    default_message = "Configuration is invalid!"


class MissingRequiredOptionsParametersError(DevExSurveyError):
    """Used when parameters are missing from an option entry."""

    default_message = 'Missing required parameters "text" and/or "value"!'


class InvalidPayloadError(DevExSurveyError):
    """Used when an incoming Slack payload is missing required fields."""

    default_message = "Invalid payload!"


class DeliveryError(DevExSurveyError):
    """Raised when Slack answers a delivery with a non-success status."""

    log_on_raise = False

    def __init__(self, status: Optional[int] = None, status_text: str = "", message: Optional[str] = None) -> None:
        self.status = status
        self.status_text = status_text
        super().__init__(message or f'Error: "{status_text}"\nStatus code: "{status}"')
