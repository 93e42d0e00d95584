"""
Application exceptions.

Service methods report expected failures through ServiceResult. The
exceptions below are for code with no result to return: channel addressing
raises ValidationError on a missing id, and realtime publishers raise
ExternalServiceError when the channel layer cannot deliver.

Hierarchy:
    BaseApplicationError
    ├── ValidationError       Malformed or missing input
    └── ExternalServiceError  Channel layer or broker failure
"""

from __future__ import annotations

from typing import Any


class BaseApplicationError(Exception):
    """
    Base for application errors.

    Attributes:
        message: Human-readable description
        error_code: Machine-readable code
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code or self.default_error_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "error_code": self.error_code}

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ValidationError(BaseApplicationError):
    default_error_code: str = "VALIDATION_ERROR"


class ExternalServiceError(BaseApplicationError):
    """
    An infrastructure dependency failed.

    Raised by ChannelLayerPublisher; ConversationFanout logs it and moves
    on to the next publication.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
