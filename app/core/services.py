"""
Service layer base classes.

Views and consumers stay thin: they parse input, call a service classmethod
and translate the outcome. Services own the rules.

    ServiceResult: Outcome of an operation that can fail for expected
        reasons (bad input, users not connected). Carries either data or
        an error message plus a machine-readable error_code.
    BaseService: Logging and transaction helpers shared by every service.

Unexpected failures (database down, bugs) are not wrapped; they raise.

Usage:
    class MessageService(BaseService):
        @classmethod
        def mark_read(cls, viewer, counterpart_id) -> ServiceResult[int]:
            if not ConnectionService.can_message(viewer.id, counterpart_id):
                return ServiceResult.failure("...", error_code="NOT_CONNECTED")
            ...
            return ServiceResult.success(rows)

    result = MessageService.mark_read(request.user, user_id)
    if not result:
        return error_response(result)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Success or expected failure of a service call.

    Attributes:
        success: Whether the operation succeeded
        data: Payload on success
        error: Human-readable reason on failure
        error_code: Stable code the API maps to an HTTP status
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ServiceResult[T]:
        return cls(success=False, error=error, error_code=error_code)

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base class for services.

    Services expose classmethods only and keep no instance state.
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Logger named after the concrete service class."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """Run the block in a database transaction."""
        with transaction.atomic():
            yield
