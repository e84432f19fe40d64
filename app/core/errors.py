"""Translate unexpected failures into typed application errors."""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from app.exceptions import AppError, InternalServiceError, ServiceConnectivityError

CONNECTIVITY_MESSAGE = (
    "We are having trouble reaching our database. Please try again in a moment."
)


def is_connectivity_error(exc: BaseException) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError, PoolTimeoutError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    return isinstance(exc, ConnectionError)


def to_app_error(exc: BaseException) -> AppError:
    """Typed errors pass through; connectivity problems are retryable 503s; the rest are 500s."""
    if isinstance(exc, AppError):
        return exc
    if is_connectivity_error(exc):
        return ServiceConnectivityError(CONNECTIVITY_MESSAGE, details=str(exc))
    return InternalServiceError(details=f"{type(exc).__name__}: {exc}")
