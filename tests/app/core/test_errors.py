"""Tests for mapping unexpected failures onto application errors."""

from sqlalchemy.exc import OperationalError

from app.core.errors import CONNECTIVITY_MESSAGE, to_app_error
from app.exceptions import (
    ConversationClosedError,
    InternalServiceError,
    ServiceConnectivityError,
)


def test_app_errors_pass_through():
    error = ConversationClosedError("abc")
    assert to_app_error(error) is error


def test_operational_error_is_retryable_connectivity_failure():
    exc = OperationalError("SELECT 1", {}, Exception("connection refused"))
    error = to_app_error(exc)
    assert isinstance(error, ServiceConnectivityError)
    assert error.status_code == 503
    assert error.retryable is True
    assert error.message == CONNECTIVITY_MESSAGE


def test_connection_error_is_connectivity_failure():
    assert isinstance(to_app_error(ConnectionRefusedError()), ServiceConnectivityError)


def test_unknown_error_is_internal_and_hides_details():
    error = to_app_error(KeyError("secret-column"))
    assert isinstance(error, InternalServiceError)
    assert error.status_code == 500
    assert "secret-column" not in error.to_dict()["error"]
