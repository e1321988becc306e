import pytest

from agentchat.core.errors import (
    Forbidden,
    NotFound,
    PersistenceError,
    Unauthenticated,
    UpstreamError,
    UpstreamFailure,
    ValidationError,
    to_http_exception,
)
from agentchat.core.responses import function_error


@pytest.mark.parametrize("error, status_code", [
    (Unauthenticated("Invalid token"), 401),
    (Forbidden("Access denied"), 403),
    (NotFound("Agent not found"), 404),
    (ValidationError("Action is required"), 422),
    (UpstreamError("LLM API error"), 502),
    (PersistenceError("Failed to save user message"), 502),
])
def test_errors_map_to_status_codes(error, status_code):
    exc = to_http_exception(error)

    assert exc.status_code == status_code
    assert exc.detail == error.message


def test_unauthenticated_asks_for_bearer():
    assert to_http_exception(Unauthenticated("x")).headers == {"WWW-Authenticate": "Bearer"}
    assert to_http_exception(Forbidden("x")).headers is None


def test_upstream_errors_default_to_unavailable():
    assert UpstreamError("boom").kind is UpstreamFailure.UNAVAILABLE
    assert PersistenceError("boom").kind is UpstreamFailure.UNAVAILABLE


def test_function_error_uses_message_of_any_exception():
    assert function_error("X", ValidationError("Action is required")).status_code == 500
    assert function_error("X", RuntimeError()).body == b'{"error":{"code":"X","message":"RuntimeError"}}'
