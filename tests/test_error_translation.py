"""Tests for roost.server.errors: exceptions to JSON responses."""

import logging

import pytest

from roost.errors import ErrorKind, RouterError, method_not_allowed, not_found
from roost.http.request import Request
from roost.http.response import Response
from roost.server.errors import internal_error_response, translate_error


def _request() -> Request:
    return Request.create("GET", "https://example.com/users")


class TestDefaultRendering:
    async def test_not_found(self) -> None:
        response = await translate_error(not_found(), _request())
        assert response.status == 404
        assert response.json() == {"message": "Not Found"}
        assert response.status_text == "NOT_FOUND"
        assert response.content_type == "application/json"

    async def test_method_not_allowed_keeps_allow_header(self) -> None:
        err = method_not_allowed("PATCH", frozenset({"GET", "POST"}))
        response = await translate_error(err, _request())
        assert response.status == 405
        assert response.json() == {"message": "The HTTP method 'PATCH' is not allowed"}
        assert response.get_header("allow") == "GET, POST"

    async def test_validation_message(self) -> None:
        err = RouterError(
            ErrorKind.INVALID_SEARCH_PARAMS,
            "Invalid search parameters: q: This field is required",
            detail="q: This field is required",
        )
        response = await translate_error(err, _request())
        assert response.status == 422
        assert response.status_text == "UNPROCESSABLE_ENTITY"
        assert response.json() == {
            "message": "Invalid search parameters: q: This field is required"
        }

    async def test_registration_errors_render_generic_500(self) -> None:
        err = RouterError(ErrorKind.INVALID_HANDLER_REGISTRATION, "Middleware must be a callable")
        response = await translate_error(err, _request())
        assert response.status == 500
        assert response.json() == {"message": "Internal Server Error"}

    async def test_unexpected_exception_hides_detail(self) -> None:
        response = await translate_error(RuntimeError("db password is hunter2"), _request())
        assert response.status == 500
        assert response.json() == {"message": "Internal Server Error"}
        assert "hunter2" not in response.text

    async def test_unexpected_exception_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="roost.server"):
            await translate_error(RuntimeError("boom"), _request())
        assert "500 GET /users" in caplog.text

    def test_internal_error_response(self) -> None:
        response = internal_error_response()
        assert response.status == 500
        assert response.status_text == "INTERNAL_SERVER_ERROR"


class TestErrorHook:
    async def test_hook_receives_error_and_request(self) -> None:
        seen: list[tuple[Exception, Request]] = []

        def hook(error: Exception, request: Request) -> Response:
            seen.append((error, request))
            return Response("custom", status=503)

        err = not_found()
        request = _request()
        response = await translate_error(err, request, hook)
        assert response.status == 503
        assert response.text == "custom"
        assert seen == [(err, request)]

    async def test_async_hook_return_value_negotiated(self) -> None:
        async def hook(error: Exception, request: Request) -> tuple[dict, int]:
            return {"error": type(error).__name__}, 500

        response = await translate_error(ValueError("x"), _request(), hook)
        assert response.status == 500
        assert response.json() == {"error": "ValueError"}

    async def test_failing_hook_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        calls = 0

        def hook(error: Exception, request: Request) -> Response:
            nonlocal calls
            calls += 1
            raise RuntimeError("hook broke")

        with caplog.at_level(logging.ERROR, logger="roost.server"):
            response = await translate_error(not_found(), _request(), hook)
        assert response.status == 500
        assert response.json() == {"message": "Internal Server Error"}
        assert calls == 1
        assert "on_error hook failed" in caplog.text

    async def test_hook_returning_garbage_falls_back(self) -> None:
        response = await translate_error(not_found(), _request(), lambda error, request: None)
        assert response.status == 500
        assert response.json() == {"message": "Internal Server Error"}
