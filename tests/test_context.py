"""Tests for roost.context: params, search params, body and headers."""

import pytest
from pydantic import BaseModel

from roost.context import (
    RequestContext,
    build_context,
    get_body,
    get_headers,
    get_search_params,
)
from roost.errors import ErrorKind, RouterError
from roost.http.blob import Blob
from roost.http.forms import FormData
from roost.http.headers import MutableHeaders
from roost.http.query import QueryParams
from roost.http.request import Request
from roost.routing.endpoint import EndpointConfig, create_endpoint_config
from roost.validation import Invalid, PydanticSchema, RuleSchema, Valid, integer, required


class Signin(BaseModel):
    username: str
    password: str


_EMPTY = EndpointConfig()


def _post(content_type: str | None, body: bytes, method: str = "POST") -> Request:
    headers = {"Content-Type": content_type} if content_type else None
    return Request.create(method, "https://example.com/items", headers=headers, body=body)


class TestGetSearchParams:
    async def test_without_schema_returns_mutable_copy(self) -> None:
        request = Request.create("GET", "https://example.com/api?search=test&page=2")
        params = await get_search_params(request, _EMPTY)
        assert isinstance(params, QueryParams)
        assert params["search"] == "test"
        params["page"] = "3"
        assert request.query["page"] == "2"

    async def test_with_schema_returns_validator_output(self) -> None:
        config = create_endpoint_config(
            search_params=RuleSchema({"search": [required], "page": [integer]})
        )
        request = Request.create("GET", "/api?search=test&page=2&ignored=1")
        assert await get_search_params(request, config) == {"search": "test", "page": 2}

    async def test_schema_sees_last_value(self) -> None:
        seen = {}

        class Capture:
            def validate(self, value):
                seen.update(value)
                return Valid(value)

        config = create_endpoint_config(search_params=Capture())
        await get_search_params(Request.create("GET", "/api?tag=a&tag=b"), config)
        assert seen == {"tag": "b"}

    async def test_pydantic_coerces(self) -> None:
        class Page(BaseModel):
            page: int = 1

        config = create_endpoint_config(search_params=PydanticSchema(Page))
        result = await get_search_params(Request.create("GET", "/api?page=7"), config)
        assert result == Page(page=7)

    async def test_failure(self) -> None:
        config = create_endpoint_config(search_params=RuleSchema({"redirect_uri": [required]}))
        with pytest.raises(RouterError) as exc_info:
            await get_search_params(Request.create("GET", "/api"), config)
        err = exc_info.value
        assert err.kind is ErrorKind.INVALID_SEARCH_PARAMS
        assert err.status == 422
        assert err.message == "Invalid search parameters: redirect_uri: This field is required"


class TestGetBody:
    @pytest.mark.parametrize("method", ["GET", "DELETE"])
    async def test_non_body_methods(self, method: str) -> None:
        request = _post("application/json", b'{"a": 1}', method=method)
        assert await get_body(request, _EMPTY) is None

    async def test_json(self) -> None:
        request = _post("application/json", b'{"name": "Ada"}')
        assert await get_body(request, _EMPTY) == {"name": "Ada"}

    async def test_json_with_charset(self) -> None:
        request = _post("application/json; charset=utf-8", b"[1, 2]")
        assert await get_body(request, _EMPTY) == [1, 2]

    async def test_json_schema_valid(self) -> None:
        config = create_endpoint_config(body=PydanticSchema(Signin))
        request = _post("application/json", b'{"username": "ada", "password": "pw"}')
        assert await get_body(request, config) == Signin(username="ada", password="pw")

    async def test_json_schema_invalid(self) -> None:
        config = create_endpoint_config(body=PydanticSchema(Signin))
        request = _post("application/json", b'{"username": "ada"}')
        with pytest.raises(RouterError) as exc_info:
            await get_body(request, config)
        err = exc_info.value
        assert err.kind is ErrorKind.INVALID_REQUEST_BODY
        assert err.message == "Invalid request body"
        assert err.detail == "password: Field required"

    async def test_malformed_json(self) -> None:
        with pytest.raises(RouterError) as exc_info:
            await get_body(_post("application/json", b"{nope"), _EMPTY)
        assert exc_info.value.kind is ErrorKind.INVALID_REQUEST_BODY
        assert exc_info.value.detail.startswith("malformed JSON")

    async def test_async_schema(self) -> None:
        class Remote:
            async def validate(self, value):
                return Invalid("rejected upstream")

        config = create_endpoint_config(body=Remote())
        with pytest.raises(RouterError, match="rejected upstream"):
            await get_body(_post("application/json", b"{}"), config)

    async def test_urlencoded_form(self) -> None:
        body = await get_body(_post("application/x-www-form-urlencoded", b"a=1&a=2"), _EMPTY)
        assert isinstance(body, FormData)
        assert body.get_list("a") == ["1", "2"]

    async def test_multipart_without_boundary(self) -> None:
        with pytest.raises(RouterError) as exc_info:
            await get_body(_post("multipart/form-data", b""), _EMPTY)
        assert exc_info.value.kind is ErrorKind.INVALID_REQUEST_BODY

    async def test_text(self) -> None:
        assert await get_body(_post("text/plain", b"hello"), _EMPTY) == "hello"

    async def test_text_default_browser_type(self) -> None:
        request = Request.create("POST", "/notes", body="hi")
        assert await get_body(request, _EMPTY) == "hi"

    async def test_octet_stream(self) -> None:
        body = await get_body(_post("application/octet-stream", b"\x00\xff"), _EMPTY)
        assert body == b"\x00\xff"

    @pytest.mark.parametrize("content_type", ["image/png", "video/mp4", "audio/ogg"])
    async def test_blob(self, content_type: str) -> None:
        body = await get_body(_post(content_type, b"\x89PNG"), _EMPTY)
        assert isinstance(body, Blob)
        assert body.data == b"\x89PNG"
        assert body.media_type == content_type

    async def test_unknown_type_is_text(self) -> None:
        body = await get_body(_post("application/x-custom", b"payload"), _EMPTY)
        assert body == "payload"

    async def test_missing_type_is_text(self) -> None:
        assert await get_body(_post(None, b"payload"), _EMPTY) == "payload"

    async def test_missing_type_empty_body(self) -> None:
        assert await get_body(_post(None, b""), _EMPTY) is None

    async def test_non_json_skips_body_schema(self) -> None:
        config = create_endpoint_config(body=PydanticSchema(Signin))
        assert await get_body(_post("text/plain", b"raw"), config) == "raw"


class TestGetHeaders:
    def test_mutable_copy(self) -> None:
        request = Request.create("GET", "/", headers={"Authorization": "Bearer x"})
        headers = get_headers(request)
        assert isinstance(headers, MutableHeaders)
        headers["session-token"] = "abc"
        assert "session-token" not in request.headers
        assert headers["authorization"] == "Bearer x"


class TestBuildContext:
    async def test_assembles_all_parts(self) -> None:
        request = Request.create(
            "PUT",
            "https://example.com/users/42?notify=1",
            json={"name": "Ada"},
        )
        context = await build_context(request, "/users/:userId", _EMPTY)
        assert isinstance(context, RequestContext)
        assert context.params == {"userId": "42"}
        assert context.search_params["notify"] == "1"
        assert context.body == {"name": "Ada"}
        assert context.headers["content-type"] == "application/json"

    async def test_params_are_decoded(self) -> None:
        request = Request.create("GET", "/search/hello%20world")
        context = await build_context(request, "/search/:query", _EMPTY)
        assert context.params == {"query": "hello world"}
        assert context.body is None

    async def test_fresh_context_per_call(self) -> None:
        request = Request.create("GET", "/users/1")
        first = await build_context(request, "/users/:id", _EMPTY)
        second = await build_context(request, "/users/:id", _EMPTY)
        first.headers["x"] = "1"
        assert "x" not in second.headers
