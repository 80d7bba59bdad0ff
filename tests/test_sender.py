"""Tests for roost.server.sender response emission rules."""

from roost.http.response import Response, json_response
from roost.server.sender import has_body, send_response


async def _emit(response: Response) -> list[dict]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    await send_response(response, send)
    return messages


class TestSendResponseNoBodyStatuses:
    async def test_204_drops_body_and_sets_zero_content_length(self) -> None:
        # A handler may attach a body by accident; 204 must still go out empty
        messages = await _emit(Response("unexpected-body").with_status(204))

        assert messages[0]["type"] == "http.response.start"
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"

        assert messages[1]["type"] == "http.response.body"
        assert messages[1]["body"] == b""

    async def test_304_drops_body_and_sets_zero_content_length(self) -> None:
        messages = await _emit(Response("unexpected-body").with_status(304))

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_200_preserves_body(self) -> None:
        messages = await _emit(Response("ok"))

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert messages[1]["body"] == b"ok"


class TestSendResponseHeaders:
    async def test_status_and_content_type(self) -> None:
        messages = await _emit(json_response({"message": "Not Found"}, status=404))

        assert messages[0]["status"] == 404
        headers = dict(messages[0]["headers"])
        assert headers[b"content-type"] == b"application/json"
        assert messages[1]["body"] == b'{"message": "Not Found"}'

    async def test_explicit_header_overrides_content_type(self) -> None:
        response = Response("<p>hi</p>").with_header("Content-Type", "text/html")
        messages = await _emit(response)

        content_types = [v for k, v in messages[0]["headers"] if k == b"content-type"]
        assert content_types == [b"text/html"]

    async def test_stale_content_length_is_recomputed(self) -> None:
        response = Response("four").with_header("Content-Length", "999")
        messages = await _emit(response)

        lengths = [v for k, v in messages[0]["headers"] if k == b"content-length"]
        assert lengths == [b"4"]

    async def test_header_names_lowercased_and_repeated(self) -> None:
        response = (
            Response("ok")
            .with_header("Set-Cookie", "a=1")
            .with_header("Set-Cookie", "b=2")
        )
        messages = await _emit(response)

        cookies = [v for k, v in messages[0]["headers"] if k == b"set-cookie"]
        assert cookies == [b"a=1", b"b=2"]

    async def test_utf8_body_length_in_bytes(self) -> None:
        messages = await _emit(Response("héllo"))

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"6"


class TestHasBody:
    def test_statuses(self) -> None:
        assert has_body(200)
        assert has_body(404)
        assert not has_body(101)
        assert not has_body(204)
        assert not has_body(304)
