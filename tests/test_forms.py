"""Tests for roost.http.forms: FormData and form body parsing."""

import pytest

from roost._internal.multimap import MultiValueMapping
from roost.http.forms import FormData, UploadFile, parse_form_data


def _multipart(boundary: str, *parts: str) -> bytes:
    """Join pre-rendered parts into a multipart body."""
    body = "".join(f"--{boundary}\r\n{part}\r\n" for part in parts)
    return f"{body}--{boundary}--\r\n".encode()


class TestFormData:
    def test_getitem(self) -> None:
        form = FormData({"name": ["alice"]})
        assert form["name"] == "alice"

    def test_first_value(self) -> None:
        form = FormData({"tag": ["a", "b"]})
        assert form["tag"] == "a"
        assert form.get_list("tag") == ["a", "b"]

    def test_get_missing(self) -> None:
        form = FormData({})
        assert form.get("x") is None
        assert form.get("x", "d") == "d"
        assert form.get_list("x") == []

    def test_mapping_protocol(self) -> None:
        form = FormData({"a": ["1"], "b": ["2"]})
        assert len(form) == 2
        assert list(form) == ["a", "b"]
        assert "a" in form
        assert isinstance(form, MultiValueMapping)

    def test_files_default_empty(self) -> None:
        assert dict(FormData({}).files) == {}


class TestParseUrlencoded:
    async def test_basic(self) -> None:
        form = await parse_form_data(b"name=Ada&lang=en", "application/x-www-form-urlencoded")
        assert form["name"] == "Ada"
        assert form["lang"] == "en"

    async def test_blank_values(self) -> None:
        form = await parse_form_data(b"empty=", "application/x-www-form-urlencoded")
        assert form["empty"] == ""

    async def test_content_type_parameters_ignored(self) -> None:
        form = await parse_form_data(b"a=1", "application/x-www-form-urlencoded; charset=utf-8")
        assert form["a"] == "1"


class TestParseMultipart:
    async def test_fields(self) -> None:
        body = _multipart(
            "XyZ",
            'Content-Disposition: form-data; name="title"\r\n\r\nHello',
            'Content-Disposition: form-data; name="tag"\r\n\r\none',
            'Content-Disposition: form-data; name="tag"\r\n\r\ntwo',
        )
        form = await parse_form_data(body, "multipart/form-data; boundary=XyZ")
        assert form["title"] == "Hello"
        assert form.get_list("tag") == ["one", "two"]

    async def test_file_upload(self) -> None:
        body = _multipart(
            "XyZ",
            'Content-Disposition: form-data; name="avatar"; filename="me.png"\r\n'
            "Content-Type: image/png\r\n\r\nPNGDATA",
        )
        form = await parse_form_data(body, "multipart/form-data; boundary=XyZ")
        upload = form.files["avatar"]
        assert isinstance(upload, UploadFile)
        assert upload.filename == "me.png"
        assert upload.content_type == "image/png"
        assert upload.size == 7
        assert await upload.read() == b"PNGDATA"
        assert "avatar" not in form

    async def test_missing_boundary(self) -> None:
        with pytest.raises(ValueError, match="boundary"):
            await parse_form_data(b"", "multipart/form-data")


class TestUnsupported:
    async def test_rejects_other_types(self) -> None:
        with pytest.raises(ValueError, match="Unsupported form content type"):
            await parse_form_data(b"{}", "application/json")


class TestParseMultipartEdges:
    async def test_part_without_name_skipped(self) -> None:
        body = _multipart(
            "B",
            "Content-Disposition: form-data\r\n\r\norphan",
            'Content-Disposition: form-data; name="kept"\r\n\r\nyes',
        )
        form = await parse_form_data(body, "multipart/form-data; boundary=B")
        assert dict(form) == {"kept": "yes"}

    async def test_file_default_content_type(self) -> None:
        body = _multipart(
            "B",
            'Content-Disposition: form-data; name="doc"; filename="a.bin"\r\n\r\n\x01\x02',
        )
        form = await parse_form_data(body, "multipart/form-data; boundary=B")
        assert form.files["doc"].content_type == "application/octet-stream"
        assert form.files["doc"].size == 2
