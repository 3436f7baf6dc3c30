"""
Unit tests for the field extractors.
"""

import pytest

from userserver.errors import MalformedRequest
from userserver.http.extractors import (
    extract_body,
    extract_id,
    parse_user_id,
    parse_user_payload,
)


class TestExtractId:
    """Tests for extract_id()."""

    def test_last_segment(self, make_request):
        assert extract_id(make_request("GET", "/users/42")) == "42"

    def test_trailing_slash_gives_empty(self, make_request):
        assert extract_id(make_request("GET", "/users/")) == ""

    def test_only_request_line_is_used(self):
        request = "DELETE /users/7 HTTP/1.1\r\nReferer: http://x/users/99\r\n\r\n"
        assert extract_id(request) == "7"

    def test_lf_only_line_endings(self):
        assert extract_id("GET /users/5 HTTP/1.1\nHost: x\n\n") == "5"

    @pytest.mark.parametrize("request_text", ["", "GET", "GET\r\n\r\n"])
    def test_missing_target_gives_empty(self, request_text):
        assert extract_id(request_text) == ""


class TestParseUserId:
    """Tests for parse_user_id()."""

    @pytest.mark.parametrize("segment,expected", [
        ("1", 1),
        ("007", 7),
        ("-3", -3),
        ("+12", 12),
        ("2147483647", 2147483647),
        ("-2147483648", -2147483648),
    ])
    def test_valid(self, make_request, segment, expected):
        assert parse_user_id(make_request("GET", f"/users/{segment}")) == expected

    @pytest.mark.parametrize("segment", [
        "abc",
        "",
        "1.5",
        "12abc",
        "١٢",  # non-ASCII digits
        "2147483648",
        "-2147483649",
    ])
    def test_invalid(self, make_request, segment):
        with pytest.raises(MalformedRequest):
            parse_user_id(make_request("GET", f"/users/{segment}"))


class TestExtractBody:
    """Tests for extract_body()."""

    def test_after_blank_line(self, make_request):
        request = make_request("POST", "/users", '{"name":"Ada"}')
        assert extract_body(request) == '{"name":"Ada"}'

    def test_first_separator_wins(self):
        assert extract_body("POST /users HTTP/1.1\r\n\r\nabc\r\n\r\ndef") == "abc\r\n\r\ndef"

    def test_lf_separator(self):
        assert extract_body("POST /users HTTP/1.1\n\n{}") == "{}"

    def test_empty_body(self):
        assert extract_body("POST /users HTTP/1.1\r\n\r\n") == ""

    def test_no_separator(self):
        with pytest.raises(MalformedRequest):
            extract_body("POST /users HTTP/1.1\r\nHost: x")


class TestParseUserPayload:
    """Tests for parse_user_payload()."""

    def test_valid(self, make_request):
        payload = parse_user_payload(
            make_request("POST", "/users", '{"name": "Ada", "email": "ada@x.com"}')
        )
        assert payload.name == "Ada"
        assert payload.email == "ada@x.com"

    def test_unknown_keys_ignored(self, make_request):
        payload = parse_user_payload(
            make_request("POST", "/users", '{"name": "Ada", "email": "a@x", "age": 36}')
        )
        assert payload.name == "Ada"

    @pytest.mark.parametrize("body", [
        "",
        "not json",
        '["Ada", "ada@x.com"]',
        '{"name": "Ada"}',
        '{"email": "ada@x.com"}',
        '{"name": 1, "email": "ada@x.com"}',
        '{"name": "Ada", "email": null}',
    ])
    def test_invalid(self, make_request, body):
        with pytest.raises(MalformedRequest):
            parse_user_payload(make_request("POST", "/users", body))

    def test_missing_body(self):
        with pytest.raises(MalformedRequest):
            parse_user_payload("POST /users HTTP/1.1")
