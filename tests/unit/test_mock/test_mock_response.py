"""Unit tests for mock response frames."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from shared_rest.mock.response import MockResponse
from shared_rest.rest.errors import RestError, RestErrorKind


class TestMockResponse:
    """Tests for MockResponse."""

    def test_new_from_text(self) -> None:
        """Text bodies are encoded as UTF-8."""
        response = MockResponse.new(200, "héllo")

        assert response.body == "héllo".encode()
        assert response.headers == ()

    def test_status_range(self) -> None:
        """Statuses outside 100..599 are rejected."""
        with pytest.raises(ValidationError):
            MockResponse.new(600)

    def test_text_sets_content_type(self) -> None:
        """text adds a plain-text content type."""
        response = MockResponse.text_error(404, "missing")

        assert response.status == 404
        assert response.headers == (("content-type", "text/plain; charset=utf-8"),)

    def test_json_encodes_payload(self) -> None:
        """from_json encodes and tags the body."""
        response = MockResponse.json_error(422, {"error": "bad"})

        assert response.body == b'{"error":"bad"}'
        assert ("content-type", "application/json") in response.headers

    def test_json_unencodable(self) -> None:
        """Unencodable payloads raise PARSE."""
        with pytest.raises(RestError) as exc_info:
            MockResponse.from_json(200, object())

        assert exc_info.value.kind == RestErrorKind.PARSE

    def test_with_header_appends(self) -> None:
        """with_header keeps existing headers and order."""
        response = MockResponse.new(200).with_header("A", "1").with_header("A", "2")

        assert response.headers == (("A", "1"), ("A", "2"))

    def test_to_response_shares_body(self) -> None:
        """Materialized responses reuse the frame body."""
        frame = MockResponse.from_bytes(201, b"x" * 1024)

        response = frame.to_response(timedelta(milliseconds=3))

        assert response.status == 201
        assert response.body is frame.body
        assert response.elapsed == timedelta(milliseconds=3)
