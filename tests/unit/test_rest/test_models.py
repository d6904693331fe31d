"""Unit tests for rest request/response models."""

from datetime import timedelta

import pytest
from pydantic import BaseModel, ValidationError

from shared_rest.rest.errors import RestError, RestErrorKind
from shared_rest.rest.models import (
    HttpMethod,
    RawResponse,
    RestRequest,
    RestResponse,
    RetryPolicy,
)


class TestRetryPolicy:
    """Tests for RetryPolicy decisions."""

    def test_default_values(self) -> None:
        """Default policy never retries."""
        policy = RetryPolicy()

        assert policy.max_retries == 0
        assert policy.statuses == frozenset()
        assert policy.should_retry(503, attempt=0) is False

    def test_retry_enrolled_status_below_max(self) -> None:
        """Enrolled statuses retry while attempt < max."""
        policy = RetryPolicy.on_statuses(503, max_retries=2)

        assert policy.should_retry(503, attempt=0) is True
        assert policy.should_retry(503, attempt=1) is True
        assert policy.should_retry(503, attempt=2) is False
        assert policy.should_retry(503, attempt=3) is False

    def test_no_retry_for_unenrolled_status(self) -> None:
        """Statuses outside the set are never retried."""
        policy = RetryPolicy.on_statuses(503, 502, max_retries=3)

        assert policy.should_retry(500, attempt=0) is False
        assert policy.should_retry(404, attempt=0) is False
        assert policy.should_retry(502, attempt=0) is True

    def test_empty_status_set_never_retries(self) -> None:
        """An empty status set behaves like no policy."""
        policy = RetryPolicy(max_retries=5)

        for status in (400, 429, 500, 503):
            assert policy.should_retry(status, attempt=0) is False

    def test_negative_max_rejected(self) -> None:
        """max_retries must be non-negative."""
        with pytest.raises(ValidationError):
            RetryPolicy(max_retries=-1)

    def test_large_max_allowed(self) -> None:
        """max_retries has no upper bound."""
        policy = RetryPolicy.on_statuses(503, max_retries=500)

        assert policy.should_retry(503, attempt=499) is True
        assert policy.should_retry(503, attempt=500) is False

    def test_policy_immutable(self) -> None:
        """Policy is frozen."""
        policy = RetryPolicy.on_statuses(503, max_retries=1)

        with pytest.raises(ValidationError):
            policy.max_retries = 4  # type: ignore[misc]


class TestRestRequest:
    """Tests for RestRequest builders."""

    def test_get_and_post(self) -> None:
        """Shorthand constructors set the method."""
        assert RestRequest.get("https://x/a").method == HttpMethod.GET
        assert RestRequest.post("https://x/a").method == HttpMethod.POST
        assert RestRequest.put("https://x/a").method == HttpMethod.PUT
        assert RestRequest.delete("https://x/a").method == HttpMethod.DELETE

    def test_new_accepts_string_method(self) -> None:
        """Methods can be given as strings."""
        request = RestRequest.new("PATCH", "https://x/a")

        assert request.method == HttpMethod.PATCH

    @pytest.mark.parametrize("name", ["get", "Get", "GET"])
    def test_new_method_any_case(self, name: str) -> None:
        """Method names are matched regardless of case."""
        assert RestRequest.new(name, "https://x/a").method == HttpMethod.GET

    def test_new_unknown_method(self) -> None:
        """Unknown method names are rejected."""
        with pytest.raises(ValueError):
            RestRequest.new("fetch", "https://x/a")

    def test_defaults(self) -> None:
        """Optional fields default to empty."""
        request = RestRequest.get("https://x/a")

        assert request.headers == ()
        assert request.body is None
        assert request.timeout is None
        assert request.retry_policy is None

    def test_empty_url_rejected(self) -> None:
        """URL must not be empty."""
        with pytest.raises(ValidationError):
            RestRequest.get("")

    def test_headers_keep_order_and_duplicates(self) -> None:
        """Headers are an ordered list of pairs."""
        request = (
            RestRequest.get("https://x/a")
            .with_header("Accept", "text/plain")
            .with_header("X-Tag", "one")
            .with_header("X-Tag", "two")
        )

        assert request.headers == (
            ("Accept", "text/plain"),
            ("X-Tag", "one"),
            ("X-Tag", "two"),
        )

    def test_builders_return_new_requests(self) -> None:
        """Builders never mutate the original."""
        original = RestRequest.get("https://x/a")
        changed = original.with_header("A", "b").with_body(b"data")

        assert original.headers == ()
        assert original.body is None
        assert changed.body == b"data"

    def test_text_body_encoded(self) -> None:
        """Text bodies are encoded as UTF-8."""
        request = RestRequest.post("https://x/a").with_body("héllo")

        assert request.body == "héllo".encode()

    def test_with_timeout_seconds_and_timedelta(self) -> None:
        """Timeouts accept seconds or timedelta."""
        assert RestRequest.get("https://x").with_timeout(0.2).timeout == 0.2
        request = RestRequest.get("https://x").with_timeout(timedelta(seconds=3))
        assert request.timeout == 3.0

    def test_with_timeout_must_be_positive(self) -> None:
        """Zero or negative timeouts are invalid."""
        with pytest.raises(ValidationError):
            RestRequest.get("https://x").with_timeout(0)

    def test_timeout_or_default(self) -> None:
        """Default applies when no timeout is set."""
        assert RestRequest.get("https://x").timeout_or() == 2.0
        assert RestRequest.get("https://x").with_timeout(5).timeout_or(2.0) == 5

    def test_with_retry_on_status_creates_policy(self) -> None:
        """Enrolling a status creates a policy."""
        request = RestRequest.get("https://x").with_retry_on_status(503, 1)

        assert request.retry_policy is not None
        assert request.retry_policy.statuses == frozenset({503})
        assert request.retry_policy.max_retries == 1

    def test_with_retry_on_status_extends_policy(self) -> None:
        """Enrolling again adds to the status set."""
        request = (
            RestRequest.get("https://x")
            .with_retry_on_status(503, 1)
            .with_retry_on_status(502, 3)
        )

        assert request.retry_policy is not None
        assert request.retry_policy.statuses == frozenset({502, 503})
        assert request.retry_policy.max_retries == 3

    def test_with_retry_policy_clears(self) -> None:
        """Policy can be cleared."""
        request = (
            RestRequest.get("https://x")
            .with_retry_on_status(503, 1)
            .with_retry_policy(None)
        )

        assert request.retry_policy is None

    def test_route_key(self) -> None:
        """Route key is the exact (method, url) pair."""
        request = RestRequest.post("https://x/a?b=1")

        assert request.route_key == (HttpMethod.POST, "https://x/a?b=1")


class _Payload(BaseModel):
    ok: bool


class TestRestResponse:
    """Tests for RestResponse."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [(199, False), (200, True), (204, True), (299, True), (300, False)],
    )
    def test_is_success_range(self, status: int, expected: bool) -> None:
        """Success is [200, 300)."""
        assert RestResponse(status=status).is_success is expected

    def test_invalid_status_rejected(self) -> None:
        """Status must be a valid HTTP status."""
        with pytest.raises(ValidationError):
            RestResponse(status=700)

    def test_header_lookup_case_insensitive(self) -> None:
        """First matching header is returned."""
        response = RestResponse(
            status=200,
            headers=(("Content-Type", "application/json"), ("X-A", "1"), ("x-a", "2")),
        )

        assert response.header("content-type") == "application/json"
        assert response.header("X-A") == "1"
        assert response.header("missing") is None

    def test_text(self) -> None:
        """Body decodes as UTF-8."""
        assert RestResponse(status=200, body=b"hello").text() == "hello"

    def test_decode_json(self) -> None:
        """JSON body decodes into the requested type."""
        response = RestResponse(status=200, body=b'{"ok": true}')

        assert response.decode_json(_Payload) == _Payload(ok=True)
        assert response.decode_json(dict[str, bool]) == {"ok": True}

    def test_decode_json_empty_body_is_parse_error(self) -> None:
        """Empty bodies fail to decode with PARSE."""
        with pytest.raises(RestError) as exc_info:
            RestResponse(status=200).decode_json(_Payload)

        assert exc_info.value.kind == RestErrorKind.PARSE
        assert exc_info.value.retryable is False

    def test_to_raw(self) -> None:
        """Raw form keeps status, body and elapsed."""
        response = RestResponse(
            status=201,
            headers=(("a", "b"),),
            body=b"x",
            elapsed=timedelta(milliseconds=5),
        )

        raw = response.to_raw()

        assert raw == RawResponse(201, b"x", timedelta(milliseconds=5))
        assert raw.status == 201
