"""
Tests for NeynarAPIClient request shaping and status translation.
"""
import json

import httpx
import pytest

from channelframe.exceptions import (
    ErrorKind,
    NeynarAuthError,
    NeynarForbiddenError,
    NeynarNotFoundError,
    NeynarRateLimitError,
    NeynarServerError,
    NeynarUnavailableError,
)
from channelframe.integrations.neynar import NeynarAPIClient
from tests.factories import TEST_ADDRESS, casts_for, users_response


def make_client(handler, api_key="test_key") -> NeynarAPIClient:
    return NeynarAPIClient(api_key=api_key, transport=httpx.MockTransport(handler))


class TestNeynarRequests:
    """Test the shape of outgoing requests."""

    @pytest.mark.asyncio
    async def test_bulk_by_address_request(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json=users_response(TEST_ADDRESS, fid=42))

        client = make_client(handler)
        data = await client.get_users_by_address([TEST_ADDRESS])
        await client.close()

        request = seen["request"]
        assert request.method == "GET"
        assert request.url.path == "/v2/farcaster/user/bulk-by-address"
        assert request.url.params["addresses"] == TEST_ADDRESS
        assert request.headers["api_key"] == "test_key"
        assert request.headers["accept"] == "application/json"
        assert data[TEST_ADDRESS.lower()][0]["fid"] == 42

    @pytest.mark.asyncio
    async def test_popular_casts_request(self):
        seen = {}
        payload = {"casts": casts_for("memes", "base"), "next": {"cursor": None}}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json=payload)

        client = make_client(handler)
        data = await client.get_popular_casts(42)
        await client.close()

        assert seen["request"].url.path == "/v2/farcaster/feed/user/popular/"
        assert seen["request"].url.params["fid"] == "42"
        assert [c["channel"]["id"] for c in data["casts"]] == ["memes", "base"]

    def test_custom_base_url_is_normalised(self):
        client = NeynarAPIClient(api_key="k", base_url="https://neynar.test/v2/")
        assert client.base_url == "https://neynar.test/v2"

    def test_missing_api_key_is_not_rejected(self):
        client = NeynarAPIClient(api_key="")
        assert client.api_key == ""


class TestNeynarStatusMapping:
    """Test translation of upstream statuses into typed errors."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, error_cls, kind",
        [
            (401, NeynarAuthError, ErrorKind.AUTH_FAILURE),
            (403, NeynarForbiddenError, ErrorKind.FORBIDDEN),
            (404, NeynarNotFoundError, ErrorKind.NOT_FOUND),
            (429, NeynarRateLimitError, ErrorKind.RATE_LIMITED),
            (500, NeynarServerError, ErrorKind.UPSTREAM_SERVER_ERROR),
            (503, NeynarServerError, ErrorKind.UPSTREAM_SERVER_ERROR),
            (418, NeynarUnavailableError, ErrorKind.UPSTREAM_UNAVAILABLE),
        ],
    )
    async def test_status_is_classified(self, status, error_cls, kind):
        client = make_client(lambda request: httpx.Response(status, json={"message": "nope"}))

        with pytest.raises(error_cls) as exc_info:
            await client.get_popular_casts(1)
        await client.close()

        assert exc_info.value.kind == kind
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_rate_limit_message_text_is_not_needed(self):
        """A 429 is classified by status even when the body says something else."""
        client = make_client(lambda request: httpx.Response(429, text="slow down"))

        with pytest.raises(NeynarRateLimitError):
            await client.get_users_by_address([TEST_ADDRESS])
        await client.close()

    @pytest.mark.asyncio
    async def test_connect_error_is_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("name resolution failed", request=request)

        client = make_client(handler)
        with pytest.raises(NeynarUnavailableError) as exc_info:
            await client.get_users_by_address([TEST_ADDRESS])
        await client.close()

        assert isinstance(exc_info.value.original_error, httpx.ConnectError)
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_timeout_is_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)
        with pytest.raises(NeynarUnavailableError) as exc_info:
            await client.get_popular_casts(1)
        await client.close()

        assert isinstance(exc_info.value.original_error, httpx.TimeoutException)

    @pytest.mark.asyncio
    async def test_invalid_json_is_unavailable(self):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

        with pytest.raises(NeynarUnavailableError) as exc_info:
            await client.get_popular_casts(1)
        await client.close()

        assert isinstance(exc_info.value.original_error, json.JSONDecodeError)


class TestNeynarRateLimitTracking:
    """Test parsing of rate limit headers."""

    @pytest.mark.asyncio
    async def test_headers_are_recorded(self):
        headers = {
            "x-ratelimit-limit": "300",
            "x-ratelimit-remaining": "250",
            "x-ratelimit-reset": "1640995200",
        }
        client = make_client(lambda request: httpx.Response(200, json={"casts": []}, headers=headers))

        await client.get_popular_casts(1)
        await client.close()

        assert client.rate_limit_info["limit"] == 300
        assert client.rate_limit_info["remaining"] == 250
        assert client.rate_limit_info["reset"] == 1640995200
        assert client.rate_limit_info["last_updated_client"] > 0

    @pytest.mark.asyncio
    async def test_retry_after_recorded_on_429(self):
        client = make_client(lambda request: httpx.Response(429, headers={"retry-after": "60"}))

        with pytest.raises(NeynarRateLimitError):
            await client.get_popular_casts(1)
        await client.close()

        assert client.rate_limit_info["retry_after"] == 60

    @pytest.mark.asyncio
    async def test_invalid_headers_are_ignored(self):
        client = make_client(
            lambda request: httpx.Response(200, json={}, headers={"x-ratelimit-limit": "lots"})
        )

        assert await client.get_popular_casts(1) == {}
        await client.close()

        assert client.rate_limit_info["limit"] is None
