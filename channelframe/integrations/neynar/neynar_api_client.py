"""
Neynar API Client for Farcaster

This module provides a thin async client for the two Neynar endpoints the frame
needs: bulk user lookup by address and a user's popular casts.

Upstream HTTP statuses are translated into the typed errors in
channelframe.exceptions. The client performs no retries; callers decide how to
surface transient failures.
"""
import logging
import time
from typing import Any, Dict, Iterable, Optional

import httpx

from channelframe.exceptions import (
    NeynarAuthError,
    NeynarForbiddenError,
    NeynarNotFoundError,
    NeynarRateLimitError,
    NeynarServerError,
    NeynarUnavailableError,
)

logger = logging.getLogger(__name__)


class NeynarAPIClient:
    """
    A client for making requests to the Neynar Farcaster API.
    """

    DEFAULT_BASE_URL = "https://api.neynar.com/v2"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            logger.warning("NeynarAPIClient created without an API key; requests will fail with 401")
        self.api_key = api_key
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            transport=transport,
        )

        # Rate limit tracking, informational only
        self.rate_limit_info: Dict[str, Any] = {
            "limit": None,
            "remaining": None,
            "reset": None,
            "last_updated_client": 0.0,
        }

    def _get_headers(self) -> Dict[str, str]:
        return {
            "accept": "application/json",
            "api_key": self.api_key,
            "content-type": "application/json",
        }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict] = None,
    ) -> Dict[str, Any]:
        """Perform a single request and return the decoded JSON body."""
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"Making {method.upper()} request to {url} with params {params}")

        try:
            response = await self._client.request(
                method, url, params=params, headers=self._get_headers()
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout error for {method.upper()} {url}: {e}")
            raise NeynarUnavailableError("Neynar request timed out", original_error=e) from e
        except httpx.RequestError as e:
            logger.warning(f"Request error for {method.upper()} {url}: {e}")
            raise NeynarUnavailableError("Neynar request failed", original_error=e) from e

        self._update_rate_limits(response)
        self._raise_for_status(response)

        try:
            return response.json()
        except ValueError as e:
            raise NeynarUnavailableError(
                "Neynar returned an unparseable body",
                status_code=response.status_code,
                original_error=e,
            ) from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return

        body_preview = response.text[:200]
        if status == 401:
            raise NeynarAuthError("API authentication failed", status_code=status)
        if status == 403:
            raise NeynarForbiddenError("Access forbidden", status_code=status)
        if status == 404:
            raise NeynarNotFoundError("Resource not found", status_code=status)
        if status == 429:
            raise NeynarRateLimitError("Rate limit exceeded", status_code=status)
        if status >= 500:
            logger.warning(f"Neynar server error {status}: {body_preview}")
            raise NeynarServerError("Neynar server error", status_code=status)

        logger.error(f"Unexpected Neynar response {status}: {body_preview}")
        raise NeynarUnavailableError("Unexpected Neynar response", status_code=status)

    def _update_rate_limits(self, response: httpx.Response) -> None:
        """
        Parse and store rate limit information from Neynar API response headers:
        - x-ratelimit-limit / x-ratelimit-remaining / x-ratelimit-reset
        - retry-after (only present on throttled responses)
        """
        headers = response.headers
        limit_hdr = headers.get("x-ratelimit-limit") or headers.get("ratelimit-limit")
        remaining_hdr = headers.get("x-ratelimit-remaining") or headers.get("ratelimit-remaining")
        reset_hdr = headers.get("x-ratelimit-reset") or headers.get("ratelimit-reset")
        retry_after_hdr = headers.get("retry-after")

        updated = False
        try:
            if limit_hdr:
                self.rate_limit_info["limit"] = int(limit_hdr)
                updated = True
            if remaining_hdr:
                remaining = int(remaining_hdr)
                self.rate_limit_info["remaining"] = remaining
                updated = True
                if remaining < 10:
                    logger.warning(f"Neynar API rate limit approaching: {remaining} requests remaining")
            if reset_hdr:
                self.rate_limit_info["reset"] = int(reset_hdr)
                updated = True
            if retry_after_hdr:
                self.rate_limit_info["retry_after"] = int(retry_after_hdr)
                updated = True
        except ValueError as e:
            logger.debug(f"NeynarAPIClient: Could not parse rate limit headers: {e}")

        if updated:
            self.rate_limit_info["last_updated_client"] = time.time()

    async def close(self):
        """Close the HTTP client connection."""
        await self._client.aclose()

    async def get_users_by_address(self, addresses: Iterable[str]) -> Dict[str, Any]:
        """
        Look up Farcaster users verified for the given Ethereum addresses.

        Returns a mapping of lower-cased address to a list of user records.
        """
        params = {"addresses": ",".join(addresses)}
        return await self._make_request(
            "GET", "/farcaster/user/bulk-by-address", params=params
        )

    async def get_popular_casts(self, fid: int) -> Dict[str, Any]:
        """Get a user's most popular casts: {"casts": [...], "next": {"cursor": ...}}."""
        params = {"fid": fid}
        return await self._make_request(
            "GET", "/farcaster/feed/user/popular/", params=params
        )
