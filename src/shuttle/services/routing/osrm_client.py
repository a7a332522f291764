"""Async HTTP client for the OSRM route service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import httpx

from ...config import settings
from .errors import NetworkUnavailable, UpstreamEmptyRoute, UpstreamMalformedResponse

# OSRM answers these with HTTP 400 when the coordinates cannot be snapped or connected.
NO_ROUTE_CODES = frozenset({"NoRoute", "NoSegment"})
_RETRYABLE_STATUS = frozenset({408, 429, 500, 502, 503, 504})

logger = logging.getLogger(__name__)


def format_coordinates(coordinates: Sequence[tuple[float, float]]) -> str:
    """Convert (lat, lon) pairs to the OSRM path segment 'lon,lat;lon,lat;...'."""
    return ";".join(f"{lon},{lat}" for lat, lon in coordinates)


def _response_code(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        code = data.get("code")
        return code if isinstance(code, str) else None
    return None


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={"accept": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def route_url(self, coordinates: Sequence[tuple[float, float]]) -> str:
        return f"{self.base_url}/route/v1/{self.profile}/{format_coordinates(coordinates)}"

    async def get_json(self, url: str, params: dict[str, str]) -> Any:
        """Single GET bounded by the configured timeout, with failures mapped to resolution errors."""
        try:
            response = await asyncio.wait_for(self._client.get(url, params=params), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise NetworkUnavailable(f"OSRM request timed out after {self.timeout:.1f}s") from exc
        except httpx.TimeoutException as exc:
            raise NetworkUnavailable(f"OSRM request timed out: {type(exc).__name__}") from exc
        except httpx.TransportError as exc:
            raise NetworkUnavailable(f"Failed to connect to OSRM service at {self.base_url}: {exc}") from exc
        except httpx.DecodingError as exc:
            raise UpstreamMalformedResponse(f"OSRM response body could not be decoded: {exc}") from exc
        except httpx.RequestError as exc:
            raise NetworkUnavailable(f"OSRM request failed: {type(exc).__name__}: {exc}") from exc

        if response.status_code >= 400:
            code = _response_code(response)
            if code in NO_ROUTE_CODES:
                raise UpstreamEmptyRoute(f"OSRM found no route ({code}).")
            if response.status_code in _RETRYABLE_STATUS or response.status_code >= 500:
                raise NetworkUnavailable(f"OSRM HTTP {response.status_code}")
            raise UpstreamMalformedResponse(f"OSRM rejected the request: HTTP {response.status_code} {code or ''}".rstrip())

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamMalformedResponse("OSRM response body is not valid JSON.") from exc

    async def route(self, coordinates: Sequence[tuple[float, float]]) -> Any:
        """Get route geometry between coordinates using the OSRM route endpoint.

        Args:
            coordinates: Sequence of (lat, lon) tuples, origin first and destination last.

        Returns:
            Decoded JSON payload. Validation of its contents is left to the caller.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        url = self.route_url(coordinates)
        params = {
            "overview": "full",
            "geometries": "geojson",
        }

        attempt = 0
        while True:
            try:
                return await self.get_json(url, params)
            except NetworkUnavailable as exc:
                attempt += 1
                if attempt > self.max_retries:
                    raise
                wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                logger.debug(f"OSRM route failed, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {exc}")
                await asyncio.sleep(wait_time)


async def check_health(client: OSRMClient, coordinates: Sequence[tuple[float, float]]) -> bool:
    """Check OSRM with a minimal route request between two known coordinates."""
    try:
        data = await client.get_json(client.route_url(coordinates), {"overview": "false"})
    except (NetworkUnavailable, UpstreamMalformedResponse, UpstreamEmptyRoute) as exc:
        logger.info(f"OSRM health check failed: {exc}")
        return False
    return isinstance(data, dict) and data.get("code") == "Ok"
