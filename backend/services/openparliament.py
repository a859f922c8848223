"""OpenParliament.ca API client.

Free API, no key required. Every request asks for JSON in the v1 format and
is attempted exactly once; callers decide whether a failure is fatal.
"""

import json
import logging
from typing import Any

import httpx

from config import settings
from errors import UpstreamBadStatus, UpstreamParseError, UpstreamUnavailable

logger = logging.getLogger(__name__)

HEADERS = {
    "Accept": "application/json",
    "User-Agent": "Parliament Watch/1.0",
}

# Appended to every request
FORMAT_PARAMS = {"format": "json", "version": "v1"}


class OpenParliamentClient:
    """Single-attempt GET against the OpenParliament API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str | None = None,
        default_timeout: float | None = None,
    ):
        self._http = http
        self._base_url = (base_url or settings.openparliament_base_url).rstrip("/")
        self._default_timeout = default_timeout or settings.upstream_timeout

    async def fetch(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """GET `path` and return the decoded JSON body.

        Raises UpstreamUnavailable on transport errors, UpstreamBadStatus on
        non-2xx responses and UpstreamParseError when the body is not JSON.
        """
        query = dict(FORMAT_PARAMS)
        for key, value in (params or {}).items():
            if value is not None:
                query[key] = str(value)

        url = f"{self._base_url}{path}"
        logger.info("Fetching from OpenParliament API: %s %s", path, query)

        try:
            resp = await self._http.get(
                url,
                params=query,
                headers=HEADERS,
                timeout=timeout or self._default_timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
            logger.warning("OpenParliament request failed for %s: %s", path, e)
            raise UpstreamUnavailable(e) from e

        if not resp.is_success:
            logger.error("OpenParliament error %s for %s: %s", resp.status_code, path, resp.text[:500])
            raise UpstreamBadStatus(resp.status_code, resp.text)

        try:
            return resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise UpstreamParseError(e) from e
