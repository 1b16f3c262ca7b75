from __future__ import annotations

import asyncio
import logging
from urllib.parse import urljoin

import aiohttp

from repo_snapshot_tool.domain.errors import DownloadError, HttpError, TooManyRedirects
from repo_snapshot_tool.domain.ports import FetchedResponse, HttpFetcherPort


DEFAULT_MAX_REDIRECTS = 20


class AiohttpFetcher(HttpFetcherPort):
    """GET over a shared `aiohttp.ClientSession`, following 3xx responses itself."""

    def __init__(self, session: aiohttp.ClientSession, *, max_redirects: int = DEFAULT_MAX_REDIRECTS) -> None:
        if max_redirects < 0:
            raise ValueError("max_redirects must be >= 0")
        self._session = session
        self._max_redirects = max_redirects
        self._logger = logging.getLogger(__name__)

    async def fetch(self, url: str) -> FetchedResponse:
        current_url = url
        redirects = 0

        while True:
            response = await self._get(current_url)
            status = response.status
            reason = response.reason or ""

            if status >= 400 or status < 200:
                response.release()
                raise HttpError(status, reason, url=current_url)

            if status >= 300:
                location = response.headers.get("Location")
                response.release()
                if not location:
                    raise HttpError(status, f"No location header. {reason}".strip(), url=current_url)

                if redirects >= self._max_redirects:
                    raise TooManyRedirects(self._max_redirects, url)

                redirects += 1
                next_url = urljoin(current_url, location)
                self._logger.debug(
                    "following redirect",
                    extra={
                        "event": "http.redirect",
                        "status": status,
                        "from_url": current_url,
                        "to_url": next_url,
                        "redirects": redirects,
                    },
                )
                current_url = next_url
                continue

            self._logger.info(
                "response received",
                extra={"event": "http.response", "status": status, "url": current_url, "redirects": redirects},
            )
            return response

    async def _get(self, url: str):
        try:
            return await self._session.get(url, allow_redirects=False)
        except aiohttp.ClientError as error:
            raise DownloadError(f"Request failed for URL: {url}: {error}") from error
        except asyncio.TimeoutError as error:
            raise DownloadError(f"Request timed out for URL: {url}") from error
