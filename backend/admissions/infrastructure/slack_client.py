"""Slack Web API Client — the three conversations.* calls used to archive project channels.

Invariants:
    - Rate limits (429): retried with Retry-After (or exponential backoff), max_retries times
    - Connection errors and 5xx: retried with exponential backoff
    - Slack responses with "ok": false map to SlackAPIError carrying Slack's error string
    - All failures surface as SlackAPIError (core/errors.py)
    - Arguments are sent form-encoded: read methods such as conversations.info
      ignore JSON bodies

Design Decisions:
    - Thin httpx wrapper over an SDK: only conversations.info / rename / archive are needed
    - The httpx.AsyncClient can be injected (tests pass one with httpx.MockTransport)
"""

import asyncio
import logging
import random

import httpx

from admissions.core.errors import SlackAPIError

logger = logging.getLogger(__name__)


class SlackClient:
    """Async Slack Web API client with retry and error mapping."""

    def __init__(
        self,
        token: str,
        base_url: str = "https://slack.com/api",
        timeout_seconds: float = 10.0,
        max_retries: int = 3,
        base_delay_ms: int = 500,
        max_delay_ms: int = 30_000,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds,
        )
        self._owns_client = http_client is None
        self._token = token
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def conversations_info(self, channel: str) -> dict:
        """Return the channel object for `channel`."""
        data = await self._call("conversations.info", {"channel": channel})
        return data.get("channel") or {}

    async def conversations_rename(self, channel: str, name: str) -> dict:
        data = await self._call(
            "conversations.rename", {"channel": channel, "name": name},
        )
        return data.get("channel") or {}

    async def conversations_archive(self, channel: str) -> None:
        await self._call("conversations.archive", {"channel": channel})

    async def _call(self, method: str, payload: dict) -> dict:
        """POST a Web API method, retrying transient failures."""
        for attempt in range(self.max_retries + 1):
            try:
                response = await self._client.post(
                    f"/{method}",
                    data=payload,
                    headers={"Authorization": f"Bearer {self._token}"},
                )
            except httpx.TransportError as e:
                await self._handle_transient_error(method, str(e), attempt)
                continue

            if response.status_code == 429:
                await self._handle_rate_limit(method, response, attempt)
                continue
            if response.status_code >= 500:
                await self._handle_transient_error(
                    method, f"HTTP {response.status_code}", attempt,
                )
                continue
            if response.status_code >= 400:
                raise SlackAPIError(method, f"HTTP {response.status_code}")

            data = response.json()
            if not data.get("ok"):
                raise SlackAPIError(method, data.get("error", "unknown_error"))
            return data

        raise SlackAPIError(method, "retries_exhausted")

    async def _handle_rate_limit(
        self, method: str, response: httpx.Response, attempt: int,
    ) -> None:
        """Sleep for Retry-After (or backoff) or raise once retries are spent."""
        if attempt >= self.max_retries:
            raise SlackAPIError(method, "ratelimited")
        retry_after = response.headers.get("retry-after")
        delay = int(retry_after) * 1000 if retry_after and retry_after.isdigit() \
            else self._backoff(attempt)
        logger.warning(
            f"Slack rate limit on {method}, retry after {delay}ms (attempt {attempt + 1})",
        )
        await asyncio.sleep(delay / 1000)

    async def _handle_transient_error(
        self, method: str, detail: str, attempt: int,
    ) -> None:
        if attempt >= self.max_retries:
            raise SlackAPIError(
                method, f"transient failure after {self.max_retries} retries: {detail}",
            )
        delay = self._backoff(attempt)
        logger.warning(f"Slack transient error on {method}, retry after {delay}ms: {detail}")
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter, in milliseconds."""
        delay = min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms)
        jitter = delay * 0.25 * (2 * random.random() - 1)  # nosec B311
        return int(delay + jitter)
