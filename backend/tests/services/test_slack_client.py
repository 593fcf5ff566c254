"""Slack Client — tests over httpx.MockTransport (no network).

Tests cover:
    - bearer token and form-encoded arguments sent to /conversations.<method>
    - "ok": false mapped to SlackAPIError with Slack's error string
    - 429 retried after Retry-After; 5xx retried; 4xx not retried
"""

from unittest.mock import AsyncMock
from urllib.parse import parse_qs

import httpx
import pytest

from admissions.core.errors import SlackAPIError
from admissions.infrastructure.slack_client import SlackClient


def _client(handler, **kwargs) -> SlackClient:
    http = httpx.AsyncClient(
        base_url="https://slack.test/api", transport=httpx.MockTransport(handler),
    )
    return SlackClient("xoxb-test", http_client=http, **kwargs)


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("asyncio.sleep", AsyncMock())


async def test_info_sends_token_and_returns_channel():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["authorization"]
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={
            "ok": True, "channel": {"id": "C1", "name_normalized": "team-rocket"},
        })

    channel = await _client(handler).conversations_info("C1")

    assert channel["name_normalized"] == "team-rocket"
    assert seen == {
        "path": "/api/conversations.info",
        "auth": "Bearer xoxb-test",
        "content_type": "application/x-www-form-urlencoded",
        "body": {"channel": ["C1"]},
    }


async def test_not_ok_maps_to_slack_api_error():
    def handler(request):
        return httpx.Response(200, json={"ok": False, "error": "channel_not_found"})

    with pytest.raises(SlackAPIError) as exc:
        await _client(handler).conversations_archive("C404")
    assert exc.value.slack_error == "channel_not_found"
    assert exc.value.method == "conversations.archive"


async def test_rate_limit_retried():
    responses = iter([
        httpx.Response(429, headers={"retry-after": "1"}),
        httpx.Response(200, json={"ok": True, "channel": {"id": "C1", "name": "x"}}),
    ])

    def handler(request):
        return next(responses)

    channel = await _client(handler).conversations_rename("C1", "x")
    assert channel["name"] == "x"


async def test_server_error_retried_until_exhausted():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    with pytest.raises(SlackAPIError):
        await _client(handler, max_retries=2).conversations_info("C1")
    assert len(calls) == 3


async def test_client_error_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(403)

    with pytest.raises(SlackAPIError):
        await _client(handler).conversations_info("C1")
    assert len(calls) == 1


async def test_rename_sends_form_fields():
    seen = {}

    def handler(request):
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"ok": True, "channel": {"id": "C1", "name": "x-y"}})

    await _client(handler).conversations_rename("C1", "x-y")

    assert seen["content_type"].startswith("application/x-www-form-urlencoded")
    assert seen["body"] == {"channel": ["C1"], "name": ["x-y"]}
