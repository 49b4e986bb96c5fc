"""Pytest configuration and fixtures for weather_mcp tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from weather_mcp import server
from weather_mcp.nws import FailureKind, NWSFailure, NWSSuccess


class FakeNWS:
    """Canned upstream: URL -> JSON body; unknown URLs fail with HTTP 404."""

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.mock = AsyncMock(side_effect=self._respond)

    def add(self, url: str, body: Any) -> None:
        self.responses[url] = body

    def fail(self, url: str, kind: FailureKind = FailureKind.NETWORK) -> None:
        self.responses[url] = NWSFailure(kind=kind, url=url, detail="simulated")

    @property
    def urls(self) -> list[str]:
        return [call.args[0] for call in self.mock.await_args_list]

    async def _respond(self, url: str, client: Any = None) -> Any:
        body = self.responses.get(url)
        if body is None:
            return NWSFailure(kind=FailureKind.HTTP_STATUS, url=url, detail="HTTP error! status: 404")
        if isinstance(body, NWSFailure):
            return body
        return NWSSuccess(body)


@pytest.fixture
def fake_nws(monkeypatch: pytest.MonkeyPatch) -> FakeNWS:
    """Replace the upstream client used by the tool handlers."""
    fake = FakeNWS()
    monkeypatch.setattr(server, "make_nws_request", fake.mock)
    return fake
