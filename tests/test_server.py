"""Tests for tool registration and input validation at the MCP boundary."""

from __future__ import annotations

import logging

import pytest
from mcp.server.fastmcp.exceptions import ToolError

import weather_mcp
from weather_mcp import server
from weather_mcp.server import get_mcp


async def tool_schemas() -> dict[str, dict]:
    tools = await get_mcp().list_tools()
    return {t.name: t.inputSchema for t in tools}


class TestToolListing:
    def test_get_mcp_is_cached(self) -> None:
        assert get_mcp() is get_mcp()

    @pytest.mark.asyncio
    async def test_both_tools_registered(self) -> None:
        assert set(await tool_schemas()) == {"getAlerts", "getForecast"}

    @pytest.mark.asyncio
    async def test_state_schema_requires_two_characters(self) -> None:
        schema = (await tool_schemas())["getAlerts"]
        assert schema["required"] == ["state"]
        assert schema["properties"]["state"]["minLength"] == 2
        assert schema["properties"]["state"]["maxLength"] == 2

    @pytest.mark.asyncio
    async def test_coordinate_bounds_in_schema(self) -> None:
        props = (await tool_schemas())["getForecast"]["properties"]
        assert (props["latitude"]["minimum"], props["latitude"]["maximum"]) == (-90, 90)
        assert (props["longitude"]["minimum"], props["longitude"]["maximum"]) == (-180, 180)


class TestBoundaryRejection:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", ["CAL", "C", ""])
    async def test_bad_state_never_reaches_upstream(self, fake_nws, state: str) -> None:
        with pytest.raises(ToolError):
            await get_mcp().call_tool("getAlerts", {"state": state})
        fake_nws.mock.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", [
        {"latitude": "north", "longitude": -122.6},
        {"latitude": 91, "longitude": -122.6},
        {"latitude": 45.5, "longitude": 181},
        {"latitude": "45.5", "longitude": -122.6},
        {"latitude": 45.5, "longitude": "-122.6"},
        {"latitude": True, "longitude": -122.6},
        {"latitude": 45.5},
    ])
    async def test_bad_coordinates_never_reach_upstream(self, fake_nws, arguments: dict) -> None:
        with pytest.raises(ToolError):
            await get_mcp().call_tool("getForecast", arguments)
        fake_nws.mock.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_integer_coordinates_are_accepted(self, fake_nws) -> None:
        await get_mcp().call_tool("getForecast", {"latitude": 45, "longitude": -122})
        assert fake_nws.urls == ["https://api.weather.gov/points/45.0000,-122.0000"]


class TestPackageExports:
    def test_server_attributes_load_lazily(self) -> None:
        assert weather_mcp.get_mcp is server.get_mcp
        assert weather_mcp.get_forecast is server.get_forecast
        assert "get_alerts" in dir(weather_mcp)

    def test_unknown_attribute(self) -> None:
        with pytest.raises(AttributeError):
            weather_mcp.not_a_tool


class TestMain:
    def test_startup_failure_exits_with_status_one(self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
        def broken_run_server(transport: str = "stdio") -> None:
            raise OSError("stdin is closed")

        monkeypatch.setattr(server, "configure_logging", lambda: None)
        monkeypatch.setattr(server, "run_server", broken_run_server)

        with caplog.at_level(logging.ERROR, logger="weather_mcp.server"):
            with pytest.raises(SystemExit) as exc_info:
                server.main()

        assert exc_info.value.code == 1
        record = next(r for r in caplog.records if r.message == "Error starting weather MCP server")
        assert record.exc_info is not None
        assert isinstance(record.exc_info[1], OSError)
