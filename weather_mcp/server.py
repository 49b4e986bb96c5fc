from typing import Annotated
import logging
import os
import sys

from mcp.types import TextContent
from pydantic import Field

from . import config
from .formatting import format_alert, format_coordinate, format_period
from .models import AlertCollection, ForecastDocument, PointMetadata
from .nws import NWSFailure, alerts_url, make_nws_request, points_url

logger = logging.getLogger("weather_mcp.server")

# Functions (and args/kwargs for mcp.tool) recorded until the FastMCP server is
# created, so importing this module does not build the server.
_REGISTERED_FUNCS: list[tuple] = []

# The MCP instance is created lazily via `get_mcp()`.
mcp = None


def tool(*args, **kwargs):
    """Record a tool for registration when the FastMCP instance is built."""
    def decorator(fn):
        _REGISTERED_FUNCS.append((fn, args, kwargs))
        return fn
    return decorator


def get_mcp():
    """Lazily initialize the FastMCP server and register every recorded tool."""
    global mcp
    if mcp is not None:
        return mcp
    from mcp.server.fastmcp import FastMCP
    server = FastMCP(config.SERVER_NAME, instructions=config.SERVER_INSTRUCTIONS)
    for fn, args, kwargs in _REGISTERED_FUNCS:
        server.tool(*args, **kwargs)(fn)
    mcp = server
    return mcp


def text_result(text: str) -> list[TextContent]:
    """Wrap text in the single-item content envelope every tool returns."""
    return [TextContent(type="text", text=text)]


def _properties(document: dict) -> dict:
    # GeoJSON documents keep their payload under "properties"; anything else reads as empty.
    props = document.get("properties")
    return props if isinstance(props, dict) else {}


@tool(name="getAlerts", description="Get weather alerts for a state", structured_output=False)
async def get_alerts(
    state: Annotated[str, Field(min_length=2, max_length=2, description="The two-letter state code")],
) -> list[TextContent]:
    """Get active weather alerts for a US state.

    Args:
        state: Two-letter state code, any case (e.g. CA, ny)
    """
    state_code = state.upper()
    logger.info(f"getAlerts state={state_code}")

    result = await make_nws_request(alerts_url(state_code))
    if isinstance(result, NWSFailure) or not isinstance(result.value, dict):
        return text_result("Failed to retrieve alerts data")

    alerts: AlertCollection = result.value
    features = alerts.get("features")
    if not features or not isinstance(features, list):
        return text_result(f"No active alerts for {state_code}")

    formatted = [format_alert(feature) for feature in features]
    return text_result(f"Active alerts for {state_code}:\n" + "\n\n".join(formatted))


@tool(name="getForecast", description="Get the weather forecast for a location", structured_output=False)
async def get_forecast(
    latitude: Annotated[float, Field(ge=-90, le=90, strict=True, description="The latitude of the location")],
    longitude: Annotated[float, Field(ge=-180, le=180, strict=True, description="The longitude of the location")],
) -> list[TextContent]:
    """Get the forecast for a coordinate pair.

    Resolves the grid point first, then fetches the forecast document it
    links to. Each step short-circuits with a failure message.
    """
    coords = f"{format_coordinate(latitude)}, {format_coordinate(longitude)}"
    logger.info(f"getForecast coordinates={coords}")

    point = await make_nws_request(points_url(latitude, longitude))
    if isinstance(point, NWSFailure) or not isinstance(point.value, dict):
        return text_result(f"Failed to retrieve grid point data for coordinates: {coords}")

    metadata: PointMetadata = point.value
    forecast_url = _properties(metadata).get("forecast")
    if not forecast_url or not isinstance(forecast_url, str):
        return text_result(f"Failed to get forecast URL from grid point data for coordinates: {coords}")

    forecast = await make_nws_request(forecast_url)
    if isinstance(forecast, NWSFailure) or not isinstance(forecast.value, dict):
        return text_result(f"Failed to retrieve forecast data for coordinates: {coords}")

    document: ForecastDocument = forecast.value
    periods = _properties(document).get("periods")
    if not periods or not isinstance(periods, list):
        return text_result(f"No forecast data available for coordinates: {coords}")

    formatted = [format_period(period) for period in periods]
    return text_result(f"Forecast for {coords}:\n" + "\n\n".join(formatted))


def configure_logging() -> None:
    """Send diagnostics to stderr (stdout carries the protocol) and optionally LOG_DIR."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.LOG_DIR:
        os.makedirs(config.LOG_DIR, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(config.LOG_DIR, "weather_server.log")))
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(message)s",
        handlers=handlers,
    )


def run_server(transport: str = "stdio") -> None:
    """Run the MCP server (convenience wrapper)."""
    m = get_mcp()
    logger.info("Weather MCP server started")
    m.run(transport=transport)


def main() -> None:
    configure_logging()
    try:
        run_server()
    except Exception:
        logger.exception("Error starting weather MCP server")
        sys.exit(1)


if __name__ == "__main__":
    main()
