"""Plain-text renderings of NWS records."""

from decimal import Decimal
from typing import Any

from .models import AlertFeature, ForecastPeriod

UNKNOWN = "Unknown"
SEPARATOR = "---"


def _or_unknown(value: Any) -> str:
    # Empty strings count as missing; numeric zero does not.
    if value is None or value == "":
        return UNKNOWN
    return str(value)


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def format_alert(feature: AlertFeature) -> str:
    """Format an alert feature into a six-line block."""
    props = _as_dict(_as_dict(feature).get("properties"))
    return "\n".join([
        f"Event: {_or_unknown(props.get('event'))}",
        f"Area: {_or_unknown(props.get('areaDesc'))}",
        f"Severity: {_or_unknown(props.get('severity'))}",
        f"Status: {_or_unknown(props.get('status'))}",
        f"Headline: {_or_unknown(props.get('headline'))}",
        SEPARATOR,
    ])


def format_period(period: ForecastPeriod) -> str:
    """Format one forecast period into a four-line block."""
    period = _as_dict(period)
    return "\n".join([
        f"{_or_unknown(period.get('name'))}: "
        f"{_or_unknown(period.get('temperature'))} {_or_unknown(period.get('temperatureUnit'))}",
        f"Wind: {_or_unknown(period.get('windSpeed'))} {_or_unknown(period.get('windDirection'))}",
        f"Forecast: {_or_unknown(period.get('shortForecast'))}",
        SEPARATOR,
    ])


def format_coordinate(value: float) -> str:
    """Render a coordinate the way it was supplied: 45.0 -> "45", 45.5 -> "45.5", 1e-05 -> "0.00001"."""
    if float(value).is_integer():
        return str(int(value))
    # Decimal keeps the shortest repr digits but never switches to exponent notation.
    return format(Decimal(repr(float(value))), "f")
