"""Typed views of the NWS JSON documents the tools consume.

These mirror the upstream payloads; nothing checks them at runtime.
"""

from typing import TypedDict


class AlertProperties(TypedDict, total=False):
    event: str
    areaDesc: str
    severity: str
    status: str
    headline: str


class AlertFeature(TypedDict, total=False):
    properties: AlertProperties


class AlertCollection(TypedDict, total=False):
    features: list[AlertFeature]


class ForecastPeriod(TypedDict, total=False):
    name: str
    temperature: float
    temperatureUnit: str
    windSpeed: str
    windDirection: str
    shortForecast: str


class PointProperties(TypedDict, total=False):
    forecast: str


class PointMetadata(TypedDict, total=False):
    properties: PointProperties


class ForecastProperties(TypedDict, total=False):
    periods: list[ForecastPeriod]


class ForecastDocument(TypedDict, total=False):
    properties: ForecastProperties
