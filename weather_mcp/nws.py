"""Thin async client for the National Weather Service API.

Every request either yields an ``NWSSuccess`` holding the decoded JSON body or
an ``NWSFailure`` describing what went wrong. Failures are logged here and
never raised, so tool handlers only have to branch on the result type.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union
import logging

import httpx

from . import config

logger = logging.getLogger("weather_mcp.nws")

T = TypeVar("T")


class FailureKind(str, Enum):
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    DECODE = "decode"


@dataclass(frozen=True)
class NWSSuccess(Generic[T]):
    value: T


@dataclass(frozen=True)
class NWSFailure:
    kind: FailureKind
    url: str
    detail: str


NWSResult = Union[NWSSuccess[T], NWSFailure]


def request_headers() -> dict[str, str]:
    return {"User-Agent": config.USER_AGENT, "Accept": "application/geo+json"}


def alerts_url(state_code: str) -> str:
    """Alerts query for a two-letter area code (already normalized)."""
    return f"{config.NWS_API_BASE}/alerts?area={state_code}"


def points_url(latitude: float, longitude: float) -> str:
    """Grid point lookup; NWS expects at most four decimal places."""
    return f"{config.NWS_API_BASE}/points/{latitude:.4f},{longitude:.4f}"


def _fail(kind: FailureKind, url: str, detail: str) -> NWSFailure:
    logger.error(f"[NWS API Error] {kind.value} for {url}: {detail}")
    return NWSFailure(kind=kind, url=url, detail=detail)


async def _get(client: httpx.AsyncClient, url: str) -> NWSResult[Any]:
    try:
        response = await client.get(url, headers=request_headers(), timeout=config.REQUEST_TIMEOUT)
        response.raise_for_status()
    except httpx.TimeoutException as e:
        return _fail(FailureKind.TIMEOUT, url, f"no response within {config.REQUEST_TIMEOUT}s ({e!r})")
    except httpx.HTTPStatusError as e:
        return _fail(FailureKind.HTTP_STATUS, url, f"HTTP error! status: {e.response.status_code}")
    except httpx.RequestError as e:
        return _fail(FailureKind.NETWORK, url, repr(e))

    try:
        return NWSSuccess(response.json())
    except ValueError as e:
        return _fail(FailureKind.DECODE, url, f"invalid JSON body ({e})")


async def make_nws_request(url: str, client: httpx.AsyncClient | None = None) -> NWSResult[Any]:
    """Make a GET request to the NWS API.

    Args:
        url: Fully formed request URL.
        client: Optional client to reuse. It is left open; when omitted a
            client is created for this request and closed afterwards.
    """
    if client is not None:
        return await _get(client, url)
    async with httpx.AsyncClient(follow_redirects=True) as owned:
        return await _get(owned, url)
