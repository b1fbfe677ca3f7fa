"""Geocoder module: look up a place name near a coordinate with the Places nearby-search API.

One synchronous GET per coordinate, no retries and no caching. The remote
`status` string is mapped onto a GeocodeStatus; failures that prevent reading a
status at all (network, HTTP error codes, bad JSON) raise GeocodeTransportError.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple
import logging

import requests

from .errors import GeocodeTransportError

NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
SEARCH_RADIUS = 500
DEFAULT_TIMEOUT = 10.0

log = logging.getLogger(__name__)


class GeocodeStatus(Enum):
    RESOLVED = "resolved"
    NO_RESULTS = "no_results"
    INVALID_REQUEST = "invalid_request"
    DENIED = "denied"
    QUOTA_EXCEEDED = "quota_exceeded"
    UNKNOWN_ERROR = "unknown_error"


_STATUS_MAP = {
    "OK": GeocodeStatus.RESOLVED,
    "ZERO_RESULTS": GeocodeStatus.NO_RESULTS,
    "REQUEST_DENIED": GeocodeStatus.DENIED,
    "INVALID_REQUEST": GeocodeStatus.INVALID_REQUEST,
    "OVER_QUERY_LIMIT": GeocodeStatus.QUOTA_EXCEEDED,
    "UNKNOWN_ERROR": GeocodeStatus.UNKNOWN_ERROR,
}


@dataclass(frozen=True)
class GeocodeResult:
    status: GeocodeStatus
    name: Optional[str] = None
    raw_status: str = ""

    @property
    def resolved(self) -> bool:
        return self.status is GeocodeStatus.RESOLVED


def map_status(status: Optional[str], results: Optional[Sequence] = None) -> GeocodeResult:
    """Map a remote status string (and its result list) to a GeocodeResult.

    Unknown or empty statuses map to UNKNOWN_ERROR. An OK status whose first
    result has no name is also UNKNOWN_ERROR.
    """
    raw = status or ""
    tag = _STATUS_MAP.get(raw, GeocodeStatus.UNKNOWN_ERROR)
    if tag is not GeocodeStatus.RESOLVED:
        return GeocodeResult(status=tag, raw_status=raw)

    first = results[0] if results else None
    name = first.get("name") if isinstance(first, dict) else None
    if not name:
        return GeocodeResult(status=GeocodeStatus.UNKNOWN_ERROR, raw_status=raw)
    return GeocodeResult(status=GeocodeStatus.RESOLVED, name=str(name), raw_status=raw)


def resolve(
    coordinate: Tuple[float, float],
    api_key: str,
    *,
    session=None,
    timeout: float = DEFAULT_TIMEOUT,
    endpoint: str = NEARBY_SEARCH_URL,
    radius: int = SEARCH_RADIUS,
) -> GeocodeResult:
    """Return the place nearest to `coordinate` as reported by the nearby-search service."""
    lat, lon = coordinate
    params = {
        "location": f"{lat},{lon}",
        "radius": radius,
        "key": api_key,
    }
    http = session if session is not None else requests

    try:
        response = http.get(endpoint, params=params, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise GeocodeTransportError(f"places request failed: {e}", cause=e) from e

    try:
        body = response.json()
    except ValueError as e:
        raise GeocodeTransportError(f"places response is not JSON: {e}", cause=e) from e
    if not isinstance(body, dict):
        raise GeocodeTransportError("places response is not a JSON object")

    status = body.get("status")
    results = body.get("results")
    if not isinstance(status, (str, type(None))) or not isinstance(results, (list, type(None))):
        raise GeocodeTransportError("places response has unexpected shape")

    log.debug("Places response status: %r", status)
    return map_status(status, results)
