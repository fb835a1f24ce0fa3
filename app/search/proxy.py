"""Translate a simplified search into an Amadeus flight-offers call and relay the result."""

import json
import math
from dataclasses import dataclass
from typing import Any, Union

from app.amadeus.client import AmadeusClient
from app.amadeus.payload import SearchRequest, build_search_payload
from app.errors import ApiError, ProxyError, UncaughtError
from app.obs.logger import log_event


@dataclass
class SearchSuccess:
    body: str  # upstream JSON text, relayed without re-serializing
    status_code: int = 200


SearchResult = Union[SearchSuccess, ProxyError]


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON and cannot be rendered back out
    raise ValueError(f"Invalid JSON constant: {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def safe_json(maybe_json: str) -> Any:
    try:
        return json.loads(maybe_json, parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError:
        return maybe_json


def parse_search_request(raw_body: bytes) -> SearchRequest:
    data = json.loads(raw_body, parse_constant=_reject_constant)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return SearchRequest.model_validate(data)


class FlightSearchProxy:
    def __init__(self, amadeus: AmadeusClient):
        self.amadeus = amadeus

    async def handle(self, raw_body: bytes) -> SearchResult:
        """Run one search. Failures come back as ProxyError values, never raised."""
        try:
            return await self._handle(raw_body)
        except ProxyError as e:
            log_event("search_failed", level="ERROR", kind=e.kind, status=e.status_code)
            return e
        except Exception as e:
            log_event("search_failed", level="ERROR", kind=UncaughtError.kind, error=f"{type(e).__name__}: {e}")
            return UncaughtError.from_exception(e)

    async def _handle(self, raw_body: bytes) -> SearchResult:
        req = parse_search_request(raw_body)
        payload = build_search_payload(req)

        reply = await self.amadeus.search_flight_offers(payload.to_json())
        log_event(
            "search_forwarded",
            origin=req.origin,
            destination=req.destination,
            round_trip=bool(req.return_date),
            status=reply.status_code,
            ms=round(reply.elapsed_ms, 2),
        )

        if not reply.ok:
            raise ApiError(reply.status_code, safe_json(reply.text))
        return SearchSuccess(body=reply.text)
