"""HTTP responses for the flight search endpoint. Every one carries the CORS headers."""

from typing import Dict

from fastapi.responses import JSONResponse, Response

from app.errors import ProxyError
from app.search.proxy import SearchResult, SearchSuccess

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def preflight_response() -> Response:
    return Response(status_code=200, headers=dict(CORS_HEADERS))


def to_response(result: SearchResult) -> Response:
    if isinstance(result, SearchSuccess):
        return Response(
            content=result.body,
            status_code=result.status_code,
            media_type="application/json",
            headers=dict(CORS_HEADERS),
        )
    if isinstance(result, ProxyError):
        return JSONResponse(
            result.to_envelope(),
            status_code=result.status_code,
            headers=dict(CORS_HEADERS),
        )
    raise TypeError(f"Unexpected search result: {result!r}")
