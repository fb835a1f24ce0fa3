import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from app.amadeus.auth import TokenManager
from app.config import Settings
from app.obs.metrics import inc_counter, record_timing


@dataclass
class UpstreamReply:
    status_code: int
    text: str  # raw body, kept unparsed so success bodies pass through verbatim
    elapsed_ms: float

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    # Persistent HTTP client with HTTP/2; the only timeout is the transport's
    return httpx.AsyncClient(
        http2=True,
        timeout=httpx.Timeout(settings.AMADEUS_HTTP_TIMEOUT_SECONDS),
    )


class AmadeusClient:
    def __init__(self, settings: Settings, http: Optional[httpx.AsyncClient] = None,
                 tokens: Optional[TokenManager] = None):
        self._settings = settings
        self._owns_http = http is None
        self._http = http or build_http_client(settings)
        self.tokens = tokens or TokenManager(settings, self._http)

    @property
    def search_url(self) -> str:
        return f"{self._settings.amadeus_host}/v2/shopping/flight-offers"

    async def search_flight_offers(self, body: Dict[str, Any]) -> UpstreamReply:
        """POST a flight-offers search with a bearer token. No retries.

        Raises:
            TokenError: when no token could be obtained.
        """
        token = await self.tokens.get_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        start = time.monotonic()
        r = await self._http.post(self.search_url, json=body, headers=headers)
        elapsed_ms = (time.monotonic() - start) * 1000.0

        record_timing("amadeus_search_latency_ms", elapsed_ms)
        inc_counter("amadeus_search_total", {"status": str(r.status_code)})
        return UpstreamReply(status_code=r.status_code, text=r.text, elapsed_ms=elapsed_ms)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
