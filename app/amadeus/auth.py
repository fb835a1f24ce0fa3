"""Client-credentials token handling for the Amadeus API.

The cache is a single slot with no lock. Two requests that find the token
stale at the same time will both ask for a new one; both grants succeed and
whichever write lands last is kept. Tokens are interchangeable until their
own expiry, so the extra grant is accepted.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from app.config import Settings
from app.errors import TokenError
from app.obs.logger import log_event
from app.obs.metrics import inc_counter


@dataclass
class CachedToken:
    access_token: str
    expires_at: int  # epoch seconds


class TokenCache:
    def __init__(self, margin_seconds: int = 30):
        self.margin_seconds = margin_seconds
        self._slot: Optional[CachedToken] = None

    def get(self, now: float) -> Optional[str]:
        """Return the cached token if it is still valid past the safety margin."""
        if self._slot and self._slot.expires_at - self.margin_seconds > now:
            return self._slot.access_token
        return None

    def set(self, access_token: str, expires_at: int) -> None:
        self._slot = CachedToken(access_token=access_token, expires_at=expires_at)

    @property
    def expires_at(self) -> Optional[int]:
        return self._slot.expires_at if self._slot else None


class TokenManager:
    def __init__(self, settings: Settings, http: httpx.AsyncClient,
                 cache: Optional[TokenCache] = None,
                 clock: Callable[[], float] = time.time):
        self._settings = settings
        self._http = http
        self._clock = clock
        self.cache = cache or TokenCache(settings.AMADEUS_TOKEN_MARGIN_SECONDS)

    @property
    def token_url(self) -> str:
        return f"{self._settings.amadeus_host}/v1/security/oauth2/token"

    async def get_token(self) -> str:
        """Return a bearer token, running the credentials grant when the cache is stale.

        Raises:
            TokenError: the grant returned a non-success status or no token.
        """
        now = int(self._clock())
        token = self.cache.get(now)
        if token:
            return token

        data = {
            "grant_type": "client_credentials",
            "client_id": self._settings.AMADEUS_CLIENT_ID,
            "client_secret": self._settings.AMADEUS_CLIENT_SECRET,
        }
        r = await self._http.post(
            self.token_url,
            data=data,
            headers={"Accept": "application/json"},
        )
        inc_counter("amadeus_token_grants_total", {"status": str(r.status_code)})

        if not r.is_success:
            log_event("token_error", level="ERROR", upstream_status=r.status_code)
            raise TokenError(r.status_code, r.text)

        j = r.json()
        access_token = j.get("access_token")
        if not access_token:
            log_event("token_error", level="ERROR", upstream_status=r.status_code, reason="missing access_token")
            raise TokenError(r.status_code, r.text)

        expires_in = j.get("expires_in") or self._settings.AMADEUS_DEFAULT_TOKEN_LIFETIME
        expires_at = int(self._clock()) + int(expires_in)
        self.cache.set(access_token, expires_at)
        log_event("token_refreshed", expires_in=expires_in, access_token=access_token)
        return access_token
