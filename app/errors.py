"""Error values returned by the flight search proxy.

Each error knows the HTTP status it maps to and the JSON envelope the caller
receives, so the route only has to translate it into a response.
"""

from typing import Any, Dict


class ProxyError(Exception):
    """Base class for every failure the proxy reports to its caller."""

    kind = "UNCAUGHT"
    status_code = 500

    def to_envelope(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": str(self)}


class TokenError(ProxyError):
    """The client-credentials grant did not succeed."""

    kind = "TOKEN_ERROR"

    def __init__(self, upstream_status: int, body: str):
        super().__init__(f"Token request failed with HTTP {upstream_status}: {body}")
        self.upstream_status = upstream_status
        self.body = body

    def to_envelope(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.body}


class ApiError(ProxyError):
    """The flight offers search returned a non-success status."""

    kind = "API_ERROR"

    def __init__(self, status: int, detail: Any):
        super().__init__(f"Amadeus search failed with HTTP {status}")
        self.status_code = status
        self.detail = detail

    def to_envelope(self) -> Dict[str, Any]:
        return {"error": self.kind, "status": self.status_code, "detail": self.detail}


class UncaughtError(ProxyError):
    """Malformed input or any unexpected internal failure."""

    kind = "UNCAUGHT"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    @classmethod
    def from_exception(cls, exc: BaseException) -> "UncaughtError":
        return cls(str(exc) or type(exc).__name__)

    def to_envelope(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.detail}
