"""Observability for the flight search proxy.

Request-scoped context, structured JSON logging, in-process metrics and the
ASGI middleware that ties them to every HTTP request.
"""

__all__ = [
    "middleware",
    "metrics",
    "logger",
    "context",
]
