"""Structured JSON logging to stdout.

Low overhead, minimal dependencies, safe for production stdout collectors.
Credentials never reach the log line in full.
"""

from typing import Any, Dict
from datetime import datetime, timezone
import json

from app.obs.context import request_id_var, route_var

SECRET_FIELDS = frozenset({"access_token", "token", "client_secret", "authorization"})


def _redact_secret(value: Any) -> Any:
    s = str(value) if value is not None else ""
    if not s:
        return s
    if len(s) <= 8:
        return "***"
    return f"***{s[-4:]}"


def log_event(event: str, **fields: Any) -> None:
    now = datetime.now(timezone.utc).isoformat()
    payload: Dict[str, Any] = {
        "ts": now,
        "level": fields.pop("level", "INFO"),
        "event": event,
        "request_id": request_id_var.get(),
    }
    route = route_var.get()
    if route is not None:
        payload["route"] = route

    for k, v in fields.items():
        payload[k] = _redact_secret(v) if k.lower() in SECRET_FIELDS else v

    print(json.dumps(payload, separators=(",", ":"), default=str))
