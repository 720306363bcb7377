import uuid
from typing import Dict, Optional

from feedrelay.config import get_settings


class SecurityError(Exception):
    """Raised when a request fails security validation."""


class OriginNotAllowed(SecurityError):
    pass


def header(headers: Dict[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup; gateways differ on casing."""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def extract_correlation_id(headers: Dict[str, str]) -> str:
    return header(headers, "x-correlation-id") or str(uuid.uuid4())


def validate_origin(headers: Dict[str, str]) -> Optional[str]:
    """Return the request origin when the reader app may call us."""
    origin = header(headers, "origin")
    allowed = get_settings().allowed_origins
    if not allowed or origin is None or origin in allowed:
        return origin
    raise OriginNotAllowed(f"origin {origin} is not allowed")


def build_cors_headers(origin: Optional[str]) -> Dict[str, str]:
    allowed = get_settings().allowed_origins
    allow_origin = origin or (allowed[0] if allowed else None)
    headers = {
        "Access-Control-Allow-Headers": "Content-Type,X-Correlation-Id",
        "Access-Control-Allow-Methods": "OPTIONS,GET,POST",
        "Vary": "Origin",
    }
    if allow_origin:
        headers["Access-Control-Allow-Origin"] = allow_origin
    return headers
