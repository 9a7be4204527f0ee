from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable
from urllib.parse import urlsplit

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST")
ALLOWED_HEADERS = ("Content-Type", "Authorization")


@dataclass(frozen=True)
class OriginPolicy:
    allowed_entries: tuple[str, ...]

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> OriginPolicy:
        return cls(allowed_entries=tuple(entries))


def _parse_origin(origin: str) -> tuple[str, str] | None:
    try:
        parts = urlsplit(origin)
        hostname = parts.hostname
        parts.port  # raises ValueError on a non-numeric port
    except ValueError:
        return None
    if not parts.scheme or not hostname:
        return None
    return hostname, parts.scheme.lower()


def _entry_hostname(entry: str) -> str | None:
    if "://" not in entry:
        return entry.strip().lower() or None
    parsed = _parse_origin(entry)
    return parsed[0] if parsed is not None else None


def _is_subdomain(hostname: str, allowed_hostname: str) -> bool:
    labels = hostname.split(".")
    allowed_labels = allowed_hostname.split(".")
    if len(labels) <= len(allowed_labels):
        return False
    return labels[-len(allowed_labels):] == allowed_labels


def authorize_origin(origin: str | None, policy: OriginPolicy) -> bool:
    if not origin:
        return True

    parsed = _parse_origin(origin)
    if parsed is None:
        return False
    hostname, scheme = parsed

    if origin in policy.allowed_entries:
        return True

    for entry in policy.allowed_entries:
        allowed_hostname = _entry_hostname(entry)
        if allowed_hostname is None:
            continue
        if hostname == allowed_hostname:
            return True
        # Only subdomain matches are held to https.
        if scheme == "https" and _is_subdomain(hostname, allowed_hostname):
            return True

    return False


class OriginGateMiddleware:
    """Reject HTTP requests from disallowed origins before routing."""

    def __init__(self, app: ASGIApp, policy: OriginPolicy) -> None:
        self.app = app
        self.policy = policy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            origin = Headers(scope=scope).get("origin")
            if not authorize_origin(origin, self.policy):
                logger.warning("Rejected request from origin %r to %s", origin, scope.get("path"))
                response = JSONResponse({"error": "Origin not allowed"}, status_code=403)
                await response(scope, receive, send)
                return

        await self.app(scope, receive, send)


class PolicyCORSMiddleware(CORSMiddleware):
    """CORS headers and preflight handling driven by :func:`authorize_origin`."""

    def __init__(self, app: ASGIApp, policy: OriginPolicy) -> None:
        super().__init__(
            app,
            allow_methods=ALLOWED_METHODS,
            allow_headers=ALLOWED_HEADERS,
        )
        self.policy = policy

    def is_allowed_origin(self, origin: str) -> bool:
        return authorize_origin(origin, self.policy)
