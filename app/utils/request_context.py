"""Network context extracted from inbound requests for audit purposes."""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

UNKNOWN = "unknown"
_MAX_USER_AGENT = 255


@dataclass(frozen=True)
class RequestContext:
    ip_address: str = UNKNOWN
    user_agent: str = UNKNOWN


def client_ip(request: Request) -> str:
    """Return the originating client address, honouring common proxy headers."""

    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        return first or UNKNOWN

    for header in ("x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            return value.strip()

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN


def user_agent(request: Request) -> str:
    value = request.headers.get("user-agent")
    if not value:
        return UNKNOWN
    return value[:_MAX_USER_AGENT]


def request_context(request: Request) -> RequestContext:
    """FastAPI dependency returning the caller's IP address and user agent."""

    return RequestContext(ip_address=client_ip(request), user_agent=user_agent(request))


__all__ = ["RequestContext", "UNKNOWN", "client_ip", "request_context", "user_agent"]
