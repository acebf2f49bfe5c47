# /buddy/utils/request_utils.py
from typing import Optional

from fastapi import Request

# The browser client usually sits behind the same reverse proxy as the API, so
# the proxy's forwarded header identifies the caller for rate limiting.


def forwarded_for(request: Request) -> Optional[str]:
    """First hop of X-Forwarded-For, if the proxy sent one."""
    header = request.headers.get("x-forwarded-for", "")
    first = header.split(",")[0].strip()
    return first or None


def get_remote_address(request: Request) -> str:
    """
    Returns the caller's IP: the forwarded client address when present,
    else the socket peer, else loopback.
    """
    forwarded = forwarded_for(request)
    if forwarded:
        return forwarded
    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"
