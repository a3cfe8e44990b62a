from collections.abc import MutableMapping
from datetime import UTC, datetime
from ipaddress import ip_address
from math import ceil
from typing import Any
from urllib.parse import urlsplit

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute, Match, Route

LOCAL_HOST_NAMES = frozenset({"localhost", "localhost.localdomain"})


def host(request: Request) -> str:
    """Return the client IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return the current local time as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""
    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        is_api_route = type(route) is APIRoute
        is_route = type(route) is Route
        if is_api_route and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if is_route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary


def normalize_email(email: str) -> str:
    """Trim and lower-case an email address."""
    return email.strip().lower()


def blog_url(blog_host: str) -> str:
    """
    Build the absolute blog URL from the configured host.

    Args:
        blog_host: Host with optional port, e.g. ``"example.com"``

    Returns:
        str: ``http://`` URL without trailing slash
    """
    return f"http://{blog_host.strip()}".removesuffix("/")


def is_local_host(blog_host: str) -> bool:
    """
    Check whether a blog host points at the local machine.

    Accepts ``host``, ``host:port`` and bracketed IPv6 forms.

    Examples:
        >>> is_local_host("localhost:8080")
        True
        >>> is_local_host("example.com")
        False
    """
    candidate = blog_host.strip().lower()
    if "://" not in candidate:
        candidate = f"//{candidate}"
    try:
        hostname = urlsplit(candidate).hostname
    except ValueError:
        return False
    if not hostname:
        return False
    if hostname in LOCAL_HOST_NAMES or hostname.endswith(".localhost"):
        return True
    try:
        return ip_address(hostname).is_loopback
    except ValueError:
        return False


def format_lastmod(moment: datetime) -> str:
    """
    Format a timestamp for a sitemap ``lastmod`` element.

    Naive timestamps are treated as UTC.

    Examples:
        >>> format_lastmod(datetime(2013, 1, 18, 10, 0, tzinfo=UTC))
        '2013-01-18T10:00:00.000+00:00'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.isoformat(timespec="milliseconds")


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` records."""
    return ceil(total / page_size) if page_size > 0 else 0


def paginate(current_page: int, page_count: int, window_size: int) -> list[int]:
    """
    Compute the page numbers shown in a pagination window.

    The window is centered on the current page and clamped to ``1..page_count``.

    Examples:
        >>> paginate(1, 3, 20)
        [1, 2, 3]
        >>> paginate(10, 50, 5)
        [9, 10, 11, 12, 13]
    """
    if page_count < window_size:
        return list(range(1, page_count + 1))

    first = current_page + 1 - window_size // 2
    first = max(first, 1)
    if first + window_size > page_count:
        first = page_count - window_size + 1
    return [first + i for i in range(window_size)]
