"""Thin ``requests`` wrapper that turns failures into typed ``NetworkError``s.

Every outbound HTTP call in the pipeline (feed, article, trending lookup,
gateway backend, webhook) goes through :func:`http_get` / :func:`http_post`
so callers can decide per call site whether a failure is worth degrading
around or should surface.
"""

from typing import Any, Dict, Optional

import requests

from market_reaction.core.errors import ErrorKind, NetworkError

TRANSIENT_STATUS = frozenset({408, 425, 429, 500, 502, 503, 504})

# Chrome-on-desktop header set; plain python-requests user agents get the
# consent/denial page from most publishers.
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "max-age=0",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
}


def classify_exception(exc: BaseException) -> ErrorKind:
    """Map a low-level failure onto TRANSIENT or FATAL."""
    if isinstance(exc, NetworkError):
        return exc.kind
    if isinstance(exc, requests.exceptions.SSLError):
        return ErrorKind.FATAL
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return ErrorKind.TRANSIENT
    if isinstance(exc, (ConnectionResetError, ConnectionAbortedError, BrokenPipeError, TimeoutError)):
        return ErrorKind.TRANSIENT
    return ErrorKind.FATAL


def proxies_for(proxy_url: Optional[str]) -> Optional[Dict[str, str]]:
    """Build a ``requests`` proxies mapping, or None for a direct connection."""
    if not proxy_url:
        return None
    return {"http": proxy_url, "https": proxy_url}


def _check_status(resp: requests.Response, url: str) -> None:
    if resp.status_code < 400:
        return
    kind = ErrorKind.TRANSIENT if resp.status_code in TRANSIENT_STATUS else ErrorKind.FATAL
    raise NetworkError(
        f"HTTP {resp.status_code} from {url}: {resp.text[:200]}",
        kind=kind,
        url=url,
        status_code=resp.status_code,
    )


def http_get(
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    proxy_url: Optional[str] = None,
    timeout: float = 15.0,
) -> requests.Response:
    """GET ``url`` and return the response.

    Raises:
        NetworkError: on transport failure or an HTTP status >= 400.
    """
    try:
        resp = requests.get(
            url,
            params=params,
            headers=headers,
            proxies=proxies_for(proxy_url),
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise NetworkError(str(exc), kind=classify_exception(exc), url=url) from exc
    _check_status(resp, url)
    return resp


def http_post(
    url: str,
    *,
    json: Any = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 15.0,
) -> requests.Response:
    """POST a JSON body to ``url`` and return the response.

    Raises:
        NetworkError: on transport failure or an HTTP status >= 400.
    """
    try:
        resp = requests.post(url, json=json, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        raise NetworkError(str(exc), kind=classify_exception(exc), url=url) from exc
    _check_status(resp, url)
    return resp
