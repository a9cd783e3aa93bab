"""HTTP download of release artifacts with bounded redirect following.

urllib follows redirects on its own; the opener built here refuses to, so
every hop passes through fetch_artifact's loop and is counted against the
redirect budget.
"""

from __future__ import annotations

import http.client
import os
import ssl
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urljoin, urlparse

from borecli import __version__
from borecli.core.errors import DownloadFailed, FilesystemError, TooManyRedirects
from borecli.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_MAX_REDIRECTS = 5
DEFAULT_TIMEOUT = 60.0
CHUNK_SIZE = 64 * 1024

# 301/302 are what GitHub release downloads answer with; the others carry
# the same meaning for a GET.
REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

ALLOWED_SCHEMES = frozenset({"http", "https"})

USER_AGENT = f"bore-cli/{__version__} (python-urllib)"

# (url, timeout) -> response object exposing .status, .headers, .read(n), .close()
Opener = Callable[[str, float], Any]


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Hand 3xx responses back to the caller instead of following them."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):  # noqa: D401
        return None


def _build_opener() -> urllib.request.OpenerDirector:
    return urllib.request.build_opener(
        _NoRedirectHandler(),
        urllib.request.HTTPSHandler(context=ssl.create_default_context()),
    )


def open_url(url: str, timeout: float) -> Any:
    """Issue a single GET without following redirects.

    Non-2xx answers are returned as the HTTPError response object rather than
    raised, so the caller can inspect status and headers uniformly.
    """
    request = urllib.request.Request(
        url,
        headers={"User-Agent": USER_AGENT, "Accept": "application/octet-stream"},
    )
    try:
        return _build_opener().open(request, timeout=timeout)  # nosec B310
    except urllib.error.HTTPError as e:
        return e


def _check_scheme(url: str) -> None:
    scheme = urlparse(url).scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise DownloadFailed(url, reason=f"unsupported URL scheme '{scheme or 'none'}'")


def _request(opener: Opener, url: str, timeout: float) -> Any:
    try:
        return opener(url, timeout)
    except urllib.error.URLError as e:
        raise DownloadFailed(url, reason=str(e.reason)) from e
    except (http.client.HTTPException, OSError, ValueError) as e:
        raise DownloadFailed(url, reason=str(e) or type(e).__name__) from e


def fetch_artifact(
    url: str,
    destination: Path,
    max_redirects: int = DEFAULT_MAX_REDIRECTS,
    timeout: float = DEFAULT_TIMEOUT,
    opener: Optional[Opener] = None,
) -> Path:
    """Download url to destination, following at most max_redirects redirects.

    The destination file is only created once a 200 response arrives, and it
    is created with mode 0o755.

    Args:
        url: Artifact URL.
        destination: File to stream the response body into.
        max_redirects: Number of redirect hops that may be followed.
        timeout: Socket timeout per request, in seconds.
        opener: Replacement for open_url, mainly for tests.

    Returns:
        destination.

    Raises:
        TooManyRedirects: If the redirect budget is exhausted.
        DownloadFailed: On a non-200 final status or a network error.
        FilesystemError: If the destination cannot be written.
    """
    if max_redirects < 0:
        raise ValueError("max_redirects must not be negative")

    open_fn = opener or open_url
    current = url
    redirects_followed = 0

    while True:
        _check_scheme(current)
        LOGGER.debug(f"GET {current}")
        response = _request(open_fn, current, timeout)
        try:
            status = response.status
            if status in REDIRECT_STATUSES:
                location = response.headers.get("Location")
                if not location:
                    raise DownloadFailed(current, status, "redirect without a Location header")
                if redirects_followed >= max_redirects:
                    raise TooManyRedirects(url, max_redirects)
                redirects_followed += 1
                current = urljoin(current, location)
                LOGGER.debug(f"Redirect {redirects_followed}/{max_redirects} ({status}) -> {current}")
                continue

            if status != 200:
                raise DownloadFailed(current, status)

            _stream_to_file(response, current, destination)
            return destination
        finally:
            response.close()


def _stream_to_file(response: Any, url: str, destination: Path) -> None:
    """Copy the response body into destination chunk by chunk.

    A partially written file is removed before the error propagates.
    """
    try:
        destination.unlink(missing_ok=True)
        fd = os.open(
            destination,
            os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, "O_BINARY", 0),
            0o755,
        )
    except OSError as e:
        raise FilesystemError(f"Cannot create {destination}: {e.strerror or e}") from e

    try:
        with os.fdopen(fd, "wb") as fh:
            while True:
                try:
                    chunk = response.read(CHUNK_SIZE)
                except (http.client.HTTPException, OSError) as e:
                    raise DownloadFailed(url, reason=f"connection lost: {e}") from e
                if not chunk:
                    break
                fh.write(chunk)
    except OSError as e:
        destination.unlink(missing_ok=True)
        raise FilesystemError(f"Cannot write {destination}: {e.strerror or e}") from e
    except BaseException:
        destination.unlink(missing_ok=True)
        raise
