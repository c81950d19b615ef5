"""Fetching pages over HTTP."""

from __future__ import annotations

import warnings

import requests

USER_AGENT = "Mozilla/5.0 (WebCrawler/1.0)"
DEFAULT_TIMEOUT = 30

# Certificate checks are switched off on purpose; keep the log free of the warning.
warnings.filterwarnings("ignore", message="Unverified HTTPS request")


class DownloadError(Exception):
    """Raised when a page cannot be fetched."""


def download(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Fetch ``url``, following redirects, and return the body as text."""
    try:
        response = requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            allow_redirects=True,
            verify=False,
        )
    except requests.RequestException as exc:
        raise DownloadError(f"Failed to download {url}: {exc}") from exc
    content_type = response.headers.get("Content-Type", "").lower()
    encoding = response.encoding if "charset" in content_type and response.encoding else "utf-8"
    return response.content.decode(encoding, errors="replace")