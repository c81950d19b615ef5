"""URL and file-name helpers."""

from __future__ import annotations

import re
from pathlib import Path

_DOMAIN_RE = re.compile(r"^(https?://[^/]+)")
_UNSAFE_RE = re.compile(r"[:/]+")


def extract_base_domain(url: str) -> str:
    """Return the scheme and host part of ``url``, or "" if it is not http(s)."""
    match = _DOMAIN_RE.search(url)
    return match.group(1) if match else ""


def create_safe_filename(url: str) -> str:
    """Replace every run of ':' and '/' in ``url`` with a single underscore."""
    return _UNSAFE_RE.sub("_", url)


def create_output_directory(directory: str | Path) -> Path:
    """Create ``directory`` and its parents if needed; raise OSError on failure."""
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_url(base_url: str, link: str) -> str:
    """Turn ``link`` found on a page under ``base_url`` into an absolute URL."""
    if not link:
        return ""
    if link.startswith(("http://", "https://")):
        return link
    if link.startswith("//"):
        scheme, sep, _ = base_url.partition(":")
        if sep:
            return f"{scheme}:{link}"
    if link.startswith("/"):
        return base_url + link
    prefix = base_url if base_url.endswith("/") else base_url + "/"
    return prefix + link