"""A minimal single-threaded scraper that saves every page of one site."""

from __future__ import annotations

import re
import sys
from collections import deque
from collections.abc import Iterator, MutableSet
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from dataminer.downloader import DownloadError, download
from dataminer.utils import extract_base_domain

OUTPUT_DIR = "output"
TIMEOUT = 10
_UNSAFE_RE = re.compile(r"[:/]+")


def _elements_breadth_first(root: Tag) -> Iterator[Tag]:
    queue: deque[Tag] = deque([root])
    while queue:
        node = queue.popleft()
        yield node
        queue.extend(child for child in node.children if isinstance(child, Tag))


def extract_links(html: str, base_url: str, visited: MutableSet[str]) -> list[str]:
    """Return new links in ``html`` that start with ``base_url``, adding them to ``visited``.

    Links not starting with "http" are joined onto ``base_url``.
    """
    soup = BeautifulSoup(html, "html5lib")
    found: list[str] = []
    for element in _elements_breadth_first(soup):
        if element.name != "a":
            continue
        href = element.get("href")
        if not isinstance(href, str) or not href or href.startswith("#"):
            continue
        if not href.startswith("http"):
            href = base_url + href if href.startswith("/") else f"{base_url}/{href}"
        if href.startswith(base_url) and href not in visited:
            visited.add(href)
            found.append(href)
    return found


def main(argv: list[str] | None = None) -> int:
    """Scrape the site of the single URL argument into ./output."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: scraper <starting_url>", file=sys.stderr)
        return 1

    start_url = args[0]
    base_domain = extract_base_domain(start_url)
    queue: deque[str] = deque([start_url])
    visited: set[str] = {start_url}

    out_dir = Path(OUTPUT_DIR)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        print(f"Could not create output directory '{OUTPUT_DIR}': {exc}", file=sys.stderr)
        return 1

    while queue:
        url = queue.popleft()
        print(f"Downloading: {url}")
        try:
            html = download(url, timeout=TIMEOUT)
        except DownloadError as exc:
            print(f"Failed: {exc}", file=sys.stderr)
            continue
        if not html:
            continue
        (out_dir / f"{_UNSAFE_RE.sub('_', url)}.html").write_text(html, encoding="utf-8")
        queue.extend(extract_links(html, base_domain, visited))
    return 0


if __name__ == "__main__":
    sys.exit(main())