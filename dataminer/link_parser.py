"""Extracting followable links from HTML."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, MutableSet

from bs4 import BeautifulSoup, Tag

from dataminer.utils import resolve_url


def _elements_breadth_first(root: Tag) -> Iterator[Tag]:
    queue: deque[Tag] = deque([root])
    while queue:
        node = queue.popleft()
        yield node
        queue.extend(child for child in node.children if isinstance(child, Tag))


def extract_links(html: str, base_url: str, visited: MutableSet[str]) -> list[str]:
    """Return new same-site http(s) links in ``html``, adding them to ``visited``.

    Elements are walked breadth first; links are resolved against ``base_url``
    and kept only when they start with it and were not seen before.
    """
    soup = BeautifulSoup(html, "html5lib")
    found: list[str] = []
    for element in _elements_breadth_first(soup):
        if element.name != "a":
            continue
        href = element.get("href")
        if not isinstance(href, str) or not href or href.startswith("#"):
            continue
        absolute = resolve_url(base_url, href)
        if not absolute.startswith(("http://", "https://")):
            continue
        if absolute.startswith(base_url) and absolute not in visited:
            visited.add(absolute)
            found.append(absolute)
    return found