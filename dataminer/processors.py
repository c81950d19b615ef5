"""Built-in content processors: generic, text, metadata and link extraction."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from bs4 import BeautifulSoup, NavigableString, Tag

from dataminer.models import ContentProcessor, ProcessedData

_HEADINGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
_TEXT_TAGS = _HEADINGS | {"p"}
_HTML_WHITESPACE = " \t\n\f\r"


def _parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html5lib")


def _elements_breadth_first(root: Tag) -> Iterator[Tag]:
    queue: deque[Tag] = deque([root])
    while queue:
        node = queue.popleft()
        yield node
        queue.extend(child for child in node.children if isinstance(child, Tag))


def _is_text(node: object) -> bool:
    """True for a text node holding more than whitespace (not comments or CDATA)."""
    return type(node) is NavigableString and node.strip(_HTML_WHITESPACE) != ""


def _attr(element: Tag, name: str) -> str | None:
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _title_text(element: Tag) -> str | None:
    """The first child of a <title> element, when that child is text."""
    if element.contents and _is_text(element.contents[0]):
        return str(element.contents[0])
    return None


class GenericProcessor(ContentProcessor):
    """Extracts the title, links, images and paragraph/heading text of a page."""

    name = "generic"

    def process(self, url: str, html_content: str) -> ProcessedData:
        data = ProcessedData(url=url, html_content=html_content)
        text_parts: list[str] = []
        for element in _elements_breadth_first(_parse(html_content)):
            tag = element.name
            if tag == "title":
                title = _title_text(element)
                if title is not None:
                    data.title = title
            elif tag == "a":
                href = _attr(element, "href")
                if href is not None:
                    data.links.append(href)
            elif tag == "img":
                src = _attr(element, "src")
                if src is not None:
                    data.images.append(src)
            elif tag in _TEXT_TAGS:
                text_parts.extend(
                    f"{child} " for child in element.children if _is_text(child)
                )
        data.text_content = "".join(text_parts)
        return data


class TextProcessor(ContentProcessor):
    """Text-focused processing; currently extracts what the generic processor does."""

    name = "text"

    def process(self, url: str, html_content: str) -> ProcessedData:
        return GenericProcessor().process(url, html_content)


class MetadataProcessor(ContentProcessor):
    """Extracts the title and <meta> name/property values of a page."""

    name = "metadata"

    def process(self, url: str, html_content: str) -> ProcessedData:
        data = ProcessedData(url=url)
        for element in _elements_breadth_first(_parse(html_content)):
            if element.name == "meta":
                content = _attr(element, "content")
                if content is None:
                    continue
                meta_name = _attr(element, "name")
                if meta_name is not None:
                    data.metadata[meta_name] = content
                prop = _attr(element, "property")
                if prop is not None:
                    data.metadata[prop] = content
            elif element.name == "title":
                title = _title_text(element)
                if title is not None:
                    data.title = title
        return data


class LinkProcessor(ContentProcessor):
    """Extracts the link targets and image sources of a page."""

    name = "links"

    def process(self, url: str, html_content: str) -> ProcessedData:
        data = ProcessedData(url=url)
        for element in _elements_breadth_first(_parse(html_content)):
            if element.name == "a":
                href = _attr(element, "href")
                if href is not None:
                    data.links.append(href)
            elif element.name == "img":
                src = _attr(element, "src")
                if src is not None:
                    data.images.append(src)
        return data