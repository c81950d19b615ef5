"""Processor plugin for Wikipedia article pages."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from bs4 import BeautifulSoup, NavigableString, Tag

from dataminer.models import PluginProcessor, ProcessedData, ProcessorRegistry

WIKIPEDIA_ORIGIN = "https://en.wikipedia.org"

_TRIM_CHARS = " \t\n\r\f\v"
_HTML_WHITESPACE = " \t\n\f\r"
_HEADINGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
_SKIPPED_TAGS = frozenset({"script", "style"})
_CONTENT_TAGS = frozenset({"p", "li", "td", "div"})
_CATEGORY_PREFIX = "Category:"

STOP_HEADINGS = frozenset(
    {
        "see also",
        "references",
        "external links",
        "further reading",
        "bibliography",
        "notes",
        "sources",
        "gallery",
        "awards",
        "filmography",
        "discography",
        "works",
        "publications",
    }
)

_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&nbsp;", " "),
    ("&amp;", "&"),  # last, so "&amp;lt;" becomes "&lt;" and not "<"
)


def unescape_html(text: str) -> str:
    """Replace the common named HTML entities left in ``text``."""
    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)
    return text


def _parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html5lib")


def _is_text(node: object) -> bool:
    """True for a text node holding more than whitespace (not comments or CDATA)."""
    return type(node) is NavigableString and node.strip(_HTML_WHITESPACE) != ""


def _child_elements(node: Tag) -> list[Tag]:
    return [child for child in node.children if isinstance(child, Tag)]


def _walk(root: Tag) -> Iterator[Tag]:
    """Yield ``root`` and every element below it, depth first in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(_child_elements(node)))


def _find_first(root: Tag, predicate: Callable[[Tag], bool]) -> Tag | None:
    return next((element for element in _walk(root) if predicate(element)), None)


def _attr(element: Tag, name: str) -> str | None:
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _text_content(node: object) -> str:
    """Text below ``node``, child texts separated by a space; scripts and styles skipped."""
    if isinstance(node, Tag):
        if node.name in _SKIPPED_TAGS:
            return ""
        parts: list[str] = []
        for index, child in enumerate(node.children):
            text = _text_content(child)
            if index and text:
                parts.append(" ")
            parts.append(text)
        return "".join(parts)
    if _is_text(node):
        return str(node)
    return ""


def _clean_text(node: Tag) -> str:
    return unescape_html(_text_content(node)).strip(_TRIM_CHARS)


def _has_id(value: str) -> Callable[[Tag], bool]:
    return lambda element: _attr(element, "id") == value


def _content_node(soup: BeautifulSoup) -> Tag | None:
    return _find_first(soup, _has_id("mw-content-text"))


def extract_title(html: str, data: ProcessedData) -> None:
    """Set the title from the element with id "firstHeading", if there is one."""
    heading = _find_first(_parse(html), _has_id("firstHeading"))
    if heading is not None:
        data.title = _clean_text(heading)


def extract_content(html: str, data: ProcessedData) -> None:
    """Collect paragraph, list, cell and div text of the article body.

    Extraction stops at the first heading that opens a trailing section such
    as "See also" or "References". Pieces are joined by newlines.
    """
    content = _content_node(_parse(html))
    if content is None:
        return
    pieces: list[str] = []
    for element in _walk(content):
        if element.name in _HEADINGS and _clean_text(element).lower() in STOP_HEADINGS:
            break
        if element.name in _CONTENT_TAGS:
            text = _clean_text(element)
            if text:
                pieces.append(text)
    data.text_content = "\n".join(pieces)


def extract_categories(html: str, data: ProcessedData) -> None:
    """Set the keywords to the sorted, unique category names linked from the page."""
    categories: set[str] = set()
    for element in _walk(_parse(html)):
        if element.name != "a":
            continue
        href = _attr(element, "href")
        title = _attr(element, "title")
        if href is None or title is None:
            continue
        if "/wiki/Category:" in href and title.startswith(_CATEGORY_PREFIX):
            category = unescape_html(title[len(_CATEGORY_PREFIX):]).strip(_TRIM_CHARS)
            if category:
                categories.add(category)
    data.keywords = sorted(categories)


def extract_internal_links(html: str, data: ProcessedData) -> None:
    """Set the links to the sorted, unique article links inside the article body."""
    links: set[str] = set()
    content = _content_node(_parse(html))
    if content is not None:
        for element in _walk(content):
            if element.name != "a":
                continue
            href = _attr(element, "href")
            if href is None or _attr(element, "title") is None:
                continue
            if not href.startswith("http") and "/wiki/" in href and ":" not in href:
                links.add(WIKIPEDIA_ORIGIN + href)
    data.links = sorted(links)


def extract_images(html: str, data: ProcessedData) -> None:
    """Set the images to the sorted, unique thumbnail sources inside the article body."""
    images: set[str] = set()
    content = _content_node(_parse(html))
    if content is not None:
        for element in _walk(content):
            if element.name != "img":
                continue
            src = _attr(element, "src")
            css_class = _attr(element, "class")
            if src is None or css_class is None or "thumbimage" not in css_class:
                continue
            images.add("https:" + src if src.startswith("//") else src)
    data.images = sorted(images)


def extract_infobox(html: str, data: ProcessedData) -> None:
    """Store each header/value row of the infobox as metadata "infobox_<header>"."""
    infobox = _find_first(
        _parse(html), lambda element: "infobox" in (_attr(element, "class") or "")
    )
    if infobox is None:
        return
    for row in _walk(infobox):
        if row.name != "tr":
            continue
        header: Tag | None = None
        value: Tag | None = None
        for cell in _child_elements(row):
            if cell.name == "th":
                header = cell
            elif cell.name == "td":
                value = cell
        if header is None or value is None:
            continue
        header_text = _clean_text(header)
        value_text = _clean_text(value)
        if header_text and value_text:
            data.metadata[f"infobox_{header_text}"] = value_text


def register_plugin(registry: ProcessorRegistry) -> None:
    """Register the "wikipedia" processor in ``registry``."""
    print("Registering Gumbo-based Wikipedia plugin...")
    processor = PluginProcessor("wikipedia")
    for extractor in (
        extract_title,
        extract_content,
        extract_categories,
        extract_internal_links,
        extract_images,
        extract_infobox,
    ):
        processor.add_extractor(extractor)
    registry.register("wikipedia", processor)


def plugin_name() -> str:
    return "Gumbo-based Wikipedia Processor Plugin"


def plugin_version() -> str:
    return "1.2.0"


def plugin_description() -> str:
    return (
        "A robust plugin for processing Wikipedia pages using Gumbo Parser, "
        "extracting title, content, categories, links, images, and infobox data."
    )