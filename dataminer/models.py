"""Processed page records, content processors and the registry that holds them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ProcessedData:
    """Everything extracted from one HTML page."""

    url: str = ""
    title: str = ""
    text_content: str = ""
    html_content: str = ""
    keywords: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)
    processed_time: datetime = field(default_factory=_now)


class ContentProcessor(ABC):
    """Turns the HTML of a page into a ProcessedData record."""

    name: str = ""

    @abstractmethod
    def process(self, url: str, html_content: str) -> ProcessedData:
        """Extract data from ``html_content`` fetched from ``url``."""


class ProcessorRegistry:
    """Maps processor names to processor instances."""

    def __init__(self) -> None:
        self._processors: dict[str, ContentProcessor] = {}

    def register(self, name: str, processor: ContentProcessor) -> None:
        """Register ``processor`` under ``name``, replacing any earlier one."""
        self._processors[name] = processor

    def get(self, name: str) -> ContentProcessor | None:
        """Return the processor registered under ``name``, or None."""
        return self._processors.get(name)

    def available(self) -> list[str]:
        """Return the names of all registered processors."""
        return list(self._processors)

    def __contains__(self, name: object) -> bool:
        return name in self._processors

    def __len__(self) -> int:
        return len(self._processors)

    def __iter__(self) -> Iterator[str]:
        return iter(self._processors)


Extractor = Callable[[str, ProcessedData], None]


class PluginProcessor(ContentProcessor):
    """A processor assembled from extractor callables run in order."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._extractors: list[Extractor] = []

    def add_extractor(self, extractor: Extractor) -> None:
        """Append an extractor; it receives the HTML and the record to fill in."""
        self._extractors.append(extractor)

    def process(self, url: str, html_content: str) -> ProcessedData:
        data = ProcessedData(url=url, html_content=html_content, processed_time=_now())
        for extractor in self._extractors:
            extractor(html_content, data)
        return data