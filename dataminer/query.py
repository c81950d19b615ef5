"""Queries that select processed pages."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable

from dataminer.models import ProcessedData


class DataQuery(ABC):
    """A predicate over processed pages."""

    @abstractmethod
    def matches(self, data: ProcessedData) -> bool:
        """Return True if ``data`` is selected by this query."""


class TextSearchQuery(DataQuery):
    """Selects pages whose text or title contains a term."""

    def __init__(self, term: str, case_sensitive: bool = False) -> None:
        self.term = term
        self.case_sensitive = case_sensitive

    def matches(self, data: ProcessedData) -> bool:
        content, title, term = data.text_content, data.title, self.term
        if not self.case_sensitive:
            content, title, term = content.lower(), title.lower(), term.lower()
        return term in content or term in title


class RegexQuery(DataQuery):
    """Selects pages whose text or title matches a regular expression.

    An invalid pattern raises ``re.error`` when the query is built.
    """

    def __init__(self, pattern: str) -> None:
        self.pattern = re.compile(pattern)

    def matches(self, data: ProcessedData) -> bool:
        return bool(self.pattern.search(data.text_content) or self.pattern.search(data.title))


class MetadataQuery(DataQuery):
    """Selects pages whose metadata holds ``key`` with exactly ``value``."""

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value

    def matches(self, data: ProcessedData) -> bool:
        return data.metadata.get(self.key) == self.value


class AndQuery(DataQuery):
    """Selects pages matched by every sub-query; with none, selects all."""

    def __init__(self, queries: Iterable[DataQuery] = ()) -> None:
        self.queries: list[DataQuery] = list(queries)

    def add_query(self, query: DataQuery) -> None:
        """Append a sub-query."""
        self.queries.append(query)

    def matches(self, data: ProcessedData) -> bool:
        return all(query.matches(data) for query in self.queries)