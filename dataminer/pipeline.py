"""Runs a content processor over saved HTML files and exports the results."""

from __future__ import annotations

import csv
import json
import sqlite3
import sys
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from dataminer.models import ProcessedData, ProcessorRegistry
from dataminer.plugins import PLUGIN_GROUP, PluginError, find_plugins, load_plugin
from dataminer.processors import (
    GenericProcessor,
    LinkProcessor,
    MetadataProcessor,
    TextProcessor,
)
from dataminer.query import DataQuery

DEFAULT_PROCESSOR = "generic"
CSV_HEADER = "URL,Title,Text Content,HTML Content,Keywords,Links,Images\n"
CSV_CONTENT_LIMIT = 1000

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS pages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        url TEXT UNIQUE NOT NULL,
        title TEXT,
        text_content TEXT,
        html_content TEXT,
        processed_time TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS keywords (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        page_id INTEGER NOT NULL,
        keyword TEXT NOT NULL,
        FOREIGN KEY (page_id) REFERENCES pages (id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS links (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        page_id INTEGER NOT NULL,
        link TEXT NOT NULL,
        FOREIGN KEY (page_id) REFERENCES pages (id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS images (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        page_id INTEGER NOT NULL,
        image_url TEXT NOT NULL,
        FOREIGN KEY (page_id) REFERENCES pages (id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS metadata (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        page_id INTEGER NOT NULL,
        key TEXT NOT NULL,
        value TEXT NOT NULL,
        FOREIGN KEY (page_id) REFERENCES pages (id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_pages_url ON pages(url)",
    "CREATE INDEX IF NOT EXISTS idx_keywords_page_id ON keywords(page_id)",
    "CREATE INDEX IF NOT EXISTS idx_links_page_id ON links(page_id)",
    "CREATE INDEX IF NOT EXISTS idx_images_page_id ON images(page_id)",
    "CREATE INDEX IF NOT EXISTS idx_metadata_page_id ON metadata(page_id)",
    "CREATE INDEX IF NOT EXISTS idx_keywords_keyword ON keywords(keyword)",
    "CREATE INDEX IF NOT EXISTS idx_links_link ON links(link)",
)

_INSERT_PAGE = (
    "INSERT OR REPLACE INTO pages (url, title, text_content, html_content, processed_time) "
    "VALUES (?, ?, ?, ?, ?)"
)
_INSERT_KEYWORD = "INSERT INTO keywords (page_id, keyword) VALUES (?, ?)"
_INSERT_LINK = "INSERT INTO links (page_id, link) VALUES (?, ?)"
_INSERT_IMAGE = "INSERT INTO images (page_id, image_url) VALUES (?, ?)"
_INSERT_METADATA = "INSERT INTO metadata (page_id, key, value) VALUES (?, ?, ?)"


def _timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _to_json(item: ProcessedData) -> dict[str, Any]:
    return {
        "url": item.url,
        "title": item.title,
        "text_content": item.text_content,
        "html_content": item.html_content,
        "keywords": list(item.keywords),
        "links": list(item.links),
        "images": list(item.images),
        "metadata": dict(item.metadata),
    }


class ProcessingPipeline:
    """Processes every .html file of a directory with a registered processor."""

    def __init__(
        self,
        input_dir: str | Path,
        plugin_group: str = PLUGIN_GROUP,
        threads: int = 4,
        plugins: Iterable[Any] = (),
    ) -> None:
        self.input_directory = Path(input_dir)
        self.plugin_group = plugin_group
        self.threads = threads
        self.output_format = "json"
        self.processor_chain: list[str] = []
        self._extra_plugins = list(plugins)

        self.registry = ProcessorRegistry()
        for processor in (GenericProcessor(), TextProcessor(), MetadataProcessor(), LinkProcessor()):
            self.registry.register(processor.name, processor)

        self.load_plugins()

        if self.threads > 0:
            print(f"Initialized thread pool with {self.threads} threads.")
        else:
            print("Processing will run synchronously (0 threads specified).")

    def add_processor(self, processor_name: str) -> None:
        """Append a processor name to the chain; the first one is used."""
        self.processor_chain.append(processor_name)

    def load_plugins(self) -> int:
        """Load the installed plugins and those given at construction; return how many loaded."""
        print(f"Searching for plugins in entry point group: {self.plugin_group}")
        loaded = 0
        for plugin in [*find_plugins(self.plugin_group), *self._extra_plugins]:
            try:
                load_plugin(plugin, self.registry)
            except PluginError as exc:
                print(exc, file=sys.stderr)
                print(f"Failed to load plugin: {plugin}", file=sys.stderr)
            else:
                loaded += 1
        return loaded

    def _html_files(self) -> list[Path]:
        return sorted(
            path
            for path in self.input_directory.iterdir()
            if path.suffix == ".html" and path.is_file()
        )

    def process_all_files(self) -> list[ProcessedData]:
        """Process every .html file of the input directory, in file-name order."""
        if not self.input_directory.exists():
            print(f"Input directory does not exist: {self.input_directory}", file=sys.stderr)
            return []

        files = self._html_files()
        if not files:
            print(f"No html files found in directory: {self.input_directory}")
            return []
        print(f"Found {len(files)} HTML files to process.")

        results: list[ProcessedData] = []
        if self.threads > 0:
            print(f"Processing files concurrently using {self.threads} threads...")
            with ThreadPoolExecutor(max_workers=self.threads) as pool:
                futures = [pool.submit(self.process_single_file, path) for path in files]
                for future in futures:
                    try:
                        result = future.result()
                    except Exception as exc:  # one bad file must not end the run
                        print(f"Exception occurred during file processing: {exc}", file=sys.stderr)
                        continue
                    if result is not None:
                        results.append(result)
        else:
            print("Processing files synchronously...")
            for path in files:
                result = self.process_single_file(path)
                if result is not None:
                    results.append(result)
        return results

    def process_with_filter(self, query: DataQuery) -> list[ProcessedData]:
        """Process all files and keep the records that ``query`` matches."""
        all_data = self.process_all_files()
        filtered = [item for item in all_data if query.matches(item)]
        print(
            f"Filtering complete: {len(filtered)} out of {len(all_data)} "
            "files matched the query."
        )
        return filtered

    def process_single_file(self, path: str | Path) -> ProcessedData | None:
        """Process one .html file; return None if it is skipped or cannot be processed."""
        path = Path(path)
        if path.suffix != ".html":
            return None
        try:
            content = path.read_bytes().decode("utf-8", errors="replace")
        except OSError as exc:
            print(f"Failed to open file for processing: {path}: {exc}", file=sys.stderr)
            return None

        processor_name = self.processor_chain[0] if self.processor_chain else DEFAULT_PROCESSOR
        processor = self.registry.get(processor_name)
        if processor is None:
            print(f"Processor not found: {processor_name}", file=sys.stderr)
            return None
        return processor.process(f"file://{path}", content)

    def export_to_database(self, data: Sequence[ProcessedData], db_path: str | Path) -> int:
        """Write ``data`` into an SQLite database in one transaction; return pages written.

        On any database error the transaction is rolled back and the error raised.
        """
        connection = sqlite3.connect(str(db_path), isolation_level=None)
        try:
            print(f"Successfully opened/created database: {db_path}")
            connection.execute("BEGIN")
            for statement in _SCHEMA:
                connection.execute(statement)
            pages = 0
            for item in data:
                cursor = connection.execute(
                    _INSERT_PAGE,
                    (
                        item.url,
                        item.title,
                        item.text_content,
                        item.html_content,
                        _timestamp(item.processed_time),
                    ),
                )
                page_id = cursor.lastrowid
                pages += 1
                connection.executemany(_INSERT_KEYWORD, ((page_id, k) for k in item.keywords))
                connection.executemany(_INSERT_LINK, ((page_id, link) for link in item.links))
                connection.executemany(_INSERT_IMAGE, ((page_id, img) for img in item.images))
                connection.executemany(
                    _INSERT_METADATA,
                    ((page_id, key, value) for key, value in item.metadata.items()),
                )
            connection.execute("COMMIT")
        except sqlite3.Error as exc:
            if connection.in_transaction:
                connection.execute("ROLLBACK")
            print(f"Export to database failed: {exc}", file=sys.stderr)
            raise
        finally:
            connection.close()
        print(f"Successfully exported {pages} pages (and related data) to database: {db_path}")
        return pages

    def export_to_json(self, data: Sequence[ProcessedData], filename: str | Path) -> int:
        """Write ``data`` as an indented JSON array; return the number of records."""
        records = [_to_json(item) for item in data]
        with open(filename, "w", encoding="utf-8") as handle:
            json.dump(records, handle, indent=2, sort_keys=True, ensure_ascii=False)
        print(f"Successfully exported {len(records)} records to JSON: {filename}")
        return len(records)

    def export_to_csv(self, data: Sequence[ProcessedData], filename: str | Path) -> int:
        """Write ``data`` as CSV with every field quoted; return the number of records.

        Text and HTML content are cut to their first 1000 characters; the
        keyword, link and image columns are left empty.
        """
        with open(filename, "w", encoding="utf-8", newline="") as handle:
            handle.write(CSV_HEADER)
            writer = csv.writer(handle, quoting=csv.QUOTE_ALL, lineterminator="\n")
            for item in data:
                writer.writerow(
                    [
                        item.url,
                        item.title,
                        item.text_content[:CSV_CONTENT_LIMIT],
                        item.html_content[:CSV_CONTENT_LIMIT],
                        "",
                        "",
                        "",
                    ]
                )
        print(f"Successfully exported {len(data)} records to CSV: {filename}")
        return len(data)