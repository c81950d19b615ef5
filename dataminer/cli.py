"""Command line entry point: crawl a site, process saved pages, or both."""

from __future__ import annotations

import re
import sqlite3
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dataminer.crawler import CrawlOptions, WebCrawler
from dataminer.pipeline import ProcessingPipeline
from dataminer.query import TextSearchQuery

PROGRAM_NAME = "dataminer"
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


class Mode(str, Enum):
    """What the command does."""

    CRAWL = "crawl"
    PROCESS = "process"
    BOTH = "both"


@dataclass
class CliOptions:
    """Settings gathered from the command line; ``max_pages`` of None means no limit."""

    url: str = ""
    max_pages: int | None = None
    output_dir: str = "output"
    concurrent_threads: int = 5

    input_dir: str = ""
    mode: Mode = Mode.CRAWL
    processor_type: str = "generic"
    search_query: str = ""
    export_format: str = "json"
    export_file: str = "processed_output.json"
    processing_threads: int = 4

    help: bool = False


def _to_int(text: str) -> int:
    """Read the leading integer of ``text`` the lenient way; 0 if there is none."""
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _page_limit(text: str) -> int | None:
    value = _to_int(text)
    return None if value == -1 else value


def parse_arguments(argv: Sequence[str]) -> CliOptions:
    """Build options from ``argv`` (the arguments after the program name).

    Unknown arguments are ignored; an option missing its value is ignored too.
    """
    options = CliOptions()
    args = list(argv)
    index = 0

    def has_value() -> bool:
        return index + 1 < len(args)

    def take_value() -> str:
        nonlocal index
        index += 1
        return args[index]

    while index < len(args):
        arg = args[index]
        if arg in ("--help", "-h"):
            options.help = True
        elif arg in ("--url", "-u"):
            if has_value():
                options.url = take_value()
        elif arg in ("--max-pages", "-m"):
            if has_value():
                options.max_pages = _page_limit(take_value())
        elif arg in ("--output", "-o"):
            if has_value():
                options.output_dir = take_value()
        elif arg in ("--concurrent-threads", "-t"):
            if has_value():
                options.concurrent_threads = _to_int(take_value())
        elif arg in ("--process", "-p"):
            options.mode = Mode.PROCESS
            if has_value() and not args[index + 1].startswith("-"):
                options.input_dir = take_value()
        elif arg in ("--both", "-b"):
            options.mode = Mode.BOTH
            if has_value() and not args[index + 1].startswith("-"):
                options.url = take_value()
        elif arg == "--processor-type":
            if has_value():
                options.processor_type = take_value()
        elif arg in ("--query", "-q"):
            if has_value():
                options.search_query = take_value()
        elif arg in ("--export", "-e"):
            if has_value():
                options.export_format = take_value()
        elif arg == "--export-file":
            if has_value():
                options.export_file = take_value()
        elif arg in ("--processing-threads", "-pt"):
            if has_value():
                options.processing_threads = _to_int(take_value())
        elif not options.url and arg.startswith("http"):
            options.url = arg
        index += 1

    return options


def print_help(program_name: str = PROGRAM_NAME) -> None:
    """Print usage, options and examples."""
    print(
        f"Usage: {program_name} [MODE] [OPTIONS]\n"
        "\nModes:\n"
        "  --url URL, -u URL      Crawl mode - start crawling from URL\n"
        "  --process DIR, -p DIR  Process mode - process HTML files in directory\n"
        "  --both URL, -b URL     Both mode - crawl then process\n"
        "\nCrawler Options:\n"
        "  -m, --max-pages N      Maximum number of pages to crawl (default: unlimited)\n"
        "  -o, --output DIR       Output directory for crawled files (default: output)\n"
        "  -t, --concurrent-threads N  Number of concurrent threads (default: 5)\n"
        "\nProcessor Options:\n"
        "  --processor-type TYPE  Processor type (generic, text, metadata, links)\n"
        "  -q, --query TERM       Search query for filtering\n"
        "  -e, --export FORMAT    Export format (json, csv, database)\n"
        "  --export-file FILE     Output file name (default: processed_output.json)\n"
        "  -pt, --processing-threads N  Number of threads for processing (default: 4)\n"
        "\nGeneral Options:\n"
        "  -h, --help             Show this help message\n"
        "\nExamples:\n"
        f"  {program_name} --url https://example.com\n"
        f"  {program_name} --process ./output --processor-type text\n"
        f"  {program_name} --both https://example.com --max-pages 50\n"
        f'  {program_name} --process ./output --query "Wikipedia" '
        "--export csv --export-file results.csv",
    )


def _crawl(options: CliOptions) -> None:
    limit = "unlimited" if options.max_pages is None else str(options.max_pages)
    print("=== CRAWLING MODE ===")
    print("Starting crawl with options:")
    print(f"  URL: {options.url}")
    print(f"  Max pages: {limit}")
    print(f"  Output dir: {options.output_dir}")
    print(f"  Concurrent threads: {options.concurrent_threads}")
    crawler = WebCrawler(
        options.url,
        CrawlOptions(
            max_pages=options.max_pages,
            output_dir=options.output_dir,
            concurrent_threads=options.concurrent_threads,
        ),
    )
    crawler.crawl()


def _process(options: CliOptions, process_dir: str) -> int:
    print("=== PROCESSING MODE ===")
    print(f"Processing files in: {process_dir}")
    print(f"Processor type: {options.processor_type}")
    if options.search_query:
        print(f"Search query: {options.search_query}")
    print(f"Export format: {options.export_format}")
    print(f"Export file: {options.export_file}")

    pipeline = ProcessingPipeline(process_dir, threads=options.processing_threads)
    pipeline.add_processor(options.processor_type)
    pipeline.output_format = options.export_format

    if options.search_query:
        processed = pipeline.process_with_filter(TextSearchQuery(options.search_query))
    else:
        processed = pipeline.process_all_files()
    print(f"Processed {len(processed)} files")

    exporters = {
        "database": (pipeline.export_to_database, "processed_data.db", "database"),
        "json": (pipeline.export_to_json, "processed_output.json", "JSON"),
        "csv": (pipeline.export_to_csv, "processed_output.csv", "CSV"),
    }
    exporter = exporters.get(options.export_format)
    if exporter is None:
        return 0
    export, default_file, label = exporter
    target = options.export_file or default_file
    try:
        export(processed, target)
    except (OSError, sqlite3.Error) as exc:
        print(f"Failed to export to {label}: {exc}", file=sys.stderr)
        return 1
    print(f"Results exported to {label}: {target}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command; return the process exit status."""
    if argv is None:
        program_name = Path(sys.argv[0]).name or PROGRAM_NAME
        args: Sequence[str] = sys.argv[1:]
    else:
        program_name = PROGRAM_NAME
        args = argv
    options = parse_arguments(args)

    if options.help:
        print_help(program_name)
        return 0

    if options.mode in (Mode.CRAWL, Mode.BOTH):
        if not options.url:
            print("Error: URL is required for crawl mode", file=sys.stderr)
            print_help(program_name)
            return 1
        try:
            _crawl(options)
        except OSError as exc:
            print(f"Failed to create output directory: {exc}", file=sys.stderr)
            return 1
        if options.mode is Mode.CRAWL:
            print(f"Crawling completed. Files saved to: {options.output_dir}")
            return 0

    process_dir = options.output_dir if options.mode is Mode.BOTH else options.input_dir
    if not process_dir:
        print("Error: Input directory is required for process mode", file=sys.stderr)
        print_help(program_name)
        return 1
    return _process(options, process_dir)


if __name__ == "__main__":
    sys.exit(main())