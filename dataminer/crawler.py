"""Multi-threaded same-site web crawler that saves every page it downloads."""

from __future__ import annotations

import sys
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from dataminer.downloader import DownloadError, download
from dataminer.link_parser import extract_links
from dataminer.utils import create_output_directory, create_safe_filename, extract_base_domain

_IDLE_WAIT = 0.1


@dataclass
class CrawlOptions:
    """Crawl settings; ``max_pages`` of None means no limit."""

    max_pages: int | None = None
    output_dir: str = "output"
    concurrent_threads: int = 5


class WebCrawler:
    """Crawls pages on the start URL's site, breadth first, with worker threads."""

    def __init__(self, start_url: str, options: CrawlOptions | None = None) -> None:
        self.start_url = start_url
        self.options = options or CrawlOptions()
        self.base_domain = extract_base_domain(start_url)
        print(f"Base domain: {self.base_domain}")
        self._queue: deque[str] = deque([start_url])
        self._visited: set[str] = {start_url}
        self._cond = threading.Condition()
        self._active = 0
        self._downloaded = 0
        self._stop = False

    @property
    def visited(self) -> frozenset[str]:
        """Every URL queued so far, including the start URL."""
        with self._cond:
            return frozenset(self._visited)

    @property
    def pages_downloaded(self) -> int:
        return self._downloaded

    def crawl(self) -> int:
        """Run the crawl to completion and return the number of pages saved."""
        create_output_directory(self.options.output_dir)
        threads = self.options.concurrent_threads
        if threads > 0:
            with ThreadPoolExecutor(max_workers=threads) as pool:
                futures = [pool.submit(self._worker) for _ in range(threads)]
                for future in futures:
                    try:
                        future.result()
                    except Exception as exc:  # a failed worker must not end the crawl
                        print(f"Crawler worker failed: {exc}", file=sys.stderr)
        print(f"Crawled {self._downloaded} pages")
        return self._downloaded

    def _limit_reached(self) -> bool:
        limit = self.options.max_pages
        return limit is not None and self._downloaded >= limit

    def _next_url(self) -> str | None:
        with self._cond:
            while True:
                if self._stop or self._limit_reached():
                    self._stop = True
                    self._cond.notify_all()
                    return None
                if self._queue:
                    self._active += 1
                    return self._queue.popleft()
                if self._active == 0:
                    self._cond.notify_all()
                    return None
                self._cond.wait(timeout=_IDLE_WAIT)

    def _worker(self) -> None:
        while (url := self._next_url()) is not None:
            try:
                self._visit(url)
            finally:
                with self._cond:
                    self._active -= 1
                    self._cond.notify_all()

    def _visit(self, url: str) -> None:
        print(f"Downloading: {url}")
        try:
            html = download(url)
        except DownloadError as exc:
            print(exc, file=sys.stderr)
            html = ""
        if not html:
            print(f"Failed to download: {url}")
            return

        with self._cond:
            self._downloaded += 1
            current = self._downloaded

        path = Path(self.options.output_dir) / f"{create_safe_filename(url)}.html"
        path.write_text(html, encoding="utf-8")

        with self._cond:
            self._queue.extend(extract_links(html, self.base_domain, self._visited))
            limit = self.options.max_pages
            if limit is not None and current >= limit:
                self._stop = True
            self._cond.notify_all()