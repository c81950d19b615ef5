# dataminer

Crawl a website and mine its pages. `dataminer` downloads pages from one
site with several worker threads and saves each page as an HTML file. It
then runs a content processor over the saved files. You can filter the
results with a text query and export them as JSON, CSV or an SQLite
database.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

Crawl a site and save its pages to `output/`:

```
dataminer --url https://example.com --max-pages 50
```

Process HTML files that were saved earlier:

```
dataminer --process ./output --processor-type text
```

Crawl first, then process the crawl output:

```
dataminer --both https://example.com --max-pages 50
```

Filter by a search term and export as CSV:

```
dataminer --process ./output --query "Wikipedia" --export csv --export-file results.csv
```

Options:

| Option | Meaning |
| --- | --- |
| `-u`, `--url URL` | start URL for crawling |
| `-p`, `--process DIR` | process the `.html` files in DIR |
| `-b`, `--both URL` | crawl, then process the crawl output directory |
| `-m`, `--max-pages N` | page limit (default: unlimited; `-1` also means unlimited) |
| `-o`, `--output DIR` | crawl output directory (default: `output`) |
| `-t`, `--concurrent-threads N` | download threads (default: 5) |
| `--processor-type TYPE` | `generic`, `text`, `metadata` or `links` |
| `-q`, `--query TERM` | keep only pages whose title or text contains TERM, ignoring case |
| `-e`, `--export FORMAT` | `json`, `csv` or `database` |
| `--export-file FILE` | export target (default: `processed_output.json`) |
| `-pt`, `--processing-threads N` | processing threads (default: 4; 0 processes in the calling thread) |
| `-h`, `--help` | show help |

Unknown arguments are ignored. A bare argument that starts with `http` is
taken as the URL when no URL has been given. The exit status is 0 on
success and 1 when the URL or input directory is missing, the output
directory cannot be created, or the export fails.

A simpler single-threaded crawler is also available. It takes one start URL
and saves every page it reaches on that URL's site into `./output`:

```
dataminer-scrape https://example.com
```

## Library use

```python
from dataminer.pipeline import ProcessingPipeline
from dataminer.query import TextSearchQuery

pipeline = ProcessingPipeline("output")
pipeline.add_processor("metadata")
results = pipeline.process_with_filter(TextSearchQuery("python"))
pipeline.export_to_json(results, "results.json")
```

Each processor returns a `dataminer.models.ProcessedData` record. The record
holds the URL, title, text content, raw HTML, keywords, links, images, a
metadata dictionary and the UTC time of processing.

- `dataminer.crawler.WebCrawler(start_url, CrawlOptions(...))`: `crawl()`
  downloads pages breadth first and returns the number of pages saved.
  It follows only http(s) links that start with the start URL's scheme and
  host.
- `dataminer.downloader.download(url, timeout=30)` fetches a page and
  raises `DownloadError` on failure.
- `dataminer.processors` holds the built-in processors:
  - `GenericProcessor` extracts the title, links, images, and the text of
    paragraphs and headings.
  - `TextProcessor` currently does the same as `GenericProcessor`.
  - `MetadataProcessor` extracts the title and `<meta>` name/property values.
  - `LinkProcessor` extracts link targets and image sources.
- `ProcessingPipeline.process_all_files()` processes the `.html` files in
  file-name order. The pipeline uses the first processor added with
  `add_processor`, or `generic` if none was added.
- `export_to_json`, `export_to_csv` and `export_to_database` return the
  number of records written and raise `OSError` or `sqlite3.Error` on
  failure. The database export runs in one transaction and rolls back on
  error. The CSV export cuts text and HTML to 1000 characters and leaves
  the keyword, link and image columns empty.

### Queries

`dataminer.query` has these queries:

- `TextSearchQuery`: substring search in the title or text. It ignores case unless told otherwise.
- `RegexQuery`: regular-expression search in the title or text. An invalid pattern raises `re.error`.
- `MetadataQuery`: an exact match on one metadata key.
- `AndQuery`: matches only when every query added with `add_query` matches.

### Plugins

A plugin is a callable that takes a `ProcessorRegistry` and registers
processors in it, or an object with such a `register_plugin` callable.
`dataminer.plugins.add_plugin` makes a plugin known under a group (it also
works as a decorator). `find_plugins` returns the plugins added to a group,
and `load_plugin` registers one of them or raises `PluginError`. A
`ProcessingPipeline` loads the plugins of its group, plus any passed to it
with `plugins=`. You can build your own processor with `PluginProcessor`:
add extractor functions with `add_extractor`, and each one fills in part of
the `ProcessedData` record.

The package includes a Wikipedia plugin, `dataminer.wikipedia`. It extracts
the article title, the main content up to sections such as "See also" or
"References", the categories, internal links, thumbnail images and infobox
fields. Infobox fields are stored as `infobox_<field>` metadata entries.

## Limitations

- The plugin registry lives in memory. No plugins are discovered from
  installed packages or from files. The Wikipedia plugin is not loaded by
  the `dataminer` command, so `--processor-type` accepts only the four
  built-in processors. In library code, pass
  `plugins=[dataminer.wikipedia]` to `ProcessingPipeline`.
- Downloads do not check TLS certificates and do not consult `robots.txt`.
- Processed pages get `file://` URLs built from their file paths, not the
  URLs they were downloaded from.