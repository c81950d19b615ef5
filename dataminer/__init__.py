"""Multi-threaded same-site web crawler with pluggable HTML content processors and export."""

__version__ = "1.0.0"