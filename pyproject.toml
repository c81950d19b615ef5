[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dataminer"
version = "1.0.0"
description = "Multi-threaded same-site web crawler with pluggable HTML content processors, query filtering and JSON/CSV/SQLite export"
requires-python = ">=3.10"
keywords = ["crawler", "scraper", "html", "extraction", "sqlite", "wikipedia"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Indexing/Search",
    "Topic :: Text Processing :: Markup :: HTML",
]
dependencies = [
    "requests>=2.28",
    "beautifulsoup4[html5lib]>=4.11",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
dataminer = "dataminer.cli:main"
dataminer-scrape = "dataminer.scraper:main"

[tool.hatch.build.targets.wheel]
packages = ["dataminer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
