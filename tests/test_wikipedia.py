import pytest

from dataminer.models import PluginProcessor, ProcessedData, ProcessorRegistry
from dataminer.wikipedia import (
    extract_categories,
    extract_content,
    extract_images,
    extract_infobox,
    extract_internal_links,
    extract_title,
    plugin_name,
    plugin_version,
    register_plugin,
    unescape_html,
)


def _page(body: str) -> str:
    return f"<html><head><title>t</title></head><body>{body}</body></html>"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("&quot;quoted&quot;", '"quoted"'),
        ("it&apos;s", "it's"),
        ("&lt;b&gt;", "<b>"),
        ("plain text", "plain text"),
        ("", ""),
    ],
)
def test_unescape_html(raw, expected):
    assert unescape_html(raw) == expected


def test_unescape_html_decodes_amp_last():
    assert unescape_html("&amp;quot;") == "&quot;"


def test_extract_title_trims_heading_text():
    data = ProcessedData()
    extract_title(_page('<h1 id="firstHeading">   Python   </h1>'), data)
    assert data.title == "Python"


def test_extract_title_unescapes_remaining_entities():
    data = ProcessedData()
    extract_title(_page('<h1 id="firstHeading">Tom &amp;amp; Jerry</h1>'), data)
    assert data.title == "Tom & Jerry"


def test_extract_title_without_heading_leaves_title():
    data = ProcessedData(title="kept")
    extract_title(_page("<h1>Other</h1>"), data)
    assert data.title == "kept"


def test_extract_content_stops_at_stop_heading():
    html = _page(
        '<section id="mw-content-text"><p>Alpha</p>'
        "<h2>References</h2><p>Beta</p></section>"
    )
    data = ProcessedData()
    extract_content(html, data)
    assert data.text_content == "Alpha"


def test_extract_content_joins_pieces_with_newlines():
    html = _page('<section id="mw-content-text"><p>One</p><p>Two</p></section>')
    data = ProcessedData()
    extract_content(html, data)
    assert data.text_content.split("\n") == ["One", "Two"]


def test_extract_content_ignores_script_text():
    html = _page('<section id="mw-content-text"><p>Text<script>run()</script></p></section>')
    data = ProcessedData()
    extract_content(html, data)
    assert data.text_content == "Text"


def test_extract_content_ordinary_heading_does_not_stop():
    html = _page(
        '<section id="mw-content-text"><p>One</p><h2>History</h2><p>Two</p></section>'
    )
    data = ProcessedData()
    extract_content(html, data)
    assert data.text_content.split("\n") == ["One", "Two"]


def test_extract_content_without_content_node_leaves_text():
    data = ProcessedData(text_content="kept")
    extract_content(_page("<p>Elsewhere</p>"), data)
    assert data.text_content == "kept"


def test_extract_categories_sorted_and_unique():
    html = _page(
        '<a href="/wiki/Category:Zeta" title="Category:Zeta">Z</a>'
        '<a href="/wiki/Category:Alpha" title="Category:Alpha">A</a>'
        '<a href="/wiki/Category:Alpha" title="Category:Alpha">A again</a>'
        '<a href="/wiki/Python" title="Python">not a category</a>'
        '<a href="/wiki/Category:Missing">no title</a>'
    )
    data = ProcessedData()
    extract_categories(html, data)
    assert data.keywords == ["Alpha", "Zeta"]


def test_extract_internal_links_filters_and_prefixes():
    html = _page(
        '<a href="/wiki/Outside" title="Outside">outside body</a>'
        '<div id="mw-content-text">'
        '<a href="/wiki/Python" title="Python">p</a>'
        '<a href="/wiki/Python" title="Python">p again</a>'
        '<a href="/wiki/File:Logo.png" title="File">file</a>'
        '<a href="http://elsewhere.example.com/wiki/Page" title="x">abs</a>'
        '<a href="/wiki/NoTitle">no title</a>'
        "</div>"
    )
    data = ProcessedData()
    extract_internal_links(html, data)
    assert data.links == ["https://en.wikipedia.org/wiki/Python"]


def test_extract_images_keeps_thumbnails_only():
    html = _page(
        '<div id="mw-content-text">'
        '<img class="thumbimage" src="//upload.example.com/a.png">'
        '<img class="thumbimage big" src="/local/b.png">'
        '<img src="//upload.example.com/c.png">'
        "</div>"
    )
    data = ProcessedData()
    extract_images(html, data)
    assert data.images == ["/local/b.png", "https://upload.example.com/a.png"]


def test_extract_images_without_content_node_is_empty():
    data = ProcessedData(images=["old"])
    extract_images(_page('<img class="thumbimage" src="x.png">'), data)
    assert data.images == []


def test_extract_infobox_rows():
    html = _page(
        '<table class="infobox vcard">'
        "<tr><th>Born</th><td>1990</td></tr>"
        "<tr><th>Empty</th><td></td></tr>"
        "<tr><td>lonely cell</td></tr>"
        "</table>"
    )
    data = ProcessedData()
    extract_infobox(html, data)
    assert data.metadata == {"infobox_Born": "1990"}


def test_extract_infobox_without_infobox_leaves_metadata():
    data = ProcessedData(metadata={"k": "v"})
    extract_infobox(_page("<table><tr><th>A</th><td>B</td></tr></table>"), data)
    assert data.metadata == {"k": "v"}


def test_register_plugin_adds_working_processor():
    registry = ProcessorRegistry()
    register_plugin(registry)
    assert registry.available() == ["wikipedia"]
    processor = registry.get("wikipedia")
    assert isinstance(processor, PluginProcessor)
    html = _page(
        '<h1 id="firstHeading">Python</h1>'
        '<a href="/wiki/Category:Languages" title="Category:Languages">c</a>'
    )
    result = processor.process("https://en.wikipedia.org/wiki/Python", html)
    assert result.title == "Python"
    assert result.keywords == ["Languages"]
    assert result.html_content == html


def test_plugin_information():
    assert plugin_version() == "1.2.0"
    assert plugin_name() == "Gumbo-based Wikipedia Processor Plugin"