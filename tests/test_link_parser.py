from dataminer.link_parser import extract_links

BASE = "http://example.com"


def test_extracts_same_site_links_in_order():
    html = (
        '<html><body>'
        '<a href="/a">a</a>'
        '<a href="b">b</a>'
        '<a href="http://example.com/c">c</a>'
        '<a href="http://other.org/d">d</a>'
        '</body></html>'
    )
    visited = set()
    links = extract_links(html, BASE, visited)
    assert links == [BASE + "/a", BASE + "/b", BASE + "/c"]
    assert visited == set(links)


def test_skips_fragments_and_empty_hrefs():
    html = '<a href="#top">t</a><a href="">e</a><a>none</a><a href="/ok">ok</a>'
    assert extract_links(html, BASE, set()) == [BASE + "/ok"]


def test_skips_already_visited():
    visited = {BASE + "/a"}
    html = '<a href="/a">a</a><a href="/b">b</a>'
    assert extract_links(html, BASE, visited) == [BASE + "/b"]
    assert visited == {BASE + "/a", BASE + "/b"}


def test_duplicates_on_page_reported_once():
    html = '<a href="/x">1</a><a href="/x">2</a><a href="http://example.com/x">3</a>'
    assert extract_links(html, BASE, set()) == [BASE + "/x"]


def test_breadth_first_order():
    html = (
        '<body><div><p><a href="/deep">d</a></p></div>'
        '<a href="/shallow">s</a></body>'
    )
    assert extract_links(html, BASE, set()) == [BASE + "/shallow", BASE + "/deep"]


def test_protocol_relative_link_on_same_host():
    html = '<a href="//example.com/p">p</a><a href="//cdn.other.org/q">q</a>'
    assert extract_links(html, BASE, set()) == [BASE + "/p"]


def test_no_links_leaves_visited_untouched():
    visited = {BASE}
    assert extract_links("<p>plain text</p>", BASE, visited) == []
    assert visited == {BASE}