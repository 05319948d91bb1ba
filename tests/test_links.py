from chatentities.links import find_links


def test_scheme_url():
    assert find_links("check out https://example.com now") == [(10, 29)]


def test_trailing_punctuation_and_unbalanced_paren_trimmed():
    text = "see (https://example.com/a)."
    assert find_links(text) == [(5, 26)]
    assert text[5:26] == "https://example.com/a"


def test_balanced_parens_kept():
    text = "https://en.wikipedia.org/wiki/Foo_(bar)"
    assert find_links(text) == [(0, len(text))]


def test_bare_domain():
    assert find_links("visit strims.gg today") == [(6, 15)]


def test_www_host():
    assert find_links("www.example.com, ok") == [(0, 15)]


def test_not_links():
    assert find_links("file.py and e.g. node.js") == []
    assert find_links("hello world") == []


def test_link_stops_at_spoiler_delimiter():
    assert find_links("||https://x.io|| after") == [(2, 14)]
    assert find_links("||https://x.io||after") == [(2, 14)]
    assert find_links("||strims.gg/a||") == [(2, 13)]


def test_link_stops_at_backtick():
    assert find_links("`www.example.com`") == [(1, 16)]


def test_multiple_links_sorted_and_disjoint():
    text = "a https://x.io b https://y.io"
    links = find_links(text)
    assert links == [(2, 14), (17, 29)]
    for (s1, e1), (s2, e2) in zip(links, links[1:]):
        assert e1 <= s2
