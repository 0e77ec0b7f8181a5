"""
Tests for the in-page extraction scripts (extraction.py).

These run the scripts in a real headless Chromium with every request
answered from memory, so no network is used.  The whole module is skipped
when Playwright's Chromium is not installed.
"""

import pytest
from bs4 import BeautifulSoup

from docpdf.extraction import EXTRACT_CONTENT_JS, NEXT_PAGE_HREF_JS

playwright_sync = pytest.importorskip("playwright.sync_api")

ORIGIN = "https://docs.example.com"
INTRO = f"{ORIGIN}/docs/guide/intro"


def _document(body):
    return f"<!DOCTYPE html><html><head><title>t</title></head><body>{body}</body></html>"


@pytest.fixture(scope="module")
def browser():
    with playwright_sync.sync_playwright() as p:
        try:
            chromium = p.chromium.launch(headless=True)
        except playwright_sync.Error as e:
            pytest.skip(f"Chromium not available: {e}")
        yield chromium
        chromium.close()


@pytest.fixture
def load(browser):
    """load(url, body) -> page with ``body`` served at ``url``."""
    context = browser.new_context()
    pages = {}

    def handler(route):
        body = pages.get(route.request.url)
        if body is None:
            route.fulfill(status=404, body="not found")
        else:
            route.fulfill(status=200, content_type="text/html", body=_document(body))

    context.route("**/*", handler)

    def _load(url, body):
        pages[url] = body
        page = context.new_page()
        page.goto(url)
        return page

    yield _load
    context.close()


def _extract(page, selector="article"):
    html = page.evaluate(EXTRACT_CONTENT_JS, {"contentSelector": selector})
    return html, BeautifulSoup(html, "html.parser")


# ====================================================================
# Region selection
# ====================================================================

class TestRegion:

    def test_no_match_returns_empty(self, load):
        page = load(INTRO, "<main><p>no article here</p></main>")
        assert page.evaluate(EXTRACT_CONTENT_JS, {"contentSelector": "article"}) == ""

    def test_returns_outer_html_with_page_break(self, load):
        """The region itself is returned, marked to break the page after it."""
        page = load(INTRO, "<nav>menu</nav><article><p>Body</p></article>")
        html, soup = _extract(page)
        assert html.startswith("<article")
        assert "menu" not in html
        assert "break-after" in soup.article["style"]

    def test_custom_selector(self, load):
        page = load(INTRO, '<div class="markdown"><p>Body</p></div>')
        _, soup = _extract(page, ".markdown")
        assert soup.div["class"] == ["markdown"]


# ====================================================================
# Collapsibles and tabs
# ====================================================================

class TestExpansion:

    def test_details_opened(self, load):
        page = load(INTRO, (
            "<article>"
            "<details><summary>More</summary><p>hidden text</p></details>"
            "<details open><summary>Open</summary><p>shown</p></details>"
            "</article>"
        ))
        _, soup = _extract(page)
        assert all(d.has_attr("open") for d in soup.find_all("details"))

    def test_tabs_flattened(self, load):
        """Every tab becomes a title plus a bordered, visible panel."""
        page = load(INTRO, (
            "<article><div class=\"tabs-container\">"
            "<ul role=\"tablist\" class=\"tabs\">"
            "<li class=\"tabs__item tabs__item--active\">npm</li>"
            "<li class=\"tabs__item\">yarn</li>"
            "</ul>"
            "<div class=\"margin-top--md\">"
            "<div role=\"tabpanel\">npm install docpdf</div>"
            "<div role=\"tabpanel\" hidden>yarn add docpdf</div>"
            "</div>"
            "</div></article>"
        ))
        _, soup = _extract(page)

        sections = soup.select(".tabs-container > div.margin-top--md")
        assert len(sections) == 2
        for section, (title, panel) in zip(sections, [("npm", "npm install docpdf"), ("yarn", "yarn add docpdf")]):
            item = section.select_one("ul.tabs > li.tabs__item")
            assert item.get_text() == title
            assert "tabs__item--active" in item["class"]
            tab_panel = section.select_one("[role=tabpanel]")
            assert tab_panel.get_text() == panel
            assert not tab_panel.has_attr("hidden")
            assert "border" in tab_panel["style"]


# ====================================================================
# Heading ids
# ====================================================================

class TestHeadingIds:

    def test_h1_without_id_gets_page_path(self, load):
        page = load(INTRO, "<article><h1>Intro</h1></article>")
        _, soup = _extract(page)
        assert soup.h1["id"] == "docs_guide_intro"

    def test_h2_with_id_is_path_qualified(self, load):
        page = load(INTRO, '<article><h2 id="setup">Setup</h2></article>')
        _, soup = _extract(page)
        assert soup.h2["id"] == "docs_guide_introsetup"

    def test_h3_without_id_untouched(self, load):
        page = load(INTRO, "<article><h3>Note</h3></article>")
        _, soup = _extract(page)
        assert not soup.h3.has_attr("id")

    def test_on_this_page_untouched(self, load):
        page = load(INTRO, '<article><h2 id="otp">On this page</h2></article>')
        _, soup = _extract(page)
        assert soup.h2["id"] == "otp"

    def test_root_page_h1_falls_back_to_text(self, load):
        """At path '/' the prefix is empty, so the h1 text becomes its id."""
        page = load(f"{ORIGIN}/", "<article><h1>Hello World</h1></article>")
        _, soup = _extract(page)
        assert soup.h1["id"] == "Hello-World"


# ====================================================================
# Links
# ====================================================================

class TestLinks:

    LINKS = (
        '<a id="rooted" href="/docs/guide/next">next</a>'
        '<a id="relative" href="other/page">other</a>'
        '<a id="fragment" href="/docs/guide/next#part">part</a>'
        '<a id="absolute" href="https://example.org/x">ext</a>'
        '<a id="protocol" href="//cdn.example.org/x">cdn</a>'
        '<a id="local" href="#here">here</a>'
        '<a id="mail" href="mailto:docs@example.com">mail</a>'
        '<a id="bare" name="anchor">bare</a>'
    )

    @pytest.fixture
    def links(self, load):
        page = load(INTRO, f"<article>{self.LINKS}</article>")
        _, soup = _extract(page)
        return {a["id"]: a.get("href") for a in soup.find_all("a")}

    def test_site_links_become_anchors(self, links):
        """Site links point at the path-qualified id of the target page."""
        assert links["rooted"] == "#docs_guide_next"
        assert links["relative"] == "#other_page"
        assert links["fragment"] == "#docs_guide_nextpart"

    def test_other_links_untouched(self, links):
        assert links["absolute"] == "https://example.org/x"
        assert links["protocol"] == "//cdn.example.org/x"
        assert links["local"] == "#here"
        assert links["mail"] == "mailto:docs@example.com"
        assert links["bare"] is None


# ====================================================================
# Next-page discovery
# ====================================================================

class TestNextPage:

    NEXT = ".pagination-nav__link--next"

    def test_resolved_href(self, load):
        page = load(INTRO, (
            '<nav><a class="pagination-nav__link pagination-nav__link--prev" href="/docs">Prev</a>'
            '<a class="pagination-nav__link pagination-nav__link--next" href="install">Next</a></nav>'
        ))
        assert page.evaluate(NEXT_PAGE_HREF_JS, self.NEXT) == f"{ORIGIN}/docs/guide/install"

    @pytest.mark.parametrize("attrs", ['href=""', 'href="#"', 'href=" # "', ""])
    def test_self_link_ends_chain(self, load, attrs):
        """A next link pointing back at the current page ends the chain."""
        page = load(INTRO, f'<nav><a class="pagination-nav__link--next" {attrs}>Next</a></nav>')
        assert page.evaluate(NEXT_PAGE_HREF_JS, self.NEXT) is None

    def test_missing_link(self, load):
        page = load(INTRO, "<nav></nav>")
        assert page.evaluate(NEXT_PAGE_HREF_JS, self.NEXT) is None
