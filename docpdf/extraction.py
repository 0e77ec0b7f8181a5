"""
DOM Extraction Rules
=====================
In-page scripts that normalize one page's content region before it is
serialized and merged into the single output document.

The scripts run inside the browser's document via ``page.evaluate``.  They
receive a small JSON payload (selectors) and return plain strings; nothing
else crosses the boundary.

Rules, applied in order to the element matched by the content selector:

1. Mark the region for a page break after it (print pagination hint)
2. Force every ``<details>`` open so collapsed text is printed
3. Flatten Docusaurus tab widgets into stacked, always-visible sections
4. Give h1 headings, and h2/h3 headings that already carry an id, an id
   qualified by the page path (unique across the merged document)
5. Rewrite relative links into in-document ``#`` anchors
6. Return the region's outer HTML ("" when the selector matches nothing)

Rule 4 must run after rule 3 (flattened tabs may contain headings) and
rule 5 produces anchors in the same path-qualified form as rule 4, so a
cross-page link lands on the target page's h1.
"""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Page

logger = logging.getLogger(__name__)


EXTRACT_CONTENT_JS = r"""
({ contentSelector }) => {
    const element = document.querySelector(contentSelector);
    if (!element) {
        return '';
    }

    // 1. page break after each merged page
    element.style.pageBreakAfter = 'always';

    // 2. expand collapsible sections
    Array.from(element.getElementsByTagName('details')).forEach((details) => {
        details.open = true;
    });

    // 3. flatten tab widgets: each tab becomes title + bordered content
    Array.from(element.getElementsByClassName('tabs-container')).forEach((tabs) => {
        const tabTitles = Array.from(tabs.getElementsByClassName('tabs__item'));
        const panels = tabs.lastElementChild;
        const tabContents = panels ? Array.from(panels.children) : [];
        tabContents.forEach((tabContent) => tabContent.removeAttribute('hidden'));

        const flattened = document.createElement('div');
        tabTitles.forEach((tabTitle, index) => {
            const newTab = document.createElement('div');
            newTab.classList.add('margin-top--md');

            const ul = document.createElement('ul');
            ul.setAttribute('role', 'tablist');
            ul.setAttribute('aria-orientation', 'horizontal');
            ul.setAttribute('class', 'tabs');
            tabTitle.classList.add('tabs__item--active');
            ul.appendChild(tabTitle);
            newTab.appendChild(ul);

            const tabContent = tabContents[index];
            if (tabContent) {
                tabContent.style.border = '1px solid #ccc';
                newTab.appendChild(tabContent);
            }
            flattened.appendChild(newTab);
        });
        tabs.innerHTML = flattened.innerHTML;
    });

    // 4. path-qualified heading ids
    const pathPrefix = document.location.pathname.split('/').join('_').substring(1);
    const headings = Array.from(element.getElementsByTagName('h1'))
        .concat(Array.from(element.getElementsByTagName('h2')))
        .concat(Array.from(element.getElementsByTagName('h3')));
    headings.forEach((heading) => {
        if (heading.innerText === 'On this page') {
            return;
        }
        if (heading.tagName !== 'H1' && !heading.id) {
            return;
        }
        heading.id = pathPrefix + heading.id;
        if (heading.id === '') {
            heading.id = heading.innerText.split(' ').join('-');
        }
    });

    // 5. relative links -> in-document anchors, in the same form as the
    //    ids above: "/docs/a#b" targets id "docs_ab".  The leading "/" is
    //    dropped on purpose; keeping it ("#_docs_a") would miss the rule 4
    //    id of page /docs/a.
    const absolute = /^([a-zA-Z][a-zA-Z0-9+.-]*:|\/\/)/;
    Array.from(element.getElementsByTagName('a')).forEach((anchor) => {
        const href = anchor.getAttribute('href');
        if (href === null || absolute.test(href) || href.startsWith('#')) {
            return;
        }
        const target = href.replace(/^\//, '').split('#').join('').split('/').join('_');
        anchor.setAttribute('href', '#' + target);
    });

    return element.outerHTML;
}
"""

NEXT_PAGE_HREF_JS = r"""
(paginationSelector) => {
    const element = document.querySelector(paginationSelector);
    if (!element) {
        return null;
    }
    // "" and "#" resolve to the current page and would loop the walk
    const raw = (element.getAttribute('href') || '').trim();
    if (raw === '' || raw === '#') {
        return null;
    }
    return element.href || null;
}
"""


async def extract_content(page: Page, content_selector: str) -> str:
    """
    Apply the extraction rules to the loaded page.

    Args:
        page: Page with the document already loaded
        content_selector: CSS selector of the content region

    Returns:
        Outer HTML of the normalized region, or "" if nothing matched
    """
    html = await page.evaluate(
        EXTRACT_CONTENT_JS, {"contentSelector": content_selector}
    )
    if not html:
        logger.warning(f"[EXTRACT] No element matches {content_selector!r} on {page.url}")
        return ""
    return html


async def find_next_page_url(page: Page, pagination_selector: str) -> Optional[str]:
    """Resolved URL of the "next page" link, or None at the end of the chain."""
    href = await page.evaluate(NEXT_PAGE_HREF_JS, pagination_selector)
    return href or None
