"""
Heading / TOC Transformer
==========================
Derives a table of contents from the concatenated page content.

Works on raw markup with regular expressions rather than a parsed tree:
a heading runs from its ``<hN>`` opening tag to the first ``</hN>`` at the
same level.  Heading ids are read from the markup (the in-page extraction
rules already made them path-qualified); existing ids are never
regenerated and missing ones are written back, so running the transformer
over its own output leaves every id unchanged.

Only h1-h3 are considered.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)

# Site-generated heading that points back at the page itself
ON_THIS_PAGE = "On this page"

# Left indent per heading level below h1, in pixels
TOC_INDENT_PX = 20

_HEADING_RE = re.compile(r"<h([1-3])(\s[^>]*)?>(.*?)</h\1\s*>", re.DOTALL)

# Docusaurus appends "#" (or a zero-width space) permalinks to headings
_SELF_ANCHOR_RE = re.compile(r"<a[^>]*>(?:#|\u200b)</a\s*>")
_TAG_RE = re.compile(r"<[^>]*>")
_ID_ATTR_RE = re.compile(r'(?:^|\s)id\s*=\s*"([^"]*)"')

_TOC_TEMPLATE = """
  <div class="toc-page" style="page-break-after: always;">
    <h1 class="toc-header">Table of contents:</h1>
    <ul class="toc-list">{items}</ul>
  </div>
  """


@dataclass(frozen=True)
class HeadingRecord:
    """A heading recorded for the TOC, in document order."""
    text: str
    level: int
    id: str

    @property
    def anchor(self) -> str:
        """In-document link target for this heading."""
        if self.id.startswith("#"):
            return self.id
        return f"#{self.id}"

    @property
    def indent_px(self) -> int:
        return (self.level - 1) * TOC_INDENT_PX


@dataclass
class TocResult:
    """Output of :func:`build_toc`."""
    content_html: str
    toc_html: str
    headings: List[HeadingRecord] = field(default_factory=list)


def heading_text(inner_html: str) -> str:
    """Visible text of a heading: permalinks and tags removed, trimmed."""
    text = _SELF_ANCHOR_RE.sub("", inner_html)
    text = _TAG_RE.sub("", text)
    return text.strip()


def text_to_id(text: str) -> str:
    """Fallback id for a heading that carries none."""
    return text.replace(" ", "-").replace('"', "&quot;")


def _rewrite_open_tag(level: str, attrs: str, heading_id: str) -> str:
    attrs = _ID_ATTR_RE.sub("", attrs)
    if heading_id:
        attrs = f'{attrs} id="{heading_id}"'
    return f"<h{level}{attrs}>"


def build_toc(content_html: str) -> TocResult:
    """
    Scan content for h1-h3 headings and build the TOC.

    Args:
        content_html: Concatenated content of every merged page

    Returns:
        TocResult with the heading-normalized content, the TOC fragment
        and the recorded headings
    """
    headings: List[HeadingRecord] = []

    def _replace(match: re.Match) -> str:
        level, attrs, inner = match.group(1), match.group(2) or "", match.group(3)
        text = heading_text(inner)

        if text == ON_THIS_PAGE:
            return match.group(0)

        id_match = _ID_ATTR_RE.search(attrs)
        heading_id = id_match.group(1) if id_match else ""
        if not heading_id:
            heading_id = text_to_id(text)

        headings.append(HeadingRecord(text=text, level=int(level), id=heading_id))
        logger.debug(f"[TOC] h{level} {text!r} -> #{heading_id}")

        close_tag = match.group(0)[match.end(3) - match.start(0):]
        return _rewrite_open_tag(level, attrs, heading_id) + inner + close_tag

    modified = _HEADING_RE.sub(_replace, content_html)
    logger.info(f"[TOC] {len(headings)} headings recorded")

    return TocResult(
        content_html=modified,
        toc_html=render_toc(headings),
        headings=headings,
    )


def render_toc(headings: List[HeadingRecord]) -> str:
    """Render recorded headings as the TOC page fragment."""
    items = "\n".join(
        f'<li class="toc-item toc-item-{h.level}" style="margin-left:{h.indent_px}px">'
        f'<a href="{h.anchor}">{h.text}</a></li>'
        for h in headings
    )
    return _TOC_TEMPLATE.format(items=items)
