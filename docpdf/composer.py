"""
Document Composer
==================
Turns the walked content into the final PDF.

Steps:
1. Load the cover image (if any) and build the cover block
2. Navigate back to the first seed URL for a clean document (site CSS)
3. Build the TOC over the concatenated content
4. Replace the page body with cover + TOC + content
5. Strip ``exclude_selectors``, inject custom CSS
6. Scroll through the document so lazy media loads
7. Render the PDF and write the diagnostic HTML files

Any navigation or render error aborts the run; nothing partial is kept.
A cover image that cannot be loaded only costs the cover its picture.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from dataclasses import asdict, dataclass
from html import escape
from pathlib import Path
from typing import Tuple
from urllib.parse import urlparse

import requests
from playwright.async_api import Page

from .browser import scroll_to_bottom
from .errors import CoverImageError
from .run_config import PdfRunConfig
from .toc import build_toc
from .walker import ContentAccumulator

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME = "image/png"

CONTENT_DEBUG_FILENAME = "content.html"
TOC_DEBUG_FILENAME = "toc.html"

_COVER_TEMPLATE = """
  <div
    class="pdf-cover"
    style="
      display: flex;
      flex-direction: column;
      justify-content: center;
      align-items: center;
      height: 100vh;
      page-break-after: always;
      text-align: center;
    "
  >
    {title}
    {subtitle}
    <img
      class="cover-img"
      src="data:{mime};base64,{image_b64}"
      alt=""
      width="140"
      height="140"
    />
  </div>"""

_REPLACE_BODY_JS = """
({ coverHTML, tocHTML, contentHTML, disableTOC }) => {
    document.body.innerHTML = coverHTML + (disableTOC ? '' : tocHTML) + contentHTML;
}
"""

_REMOVE_SELECTOR_JS = """
(selector) => {
    const matches = document.querySelectorAll(selector);
    matches.forEach((match) => match.remove());
    return matches.length;
}
"""


@dataclass
class DocumentAssemblyContext:
    """Payload sent to the page to rebuild its body."""
    coverHTML: str
    tocHTML: str
    contentHTML: str
    disableTOC: bool


def build_cover_html(
    title: str = "",
    subtitle: str = "",
    image_b64: str = "",
    mime: str = DEFAULT_IMAGE_MIME,
) -> str:
    """
    Build the cover block.

    Returns "" when there is nothing to show; otherwise the ``<img>`` is
    always present, with an empty payload when no image was loaded.
    """
    if not (title or subtitle or image_b64):
        return ""
    return _COVER_TEMPLATE.format(
        title=f"<h1>{escape(title)}</h1>" if title else "",
        subtitle=f"<h3>{escape(subtitle)}</h3>" if subtitle else "",
        mime=mime,
        image_b64=image_b64,
    )


def load_cover_image(source: str, timeout: int = 30) -> Tuple[str, str]:
    """
    Load the cover image from a URL or a local path.

    Returns:
        Tuple of (base64 payload, mime type)

    Raises:
        CoverImageError: if the image cannot be fetched or read
    """
    scheme = urlparse(source).scheme
    if scheme in ("http", "https"):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise CoverImageError(f"Cannot fetch cover image {source}: {e}") from e
        data = response.content
        mime = response.headers.get("Content-Type", "").split(";")[0].strip()
    else:
        path = Path(source[len("file://"):] if scheme == "file" else source)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise CoverImageError(f"Cannot read cover image {path}: {e}") from e
        mime = mimetypes.guess_type(path.name)[0] or ""

    logger.info(f"[COMPOSE] Cover image loaded ({len(data)} bytes)")
    return base64.b64encode(data).decode("ascii"), mime or DEFAULT_IMAGE_MIME


class DocumentComposer:
    """
    Assembles cover, TOC and content on the shared page and prints it.
    """

    def __init__(self, page: Page, config: PdfRunConfig):
        self.page = page
        self.config = config

    async def compose(self, content: ContentAccumulator) -> Path:
        """
        Build the final document and render it.

        Args:
            content: Walked content, in visit order

        Returns:
            Path of the written PDF
        """
        cfg = self.config

        image_b64, mime = "", DEFAULT_IMAGE_MIME
        if cfg.cover_image:
            loop = asyncio.get_event_loop()
            try:
                image_b64, mime = await loop.run_in_executor(
                    None, load_cover_image, cfg.cover_image
                )
            except CoverImageError as e:
                logger.warning(f"[COMPOSE] {e}; cover rendered without image")
        cover_html = build_cover_html(cfg.cover_title, cfg.cover_sub, image_b64, mime)

        await self.page.goto(cfg.initial_doc_urls[0], wait_until="networkidle")

        toc = build_toc(content.html)
        assembly = DocumentAssemblyContext(
            coverHTML=cover_html,
            tocHTML=toc.toc_html,
            contentHTML=toc.content_html,
            disableTOC=cfg.disable_toc,
        )
        await self.page.evaluate(_REPLACE_BODY_JS, asdict(assembly))
        logger.info(
            f"[COMPOSE] Document assembled: {len(content)} pages, "
            f"{len(toc.headings)} TOC entries"
        )

        for selector in cfg.exclude_selectors:
            removed = await self.page.evaluate(_REMOVE_SELECTOR_JS, selector)
            logger.info(f"[COMPOSE] Removed {removed} element(s) matching {selector!r}")

        if cfg.css_style:
            await self.page.add_style_tag(content=cfg.css_style)

        await scroll_to_bottom(self.page)

        output_path = await self._render_pdf()
        self._write_diagnostics(content.html, toc.toc_html)
        return output_path

    async def _render_pdf(self) -> Path:
        cfg = self.config
        output_path = Path(cfg.output_pdf_filename)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        await self.page.pdf(
            path=str(output_path),
            format=cfg.pdf_format,
            print_background=True,
            margin=cfg.pdf_margin,
            display_header_footer=bool(cfg.header_template or cfg.footer_template),
            header_template=cfg.header_template,
            footer_template=cfg.footer_template,
        )
        logger.info(f"[PDF] Written to {output_path.absolute()}")
        return output_path

    def _write_diagnostics(self, content_html: str, toc_html: str) -> None:
        """Keep the raw merged content and TOC next to the run for debugging."""
        debug_dir = Path(self.config.debug_dir)
        debug_dir.mkdir(parents=True, exist_ok=True)
        (debug_dir / CONTENT_DEBUG_FILENAME).write_text(content_html, encoding="utf-8")
        (debug_dir / TOC_DEBUG_FILENAME).write_text(toc_html, encoding="utf-8")
        logger.debug(f"[COMPOSE] Diagnostics written to {debug_dir.absolute()}")
