"""
Run Configuration
==================
Single source of truth for every docpdf default.

The CLI builds a ``PdfRunConfig`` from its flags; library callers build one
directly.  ``validate()`` rejects unusable configurations before the browser
is launched.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .browser import LoadPolicy
from .errors import ConfigError
from .utils import is_valid_url, parse_margin, split_list

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Canonical defaults, the ONLY place these values live
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "output_pdf_filename": "docpdf.pdf",
    "pdf_margin": "32,32,32,32",
    "content_selector": "article",
    "pagination_selector": ".pagination-nav__link--next",
    "pdf_format": "A4",
    "debug_dir": "temp",
    "headless": True,
}

# Environment overrides (also read from a .env file by the CLI)
ENV_BROWSER_ARGS = "DOCPDF_BROWSER_ARGS"
ENV_DEBUG_DIR = "DOCPDF_DEBUG_DIR"


@dataclass
class PdfRunConfig:
    """
    Everything one PDF run needs.

    Populate via:
      - ``PdfRunConfig(initial_doc_urls=[...])``  → defaults for the rest
      - ``PdfRunConfig.from_cli_args(ns)``        → from argparse Namespace
    """

    # ---- Pages ----
    initial_doc_urls: List[str] = field(default_factory=list)
    exclude_urls: List[str] = field(default_factory=list)
    content_selector: str = _DEFAULTS["content_selector"]
    pagination_selector: str = _DEFAULTS["pagination_selector"]
    wait_for_render: Optional[int] = None   # ms; None = wait for network idle

    # ---- Output ----
    output_pdf_filename: str = _DEFAULTS["output_pdf_filename"]
    pdf_format: str = _DEFAULTS["pdf_format"]
    pdf_margin: Dict[str, str] = field(
        default_factory=lambda: parse_margin(_DEFAULTS["pdf_margin"])
    )
    header_template: str = ""
    footer_template: str = ""
    debug_dir: str = field(
        default_factory=lambda: os.environ.get(ENV_DEBUG_DIR) or _DEFAULTS["debug_dir"]
    )

    # ---- Assembly ----
    exclude_selectors: List[str] = field(default_factory=list)
    css_style: str = ""
    cover_title: str = ""
    cover_sub: str = ""
    cover_image: str = ""
    disable_toc: bool = False

    # ---- Browser ----
    browser_args: List[str] = field(
        default_factory=lambda: os.environ.get(ENV_BROWSER_ARGS, "").split()
    )
    headless: bool = _DEFAULTS["headless"]

    # -----------------------------------------------------------------------
    # Factory helpers
    # -----------------------------------------------------------------------
    @classmethod
    def from_cli_args(cls, args) -> "PdfRunConfig":
        """Build config from an argparse Namespace (``__main__.py``)."""
        cfg = cls(
            initial_doc_urls=split_list(args.initial_doc_urls),
            exclude_urls=split_list(getattr(args, "exclude_urls", None)),
            content_selector=getattr(args, "content_selector", None) or _DEFAULTS["content_selector"],
            pagination_selector=getattr(args, "pagination_selector", None) or _DEFAULTS["pagination_selector"],
            wait_for_render=getattr(args, "wait_for_render", None),
            output_pdf_filename=getattr(args, "output_pdf_filename", None) or _DEFAULTS["output_pdf_filename"],
            pdf_format=getattr(args, "pdf_format", None) or _DEFAULTS["pdf_format"],
            pdf_margin=parse_margin(getattr(args, "pdf_margin", None) or _DEFAULTS["pdf_margin"]),
            header_template=getattr(args, "header_template", None) or "",
            footer_template=getattr(args, "footer_template", None) or "",
            exclude_selectors=split_list(getattr(args, "exclude_selectors", None)),
            css_style=getattr(args, "css_style", None) or "",
            cover_title=getattr(args, "cover_title", None) or "",
            cover_sub=getattr(args, "cover_sub", None) or "",
            cover_image=getattr(args, "cover_image", None) or "",
            disable_toc=getattr(args, "disable_toc", False),
            headless=not getattr(args, "headed", False),
        )
        # Only override env/default values when the flag was given
        if getattr(args, "browser_args", None):
            cfg.browser_args = split_list(args.browser_args)
        if getattr(args, "debug_dir", None):
            cfg.debug_dir = args.debug_dir
        return cfg

    def load_policy(self) -> LoadPolicy:
        return LoadPolicy(wait_for_render_ms=self.wait_for_render)

    def validate(self) -> None:
        """
        Reject configurations that cannot produce a PDF.

        Raises:
            ConfigError: on the first problem found
        """
        if not self.initial_doc_urls:
            raise ConfigError("At least one initial doc URL is required")
        for url in self.initial_doc_urls:
            if not is_valid_url(url):
                raise ConfigError(f"Invalid initial doc URL: {url}")
        if not self.content_selector:
            raise ConfigError("Content selector must not be empty")
        if not self.pagination_selector:
            raise ConfigError("Pagination selector must not be empty")
        if self.wait_for_render is not None and self.wait_for_render < 0:
            raise ConfigError(f"wait_for_render must be >= 0, got {self.wait_for_render}")
        if not self.output_pdf_filename:
            raise ConfigError("Output PDF filename must not be empty")

    # -----------------------------------------------------------------------
    # Logging helper
    # -----------------------------------------------------------------------
    def log_summary(self) -> None:
        """Emit a structured summary to the logger."""
        logger.info("=" * 60)
        logger.info("PDF RUN CONFIG")
        logger.info("=" * 60)
        for url in self.initial_doc_urls:
            logger.info(f"  Seed URL:         {url}")
        if self.exclude_urls:
            logger.info(f"  Excluded URLs:    {len(self.exclude_urls)} configured")
        logger.info(f"  Content:          {self.content_selector}")
        logger.info(f"  Next page:        {self.pagination_selector}")
        logger.info(f"  Page load:        {self.load_policy().description}")
        logger.info(f"  Output:           {self.output_pdf_filename} ({self.pdf_format})")
        logger.info(f"  Margins:          {self.pdf_margin}")
        if self.cover_title or self.cover_image:
            logger.info(f"  Cover:            {self.cover_title or '(image only)'}")
        logger.info(f"  TOC:              {'disabled' if self.disable_toc else 'enabled'}")
        if self.exclude_selectors:
            logger.info(f"  Strip selectors:  {', '.join(self.exclude_selectors)}")
        if self.css_style:
            logger.info(f"  Custom CSS:       {len(self.css_style)} chars")
        logger.info(f"  Debug dir:        {self.debug_dir}")
        logger.info("=" * 60)
