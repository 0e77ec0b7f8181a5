"""
docpdf
Render a paginated documentation site into a single PDF with a cover page
and a table of contents, using a headless Chromium driven by Playwright.

CLI Usage:
    python -m docpdf --initial-doc-urls <url>[,<url>...] [options]

    Options:
        --exclude-urls          Walk through these pages without keeping their content
        --content-selector      Page content region (default: article)
        --pagination-selector   Next-page link (default: .pagination-nav__link--next)
        --cover-title           Cover page title
        --disable-toc           Skip the table of contents
        --wait-for-render       Fixed delay (ms) instead of waiting for network idle
"""

from .errors import DocPdfError, ConfigError, CoverImageError
from .run_config import PdfRunConfig
from .browser import BrowserSession, LoadPolicy, scroll_to_bottom
from .extraction import extract_content, find_next_page_url
from .walker import PaginationWalker, ContentAccumulator, PageFragment, PageJob
from .toc import build_toc, render_toc, HeadingRecord, TocResult
from .composer import DocumentComposer, build_cover_html, load_cover_image
from .generator import generate_pdf, run, GenerateResult

__all__ = [
    'DocPdfError',
    'ConfigError',
    'CoverImageError',
    'PdfRunConfig',
    'BrowserSession',
    'LoadPolicy',
    'scroll_to_bottom',
    'extract_content',
    'find_next_page_url',
    'PaginationWalker',
    'ContentAccumulator',
    'PageFragment',
    'PageJob',
    'build_toc',
    'render_toc',
    'HeadingRecord',
    'TocResult',
    'DocumentComposer',
    'build_cover_html',
    'load_cover_image',
    'generate_pdf',
    'run',
    'GenerateResult',
]

__version__ = '1.0.0'
