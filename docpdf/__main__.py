#!/usr/bin/env python3
"""
Command-line interface
=======================
Build a PDF from a paginated documentation site.

All configuration flows through ``PdfRunConfig``, the single source of
truth for defaults and CLI overrides.

Run with: python -m docpdf --initial-doc-urls https://docs.example.com/intro
"""

import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv
from playwright.async_api import Error as PlaywrightError

from .errors import DocPdfError
from .generator import run
from .run_config import PdfRunConfig

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='docpdf',
        description='Render a paginated documentation site into a single PDF',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m docpdf --initial-doc-urls https://docusaurus.io/docs
  python -m docpdf --initial-doc-urls https://example.com/docs/a,https://example.com/blog/b \\
      --exclude-urls https://example.com/docs/changelog --cover-title "Example Docs"
  python -m docpdf --initial-doc-urls https://example.com/docs --wait-for-render 3000 \\
      --pdf-margin 20,30,20,30 --pdf-format Letter --disable-toc
        """
    )

    parser.add_argument(
        '--initial-doc-urls', required=True, metavar='URLS',
        help='Comma separated start URLs, each the head of a pagination chain',
    )
    parser.add_argument(
        '--exclude-urls', metavar='URLS',
        help='Comma separated URLs to walk through without including their content',
    )
    parser.add_argument('--output-pdf-filename', metavar='PATH', help='Output PDF path (default: docpdf.pdf)')
    parser.add_argument(
        '--pdf-margin', metavar='MARGIN',
        help='PDF margins "top,right,bottom,left"; bare numbers are px (default: 32,32,32,32)',
    )
    parser.add_argument('--content-selector', metavar='CSS', help='Selector of the page content (default: article)')
    parser.add_argument(
        '--pagination-selector', metavar='CSS',
        help='Selector of the next-page link (default: .pagination-nav__link--next)',
    )
    parser.add_argument('--pdf-format', metavar='FORMAT', help='Paper format, e.g. A4, Letter (default: A4)')
    parser.add_argument(
        '--exclude-selectors', metavar='CSS',
        help='Comma separated selectors removed from the assembled document',
    )
    parser.add_argument('--css-style', metavar='CSS', help='CSS injected into the assembled document')
    parser.add_argument(
        '--browser-args', metavar='ARGS',
        help='Comma separated Chromium flags; pass with =, e.g. --browser-args=--no-sandbox,--disable-gpu',
    )
    parser.add_argument('--cover-title', help='Cover page title')
    parser.add_argument('--cover-sub', help='Cover page subtitle')
    parser.add_argument('--cover-image', metavar='URL', help='Cover image URL or local path')
    parser.add_argument('--disable-toc', action='store_true', help='Do not add a table of contents')
    parser.add_argument(
        '--wait-for-render', type=int, metavar='MS',
        help='Wait this many ms after load instead of waiting for network idle',
    )
    parser.add_argument('--header-template', metavar='HTML', help='HTML template for the page header')
    parser.add_argument('--footer-template', metavar='HTML', help='HTML template for the page footer')
    parser.add_argument('--headed', action='store_true', help='Show the browser window')
    parser.add_argument('--debug-dir', metavar='DIR', help='Where content.html and toc.html are written (default: temp)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def print_summary(result) -> None:
    """Print run summary."""
    stats = result.stats
    print("\n" + "=" * 65)
    print("PDF COMPLETE")
    print("=" * 65)
    print(f"  Pages visited:       {stats.get('pages_visited', 0)}")
    print(f"  Pages merged:        {stats.get('pages_merged', 0)}")
    if stats.get('pages_excluded', 0) > 0:
        print(f"  Pages excluded:      {stats.get('pages_excluded', 0)}")
    if stats.get('pages_empty', 0) > 0:
        print(f"  Empty pages:         {stats.get('pages_empty', 0)} (content selector missed)")
    print(f"  Walk time:           {stats.get('elapsed_time', 0):.1f}s")
    print(f"  Output:              {result.output_path}")
    print("=" * 65)


def main(argv: Optional[List[str]] = None) -> int:
    """Parse argv, build PdfRunConfig, run. Returns the exit code."""
    load_dotenv()

    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        cfg = PdfRunConfig.from_cli_args(args)
        cfg.validate()
        cfg.log_summary()
        result = run(cfg)
    except DocPdfError as e:
        logger.error(str(e))
        return 1
    except PlaywrightError as e:
        logger.error(f"Browser failure: {e}")
        return 1

    print_summary(result)
    return 0


if __name__ == '__main__':
    sys.exit(main())
