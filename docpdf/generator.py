"""
PDF Generator
==============
Top-level pipeline: launch the browser, walk the pagination chains,
compose the document, render the PDF.

Single task, single page: every browser operation completes before the
next one starts.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .browser import BrowserSession
from .composer import DocumentComposer
from .run_config import PdfRunConfig
from .walker import PaginationWalker

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Outcome of a successful run."""
    output_path: Path
    page_urls: List[str] = field(default_factory=list)
    stats: Dict = field(default_factory=dict)


async def generate_pdf(config: PdfRunConfig) -> GenerateResult:
    """
    Crawl the configured documentation and write the PDF.

    Raises:
        ConfigError: if the configuration is unusable
        playwright.async_api.Error: on navigation or render failure
    """
    config.validate()

    async with BrowserSession(config.browser_args, headless=config.headless) as page:
        walker = PaginationWalker(
            page,
            config.load_policy(),
            config.content_selector,
            config.pagination_selector,
        )
        content = await walker.walk(config.initial_doc_urls, config.exclude_urls)

        composer = DocumentComposer(page, config)
        output_path = await composer.compose(content)

    return GenerateResult(
        output_path=output_path,
        page_urls=content.urls,
        stats=walker.progress.get_stats(),
    )


def run(config: PdfRunConfig) -> GenerateResult:
    """Sync wrapper: run the async pipeline from synchronous code."""
    return asyncio.run(generate_pdf(config))
