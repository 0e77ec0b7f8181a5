"""
Pagination Walker
==================
Follows the "next page" chain of a documentation site and collects the
normalized content of every page.

For each seed URL, in order:

1. Navigate under the configured load policy
2. Run the extraction rules on the content region
3. Merge the fragment, unless the URL is excluded
4. Read the next-page link; stop the chain when there is none

Excluded pages are still navigated so their next-page link keeps the chain
going.  The chain must be a simple path: a cycle in the next-page links
never terminates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from playwright.async_api import Page

from .browser import LoadPolicy
from .extraction import extract_content, find_next_page_url
from .utils import ProgressTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageJob:
    """One page to visit."""
    url: str
    is_excluded: bool = False


@dataclass
class PageFragment:
    """Normalized content of one merged page."""
    url: str
    html: str


@dataclass
class ContentAccumulator:
    """
    Append-only, visit-ordered content of every merged page.

    Owned by a single walk; the composer only reads it.
    """
    fragments: List[PageFragment] = field(default_factory=list)

    def append(self, url: str, html: str) -> None:
        self.fragments.append(PageFragment(url=url, html=html))

    @property
    def html(self) -> str:
        """All fragments concatenated in visit order."""
        return "".join(fragment.html for fragment in self.fragments)

    @property
    def urls(self) -> List[str]:
        return [fragment.url for fragment in self.fragments]

    def __len__(self) -> int:
        return len(self.fragments)


class PaginationWalker:
    """
    Drives one browser page along the pagination chain.

    Usage::

        walker = PaginationWalker(page, LoadPolicy(), "article",
                                  ".pagination-nav__link--next")
        content = await walker.walk(["https://docs.example.com/intro"])
    """

    def __init__(
        self,
        page: Page,
        load_policy: LoadPolicy,
        content_selector: str,
        pagination_selector: str,
    ):
        self.page = page
        self.load_policy = load_policy
        self.content_selector = content_selector
        self.pagination_selector = pagination_selector
        self.progress = ProgressTracker()

    async def walk(
        self,
        seed_urls: Iterable[str],
        exclude_urls: Iterable[str] = (),
    ) -> ContentAccumulator:
        """
        Walk every seed URL's pagination chain.

        Args:
            seed_urls: Chain starting points, walked in order
            exclude_urls: URLs that are navigated but contribute no content

        Returns:
            ContentAccumulator with one fragment per merged page
        """
        excluded: Set[str] = set(exclude_urls)
        content = ContentAccumulator()
        self.progress = ProgressTracker()
        self.progress.start()

        try:
            for seed_url in seed_urls:
                job: Optional[PageJob] = PageJob(seed_url, seed_url in excluded)
                while job is not None:
                    next_url = await self._visit(job, content)
                    job = PageJob(next_url, next_url in excluded) if next_url else None
                logger.info(f"[WALK] End of chain for {seed_url}")
        finally:
            self.progress.finish()

        logger.info(f"[WALK] Complete: {self.progress.get_stats()}")
        return content

    async def _visit(self, job: PageJob, content: ContentAccumulator) -> Optional[str]:
        """Load one page, merge its content, and return the next URL."""
        logger.info(f"[WALK] Retrieving html from {job.url}")
        await self.load_policy.navigate(self.page, job.url)

        html = await extract_content(self.page, self.content_selector)

        if job.is_excluded:
            self.progress.increment_excluded()
            logger.info(f"[WALK] Excluded, content skipped: {job.url}")
        else:
            if not html:
                self.progress.increment_empty()
            content.append(job.url, html)
            self.progress.increment_merged()
            logger.info(f"[WALK] Merged ({len(html)} chars): {job.url}")

        return await find_next_page_url(self.page, self.pagination_selector)
