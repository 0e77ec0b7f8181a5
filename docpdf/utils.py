"""
Utility Functions
Progress tracking, URL validation, and option parsing helpers.
"""

import logging
import re
import time
from typing import Dict, List, Optional
from urllib.parse import urlparse

from .errors import ConfigError

logger = logging.getLogger(__name__)

# Bare numbers in a margin string are treated as CSS pixels
_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$")

_MARGIN_SIDES = ("top", "right", "bottom", "left")


class ProgressTracker:
    """
    Tracks walk progress for reporting.
    """

    def __init__(self):
        self.pages_merged = 0
        self.pages_excluded = 0
        self.pages_empty = 0
        self.start_time = None
        self.end_time = None

    def start(self) -> None:
        """Mark walk start."""
        self.start_time = time.time()

    def finish(self) -> None:
        """Mark walk end."""
        self.end_time = time.time()

    def increment_merged(self) -> int:
        self.pages_merged += 1
        return self.pages_merged

    def increment_excluded(self) -> int:
        self.pages_excluded += 1
        return self.pages_excluded

    def increment_empty(self) -> int:
        self.pages_empty += 1
        return self.pages_empty

    @property
    def pages_visited(self) -> int:
        """Total pages navigated, excluded ones included."""
        return self.pages_merged + self.pages_excluded

    @property
    def elapsed_time(self) -> float:
        """Elapsed time in seconds."""
        if self.start_time is None:
            return 0
        end = self.end_time or time.time()
        return end - self.start_time

    def get_stats(self) -> dict:
        """Get current statistics."""
        return {
            'pages_visited': self.pages_visited,
            'pages_merged': self.pages_merged,
            'pages_excluded': self.pages_excluded,
            'pages_empty': self.pages_empty,
            'elapsed_time': round(self.elapsed_time, 2),
        }


def is_valid_url(url: str) -> bool:
    """Check if URL is valid."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme == 'file':
        return bool(parsed.path)
    return all([parsed.scheme in ('http', 'https'), parsed.netloc])


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma separated option into stripped, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def parse_margin(value: str) -> Dict[str, str]:
    """
    Parse a ``"top,right,bottom,left"`` margin string.

    A single value applies to all four sides. Bare numbers are pixels;
    values with a CSS unit (``10mm``, ``1in``) are passed through.

    Raises:
        ConfigError: if the string does not hold one or four values
    """
    parts = split_list(value)
    if len(parts) == 1:
        parts = parts * 4
    if len(parts) != 4:
        raise ConfigError(
            f"Invalid PDF margin {value!r}: expected 'top,right,bottom,left'"
        )

    margin = {}
    for side, part in zip(_MARGIN_SIDES, parts):
        margin[side] = f"{part}px" if _NUMBER_RE.match(part) else part
    return margin
