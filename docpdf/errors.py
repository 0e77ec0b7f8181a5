"""
Error types raised by docpdf.

Playwright's own exceptions (navigation, evaluation, PDF rendering) are not
wrapped: they propagate unchanged to the caller and abort the run.
"""


class DocPdfError(Exception):
    """Base class for docpdf errors."""


class ConfigError(DocPdfError):
    """The run configuration cannot be used."""


class CoverImageError(DocPdfError):
    """The configured cover image could not be loaded."""
