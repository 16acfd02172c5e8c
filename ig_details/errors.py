from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


class UnsupportedPageType(RuntimeError):
    """Raised when a page type has no known output formatter."""


class PagePayloadMissing(RuntimeError):
    """Raised when the page's entry data has no container for its page type."""


class NotAProfilePage(RuntimeError):
    """Raised when profile-only enrichment is requested for another page type."""


class PublicStoryLookupFailed(RuntimeError):
    """Raised when the public-story query for a profile fails."""


class OutputError(RuntimeError):
    """Raised when a finished record cannot be written to its sink."""
