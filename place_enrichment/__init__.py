"""Place search and enrichment with a shared expiring cache and provider fallback."""

__version__ = "0.1.0"
