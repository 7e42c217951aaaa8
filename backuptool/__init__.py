"""Building blocks for deduplicating backup archives with channels and revisions."""

__version__ = "0.1.0"