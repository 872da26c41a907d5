"""portfolio-sync - generate portfolio metadata from your repositories."""

__version__ = "0.1.0"
