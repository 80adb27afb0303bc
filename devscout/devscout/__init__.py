"""devscout - developer discovery and enrichment cascade."""

__version__ = "0.1.0"
