"""News backend: aggregates NewsAPI articles and relays volunteer messages."""

__version__ = "0.1.0"
