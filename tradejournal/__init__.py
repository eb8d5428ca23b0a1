"""tradejournal - 30-day trading journal with derived performance statistics."""

__version__ = "0.1.0"
