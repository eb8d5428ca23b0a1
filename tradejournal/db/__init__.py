"""SQLite persistence for tradejournal."""
