"""Scrape reactbits.dev components into SQLite and serve them to MCP clients."""

__version__ = "1.0.0"
