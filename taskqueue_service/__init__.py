"""Task service: Flask HTTP API, SQLite task storage and Redis-fed workers."""

__version__ = "1.0.0"