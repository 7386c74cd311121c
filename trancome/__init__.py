"""Configuration, SQLite database setup and user management for personal financial control."""

__version__ = "0.1.0"
__all__ = ["__version__"]