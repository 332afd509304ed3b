"""Bookshelf: a small HTTP service for storing books."""

__version__ = "0.1.0"
