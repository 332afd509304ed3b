"""Book entity module.

This module contains all Book-related classes organized by responsibility:
- Book / BookCreate: Domain entity and creation payload
- BookTable: Database persistence model
- BookRepository: Data access layer
"""

from .entity import Book, BookCreate
from .repository import BookRepository
from .table import BookTable

__all__ = ["Book", "BookCreate", "BookRepository", "BookTable"]
