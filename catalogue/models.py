"""
catalogue/models.py -- Domain dataclasses for the book catalogue.

Pure data containers with zero logic. Filtering lives in catalogue/query.py,
persistence in catalogue/store.py.
"""

from dataclasses import dataclass
from typing import Optional

STATUS_AVAILABLE = "available"
STATUS_BORROWED = "borrowed"
BOOK_STATUSES = (STATUS_AVAILABLE, STATUS_BORROWED)

# Columns an update may touch. Anything else in a partial update is ignored.
MUTABLE_FIELDS = ("title", "author", "isbn", "category", "description", "status")


@dataclass
class Book:
    """A catalogue record.

    status is informational only; nothing in this system ties it to a loan
    ledger. id is None before the record is written to the database.
    """

    title: str
    author: str
    isbn: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    status: str = STATUS_AVAILABLE  # "available" | "borrowed"
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass(frozen=True)
class BookFilters:
    """Optional, independent filters for a catalogue search. None means unset."""

    search: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
