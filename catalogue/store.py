"""
catalogue/store.py -- SQLAlchemy-backed persistence layer for books.

Uses SQLAlchemy Core (not ORM) so the dataclasses in catalogue/models.py
remain the authoritative domain representation.

Pattern: Repository + Data Mapper. CatalogueStore is the repository;
_row_to_book is the mapper. Route handlers never touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL.

Update and delete run their existence check and mutation inside one
transaction (engine.begin()), so a concurrent delete cannot slip in between
the check and the write.

Usage:
    store = CatalogueStore(db)
    book = store.create_book(Book(title="Dune", author="Frank Herbert"))
    count, books = store.search_books(BookFilters(search="dune"))
    store.update_book(book.id, {"status": "borrowed"})
    store.delete_book(book.id)
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, Integer, MetaData, String, Table, Text

from catalogue.models import BOOK_STATUSES, MUTABLE_FIELDS, STATUS_AVAILABLE, Book, BookFilters
from catalogue.query import build_book_query
from core.database import Database
from core.errors import NotFoundError, ValidationError

logger = logging.getLogger("libcat.catalogue")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

books_table = Table(
    "books",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(200), nullable=False),
    Column("author", String(150), nullable=False),
    Column("isbn", String(50)),
    Column("category", String(100)),
    Column("description", Text),
    Column("status", String(20), nullable=False, server_default=STATUS_AVAILABLE),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _normalize_status(status: str) -> str:
    normalized = status.strip().lower()
    if normalized not in BOOK_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(BOOK_STATUSES)}.")
    return normalized


def _book_not_found() -> NotFoundError:
    return NotFoundError("Book not found.")


def _update_values(fields: dict[str, Any]) -> dict[str, Any]:
    """Column values for a partial update, restricted to the mutable fields."""
    values: dict[str, Any] = {}
    for name in MUTABLE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name == "status":
            if value:
                values[name] = _normalize_status(value)
            continue
        if value is None and name in ("title", "author"):
            raise ValidationError(f"{name.capitalize()} cannot be null.")
        values[name] = value
    return values


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CatalogueStore:
    def __init__(self, db: Database) -> None:
        self.engine = db.engine
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def search_books(self, filters: BookFilters) -> tuple[int, list[Book]]:
        """Return (count, books) matching all given filters, newest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(build_book_query(books_table, filters)).fetchall()
        books = [_row_to_book(r) for r in rows]
        return len(books), books

    def get_book(self, book_id: int) -> Book:
        """Return the book with this id. Raises NotFoundError if absent."""
        with self.engine.connect() as conn:
            row = conn.execute(books_table.select().where(books_table.c.id == book_id)).fetchone()
        if row is None:
            raise _book_not_found()
        return _row_to_book(row)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_book(self, book: Book) -> Book:
        """Insert a book and return the stored record.

        title and author must be non-empty. A missing status means
        "available"; empty optional fields are stored as NULL.
        """
        if not book.title or not book.author:
            raise ValidationError("Title and author are required.")
        status = _normalize_status(book.status) if book.status else STATUS_AVAILABLE

        with self.engine.connect() as conn:
            result = conn.execute(
                books_table.insert().values(
                    title=book.title,
                    author=book.author,
                    isbn=book.isbn or None,
                    category=book.category or None,
                    description=book.description or None,
                    status=status,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            book_id = result.inserted_primary_key[0]
        logger.info("Book created id=%s", book_id)
        return self.get_book(book_id)

    def update_book(self, book_id: int, fields: dict[str, Any]) -> Book:
        """Apply a partial update and return the stored record.

        fields holds only what the client sent. A key that is absent keeps
        its previous value; a key that is present is written as given, so an
        explicit empty title or author is stored as the empty string.
        title/author/status may not be set to None (NOT NULL columns); an
        empty status keeps the previous status.

        A missing book is reported as NotFoundError before any field is
        validated.
        """
        with self.engine.begin() as conn:
            row = conn.execute(books_table.select().where(books_table.c.id == book_id)).fetchone()
            if row is None:
                raise _book_not_found()
            values = _update_values(fields)
            if values:
                conn.execute(books_table.update().where(books_table.c.id == book_id).values(**values))
                row = conn.execute(books_table.select().where(books_table.c.id == book_id)).fetchone()
        logger.info("Book updated id=%s fields=%s", book_id, sorted(values))
        return _row_to_book(row)

    def delete_book(self, book_id: int) -> None:
        """Permanently remove a book. Raises NotFoundError if absent."""
        with self.engine.begin() as conn:
            result = conn.execute(books_table.delete().where(books_table.c.id == book_id))
            if result.rowcount == 0:
                raise _book_not_found()
        logger.info("Book deleted id=%s", book_id)


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_book(row) -> Book:
    return Book(
        id=row.id,
        title=row.title,
        author=row.author,
        isbn=row.isbn,
        category=row.category,
        description=row.description,
        status=row.status,
        created_at=row.created_at,
    )
