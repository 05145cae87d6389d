"""
catalogue/query.py -- Catalogue search query builder.

Turns BookFilters into a single SQLAlchemy Core SELECT over the books table.
User input only ever reaches the database as bound parameters; the SQL text
is fixed by the builder.

Rules:
  search   -- trimmed; if non-empty, case-insensitive substring match on
              title OR author. LIKE wildcards in the term match literally.
  category -- case-insensitive equality.
  status   -- case-insensitive equality.
  All present filters are ANDed. Newest books first.
"""

from __future__ import annotations

from sqlalchemy import Select, Table, and_, func, or_, select

from catalogue.models import BookFilters

_LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    return (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def _present(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_conditions(books: Table, filters: BookFilters) -> list:
    """Return the WHERE clauses for the given filters (empty list = no filtering)."""
    conditions = []

    search = _present(filters.search)
    if search is not None:
        pattern = f"%{_escape_like(search.lower())}%"
        conditions.append(
            or_(
                func.lower(books.c.title).like(pattern, escape=_LIKE_ESCAPE),
                func.lower(books.c.author).like(pattern, escape=_LIKE_ESCAPE),
            )
        )

    category = _present(filters.category)
    if category is not None:
        conditions.append(func.lower(books.c.category) == category.lower())

    status = _present(filters.status)
    if status is not None:
        conditions.append(func.lower(books.c.status) == status.lower())

    return conditions


def build_book_query(books: Table, filters: BookFilters) -> Select:
    """Build the full catalogue search statement.

    Ties on created_at fall back to id so the order is stable when several
    books share a timestamp.
    """
    stmt = select(books)
    conditions = build_conditions(books, filters)
    if conditions:
        stmt = stmt.where(and_(*conditions))
    return stmt.order_by(books.c.created_at.desc(), books.c.id.desc())
