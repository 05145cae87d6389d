"""
api/routes/v1/books.py -- Catalogue routes.

Routes:
  GET    /books          -- search/filter the catalogue (public)
  GET    /books/{id}     -- single book (public)
  POST   /books          -- create (admin)
  PUT    /books/{id}     -- partial update (admin)
  DELETE /books/{id}     -- delete (admin)

Write routes depend on require_admin, which itself depends on
get_current_claims: a missing or bad token stops at 401 before the role check
can answer 403.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, Request

from api.models import BookCreate, BookListResponse, BookMutationResponse, BookResponse, BookUpdate, MessageResponse
from auth.dependencies import require_admin
from catalogue.models import BookFilters
from catalogue.store import CatalogueStore

router = APIRouter()

# Ids outside the 64-bit INTEGER column range are rejected as validation errors.
_BookId = Annotated[int, Path(ge=1, le=2**63 - 1)]


def _store(request: Request) -> CatalogueStore:
    return request.app.state.catalogue


# ---------------------------------------------------------------------------
# Public reads
# ---------------------------------------------------------------------------


@router.get("/books", response_model=BookListResponse)
def list_books(
    request: Request,
    search: Optional[str] = Query(default=None, max_length=200),
    category: Optional[str] = Query(default=None, max_length=100),
    status: Optional[str] = Query(default=None, max_length=20),
) -> BookListResponse:
    """List books, newest first, optionally filtered by search/category/status."""
    count, books = _store(request).search_books(BookFilters(search=search, category=category, status=status))
    return BookListResponse(count=count, books=[BookResponse.from_book(b) for b in books])


@router.get("/books/{book_id}", response_model=BookResponse)
def get_book(request: Request, book_id: _BookId) -> BookResponse:
    return BookResponse.from_book(_store(request).get_book(book_id))


# ---------------------------------------------------------------------------
# Admin writes
# ---------------------------------------------------------------------------


@router.post(
    "/books",
    response_model=BookMutationResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_book(request: Request, body: BookCreate) -> BookMutationResponse:
    """Add a book. title and author are required; status defaults to "available"."""
    book = _store(request).create_book(body.to_book())
    return BookMutationResponse(message="Book created successfully.", book=BookResponse.from_book(book))


@router.put(
    "/books/{book_id}",
    response_model=BookMutationResponse,
    dependencies=[Depends(require_admin)],
)
def update_book(request: Request, book_id: _BookId, body: BookUpdate) -> BookMutationResponse:
    """Partially update a book.

    Only fields present in the request body are changed; see
    CatalogueStore.update_book for the absent-vs-empty rules.
    """
    book = _store(request).update_book(book_id, body.model_dump(exclude_unset=True))
    return BookMutationResponse(message="Book updated successfully.", book=BookResponse.from_book(book))


@router.delete(
    "/books/{book_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_book(request: Request, book_id: _BookId) -> MessageResponse:
    _store(request).delete_book(book_id)
    return MessageResponse(message="Book deleted successfully.")
