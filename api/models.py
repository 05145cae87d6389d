"""
API request and response models for the catalogue REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
catalogue/models.py, which own the internal domain representation. Route
handlers map between the two.

Request models keep every field Optional: "missing" and "empty" are reported
by the authenticator and the catalogue store as ValidationError with the same
messages the rest of the API uses, instead of Pydantic's generic error list.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import User
from catalogue.models import Book

# ---------------------------------------------------------------------------
# Auth -- requests
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/auth/register."""

    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=150)
    # Character cap only; the 72-byte bcrypt limit is checked in auth.service.
    password: Optional[str] = Field(default=None, max_length=72)
    role: Optional[str] = Field(default=None, max_length=20)


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/auth/login."""

    email: Optional[str] = Field(default=None, max_length=150)
    password: Optional[str] = Field(default=None, max_length=72)


# ---------------------------------------------------------------------------
# Auth -- responses
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password hash."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str
    role: str
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            created_at=user.created_at or "",
        )


class AuthResponse(BaseModel):
    """Response for register and login."""

    model_config = ConfigDict(frozen=True)

    message: str
    user: UserResponse
    token: str


class MeResponse(BaseModel):
    """Response for GET /api/v1/auth/me -- the verified token claims."""

    model_config = ConfigDict(frozen=True)

    id: int
    role: str
    expires_at: int


# ---------------------------------------------------------------------------
# Books -- requests
# ---------------------------------------------------------------------------


class BookCreate(BaseModel):
    """Request body for POST /api/v1/books."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, max_length=200)
    author: Optional[str] = Field(default=None, max_length=150)
    isbn: Optional[str] = Field(default=None, max_length=50)
    category: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: Optional[str] = Field(default=None, max_length=20)

    def to_book(self) -> Book:
        return Book(
            title=self.title or "",
            author=self.author or "",
            isbn=self.isbn,
            category=self.category,
            description=self.description,
            status=self.status or "",
        )


class BookUpdate(BaseModel):
    """Request body for PUT /api/v1/books/{id}.

    Route handlers call model_dump(exclude_unset=True) so fields the client
    did not send are left out entirely, while fields sent as "" or null are
    passed through to the store.
    """

    title: Optional[str] = Field(default=None, max_length=200)
    author: Optional[str] = Field(default=None, max_length=150)
    isbn: Optional[str] = Field(default=None, max_length=50)
    category: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: Optional[str] = Field(default=None, max_length=20)


# ---------------------------------------------------------------------------
# Books -- responses
# ---------------------------------------------------------------------------


class BookResponse(BaseModel):
    """A single catalogue record."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    author: str
    isbn: Optional[str]
    category: Optional[str]
    description: Optional[str]
    status: str
    created_at: str

    @classmethod
    def from_book(cls, book: Book) -> "BookResponse":
        """Factory Method -- the domain-to-wire mapping lives beside the wire model."""
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            isbn=book.isbn,
            category=book.category,
            description=book.description,
            status=book.status,
            created_at=book.created_at,
        )


class BookListResponse(BaseModel):
    """Response for GET /api/v1/books."""

    model_config = ConfigDict(frozen=True)

    count: int
    books: list[BookResponse]


class BookMutationResponse(BaseModel):
    """Response for POST and PUT /api/v1/books."""

    model_config = ConfigDict(frozen=True)

    message: str
    book: BookResponse


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Error body returned on every 4xx/5xx response.

    message is human-readable; code is stable and machine-readable.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    code: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
