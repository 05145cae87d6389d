"""
tests/test_api_routes.py -- Integration tests for the auth and book routes.

These tests exercise the full stack: FastAPI routing -> access guard
dependencies -> UserStore/CatalogueStore -> response model serialization ->
exception handlers.

Fixtures used (from conftest.py):
  - api_client: (client, admin_token, student_token). The database is shared
    by every test in this module, so tests use their own emails and titles.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from jose import jwt

from core.config import get_settings

Client = tuple[TestClient, str, str]


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestRegisterAndLogin:
    def test_register_returns_user_and_token(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.post(
            "/api/v1/auth/register",
            json={"name": "Reg User", "email": "reg@example.com", "password": "pw123456"},
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["message"] == "User registered successfully."
        assert data["user"]["email"] == "reg@example.com"
        assert data["user"]["role"] == "student"
        assert "password_hash" not in data["user"]
        assert data["token"]
        assert resp.headers["Cache-Control"] == "no-store"

    def test_register_then_login_same_id(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        reg = client.post(
            "/api/v1/auth/register",
            json={"name": "Loop", "email": "loop@example.com", "password": "pw123456"},
        ).json()
        resp = client.post("/api/v1/auth/login", json={"email": "loop@example.com", "password": "pw123456"})
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["message"] == "Login successful."
        assert data["user"]["id"] == reg["user"]["id"]

        me = client.get("/api/v1/auth/me", headers=_bearer(data["token"]))
        assert me.status_code == 200
        assert me.json()["id"] == reg["user"]["id"]

    def test_register_duplicate_email(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        body = {"name": "Dup", "email": "dup@example.com", "password": "pw123456"}
        assert client.post("/api/v1/auth/register", json=body).status_code == 201
        resp = client.post("/api/v1/auth/register", json={**body, "name": "Other", "password": "different"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "conflict"
        assert resp.json()["message"] == "A user with this email already exists."

    def test_register_missing_fields(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.post("/api/v1/auth/register", json={"email": "nofields@example.com"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Name, email, and password are required."

    def test_register_admin_role(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.post(
            "/api/v1/auth/register",
            json={"name": "Boss", "email": "boss@example.com", "password": "pw123456", "role": "admin"},
        )
        assert resp.status_code == 201
        assert resp.json()["user"]["role"] == "admin"

    def test_register_multibyte_password_over_72_bytes(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.post(
            "/api/v1/auth/register",
            json={"name": "Wide", "email": "wide@example.com", "password": "密" * 30},
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "validation_error"
        assert "72 bytes" in resp.json()["message"]

    def test_validation_error_does_not_echo_password(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        password = "Sup3rSecretPass-" * 5
        resp = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": password})
        assert resp.status_code == 400
        assert resp.json()["code"] == "validation_error"
        assert "Sup3rSecretPass" not in resp.text

    def test_login_wrong_password(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "wrong"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid email or password.", "code": "bad_credentials"}

    def test_login_unknown_email_same_error(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.post("/api/v1/auth/login", json={"email": "ghost@example.com", "password": "wrong"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid email or password."

    def test_login_seeded_admin(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "adminpass123"})
        assert resp.status_code == 200
        assert resp.json()["user"]["role"] == "admin"


class TestAccessGuard:
    def test_missing_header(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.post("/api/v1/books", json={"title": "T", "author": "A"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "No token provided. Authorization denied."

    def test_malformed_header(self, api_client: Client) -> None:
        client, admin, _student = api_client
        resp = client.post("/api/v1/books", json={"title": "T", "author": "A"}, headers={"Authorization": admin})
        assert resp.status_code == 401

    def test_invalid_token(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.delete("/api/v1/books/1", headers=_bearer("garbage"))
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid or expired token."

    def test_expired_token(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        past = datetime.now(timezone.utc) - timedelta(days=8)
        expired = jwt.encode(
            {"id": 1, "role": "admin", "iat": past, "exp": past + timedelta(days=7)},
            get_settings().secret_key,
            algorithm="HS256",
        )
        resp = client.post("/api/v1/books", json={"title": "T", "author": "A"}, headers=_bearer(expired))
        assert resp.status_code == 401

    def test_student_forbidden_on_writes(self, api_client: Client) -> None:
        client, _admin, student = api_client
        headers = _bearer(student)
        assert client.post("/api/v1/books", json={"title": "T", "author": "A"}, headers=headers).status_code == 403
        assert client.put("/api/v1/books/1", json={"title": "X"}, headers=headers).status_code == 403
        resp = client.delete("/api/v1/books/1", headers=headers)
        assert resp.status_code == 403
        assert resp.json()["message"] == "Admin access required."

    def test_me_requires_token(self, api_client: Client) -> None:
        client, _admin, student = api_client
        assert client.get("/api/v1/auth/me").status_code == 401
        resp = client.get("/api/v1/auth/me", headers=_bearer(student))
        assert resp.status_code == 200
        assert resp.json()["role"] == "student"

    def test_public_reads_need_no_token(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        assert client.get("/api/v1/books").status_code == 200


class TestBookRoutes:
    def test_crud_flow(self, api_client: Client) -> None:
        client, admin, _student = api_client
        headers = _bearer(admin)

        created = client.post(
            "/api/v1/books",
            json={"title": "Crud Book", "author": "Route Tester", "category": "Testing"},
            headers=headers,
        )
        assert created.status_code == 201, created.text
        assert created.json()["message"] == "Book created successfully."
        book = created.json()["book"]
        assert book["status"] == "available"

        fetched = client.get(f"/api/v1/books/{book['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == book

        updated = client.put(f"/api/v1/books/{book['id']}", json={"status": "borrowed"}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["message"] == "Book updated successfully."
        assert updated.json()["book"]["status"] == "borrowed"
        assert updated.json()["book"]["title"] == "Crud Book"

        deleted = client.delete(f"/api/v1/books/{book['id']}", headers=headers)
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Book deleted successfully."}

        assert client.get(f"/api/v1/books/{book['id']}").status_code == 404
        again = client.delete(f"/api/v1/books/{book['id']}", headers=headers)
        assert again.status_code == 404
        assert again.json()["message"] == "Book not found."

    def test_create_requires_title(self, api_client: Client) -> None:
        client, admin, _student = api_client
        resp = client.post("/api/v1/books", json={"title": "   ", "author": "A"}, headers=_bearer(admin))
        assert resp.status_code == 400
        assert resp.json()["message"] == "Title and author are required."

    def test_update_explicit_empty_title_is_kept(self, api_client: Client) -> None:
        client, admin, _student = api_client
        headers = _bearer(admin)
        book = client.post("/api/v1/books", json={"title": "Blank Me", "author": "A"}, headers=headers).json()["book"]
        resp = client.put(f"/api/v1/books/{book['id']}", json={"title": ""}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["book"]["title"] == ""
        assert resp.json()["book"]["author"] == "A"

    def test_update_missing_book(self, api_client: Client) -> None:
        client, admin, _student = api_client
        resp = client.put("/api/v1/books/987654", json={"title": "Ghost"}, headers=_bearer(admin))
        assert resp.status_code == 404

    def test_update_missing_book_with_bad_status_is_404(self, api_client: Client) -> None:
        client, admin, _student = api_client
        resp = client.put("/api/v1/books/987654", json={"status": "lost"}, headers=_bearer(admin))
        assert resp.status_code == 404
        assert resp.json()["code"] == "not_found"

    def test_out_of_range_id_is_a_validation_error(self, api_client: Client) -> None:
        client, admin, _student = api_client
        huge = "/api/v1/books/99999999999999999999"
        responses = [
            client.get(huge),
            client.put(huge, json={"title": "X"}, headers=_bearer(admin)),
            client.delete(huge, headers=_bearer(admin)),
            client.get("/api/v1/books/0"),
        ]
        for resp in responses:
            assert resp.status_code == 400, resp.text
            assert resp.json()["code"] == "validation_error"

    def test_get_missing_book(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.get("/api/v1/books/987654")
        assert resp.status_code == 404
        assert resp.json()["code"] == "not_found"

    def test_non_numeric_id_is_a_validation_error(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.get("/api/v1/books/abc")
        assert resp.status_code == 400
        assert resp.json()["code"] == "validation_error"

    def test_list_filters(self, api_client: Client) -> None:
        client, admin, _student = api_client
        headers = _bearer(admin)
        client.post(
            "/api/v1/books",
            json={"title": "Filterable Dune", "author": "Herbert", "category": "FilterSciFi", "status": "available"},
            headers=headers,
        )
        client.post(
            "/api/v1/books",
            json={"title": "Filterable Emma", "author": "Austen", "category": "FilterClassic", "status": "borrowed"},
            headers=headers,
        )

        resp = client.get("/api/v1/books", params={"search": "filterable"})
        data = resp.json()
        assert resp.status_code == 200
        assert data["count"] == 2
        assert [b["title"] for b in data["books"]] == ["Filterable Emma", "Filterable Dune"]

        data = client.get("/api/v1/books", params={"category": "filterclassic"}).json()
        assert [b["title"] for b in data["books"]] == ["Filterable Emma"]

        data = client.get("/api/v1/books", params={"search": "filterable", "status": "available"}).json()
        assert data["count"] == 1
        assert data["books"][0]["title"] == "Filterable Dune"


class TestMisc:
    def test_root(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["message"] == "Digital Library Catalogue API is running"

    def test_unknown_route_uses_error_body(self, api_client: Client) -> None:
        client, _admin, _student = api_client
        resp = client.get("/api/v1/nope")
        assert resp.status_code == 404
        assert "message" in resp.json()
