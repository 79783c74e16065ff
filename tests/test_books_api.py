"""
Testes de integração dos endpoints do catálogo.
"""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.anyio

NEW_BOOK = {
    "title": "Introduction to Algorithms",
    "author": "Thomas H. Cormen",
    "isbn": "978-0262033848",
    "category": "Computer Science",
    "total_copies": 5,
    "published_year": 2009,
}


class TestCreateBook:

    async def test_librarian_creates_book(self, client: AsyncClient, librarian_headers):
        response = await client.post("/api/v1/books", json=NEW_BOOK, headers=librarian_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["title"] == NEW_BOOK["title"]
        assert body["data"]["available_copies"] == 5

    async def test_student_cannot_create_book(self, client: AsyncClient, student_headers):
        response = await client.post("/api/v1/books", json=NEW_BOOK, headers=student_headers)

        assert response.status_code == 403
        assert response.json() == {
            "success": False,
            "error": "forbidden",
            "message": "Acesso restrito ao papel librarian",
        }

    async def test_zero_copies_is_validation_error(self, client: AsyncClient, librarian_headers):
        response = await client.post(
            "/api/v1/books",
            json={**NEW_BOOK, "total_copies": 0},
            headers=librarian_headers,
        )

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "validation_error"

    async def test_available_above_total(self, client: AsyncClient, librarian_headers):
        response = await client.post(
            "/api/v1/books",
            json={**NEW_BOOK, "total_copies": 2, "available_copies": 3},
            headers=librarian_headers,
        )

        assert response.status_code == 422


class TestReadBooks:

    async def test_search_books(self, client: AsyncClient, make_book, student_headers):
        await make_book(title="Clean Code", author="Robert C. Martin")
        await make_book(title="Design Patterns", author="Gang of Four")

        response = await client.get(
            "/api/v1/books", params={"q": "martin"}, headers=student_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["items"][0]["title"] == "Clean Code"

    async def test_get_book(self, client: AsyncClient, book, student_headers):
        response = await client.get(f"/api/v1/books/{book.id}", headers=student_headers)

        assert response.status_code == 200
        assert response.json()["id"] == str(book.id)

    async def test_get_unknown_book(self, client: AsyncClient, student_headers):
        response = await client.get(f"/api/v1/books/{uuid.uuid4()}", headers=student_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    async def test_availability(self, client: AsyncClient, make_book, student_headers):
        book = await make_book(total_copies=2, available_copies=0)

        response = await client.get(
            f"/api/v1/books/{book.id}/availability", headers=student_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["available"] is False
        assert data["total_copies"] == 2


class TestUpdateAndDeleteBook:

    async def test_partial_update(self, client: AsyncClient, book, librarian_headers):
        response = await client.patch(
            f"/api/v1/books/{book.id}",
            json={"total_copies": 4},
            headers=librarian_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_copies"] == 4
        assert data["available_copies"] == 3
        assert data["title"] == book.title

    async def test_update_breaking_invariant(self, client: AsyncClient, book, librarian_headers):
        response = await client.patch(
            f"/api/v1/books/{book.id}",
            json={"available_copies": 10},
            headers=librarian_headers,
        )

        assert response.status_code == 422
        assert response.json()["success"] is False

    async def test_delete_book(self, client: AsyncClient, book, librarian_headers):
        response = await client.delete(f"/api/v1/books/{book.id}", headers=librarian_headers)

        assert response.status_code == 200
        assert response.json()["success"] is True

        again = await client.delete(f"/api/v1/books/{book.id}", headers=librarian_headers)
        assert again.status_code == 404
