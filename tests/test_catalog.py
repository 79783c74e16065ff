"""
Testes do catálogo (CatalogService) contra banco SQLite real.
"""

import asyncio
import uuid
from unittest.mock import patch

import pytest

from lms.core.exceptions import ConflictError, NotFoundError, ValidationError
from lms.schemas.book import BookCreate, BookUpdate
from lms.services.catalog import CatalogService, validate_copy_counts

pytestmark = pytest.mark.anyio


class TestValidateCopyCounts:
    """Invariante 0 <= available_copies <= total_copies."""

    def test_valid_counts(self):
        validate_copy_counts(3, 0)
        validate_copy_counts(3, 3)

    def test_available_greater_than_total(self):
        with pytest.raises(ValidationError):
            validate_copy_counts(2, 3)

    def test_negative_counts(self):
        with pytest.raises(ValidationError):
            validate_copy_counts(-1, 0)
        with pytest.raises(ValidationError):
            validate_copy_counts(2, -1)


class TestCatalogAdd:
    """Cadastro de livros."""

    async def test_add_defaults_available_to_total(self, test_db):
        """available_copies omitido assume total_copies."""
        book = await CatalogService(test_db).add(
            BookCreate(title="Clean Code", author="Robert C. Martin", total_copies=3)
        )

        assert book.id is not None
        assert book.total_copies == 3
        assert book.available_copies == 3
        assert book.isbn == ""
        assert book.category == ""

    async def test_add_with_explicit_available(self, test_db):
        book = await CatalogService(test_db).add(
            BookCreate(
                title="Design Patterns",
                author="Gang of Four",
                isbn="978-0201633612",
                category="Software Engineering",
                total_copies=2,
                available_copies=0,
            )
        )

        assert book.available_copies == 0
        assert book.is_available is False

    async def test_add_requires_at_least_one_copy(self, test_db):
        with pytest.raises(ValidationError):
            await CatalogService(test_db).add(
                BookCreate(title="Sem cópias", author="Autor", total_copies=0)
            )

    async def test_add_rejects_available_above_total(self, test_db):
        with pytest.raises(ValidationError):
            await CatalogService(test_db).add(
                BookCreate(title="Livro", author="Autor", total_copies=2, available_copies=5)
            )


class TestCatalogGetAndSearch:
    """Leitura e busca."""

    async def test_get_unknown_book(self, test_db):
        with pytest.raises(NotFoundError):
            await CatalogService(test_db).get(uuid.uuid4())

    async def test_search_matches_title_author_and_category(self, test_db, make_book):
        await make_book(title="Introduction to Algorithms", author="Thomas H. Cormen",
                        category="Computer Science")
        await make_book(title="Clean Code", author="Robert C. Martin",
                        category="Software Engineering")
        await make_book(title="Design Patterns", author="Gang of Four",
                        category="Software Engineering")
        service = CatalogService(test_db)

        by_title, _ = await service.search("algorithms")
        by_author, _ = await service.search("MARTIN")
        by_category, total = await service.search("software")

        assert [b.title for b in by_title] == ["Introduction to Algorithms"]
        assert [b.title for b in by_author] == ["Clean Code"]
        assert total == 2
        assert [b.title for b in by_category] == ["Clean Code", "Design Patterns"]

    async def test_search_empty_query_lists_everything(self, test_db, make_book):
        await make_book(title="B")
        await make_book(title="A")

        books, total = await CatalogService(test_db).search("  ")

        assert total == 2
        assert [b.title for b in books] == ["A", "B"]

    async def test_search_paginates(self, test_db, make_book):
        for title in ("A", "B", "C"):
            await make_book(title=title)

        books, total = await CatalogService(test_db).search(page=2, page_size=2)

        assert total == 3
        assert [b.title for b in books] == ["C"]


class TestCatalogUpdate:
    """Atualização parcial."""

    async def test_update_only_sent_fields(self, test_db, book):
        updated = await CatalogService(test_db).update(
            book.id, BookUpdate(title="Clean Code (2ª edição)")
        )

        assert updated.title == "Clean Code (2ª edição)"
        assert updated.author == "Robert C. Martin"
        assert updated.total_copies == 3

    async def test_update_clears_optional_field(self, test_db, make_book):
        book = await make_book(description="Um clássico")

        updated = await CatalogService(test_db).update(book.id, BookUpdate(description=None))

        assert updated.description is None

    async def test_update_rejects_null_required_field(self, test_db, book):
        with pytest.raises(ValidationError) as exc_info:
            await CatalogService(test_db).update(book.id, BookUpdate(title=None))

        assert "title" in exc_info.value.message

    async def test_update_revalidates_counts(self, test_db, book):
        """Reduzir total abaixo do disponível viola o invariante."""
        with pytest.raises(ValidationError):
            await CatalogService(test_db).update(book.id, BookUpdate(total_copies=1))

    async def test_update_unknown_book(self, test_db):
        with pytest.raises(NotFoundError):
            await CatalogService(test_db).update(uuid.uuid4(), BookUpdate(title="X"))

    async def test_update_invalidates_availability_cache(self, test_db, book):
        with patch("lms.services.catalog.cache_service.invalidate_availability") as invalidate:
            await CatalogService(test_db).update(book.id, BookUpdate(total_copies=5))

        invalidate.assert_awaited_once_with(book.id)


class TestCatalogDelete:

    async def test_delete_book(self, test_db, book):
        service = CatalogService(test_db)

        await service.delete(book.id)

        with pytest.raises(NotFoundError):
            await service.get(book.id)

    async def test_delete_unknown_book(self, test_db):
        with pytest.raises(NotFoundError):
            await CatalogService(test_db).delete(uuid.uuid4())


class TestAvailabilityAdjustments:
    """Ajustes relativos de available_copies."""

    async def test_decrement_and_increment(self, test_db, book):
        service = CatalogService(test_db)

        after_decrement = await service.decrement_available(book.id)
        assert after_decrement.available_copies == 2

        after_increment = await service.increment_available(book.id)
        assert after_increment.available_copies == 3

    async def test_decrement_at_zero_conflicts(self, test_db, make_book):
        book = await make_book(total_copies=2, available_copies=0)

        with pytest.raises(ConflictError):
            await CatalogService(test_db).decrement_available(book.id)

        assert (await CatalogService(test_db).get(book.id)).available_copies == 0

    async def test_increment_at_total_conflicts(self, test_db, book):
        with pytest.raises(ConflictError):
            await CatalogService(test_db).increment_available(book.id)

        assert (await CatalogService(test_db).get(book.id)).available_copies == 3

    async def test_adjust_unknown_book(self, test_db):
        with pytest.raises(NotFoundError):
            await CatalogService(test_db).increment_available(uuid.uuid4())

    async def test_concurrent_decrements_never_go_negative(
        self, session_factory, make_book
    ):
        """Cinco retiradas concorrentes sobre 3 cópias: 3 passam, 2 falham."""
        book = await make_book(total_copies=3)

        async def take():
            async with session_factory() as session:
                await CatalogService(session).decrement_available(book.id)

        results = await asyncio.gather(*(take() for _ in range(5)), return_exceptions=True)

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 2
        assert all(isinstance(f, ConflictError) for f in failures)

        async with session_factory() as session:
            assert (await CatalogService(session).get(book.id)).available_copies == 0


class TestAvailability:

    async def test_available_book(self, test_db, book):
        availability = await CatalogService(test_db).availability(book.id)

        assert availability.book_id == book.id
        assert availability.available is True
        assert availability.reason is None
        assert availability.available_copies == 3

    async def test_unavailable_book_has_reason(self, test_db, make_book):
        book = await make_book(total_copies=1, available_copies=0)

        availability = await CatalogService(test_db).availability(book.id)

        assert availability.available is False
        assert availability.reason

    async def test_availability_unknown_book(self, test_db):
        with pytest.raises(NotFoundError):
            await CatalogService(test_db).availability(uuid.uuid4())
