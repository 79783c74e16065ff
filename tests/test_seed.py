"""
Testes do script de seed.
"""

import pytest
from sqlalchemy import func, select

from lms.core.security import verify_password
from lms.db.seed import SAMPLE_BOOKS, create_librarian, create_sample_books
from lms.models.book import Book
from lms.models.enums import UserRole
from lms.models.user import User
from lms.repositories.user import UserRepository

pytestmark = pytest.mark.anyio


async def test_create_librarian_is_idempotent(test_db):
    await create_librarian(test_db)
    await create_librarian(test_db)

    librarian = await UserRepository(test_db).get_by_email("librarian@library.dev")
    assert librarian.role == UserRole.LIBRARIAN
    assert verify_password("Librarian123!", librarian.password_hash)
    total = (await test_db.execute(select(func.count(User.id)))).scalar_one()
    assert total == 1


async def test_sample_books_only_on_empty_catalog(test_db):
    await create_sample_books(test_db)
    await create_sample_books(test_db)

    total = (await test_db.execute(select(func.count(Book.id)))).scalar_one()
    assert total == len(SAMPLE_BOOKS)

    books = (await test_db.execute(select(Book))).scalars().all()
    assert all(0 <= b.available_copies <= b.total_copies for b in books)
