"""
Script de seed para criar o schema e os dados iniciais.

Uso:
    python -m lms.db.seed

Cria as tabelas, o bibliotecário (LIBRARIAN_EMAIL / LIBRARIAN_PASSWORD) e,
se o catálogo estiver vazio, os livros de exemplo.
"""

import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lms.core.config import get_settings
from lms.core.security import hash_password
from lms.db.session import async_session_factory, create_schema
from lms.models.book import Book
from lms.models.enums import UserRole
from lms.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()

SAMPLE_BOOKS = [
    {
        "title": "Introduction to Algorithms",
        "author": "Thomas H. Cormen",
        "isbn": "978-0262033848",
        "category": "Computer Science",
        "total_copies": 5,
        "available_copies": 5,
        "published_year": 2009,
    },
    {
        "title": "Clean Code",
        "author": "Robert C. Martin",
        "isbn": "978-0132350884",
        "category": "Software Engineering",
        "total_copies": 3,
        "available_copies": 3,
        "published_year": 2008,
    },
    {
        "title": "Data Structures and Algorithms",
        "author": "Alfred V. Aho",
        "isbn": "978-0201000238",
        "category": "Computer Science",
        "total_copies": 4,
        "available_copies": 4,
        "published_year": 1983,
    },
    {
        "title": "Design Patterns",
        "author": "Gang of Four",
        "isbn": "978-0201633612",
        "category": "Software Engineering",
        "total_copies": 2,
        "available_copies": 2,
        "published_year": 1994,
    },
]


async def create_librarian(db: AsyncSession) -> None:
    """Cria o bibliotecário se não existir."""
    result = await db.execute(
        select(User).where(User.email == settings.LIBRARIAN_EMAIL)
    )
    if result.scalar_one_or_none():
        logger.info(f"Bibliotecário já existe: {settings.LIBRARIAN_EMAIL}")
        return

    librarian = User(
        name="Bibliotecário",
        email=settings.LIBRARIAN_EMAIL,
        password_hash=hash_password(settings.LIBRARIAN_PASSWORD),
        role=UserRole.LIBRARIAN,
    )
    db.add(librarian)
    await db.commit()
    await db.refresh(librarian)

    logger.info(f"Bibliotecário criado: {settings.LIBRARIAN_EMAIL} (ID: {librarian.id})")


async def create_sample_books(db: AsyncSession) -> None:
    """Cadastra o catálogo de exemplo quando não há livros."""
    count = (await db.execute(select(func.count(Book.id)))).scalar_one()
    if count:
        logger.info(f"Catálogo já possui {count} livro(s); exemplos ignorados")
        return

    db.add_all(Book(**data) for data in SAMPLE_BOOKS)
    await db.commit()
    logger.info(f"{len(SAMPLE_BOOKS)} livros de exemplo cadastrados")


async def main() -> None:
    """Executa todos os seeds."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    logger.info("Criando tabelas...")
    await create_schema()

    async with async_session_factory() as db:
        await create_librarian(db)
        await create_sample_books(db)

    logger.info("Seeds concluídos!")


if __name__ == "__main__":
    asyncio.run(main())
