"""
Repository para operações de Book no banco de dados.
"""

from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lms.models.book import Book
from lms.repositories.base import BaseRepository


class BookRepository(BaseRepository[Book]):
    """Repository para operações CRUD de Book e ajuste atômico de cópias."""

    def __init__(self, db: AsyncSession):
        super().__init__(Book, db)

    async def search(
        self,
        query: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Book], int]:
        """
        Busca livros por substring em título, autor ou categoria.

        Args:
            query: Texto buscado (case insensitive); vazio lista tudo
            page: Número da página
            page_size: Tamanho da página

        Returns:
            Tupla (lista de livros, total)
        """
        skip = (page - 1) * page_size

        statement = select(Book)
        if query:
            pattern = f"%{query}%"
            statement = statement.where(
                or_(
                    Book.title.ilike(pattern),
                    Book.author.ilike(pattern),
                    Book.category.ilike(pattern),
                )
            )

        async with self._guard():
            count_result = await self.db.execute(
                select(func.count()).select_from(statement.subquery())
            )
            total = count_result.scalar_one()

            result = await self.db.execute(
                statement
                .order_by(Book.title, Book.id)
                .offset(skip)
                .limit(page_size)
                .execution_options(populate_existing=True)
            )
            books = list(result.scalars().all())

        return books, total

    async def get_all(self) -> list[Book]:
        """Lista todo o catálogo ordenado por título."""
        async with self._guard():
            result = await self.db.execute(
                select(Book)
                .order_by(Book.title, Book.id)
                .execution_options(populate_existing=True)
            )
            return list(result.scalars().all())

    async def adjust_available(self, book_id: UUID, delta: int) -> bool:
        """
        Ajusta available_copies em +1 ou -1 com um único UPDATE.

        A condição do WHERE mantém 0 <= available_copies <= total_copies, de
        modo que duas chamadas concorrentes nunca perdem nem duplicam ajuste.

        Returns:
            True se a linha foi alterada; False se o livro não existe ou se
            o ajuste violaria o invariante.
        """
        if delta not in (1, -1):
            raise ValueError("delta deve ser +1 ou -1")

        guard = (
            Book.available_copies < Book.total_copies
            if delta > 0
            else Book.available_copies > 0
        )
        async with self._guard():
            result = await self.db.execute(
                update(Book)
                .where(Book.id == book_id, guard)
                .values(available_copies=Book.available_copies + delta)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        return result.rowcount == 1
