"""
Service do catálogo de livros (Catalog Store).

Regras de negócio:
    - Cadastro exige total_copies >= 1 e 0 <= available_copies <= total_copies
    - Atualização aplica só os campos informados e revalida o invariante
    - Remoção não afeta reservas existentes
    - Ajuste de disponibilidade é relativo (+1/-1) e atômico no banco
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lms.core.cache import cache_service
from lms.core.exceptions import ConflictError, NotFoundError, ValidationError
from lms.models.book import Book
from lms.repositories.book import BookRepository
from lms.schemas.book import BookAvailability, BookCreate, BookUpdate

logger = logging.getLogger(__name__)

# Campos obrigatórios que não aceitam null numa atualização parcial
NON_NULLABLE_FIELDS = frozenset({
    "title",
    "author",
    "isbn",
    "category",
    "total_copies",
    "available_copies",
})


def validate_copy_counts(total_copies: int, available_copies: int) -> None:
    """
    Valida o invariante 0 <= available_copies <= total_copies.

    Raises:
        ValidationError: Contagens fora da faixa
    """
    if total_copies < 0:
        raise ValidationError("total_copies não pode ser negativo")
    if available_copies < 0:
        raise ValidationError("available_copies não pode ser negativo")
    if available_copies > total_copies:
        raise ValidationError("available_copies não pode ser maior que total_copies")


class CatalogService:
    """Service para operações do catálogo."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = BookRepository(db)

    async def get(self, book_id: UUID) -> Book:
        """
        Busca livro por ID, relendo o estado do banco.

        Raises:
            NotFoundError: Livro não encontrado
        """
        book = await self.repo.get_by_id(book_id)
        if not book:
            raise NotFoundError("Livro não encontrado")
        return book

    async def search(
        self,
        query: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Book], int]:
        """Busca por substring em título, autor ou categoria."""
        return await self.repo.search(
            query=query.strip() if query else None,
            page=page,
            page_size=page_size,
        )

    async def add(self, data: BookCreate) -> Book:
        """
        Cadastra um livro.

        Raises:
            ValidationError: total_copies < 1 ou contagens inconsistentes
        """
        if data.total_copies < 1:
            raise ValidationError("total_copies deve ser pelo menos 1")
        validate_copy_counts(data.total_copies, data.available_copies)

        book = await self.repo.create(**data.model_dump())
        logger.info(f"Livro cadastrado: {book.id} ({book.title})")
        return book

    async def update(self, book_id: UUID, data: BookUpdate) -> Book:
        """
        Atualiza apenas os campos enviados.

        Raises:
            NotFoundError: Livro não encontrado
            ValidationError: Campo obrigatório nulo ou invariante violado
        """
        fields: dict[str, Any] = data.model_dump(exclude_unset=True)

        null_fields = sorted(k for k, v in fields.items() if v is None and k in NON_NULLABLE_FIELDS)
        if null_fields:
            raise ValidationError(f"Campos não podem ser nulos: {', '.join(null_fields)}")

        book = await self.get(book_id)

        validate_copy_counts(
            fields.get("total_copies", book.total_copies),
            fields.get("available_copies", book.available_copies),
        )

        book = await self.repo.update(book, **fields)
        await cache_service.invalidate_availability(book_id)
        logger.info(f"Livro atualizado: {book_id} campos={sorted(fields)}")
        return book

    async def delete(self, book_id: UUID) -> None:
        """
        Remove um livro. Reservas que apontam para ele são mantidas.

        Raises:
            NotFoundError: Livro não encontrado
        """
        book = await self.get(book_id)
        await self.repo.delete(book)
        await cache_service.invalidate_availability(book_id)
        logger.info(f"Livro removido: {book_id}")

    async def increment_available(self, book_id: UUID) -> Book:
        """
        Devolve uma cópia ao estoque disponível.

        Raises:
            NotFoundError: Livro não encontrado
            ConflictError: available_copies já é igual a total_copies
        """
        return await self._adjust(book_id, +1)

    async def decrement_available(self, book_id: UUID) -> Book:
        """
        Retira uma cópia do estoque disponível.

        Raises:
            NotFoundError: Livro não encontrado
            ConflictError: available_copies já é zero
        """
        return await self._adjust(book_id, -1)

    async def availability(self, book_id: UUID) -> BookAvailability:
        """
        Disponibilidade para novas reservas, servida pelo cache quando possível.

        Raises:
            NotFoundError: Livro não encontrado
        """

        async def load() -> dict[str, Any]:
            book = await self.get(book_id)
            return BookAvailability(
                book_id=book.id,
                available=book.is_available,
                reason=None if book.is_available else "Todas as cópias estão emprestadas",
                available_copies=book.available_copies,
                total_copies=book.total_copies,
            ).model_dump(mode="json")

        data = await cache_service.get_or_load_availability(book_id, load)
        return BookAvailability.model_validate(data)

    async def _adjust(self, book_id: UUID, delta: int) -> Book:
        changed = await self.repo.adjust_available(book_id, delta)
        await cache_service.invalidate_availability(book_id)

        book = await self.get(book_id)
        if not changed:
            if delta > 0:
                raise ConflictError("Todas as cópias deste livro já estão disponíveis")
            raise ConflictError("Não há cópias disponíveis deste livro")
        return book
