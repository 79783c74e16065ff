"""
Repository para operações de Reservation no banco de dados.
"""

from typing import Any, AsyncIterator
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lms.models.book import Book
from lms.models.enums import ReservationStatus, OPEN_RESERVATION_STATUSES
from lms.models.reservation import Reservation
from lms.repositories.base import BaseRepository


class ReservationRepository(BaseRepository[Reservation]):
    """Repository para operações CRUD de Reservation."""

    def __init__(self, db: AsyncSession):
        super().__init__(Reservation, db)

    async def get_open_by_user_and_book(
        self,
        user_id: UUID,
        book_id: UUID,
    ) -> Reservation | None:
        """
        Busca reserva PENDING ou APPROVED de um usuário para um livro.

        Usado para verificar duplicatas antes de criar nova reserva.
        """
        async with self._guard():
            result = await self.db.execute(
                select(Reservation)
                .where(
                    Reservation.user_id == user_id,
                    Reservation.book_id == book_id,
                    Reservation.status.in_(OPEN_RESERVATION_STATUSES),
                )
                .limit(1)
            )
            return result.scalars().first()

    async def compare_and_set_status(
        self,
        reservation_id: UUID,
        expected: ReservationStatus,
        new_status: ReservationStatus,
        **values: Any,
    ) -> bool:
        """
        Troca o status somente se o status atual ainda for `expected`.

        Returns:
            True se a reserva foi alterada; False se ela não existe mais ou
            se outro cliente mudou o status antes.
        """
        async with self._guard():
            result = await self.db.execute(
                update(Reservation)
                .where(
                    Reservation.id == reservation_id,
                    Reservation.status == expected,
                )
                .values(status=new_status, **values)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        return result.rowcount == 1

    async def delete_if_status(
        self,
        reservation_id: UUID,
        expected: ReservationStatus,
    ) -> bool:
        """Remove a reserva somente se o status atual for `expected`."""
        async with self._guard():
            result = await self.db.execute(
                delete(Reservation)
                .where(
                    Reservation.id == reservation_id,
                    Reservation.status == expected,
                )
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        return result.rowcount == 1

    async def iter_with_books(
        self,
        user_id: UUID | None = None,
        status: ReservationStatus | None = None,
        book_id: UUID | None = None,
    ) -> AsyncIterator[tuple[Reservation, Book]]:
        """
        Percorre reservas com seus livros, da mais recente para a mais antiga.

        O INNER JOIN descarta reservas cujo livro foi removido.
        """
        query = (
            select(Reservation, Book)
            .join(Book, Book.id == Reservation.book_id)
            .order_by(Reservation.reserved_at.desc(), Reservation.id)
            .execution_options(populate_existing=True)
        )

        if user_id:
            query = query.where(Reservation.user_id == user_id)

        if status:
            query = query.where(Reservation.status == status)

        if book_id:
            query = query.where(Reservation.book_id == book_id)

        async with self._guard():
            result = await self.db.execute(query)
            rows = result.tuples().all()

        for reservation, book in rows:
            yield reservation, book

    async def count_by_book(self, status: ReservationStatus) -> dict[UUID, int]:
        """Conta reservas em um status, agrupadas por livro."""
        async with self._guard():
            result = await self.db.execute(
                select(Reservation.book_id, func.count(Reservation.id))
                .where(Reservation.status == status)
                .group_by(Reservation.book_id)
            )
            return {book_id: count for book_id, count in result.all()}
