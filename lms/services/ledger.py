"""
Service do livro-razão de reservas (Reservation Ledger).

Máquina de estados (ver RESERVATION_TRANSITIONS):
    pending  --approve--> approved   (due_date = agora + LOAN_PERIOD_DAYS)
    pending  --reject-->  rejected
    pending  --cancel-->  (registro removido)
    approved --return-->  returned

rejected e returned são terminais. Nenhuma outra transição é aceita.
"""

import logging
from datetime import datetime
from typing import AsyncIterator
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lms.core.exceptions import ConflictError, InvalidTransitionError, NotFoundError
from lms.models.book import Book
from lms.models.enums import ReservationStatus, can_transition
from lms.models.reservation import Reservation
from lms.repositories.reservation import ReservationRepository

logger = logging.getLogger(__name__)


class ReservationListing:
    """
    Sequência assíncrona de reservas (com seus livros).

    A consulta só é executada quando a iteração começa, e cada novo
    `async for` consulta o banco de novo.
    """

    def __init__(
        self,
        repo: ReservationRepository,
        user_id: UUID | None = None,
        status: ReservationStatus | None = None,
        book_id: UUID | None = None,
    ):
        self._repo = repo
        self.user_id = user_id
        self.status = status
        self.book_id = book_id

    def __aiter__(self) -> AsyncIterator[tuple[Reservation, Book]]:
        return self._repo.iter_with_books(
            user_id=self.user_id,
            status=self.status,
            book_id=self.book_id,
        )

    async def all(self) -> list[tuple[Reservation, Book]]:
        """Materializa a listagem."""
        return [row async for row in self]


class ReservationLedger:
    """Service para operações sobre reservas individuais."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = ReservationRepository(db)

    async def get(self, reservation_id: UUID) -> Reservation:
        """
        Busca reserva por ID, relendo o estado do banco.

        Raises:
            NotFoundError: Reserva não encontrada
        """
        reservation = await self.repo.get_by_id(reservation_id)
        if not reservation:
            raise NotFoundError("Reserva não encontrada")
        return reservation

    async def find_open(self, book_id: UUID, user_id: UUID) -> Reservation | None:
        """Reserva PENDING/APPROVED do usuário para o livro, se houver."""
        return await self.repo.get_open_by_user_and_book(user_id, book_id)

    async def create(self, book_id: UUID, user_id: UUID) -> Reservation:
        """
        Cria reserva PENDING.

        Raises:
            ConflictError: Usuário já tem reserva PENDING/APPROVED para o livro
        """
        message = "Você já possui uma reserva em aberto para este livro"
        if await self.find_open(book_id, user_id):
            raise ConflictError(message)

        # Pedidos simultâneos passam juntos pela checagem acima; o índice
        # único uq_reservations_open_user_book barra o segundo insert
        try:
            reservation = await self.repo.create(
                book_id=book_id,
                user_id=user_id,
                status=ReservationStatus.PENDING,
            )
        except ConflictError as e:
            logger.warning(f"Pedido duplicado simultâneo: livro={book_id} usuário={user_id}")
            raise ConflictError(message) from e
        logger.info(f"Reserva criada: {reservation.id} livro={book_id} usuário={user_id}")
        return reservation

    async def set_status(
        self,
        reservation_id: UUID,
        new_status: ReservationStatus,
        due_date: datetime | None = None,
    ) -> Reservation:
        """
        Move a reserva para `new_status` se a transição for legal.

        A escrita só acontece se o status no banco ainda for o que foi lido;
        perder essa corrida também é uma transição inválida.

        Raises:
            NotFoundError: Reserva não encontrada
            InvalidTransitionError: Transição não permitida
        """
        reservation = await self.get(reservation_id)
        current = reservation.status

        if not can_transition(current, new_status):
            raise InvalidTransitionError(
                f"Reserva com status {current.value} não pode passar para {new_status.value}"
            )

        values = {"due_date": due_date} if due_date is not None else {}
        changed = await self.repo.compare_and_set_status(
            reservation_id,
            expected=current,
            new_status=new_status,
            **values,
        )
        if not changed:
            raise InvalidTransitionError(
                "O status da reserva foi alterado por outra operação. Atualize e tente novamente."
            )

        logger.info(f"Reserva {reservation_id}: {current.value} -> {new_status.value}")
        return await self.get(reservation_id)

    async def revert_status(
        self,
        reservation_id: UUID,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
    ) -> bool:
        """
        Desfaz uma transição já gravada (compensação).

        Não passa pela máquina de estados; só deve ser usado pelo
        coordenador para desfazer o passo que ele mesmo acabou de gravar.
        """
        return await self.repo.compare_and_set_status(
            reservation_id,
            expected=from_status,
            new_status=to_status,
        )

    async def delete(self, reservation_id: UUID) -> None:
        """
        Remove reserva PENDING (cancelamento).

        Raises:
            NotFoundError: Reserva não encontrada
            InvalidTransitionError: Reserva não está PENDING
        """
        reservation = await self.get(reservation_id)
        if not reservation.can_be_cancelled:
            raise InvalidTransitionError(
                f"Reserva com status {reservation.status.value} não pode ser cancelada"
            )

        if not await self.repo.delete_if_status(reservation_id, ReservationStatus.PENDING):
            raise InvalidTransitionError(
                "O status da reserva foi alterado por outra operação. Atualize e tente novamente."
            )
        logger.info(f"Reserva cancelada e removida: {reservation_id}")

    def list(
        self,
        user_id: UUID | None = None,
        status: ReservationStatus | None = None,
        book_id: UUID | None = None,
    ) -> ReservationListing:
        """Listagem preguiçosa, da reserva mais recente para a mais antiga."""
        return ReservationListing(self.repo, user_id=user_id, status=status, book_id=book_id)
