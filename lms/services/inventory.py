"""
Coordenador de inventário (Inventory Coordinator).

Mantém Book.available_copies e Reservation.status consistentes, embora as
duas escritas não sejam transacionais entre si. Cada operação:
    1. relê o estado atual do banco
    2. valida as pré-condições
    3. grava o passo principal
    4. grava o passo dependente e, se ele falhar, compensa o passo principal

Uma queda do processo entre os passos 3 e 4 não é coberta pela
compensação; audit() aponta os livros cujo contador divergiu.
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lms.core.config import get_settings
from lms.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    LibraryError,
    PermissionDeniedError,
    UnavailableError,
)
from lms.models.enums import ReservationStatus
from lms.models.reservation import Reservation
from lms.models.user import User
from lms.schemas.reservation import InventoryAuditReport, InventoryDiscrepancy
from lms.services.catalog import CatalogService
from lms.services.ledger import ReservationLedger

logger = logging.getLogger(__name__)
settings = get_settings()


class InventoryCoordinator:
    """Service que aplica as regras que envolvem livro e reserva juntos."""

    def __init__(
        self,
        db: AsyncSession,
        decrement_on_approve: bool | None = None,
        loan_period_days: int | None = None,
    ):
        self.db = db
        self.catalog = CatalogService(db)
        self.ledger = ReservationLedger(db)
        self.decrement_on_approve = (
            settings.DECREMENT_ON_APPROVE
            if decrement_on_approve is None
            else decrement_on_approve
        )
        self.loan_period_days = loan_period_days or settings.LOAN_PERIOD_DAYS

    async def reserve(self, book_id: UUID, user: User) -> Reservation:
        """
        Cria pedido de reserva PENDING. Não consome cópia.

        Raises:
            NotFoundError: Livro não encontrado
            UnavailableError: Nenhuma cópia disponível
            ConflictError: Usuário já tem reserva em aberto para o livro
        """
        book = await self.catalog.get(book_id)
        if book.available_copies == 0:
            logger.warning(f"Reserva negada, sem cópias: livro={book_id} usuário={user.id}")
            raise UnavailableError("Não há cópias disponíveis deste livro")

        return await self.ledger.create(book_id, user.id)

    async def approve(self, reservation_id: UUID) -> Reservation:
        """
        Aprova reserva PENDING e define due_date.

        Com DECREMENT_ON_APPROVE, a cópia é retirada do estoque antes da
        mudança de status e devolvida se a mudança falhar.

        Raises:
            NotFoundError: Reserva ou livro não encontrado
            InvalidTransitionError: Reserva não está PENDING
            UnavailableError: Nenhuma cópia disponível para emprestar
        """
        reservation = await self.ledger.get(reservation_id)
        self._require_status(reservation, ReservationStatus.PENDING, "aprovada")

        due_date = datetime.now(timezone.utc) + timedelta(days=self.loan_period_days)

        if not self.decrement_on_approve:
            return await self.ledger.set_status(
                reservation_id,
                ReservationStatus.APPROVED,
                due_date=due_date,
            )

        try:
            await self.catalog.decrement_available(reservation.book_id)
        except ConflictError as e:
            logger.warning(f"Aprovação negada, sem cópias: reserva={reservation_id}")
            raise UnavailableError("Não há cópias disponíveis para aprovar esta reserva") from e

        try:
            return await self.ledger.set_status(
                reservation_id,
                ReservationStatus.APPROVED,
                due_date=due_date,
            )
        except LibraryError:
            logger.error(
                f"Falha ao aprovar reserva {reservation_id}; "
                f"devolvendo cópia ao livro {reservation.book_id}"
            )
            await self._compensate_increment(reservation)
            raise

    async def reject(self, reservation_id: UUID) -> Reservation:
        """
        Rejeita reserva PENDING. Sem efeito no estoque.

        Raises:
            NotFoundError: Reserva não encontrada
            InvalidTransitionError: Reserva não está PENDING
        """
        return await self.ledger.set_status(reservation_id, ReservationStatus.REJECTED)

    async def cancel(self, reservation_id: UUID, user: User) -> None:
        """
        Cancela (remove) reserva PENDING do próprio usuário.

        Raises:
            NotFoundError: Reserva não encontrada
            PermissionDeniedError: Reserva pertence a outro usuário
            InvalidTransitionError: Reserva não está PENDING
        """
        reservation = await self.ledger.get(reservation_id)
        if reservation.user_id != user.id:
            raise PermissionDeniedError("Você só pode cancelar suas próprias reservas")

        await self.ledger.delete(reservation_id)

    async def return_book(self, reservation_id: UUID, user: User) -> Reservation:
        """
        Registra devolução: APPROVED -> RETURNED e +1 cópia disponível.

        Se o incremento falhar, o status volta para APPROVED e a falha é
        propagada. A reserva nunca fica RETURNED com o estoque sem crédito.

        Raises:
            NotFoundError: Reserva ou livro não encontrado
            PermissionDeniedError: Usuário não é o requerente nem bibliotecário
            InvalidTransitionError: Reserva não está APPROVED
            ConflictError: Estoque já está cheio
            BackendUnavailableError: Falha no banco durante a operação
        """
        reservation = await self.ledger.get(reservation_id)
        if reservation.user_id != user.id and not user.is_librarian:
            raise PermissionDeniedError("Você só pode devolver suas próprias reservas")
        self._require_status(reservation, ReservationStatus.APPROVED, "devolvida")

        returned = await self.ledger.set_status(reservation_id, ReservationStatus.RETURNED)

        try:
            await self.catalog.increment_available(reservation.book_id)
        except LibraryError:
            logger.error(
                f"Falha ao creditar cópia do livro {reservation.book_id}; "
                f"revertendo reserva {reservation_id} para approved"
            )
            await self._compensate_return(reservation_id)
            raise

        return returned

    async def audit(self) -> InventoryAuditReport:
        """
        Compara available_copies com as reservas APPROVED de cada livro.

        Só faz sentido com DECREMENT_ON_APPROVE; caso contrário o relatório
        volta vazio e marcado como não aplicável.
        """
        books = await self.catalog.repo.get_all()
        if not self.decrement_on_approve:
            return InventoryAuditReport(
                checked_books=len(books),
                decrement_on_approve=False,
            )

        approved = await self.ledger.repo.count_by_book(ReservationStatus.APPROVED)

        discrepancies = []
        for book in books:
            on_loan = approved.get(book.id, 0)
            expected = book.total_copies - on_loan
            if expected != book.available_copies:
                discrepancies.append(
                    InventoryDiscrepancy(
                        book_id=book.id,
                        title=book.title,
                        total_copies=book.total_copies,
                        available_copies=book.available_copies,
                        approved_reservations=on_loan,
                        expected_available=expected,
                    )
                )

        if discrepancies:
            logger.warning(f"Auditoria encontrou {len(discrepancies)} livro(s) divergente(s)")

        return InventoryAuditReport(
            checked_books=len(books),
            discrepancies=discrepancies,
            decrement_on_approve=True,
        )

    def _require_status(
        self,
        reservation: Reservation,
        expected: ReservationStatus,
        action: str,
    ) -> None:
        if reservation.status != expected:
            raise InvalidTransitionError(
                f"Reserva com status {reservation.status.value} não pode ser {action}"
            )

    async def _compensate_return(self, reservation_id: UUID) -> None:
        try:
            reverted = await self.ledger.revert_status(
                reservation_id,
                from_status=ReservationStatus.RETURNED,
                to_status=ReservationStatus.APPROVED,
            )
        except LibraryError as e:
            logger.error(
                f"Compensação falhou: reserva {reservation_id} ficou returned "
                f"sem crédito de cópia ({e.message}). Reconciliar via auditoria."
            )
            return

        if not reverted:
            logger.error(
                f"Compensação não aplicada: reserva {reservation_id} não estava mais returned"
            )

    async def _compensate_increment(self, reservation: Reservation) -> None:
        try:
            await self.catalog.increment_available(reservation.book_id)
        except LibraryError as e:
            logger.error(
                f"Compensação falhou: cópia do livro {reservation.book_id} não foi "
                f"devolvida após falha na reserva {reservation.id} ({e.message}). "
                f"Reconciliar via auditoria."
            )
