"""
Schemas Pydantic para Reservation e auditoria de inventário.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from lms.models.enums import ReservationStatus
from lms.schemas.base import BaseSchema, TimestampSchema


class ReservationCreate(BaseSchema):
    """Schema para criação de reserva."""
    book_id: UUID


class ReservationRead(TimestampSchema):
    """Schema para leitura de reserva."""
    id: UUID
    book_id: UUID
    user_id: UUID
    status: ReservationStatus
    reserved_at: datetime
    due_date: datetime | None = None


class ReservationDetail(ReservationRead):
    """Reserva com dados resumidos do livro."""
    book_title: str
    book_author: str

    @classmethod
    def from_reservation(cls, reservation, book) -> "ReservationDetail":
        """Constrói a partir de um par (Reservation, Book)."""
        return cls(
            id=reservation.id,
            book_id=reservation.book_id,
            user_id=reservation.user_id,
            status=reservation.status,
            reserved_at=reservation.reserved_at,
            due_date=reservation.due_date,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
            book_title=book.title,
            book_author=book.author,
        )


class InventoryDiscrepancy(BaseSchema):
    """Livro cujo contador de cópias não bate com as reservas aprovadas."""
    book_id: UUID
    title: str
    total_copies: int
    available_copies: int
    approved_reservations: int
    expected_available: int


class InventoryAuditReport(BaseSchema):
    """Resultado da auditoria de inventário."""
    checked_books: int
    discrepancies: list[InventoryDiscrepancy] = Field(default_factory=list)
    decrement_on_approve: bool = Field(
        ...,
        description="Se False, a aprovação não consome cópias e a auditoria não se aplica",
    )
