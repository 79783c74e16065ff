"""
Model de reserva de livros.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Uuid, Enum as SQLEnum, text
from sqlalchemy.orm import Mapped, mapped_column

from lms.db.session import Base
from lms.models.base import UUIDMixin, TimestampMixin
from lms.models.enums import ReservationStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Reservation(Base, UUIDMixin, TimestampMixin):
    """
    Pedido de um estudante por um livro do catálogo.

    Fluxo de estados:
        1. PENDING: Pedido criado pelo estudante
        2. APPROVED: Aprovado pelo bibliotecário, com due_date
        3. REJECTED: Rejeitado pelo bibliotecário
        4. RETURNED: Livro devolvido

    Regras de negócio:
        - book_id não tem FK: remover um livro não remove suas reservas,
          e listagens ignoram reservas cujo livro não existe mais
        - Um usuário não pode ter duas reservas PENDING/APPROVED para o
          mesmo livro
        - Cancelamento remove o registro (só a partir de PENDING)

    Attributes:
        id: UUID único da reserva
        book_id: Livro reservado
        user_id: FK para o usuário que fez a reserva
        status: Status atual da reserva
        reserved_at: Data/hora do pedido (ordenação das listagens)
        due_date: Data limite de devolução (definida na aprovação)
    """
    __tablename__ = "reservations"

    book_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[ReservationStatus] = mapped_column(
        SQLEnum(
            ReservationStatus,
            name="reservation_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=ReservationStatus.PENDING,
    )
    reserved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Índices para queries frequentes
    __table_args__ = (
        Index("ix_reservations_user_id", "user_id"),
        Index("ix_reservations_book_id", "book_id"),
        Index("ix_reservations_status", "status"),
        # Listagens ordenadas do mais recente para o mais antigo
        Index("ix_reservations_reserved_at", "reserved_at"),
        # Verificação de pedido duplicado
        Index("ix_reservations_user_book_status", "user_id", "book_id", "status"),
        # No máximo uma reserva em aberto por usuário e livro
        Index(
            "uq_reservations_open_user_book",
            "user_id",
            "book_id",
            unique=True,
            postgresql_where=text("status IN ('pending', 'approved')"),
            sqlite_where=text("status IN ('pending', 'approved')"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Reservation {self.id} - {self.status.value}>"

    @property
    def can_be_cancelled(self) -> bool:
        """Retorna True se a reserva pode ser cancelada pelo requerente."""
        return self.status == ReservationStatus.PENDING
