"""
Enums utilizados nos models da aplicação.
"""

import enum


class UserRole(str, enum.Enum):
    """Papéis de usuário no sistema."""
    STUDENT = "student"
    LIBRARIAN = "librarian"


class ReservationStatus(str, enum.Enum):
    """
    Status de uma reserva de livro.

    Fluxo:
        PENDING -> APPROVED (bibliotecário aprova, define due_date)
        PENDING -> REJECTED (bibliotecário rejeita)
        PENDING -> (removida) (estudante cancela)
        APPROVED -> RETURNED (livro devolvido)

    BORROWED faz parte do domínio persistido, mas nenhuma transição
    leva a ele nem sai dele.
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    BORROWED = "borrowed"
    RETURNED = "returned"


# Transições legais: status atual -> status alcançáveis
RESERVATION_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({
        ReservationStatus.APPROVED,
        ReservationStatus.REJECTED,
    }),
    ReservationStatus.APPROVED: frozenset({ReservationStatus.RETURNED}),
    ReservationStatus.REJECTED: frozenset(),
    ReservationStatus.BORROWED: frozenset(),
    ReservationStatus.RETURNED: frozenset(),
}

# Reservas que bloqueiam um novo pedido do mesmo usuário para o mesmo livro
OPEN_RESERVATION_STATUSES = (ReservationStatus.PENDING, ReservationStatus.APPROVED)


def can_transition(current: ReservationStatus, new: ReservationStatus) -> bool:
    """Retorna True se `new` é alcançável a partir de `current`."""
    return new in RESERVATION_TRANSITIONS.get(current, frozenset())
