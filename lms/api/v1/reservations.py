"""
Endpoints de Reservas (Reservation).

Contratos:
    - POST /reservations: Pede reserva (STUDENT)
    - GET /reservations: Lista reservas, mais recentes primeiro
    - GET /reservations/{id}: Detalhes da reserva
    - POST /reservations/{id}/approve: Aprova (LIBRARIAN)
    - POST /reservations/{id}/reject: Rejeita (LIBRARIAN)
    - POST /reservations/{id}/return: Registra devolução (dono ou LIBRARIAN)
    - DELETE /reservations/{id}: Cancela reserva pendente (dono)

Autorização:
    - STUDENT: vê apenas suas próprias reservas
    - LIBRARIAN: vê todas as reservas

Rate Limiting aplicado:
    - POST /reservations: 60 req/min (rate_limit_default)

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 401: Não autenticado
    - 403: Sem permissão
    - 404: Reserva ou livro não encontrado
    - 409: Duplicada, sem cópias ou transição inválida
    - 503: Banco indisponível
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from lms.core.deps import DbSession, CurrentUser, LibrarianUser, StudentUser
from lms.core.exceptions import PermissionDeniedError
from lms.core.rate_limit import rate_limit_default
from lms.models.enums import ReservationStatus
from lms.schemas.base import OperationResult, PaginatedResponse
from lms.schemas.reservation import ReservationCreate, ReservationDetail, ReservationRead
from lms.services.inventory import InventoryCoordinator

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.post(
    "",
    response_model=OperationResult[ReservationRead],
    status_code=status.HTTP_201_CREATED,
    summary="Reservar livro",
    description="Cria pedido de reserva PENDING para um livro com cópias disponíveis.",
)
async def create_reservation(
    data: ReservationCreate,
    db: DbSession,
    current_user: StudentUser,
    _: None = Depends(rate_limit_default),
) -> OperationResult[ReservationRead]:
    """
    Pede reserva para o estudante autenticado.

    Raises:
        404: Livro não encontrado
        409: Sem cópias disponíveis
        409: Já existe reserva pendente ou aprovada para o livro
    """
    reservation = await InventoryCoordinator(db).reserve(data.book_id, current_user)
    return OperationResult.ok(
        "Reserva solicitada com sucesso",
        ReservationRead.model_validate(reservation),
    )


@router.get(
    "",
    response_model=PaginatedResponse[ReservationDetail],
    summary="Listar reservas",
    description="STUDENT vê apenas as próprias; LIBRARIAN vê todas.",
)
async def list_reservations(
    db: DbSession,
    current_user: CurrentUser,
    user_id: UUID | None = Query(None, description="Filtrar por usuário (apenas LIBRARIAN)"),
    book_id: UUID | None = Query(None, description="Filtrar por livro"),
    status_filter: ReservationStatus | None = Query(
        None,
        alias="status",
        description="Filtro por status: pending, approved, rejected, borrowed, returned",
    ),
    page: int = Query(1, ge=1, description="Número da página"),
    page_size: int = Query(20, ge=1, le=100, description="Itens por página"),
) -> PaginatedResponse[ReservationDetail]:
    """
    Lista reservas da mais recente para a mais antiga.

    Reservas de livros removidos do catálogo não aparecem.
    """
    effective_user_id = user_id if current_user.is_librarian else current_user.id

    listing = InventoryCoordinator(db).ledger.list(
        user_id=effective_user_id,
        status=status_filter,
        book_id=book_id,
    )

    start = (page - 1) * page_size
    items = []
    total = 0
    async for reservation, book in listing:
        if start <= total < start + page_size:
            items.append(ReservationDetail.from_reservation(reservation, book))
        total += 1

    return PaginatedResponse.create(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/{reservation_id}",
    response_model=ReservationRead,
    summary="Detalhes da reserva",
)
async def get_reservation(
    reservation_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> ReservationRead:
    """
    Raises:
        403: Reserva de outro usuário (para STUDENT)
        404: Reserva não encontrada
    """
    reservation = await InventoryCoordinator(db).ledger.get(reservation_id)

    if not current_user.is_librarian and reservation.user_id != current_user.id:
        raise PermissionDeniedError("Você não tem permissão para ver esta reserva")

    return ReservationRead.model_validate(reservation)


@router.post(
    "/{reservation_id}/approve",
    response_model=OperationResult[ReservationRead],
    summary="Aprovar reserva",
    description="PENDING -> APPROVED com prazo de devolução. **Requer papel librarian.**",
)
async def approve_reservation(
    reservation_id: UUID,
    db: DbSession,
    librarian: LibrarianUser,
) -> OperationResult[ReservationRead]:
    reservation = await InventoryCoordinator(db).approve(reservation_id)
    return OperationResult.ok(
        "Reserva aprovada",
        ReservationRead.model_validate(reservation),
    )


@router.post(
    "/{reservation_id}/reject",
    response_model=OperationResult[ReservationRead],
    summary="Rejeitar reserva",
    description="PENDING -> REJECTED. **Requer papel librarian.**",
)
async def reject_reservation(
    reservation_id: UUID,
    db: DbSession,
    librarian: LibrarianUser,
) -> OperationResult[ReservationRead]:
    reservation = await InventoryCoordinator(db).reject(reservation_id)
    return OperationResult.ok(
        "Reserva rejeitada",
        ReservationRead.model_validate(reservation),
    )


@router.post(
    "/{reservation_id}/return",
    response_model=OperationResult[ReservationRead],
    summary="Devolver livro",
    description="APPROVED -> RETURNED e +1 cópia disponível.",
)
async def return_book(
    reservation_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> OperationResult[ReservationRead]:
    """
    Registra devolução.

    Se o crédito da cópia falhar, a reserva continua APPROVED e a operação
    inteira falha; o usuário pode tentar novamente.
    """
    reservation = await InventoryCoordinator(db).return_book(reservation_id, current_user)
    return OperationResult.ok(
        "Livro devolvido com sucesso",
        ReservationRead.model_validate(reservation),
    )


@router.delete(
    "/{reservation_id}",
    response_model=OperationResult[None],
    summary="Cancelar reserva",
    description="Remove uma reserva PENDING do próprio usuário.",
)
async def cancel_reservation(
    reservation_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> OperationResult[None]:
    await InventoryCoordinator(db).cancel(reservation_id, current_user)
    return OperationResult.ok("Reserva cancelada")
