"""
Endpoints do catálogo (Book).

Contratos:
    - GET /books: Busca paginada por título, autor ou categoria
    - POST /books: Cadastra livro (somente LIBRARIAN)
    - GET /books/{id}: Detalhes do livro
    - PATCH /books/{id}: Atualização parcial (somente LIBRARIAN)
    - DELETE /books/{id}: Remove livro (somente LIBRARIAN)
    - GET /books/{id}/availability: Disponibilidade (cache Redis)

Status codes:
    - 200/201: Sucesso
    - 401: Não autenticado
    - 403: Sem permissão
    - 404: Livro não encontrado
    - 409: Conflito com o estado atual
    - 422: Dados inválidos
"""

from uuid import UUID

from fastapi import APIRouter, Query, status

from lms.core.deps import DbSession, CurrentUser, LibrarianUser
from lms.schemas.base import OperationResult, PaginatedResponse
from lms.schemas.book import BookAvailability, BookCreate, BookRead, BookUpdate
from lms.services.catalog import CatalogService

router = APIRouter(prefix="/books", tags=["Books"])


@router.get(
    "",
    response_model=PaginatedResponse[BookRead],
    summary="Buscar livros",
    description="Busca por substring (sem distinção de maiúsculas) em título, autor ou categoria.",
)
async def list_books(
    db: DbSession,
    current_user: CurrentUser,
    q: str | None = Query(None, max_length=200, description="Texto buscado"),
    page: int = Query(1, ge=1, description="Número da página"),
    page_size: int = Query(20, ge=1, le=100, description="Itens por página"),
) -> PaginatedResponse[BookRead]:
    books, total = await CatalogService(db).search(query=q, page=page, page_size=page_size)

    return PaginatedResponse.create(
        items=[BookRead.model_validate(b) for b in books],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post(
    "",
    response_model=OperationResult[BookRead],
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar livro",
    description="Cadastra um livro no catálogo. **Requer papel librarian.**",
)
async def create_book(
    data: BookCreate,
    db: DbSession,
    librarian: LibrarianUser,
) -> OperationResult[BookRead]:
    """
    Cadastra livro.

    Raises:
        422: total_copies < 1 ou available_copies fora de 0..total_copies
    """
    book = await CatalogService(db).add(data)
    return OperationResult.ok("Livro cadastrado com sucesso", BookRead.model_validate(book))


@router.get(
    "/{book_id}",
    response_model=BookRead,
    summary="Detalhes do livro",
)
async def get_book(
    book_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> BookRead:
    book = await CatalogService(db).get(book_id)
    return BookRead.model_validate(book)


@router.patch(
    "/{book_id}",
    response_model=OperationResult[BookRead],
    summary="Atualizar livro",
    description="Aplica somente os campos enviados. **Requer papel librarian.**",
)
async def update_book(
    book_id: UUID,
    data: BookUpdate,
    db: DbSession,
    librarian: LibrarianUser,
) -> OperationResult[BookRead]:
    """
    Atualização parcial.

    Raises:
        404: Livro não encontrado
        422: Resultado violaria 0 <= available_copies <= total_copies
    """
    book = await CatalogService(db).update(book_id, data)
    return OperationResult.ok("Livro atualizado com sucesso", BookRead.model_validate(book))


@router.delete(
    "/{book_id}",
    response_model=OperationResult[None],
    summary="Remover livro",
    description="Remove o livro. Reservas existentes são mantidas e deixam de aparecer nas listagens.",
)
async def delete_book(
    book_id: UUID,
    db: DbSession,
    librarian: LibrarianUser,
) -> OperationResult[None]:
    await CatalogService(db).delete(book_id)
    return OperationResult.ok("Livro removido com sucesso")


@router.get(
    "/{book_id}/availability",
    response_model=BookAvailability,
    summary="Verificar disponibilidade",
)
async def check_availability(
    book_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> BookAvailability:
    """
    Disponibilidade do livro para novas reservas.

    Resposta pode vir do cache por até CACHE_AVAILABILITY_TTL_SECONDS;
    escritas no livro invalidam a entrada.
    """
    return await CatalogService(db).availability(book_id)
