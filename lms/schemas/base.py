"""
Schemas base reutilizáveis em toda a aplicação.
"""

from datetime import datetime
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Schema base com configurações padrão."""
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )


class TimestampSchema(BaseSchema):
    """Schema com timestamps."""
    created_at: datetime
    updated_at: datetime


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Resposta paginada genérica.

    Uso nos endpoints:
        @router.get("/books", response_model=PaginatedResponse[BookRead])
        async def list_books(...) -> PaginatedResponse[BookRead]:
            ...
    """
    items: List[T]
    total: int
    page: int
    page_size: int
    pages: int

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def create(
        cls,
        items: List[T],
        total: int,
        page: int,
        page_size: int,
    ) -> "PaginatedResponse[T]":
        """Factory method para criar resposta paginada."""
        pages = (total + page_size - 1) // page_size if page_size > 0 else 0
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            pages=pages,
        )


class OperationResult(BaseModel, Generic[T]):
    """
    Resultado de uma operação de escrita.

    A camada de apresentação só precisa olhar `success` e exibir `message`.
    Falhas usam o mesmo formato via ErrorResponse (success=False).
    """
    success: bool = True
    message: str
    data: T | None = None

    @classmethod
    def ok(cls, message: str, data: T | None = None) -> "OperationResult[T]":
        return cls(success=True, message=message, data=data)


class ErrorResponse(BaseModel):
    """
    Resposta de falha devolvida pelos handlers registrados em lms.main.

    Exemplo:
        {"success": false, "error": "conflict",
         "message": "Você já possui uma reserva em aberto para este livro"}
    """
    success: bool = False
    error: str
    message: str
