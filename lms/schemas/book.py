"""
Schemas Pydantic para Book.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from lms.schemas.base import BaseSchema, TimestampSchema


def _validate_year(v: int | None) -> int | None:
    if v is not None and v > datetime.now().year:
        raise ValueError("Ano de publicação não pode ser no futuro")
    return v


class BookCreate(BaseSchema):
    """
    Schema para cadastro de livro.

    available_copies, quando omitido, assume total_copies.
    """
    title: str = Field(..., min_length=1, max_length=500, examples=["Clean Code"])
    author: str = Field(..., min_length=1, max_length=255, examples=["Robert C. Martin"])
    isbn: str = Field("", max_length=32, examples=["978-0132350884"])
    category: str = Field("", max_length=120, examples=["Software Engineering"])
    total_copies: int = Field(1, examples=[3])
    available_copies: int | None = Field(None, examples=[3])
    description: str | None = None
    published_year: int | None = Field(None, ge=1000, le=2100, examples=[2008])

    @field_validator("published_year")
    @classmethod
    def validate_year(cls, v: int | None) -> int | None:
        return _validate_year(v)

    @model_validator(mode="after")
    def default_available(self) -> "BookCreate":
        if self.available_copies is None:
            self.available_copies = self.total_copies
        return self


class BookUpdate(BaseSchema):
    """
    Schema para atualização parcial de livro.

    Só os campos presentes no corpo são aplicados (exclude_unset).
    """
    title: str | None = Field(None, min_length=1, max_length=500)
    author: str | None = Field(None, min_length=1, max_length=255)
    isbn: str | None = Field(None, max_length=32)
    category: str | None = Field(None, max_length=120)
    total_copies: int | None = None
    available_copies: int | None = None
    description: str | None = None
    published_year: int | None = Field(None, ge=1000, le=2100)

    @field_validator("published_year")
    @classmethod
    def validate_year(cls, v: int | None) -> int | None:
        return _validate_year(v)


class BookRead(TimestampSchema):
    """Schema para leitura de livro."""
    id: UUID
    title: str
    author: str
    isbn: str
    category: str
    total_copies: int
    available_copies: int
    description: str | None = None
    published_year: int | None = None


class BookAvailability(BaseSchema):
    """
    Disponibilidade de um livro para novas reservas.

    Campos:
        available: True se há cópia disponível
        reason: Motivo se não disponível
    """
    book_id: UUID
    available: bool
    reason: str | None = None
    available_copies: int
    total_copies: int
