"""
Model de livro do catálogo.
"""

from typing import Optional

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lms.db.session import Base
from lms.models.base import UUIDMixin, TimestampMixin


class Book(Base, UUIDMixin, TimestampMixin):
    """
    Título do catálogo com contagem de cópias físicas.

    available_copies é um contador armazenado de forma independente das
    reservas; só é alterado pelo bibliotecário (edição) ou por ajuste
    relativo atômico (aprovação e devolução).

    Attributes:
        id: UUID único do livro
        title: Título
        author: Autor (texto livre)
        isbn: ISBN (opcional)
        category: Categoria (opcional)
        total_copies: Total de cópias físicas
        available_copies: Cópias não emprestadas, 0 <= x <= total_copies
        description: Descrição (opcional)
        published_year: Ano de publicação (opcional)
    """
    __tablename__ = "books"

    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    isbn: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    category: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    total_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    published_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        CheckConstraint("total_copies >= 0", name="ck_books_total_copies_non_negative"),
        CheckConstraint("available_copies >= 0", name="ck_books_available_copies_non_negative"),
        CheckConstraint(
            "available_copies <= total_copies",
            name="ck_books_available_within_total",
        ),
    )

    def __repr__(self) -> str:
        return f"<Book {self.title} ({self.available_copies}/{self.total_copies})>"

    @property
    def is_available(self) -> bool:
        """Retorna True se há ao menos uma cópia disponível."""
        return self.available_copies > 0
