"""
Model de usuário do sistema.
"""

from typing import Optional

from sqlalchemy import String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from lms.db.session import Base
from lms.models.base import UUIDMixin, TimestampMixin
from lms.models.enums import UserRole


class User(Base, UUIDMixin, TimestampMixin):
    """
    Usuário do sistema de biblioteca.

    Attributes:
        id: UUID único do usuário
        name: Nome completo
        email: Email único (usado como login)
        password_hash: Hash bcrypt da senha
        role: STUDENT ou LIBRARIAN
        student_id: Matrícula (apenas estudantes)
    """
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(
            UserRole,
            name="user_role",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=UserRole.STUDENT,
    )
    student_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.email}>"

    @property
    def is_librarian(self) -> bool:
        """Retorna True se o usuário é bibliotecário."""
        return self.role == UserRole.LIBRARIAN
