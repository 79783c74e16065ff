"""
Schemas Pydantic para User.
"""

import re
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from lms.models.enums import UserRole
from lms.schemas.base import BaseSchema, TimestampSchema


class UserCreate(BaseSchema):
    """
    Schema para cadastro de estudante (sign-up).

    Validações:
        - name: 2-255 caracteres
        - email: formato válido
        - password: mínimo 8 chars, 1 maiúscula, 1 minúscula, 1 número
        - student_id: matrícula opcional
    """
    name: str = Field(..., min_length=2, max_length=255, examples=["John Doe"])
    email: EmailStr = Field(..., examples=["student@icp.edu"])
    password: str = Field(..., min_length=8, max_length=128, examples=["Student123!"])
    student_id: str | None = Field(None, max_length=64, examples=["CS2024001"])

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Valida complexidade da senha."""
        if not re.search(r"[A-Z]", v):
            raise ValueError("Senha deve conter pelo menos uma letra maiúscula")
        if not re.search(r"[a-z]", v):
            raise ValueError("Senha deve conter pelo menos uma letra minúscula")
        if not re.search(r"\d", v):
            raise ValueError("Senha deve conter pelo menos um número")
        return v


class UserRead(TimestampSchema):
    """
    Schema para leitura de usuário.

    Nunca expõe password_hash.
    """
    id: UUID
    name: str
    email: EmailStr
    role: UserRole
    student_id: str | None = None


class UserLogin(BaseSchema):
    """Schema para login."""
    email: EmailStr
    password: str


class TokenResponse(BaseSchema):
    """Resposta de autenticação com token JWT."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserWithToken(BaseSchema):
    """Usuário com token JWT (retorno do login)."""
    user: UserRead
    token: TokenResponse
