"""
Service de autenticação (colaborador de identidade).

O núcleo de reservas só lê o usuário autenticado; cadastro e verificação de
credenciais ficam inteiramente aqui.
"""

import logging

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from lms.core.config import get_settings
from lms.core.exceptions import ConflictError
from lms.core.security import create_user_token, hash_password, verify_password
from lms.models.enums import UserRole
from lms.models.user import User
from lms.repositories.user import UserRepository
from lms.schemas.user import TokenResponse, UserCreate, UserRead, UserWithToken

logger = logging.getLogger(__name__)
settings = get_settings()


class AuthService:
    """Service para operações de autenticação."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def signup(self, data: UserCreate) -> User:
        """
        Registra novo estudante.

        Bibliotecários não se cadastram pela API; são criados pelo seed.

        Raises:
            ConflictError: Email já cadastrado
        """
        if await self.user_repo.email_exists(data.email):
            raise ConflictError("Email já cadastrado")

        user = await self.user_repo.create(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=UserRole.STUDENT,
            student_id=data.student_id,
        )
        logger.info(f"Estudante cadastrado: {user.id}")
        return user

    async def login(self, email: str, password: str) -> UserWithToken:
        """
        Autentica usuário e retorna token JWT.

        Raises:
            HTTPException 401: Credenciais inválidas
        """
        user = await self.user_repo.get_by_email(email)

        if user is None or not verify_password(password, user.password_hash):
            logger.info("Tentativa de login com credenciais inválidas")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Email ou senha incorretos",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return UserWithToken(
            user=UserRead.model_validate(user),
            token=TokenResponse(
                access_token=create_user_token(user),
                token_type="bearer",
                expires_in=settings.JWT_EXPIRES_MINUTES * 60,
            ),
        )
