"""
Dependencies FastAPI para autenticação e autorização.

A sessão do usuário é o token JWT enviado em cada request; CurrentUser é o
contexto explícito que os endpoints repassam aos services.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from lms.core.security import decode_token
from lms.db.session import get_db
from lms.models.enums import UserRole
from lms.models.user import User
from lms.repositories.user import UserRepository

# Scheme Bearer para extrair token do header Authorization
security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Dependency que retorna o usuário autenticado.

    Raises:
        HTTPException 401: Token inválido, expirado ou usuário não encontrado
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token inválido ou expirado",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("sub") is None:
        raise credentials_exception

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise credentials_exception

    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise credentials_exception

    return user


def require_role(role: UserRole):
    """Cria dependency que exige o papel informado."""

    async def dependency(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if current_user.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Acesso restrito ao papel {role.value}",
            )
        return current_user

    return dependency


# Type aliases para uso nos endpoints
CurrentUser = Annotated[User, Depends(get_current_user)]
LibrarianUser = Annotated[User, Depends(require_role(UserRole.LIBRARIAN))]
StudentUser = Annotated[User, Depends(require_role(UserRole.STUDENT))]
DbSession = Annotated[AsyncSession, Depends(get_db)]
