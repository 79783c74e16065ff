"""
Endpoints de autenticação.

Rate Limiting aplicado:
    - POST /signup: 10 req/min (rate_limit_auth)
    - POST /login: 10 req/min (rate_limit_auth)
"""

from fastapi import APIRouter, Depends, status

from lms.core.deps import DbSession, CurrentUser
from lms.core.rate_limit import rate_limit_auth
from lms.schemas.user import UserCreate, UserLogin, UserRead, UserWithToken
from lms.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar estudante",
    description="Cria uma conta de estudante. Email deve ser único.",
)
async def signup(
    data: UserCreate,
    db: DbSession,
    _: None = Depends(rate_limit_auth),
) -> UserRead:
    """
    Registro público de estudante.

    - **name**: Nome completo (2-255 caracteres)
    - **email**: Email único (será usado como login)
    - **password**: Mínimo 8 caracteres, 1 maiúscula, 1 minúscula, 1 número
    - **student_id**: Matrícula (opcional)
    """
    user = await AuthService(db).signup(data)
    return UserRead.model_validate(user)


@router.post(
    "/login",
    response_model=UserWithToken,
    summary="Autenticar usuário",
    description="Retorna token JWT para autenticação nos endpoints protegidos.",
)
async def login(
    data: UserLogin,
    db: DbSession,
    _: None = Depends(rate_limit_auth),
) -> UserWithToken:
    """
    Login de usuário.

    Uso: `Authorization: Bearer <access_token>`. Logout é descartar o token.
    """
    return await AuthService(db).login(data.email, data.password)


@router.get(
    "/me",
    response_model=UserRead,
    summary="Dados do usuário autenticado",
)
async def get_me(current_user: CurrentUser) -> UserRead:
    """Retorna dados do usuário autenticado."""
    return UserRead.model_validate(current_user)
