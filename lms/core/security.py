"""
Utilitários de segurança: hash de senha e JWT.

Senhas nunca são comparadas em texto plano: o hash bcrypt carrega o salt e
bcrypt.checkpw faz a comparação em tempo constante.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from lms.core.config import get_settings

if TYPE_CHECKING:
    from lms.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()


def hash_password(password: str) -> str:
    """
    Gera hash bcrypt da senha.

    Args:
        password: Senha em texto plano

    Returns:
        Hash bcrypt da senha
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica se a senha corresponde ao hash armazenado."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError as e:
        # Hash corrompido ou em formato desconhecido
        logger.debug(f"Erro na verificação de senha: {type(e).__name__}")
        return False


def create_access_token(
    subject: str,
    extra_data: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Cria token JWT.

    Args:
        subject: Identificador do usuário (user_id)
        extra_data: Dados adicionais para incluir no payload
        expires_delta: Tempo de expiração customizado

    Returns:
        Token JWT assinado
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES))

    payload = {
        "sub": subject,
        "exp": expire,
        "iat": now,
    }
    if extra_data:
        payload.update(extra_data)

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_user_token(user: "User") -> str:
    """Cria token de sessão para o usuário, com o papel no payload."""
    return create_access_token(
        subject=str(user.id),
        extra_data={"role": user.role.value},
    )


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decodifica e valida token JWT.

    Returns:
        Payload do token ou None se inválido/expirado
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None
