"""
Rate limiting usando Redis com janela fixa.

Identifica o cliente pelo usuário autenticado (JWT) ou pelo IP.
Configurável via variáveis de ambiente:
    - RATE_LIMIT_ENABLED: bool (default: True)
    - RATE_LIMIT_REQUESTS: int (default: 60) - Requests permitidos por janela
    - RATE_LIMIT_WINDOW_SECONDS: int (default: 60)

Uso:
    @router.post("/reservations")
    async def create_reservation(
        _: None = Depends(rate_limit_default),
    ):
        ...
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from lms.core.config import get_settings
from lms.core.security import decode_token
from lms.db import redis as redis_db

logger = logging.getLogger(__name__)
settings = get_settings()
optional_bearer = HTTPBearer(auto_error=False)


class RateLimiter:
    """
    Dependency de rate limiting.

    Falha aberta: se o Redis não estiver disponível a requisição passa.

    Args:
        requests: Número máximo de requests na janela (default: config)
        window: Janela de tempo em segundos (default: config)
        key_prefix: Prefixo da chave no Redis
    """

    def __init__(
        self,
        requests: Optional[int] = None,
        window: Optional[int] = None,
        key_prefix: str = "rate_limit",
    ):
        self.requests = requests or settings.RATE_LIMIT_REQUESTS
        self.window = window or settings.RATE_LIMIT_WINDOW_SECONDS
        self.key_prefix = key_prefix

    async def __call__(
        self,
        request: Request,
        credentials: Annotated[
            Optional[HTTPAuthorizationCredentials], Depends(optional_bearer)
        ] = None,
    ) -> None:
        """
        Verifica o limite do cliente.

        Raises:
            HTTPException 429: Rate limit excedido
        """
        if not settings.RATE_LIMIT_ENABLED:
            return

        client = redis_db.redis_client
        if client is None:
            return

        key = f"{self.key_prefix}:{self._get_identifier(request, credentials)}"

        try:
            current = await client.incr(key)
            if current == 1:
                await client.expire(key, self.window)

            if current > self.requests:
                ttl = await client.ttl(key)
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"Rate limit excedido. Tente novamente em {ttl} segundos.",
                    headers={"Retry-After": str(ttl)},
                )
        except HTTPException:
            raise
        except Exception as e:
            logger.warning(f"Rate limit ignorado por erro no Redis: {e}")

    def _get_identifier(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials],
    ) -> str:
        """
        Obtém identificador único para o rate limit.

        Prioridade:
            1. user_id do JWT (se autenticado)
            2. Primeiro IP de X-Forwarded-For
            3. IP do cliente
        """
        if credentials:
            payload = decode_token(credentials.credentials)
            if payload and "sub" in payload:
                return f"user:{payload['sub']}"

        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return f"ip:{forwarded.split(',')[0].strip()}"

        client_ip = request.client.host if request.client else "unknown"
        return f"ip:{client_ip}"


# Instâncias pré-configuradas
rate_limit_default = RateLimiter()
rate_limit_auth = RateLimiter(requests=10, window=60, key_prefix="rate_limit:auth")
