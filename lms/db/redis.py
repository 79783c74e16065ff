"""
Conexão com Redis para cache de disponibilidade e rate limiting.

O cliente é global ao processo: init_redis() no startup, close_redis() no
shutdown. Consumidores devem ler o atributo do módulo (redis_db.redis_client)
no momento do uso, nunca importá-lo por nome.
"""

import logging
from typing import Optional

import redis.asyncio as redis

from lms.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Cliente Redis (inicializado no startup)
redis_client: Optional[redis.Redis] = None


async def init_redis() -> redis.Redis:
    """Inicializa a conexão com o Redis."""
    global redis_client
    redis_client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
    )
    return redis_client


async def close_redis() -> None:
    """Fecha a conexão com o Redis."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None


async def check_redis_connection() -> bool:
    """
    Verifica se a conexão com o Redis está funcionando.

    Returns:
        True se conectou com sucesso, False caso contrário.
    """
    try:
        if redis_client:
            await redis_client.ping()
            return True
        return False
    except Exception as e:
        logger.warning(f"Erro ao verificar conexão Redis: {e}")
        return False
