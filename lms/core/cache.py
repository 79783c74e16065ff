"""
Cache de disponibilidade de livros usando Redis.

Configurável via variáveis de ambiente:
    - CACHE_ENABLED: bool (default: True) - Habilita/desabilita cache
    - CACHE_AVAILABILITY_TTL_SECONDS: int (default: 15) - TTL das entradas

O cache é sempre opcional: se o Redis estiver fora do ar, as leituras caem
direto no banco e as invalidações viram no-op.

Invalidação obrigatória após qualquer escrita que mude available_copies ou
total_copies de um livro (edição, remoção, aprovação, devolução).
"""

import json
import logging
from typing import Any, Awaitable, Callable, Optional
from uuid import UUID

from lms.core.config import get_settings
from lms.db import redis as redis_db

logger = logging.getLogger(__name__)
settings = get_settings()


class CacheService:
    """Operações de cache da disponibilidade por livro."""

    PREFIX_AVAILABILITY = "cache:availability"

    def __init__(self, ttl: Optional[int] = None):
        self.ttl = ttl or settings.CACHE_AVAILABILITY_TTL_SECONDS

    def _key(self, book_id: UUID) -> str:
        return f"{self.PREFIX_AVAILABILITY}:{book_id}"

    @property
    def _client(self):
        if not settings.CACHE_ENABLED:
            return None
        return redis_db.redis_client

    async def get_availability(self, book_id: UUID) -> Optional[dict]:
        """Busca a disponibilidade no cache; None se ausente ou indisponível."""
        client = self._client
        if client is None:
            return None

        try:
            data = await client.get(self._key(book_id))
            if data:
                return json.loads(data)
            return None
        except Exception as e:
            logger.warning(f"Erro ao buscar cache availability: {e}")
            return None

    async def set_availability(
        self,
        book_id: UUID,
        data: dict,
        ttl: Optional[int] = None,
    ) -> bool:
        """Salva a disponibilidade no cache. Retorna True se salvou."""
        client = self._client
        if client is None:
            return False

        try:
            await client.setex(
                self._key(book_id),
                ttl or self.ttl,
                json.dumps(data, default=str),
            )
            return True
        except Exception as e:
            logger.warning(f"Erro ao salvar cache availability: {e}")
            return False

    async def get_or_load_availability(
        self,
        book_id: UUID,
        loader: Callable[[], Awaitable[dict[str, Any]]],
    ) -> dict[str, Any]:
        """Lê do cache ou chama `loader` e grava o resultado."""
        cached = await self.get_availability(book_id)
        if cached is not None:
            return cached

        data = await loader()
        await self.set_availability(book_id, data)
        return data

    async def invalidate_availability(self, book_id: UUID) -> bool:
        """Invalida a disponibilidade de um livro. Retorna True se removeu."""
        client = self._client
        if client is None:
            return False

        try:
            await client.delete(self._key(book_id))
            return True
        except Exception as e:
            logger.warning(f"Erro ao invalidar cache availability: {e}")
            return False


# Instância global para uso nos services
cache_service = CacheService()
