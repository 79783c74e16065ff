"""
Repository base com operações CRUD genéricas.

Toda chamada ao banco passa por _guard(), que traduz falhas do SQLAlchemy
para as exceções de domínio: violação de integridade vira ConflictError e
qualquer outra falha (conexão, timeout) vira BackendUnavailableError.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lms.core.exceptions import BackendUnavailableError, ConflictError
from lms.db.session import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Repository base com operações CRUD.

    Fornece métodos genéricos para:
    - get_by_id: Buscar por ID (sempre relê o estado do banco)
    - create: Criar registro
    - update: Atualizar campos informados
    - delete: Remover registro
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @asynccontextmanager
    async def _guard(self) -> AsyncIterator[None]:
        """Traduz erros do banco e desfaz a transação em andamento."""
        try:
            yield
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Violação de integridade em {self.model.__name__}: {e.orig}")
            raise ConflictError("Registro viola uma restrição de integridade") from e
        except (SQLAlchemyError, OSError) as e:
            await self.db.rollback()
            logger.error(f"Falha no banco em {self.model.__name__}: {type(e).__name__}: {e}")
            raise BackendUnavailableError() from e

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """
        Busca registro por ID.

        populate_existing garante que uma instância já presente na sessão
        seja sobrescrita com o estado atual do banco.
        """
        async with self._guard():
            result = await self.db.execute(
                select(self.model)
                .where(self.model.id == id)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """Cria novo registro."""
        instance = self.model(**kwargs)
        async with self._guard():
            self.db.add(instance)
            await self.db.commit()
            await self.db.refresh(instance)
        return instance

    async def update(self, instance: ModelType, **fields: Any) -> ModelType:
        """Atualiza os campos informados (None é um valor válido)."""
        async with self._guard():
            for key, value in fields.items():
                setattr(instance, key, value)
            await self.db.commit()
            await self.db.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        """Remove registro."""
        async with self._guard():
            await self.db.delete(instance)
            await self.db.commit()
