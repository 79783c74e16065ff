"""
Módulo de banco de dados - conexões e sessões.

Exports:
    - Base: Classe base para modelos SQLAlchemy
    - engine: Engine async do SQLAlchemy
    - get_db: Dependency para injeção de sessão
    - create_schema: Criação das tabelas (seed e testes)
"""

from lms.db.session import Base, engine, get_db, async_session_factory, create_schema
from lms.db.redis import init_redis, close_redis

__all__ = [
    "Base",
    "engine",
    "get_db",
    "async_session_factory",
    "create_schema",
    "init_redis",
    "close_redis",
]
