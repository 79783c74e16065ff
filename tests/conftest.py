"""
Fixtures compartilhadas para testes.

Cada teste recebe um banco SQLite novo (arquivo temporário, via aiosqlite).
O arquivo permite abrir várias sessões independentes ao mesmo tempo, o que
os testes de concorrência precisam.
"""

from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from lms.core.security import create_user_token, hash_password
from lms.db.session import build_engine, create_schema, get_db
from lms.main import app
from lms.models.book import Book
from lms.models.enums import UserRole
from lms.models.user import User
from lms.repositories.book import BookRepository
from lms.repositories.user import UserRepository

PASSWORD = "Student123!"


# ==========================================
# Event loop configuration
# ==========================================

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session")
def password_hash() -> str:
    """Hash bcrypt calculado uma vez (bcrypt é lento de propósito)."""
    return hash_password(PASSWORD)


# ==========================================
# Database fixtures
# ==========================================

@pytest.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine de teste com NullPool.

    NullPool abre uma conexão por sessão, então sessões distintas realmente
    concorrem pelo banco.
    """
    engine = build_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'library.db'}",
        poolclass=NullPool,
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Sessão de banco para o teste."""
    async with session_factory() as session:
        yield session


# ==========================================
# Data fixtures
# ==========================================

async def create_user(
    db: AsyncSession,
    password_hash: str,
    name: str,
    email: str,
    role: UserRole = UserRole.STUDENT,
) -> User:
    return await UserRepository(db).create(
        name=name,
        email=email,
        password_hash=password_hash,
        role=role,
    )


async def create_book(
    db: AsyncSession,
    title: str = "Clean Code",
    total_copies: int = 3,
    available_copies: int | None = None,
    **fields,
) -> Book:
    return await BookRepository(db).create(
        title=title,
        author=fields.pop("author", "Robert C. Martin"),
        isbn=fields.pop("isbn", "978-0132350884"),
        category=fields.pop("category", "Software Engineering"),
        total_copies=total_copies,
        available_copies=total_copies if available_copies is None else available_copies,
        **fields,
    )


@pytest.fixture
async def student(test_db, password_hash) -> User:
    return await create_user(test_db, password_hash, "Ana Souza", "ana@icp.edu")


@pytest.fixture
async def other_student(test_db, password_hash) -> User:
    return await create_user(test_db, password_hash, "Bruno Lima", "bruno@icp.edu")


@pytest.fixture
async def librarian(test_db, password_hash) -> User:
    return await create_user(
        test_db,
        password_hash,
        "Bibliotecário",
        "librarian@library.dev",
        role=UserRole.LIBRARIAN,
    )


@pytest.fixture
async def book(test_db) -> Book:
    """Livro com 3 cópias, todas disponíveis."""
    return await create_book(test_db)


# ==========================================
# HTTP Client fixtures
# ==========================================

@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP assíncrono para testes.

    Substitui a dependency get_db para usar o banco de teste. Sem lifespan
    o Redis não é inicializado: cache e rate limit ficam desligados.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    """Headers de autenticação para o usuário."""
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def student_headers(student) -> dict:
    return auth_headers(student)


@pytest.fixture
def other_student_headers(other_student) -> dict:
    return auth_headers(other_student)


@pytest.fixture
def librarian_headers(librarian) -> dict:
    return auth_headers(librarian)


@pytest.fixture
def make_book(test_db):
    """Factory de livros na sessão do teste."""

    async def _make(**fields) -> Book:
        return await create_book(test_db, **fields)

    return _make


@pytest.fixture
def make_student(test_db, password_hash):
    """Factory de estudantes com email único."""
    counter = iter(range(1, 1000))

    async def _make() -> User:
        n = next(counter)
        return await create_user(test_db, password_hash, f"Estudante {n}", f"aluno{n}@icp.edu")

    return _make


@pytest.fixture
def headers_for():
    return auth_headers
