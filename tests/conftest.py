"""Test configuration."""
import os
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path
from uuid import uuid4

from alembic import command
from alembic.config import Config
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session

# --- Default environment, set before the app reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite:///./station_test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("PROMETHEUS_ENABLED", "false")
os.environ["NOTIFY_WEBHOOK_URL"] = ""

from app.main import app  # noqa: E402
from app.db import get_db  # noqa: E402
from app.models import ApiKey, User, UserRole  # noqa: E402
from app.utils.apikey import hash_key  # noqa: E402

DB_PATH = Path("./station_test.db")
ROOT = Path(__file__).resolve().parents[1]


def _run_migrations() -> None:
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.attributes["sqlalchemy.url"] = os.environ["DATABASE_URL"]
    cfg.attributes["configure_logger"] = False
    command.upgrade(cfg, "head")


# --- (1) Reset the database file at session start
if DB_PATH.exists():
    DB_PATH.unlink()

engine = create_engine(
    os.environ["DATABASE_URL"],
    connect_args={"check_same_thread": False},
    future=True,
)


# pysqlite defers BEGIN on its own; take over so SAVEPOINTs nest inside the outer transaction.
@event.listens_for(engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _emit_begin(conn) -> None:
    conn.exec_driver_sql("BEGIN")


# --- (2) Build the schema through Alembic only
_run_migrations()


@pytest.fixture
def db_session() -> Iterator[Session]:
    """Session whose commits become savepoints inside a rolled-back transaction."""

    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture(autouse=True)
def override_db_dependency(db_session: Session) -> Iterator[None]:
    def _get_db() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    def _factory(
        *,
        name: str | None = None,
        role: UserRole = UserRole.officer,
        is_active: bool = True,
    ) -> User:
        suffix = uuid4().hex[:8]
        user = User(
            username=f"user-{suffix}",
            name=name or f"Officer {suffix}",
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _factory


@pytest.fixture
def make_api_key(db_session: Session) -> Callable[..., str]:
    """Create a key for ``user`` and return the raw token."""

    def _factory(user: User, *, is_active: bool = True, expires_at=None) -> str:
        token = f"stn_test.{uuid4().hex}"
        api_key = ApiKey(
            name=f"key-{uuid4().hex}",
            prefix="stn_test",
            key_hash=hash_key(token),
            user_id=user.id,
            is_active=is_active,
            expires_at=expires_at,
        )
        db_session.add(api_key)
        db_session.commit()
        return token

    return _factory


@pytest.fixture
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user(name="Chief Admin", role=UserRole.admin)


@pytest.fixture
def officer_user(make_user: Callable[..., User]) -> User:
    return make_user(name="Officer Somchai", role=UserRole.officer)


@pytest.fixture
def admin_headers(admin_user: User, make_api_key: Callable[..., str]) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_api_key(admin_user)}"}


@pytest.fixture
def officer_headers(officer_user: User, make_api_key: Callable[..., str]) -> dict[str, str]:
    return {"X-API-Key": make_api_key(officer_user)}
