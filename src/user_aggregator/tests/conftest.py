import uuid
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine, text

from src.user_aggregator.main import app as fastapi_app
from src.user_aggregator.domain.entities.user import UserRecord
from src.user_aggregator.domain.value_objects import ConnectionDescriptor, FieldMapping, SourceConfig


class FakeSourceClient:
    """
    Клиент-заглушка: отдаёт заранее заданных пользователей или падает.
    Запоминает фильтры каждого вызова.
    """

    def __init__(self, name: str, users=None, error: Exception | None = None):
        self.name = name
        self.users = list(users or [])
        self.error = error
        self.calls: list = []

    def fetch_users(self, filters):
        self.calls.append(filters)
        if self.error is not None:
            raise self.error
        return list(self.users)


@pytest.fixture
def make_user():
    def _make(id: str, username: str, name: str, surname: str) -> UserRecord:
        return UserRecord(id=id, username=username, name=name, surname=surname)

    return _make


@pytest.fixture
def fake_client():
    return FakeSourceClient


@pytest.fixture
def sqlite_source(tmp_path):
    """
    Создаёт SQLite-базу с таблицей пользователей и возвращает SourceConfig на неё.
    Колонки и строки задаются тестом.
    """
    def _make(
        columns: dict[str, str] | None = None,
        rows: list[tuple] | None = None,
        table: str = "users",
        name: str | None = None,
        mapping: dict[str, str] | None = None,
    ) -> SourceConfig:
        columns = columns or {"id": "id", "username": "username", "name": "name", "surname": "surname"}
        physical = list(columns.values())
        db_path = tmp_path / f"{uuid.uuid4().hex[:8]}.db"
        url = f"sqlite:///{db_path}"

        engine = create_engine(url)
        try:
            with engine.begin() as conn:
                cols_sql = ", ".join(f"{c} VARCHAR(50)" for c in physical)
                conn.execute(text(f"CREATE TABLE {table} ({cols_sql})"))
                placeholders = ", ".join(f":c{i}" for i in range(len(physical)))
                for row in rows or []:
                    conn.execute(
                        text(f"INSERT INTO {table} VALUES ({placeholders})"),
                        {f"c{i}": v for i, v in enumerate(row)},
                    )
        finally:
            engine.dispose()

        return SourceConfig(
            name=name or f"test-db-{uuid.uuid4().hex[:6]}",
            connection=ConnectionDescriptor(url=url),
            table=table,
            mapping=FieldMapping(columns=mapping if mapping is not None else columns),
        )

    return _make


@pytest.fixture(scope="session")
def app():
    return fastapi_app


@pytest.fixture
async def client(app):
    """
    HTTP client поверх ASGI приложения (без реального поднятия сервера).
    lifespan не запускается: состояние приложения задаёт сам тест.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def install_service(app):
    """
    Подкладывает сервис агрегации в app.state на время теста.
    """
    def _install(service, configs=None):
        app.state.aggregation_service = service
        app.state.source_configs = list(configs or [])

    yield _install

    for attr in ("aggregation_service", "source_configs"):
        if hasattr(app.state, attr):
            delattr(app.state, attr)
