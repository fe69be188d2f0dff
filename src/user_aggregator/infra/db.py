from typing import Any, Mapping

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.pool import NullPool

from src.user_aggregator.domain.value_objects import ConnectionDescriptor, Query


def build_url(descriptor: ConnectionDescriptor):
    """
    URL источника + отдельные user/password из конфигурации.
    Явно заданные user/password перекрывают значения из URL.
    """
    url = make_url(descriptor.url)
    if descriptor.user:
        url = url.set(username=descriptor.user)
    if descriptor.password:
        url = url.set(password=descriptor.password)
    return url

def make_engine(descriptor: ConnectionDescriptor) -> Engine:
    # без пула: одно физическое соединение на один вызов
    return create_engine(build_url(descriptor), poolclass=NullPool)

def open_connection(engine: Engine) -> Connection:
    """
    Соединение на один вызов. Вызывающий закрывает его через `with conn:`.
    """
    return engine.connect()

def execute_query(conn: Connection, query: Query) -> list[Mapping[str, Any]]:
    return list(conn.execute(text(query.sql), query.bind_params()).mappings().all())
