from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping, Optional, Sequence

from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError

from src.user_aggregator.domain.entities.user import UserRecord
from src.user_aggregator.domain.enums import CanonicalField
from src.user_aggregator.domain.exceptions import DecodeFailed, QueryFailed, SourceUnavailable
from src.user_aggregator.domain.services.query_builder import build_user_query
from src.user_aggregator.domain.value_objects import ConnectionDescriptor, Filters, SourceConfig
from src.user_aggregator.infra.db import execute_query, make_engine, open_connection


logger = logging.getLogger(__name__)


class SqlUserSourceClient:
    """
    Клиент реляционного источника.
    Каждый вызов fetch_users открывает своё соединение и закрывает его по завершении.
    """

    def __init__(
        self,
        config: SourceConfig,
        engine_factory: Callable[[ConnectionDescriptor], Engine] = make_engine,
    ):
        self.config = config
        self.name = config.name
        self._engine_factory = engine_factory
        self._engine: Optional[Engine] = None
        self._engine_lock = threading.Lock()

    def _get_engine(self) -> Engine:
        with self._engine_lock:
            if self._engine is None:
                try:
                    self._engine = self._engine_factory(self.config.connection)
                except (ArgumentError, NoSuchModuleError, ImportError, ValueError) as e:
                    raise SourceUnavailable(self.name, f"invalid connection settings: {e}") from e
            return self._engine

    def close(self) -> None:
        with self._engine_lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None

    def fetch_users(self, filters: Filters) -> list[UserRecord]:
        query = build_user_query(self.config.table, self.config.mapping, filters)
        logger.debug("source %s: %s", self.name, query.sql)

        engine = self._get_engine()
        try:
            conn = open_connection(engine)
        except SQLAlchemyError as e:
            raise SourceUnavailable(self.name, str(e)) from e

        with conn:
            try:
                rows = execute_query(conn, query)
            except SQLAlchemyError as e:
                raise QueryFailed(self.name, str(e)) from e

        if not rows:
            return []
        columns = self._resolve_columns(list(rows[0].keys()))
        return [_decode(row, columns) for row in rows]

    def _resolve_columns(self, keys: Sequence[str]) -> dict[str, Optional[str]]:
        """
        Каноническое поле -> ключ в строке результата.
        Имена колонок сравниваются без учёта регистра, точное совпадение в приоритете.
        """
        by_lower: dict[str, str] = {}
        for k in keys:
            by_lower.setdefault(k.lower(), k)

        resolved: dict[str, Optional[str]] = {}
        for f in CanonicalField:
            column = self.config.mapping.column_for(f.value)
            if column is None:
                resolved[f.value] = None
            elif column in keys:
                resolved[f.value] = column
            elif column.lower() in by_lower:
                resolved[f.value] = by_lower[column.lower()]
            else:
                raise DecodeFailed(self.name, f"column not found in result: {column}")
        return resolved


def _decode(row: Mapping[str, Any], columns: Mapping[str, Optional[str]]) -> UserRecord:
    values: dict[str, Optional[str]] = {}
    for field_name, key in columns.items():
        raw = None if key is None else row[key]
        values[field_name] = None if raw is None else str(raw)
    return UserRecord(**values)
