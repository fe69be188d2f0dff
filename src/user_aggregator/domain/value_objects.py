from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from src.user_aggregator.domain.enums import CanonicalField, SourceStrategy
from src.user_aggregator.domain.entities.user import UserRecord


# Фильтр запроса: каноническое поле -> строковое значение
Filters = Mapping[str, str]


@dataclass(frozen=True)
class FieldMapping:
    """
    Каноническое поле -> физическая колонка источника.
    Не все канонические поля обязаны быть замаплены.
    """
    columns: Mapping[str, str] = field(default_factory=dict)

    def column_for(self, field_name: str) -> Optional[str]:
        return self.columns.get(field_name)

@dataclass(frozen=True)
class ConnectionDescriptor:
    url: str
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

@dataclass(frozen=True)
class SourceConfig:
    name: str
    connection: ConnectionDescriptor
    table: str
    mapping: FieldMapping
    strategy: SourceStrategy = SourceStrategy.SQL

@dataclass(frozen=True)
class Query:
    """
    Параметризованный запрос. i-й плейсхолдер `:p{i}` связан с params[i].
    """
    sql: str
    params: tuple[str, ...] = ()

    def bind_params(self) -> dict[str, Any]:
        return {f"p{i}": v for i, v in enumerate(self.params)}

@dataclass(frozen=True)
class SourceFetchResult:
    source: str
    users: list[UserRecord] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


CANONICAL_FIELDS: tuple[str, ...] = tuple(f.value for f in CanonicalField)
