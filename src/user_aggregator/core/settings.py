import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.user_aggregator.domain.enums import AggregationMode, SourceStrategy
from src.user_aggregator.domain.value_objects import (
    CANONICAL_FIELDS,
    ConnectionDescriptor,
    FieldMapping,
    SourceConfig,
)


class DataSourceSettings(BaseModel):
    """Описание одного источника пользователей."""
    name: str
    strategy: SourceStrategy = SourceStrategy.SQL
    url: str
    user: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    table: str
    mapping: dict[str, str] = Field(default_factory=dict)

    @field_validator("mapping")
    @classmethod
    def _check_mapping(cls, v: dict[str, str]) -> dict[str, str]:
        unknown = sorted(set(v) - set(CANONICAL_FIELDS))
        if unknown:
            raise ValueError(f"Неизвестные канонические поля в mapping: {unknown}")
        empty = sorted(k for k, col in v.items() if not col or not col.strip())
        if empty:
            raise ValueError(f"Пустое имя колонки в mapping: {empty}")
        return v

    def to_domain(self) -> SourceConfig:
        return SourceConfig(
            name=self.name,
            connection=ConnectionDescriptor(url=self.url, user=self.user, password=self.password),
            table=self.table,
            mapping=FieldMapping(columns=dict(self.mapping)),
            strategy=self.strategy,
        )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Sources
    DATA_SOURCES: list[DataSourceSettings] = Field(default_factory=list)
    DATA_SOURCES_FILE: Optional[str] = None

    # Aggregation
    AGGREGATION_MODE: AggregationMode = AggregationMode.SEQUENTIAL
    SOURCE_TIMEOUT_SECONDS: Optional[float] = None

    # Logging
    LOG_LEVEL: str = "INFO"

    def load_sources(self) -> list[SourceConfig]:
        """
        Источники из DATA_SOURCES, затем из DATA_SOURCES_FILE (если задан).
        Порядок сохраняется.
        """
        sources = list(self.DATA_SOURCES)
        if self.DATA_SOURCES_FILE:
            sources.extend(read_sources_file(self.DATA_SOURCES_FILE))
        return [s.to_domain() for s in sources]


def read_sources_file(path: str) -> list[DataSourceSettings]:
    """
    JSON-файл вида {"data_sources": [...]} или просто список источников.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("data_sources") or raw.get("data-sources") or []
    return [DataSourceSettings.model_validate(item) for item in raw]


def get_settings() -> Settings:
    return Settings()
