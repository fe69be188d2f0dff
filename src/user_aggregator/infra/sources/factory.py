from typing import Callable

from src.user_aggregator.domain.contracts.source_client import UserSourceClient
from src.user_aggregator.domain.enums import SourceStrategy
from src.user_aggregator.domain.value_objects import SourceConfig
from src.user_aggregator.infra.sources.sql_client import SqlUserSourceClient


_REGISTRY: dict[SourceStrategy, Callable[[SourceConfig], UserSourceClient]] = {
    SourceStrategy.SQL: SqlUserSourceClient,
    # jdbc – историческое имя реляционной стратегии
    SourceStrategy.JDBC: SqlUserSourceClient,
}


def build_source_client(config: SourceConfig) -> UserSourceClient:
    """
    Возвращает клиент источника по его стратегии.
    """
    try:
        factory = _REGISTRY[SourceStrategy(config.strategy)]
    except (KeyError, ValueError):
        raise ValueError(f"Неизвестная стратегия источника: {config.strategy}")
    return factory(config)
