from __future__ import annotations

import asyncio
import logging
from types import MappingProxyType
from typing import Callable, Iterable, Optional, Sequence

from src.user_aggregator.domain.contracts.source_client import UserSourceClient
from src.user_aggregator.domain.entities.user import UserRecord
from src.user_aggregator.domain.enums import AggregationMode
from src.user_aggregator.domain.exceptions import SourceError
from src.user_aggregator.domain.value_objects import Filters, SourceConfig, SourceFetchResult
from src.user_aggregator.infra.sources.factory import build_source_client


logger = logging.getLogger(__name__)


class UserAggregationService:
    """
    Единое представление пользователей из всех настроенных источников.

    Опрос best-effort: упавший источник логируется и исключается из результата,
    остальные продолжают. Порядок результата – порядок источников в конфигурации.
    """

    def __init__(
        self,
        clients: Iterable[UserSourceClient] = (),
        mode: AggregationMode = AggregationMode.SEQUENTIAL,
        source_timeout: Optional[float] = None,
    ):
        self.clients: tuple[UserSourceClient, ...] = tuple(clients)
        self.mode = AggregationMode(mode)
        self.source_timeout = source_timeout

    @classmethod
    def from_configs(
        cls,
        configs: Optional[Sequence[SourceConfig]],
        client_factory: Callable[[SourceConfig], UserSourceClient] = build_source_client,
        **kwargs,
    ) -> "UserAggregationService":
        clients = []
        for cfg in configs or ():
            clients.append(client_factory(cfg))
            logger.info("Added client for source: %s", cfg.name)
        return cls(clients, **kwargs)

    def close(self) -> None:
        """Освобождает ресурсы клиентов (движки БД), если они их держат."""
        for c in self.clients:
            close = getattr(c, "close", None)
            if callable(close):
                close()

    @property
    def concurrent(self) -> bool:
        return self.mode == AggregationMode.CONCURRENT

    @property
    def source_names(self) -> list[str]:
        return [c.name for c in self.clients]

    # sequential
    def fetch_all(self, filters: Optional[Filters]) -> list[SourceFetchResult]:
        frozen = _freeze(filters)
        return [self._fetch_one(c, frozen) for c in self.clients]

    def get_all_users(self, filters: Optional[Filters] = None) -> list[UserRecord]:
        return _merge(self.fetch_all(filters))

    # concurrent
    async def fetch_all_concurrent(self, filters: Optional[Filters]) -> list[SourceFetchResult]:
        frozen = _freeze(filters)
        # gather сохраняет порядок аргументов независимо от порядка завершения
        return list(await asyncio.gather(*(self._fetch_one_async(c, frozen) for c in self.clients)))

    async def get_all_users_concurrent(self, filters: Optional[Filters] = None) -> list[UserRecord]:
        return _merge(await self.fetch_all_concurrent(filters))

    def _fetch_one(self, client: UserSourceClient, filters: Filters) -> SourceFetchResult:
        try:
            users = _collect(client, filters)
        except Exception as e:
            return _failed(client.name, e)
        return SourceFetchResult(source=client.name, users=users)

    async def _fetch_one_async(self, client: UserSourceClient, filters: Filters) -> SourceFetchResult:
        try:
            users = await asyncio.wait_for(
                asyncio.to_thread(_collect, client, filters),
                timeout=self.source_timeout,
            )
        except asyncio.TimeoutError:
            return _failed(client.name, TimeoutError(f"no response within {self.source_timeout}s"))
        except Exception as e:
            return _failed(client.name, e)
        return SourceFetchResult(source=client.name, users=users)


def _collect(client: UserSourceClient, filters: Filters) -> list[UserRecord]:
    # клиент может отдавать ленивый итератор: ошибки при обходе тоже ошибки источника
    return list(client.fetch_users(filters))

def _freeze(filters: Optional[Filters]) -> Filters:
    return MappingProxyType(dict(filters or {}))

def _failed(source: str, exc: Exception) -> SourceFetchResult:
    # SourceError уже содержит имя источника в str()
    reason = exc.reason if isinstance(exc, SourceError) else str(exc)
    reason = reason or exc.__class__.__name__
    logger.warning("Source failed: %s: %s", source, reason)
    return SourceFetchResult(source=source, error=reason)

def _merge(results: Iterable[SourceFetchResult]) -> list[UserRecord]:
    out: list[UserRecord] = []
    for r in results:
        if r.ok:
            out.extend(r.users)
    return out
