class SourceError(Exception):
    """
    Ошибка опроса одного источника.
    Локальна для клиента источника, агрегатор её поглощает.
    """

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class SourceUnavailable(SourceError):
    """Не удалось подключиться к источнику."""


class QueryFailed(SourceError):
    """Источник отклонил или не смог выполнить запрос."""


class DecodeFailed(SourceError):
    """Строку результата не удалось разобрать в UserRecord."""
