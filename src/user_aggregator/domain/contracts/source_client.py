from typing import Protocol

from src.user_aggregator.domain.entities.user import UserRecord
from src.user_aggregator.domain.value_objects import Filters

class UserSourceClient(Protocol):
    name: str

    def fetch_users(self, filters: Filters) -> list[UserRecord]: ...
