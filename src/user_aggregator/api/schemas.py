from typing import Optional

from pydantic import BaseModel, ConfigDict


# Users
class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    surname: Optional[str] = None


# Sources
class SourceResponse(BaseModel):
    """
    Без url и учётных данных: только то, что можно показать наружу.
    """
    name: str
    strategy: str
    table: str
