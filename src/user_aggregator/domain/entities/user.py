from dataclasses import dataclass
from typing import Optional

@dataclass
class UserRecord:
    id: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    surname: Optional[str] = None
