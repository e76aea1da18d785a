from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    id: int
    login: str
    email: str = ""
    password: str = ""
    group: Optional[str] = None

    def public(self) -> dict:
        return {"id": self.id, "login": self.login, "email": self.email, "group": self.group}
