"""
User lookup used by the authenticator.

Password hashing is left to the directory implementation; the in-memory
directory stores whatever credential string it is given.
"""

import secrets
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Tuple

from hookline.auth.errors import NotFound
from hookline.domain.user import User


class UserDirectory(ABC):
    @abstractmethod
    async def get(self, user_id: int) -> Tuple[Optional[Exception], Optional[User]]:
        pass

    @abstractmethod
    async def get_by(self, column: str, value: str) -> Tuple[Optional[Exception], Optional[User]]:
        pass

    @abstractmethod
    def verify_password(self, user: User, password: str) -> bool:
        pass


class InMemoryUserDirectory(UserDirectory):
    def __init__(self, users: Iterable[User] = ()):
        self.users: Dict[int, User] = {user.id: user for user in users}

    def add(self, user: User) -> None:
        self.users[user.id] = user

    async def get(self, user_id: int):
        user = self.users.get(user_id)
        if user is None:
            return NotFound(f"User {user_id} does not exist."), None
        return None, user

    async def get_by(self, column: str, value: str):
        if column not in ("login", "email"):
            raise ValueError(f"Unsupported lookup column: {column}")

        for user in self.users.values():
            if getattr(user, column) == value:
                return None, user

        return NotFound(f"No user with {column} '{value}'."), None

    def verify_password(self, user: User, password: str) -> bool:
        return secrets.compare_digest(user.password.encode("utf-8"), (password or "").encode("utf-8"))
