from .authenticator import Authenticator
from .user_directory import InMemoryUserDirectory, UserDirectory

__all__ = ["Authenticator", "InMemoryUserDirectory", "UserDirectory"]
