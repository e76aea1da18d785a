from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Optional


@dataclass
class Session:
    id: Optional[str] = None
    client: Optional[str] = None
    platform: Optional[dict] = None
    created_at: Optional[datetime] = None
    expires: Optional[int] = None
    login_attempts: int = 0
    user_id: Optional[int] = None
    # Envelope presented by (or issued to) the request; never persisted
    session_id: Optional[str] = field(default=None, compare=False)

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    def to_record(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "session_id"
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Session":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in record.items() if k in names})
