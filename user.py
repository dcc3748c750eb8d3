from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, raw: Any) -> "Role":
        """Bilinmeyen roller USER'a düşer."""
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            logger.warning("Bilinmeyen rol %r, 'user' olarak kabul ediliyor", raw)
            return cls.USER


@dataclass(frozen=True)
class User:
    """Oturuma bağlı, değiştirilemez kullanıcı kaydı."""

    id: str
    name: str
    email: str = ""
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role.value}

    @staticmethod
    def from_dict(data: dict) -> "User":
        raw_id = data.get("id", data.get("_id"))
        return User(
            id=str(raw_id) if raw_id is not None else "",
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            role=Role.parse(data.get("role", Role.USER.value)),
        )
