# src/taskpad/accounts/models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..storage.keys import AccountId


@dataclass(frozen=True, slots=True)
class AccountProjection:
    """Non-secret view of an account (session + display)."""

    id: AccountId
    name: str
    email: str

    def to_record(self) -> dict[str, str]:
        return {"id": str(self.id), "name": self.name, "email": self.email}

    @classmethod
    def from_record(cls, raw: Any) -> AccountProjection | None:
        """Return None for anything that is not a well-formed projection."""
        if not isinstance(raw, dict):
            return None
        acc_id, name, email = raw.get("id"), raw.get("name"), raw.get("email")
        if not isinstance(acc_id, str) or not acc_id.strip():
            return None
        if not isinstance(name, str) or not isinstance(email, str) or not email:
            return None
        return cls(id=AccountId(acc_id), name=name, email=email)


@dataclass(frozen=True, slots=True)
class Account:
    id: AccountId
    name: str
    email: str
    password_hash: str
    created_at: str

    def projection(self) -> AccountProjection:
        return AccountProjection(id=self.id, name=self.name, email=self.email)

    def to_record(self) -> dict[str, str]:
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "passwordHash": self.password_hash,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, raw: Any) -> Account | None:
        base = AccountProjection.from_record(raw)
        if base is None:
            return None
        # Older records stored the hash under "password".
        pw_hash = raw.get("passwordHash", raw.get("password"))
        if not isinstance(pw_hash, str):
            return None
        created_at = raw.get("createdAt")
        return cls(
            id=base.id,
            name=base.name,
            email=base.email,
            password_hash=pw_hash,
            created_at=created_at if isinstance(created_at, str) else "",
        )
