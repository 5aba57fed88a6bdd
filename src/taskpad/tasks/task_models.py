# src/taskpad/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class Task:
    id: int
    text: str
    completed: bool
    created_at: str
    updated_at: str

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_record(cls, raw: Any) -> Task | None:
        """Decode one persisted task; None for anything malformed."""
        if not isinstance(raw, dict):
            return None
        task_id = raw.get("id")
        # bool is an int subclass; reject it explicitly.
        if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id <= 0:
            return None
        text = raw.get("text")
        if not isinstance(text, str):
            return None
        completed = raw.get("completed")
        created_at = raw.get("createdAt")
        updated_at = raw.get("updatedAt")
        created_s = created_at if isinstance(created_at, str) else ""
        return cls(
            id=task_id,
            text=text,
            completed=completed if isinstance(completed, bool) else False,
            created_at=created_s,
            updated_at=updated_at if isinstance(updated_at, str) else created_s,
        )
