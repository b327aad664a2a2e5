from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Category:
    category_id: int
    name: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.category_id,
            "name": self.name,
            "description": self.description,
        }
