from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Category


class CategoryRepository(Protocol):
    def get_by_id(self, category_id: int) -> Optional[Category]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Category]:
        raise NotImplementedError
