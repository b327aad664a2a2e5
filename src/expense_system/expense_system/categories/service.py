from __future__ import annotations

from typing import Sequence

from ..core.exceptions import NotFoundError
from .model import Category
from .repository import CategoryRepository


class CategoryService:
    """Use case: read-only category reference data."""

    def __init__(self, categories: CategoryRepository):
        self._categories = categories

    def list_all(self) -> Sequence[Category]:
        return sorted(self._categories.list_all(), key=lambda c: c.name.lower())

    def get(self, category_id: int) -> Category:
        category = self._categories.get_by_id(int(category_id))
        if not category:
            raise NotFoundError(f"Category not found with id: {category_id}")
        return category
