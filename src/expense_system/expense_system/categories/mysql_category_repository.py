from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Category
from .repository import CategoryRepository


class MySQLCategoryRepository(CategoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, category_id: int) -> Optional[Category]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT category_id, name, description FROM categories WHERE category_id=%s",
                (int(category_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Category(category_id=int(r["category_id"]), name=r["name"], description=r.get("description"))

    def list_all(self) -> Sequence[Category]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT category_id, name, description FROM categories ORDER BY name")
            return [
                Category(category_id=int(r["category_id"]), name=r["name"], description=r.get("description"))
                for r in fetchall(cur)
            ]
