from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import ExpenseStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Expense, ExpenseFilter
from .repository import ExpenseRepository

_EXPENSE_COLUMNS = """
    expense_id, user_id, category_id, amount, expense_date, description,
    status, submitted_at, reviewed_at, reviewed_by, review_notes,
    created_at, updated_at, version
"""


def _row_to_expense(r: dict) -> Expense:
    return Expense(
        expense_id=int(r["expense_id"]),
        user_id=int(r["user_id"]),
        category_id=int(r["category_id"]),
        amount=to_decimal(r["amount"]),
        expense_date=r["expense_date"],
        description=r.get("description"),
        status=ExpenseStatus(r["status"]),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
        submitted_at=r.get("submitted_at"),
        reviewed_at=r.get("reviewed_at"),
        reviewed_by=int(r["reviewed_by"]) if r.get("reviewed_by") is not None else None,
        review_notes=r.get("review_notes"),
        version=int(r["version"]),
    )


class MySQLExpenseRepository(ExpenseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        category_id: int,
        amount: Decimal,
        expense_date: date,
        description: Optional[str],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO expenses(
                    user_id, category_id, amount, expense_date, description,
                    status, created_at, updated_at, version
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    int(user_id),
                    int(category_id),
                    amount,
                    expense_date,
                    description,
                    ExpenseStatus.DRAFT.value,
                    created_at,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, *, expense_id: int) -> Optional[Expense]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_EXPENSE_COLUMNS} FROM expenses WHERE expense_id=%s",
                (int(expense_id),),
            )
            r = fetchone(cur)
            return _row_to_expense(r) if r else None

    def update_draft(
        self,
        *,
        expense_id: int,
        expected_version: int,
        category_id: int,
        amount: Decimal,
        expense_date: date,
        description: Optional[str],
        updated_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE expenses
                SET category_id=%s, amount=%s, expense_date=%s, description=%s,
                    updated_at=%s, version=version+1
                WHERE expense_id=%s AND version=%s AND status=%s
                """,
                (
                    int(category_id),
                    amount,
                    expense_date,
                    description,
                    updated_at,
                    int(expense_id),
                    int(expected_version),
                    ExpenseStatus.DRAFT.value,
                ),
            )
            return cur.rowcount > 0

    def delete_draft(self, *, expense_id: int, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM expenses WHERE expense_id=%s AND version=%s AND status=%s",
                (int(expense_id), int(expected_version), ExpenseStatus.DRAFT.value),
            )
            return cur.rowcount > 0

    def mark_submitted(self, *, expense_id: int, expected_version: int, submitted_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE expenses
                SET status=%s, submitted_at=%s, updated_at=%s, version=version+1
                WHERE expense_id=%s AND version=%s AND status=%s
                """,
                (
                    ExpenseStatus.SUBMITTED.value,
                    submitted_at,
                    submitted_at,
                    int(expense_id),
                    int(expected_version),
                    ExpenseStatus.DRAFT.value,
                ),
            )
            return cur.rowcount > 0

    def mark_reviewed(
        self,
        *,
        expense_id: int,
        expected_version: int,
        status: ExpenseStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        review_notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE expenses
                SET status=%s, reviewed_by=%s, reviewed_at=%s, review_notes=%s,
                    updated_at=%s, version=version+1
                WHERE expense_id=%s AND version=%s AND status=%s
                """,
                (
                    status.value,
                    int(reviewed_by),
                    reviewed_at,
                    review_notes,
                    reviewed_at,
                    int(expense_id),
                    int(expected_version),
                    ExpenseStatus.SUBMITTED.value,
                ),
            )
            return cur.rowcount > 0

    def list_by_owner(self, *, user_id: int, offset: int, limit: int) -> Sequence[Expense]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EXPENSE_COLUMNS}
                FROM expenses
                WHERE user_id=%s
                ORDER BY expense_date DESC, expense_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(user_id), int(limit), int(offset)),
            )
            return [_row_to_expense(r) for r in fetchall(cur)]

    def count_by_owner(self, *, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM expenses WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_by_status(self, *, status: ExpenseStatus) -> Sequence[Expense]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EXPENSE_COLUMNS}
                FROM expenses
                WHERE status=%s
                ORDER BY submitted_at ASC, expense_id ASC
                """,
                (status.value,),
            )
            return [_row_to_expense(r) for r in fetchall(cur)]

    def search(self, *, user_id: int, filters: ExpenseFilter) -> Sequence[Expense]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]

        if filters.start_date is not None and filters.end_date is not None:
            clauses.append("expense_date BETWEEN %s AND %s")
            params.extend([filters.start_date, filters.end_date])
        if filters.category_id is not None:
            clauses.append("category_id=%s")
            params.append(int(filters.category_id))
        if filters.status is not None:
            clauses.append("status=%s")
            params.append(filters.status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EXPENSE_COLUMNS}
                FROM expenses
                WHERE {where}
                ORDER BY expense_date DESC, expense_id DESC
                """,
                tuple(params),
            )
            return [_row_to_expense(r) for r in fetchall(cur)]
