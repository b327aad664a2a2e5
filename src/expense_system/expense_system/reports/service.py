from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..categories.repository import CategoryRepository
from ..core.enums import ExpenseStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..expenses.model import Expense, ExpenseFilter
from ..expenses.repository import ExpenseRepository
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpenseReport:
    expenses: Sequence[Expense]
    total_amount: Decimal
    count: int
    by_status: dict
    filters: ExpenseFilter

    def to_dict(self) -> dict:
        return {
            "expenses": [e.to_dict() for e in self.expenses],
            "total_amount": f"{self.total_amount:.2f}",
            "count": self.count,
            "by_status": dict(self.by_status),
            "filters": self.filters.to_dict(),
        }


class ExpenseReportService:
    """Summary of a user's own expenses with optional date/category/status filters."""

    def __init__(self, expenses: ExpenseRepository, categories: CategoryRepository, users: UserRepository):
        self._expenses = expenses
        self._categories = categories
        self._users = users

    @staticmethod
    def _parse_status(status: Optional[str]) -> Optional[ExpenseStatus]:
        s = (status or "").strip()
        if not s:
            return None
        try:
            return ExpenseStatus(s.upper())
        except ValueError:
            raise ValidationError(f"Invalid expense status: {status}")

    def build_summary(
        self,
        *,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> ExpenseReport:
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError(f"User not found with id: {user_id}")

        if start_date and end_date and start_date > end_date:
            raise ValidationError("Start date must be on or before end date")

        if category_id is not None and not self._categories.get_by_id(int(category_id)):
            raise NotFoundError(f"Category not found with id: {category_id}")

        filters = ExpenseFilter(
            start_date=start_date,
            end_date=end_date,
            category_id=int(category_id) if category_id is not None else None,
            status=self._parse_status(status),
        )
        rows = list(self._expenses.search(user_id=int(user_id), filters=filters))

        total = sum((e.amount for e in rows), Decimal("0.00"))
        by_status = {s.value: 0 for s in ExpenseStatus}
        for e in rows:
            by_status[e.status.value] += 1

        logger.info("Report for user %s: %d expenses, total %s", user_id, len(rows), total)
        return ExpenseReport(expenses=rows, total_amount=total, count=len(rows), by_status=by_status, filters=filters)
