from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import ExpenseStatus
from .model import Expense, ExpenseFilter


class ExpenseRepository(Protocol):
    """Persistence for expenses.

    Every write to an existing row is a compare-and-set on ``expected_version``
    (plus the status the transition starts from) and returns ``False`` when
    nothing matched, so a concurrent writer can never be overwritten silently.
    """

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
        raise NotImplementedError

    def get_by_id(self, *, expense_id: int) -> Optional[Expense]:
        raise NotImplementedError

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
        raise NotImplementedError

    def delete_draft(self, *, expense_id: int, expected_version: int) -> bool:
        raise NotImplementedError

    def mark_submitted(self, *, expense_id: int, expected_version: int, submitted_at: datetime) -> bool:
        raise NotImplementedError

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
        raise NotImplementedError

    def list_by_owner(self, *, user_id: int, offset: int, limit: int) -> Sequence[Expense]:
        """Newest expense_date first."""

        raise NotImplementedError

    def count_by_owner(self, *, user_id: int) -> int:
        raise NotImplementedError

    def list_by_status(self, *, status: ExpenseStatus) -> Sequence[Expense]:
        raise NotImplementedError

    def search(self, *, user_id: int, filters: ExpenseFilter) -> Sequence[Expense]:
        raise NotImplementedError
