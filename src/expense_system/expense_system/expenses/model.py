from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import format_datetime
from ..core.enums import ExpenseStatus


@dataclass(frozen=True)
class Expense:
    expense_id: int
    user_id: int
    category_id: int
    amount: Decimal
    expense_date: date
    description: Optional[str]
    status: ExpenseStatus
    created_at: datetime
    updated_at: datetime
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    review_notes: Optional[str] = None
    version: int = 1

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == int(user_id)

    def to_dict(self) -> dict:
        return {
            "id": self.expense_id,
            "user_id": self.user_id,
            "category_id": self.category_id,
            "amount": f"{self.amount:.2f}",
            "expense_date": self.expense_date.isoformat(),
            "description": self.description,
            "status": self.status.value,
            "submitted_at": format_datetime(self.submitted_at),
            "reviewed_at": format_datetime(self.reviewed_at),
            "reviewed_by": self.reviewed_by,
            "review_notes": self.review_notes,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
            "version": self.version,
        }


@dataclass(frozen=True)
class ExpensePage:
    items: Sequence[Expense]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.size - 1) // self.size if self.size else 0

    def to_dict(self) -> dict:
        return {
            "content": [e.to_dict() for e in self.items],
            "page": self.page,
            "size": self.size,
            "total_elements": self.total,
            "total_pages": self.total_pages,
        }


@dataclass(frozen=True)
class ExpenseFilter:
    """Optional filters for report queries; ``None`` means "no filter"."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[int] = None
    status: Optional[ExpenseStatus] = None

    def matches(self, expense: Expense) -> bool:
        if self.start_date is not None and self.end_date is not None:
            if not (self.start_date <= expense.expense_date <= self.end_date):
                return False
        if self.category_id is not None and expense.category_id != self.category_id:
            return False
        if self.status is not None and expense.status != self.status:
            return False
        return True

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "category_id": self.category_id,
            "status": self.status.value if self.status else None,
        }
