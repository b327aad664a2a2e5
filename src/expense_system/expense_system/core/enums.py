from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization checks."""

    USER = "USER"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class ExpenseStatus(str, Enum):
    """Lifecycle status of an expense as stored in the database."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @property
    def is_reviewed(self) -> bool:
        return self in {ExpenseStatus.APPROVED, ExpenseStatus.REJECTED}
