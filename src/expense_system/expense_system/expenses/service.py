from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..categories.repository import CategoryRepository
from ..common.clock import Clock, SystemClock
from ..common.validators import require_max_length, require_not_in_future, require_valid_amount
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_DESCRIPTION_LENGTH, MAX_PAGE_SIZE, MAX_REVIEW_NOTES_LENGTH
from ..core.enums import ExpenseStatus
from ..core.exceptions import AuthorizationError, NotFoundError, StaleExpenseError, ValidationError
from ..core.permissions import can_review
from ..users.model import User
from ..users.repository import UserRepository
from .model import Expense, ExpensePage
from .repository import ExpenseRepository

logger = logging.getLogger(__name__)


class ExpenseService:
    """Expense lifecycle: DRAFT -> SUBMITTED -> APPROVED | REJECTED.

    Checks run in a fixed order and fail fast: requester and expense existence,
    then ownership or reviewer role, then the status precondition, then field
    validation. Nothing
    is written until every check has passed, and each write is guarded by the
    version read at the start of the call.
    """

    def __init__(
        self,
        expenses: ExpenseRepository,
        categories: CategoryRepository,
        users: UserRepository,
        *,
        clock: Optional[Clock] = None,
    ):
        self._expenses = expenses
        self._categories = categories
        self._users = users
        self._clock = clock or SystemClock()

    # -------- lookups --------
    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError(f"User not found with id: {user_id}")
        return user

    def _require_expense(self, expense_id: int) -> Expense:
        expense = self._expenses.get_by_id(expense_id=int(expense_id))
        if not expense:
            raise NotFoundError(f"Expense not found with id: {expense_id}")
        return expense

    def _require_category(self, category_id) -> int:
        if category_id is None:
            raise ValidationError("Category ID is required")
        try:
            cid = int(category_id)
        except (TypeError, ValueError):
            raise ValidationError("Category ID must be an integer")
        if not self._categories.get_by_id(cid):
            raise NotFoundError(f"Category not found with id: {category_id}")
        return cid

    def _require_owned(self, expense_id: int, user_id: int, action: str) -> Expense:
        self._require_user(user_id)
        expense = self._require_expense(expense_id)
        if not expense.is_owned_by(user_id):
            logger.warning(
                "Unauthorized %s attempt: user %s on expense %s owned by %s",
                action,
                user_id,
                expense_id,
                expense.user_id,
            )
            raise AuthorizationError(f"You are not authorized to {action} this expense")
        return expense

    def _require_reviewer(self, user_id: int, action: str) -> User:
        user = self._require_user(user_id)
        if not can_review(user.role):
            logger.warning("Unauthorized %s attempt: user %s with role %s", action, user_id, user.role.value)
            raise AuthorizationError(f"Only managers can {action} expenses")
        return user

    @staticmethod
    def _require_status(expense: Expense, expected: ExpenseStatus, action: str) -> None:
        if expense.status != expected:
            logger.warning(
                "Attempt to %s expense %s with status %s",
                action,
                expense.expense_id,
                expense.status.value,
            )
            raise ValidationError(f"Only expenses in {expected.value} status can be {action}")

    def _validated_fields(self, amount, expense_date: date, description: Optional[str]):
        return (
            require_valid_amount(amount),
            require_not_in_future(expense_date, self._clock.today()),
            require_max_length(description, "Description", MAX_DESCRIPTION_LENGTH),
        )

    def _reload(self, expense_id: int) -> Expense:
        expense = self._expenses.get_by_id(expense_id=int(expense_id))
        if not expense:
            raise StaleExpenseError(f"Expense {expense_id} was removed concurrently")
        return expense

    @staticmethod
    def _stale(expense: Expense) -> StaleExpenseError:
        logger.warning("Lost update on expense %s (version %s)", expense.expense_id, expense.version)
        return StaleExpenseError("Expense was modified by another request; reload and try again")

    # -------- owner operations --------
    def create(
        self,
        *,
        user_id: int,
        category_id: int,
        amount,
        expense_date: date,
        description: Optional[str] = None,
    ) -> Expense:
        logger.info("Creating expense for user %s", user_id)
        owner = self._require_user(user_id)
        cid = self._require_category(category_id)
        amount_d, expense_date, description = self._validated_fields(amount, expense_date, description)

        expense_id = self._expenses.create(
            user_id=owner.user_id,
            category_id=cid,
            amount=amount_d,
            expense_date=expense_date,
            description=description,
            created_at=self._clock.now(),
        )
        logger.info("Expense %s created for user %s", expense_id, owner.user_id)
        return self._reload(expense_id)

    def get(self, *, expense_id: int, user_id: int) -> Expense:
        return self._require_owned(expense_id, user_id, "access")

    def list_mine(self, *, user_id: int, page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> ExpensePage:
        page = int(page)
        size = int(size)
        if page < 0:
            raise ValidationError("Page must be zero or greater")
        if size < 1 or size > MAX_PAGE_SIZE:
            raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")

        items = self._expenses.list_by_owner(user_id=int(user_id), offset=page * size, limit=size)
        total = self._expenses.count_by_owner(user_id=int(user_id))
        return ExpensePage(items=list(items), page=page, size=size, total=total)

    def update(
        self,
        *,
        expense_id: int,
        user_id: int,
        category_id: int,
        amount,
        expense_date: date,
        description: Optional[str] = None,
    ) -> Expense:
        logger.info("Updating expense %s for user %s", expense_id, user_id)
        expense = self._require_owned(expense_id, user_id, "update")
        self._require_status(expense, ExpenseStatus.DRAFT, "updated")
        cid = self._require_category(category_id)
        amount_d, expense_date, description = self._validated_fields(amount, expense_date, description)

        ok = self._expenses.update_draft(
            expense_id=expense.expense_id,
            expected_version=expense.version,
            category_id=cid,
            amount=amount_d,
            expense_date=expense_date,
            description=description,
            updated_at=self._clock.now(),
        )
        if not ok:
            raise self._stale(expense)
        logger.info("Expense %s updated", expense_id)
        return self._reload(expense.expense_id)

    def delete(self, *, expense_id: int, user_id: int) -> None:
        logger.info("Deleting expense %s for user %s", expense_id, user_id)
        expense = self._require_owned(expense_id, user_id, "delete")
        self._require_status(expense, ExpenseStatus.DRAFT, "deleted")

        if not self._expenses.delete_draft(expense_id=expense.expense_id, expected_version=expense.version):
            raise self._stale(expense)
        logger.info("Expense %s deleted", expense_id)

    def submit(self, *, expense_id: int, user_id: int) -> Expense:
        logger.info("Submitting expense %s for approval by user %s", expense_id, user_id)
        expense = self._require_owned(expense_id, user_id, "submit")
        self._require_status(expense, ExpenseStatus.DRAFT, "submitted")

        ok = self._expenses.mark_submitted(
            expense_id=expense.expense_id,
            expected_version=expense.version,
            submitted_at=self._clock.now(),
        )
        if not ok:
            raise self._stale(expense)
        logger.info("Expense %s submitted", expense_id)
        return self._reload(expense.expense_id)

    # -------- reviewer operations --------
    def list_pending(self, *, user_id: int) -> Sequence[Expense]:
        self._require_reviewer(user_id, "view pending")
        pending = list(self._expenses.list_by_status(status=ExpenseStatus.SUBMITTED))
        logger.info("Retrieved %d pending expenses for reviewer %s", len(pending), user_id)
        return pending

    def _review(
        self,
        *,
        expense_id: int,
        user_id: int,
        review_notes: Optional[str],
        outcome: ExpenseStatus,
        verb: str,
        past: str,
    ) -> Expense:
        logger.info("%s expense %s by reviewer %s", verb.capitalize(), expense_id, user_id)
        reviewer = self._require_reviewer(user_id, verb)
        expense = self._require_expense(expense_id)
        self._require_status(expense, ExpenseStatus.SUBMITTED, past)
        notes = require_max_length(review_notes, "Review notes", MAX_REVIEW_NOTES_LENGTH)

        ok = self._expenses.mark_reviewed(
            expense_id=expense.expense_id,
            expected_version=expense.version,
            status=outcome,
            reviewed_by=reviewer.user_id,
            reviewed_at=self._clock.now(),
            review_notes=notes,
        )
        if not ok:
            raise self._stale(expense)
        logger.info("Expense %s %s by reviewer %s", expense_id, past, reviewer.user_id)
        return self._reload(expense.expense_id)

    def approve(self, *, expense_id: int, user_id: int, review_notes: Optional[str] = "") -> Expense:
        return self._review(
            expense_id=expense_id,
            user_id=user_id,
            review_notes=review_notes,
            outcome=ExpenseStatus.APPROVED,
            verb="approve",
            past="approved",
        )

    def reject(self, *, expense_id: int, user_id: int, review_notes: Optional[str] = "") -> Expense:
        return self._review(
            expense_id=expense_id,
            user_id=user_id,
            review_notes=review_notes,
            outcome=ExpenseStatus.REJECTED,
            verb="reject",
            past="rejected",
        )
