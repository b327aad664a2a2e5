from __future__ import annotations

from datetime import date, datetime

import pytest

from expense_system.common.clock import FixedClock
from expense_system.core.enums import ExpenseStatus, Role
from expense_system.core.exceptions import StaleExpenseError
from expense_system.expenses.service import ExpenseService
from fakes import TRAVEL, FakeCategoriesRepo, FakeUsersRepo, RacingExpensesRepo, expense_in, make_user

OWNER = 1
MANAGER = 2
ADMIN = 3


@pytest.fixture
def repo():
    return RacingExpensesRepo()


@pytest.fixture
def svc(repo):
    users = FakeUsersRepo(make_user(OWNER), make_user(MANAGER, Role.MANAGER), make_user(ADMIN, Role.ADMIN))
    return ExpenseService(repo, FakeCategoriesRepo(TRAVEL), users, clock=FixedClock(datetime(2026, 3, 10, 9, 0, 0)))


def test_double_submit_race_submits_once(svc, repo):
    draft = repo.put(expense_in(ExpenseStatus.DRAFT, user_id=OWNER))
    winner = []
    repo.race = lambda: winner.append(svc.submit(expense_id=draft.expense_id, user_id=OWNER))

    with pytest.raises(StaleExpenseError):
        svc.submit(expense_id=draft.expense_id, user_id=OWNER)

    stored = repo.rows[draft.expense_id]
    assert stored.status == ExpenseStatus.SUBMITTED
    assert stored.version == draft.version + 1
    assert winner[0] == stored


def test_approve_and_reject_race_has_one_outcome(svc, repo):
    submitted = repo.put(expense_in(ExpenseStatus.SUBMITTED, user_id=OWNER))
    repo.race = lambda: svc.reject(expense_id=submitted.expense_id, user_id=ADMIN, review_notes="no")

    with pytest.raises(StaleExpenseError):
        svc.approve(expense_id=submitted.expense_id, user_id=MANAGER, review_notes="yes")

    stored = repo.rows[submitted.expense_id]
    assert stored.status == ExpenseStatus.REJECTED
    assert stored.reviewed_by == ADMIN
    assert stored.review_notes == "no"


def test_edit_racing_submit_does_not_change_submitted_record(svc, repo):
    draft = repo.put(expense_in(ExpenseStatus.DRAFT, user_id=OWNER))
    repo.race = lambda: svc.submit(expense_id=draft.expense_id, user_id=OWNER)

    with pytest.raises(StaleExpenseError):
        svc.update(
            expense_id=draft.expense_id,
            user_id=OWNER,
            category_id=TRAVEL.category_id,
            amount="999.99",
            expense_date=date(2026, 3, 1),
            description="changed",
        )

    stored = repo.rows[draft.expense_id]
    assert stored.status == ExpenseStatus.SUBMITTED
    assert stored.amount == draft.amount
    assert stored.description == draft.description


def test_delete_racing_submit_keeps_record(svc, repo):
    draft = repo.put(expense_in(ExpenseStatus.DRAFT, user_id=OWNER))
    repo.race = lambda: svc.submit(expense_id=draft.expense_id, user_id=OWNER)

    with pytest.raises(StaleExpenseError):
        svc.delete(expense_id=draft.expense_id, user_id=OWNER)

    assert repo.rows[draft.expense_id].status == ExpenseStatus.SUBMITTED
