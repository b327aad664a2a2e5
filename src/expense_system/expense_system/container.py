from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .categories.mysql_category_repository import MySQLCategoryRepository
from .categories.repository import CategoryRepository
from .categories.service import CategoryService
from .common.clock import Clock, SystemClock
from .database.connection import DBConfig, DatabaseConnection
from .expenses.mysql_expense_repository import MySQLExpenseRepository
from .expenses.repository import ExpenseRepository
from .expenses.service import ExpenseService
from .reports.service import ExpenseReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    categories_repo: CategoryRepository
    expenses_repo: ExpenseRepository

    auth_service: AuthService
    category_service: CategoryService
    expense_service: ExpenseService
    report_service: ExpenseReportService


def wire_container(
    *,
    users_repo: UserRepository,
    categories_repo: CategoryRepository,
    expenses_repo: ExpenseRepository,
    clock: Optional[Clock] = None,
) -> Container:
    """Build services over the given repositories (MySQL in production, fakes in tests)."""
    clock = clock or SystemClock()
    return Container(
        users_repo=users_repo,
        categories_repo=categories_repo,
        expenses_repo=expenses_repo,
        auth_service=AuthService(users_repo),
        category_service=CategoryService(categories_repo),
        expense_service=ExpenseService(expenses_repo, categories_repo, users_repo, clock=clock),
        report_service=ExpenseReportService(expenses_repo, categories_repo, users_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_container(
        users_repo=MySQLUserRepository(conn),
        categories_repo=MySQLCategoryRepository(conn),
        expenses_repo=MySQLExpenseRepository(conn),
    )
