"""Example: drive the expense lifecycle through the service layer (no Flask).

Controllers are a thin layer; the business rules live in the services.
Assumes the demo seed has been applied (scripts/seed_db.py).
"""

import importlib
from datetime import date
from decimal import Decimal

from config import get_settings_module

from expense_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    employee = container.users_repo.get_by_email("employee@example.com")
    manager = container.users_repo.get_by_email("manager@example.com")
    travel = container.category_service.list_all()[0]

    svc = container.expense_service
    expense = svc.create(
        user_id=employee.user_id,
        category_id=travel.category_id,
        amount=Decimal("42.50"),
        expense_date=date.today(),
        description="Taxi to client site",
    )
    expense = svc.submit(expense_id=expense.expense_id, user_id=employee.user_id)
    expense = svc.approve(expense_id=expense.expense_id, user_id=manager.user_id, review_notes="ok")
    print(expense.to_dict())


if __name__ == "__main__":
    main()
