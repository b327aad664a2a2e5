from __future__ import annotations

from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from expense_system.common.clock import FixedClock
from expense_system.container import wire_container
from expense_system.core.enums import ExpenseStatus, Role
from expense_system.main import create_app
from fakes import MEALS, TRAVEL, FakeCategoriesRepo, FakeExpensesRepo, FakeUsersRepo, expense_in, make_user

EMPLOYEE = 1
MANAGER = 2
COLLEAGUE = 3


@pytest.fixture
def expenses():
    return FakeExpensesRepo()


@pytest.fixture
def app(monkeypatch, expenses):
    monkeypatch.setenv("APP_ENV", "testing")
    pw = generate_password_hash("pw", method="pbkdf2:sha256:1000")
    users = FakeUsersRepo(
        make_user(EMPLOYEE, email="employee@example.com", password_hash=pw),
        make_user(MANAGER, Role.MANAGER, email="manager@example.com", password_hash=pw),
        make_user(COLLEAGUE, email="colleague@example.com", password_hash=pw),
    )
    container = wire_container(
        users_repo=users,
        categories_repo=FakeCategoriesRepo(TRAVEL, MEALS),
        expenses_repo=expenses,
        clock=FixedClock(datetime(2026, 3, 10, 9, 0, 0)),
    )
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, email):
    resp = client.post("/api/auth/login", json={"email": email, "password": "pw"})
    assert resp.status_code == 200
    return resp.get_json()


def _create(client, **overrides):
    body = {"category_id": TRAVEL.category_id, "amount": "42.10", "expense_date": "2026-03-01", "description": "Taxi"}
    body.update(overrides)
    return client.post("/api/expenses", json=body)


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "UP"


def test_requires_login(client):
    resp = client.get("/api/expenses")
    assert resp.status_code == 401
    assert resp.get_json()["path"] == "/api/expenses"


def test_bad_credentials(client):
    resp = client.post("/api/auth/login", json={"email": "employee@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid email or password"


def test_login_me_logout(client):
    body = _login(client, "employee@example.com")
    assert body["role"] == "USER"

    assert client.get("/api/auth/me").get_json()["id"] == EMPLOYEE
    assert client.post("/api/auth/logout").status_code == 204
    assert client.get("/api/auth/me").status_code == 401


def test_categories_sorted_by_name(client):
    _login(client, "employee@example.com")
    names = [c["name"] for c in client.get("/api/categories").get_json()]
    assert names == ["Meals", "Travel"]


def test_create_and_list(client):
    _login(client, "employee@example.com")

    resp = _create(client)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "DRAFT"
    assert body["amount"] == "42.10"
    assert body["version"] == 1

    page = client.get("/api/expenses?page=0&size=5").get_json()
    assert page["total_elements"] == 1
    assert page["content"][0]["id"] == body["id"]


def test_create_validation_errors(client):
    _login(client, "employee@example.com")

    assert _create(client, amount="0").status_code == 400
    assert _create(client, expense_date="2026-03-11").status_code == 400
    assert _create(client, expense_date="01/03/2026").status_code == 400
    assert _create(client, category_id=99).status_code == 404
    assert client.get("/api/expenses?page=abc").status_code == 400


def test_submit_and_approve_flow(client, expenses):
    _login(client, "employee@example.com")
    eid = _create(client).get_json()["id"]
    assert client.post(f"/api/expenses/{eid}/submit").get_json()["status"] == "SUBMITTED"
    assert client.post(f"/api/expenses/{eid}/submit").status_code == 400

    _login(client, "manager@example.com")
    pending = client.get("/api/expenses/pending").get_json()
    assert [e["id"] for e in pending] == [eid]

    resp = client.post(f"/api/expenses/{eid}/approve", json={"review_notes": "ok"})
    assert resp.status_code == 200
    assert resp.get_json()["reviewed_by"] == MANAGER
    assert expenses.rows[eid].status == ExpenseStatus.APPROVED


def test_user_cannot_review(client, expenses):
    expenses.put(expense_in(ExpenseStatus.SUBMITTED, expense_id=7, user_id=COLLEAGUE))
    _login(client, "employee@example.com")

    assert client.get("/api/expenses/pending").status_code == 403
    assert client.post("/api/expenses/7/reject", json={}).status_code == 403


def test_non_owner_access(client, expenses):
    expenses.put(expense_in(ExpenseStatus.DRAFT, expense_id=8, user_id=COLLEAGUE))
    _login(client, "manager@example.com")

    assert client.get("/api/expenses/8").status_code == 403
    assert client.put("/api/expenses/8", json={"category_id": 1, "amount": "1", "expense_date": "2026-03-01"}).status_code == 403
    assert client.delete("/api/expenses/8").status_code == 403
    assert client.get("/api/expenses/999").status_code == 404


def test_update_and_delete_draft(client, expenses):
    _login(client, "employee@example.com")
    eid = _create(client).get_json()["id"]

    resp = client.put(
        f"/api/expenses/{eid}",
        json={"category_id": MEALS.category_id, "amount": 15, "expense_date": "2026-03-02", "description": ""},
    )
    assert resp.status_code == 200
    assert resp.get_json()["amount"] == "15.00"
    assert resp.get_json()["description"] is None

    assert client.delete(f"/api/expenses/{eid}").status_code == 204
    assert eid not in expenses.rows


def test_lost_update_is_conflict(client, expenses):
    _login(client, "employee@example.com")
    eid = _create(client).get_json()["id"]
    expenses.mark_submitted = lambda **_kw: False

    resp = client.post(f"/api/expenses/{eid}/submit")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "Conflict"


def test_report_summary(client, expenses):
    expenses.put(expense_in(ExpenseStatus.APPROVED, expense_id=20, user_id=EMPLOYEE, amount="10.00"))
    expenses.put(expense_in(ExpenseStatus.DRAFT, expense_id=21, user_id=EMPLOYEE, amount="2.50"))
    _login(client, "employee@example.com")

    body = client.get("/api/reports/summary").get_json()
    assert body["count"] == 2
    assert body["total_amount"] == "12.50"

    filtered = client.get("/api/reports/summary?status=approved").get_json()
    assert filtered["count"] == 1
    assert filtered["filters"]["status"] == "APPROVED"

    assert client.get("/api/reports/summary?start_date=2026-03-02&end_date=2026-03-01").status_code == 400
    assert client.get("/api/reports/summary?category_id=x").status_code == 400


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nothing")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Not Found"


def test_get_category(client):
    _login(client, "employee@example.com")
    assert client.get("/api/categories/2").get_json()["name"] == "Meals"
    assert client.get("/api/categories/9").status_code == 404


def test_wrong_json_types_are_bad_requests(client, expenses):
    assert client.post("/api/auth/login", json={"email": 5, "password": "pw"}).status_code == 400
    assert client.post("/api/auth/login", json={"email": "employee@example.com", "password": 7}).status_code == 400

    _login(client, "employee@example.com")
    resp = _create(client, description=123)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Description must be a string"
    assert _create(client, expense_date=20260301).status_code == 400
    assert expenses.rows == {}

    expenses.put(expense_in(ExpenseStatus.SUBMITTED, expense_id=9, user_id=COLLEAGUE))
    _login(client, "manager@example.com")
    assert client.post("/api/expenses/9/approve", json={"review_notes": 1}).status_code == 400
    assert expenses.rows[9].status == ExpenseStatus.SUBMITTED
