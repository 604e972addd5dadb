"""Test fixtures for the work hours summary."""
import os
from datetime import time

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

from app import create_app  # noqa: E402
from models import ActivityRecord, Employee, FteTerm, PositionTerm, db  # noqa: E402

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "REPORT_START_DATE": "2025-01-01",
}


@pytest.fixture
def app():
    """Application bound to a fresh in-memory database."""

    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def add_employee(app):
    """Insert an employee with its FTE terms, position terms and activity."""

    def _add(emp_id, first, last, ftes=(), positions=(), activity=()):
        db.session.add(Employee(id=emp_id, first_name=first, last_name=last))
        for percentage, start, end in ftes:
            db.session.add(FteTerm(employee_id=emp_id, percentage=percentage, start_date=start, end_date=end))
        for start, end in positions:
            db.session.add(PositionTerm(employee_id=emp_id, start_date=start, end_date=end))
        for day, hh_mm in activity:
            duration = None if hh_mm is None else time(*hh_mm)
            db.session.add(ActivityRecord(employee_id=emp_id, day=day, duration=duration))
        db.session.commit()

    return _add
