"""Tests for models."""

from datetime import date
from types import SimpleNamespace

import pytest

from models import (
    ChatMessage,
    Leave,
    LeaveInputError,
    User,
    db,
    new_leave,
    parse_date,
    recent_messages,
    review_leave,
)


EMPLOYEE = SimpleNamespace(id=7, name="Arjun Menon", employee_id="RW/2883")


class TestNewLeave:
    """Tests for building leave requests from raw input."""

    def test_copies_employee_details(self):
        """Test name and code are cached on the leave."""
        lr = new_leave(EMPLOYEE, "2025-10-01", "2025-10-03", "Family function")
        assert lr.employee_id == 7
        assert lr.employee_name == "Arjun Menon"
        assert lr.employee_code == "RW/2883"
        assert lr.start_date == date(2025, 10, 1)
        assert lr.end_date == date(2025, 10, 3)
        assert lr.days == 3

    def test_single_day(self):
        """Test a one-day leave counts as one day."""
        lr = new_leave(EMPLOYEE, "2025-10-01", "2025-10-01", "Doctor")
        assert lr.days == 1

    def test_accepts_iso_datetimes(self):
        """Test timestamps are truncated to their date."""
        lr = new_leave(EMPLOYEE, "2025-10-01T00:00:00.000Z", "2025-10-02T00:00:00Z", "Trip")
        assert lr.start_date == date(2025, 10, 1)

    def test_end_before_start(self):
        """Test reversed ranges are rejected."""
        with pytest.raises(LeaveInputError, match="before start"):
            new_leave(EMPLOYEE, "2025-10-05", "2025-10-01", "Trip")

    @pytest.mark.parametrize("start,end,reason", [
        ("", "2025-10-01", "Trip"),
        ("2025-10-01", None, "Trip"),
        ("2025-10-01", "2025-10-02", "   "),
    ])
    def test_missing_fields(self, start, end, reason):
        """Test every field is required."""
        with pytest.raises(LeaveInputError, match="required"):
            new_leave(EMPLOYEE, start, end, reason)

    @pytest.mark.parametrize("value", ["01/10/2025", "2025-01-01junk", "2025-01-01Tnoon", 20251001])
    def test_bad_date(self, value):
        """Test malformed dates are rejected."""
        with pytest.raises(LeaveInputError, match="YYYY-MM-DD"):
            parse_date(value)


class TestReviewLeave:
    """Tests for lead review of a leave."""

    def test_sets_reviewer(self):
        lr = new_leave(EMPLOYEE, "2025-10-01", "2025-10-02", "Trip")
        review_leave(lr, "approved", "Meera Nair")
        assert lr.status == "approved"
        assert lr.reviewed_by == "Meera Nair"
        assert lr.reviewed_at is not None

    def test_unknown_status(self):
        lr = new_leave(EMPLOYEE, "2025-10-01", "2025-10-02", "Trip")
        with pytest.raises(LeaveInputError):
            review_leave(lr, "maybe", "Meera Nair")
        assert lr.reviewed_by is None


class TestPersistence:
    """Tests against the database."""

    def test_leave_defaults_and_serialisation(self, app, employee):
        with app.app_context():
            user = db.session.get(User, employee)
            lr = new_leave(user, "2025-10-01", "2025-10-02", "Trip")
            db.session.add(lr)
            db.session.commit()

            data = lr.to_dict(with_employee=True)
            assert data["status"] == "pending"
            assert data["start_date"] == "2025-10-01"
            assert data["applied_at"] is not None
            assert data["reviewed_by"] is None
            assert data["employee"] == {"name": "Arjun Menon", "email": "arjun@example.com"}

    def test_user_dict_hides_password(self, app, employee):
        with app.app_context():
            data = db.session.get(User, employee).to_dict()
        assert "password_hash" not in data
        assert data["employee_id"] == "RW/0001"
        assert data["role"] == "employee"

    def test_recent_messages_oldest_first(self, app, employee):
        with app.app_context():
            for i in range(55):
                db.session.add(ChatMessage(sender_id=employee, sender_name="Arjun Menon",
                                           sender_role="employee", message="msg %d" % i))
            db.session.commit()

            messages = recent_messages()
        assert len(messages) == 50
        assert messages[0].message == "msg 5"
        assert messages[-1].message == "msg 54"

    def test_leaves_relationship(self, app, employee):
        with app.app_context():
            user = db.session.get(User, employee)
            db.session.add(new_leave(user, "2025-10-01", "2025-10-02", "Trip"))
            db.session.commit()
            assert user.leaves.count() == 1
            assert Leave.query.first().employee.email == "arjun@example.com"
