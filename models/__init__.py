from flask_sqlalchemy import SQLAlchemy
from datetime import date, datetime

db = SQLAlchemy()

LEAVE_STATUSES = ("pending", "approved", "rejected")


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="employee", index=True)  # employee, lead
    employee_id = db.Column(db.String(40), nullable=False, unique=True, index=True)  # e.g. "RW/2883"
    phone = db.Column(db.String(30))
    date_of_joining = db.Column(db.Date, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    leaves = db.relationship("Leave", back_populates="employee", lazy="dynamic")

    @property
    def is_lead(self):
        return self.role == "lead"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "employee_id": self.employee_id,
            "phone": self.phone,
            "date_of_joining": _iso(self.date_of_joining),
        }


class Leave(db.Model):
    __table_args__ = (
        db.Index("ix_leave_employee_status", "employee_id", "status"),
        db.Index("ix_leave_status_start", "status", "start_date"),
    )

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    # cached employee info at time of request (for easy display)
    employee_name = db.Column(db.String(120), nullable=False)
    employee_code = db.Column(db.String(40), nullable=False)
    start_date = db.Column(db.Date, nullable=False, index=True)
    end_date = db.Column(db.Date, nullable=False, index=True)
    reason = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="pending", index=True)
    applied_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    reviewed_by = db.Column(db.String(120))
    reviewed_at = db.Column(db.DateTime)

    employee = db.relationship("User", back_populates="leaves")

    @property
    def days(self):
        return (self.end_date - self.start_date).days + 1

    def to_dict(self, with_employee=False):
        data = {
            "id": self.id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "employee_code": self.employee_code,
            "start_date": _iso(self.start_date),
            "end_date": _iso(self.end_date),
            "days": self.days,
            "reason": self.reason,
            "status": self.status,
            "applied_at": _iso(self.applied_at),
            "reviewed_by": self.reviewed_by,
            "reviewed_at": _iso(self.reviewed_at),
        }
        if with_employee and self.employee is not None:
            data["employee"] = {"name": self.employee.name, "email": self.employee.email}
        return data


class ChatMessage(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    sender_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    sender_name = db.Column(db.String(120), nullable=False)
    sender_role = db.Column(db.String(20), nullable=False)
    message = db.Column(db.Text, nullable=False)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "sender_id": self.sender_id,
            "sender_name": self.sender_name,
            "sender_role": self.sender_role,
            "message": self.message,
            "timestamp": _iso(self.timestamp),
        }


class LeaveInputError(ValueError):
    pass


def parse_date(value):
    if not value:
        return None
    if not isinstance(value, str):
        raise LeaveInputError("Dates must be in YYYY-MM-DD format")
    try:
        if "T" not in value:
            return date.fromisoformat(value)
        # full timestamps from JSON clients, e.g. 2025-10-01T00:00:00.000Z
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        raise LeaveInputError("Dates must be in YYYY-MM-DD format")


def new_leave(user, start_date, end_date, reason):
    """Build a pending leave for ``user`` from raw form/JSON values."""
    start = parse_date(start_date)
    end = parse_date(end_date)
    reason = reason.strip() if isinstance(reason, str) else ""
    if not start or not end or not reason:
        raise LeaveInputError("Start date, end date and reason are required")
    if end < start:
        raise LeaveInputError("End date cannot be before start date")

    return Leave(
        employee_id=user.id,
        employee_name=user.name,
        employee_code=user.employee_id,
        start_date=start,
        end_date=end,
        reason=reason,
    )


def review_leave(leave, status, reviewer_name):
    if status not in LEAVE_STATUSES:
        raise LeaveInputError("Invalid status: %s" % status)
    leave.status = status
    leave.reviewed_by = reviewer_name
    leave.reviewed_at = datetime.utcnow()


def recent_messages(limit=50):
    """Latest ``limit`` chat messages, oldest first."""
    messages = ChatMessage.query.order_by(ChatMessage.timestamp.desc(), ChatMessage.id.desc()).limit(limit).all()
    messages.reverse()
    return messages
