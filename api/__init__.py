"""JSON API mirroring the web views, authenticated with bearer tokens."""

from flask import Blueprint, abort, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

from auth import check_password, generate_token, token_required
from models import (
    ChatMessage,
    Leave,
    LeaveInputError,
    User,
    db,
    new_leave,
    recent_messages,
    review_leave,
)

api_bp = Blueprint("api", __name__, url_prefix="/api")


def _body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        abort(400, description="Request body must be a JSON object")
    return data


@api_bp.errorhandler(Exception)
def handle_error(error):
    if isinstance(error, HTTPException):
        return jsonify({"error": error.description}), error.code
    db.session.rollback()
    current_app.logger.exception("API error on %s %s", request.method, request.path)
    return jsonify({"error": str(error)}), 500


# ----------------- Auth -----------------


@api_bp.route("/auth/login", methods=["POST"])
def login():
    data = _body()
    user = User.query.filter_by(email=data.get("email")).first()
    if not user or not check_password(user.password_hash, data.get("password")):
        current_app.logger.info("API login failed for %s", data.get("email"))
        return jsonify({"error": "Invalid credentials"}), 401

    current_app.logger.info("API login for %s (%s)", user.email, user.role)
    return jsonify(
        {
            "token": generate_token(user),
            "user": {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "role": user.role,
                "employee_id": user.employee_id,
            },
        }
    )


# ----------------- Leaves -----------------


@api_bp.route("/leaves", methods=["GET"])
@token_required
def list_leaves():
    query = Leave.query
    if g.token_user["role"] != "lead":
        query = query.filter_by(employee_id=g.token_user["user_id"])
    leaves = query.order_by(Leave.applied_at.desc()).all()
    return jsonify([lr.to_dict(with_employee=True) for lr in leaves])


@api_bp.route("/leaves", methods=["POST"])
@token_required
def apply_leave():
    user = db.session.get(User, g.token_user["user_id"])
    if user is None:
        return jsonify({"error": "User not found"}), 404

    data = _body()
    try:
        lr = new_leave(user, data.get("start_date"), data.get("end_date"), data.get("reason"))
    except LeaveInputError as e:
        return jsonify({"error": str(e)}), 400

    db.session.add(lr)
    db.session.commit()
    current_app.logger.info("Leave %s applied by %s via API", lr.id, user.employee_id)
    return jsonify(lr.to_dict()), 201


@api_bp.route("/leaves/<int:leave_id>/status", methods=["PUT"])
@token_required
def update_leave_status(leave_id):
    if g.token_user["role"] != "lead":
        return jsonify({"error": "Access denied"}), 403

    lr = db.session.get(Leave, leave_id)
    if lr is None:
        return jsonify({"error": "Leave not found"}), 404

    try:
        review_leave(lr, _body().get("status"), g.token_user["name"])
    except LeaveInputError as e:
        return jsonify({"error": str(e)}), 400
    db.session.commit()
    current_app.logger.info("Leave %s marked %s by %s via API", lr.id, lr.status, lr.reviewed_by)
    return jsonify(lr.to_dict())


# ----------------- Employees -----------------


@api_bp.route("/employees", methods=["GET"])
@token_required
def list_employees():
    if g.token_user["role"] != "lead":
        return jsonify({"error": "Access denied"}), 403

    employees = User.query.filter_by(role="employee").order_by(User.name).all()
    return jsonify([u.to_dict() for u in employees])


# ----------------- Chat -----------------


@api_bp.route("/chat", methods=["GET"])
@token_required
def list_chat():
    return jsonify([m.to_dict() for m in recent_messages()])


@api_bp.route("/chat", methods=["POST"])
@token_required
def send_chat():
    message = (_body().get("message") or "").strip()
    if not message:
        return jsonify({"error": "Message is required"}), 400

    chat = ChatMessage(
        sender_id=g.token_user["user_id"],
        sender_name=g.token_user["name"],
        sender_role=g.token_user["role"],
        message=message,
    )
    db.session.add(chat)
    db.session.commit()
    return jsonify(chat.to_dict()), 201
