"""Password hashing, session guards and API tokens."""

from datetime import datetime, timedelta, timezone
from functools import wraps

import bcrypt
import jwt
from flask import current_app, g, jsonify, redirect, request, session, url_for

from models import User, db


# ----------------- Passwords -----------------


def hash_password(password):
    rounds = current_app.config["BCRYPT_ROUNDS"]
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password_hash, password):
    if not password_hash or password is None:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


# ----------------- Session guards -----------------


def login_as(user):
    session.clear()
    session.permanent = True
    session["user_id"] = user.id
    session["user_role"] = user.role
    session["user_name"] = user.name


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        uid = session.get("user_id")
        if not uid:
            return redirect(url_for("login"))
        # account removed since login
        if db.session.get(User, uid) is None:
            session.clear()
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapped


def lead_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if session.get("user_role") != "lead":
            return redirect(url_for("employee_dashboard"))
        return view(*args, **kwargs)

    return wrapped


# ----------------- API tokens -----------------


def generate_token(user):
    hours = current_app.config["JWT_EXPIRES_HOURS"]
    payload = {
        "user_id": user.id,
        "role": user.role,
        "name": user.name,
        "exp": datetime.now(timezone.utc) + timedelta(hours=hours),
    }
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=current_app.config["JWT_ALGORITHM"])


def decode_token(token):
    """Return the token's claims, or None if it does not verify or has expired."""
    try:
        return jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
        )
    except jwt.InvalidTokenError:
        return None


def token_required(view):
    """Reject requests without a valid bearer token; the claims go on ``g.token_user``."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        header = request.headers.get("Authorization", "")
        parts = header.split(" ")
        token = parts[1] if len(parts) > 1 else None
        if not token:
            return jsonify({"error": "Access token required"}), 401

        claims = decode_token(token)
        if claims is None:
            return jsonify({"error": "Invalid token"}), 403
        g.token_user = claims
        return view(*args, **kwargs)

    return wrapped
