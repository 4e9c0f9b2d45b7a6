from flask import Flask, render_template, request, redirect, url_for, session, flash
from sqlalchemy.exc import SQLAlchemyError
from config import Config
from models import db, User, Leave, ChatMessage, LeaveInputError, parse_date, new_leave, review_leave, recent_messages
from auth import hash_password, check_password, login_as, login_required, lead_required
from api import api_bp
from commands import register_commands, seed_lead, seed_employees

app = Flask(__name__)
app.config.from_object(Config)
app.logger.setLevel(app.config["LOG_LEVEL"].upper())
db.init_app(app)
app.register_blueprint(api_bp)
register_commands(app)

# ----------------- DB creation + seed ON STARTUP -----------------

with app.app_context():
    db.create_all()
    if app.config["SEED_DEMO_DATA"] and not User.query.first():
        seed_lead()
        seed_employees()
        app.logger.info("Seeded demo lead and employees")

# ----------------- Helpers -----------------


def current_user():
    uid = session.get("user_id")
    if not uid:
        return None
    return db.session.get(User, uid)


@app.context_processor
def inject_user():
    # lets you use current_user() and the session name/role in templates
    return dict(
        current_user=current_user,
        user_name=session.get("user_name"),
        user_role=session.get("user_role"),
    )


def _dashboard_for(role):
    return url_for("lead_dashboard") if role == "lead" else url_for("employee_dashboard")


# ----------------- Login -----------------


@app.route("/")
def index():
    return redirect(url_for("login"))


@app.route("/login", methods=["GET", "POST"])
def login():
    error = None

    if request.method == "POST":
        email = (request.form.get("email") or "").strip()
        password = request.form.get("password") or ""
        try:
            user = User.query.filter_by(email=email).first()
        except SQLAlchemyError:
            app.logger.exception("Login lookup failed for %s", email)
            return render_template("login.html", error="Login failed. Please try again.")

        if user and check_password(user.password_hash, password):
            login_as(user)
            app.logger.info("Login for %s (%s)", user.email, user.role)
            return redirect(_dashboard_for(user.role))

        app.logger.info("Login failed for %s", email)
        error = "Invalid credentials"

    return render_template("login.html", error=error)


# ----------------- Employee views -----------------


@app.route("/employee-dashboard")
@login_required
def employee_dashboard():
    error = request.args.get("error")
    try:
        leaves = (
            Leave.query.filter_by(employee_id=session["user_id"])
            .order_by(Leave.applied_at.desc())
            .limit(50)
            .all()
        )
    except SQLAlchemyError:
        app.logger.exception("Employee dashboard query failed")
        leaves = []
        error = "Failed to load dashboard data"

    return render_template("employee/dashboard.html", leaves=leaves, error=error)


@app.route("/apply-leave", methods=["GET", "POST"])
@login_required
def apply_leave():
    error = None

    if request.method == "POST":
        user = current_user()
        try:
            lr = new_leave(
                user,
                request.form.get("start_date"),
                request.form.get("end_date"),
                request.form.get("reason"),
            )
        except LeaveInputError as e:
            error = str(e)
        else:
            db.session.add(lr)
            try:
                db.session.commit()
            except SQLAlchemyError:
                db.session.rollback()
                app.logger.exception("Applying leave failed for %s", user.employee_id)
                return redirect(url_for("employee_dashboard", error="Failed to apply leave"))
            app.logger.info("Leave %s applied by %s", lr.id, user.employee_id)
            return redirect(url_for("employee_dashboard"))

    return render_template("employee/apply_leave.html", error=error)


@app.route("/change-password", methods=["GET", "POST"])
@login_required
def change_password():
    error = None
    success = None

    if request.method == "POST":
        current_password = request.form.get("current_password") or ""
        new_password = request.form.get("new_password") or ""
        confirm_password = request.form.get("confirm_password") or ""
        user = current_user()

        if new_password != confirm_password:
            error = "New passwords do not match"
        elif not new_password:
            error = "New password cannot be empty"
        elif not check_password(user.password_hash, current_password):
            error = "Current password is incorrect"
        else:
            user.password_hash = hash_password(new_password)
            db.session.commit()
            app.logger.info("Password changed for %s", user.email)
            success = "Password changed successfully!"

    return render_template("change_password.html", error=error, success=success)


# ----------------- Lead views -----------------


@app.route("/lead-dashboard")
@login_required
@lead_required
def lead_dashboard():
    error = None
    try:
        leaves = Leave.query.order_by(Leave.applied_at.desc()).limit(100).all()
    except SQLAlchemyError:
        app.logger.exception("Lead dashboard query failed")
        leaves = []
        error = "Failed to load dashboard data"

    pending_count = sum(1 for lr in leaves if lr.status == "pending")
    return render_template("lead/dashboard.html", leaves=leaves, pending_count=pending_count, error=error)


@app.route("/update-leave/<int:leave_id>", methods=["POST"])
@login_required
@lead_required
def update_leave(leave_id):
    lr = db.session.get(Leave, leave_id)
    if lr is None:
        flash("Leave request not found")
        return redirect(url_for("lead_dashboard"))

    try:
        review_leave(lr, request.form.get("status"), session["user_name"])
    except LeaveInputError as e:
        flash(str(e))
    else:
        db.session.commit()
        app.logger.info("Leave %s marked %s by %s", lr.id, lr.status, lr.reviewed_by)
    return redirect(url_for("lead_dashboard"))


@app.route("/employees")
@login_required
@lead_required
def employees():
    error = None
    try:
        staff = User.query.filter_by(role="employee").order_by(User.name).all()
    except SQLAlchemyError:
        app.logger.exception("Employees query failed")
        staff = []
        error = "Failed to load employees"

    return render_template("lead/employees.html", employees=staff, error=error)


@app.route("/add-employee", methods=["GET", "POST"])
@login_required
@lead_required
def add_employee():
    error = None
    success = None

    if request.method == "POST":
        name = (request.form.get("name") or "").strip()
        email = (request.form.get("email") or "").strip()
        employee_id = (request.form.get("employee_id") or "").strip()
        phone = (request.form.get("phone") or "").strip() or None

        existing = User.query.filter((User.email == email) | (User.employee_id == employee_id)).first()
        if not name or not email or not employee_id:
            error = "Name, email and employee ID are required"
        elif existing:
            error = "Email already exists" if existing.email == email else "Employee ID already exists"
        else:
            try:
                joined = parse_date(request.form.get("date_of_joining"))
            except LeaveInputError as e:
                error = str(e)
            else:
                password = app.config["DEFAULT_PASSWORD"]
                user = User(
                    name=name,
                    email=email,
                    password_hash=hash_password(password),
                    role="employee",
                    employee_id=employee_id,
                    phone=phone,
                    date_of_joining=joined,
                )
                db.session.add(user)
                try:
                    db.session.commit()
                except SQLAlchemyError:
                    db.session.rollback()
                    app.logger.exception("Adding employee %s (%s) failed", employee_id, email)
                    error = "Failed to add employee. Please try again."
                else:
                    app.logger.info("Employee %s (%s) added by %s", employee_id, email, session["user_name"])
                    success = "Employee added successfully! Default password: %s" % password

    return render_template("lead/add_employee.html", error=error, success=success)


@app.route("/reset-password/<int:user_id>", methods=["POST"])
@login_required
@lead_required
def reset_password(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        flash("Employee not found")
    else:
        user.password_hash = hash_password(app.config["DEFAULT_PASSWORD"])
        db.session.commit()
        app.logger.info("Password reset for %s by %s", user.email, session["user_name"])
        flash("Password for %s reset to the default" % user.name)
    return redirect(url_for("employees"))


# ----------------- Shared views -----------------


@app.route("/calendar")
@login_required
def calendar():
    error = None
    try:
        leaves = Leave.query.filter_by(status="approved").order_by(Leave.start_date).all()
    except SQLAlchemyError:
        app.logger.exception("Calendar query failed")
        leaves = []
        error = "Failed to load calendar data"

    return render_template("calendar.html", leaves=leaves, error=error)


@app.route("/chat", methods=["GET", "POST"])
@login_required
def chat():
    if request.method == "POST":
        message = (request.form.get("message") or "").strip()
        if message:
            db.session.add(
                ChatMessage(
                    sender_id=session["user_id"],
                    sender_name=session["user_name"],
                    sender_role=session["user_role"],
                    message=message,
                )
            )
            db.session.commit()
        return redirect(url_for("chat"))

    error = None
    try:
        messages = recent_messages()
    except SQLAlchemyError:
        app.logger.exception("Chat query failed")
        messages = []
        error = "Failed to load chat messages"

    return render_template("chat.html", messages=messages, user_id=session["user_id"], error=error)


# ----------------- Logout -----------------


@app.route("/logout")
def logout():
    session.clear()
    return redirect(url_for("index"))


if __name__ == "__main__":
    app.run(debug=True)
