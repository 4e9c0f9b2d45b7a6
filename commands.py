"""Operator commands: ``flask seed-lead``, ``flask seed-employees``, ``flask check-employees``."""

from datetime import date

import click
from flask import current_app
from flask.cli import with_appcontext

from auth import hash_password
from models import User, db

LEAD = {
    "name": "Meera Nair",
    "email": "meera.nair@example.com",
    "employee_id": "RW/1950",
    "phone": "9000000001",
}

EMPLOYEES = [
    {"name": "Arjun Menon", "employee_id": "RW/2883", "date_of_joining": "2025-02-20", "phone": "9000000101", "email": "arjun.menon@example.com"},
    {"name": "Divya Pillai", "employee_id": "RW/2919", "date_of_joining": "2025-03-21", "phone": "9000000102", "email": "divya.pillai@example.com"},
    {"name": "Farhan Ali", "employee_id": "RW/2992", "date_of_joining": "2025-06-13", "phone": "9000000103", "email": "farhan.ali@example.com"},
    {"name": "Gokul Das", "employee_id": "RW/2993", "date_of_joining": "2025-06-13", "phone": "9000000104", "email": "gokul.das@example.com"},
    {"name": "Hari Krishnan", "employee_id": "RW/3101", "date_of_joining": "2025-09-22", "phone": "9000000105", "email": "hari.krishnan@example.com"},
    {"name": "Irfan Basheer", "employee_id": "RW/3102", "date_of_joining": "2025-09-25", "phone": "9000000106", "email": "irfan.basheer@example.com"},
]


def seed_lead():
    """Create the lead account unless its email is taken. Returns the new user or None."""
    if User.query.filter_by(email=LEAD["email"]).first():
        return None
    lead = User(
        role="lead",
        password_hash=hash_password(current_app.config["DEFAULT_PASSWORD"]),
        date_of_joining=date.today(),
        **LEAD,
    )
    db.session.add(lead)
    db.session.commit()
    return lead


def seed_employees():
    """Create each roster employee whose email is not stored yet. Returns the new users."""
    password_hash = hash_password(current_app.config["DEFAULT_PASSWORD"])
    created = []
    for emp in EMPLOYEES:
        if User.query.filter_by(email=emp["email"]).first():
            continue
        user = User(
            name=emp["name"],
            email=emp["email"],
            password_hash=password_hash,
            role="employee",
            employee_id=emp["employee_id"],
            phone=emp["phone"],
            date_of_joining=date.fromisoformat(emp["date_of_joining"]),
        )
        db.session.add(user)
        created.append(user)
    db.session.commit()
    return created


@click.command("seed-lead")
@with_appcontext
def seed_lead_command():
    lead = seed_lead()
    if lead is None:
        click.echo("Lead already exists")
    else:
        click.echo("Lead created: %s (%s)" % (lead.name, lead.employee_id))


@click.command("seed-employees")
@with_appcontext
def seed_employees_command():
    created = {u.email for u in seed_employees()}
    for emp in EMPLOYEES:
        if emp["email"] in created:
            click.echo("Created user: %s (%s)" % (emp["name"], emp["employee_id"]))
        else:
            click.echo("User already exists: %s" % emp["name"])
    click.echo("Employee seeding completed!")


@click.command("check-employees")
@with_appcontext
def check_employees_command():
    users = User.query.order_by(User.id).all()
    click.echo("Total users in database: %d" % len(users))
    for u in users:
        click.echo("Name: %s, Role: %s, Email: %s" % (u.name, u.role, u.email))

    click.echo("")
    click.echo("Employees found: %d" % User.query.filter_by(role="employee").count())
    click.echo("Leads found: %d" % User.query.filter_by(role="lead").count())


def register_commands(app):
    app.cli.add_command(seed_lead_command)
    app.cli.add_command(seed_employees_command)
    app.cli.add_command(check_employees_command)
