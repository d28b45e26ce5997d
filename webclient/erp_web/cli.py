# Overview: Flask CLI command groups for storage bootstrap, access inspection, and navigation preview.

# webclient/erp_web/cli.py
# Commands Legend (run from the webclient directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Client storage:
# - python -m flask storage init
#   Create the client storage table (idempotent). Prefer `flask db upgrade` once migrations are set up.
# - python -m flask storage show <context-id>
#   List one browser context's entries (token values masked).
# - python -m flask storage purge --days 30
#   Delete client storage rows untouched for the given number of days.
#
# Access policy inspection:
# - python -m flask access list
#   List protected prefixes, department restrictions and landing pages.
# - python -m flask access check --user-type user --department Store /dashboard/hr
#   Show what the route guard would do for that principal and path.
#
# Navigation preview:
# - python -m flask nav show --user-type user --department PPC --path /dashboard/ppc --tab po-list
#   Print the sidebar and mobile bottom bar for a principal.

import click
from datetime import timedelta
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import ClientStorageEntry
from .permissions import (
    DEPARTMENT_ACCESS,
    DEPARTMENT_LANDING,
    PROTECTED_PREFIXES,
    Department,
    PrincipalType,
    is_allowed,
    landing_path,
)
from .services import guard_service, shell_service, storage_service
from .services.navigation_service import resolve_nav_items
from .services.session_service import EdgeFields, Session
from .time_utils import utcnow


USER_TYPE_CHOICE = click.Choice([p.value for p in PrincipalType])
DEPARTMENT_CHOICE = click.Choice([d.value for d in Department])


@click.group('storage')
def storage_group():
    """Client storage bootstrap and maintenance commands."""


@storage_group.command('init')
@with_appcontext
def init_storage():
    """Create the client storage table if it does not exist."""
    db.create_all()
    click.echo("PASS Client storage table ready")


@storage_group.command('purge')
@click.option('--days', type=int, default=30, show_default=True, help='Retention window in days')
@with_appcontext
def purge_storage(days):
    """
    Delete client storage entries older than the retention window.

    Browser contexts whose rows are purged simply start over with no session.
    """
    if days < 1:
        raise click.BadParameter("must be at least 1", param_hint="--days")
    deleted = storage_service.purge_stale_entries(older_than=utcnow() - timedelta(days=days))
    click.echo(f"Deleted {deleted} client storage entries older than {days} days.")


@storage_group.command('show')
@click.argument('context_id')
@with_appcontext
def show_storage(context_id):
    """List the entries of one browser context (token values are masked)."""
    entries = db.session.query(ClientStorageEntry).filter_by(
        context_id=context_id
    ).order_by(ClientStorageEntry.key).all()
    if not entries:
        click.echo(f"No entries for context {context_id}")
        return

    for entry in entries:
        data = entry.to_dict()
        value = "****" if data["key"] == "token" else data["value"]
        click.echo(f"{data['key']:<24} {data['updated_at']}  {value}")


@click.group('access')
def access_group():
    """Access policy inspection commands."""


@access_group.command('list')
@with_appcontext
def list_access():
    """Print the route tables."""
    click.echo("Protected prefixes:")
    for prefix in PROTECTED_PREFIXES:
        click.echo(f"  {prefix}")

    click.echo("\nDepartment restrictions:")
    for prefix, departments in DEPARTMENT_ACCESS.items():
        click.echo(f"  {prefix:<22} -> {', '.join(sorted(departments))}")

    click.echo("\nLanding pages:")
    for department, path in DEPARTMENT_LANDING.items():
        click.echo(f"  {department:<10} -> {path}")


@access_group.command('check')
@click.option('--user-type', type=USER_TYPE_CHOICE, default=None, help='Principal type (omit for no session)')
@click.option('--department', default=None, help='Department of a user principal')
@click.argument('path')
@with_appcontext
def check_access(user_type, department, path):
    """Evaluate the route guard for one principal and path."""
    fields = EdgeFields(
        token="cli" if user_type else None,
        user_type=user_type,
        department=department,
    )
    decision = guard_service.evaluate(path, fields)
    allowed = is_allowed(user_type, department, path)

    click.echo(f"Path:       {path}")
    click.echo(f"Principal:  {user_type or '-'} / {department or '-'}")
    click.echo(f"Policy:     {'ALLOW' if allowed else 'DENY'}")
    click.echo(f"Guard:      {decision.outcome.value}" + (f" -> {decision.location}" if decision.location else ""))
    if decision.reason:
        click.echo(f"Reason:     {decision.reason}")
    if user_type:
        click.echo(f"Landing:    {landing_path(user_type, department)}")


@click.group('nav')
def nav_group():
    """Navigation preview commands."""


@nav_group.command('show')
@click.option('--user-type', type=USER_TYPE_CHOICE, required=True)
@click.option('--department', type=DEPARTMENT_CHOICE, default=None)
@click.option('--path', 'current_path', default='/dashboard', show_default=True)
@click.option('--tab', 'current_view', default=None)
@with_appcontext
def show_nav(user_type, department, current_path, current_view):
    """Print the sidebar and mobile bar a principal would see."""
    principal = PrincipalType(user_type)
    session = Session(
        token="cli",
        principal_type=principal,
        department=department if principal is PrincipalType.USER else None,
        display_name=None,
    )
    state = shell_service.ShellState()
    shell = shell_service.build_shell(
        session, current_path, current_view, state, app_name=current_app.config["APP_NAME"]
    )

    click.echo(f"{shell['user']['name']} ({shell['user']['subtitle']})")
    click.echo("\nSidebar:")
    for item in shell["sidebar"]["items"]:
        marker = "*" if item["active"] else " "
        click.echo(f" {marker} {item['label']:<20} {item['path']}")
        for child in item["children"]:
            marker = "*" if child["active"] else " "
            click.echo(f"   {marker} {child['label']:<18} {child['path']}")

    click.echo("\nMobile bar:")
    for item in shell["mobile"]["visible"]:
        click.echo(f"  {item['label']}")
    if shell["mobile"]["overflow"]:
        click.echo("  More: " + ", ".join(item["label"] for item in shell["mobile"]["overflow"]))

    count = len(resolve_nav_items(principal, department))
    click.echo(f"\n{count} top-level item(s)")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(storage_group)
    app.cli.add_command(access_group)
    app.cli.add_command(nav_group)
