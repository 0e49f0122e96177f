#!/usr/bin/env python3
"""
Employee Portal command-line client.

Usage:
    employee-portal login --email admin@example.com
    employee-portal list
    employee-portal create --name "Jane Roe" --email jane@company.com \
        --position "Data Engineer" --salary 91000 --status active
    employee-portal update 3 --salary 95000
    employee-portal delete 3 --yes
    employee-portal logout

The server URL comes from --base-url or EMPLOYEE_PORTAL_URL; the session is
kept in ~/.employee_portal/session.json (override with EMPLOYEE_PORTAL_SESSION).
"""

import argparse
import getpass
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from employee_portal.client.api import ApiError, PortalClient
from employee_portal.client.forms import EMPTY_FORM, check_employee_form
from employee_portal.client.session import SessionStore

DEFAULT_BASE_URL = "http://localhost:8000/api"
DEFAULT_SESSION_FILE = Path.home() / ".employee_portal" / "session.json"

FORM_FIELDS = ("name", "email", "position", "salary", "status")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="employee-portal",
        description="Manage employees through the Employee Portal API",
    )
    parser.add_argument(
        "--base-url",
        default=os.getenv("EMPLOYEE_PORTAL_URL", DEFAULT_BASE_URL),
        help="API base URL (default: %(default)s)",
    )
    parser.add_argument(
        "--session-file",
        type=Path,
        default=Path(os.getenv("EMPLOYEE_PORTAL_SESSION", DEFAULT_SESSION_FILE)),
        help="Where the login token is stored",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log HTTP activity")

    commands = parser.add_subparsers(dest="command", required=True)

    login = commands.add_parser("login", help="Sign in and store the token")
    login.add_argument("--email", "-e", required=True)
    login.add_argument("--password", "-p", help="Prompted for when omitted")

    commands.add_parser("logout", help="Revoke the token and forget it")
    commands.add_parser("whoami", help="Show the signed-in user")
    commands.add_parser("list", help="List all employees")

    show = commands.add_parser("show", help="Show one employee")
    show.add_argument("id", type=int)

    create = commands.add_parser("create", help="Add an employee")
    _add_form_arguments(create, required=True)

    update = commands.add_parser("update", help="Edit an employee (unspecified fields keep their value)")
    update.add_argument("id", type=int)
    _add_form_arguments(update, required=False)

    delete = commands.add_parser("delete", help="Delete an employee")
    delete.add_argument("id", type=int)
    delete.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")

    return parser


def _add_form_arguments(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--name", required=required)
    parser.add_argument("--email", required=required)
    parser.add_argument("--position", required=required)
    parser.add_argument("--salary", required=required)
    parser.add_argument(
        "--status",
        choices=["active", "inactive"],
        default="active" if required else None,
    )


def render_employees(console: Console, employees: List[Dict[str, Any]]) -> None:
    if not employees:
        console.print("[dim]No employees found.[/dim]")
        return

    table = Table(title="Employees")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Position")
    table.add_column("Salary", justify="right")
    table.add_column("Status")

    for employee in employees:
        status_style = "green" if employee["status"] == "active" else "red"
        table.add_row(
            str(employee["id"]),
            employee["name"],
            employee["email"],
            employee["position"],
            f"{float(employee['salary']):,.2f}",
            f"[{status_style}]{employee['status']}[/{status_style}]",
        )

    console.print(table)


def render_employee(console: Console, employee: Dict[str, Any]) -> None:
    table = Table(show_header=False, title=f"Employee #{employee['id']}")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key in FORM_FIELDS:
        table.add_row(key.capitalize(), str(employee[key]))
    console.print(table)


def render_errors(console: Console, message: str, errors: Dict[str, Any]) -> None:
    console.print(f"[red]✗[/red] {message}")
    for field_name, messages in errors.items():
        if isinstance(messages, str):
            messages = [messages]
        for text in messages:
            console.print(f"  [yellow]{field_name}[/yellow]: {text}")


def _form_from_args(args: argparse.Namespace, base: Dict[str, Any]) -> Dict[str, Any]:
    form = {key: base.get(key, EMPTY_FORM[key]) for key in FORM_FIELDS}
    for key in FORM_FIELDS:
        value = getattr(args, key, None)
        if value is not None:
            form[key] = value
    return form


def _submit_form(console: Console, form: Dict[str, Any], submit) -> int:
    form_errors = check_employee_form(form)
    if form_errors:
        render_errors(console, "Please fix the following fields:", form_errors)
        return 1
    employee = submit(form)
    render_employee(console, employee)
    return 0


def run_command(args: argparse.Namespace, client: PortalClient, console: Console) -> int:
    command = args.command

    if command == "login":
        password = args.password or getpass.getpass("Password: ")
        user = client.login(args.email, password)
        console.print(f"[green]✓[/green] Signed in as {user['name']} <{user['email']}>")
        return 0

    if command == "logout":
        client.logout()
        console.print("[green]✓[/green] Signed out")
        return 0

    if not client.session.is_authenticated:
        console.print("[red]✗[/red] Not signed in. Run `employee-portal login` first.")
        return 1

    if command == "whoami":
        user = client.current_user()
        console.print(f"{user['name']} <{user['email']}> (id {user['id']})")
        return 0

    if command == "list":
        render_employees(console, client.list_employees())
        return 0

    if command == "show":
        render_employee(console, client.get_employee(args.id))
        return 0

    if command == "create":
        return _submit_form(console, _form_from_args(args, EMPTY_FORM), client.create_employee)

    if command == "update":
        current = client.get_employee(args.id)
        return _submit_form(
            console,
            _form_from_args(args, current),
            lambda form: client.update_employee(args.id, form),
        )

    if command == "delete":
        if not args.yes and not Confirm.ask(f"Delete employee #{args.id}?", console=console):
            console.print("Cancelled.")
            return 1
        client.delete_employee(args.id)
        console.print(f"[green]✓[/green] Deleted employee #{args.id}")
        return 0

    raise ValueError(f"Unknown command: {command}")


def main(
    argv: Optional[List[str]] = None,
    transport: Optional[httpx.BaseTransport] = None,
    console: Optional[Console] = None,
) -> int:
    args = build_parser().parse_args(argv)
    console = console or Console()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    store = SessionStore(args.session_file)
    session = store.load(args.base_url)

    with PortalClient(session, transport=transport) as client:
        try:
            code = run_command(args, client, console)
        except ApiError as e:
            render_errors(console, e.message, e.errors)
            code = 1
        except httpx.HTTPError as e:
            console.print(f"[red]✗[/red] Could not reach {args.base_url}: {e}")
            code = 1
        finally:
            store.save(session)

    return code


if __name__ == "__main__":
    sys.exit(main())
