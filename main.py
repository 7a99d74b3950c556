#!/usr/bin/env python3
"""
Employee Directory -- command-line client for the employee directory API.

Usage:
  python main.py register alice alice@example.com
  python main.py login alice@example.com
  python main.py whoami
  python main.py employees list
  python main.py employees show 3
  python main.py employees add "Jane Doe" Acme Berlin +49-30-1234
  python main.py employees update 3 "Jane Doe" Acme Hamburg +49-40-5678
  python main.py employees delete 3
  python main.py employees list --json
  python main.py logout

Passwords are read from the terminal, never from the command line.

Environment variables:
  EMPDIR_API_URL      Base URL of the API (default: http://localhost:8000)
  EMPDIR_TOKEN_FILE   Where the login token is kept (default: ~/.employee-directory/token)
  EMPDIR_TIMEOUT      Request timeout in seconds (default: 10)
"""

import argparse
import getpass
import json
import sys
from typing import Optional

from client.session import ApiError, AuthenticationRequired, SessionManager
from client.token_store import FileTokenStore
from core.config import get_client_settings

_COLUMNS = ("id", "name", "company", "city", "phone_number")


def _read_password(confirm: bool = False) -> str:
    password = getpass.getpass("Password: ")
    if confirm and getpass.getpass("Confirm password: ") != password:
        raise ValueError("Passwords do not match.")
    return password


def _print_table(rows: list[dict]) -> None:
    """Fixed-width table of employees, one row per record."""
    if not rows:
        print("  No employees found.")
        return
    widths = {c: max(len(c), *(len(str(r.get(c, ""))) for r in rows)) for c in _COLUMNS}
    print("  " + "  ".join(c.upper().ljust(widths[c]) for c in _COLUMNS))
    print("  " + "  ".join("-" * widths[c] for c in _COLUMNS))
    for row in rows:
        print("  " + "  ".join(str(row.get(c, "")).ljust(widths[c]) for c in _COLUMNS))


def _print_record(record: dict, as_json: bool) -> None:
    if as_json:
        print(json.dumps(record, indent=2))
        return
    for key, value in record.items():
        print(f"  {key:<13} {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="employee-directory",
        description="Manage the shared employee directory from the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py login alice@example.com
  python main.py employees list
  python main.py employees add "Jane Doe" Acme Berlin +49-30-1234
  EMPDIR_API_URL=https://directory.internal python main.py whoami
        """,
    )
    parser.add_argument(
        "--api-url",
        metavar="URL",
        default=None,
        help="Base URL of the API (overrides EMPDIR_API_URL)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print raw JSON instead of formatted output",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    register = commands.add_parser("register", help="Create an account and log in")
    register.add_argument("username")
    register.add_argument("email")

    login = commands.add_parser("login", help="Log in with email and password")
    login.add_argument("email")

    commands.add_parser("logout", help="Forget the stored login token")
    commands.add_parser("whoami", help="Show the logged-in user")

    employees = commands.add_parser("employees", help="List and edit employee records")
    actions = employees.add_subparsers(dest="action", metavar="ACTION")
    actions.add_parser("list", help="List every employee, newest first")

    show = actions.add_parser("show", help="Show one employee")
    show.add_argument("id", type=int)

    add = actions.add_parser("add", help="Add an employee")
    for field in ("name", "company", "city", "phone_number"):
        add.add_argument(field)

    update = actions.add_parser("update", help="Replace every field of an employee")
    update.add_argument("id", type=int)
    for field in ("name", "company", "city", "phone_number"):
        update.add_argument(field)

    delete = actions.add_parser("delete", help="Delete an employee")
    delete.add_argument("id", type=int)

    return parser


def run(args: argparse.Namespace, session: SessionManager) -> None:
    """Dispatch one parsed command against the session. Raises ApiError on failure."""
    if args.command == "register":
        user = session.register(args.username, args.email, _read_password(confirm=True))
        print(f"  Registered and logged in as {user['username']} ({user['email']}).")

    elif args.command == "login":
        user = session.login(args.email, _read_password())
        print(f"  Logged in as {user['username']} ({user['email']}).")

    elif args.command == "logout":
        if not session.logout():
            print("  Not logged in.")

    elif args.command == "whoami":
        _print_record(session.me(), args.json)

    elif args.command == "employees":
        if args.action == "list":
            rows = session.list_employees()
            if args.json:
                print(json.dumps(rows, indent=2))
            else:
                _print_table(rows)
        elif args.action == "show":
            _print_record(session.get_employee(args.id), args.json)
        elif args.action == "add":
            _print_record(
                session.create_employee(args.name, args.company, args.city, args.phone_number),
                args.json,
            )
        elif args.action == "update":
            _print_record(
                session.update_employee(args.id, args.name, args.company, args.city, args.phone_number),
                args.json,
            )
        elif args.action == "delete":
            print(f"  {session.delete_employee(args.id)['message']}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None or (args.command == "employees" and args.action is None):
        parser.print_help()
        return 2

    settings = get_client_settings()

    def _logged_out() -> None:
        if args.command == "logout":
            print("  Logged out.")
        else:
            print("  Your session is no longer valid. Please log in again: employee-directory login <email>")

    session = SessionManager(
        args.api_url or settings.api_url,
        token_store=FileTokenStore(settings.token_file),
        on_logout=_logged_out,
        timeout=settings.timeout,
    )

    try:
        run(args, session)
    except AuthenticationRequired as e:
        # on_logout has already printed the re-login hint when a session was active
        print(f"  [!] {e.message}", file=sys.stderr)
        return 1
    except ApiError as e:
        print(f"  [!] {e.message}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"  [!] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
