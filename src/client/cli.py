#!/usr/bin/env python3
"""
Command-line front end for the employee records API
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from client.api_client import ApiError, EmployeeApiClient
from client.form import EmployeeForm, delete_employee, validate_employee_form
from client.list_query import EmployeeListQuery
from models.enums import Department

TABLE_COLUMNS = ("id", "firstName", "lastName", "email", "phone", "department")

FIELD_OPTIONS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "phone": "phone",
    "department": "department",
}


def format_table(employees: List[Dict[str, Any]]) -> str:
    if not employees:
        return "No employees found"
    rows = [[str(employee.get(column, "")) for column in TABLE_COLUMNS] for employee in employees]
    widths = [max(len(column), *(len(row[i]) for row in rows)) for i, column in enumerate(TABLE_COLUMNS)]
    lines = ["  ".join(column.ljust(widths[i]) for i, column in enumerate(TABLE_COLUMNS))]
    lines.append("  ".join("-" * width for width in widths))
    lines.extend("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)) for row in rows)
    return "\n".join(lines)


def _field_values(args: argparse.Namespace) -> Dict[str, str]:
    return {
        json_name: getattr(args, option)
        for option, json_name in FIELD_OPTIONS.items()
        if getattr(args, option) is not None
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage employee records")
    parser.add_argument("--api-url", help="Base URL of /api/employees (default: EMPLOYEE_API_URL)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List employees")
    list_parser.add_argument("--search", default="", help="Filter by substring across all fields")

    get_parser = subparsers.add_parser("get", help="Show one employee")
    get_parser.add_argument("employee_id", type=int)

    departments = [d.value for d in Department]
    for name, required in (("create", True), ("update", False)):
        sub = subparsers.add_parser(name, help=f"{name.capitalize()} an employee")
        if name == "update":
            sub.add_argument("employee_id", type=int)
        sub.add_argument("--first-name", dest="first_name", required=required)
        sub.add_argument("--last-name", dest="last_name", required=required)
        sub.add_argument("--email", required=required)
        sub.add_argument("--phone", required=required)
        sub.add_argument("--department", choices=departments, required=required)

    delete_parser = subparsers.add_parser("delete", help="Delete an employee")
    delete_parser.add_argument("employee_id", type=int)

    return parser


async def run(args: argparse.Namespace, api: EmployeeApiClient) -> int:
    list_query = EmployeeListQuery(api)

    if args.command == "list":
        print(format_table(await list_query.search(args.search)))
        return 0

    if args.command == "get":
        print(json.dumps(await api.get_employee(args.employee_id), indent=2))
        return 0

    if args.command == "delete":
        await delete_employee(api, list_query, args.employee_id)
        print(f"Employee {args.employee_id} deleted")
        return 0

    values = _field_values(args)
    if args.command == "update":
        # Partial update: only the options given on the command line are sent
        errors = validate_employee_form(values, partial=True)
        if errors:
            print(errors[0], file=sys.stderr)
            return 1
        saved = await api.update_employee(args.employee_id, values)
        list_query.invalidate()
        print(json.dumps(saved, indent=2))
        return 0

    form = EmployeeForm(api, list_query)
    for field, value in values.items():
        form.set_field(field, value)
    saved = await form.submit()
    if saved is None:
        print(form.error, file=sys.stderr)
        return 1
    print(form.success_message)
    print(json.dumps(saved, indent=2))
    return 0


async def _main(args: argparse.Namespace, transport=None) -> int:
    options = {"transport": transport}
    if args.api_url:
        options["base_url"] = args.api_url
    async with EmployeeApiClient(**options) as api:
        try:
            return await run(args, api)
        except ApiError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
