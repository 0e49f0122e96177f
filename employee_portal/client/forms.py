"""
Quick pre-submit checks for the employee form.

These only catch obvious mistakes before a round trip; the server's
validation is authoritative.
"""

import re
from typing import Any, Dict

EMPTY_FORM = {
    "name": "",
    "email": "",
    "position": "",
    "salary": "",
    "status": "active",
}

_EMAIL_SHAPE = re.compile(r"\S+@\S+\.\S+")


def _as_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def check_employee_form(form: Dict[str, Any]) -> Dict[str, str]:
    """Return {field: message} for fields that are obviously wrong."""
    errors: Dict[str, str] = {}

    name = str(form.get("name") or "")
    if len(name) < 2:
        errors["name"] = "Name must be at least 2 characters"

    email = str(form.get("email") or "")
    if not email:
        errors["email"] = "Email is required"
    elif not _EMAIL_SHAPE.search(email):
        errors["email"] = "Email is invalid"

    position = str(form.get("position") or "")
    if len(position) < 2:
        errors["position"] = "Position must be at least 2 characters"

    salary = form.get("salary")
    number = _as_float(salary)
    if salary in (None, ""):
        errors["salary"] = "Salary is required"
    elif number is None or number != number or number < 0:
        errors["salary"] = "Salary must be a positive number"
    elif number > 9999999.99:
        errors["salary"] = "Salary must not exceed 9,999,999.99"

    if not form.get("status"):
        errors["status"] = "Status is required"

    return errors
