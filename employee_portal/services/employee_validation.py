"""
Employee field validation.

The pipeline is normalize -> validate -> (async) uniqueness check. Each step
returns a ValidationResult instead of raising, so callers decide what an
expected failure turns into. Rules apply identically to create and update;
update passes its own id so the uniqueness check skips the record itself.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Optional

import email_validator
from email_validator import EmailNotValidError, validate_email

from employee_portal.models.employee import EmployeeStatus

EDITABLE_FIELDS = ("name", "email", "position", "salary", "status")

MIN_TEXT_LENGTH = 2
MAX_TEXT_LENGTH = 255
MIN_SALARY = Decimal("0")
MAX_SALARY = Decimal("9999999.99")
_CENTS = Decimal("0.01")

# Plain decimal literal; Decimal() alone would also take "1_000"
_NUMERIC_STRING = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")

# Only syntax is checked, so reserved names like localhost or *.test are fine
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()

# Punctuation allowed in names and positions besides letters and whitespace
_NAME_PUNCTUATION = frozenset("-.'")

STATUS_VALUES = frozenset(s.value for s in EmployeeStatus)


@dataclass
class ValidationResult:
    """Outcome of a pipeline step: the (normalized) values plus per-field errors."""
    value: Dict[str, Any]
    errors: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)


def normalize_employee_fields(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Trim name/position and trim+lowercase email. Non-string values pass
    through untouched so validation can report them.
    """
    fields = {name: raw.get(name) for name in EDITABLE_FIELDS}

    for name in ("name", "position"):
        if isinstance(fields[name], str):
            fields[name] = fields[name].strip()

    if isinstance(fields["email"], str):
        fields["email"] = fields["email"].strip().lower()

    return fields


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _is_name_like(value: str) -> bool:
    """Unicode letters, whitespace, hyphen, dot and apostrophe only."""
    for ch in value:
        if ch.isspace() or ch in _NAME_PUNCTUATION:
            continue
        if not unicodedata.category(ch).startswith("L"):
            return False
    return True


def _check_text(result: ValidationResult, field_name: str, value: Any) -> None:
    if not isinstance(value, str):
        result.add_error(field_name, f"The {field_name} field must be a string.")
        return
    if len(value) < MIN_TEXT_LENGTH:
        result.add_error(field_name, f"The {field_name} field must be at least {MIN_TEXT_LENGTH} characters.")
    if len(value) > MAX_TEXT_LENGTH:
        result.add_error(field_name, f"The {field_name} field must not be greater than {MAX_TEXT_LENGTH} characters.")
    if not _is_name_like(value):
        result.add_error(
            field_name,
            f"The {field_name} may only contain letters, spaces, hyphens, dots, and apostrophes.",
        )


def _check_email(result: ValidationResult, value: Any) -> None:
    if not isinstance(value, str):
        result.add_error("email", "The email field must be a valid email address.")
        return
    try:
        validate_email(value, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        result.add_error("email", "The email field must be a valid email address.")
    if len(value) > MAX_TEXT_LENGTH:
        result.add_error("email", f"The email field must not be greater than {MAX_TEXT_LENGTH} characters.")


def parse_salary(value: Any) -> Optional[Decimal]:
    """
    Coerce a JSON number or numeric string to Decimal.

    Returns None for anything that is not a finite number (booleans included).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not _NUMERIC_STRING.fullmatch(text):
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    if not number.is_finite():
        return None
    return number


def _check_salary(result: ValidationResult, value: Any) -> None:
    number = parse_salary(value)
    if number is None:
        result.add_error("salary", "The salary field must be a number.")
        return
    if number < MIN_SALARY:
        result.add_error("salary", "The salary field must be at least 0.")
    if number > MAX_SALARY:
        result.add_error("salary", "The salary must not exceed 9,999,999.99.")
    if "salary" not in result.errors:
        result.value["salary"] = number.quantize(_CENTS, rounding=ROUND_HALF_UP)


def _check_status(result: ValidationResult, value: Any) -> None:
    if not isinstance(value, str) or value not in STATUS_VALUES:
        result.add_error("status", "The selected status is invalid.")


def validate_employee_fields(fields: Mapping[str, Any]) -> ValidationResult:
    """
    Apply the field rules to already-normalized values.

    A missing field reports only the "required" message; otherwise every
    failing rule for the field is reported.
    """
    result = ValidationResult(value=dict(fields))

    for name in EDITABLE_FIELDS:
        if _is_missing(fields.get(name)):
            result.add_error(name, f"The {name} field is required.")

    if "name" not in result.errors:
        _check_text(result, "name", fields["name"])
    if "email" not in result.errors:
        _check_email(result, fields["email"])
    if "position" not in result.errors:
        _check_text(result, "position", fields["position"])
    if "salary" not in result.errors:
        _check_salary(result, fields["salary"])
    if "status" not in result.errors:
        _check_status(result, fields["status"])

    return result


async def check_email_unique(
    repository,
    result: ValidationResult,
    exclude_id: Optional[int] = None,
) -> ValidationResult:
    """Add the uniqueness error when another employee already uses the email."""
    if "email" in result.errors:
        return result
    if await repository.email_taken(result.value["email"], exclude_id=exclude_id):
        result.add_error("email", "The email has already been taken.")
    return result


async def validate_employee_payload(
    raw: Mapping[str, Any],
    repository,
    exclude_id: Optional[int] = None,
) -> ValidationResult:
    """Run the whole pipeline: normalize, field rules, then uniqueness."""
    result = validate_employee_fields(normalize_employee_fields(raw))
    return await check_email_unique(repository, result, exclude_id=exclude_id)
