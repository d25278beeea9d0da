"""Argument validation for the query tools."""

import re
from typing import Optional, Sequence

from uslex.core.exceptions import InputValidationError
from uslex.settings import ALL_JURISDICTIONS, JURISDICTIONS

_STATE_ABBREVIATION = re.compile(r"^[A-Za-z]{2}$")


def validate_non_empty(value: str | None, name: str) -> str:
    """Return ``value`` stripped, or raise if it is missing or blank."""
    if not isinstance(value, str) or not value.strip():
        raise InputValidationError(f"{name} must be a non-empty string.", field=name)
    return value.strip()


def validate_jurisdiction(value: str | None, required: bool = False) -> str | None:
    """Check a jurisdiction code against the known jurisdiction table.

    Returns the upper-cased code, or ``None`` when the value is absent and
    not required. Two-letter state abbreviations get a suggestion in the
    error message.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise InputValidationError("jurisdiction is required.", field="jurisdiction")
        return None

    code = value.strip().upper()
    if code in JURISDICTIONS:
        return code

    message = f'Invalid jurisdiction "{value}".'
    if _STATE_ABBREVIATION.match(code) and f"US-{code}" in JURISDICTIONS:
        message += f' Did you mean "US-{code}"?'
    else:
        message += ' Use codes like "US-CA", "US-NY" or "US-FED".'
    raise InputValidationError(message, field="jurisdiction")


def validate_jurisdictions(values: Optional[Sequence[str]]) -> Optional[list[str]]:
    """Validate a list of jurisdiction codes.

    Returns ``None`` when there is no filter (``None`` or the ``["all"]``
    wildcard), otherwise the validated codes. Any unknown code fails the call.
    """
    if values is None:
        return None
    if len(values) == 1 and str(values[0]).strip().lower() == ALL_JURISDICTIONS:
        return None
    return [validate_jurisdiction(value, required=True) for value in values]
