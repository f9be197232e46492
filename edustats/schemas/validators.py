"""Custom validators and types."""

import re
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, Field

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_email(value: str) -> str:
    """
    Validate and normalize an email address.

    Surrounding spaces are stripped and the address is lower-cased,
    so that "Jean.K@Ecole.CI " and "jean.k@ecole.ci" are the same account.
    """
    normalized = value.strip().lower()
    if not EMAIL_PATTERN.match(normalized):
        raise ValueError("Invalid email address")
    return normalized


def strip_text(value: str) -> str:
    """Strip surrounding whitespace and refuse blank strings."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("Value cannot be blank")
    return stripped


def validate_formula_text(value: str) -> str:
    """A saved formula is spreadsheet-like: it starts with '=' and has a body."""
    stripped = value.strip()
    if not stripped.startswith("="):
        raise ValueError("Formula must start with =")
    if not stripped[1:].strip():
        raise ValueError("Formula cannot be empty")
    return stripped


Email = Annotated[
    str,
    Field(min_length=3, max_length=255),
    AfterValidator(validate_email),
]

NonBlankStr = Annotated[str, AfterValidator(strip_text)]

# Grades are stored with two decimals
NoteValue = Annotated[Decimal, Field(ge=0, max_digits=5, decimal_places=2)]

FormulaText = Annotated[
    str,
    Field(min_length=2, max_length=2000),
    AfterValidator(validate_formula_text),
]
