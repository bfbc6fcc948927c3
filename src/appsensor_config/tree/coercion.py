"""Value coercion for element text and attributes.

Every helper reports malformed values and absent required attributes as
CoercionFailure, naming the field and scope being read.
"""

import re
from typing import Optional

from appsensor_config.shared import CoercionFailure
from appsensor_config.tokenization import TokenCursor

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Counts and durations are stored by engines as signed 32-bit values
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def parse_int(
    text: Optional[str],
    field_name: str,
    scope: str,
    line: Optional[int] = None,
) -> int:
    """Parse trimmed decimal text as a signed 32-bit integer."""
    value = (text or "").strip()
    if not _INTEGER_PATTERN.fullmatch(value):
        raise CoercionFailure(
            f"Expected an integer but found {value!r}",
            field_name=field_name,
            scope=scope,
            position=line,
            details={"value": value},
        )
    number = int(value)
    if not INT_MIN <= number <= INT_MAX:
        raise CoercionFailure(
            f"Integer {value} is out of range",
            field_name=field_name,
            scope=scope,
            position=line,
            details={"value": value},
        )
    return number


def read_text(cursor: TokenCursor) -> str:
    """Consume the current element and return its trimmed text."""
    return cursor.read_element_text().strip()


def read_int(cursor: TokenCursor, field_name: str, scope: str) -> int:
    """Consume the current element and return its text as an integer."""
    line = cursor.line
    return parse_int(cursor.read_element_text(), field_name, scope, line)


def required_attribute(
    cursor: TokenCursor,
    name: str,
    field_name: str,
    scope: str,
) -> str:
    """Return the trimmed value of a required, non-blank attribute."""
    value = cursor.attribute(name)
    if value is None:
        raise CoercionFailure(
            f"Missing required attribute '{name}'",
            field_name=field_name,
            scope=scope,
            position=cursor.line,
            details={"attribute": name, "element": cursor.local_name},
        )
    value = value.strip()
    if not value:
        raise CoercionFailure(
            f"Attribute '{name}' cannot be blank",
            field_name=field_name,
            scope=scope,
            position=cursor.line,
            details={"attribute": name, "element": cursor.local_name},
        )
    return value
