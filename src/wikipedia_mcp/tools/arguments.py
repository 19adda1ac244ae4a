"""Argument types shared by the tool handlers.

Each type parses raw client input at the boundary; handlers only ever see
values that passed these checks.
"""

import math
import re
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, Field, StrictStr

from .images import DEFAULT_IMAGE_LIMIT

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)")


def _require_iso_date(value: str) -> str:
    if not _DATE_RE.fullmatch(value):
        raise ValueError('expected a date formatted as "YYYY-MM-DD"')
    return value


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty or whitespace")
    return value


def parse_limit(value: Any) -> int:
    """Coerce a client-supplied image limit to an int.

    Strings are read like JavaScript's ``parseInt`` (leading sign and digits,
    rest ignored), floats are truncated. Anything missing or unreadable falls
    back to the default limit.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_IMAGE_LIMIT
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else DEFAULT_IMAGE_LIMIT
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if not match:
            return DEFAULT_IMAGE_LIMIT
        try:
            return int(match.group(1))
        except ValueError:
            # Beyond the interpreter's int conversion digit limit.
            return DEFAULT_IMAGE_LIMIT
    return DEFAULT_IMAGE_LIMIT


IsoDate = Annotated[StrictStr, Field(json_schema_extra={"pattern": DATE_PATTERN}), AfterValidator(_require_iso_date)]

NonBlankText = Annotated[StrictStr, AfterValidator(_require_text)]

ImageLimit = Annotated[int, BeforeValidator(parse_limit), Field(json_schema_extra={"type": ["string", "number"]})]
