"""Value coercion for loosely typed CSV/JSON rows.

Raw sources spell "no value" in several ways (missing key, ``''``, ``'NULL'``,
``'undefined'``). All of them are normalised to ``None`` first, then each
declared field is converted to its kind. Coercion never raises: anything that
cannot be parsed becomes ``None`` and the caller decides whether that is
acceptable (see ``FieldSpec.required``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping

from dateutil import parser as date_parser

NULL_TOKENS = frozenset({"", "NULL", "undefined"})
TRUTHY_TOKENS = frozenset({"Y", "true", "True", "TRUE"})

# Integer columns are 32-bit
INTEGER_MIN = -(2 ** 31)
INTEGER_MAX = 2 ** 31 - 1


class FieldKind(str, Enum):
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    STRING = "string"
    STRING_ARRAY = "string-array"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind = FieldKind.STRING
    required: bool = False


def normalize_null(value: Any) -> Any:
    """Map every spelling of "no value" to ``None``."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip() in NULL_TOKENS:
        return None
    return value


def coerce_integer(value: Any) -> int | None:
    """Coerce to an integer the columns can store, ``None`` when out of range."""
    number = _parse_integer(value)
    if number is None or not INTEGER_MIN <= number <= INTEGER_MAX:
        return None
    return number


def _parse_integer(value: Any) -> int | None:
    value = normalize_null(value)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip().replace(",", ""))
    except ValueError:
        pass
    # "12.0" is a common spreadsheet rendering of an integer
    number = coerce_float(value)
    if number is not None and number.is_integer():
        return int(number)
    return None


def coerce_float(value: Any) -> float | None:
    value = normalize_null(value)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        number = float(str(value).strip().replace(",", ""))
    except ValueError:
        return None
    # nan/inf are not storable numbers
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def coerce_boolean(value: Any) -> bool:
    """Coerce to a boolean.

    Only ``'Y'``, ``'true'``/``'True'`` (any case) and native ``True`` are true.
    Everything else, including ``None``, is false: this is lossy, an unknown
    value cannot be told apart from an explicit false afterwards.
    """
    if value is True:
        return True
    if isinstance(value, str):
        token = value.strip()
        return token in TRUTHY_TOKENS or token.lower() == "true"
    return False


def coerce_timestamp(value: Any) -> datetime | None:
    value = normalize_null(value)
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Epoch milliseconds, as produced by JavaScript scrapers
        try:
            return datetime.fromtimestamp(value / 1000 if value > 1e11 else value)
        except (OverflowError, OSError, ValueError):
            return None
    try:
        return date_parser.parse(str(value))
    except (ValueError, OverflowError):
        return None


def coerce_string(value: Any) -> str | None:
    value = normalize_null(value)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def coerce_string_array(value: Any) -> list[str]:
    """Pass sequences through, split comma-joined strings, default to ``[]``."""
    value = normalize_null(value)
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if normalize_null(item) is not None]
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return []


COERCERS = {
    FieldKind.INTEGER: coerce_integer,
    FieldKind.FLOAT: coerce_float,
    FieldKind.BOOLEAN: coerce_boolean,
    FieldKind.TIMESTAMP: coerce_timestamp,
    FieldKind.STRING: coerce_string,
    FieldKind.STRING_ARRAY: coerce_string_array,
}


def coerce_value(value: Any, kind: FieldKind) -> Any:
    return COERCERS[kind](normalize_null(value))


def coerce(raw_row: Mapping[str, Any], schema: Iterable[FieldSpec]) -> dict:
    """Build a typed row containing exactly the declared fields.

    Keys of ``raw_row`` that the schema does not declare are dropped.
    """
    return {spec.name: coerce_value(raw_row.get(spec.name), spec.kind) for spec in schema}


def missing_required(row: Mapping[str, Any], schema: Iterable[FieldSpec]) -> list[str]:
    """Names of required fields that coerced to ``None``."""
    return [spec.name for spec in schema if spec.required and row.get(spec.name) is None]
