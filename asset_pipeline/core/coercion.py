"""
String coercion helpers shared by cleaners, validators and normalization.

Every helper takes the raw CSV string and returns a canonical string
representation, raising ValueError when the value cannot be parsed.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%d.%m.%Y",
    "%b %d %Y",
    "%d %b %Y",
    "%Y-%m-%dT%H:%M:%S",
)

TRUE_VALUES = frozenset({"true", "yes", "y", "1", "t"})
FALSE_VALUES = frozenset({"false", "no", "n", "0", "f"})


def parse_decimal(value: str) -> Decimal:
    """
    Parse a number, tolerating currency symbols and thousands separators.

    >>> parse_decimal("$1,250.50")
    Decimal('1250.50')
    """
    cleaned = value.strip().replace(",", "").lstrip("$")
    if not cleaned:
        raise ValueError("Empty value is not a number")
    try:
        number = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"'{value}' is not a valid number") from None
    if not number.is_finite():
        raise ValueError(f"'{value}' is not a finite number")
    return number


def canonical_number(value: str) -> str:
    """
    >>> canonical_number("12.50")
    '12.5'
    >>> canonical_number("1,000")
    '1000'
    """
    number = parse_decimal(value).normalize()
    text = format(number, "f")
    return "0" if text in ("-0", "0") else text


def canonical_integer(value: str) -> str:
    number = parse_decimal(value)
    if number != number.to_integral_value():
        raise ValueError(f"'{value}' is not a whole number")
    return str(int(number))


def canonical_boolean(value: str) -> str:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return "true"
    if lowered in FALSE_VALUES:
        return "false"
    raise ValueError(f"'{value}' is not a valid boolean")


def parse_date(value: str) -> date:
    """Parse a date in ISO or one of the common spreadsheet formats."""
    text = value.strip()
    if not text:
        raise ValueError("Empty value is not a date")
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"'{value}' is not a valid date")


def canonical_date(value: str) -> str:
    """
    >>> canonical_date("03/15/2024")
    '2024-03-15'
    """
    return parse_date(value).isoformat()


COERCERS = {
    "number": canonical_number,
    "decimal": canonical_number,
    "float": canonical_number,
    "integer": canonical_integer,
    "int": canonical_integer,
    "boolean": canonical_boolean,
    "bool": canonical_boolean,
    "date": canonical_date,
}


def coerce(value: str, expected_type: str) -> str:
    """
    Coerce `value` to the canonical string for `expected_type`.

    Raises:
        ValueError: If the type is unknown or the value cannot be parsed
    """
    coercer = COERCERS.get(expected_type.lower())
    if coercer is None:
        raise ValueError(f"Unsupported type: {expected_type}")
    return coercer(value)
