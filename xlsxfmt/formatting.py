"""Rendering of raw cell values through spreadsheet number format codes."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from functools import lru_cache

from xlsxfmt.numfmt import (
    GENERAL,
    STRING_FORMAT,
    ParsedNumberFormat,
    is_12_hour_time,
    parse_number_format,
)

# Numbers outside this range are shown in scientific notation by the general format.
MIN_NON_SCIENTIFIC_NUMBER = 1e-9
MAX_NON_SCIENTIFIC_NUMBER = 1e11

_SMALLEST_NONZERO_FLOAT = 5e-324

_EPOCH_1900 = datetime(1899, 12, 30, tzinfo=timezone.utc)
_EPOCH_1904 = datetime(1904, 1, 1, tzinfo=timezone.utc)

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_INFINITY_WORDS = frozenset({"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"})

# Spreadsheet date/time placeholders mapped to layout tokens, applied in order,
# each to its first occurrence only. Full month and weekday names go through
# temporary markers so that their letters are not replaced by later rules.
_TIME_REPLACEMENTS = (
    ("YYYY", "2006"),
    ("yyyy", "2006"),
    ("YY", "06"),
    ("yy", "06"),
    ("MMMM", "%%%%"),
    ("mmmm", "%%%%"),
    ("DDDD", "&&&&"),
    ("dddd", "&&&&"),
    ("DD", "02"),
    ("dd", "02"),
    ("D", "2"),
    ("d", "2"),
    ("MMM", "Jan"),
    ("mmm", "Jan"),
    ("MMSS", "0405"),
    ("mmss", "0405"),
    ("SS", "05"),
    ("ss", "05"),
    ("MM:", "04:"),
    ("mm:", "04:"),
    (":MM", ":04"),
    (":mm", ":04"),
    ("MM", "01"),
    ("mm", "01"),
    ("AM/PM", "pm"),
    ("am/pm", "pm"),
    ("M/", "1/"),
    ("m/", "1/"),
    ("%%%%", "January"),
    ("&&&&", "Monday"),
)

_FIXED_FORMATS = {
    "0": "{:.0f}",
    "#,##0": "{:.0f}",
    "0.0": "{:.1f}",
    "#,##0.0": "{:.1f}",
    "0.00": "{:.2f}",
    "#,##0.00": "{:.2f}",
    "0.000": "{:.3f}",
    "#,##0.000": "{:.3f}",
    "0.0000": "{:.4f}",
    "#,##0.0000": "{:.4f}",
    "0.00e+00": "{:e}",
    "##0.0e+0": "{:e}",
}


class CellType(Enum):
    """The kind of value a cell holds."""

    STRING = "s"
    STRING_FORMULA = "str"
    NUMERIC = "n"
    BOOL = "b"
    INLINE = "inlineStr"
    ERROR = "e"
    DATE = "d"


class CellFormatError(ValueError):
    """Raised when a value cannot be formatted; ``value`` holds the raw fallback text."""

    def __init__(self, message: str, value: str) -> None:
        super().__init__(message)
        self.value = value


@lru_cache(maxsize=256)
def _parsed(num_fmt: str) -> ParsedNumberFormat:
    return parse_number_format(num_fmt)


def _parse_float(text: str) -> float:
    """Parse a float with the strictness of a plain decimal literal."""
    if text != text.strip() or "_" in text:
        raise ValueError(f"invalid syntax: {text!r}")
    result = float(text)
    if math.isinf(result) and text.lower() not in _INFINITY_WORDS:
        raise ValueError(f"value out of range: {text!r}")
    return result


def format_value(
    value: str,
    num_fmt: str = "",
    cell_type: CellType = CellType.STRING,
    date1904: bool = False,
) -> str:
    """Return the text a spreadsheet shows for ``value`` under ``num_fmt``.

    Raises CellFormatError, carrying the raw value, when the value cannot be
    shown through the format.
    """
    if cell_type in (CellType.ERROR, CellType.DATE):
        return value
    if cell_type is CellType.BOOL:
        if value == "0":
            return "FALSE"
        if value == "1":
            return "TRUE"
        raise CellFormatError("invalid value in bool cell", value)
    parsed = _parsed(num_fmt)
    if cell_type in (CellType.STRING, CellType.INLINE, CellType.STRING_FORMULA):
        text = parsed.text_format
        reduced = text.reduced_format_string
        if reduced == GENERAL:
            return value
        if reduced == STRING_FORMAT:
            return text.prefix + value + text.suffix
        if reduced == "":
            return text.prefix + text.suffix
        raise CellFormatError("invalid or unsupported format, unsupported string format", value)
    if cell_type is CellType.NUMERIC:
        return _format_numeric(value, parsed, date1904)
    raise CellFormatError("unknown cell type", value)


def _format_numeric(value: str, parsed: ParsedNumberFormat, date1904: bool) -> str:
    raw = value.strip()
    if raw == "":
        return ""
    if parsed.is_time_format:
        return excel_time_to_string(raw, parsed.num_fmt, date1904)
    try:
        number = _parse_float(raw)
    except ValueError as exc:
        raise CellFormatError(str(exc), raw) from exc

    if number > 0:
        options = parsed.positive_format
    elif number < 0:
        if parsed.negative_format_expects_positive:
            number = abs(number)
        options = parsed.negative_format
    else:
        options = parsed.zero_format
    assert options is not None

    if options.show_percent:
        number *= 100

    reduced = options.reduced_format_string
    if reduced == GENERAL:
        try:
            return general_numeric(value, True)
        except CellFormatError:
            return raw
    if reduced == STRING_FORMAT:
        formatted = value
    elif reduced in _FIXED_FORMATS:
        formatted = _FIXED_FORMATS[reduced].format(number)
    elif reduced == "":
        formatted = ""
    else:
        return raw
    return options.prefix + formatted + options.suffix


def _shortest_digits(number: float) -> tuple[str, int]:
    """Return the shortest round-trip digits of ``abs(number)`` and the decimal point position.

    The value equals 0.<digits> * 10 ** point; zero gives ("", 0).
    """
    text = repr(abs(number))
    mantissa, _, exponent = text.partition("e")
    integer, _, fraction = mantissa.partition(".")
    digits = integer + fraction
    point = len(integer) + (int(exponent) if exponent else 0)
    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    stripped = stripped.rstrip("0")
    if not stripped:
        return "", 0
    return stripped, point


def _format_shortest(number: float, scientific: bool) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    sign = "-" if math.copysign(1.0, number) < 0 else ""
    digits, point = _shortest_digits(number)
    if scientific:
        if not digits:
            return f"{sign}0E+00"
        exponent = point - 1
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "+" if exponent >= 0 else "-"
        return f"{sign}{mantissa}E{exp_sign}{abs(exponent):02d}"
    if not digits:
        return f"{sign}0"
    if point <= 0:
        body = "0." + "0" * (-point) + digits
    elif point >= len(digits):
        body = digits + "0" * (point - len(digits))
    else:
        body = digits[:point] + "." + digits[point:]
    return sign + body


def general_numeric(value: str, allow_scientific: bool = True) -> str:
    """Format a number the way the "General" format shows it.

    Very small and very large magnitudes switch to scientific notation when
    allowed; otherwise the shortest exact decimal is used.
    """
    if value.strip() == "":
        return ""
    try:
        number = _parse_float(value)
    except ValueError as exc:
        raise CellFormatError(str(exc), value) from exc
    if allow_scientific:
        magnitude = abs(number)
        if (
            _SMALLEST_NONZERO_FLOAT <= magnitude < MIN_NON_SCIENTIFIC_NUMBER
            or magnitude >= MAX_NON_SCIENTIFIC_NUMBER
        ):
            return _format_shortest(number, scientific=True)
    return _format_shortest(number, scientific=False)


def time_from_excel_time(serial: float, date1904: bool = False) -> datetime:
    """Convert a spreadsheet date serial number into a UTC datetime."""
    epoch = _EPOCH_1904 if date1904 else _EPOCH_1900
    return epoch + timedelta(days=serial)


def _to_layout(num_fmt: str, hour: int) -> str:
    layout = num_fmt
    if is_12_hour_time(layout):
        layout = layout.replace("hh", "03", 1).replace("h", "3", 1)
    else:
        layout = layout.replace("hh", "15", 1).replace("h", "15", 1)
    for old, new in _TIME_REPLACEMENTS:
        layout = layout.replace(old, new, 1)
    if hour < 1:
        for old in ("]:", "[03]", "[3]", "[15]"):
            layout = layout.replace(old, "]" if old == "]:" else "", 1)
    else:
        layout = layout.replace("[3]", "3", 1).replace("[15]", "15", 1)
    return layout


_ZONE_TOKENS = {
    "-": (("-070000", "+000000"), ("-07:00:00", "+00:00:00"), ("-0700", "+0000"),
          ("-07:00", "+00:00"), ("-07", "+00")),
    "Z": (("Z070000", "Z"), ("Z07:00:00", "Z"), ("Z0700", "Z"), ("Z07:00", "Z"), ("Z07", "Z")),
}


def _layout_chunk(rest: str, when: datetime) -> tuple[str, int]:
    """Render the layout token at the start of ``rest``; return text and length used."""
    ch = rest[0]
    hour12 = when.hour % 12 or 12
    yday = when.timetuple().tm_yday
    month = _MONTHS[when.month - 1]
    weekday = _WEEKDAYS[when.weekday()]
    if ch == "J" and rest.startswith("Jan"):
        return (month, 7) if rest.startswith("January") else (month[:3], 3)
    if ch == "M":
        if rest.startswith("Monday"):
            return weekday, 6
        if rest.startswith("Mon"):
            return weekday[:3], 3
        if rest.startswith("MST"):
            return "UTC", 3
    if ch == "0":
        if len(rest) > 1 and rest[1] in "123456":
            padded = {
                "1": when.month, "2": when.day, "3": hour12,
                "4": when.minute, "5": when.second, "6": when.year % 100,
            }
            return f"{padded[rest[1]]:02d}", 2
        if rest.startswith("002"):
            return f"{yday:03d}", 3
    if ch == "1":
        if rest.startswith("15"):
            return f"{when.hour:02d}", 2
        return str(when.month), 1
    if ch == "2":
        if rest.startswith("2006"):
            return f"{when.year:04d}", 4
        return str(when.day), 1
    if ch == "_":
        if rest.startswith("_2006"):
            return f"_{when.year:04d}", 5
        if rest.startswith("_2"):
            return f"{when.day:2d}", 2
        if rest.startswith("__2"):
            return f"{yday:3d}", 3
    if ch == "3":
        return str(hour12), 1
    if ch == "4":
        return str(when.minute), 1
    if ch == "5":
        return str(when.second), 1
    if ch == "P" and rest.startswith("PM"):
        return ("PM" if when.hour >= 12 else "AM"), 2
    if ch == "p" and rest.startswith("pm"):
        return ("pm" if when.hour >= 12 else "am"), 2
    if ch in _ZONE_TOKENS:
        for token, text in _ZONE_TOKENS[ch]:
            if rest.startswith(token):
                return text, len(token)
    if ch == "." and len(rest) > 1 and rest[1] in "09":
        end = 1
        while end < len(rest) and rest[end] == rest[1]:
            end += 1
        if not (end < len(rest) and rest[end] in "0123456789"):
            fraction = f"{when.microsecond:06d}000"[: end - 1]
            if rest[1] == "9":
                fraction = fraction.rstrip("0")
                return ("." + fraction if fraction else ""), end
            return "." + fraction, end
    return ch, 1


def _render_layout(layout: str, when: datetime) -> str:
    pieces = []
    i = 0
    while i < len(layout):
        text, used = _layout_chunk(layout[i:], when)
        pieces.append(text)
        i += used
    return "".join(pieces)


def excel_time_to_string(value: str, num_fmt: str, date1904: bool = False) -> str:
    """Render a date serial number through a date/time format code."""
    try:
        serial = _parse_float(value)
    except ValueError as exc:
        raise CellFormatError(str(exc), value) from exc
    when = time_from_excel_time(serial, date1904)
    return _render_layout(_to_layout(num_fmt, when.hour), when)