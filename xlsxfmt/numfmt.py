"""Parsing of spreadsheet number format codes into their sections and parts."""

from __future__ import annotations

from dataclasses import dataclass

GENERAL = "general"
STRING_FORMAT = "@"

# Characters that stay in the reduced format string. Order matters: the
# two-character forms must be checked before their one-character prefixes.
FORMATTING_CHARACTERS = (
    "0/", "#/", "?/", "E-", "E+", "e-", "e+", "0", "#", "?", ".", ",", "@", "*",
)

TIME_FORMAT_CHARACTERS = (
    "M", "D", "Y", "YY", "YYYY", "MM", "yyyy", "m", "d", "yy", "h", "m",
    "AM/PM", "A/P", "am/pm", "a/p", "r", "g", "e", "b1", "b2",
    "[hh]", "[h]", "[mm]", "[m]",
    "s.0000", "s.000", "s.00", "s.0", "s",
    "[ss].0000", "[ss].000", "[ss].00", "[ss].0", "[ss]",
    "[s].0000", "[s].000", "[s].00", "[s].0", "[s]",
    "上", "午", "下",
)

_LITERAL_CHARACTERS = frozenset("$-+/()!^&'~{}<>=: ")

_MAX_SECTIONS = 4


class NumberFormatError(ValueError):
    """Raised when a number format code cannot be parsed."""


@dataclass(frozen=True)
class FormatOptions:
    """One parsed section of a number format code."""

    full_format_string: str
    reduced_format_string: str
    prefix: str = ""
    suffix: str = ""
    show_percent: bool = False
    is_time_format: bool = False


GENERAL_FORMAT = FormatOptions(full_format_string=GENERAL, reduced_format_string=GENERAL)
FALLBACK_ERROR_FORMAT = GENERAL_FORMAT


@dataclass(frozen=True)
class ParsedNumberFormat:
    """A full number format code split into its positive, negative, zero and text sections."""

    num_fmt: str
    is_time_format: bool = False
    negative_format_expects_positive: bool = False
    positive_format: FormatOptions | None = None
    negative_format: FormatOptions | None = None
    zero_format: FormatOptions | None = None
    text_format: FormatOptions = GENERAL_FORMAT
    parse_error: NumberFormatError | None = None


def compare_format_strings(first: str, second: str) -> bool:
    """Compare format codes, treating "" and any casing of "general" as equal."""
    if first == second:
        return True

    def normalise(code: str) -> str:
        return GENERAL if code == "" or code.lower() == GENERAL else code

    return normalise(first) == normalise(second)


def parse_number_format(num_fmt: str) -> ParsedNumberFormat:
    """Parse a full format code; invalid sections fall back to general."""
    if is_time_format(num_fmt):
        return ParsedNumberFormat(num_fmt=num_fmt, is_time_format=True, text_format=GENERAL_FORMAT)

    parse_error: NumberFormatError | None = None
    sections: list[FormatOptions] = []
    try:
        raw_sections = split_format_on_semicolon(num_fmt)
    except NumberFormatError as exc:
        sections.append(FALLBACK_ERROR_FORMAT)
        parse_error = exc
    else:
        for raw in raw_sections:
            try:
                sections.append(parse_number_format_section(raw))
            except NumberFormatError as exc:
                sections.append(FALLBACK_ERROR_FORMAT)
                parse_error = exc

    if len(sections) > _MAX_SECTIONS:
        sections = [FALLBACK_ERROR_FORMAT]
        parse_error = NumberFormatError("invalid number format, too many format sections")

    if len(sections) == 1:
        only = sections[0]
        text = only if "@" in only.full_format_string else GENERAL_FORMAT
        return ParsedNumberFormat(
            num_fmt=num_fmt,
            positive_format=only,
            negative_format=only,
            zero_format=only,
            text_format=text,
            parse_error=parse_error,
        )
    if len(sections) == 2:
        positive, negative = sections
        zero, text = positive, GENERAL_FORMAT
    elif len(sections) == 3:
        positive, negative, zero = sections
        text = GENERAL_FORMAT
    else:
        positive, negative, zero, text = sections
    return ParsedNumberFormat(
        num_fmt=num_fmt,
        negative_format_expects_positive=True,
        positive_format=positive,
        negative_format=negative,
        zero_format=zero,
        text_format=text,
        parse_error=parse_error,
    )


def split_format_on_semicolon(fmt: str) -> list[str]:
    """Split a format code into sections, ignoring escaped and quoted semicolons."""
    parts: list[str] = []
    start = 0
    i = 0
    while i < len(fmt):
        ch = fmt[i]
        if ch == ";":
            parts.append(fmt[start:i])
            start = i + 1
        elif ch == "\\":
            i += 1
        elif ch == '"':
            end = fmt.find('"', i + 1)
            if end == -1:
                raise NumberFormatError("invalid format string, unmatched double quote")
            i = end
        i += 1
    parts.append(fmt[start:])
    return parts


def parse_number_format_section(section: str) -> FormatOptions:
    """Parse one section into prefix, reduced number format and suffix."""
    reduced = section.strip()
    if compare_format_strings(reduced, GENERAL):
        return GENERAL_FORMAT

    prefix, reduced, percent_before = parse_literals(reduced)
    reduced, suffix_format = split_format_and_suffix(reduced)
    suffix, remaining, percent_after = parse_literals(suffix_format)
    if remaining:
        raise NumberFormatError("invalid or unsupported format string")

    return FormatOptions(
        full_format_string=section,
        reduced_format_string=reduced,
        prefix=prefix,
        suffix=suffix,
        show_percent=percent_before or percent_after,
    )


def split_format_and_suffix(fmt: str) -> tuple[str, str]:
    """Split off the leading run of formatting characters from the rest."""
    i = 0
    while i < len(fmt):
        special = next((s for s in FORMATTING_CHARACTERS if fmt.startswith(s, i)), None)
        if special is None:
            break
        i += len(special)
    return fmt[:i], fmt[i:]


def parse_literals(fmt: str) -> tuple[str, str, bool]:
    """Consume literal text up to the first formatting character.

    Returns the literal text, the unconsumed remainder, and whether a
    percent sign was seen.
    """
    prefix: list[str] = []
    show_percent = False
    i = 0
    while i < len(fmt):
        rest = fmt[i:]
        ch = rest[0]
        if ch == "\\":
            if len(rest) > 1:
                prefix.append(rest[1])
                i += 1
        elif ch == "_":
            if len(rest) > 1:
                i += 1
        elif ch == "*":
            pass
        elif ch == '"':
            end = rest.find('"', 1)
            if end == -1:
                raise NumberFormatError("invalid formatting code, unmatched double quote")
            prefix.append(rest[1:end])
            i += end
        elif ch == "%":
            show_percent = True
            prefix.append("%")
        elif ch == "[":
            bracket = rest.find("]")
            if bracket == -1:
                raise NumberFormatError("invalid formatting code, invalid brackets")
            if len(rest) > 2 and rest[1] == "$":
                dash = rest.find("-")
                if dash == -1 or dash >= bracket:
                    raise NumberFormatError("invalid formatting code, invalid currency annotation")
                prefix.append(rest[2:dash])
            i += bracket
        elif ch in _LITERAL_CHARACTERS:
            prefix.append(ch)
        elif rest.startswith(FORMATTING_CHARACTERS):
            return "".join(prefix), rest, show_percent
        else:
            raise NumberFormatError("invalid formatting code: unsupported or unescaped characters")
        i += 1
    return "".join(prefix), "", show_percent


def is_time_format(fmt: str) -> bool:
    """Report whether a format code describes a date or time."""
    found = False
    i = 0
    while i < len(fmt):
        rest = fmt[i:]
        ch = rest[0]
        if ch in ("\\", "_"):
            if len(rest) > 1:
                i += 1
        elif ch == "*" or ch == "," or ch in _LITERAL_CHARACTERS:
            pass
        elif ch == '"':
            end = rest.find('"', 1)
            if end == -1:
                return False
            i += end + 1
        else:
            special = next((s for s in TIME_FORMAT_CHARACTERS if rest.startswith(s)), None)
            if special is not None:
                found = True
                i += len(special) - 1
            elif ch == "[":
                end = rest.find("]", 1)
                if end == -1:
                    return False
                i += end
            else:
                return False
        i += 1
    return found


def is_12_hour_time(fmt: str) -> bool:
    """Report whether a time format code uses an AM/PM marker."""
    return any(marker in fmt for marker in ("am/pm", "AM/PM", "a/p", "A/P"))