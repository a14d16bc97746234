import pytest

from xlsxfmt.numfmt import (
    FormatOptions,
    NumberFormatError,
    ParsedNumberFormat,
    compare_format_strings,
    is_12_hour_time,
    is_time_format,
    parse_literals,
    parse_number_format,
    parse_number_format_section,
    split_format_and_suffix,
    split_format_on_semicolon,
)

NOT_TIME = [
    "General", "0", "0.00", "#,##0", "#,##0.00", "0%", "0.00%", "0.00E+00",
]

TIME = [
    "mm-dd-yy", "d-mmm-yy", "d-mmm", "mmm-yy", "h:mm AM/PM", "h:mm:ss AM/PM",
    "h:mm", "h:mm:ss", "m/d/yy h:mm", "mm:ss", "[h]:mm:ss", "mmss.0",
    "[$-404]e/m/d", 'yyyy"年"m"月"', '[$-404]e"年"', 'm"月"d"日" m"月"d"日"',
    '[$-404]e"年"m"月"d"日"', 'm"月"d"日"', " m/d/yy", "m-d-yy",
    'yyyy"年"m"月"d"日"', 'hh"時"mm"分"', 'h"时"mm"分"', 'hh"時"mm"分"ss"秒"',
    'h"时"mm"分"ss"秒"', '上午/下午 hh"時"mm"分"ss"秒"', '上午/下午 h"时"mm"分"ss"秒"',
    "上午/下午", 'hh"時"mm"分" yyyy"年"m"月"', 'hh"時"mm"分"ss"秒 " m"月"d"日"',
    "[$-409]M/D/YYYY", 'hh"時"mm"分" 上午/下午 h"时"mm"分"', "下午",
    'yyyy"5E74"m"6708"', '[$-404]e"5E74"m"6708"d"65E5"', 'm"6708"d"65E5"', "m/d/yy",
]


@pytest.mark.parametrize("fmt", NOT_TIME)
def test_not_time_format(fmt):
    assert is_time_format(fmt) is False


@pytest.mark.parametrize("fmt", TIME)
def test_time_format(fmt):
    assert is_time_format(fmt) is True


@pytest.mark.parametrize(
    "fmt, prefix, reduced, suffix",
    [
        ("[red]0", "", "0", ""),
        ("[blue]0", "", "0", ""),
        ("[color50]0", "", "0", ""),
        ("[$$-409]0", "$", "0", ""),
        ("[$¥-409]0", "¥", "0", ""),
        ("[$€-409]0", "€", "0", ""),
        ("[$£-409]0", "£", "0", ""),
        ("[$USD-409] 0", "USD ", "0", ""),
        ("0[$USD-409]", "", "0", "USD"),
        ("-[$USD-409]0", "-USD", "0", ""),
        ("\\[0", "[", "0", ""),
        ('"["0', "[", "0", ""),
        ("_[0", "", "0", ""),
        ('"asdf"0', "asdf", "0", ""),
        ('"$"0', "$", "0", ""),
        ("$0", "$", "0", ""),
        (
            "$-+/()!^&'~{}<>=: 0 :=><}{~'&^)(/+-$",
            "$-+/()!^&'~{}<>=: ",
            "0",
            " :=><}{~'&^)(/+-$",
        ),
    ],
)
def test_parse_section_parts(fmt, prefix, reduced, suffix):
    section = parse_number_format_section(fmt)
    assert section.prefix == prefix
    assert section.reduced_format_string == reduced
    assert section.suffix == suffix
    assert section.full_format_string == fmt


def test_percent_anywhere():
    section = parse_number_format_section("%0")
    assert section.show_percent is True
    assert section.prefix == "%"
    assert section.reduced_format_string == "0"


def test_percent_suffix():
    section = parse_number_format_section("0.00%")
    assert section.show_percent is True
    assert section.suffix == "%"
    assert section.reduced_format_string == "0.00"


def test_general_section_any_case():
    section = parse_number_format_section("General")
    assert section.reduced_format_string == "general"
    assert section.full_format_string == "general"


@pytest.mark.parametrize("fmt", ["[red", "[$USD]0", "x0", '"abc', "0 0"])
def test_invalid_sections_raise(fmt):
    with pytest.raises(NumberFormatError):
        parse_number_format_section(fmt)


def test_split_on_semicolon_respects_quotes():
    parts = split_format_on_semicolon('0;(0);"zero";"Behold; "@')
    assert parts == ["0", "(0)", '"zero"', '"Behold; "@']


def test_split_on_semicolon_respects_escape():
    assert split_format_on_semicolon("0\\;0") == ["0\\;0"]


def test_split_on_semicolon_unmatched_quote():
    with pytest.raises(NumberFormatError):
        split_format_on_semicolon('0;"abc')


def test_split_format_and_suffix():
    assert split_format_and_suffix("#,##0.00 USD") == ("#,##0.00", " USD")
    assert split_format_and_suffix("0.00e+00") == ("0.00e+00", "")


def test_parse_literals_stops_at_format():
    assert parse_literals('"Behold: "@') == ("Behold: ", "@", False)


def test_parse_literals_all_literal():
    assert parse_literals("(") == ("(", "", False)


def test_single_section_used_for_all():
    parsed = parse_number_format("0")
    assert isinstance(parsed, ParsedNumberFormat)
    assert parsed.positive_format is parsed.negative_format is parsed.zero_format
    assert parsed.negative_format_expects_positive is False
    assert parsed.text_format.reduced_format_string == "general"
    assert parsed.parse_error is None


def test_single_text_section():
    parsed = parse_number_format('"Say "@')
    assert parsed.text_format.prefix == "Say "
    assert parsed.text_format.reduced_format_string == "@"


def test_two_sections():
    parsed = parse_number_format("0;(0)")
    assert parsed.negative_format_expects_positive is True
    assert parsed.zero_format is parsed.positive_format
    assert parsed.negative_format.prefix == "("
    assert parsed.negative_format.suffix == ")"
    assert parsed.text_format.reduced_format_string == "general"


def test_three_sections():
    parsed = parse_number_format('0;(0);"zero"')
    assert parsed.zero_format.prefix == "zero"
    assert parsed.zero_format.reduced_format_string == ""
    assert parsed.text_format.reduced_format_string == "general"


@pytest.mark.parametrize(
    "fmt, prefix",
    [
        ('0;(0);"zero";"Behold: "@', "Behold: "),
        ('0;(0);"zero";"Behold": @', "Behold: "),
        ('0;(0);"zero";"Behold; "@', "Behold; "),
    ],
)
def test_four_sections_text(fmt, prefix):
    parsed = parse_number_format(fmt)
    assert parsed.text_format.prefix == prefix
    assert parsed.text_format.reduced_format_string == "@"
    assert parsed.text_format.suffix == ""


def test_too_many_sections_falls_back():
    parsed = parse_number_format("0;0;0;0;0")
    assert parsed.positive_format.reduced_format_string == "general"
    assert isinstance(parsed.parse_error, NumberFormatError)


def test_invalid_section_falls_back():
    parsed = parse_number_format("0 0")
    assert parsed.positive_format.reduced_format_string == "general"
    assert isinstance(parsed.parse_error, NumberFormatError)


def test_unmatched_quote_falls_back():
    parsed = parse_number_format('0;"x')
    assert parsed.positive_format.reduced_format_string == "general"
    assert isinstance(parsed.parse_error, NumberFormatError)


def test_time_format_parse():
    parsed = parse_number_format("[h]:mm:ss")
    assert parsed.is_time_format is True
    assert parsed.positive_format is None
    assert parsed.text_format.reduced_format_string == "general"


def test_compare_format_strings():
    assert compare_format_strings("", "GENERAL") is True
    assert compare_format_strings("General", "general") is True
    assert compare_format_strings("0", "0.00") is False
    assert compare_format_strings("0.00", "0.00") is True


def test_is_12_hour_time():
    assert is_12_hour_time("h:mm AM/PM") is True
    assert is_12_hour_time("h:mm a/p") is True
    assert is_12_hour_time("h:mm") is False


def test_format_options_equality():
    assert FormatOptions("0", "0") == parse_number_format_section("0")