# xlsxfmt

Render spreadsheet cell values the way a spreadsheet application shows them,
following the cell's number format code, and convert colours between RGB and
HSL.

No third-party dependencies.

## Installation

```
pip install xlsxfmt
```

## Formatting cell values

`xlsxfmt.formatting.format_value(value, num_fmt, cell_type, date1904)` takes
the raw text stored in a cell, its number format code, its `CellType` and
whether the workbook uses the 1904 date system:

```python
from xlsxfmt.formatting import CellType, format_value

format_value("18.989999999999998", "[$$-409]0", CellType.NUMERIC, False)   # "$19"
format_value("-1", "0;(0)", CellType.NUMERIC, False)                       # "(1)"
format_value("0", '0;(0);"zero"', CellType.NUMERIC, False)                 # "zero"
format_value("asdf", '0;(0);"zero";"Behold: "@', CellType.STRING, False)   # "Behold: asdf"
```

How each `CellType` is treated:

* `ERROR` and `DATE` values are returned unchanged;
* `BOOL` values `"0"` and `"1"` become `"FALSE"` and `"TRUE"`;
* `STRING`, `INLINE` and `STRING_FORMULA` values go through the text section
  of the format (`General`, `@` with literals around it, or literals only);
* `NUMERIC` values choose the positive, negative or zero section of the
  format, or are rendered as a date when the code is a date/time format.

A value that cannot be formatted raises `CellFormatError`, whose `value`
attribute holds the raw text; for example a numeric cell whose value is not a
number, or a bool cell holding anything other than `"0"` or `"1"`.

Supported pieces of a format code:

* up to four sections separated by `;` (positive, negative, zero, text);
  with two or more sections, negative numbers are formatted as positive and
  the negative section supplies the sign, e.g. `(0)`;
* quoted and backslash-escaped literals, unescaped literal symbols such as
  `$ - + / ( ) :` and spaces;
* colours (`[red]`, `[color50]`), conditions and currency annotations
  (`[$€-409]` adds `€`);
* percent (`%`), which multiplies the value by 100;
* the number patterns `0`, `0.0`, `0.00`, `0.000`, `0.0000`, their `#,##0`
  variants (rounded to the same number of decimals, without thousands
  separators), the scientific patterns `0.00e+00` and `##0.0e+0`, `@`, and
  `General`;
* date and time formats such as `yyyy-mm-dd`, `d-mmm-yy`, `h:mm AM/PM`,
  `[h]:mm:ss`.

A numeric pattern outside that list leaves the value as its raw text. A format
code that cannot be parsed falls back to `General`.

`general_numeric(value, allow_scientific)` applies the "General" rules on
their own: the shortest exact decimal, switching to scientific notation
(`1.5E+11`) for magnitudes of 1e11 and above or below 1e-9 when allowed.
`time_from_excel_time(serial, date1904)` turns a serial date number into a UTC
`datetime`, and `excel_time_to_string(value, num_fmt, date1904)` renders a
serial number through a date/time format code.

## Inspecting format codes

`xlsxfmt.numfmt` exposes the parser:

```python
from xlsxfmt.numfmt import is_time_format, parse_number_format

is_time_format("h:mm:ss")      # True
is_time_format("#,##0.00")     # False

parsed = parse_number_format('0;(0);"zero"')
parsed.negative_format.prefix  # "("
```

`parse_number_format` returns a `ParsedNumberFormat` whose sections are
`FormatOptions` (prefix, reduced format string, suffix, percent flag); a
parse problem is kept in its `parse_error` rather than raised. The lower-level
helpers `split_format_on_semicolon`, `parse_number_format_section`,
`split_format_and_suffix` and `parse_literals` raise `NumberFormatError` on
invalid input. `is_12_hour_time` and `compare_format_strings` are available
too.

## Colours

```python
from xlsxfmt.hsl import HSL, hsl_model, hsl_to_rgb, rgb_to_hsl

rgb_to_hsl(255, 0, 0)          # (0.0, 1.0, 0.5)
hsl_to_rgb(0.0, 1.0, 0.5)      # (255, 0, 0)
HSL(0.0, 1.0, 0.5).rgba()      # (65535, 0, 0, 65535)
hsl_model((65535, 0, 0, 65535))  # HSL(h=0.0, s=1.0, l=0.5)
```

`hsl_model` accepts an `HSL`, any object with an `rgba()` method returning
16-bit channels, or a sequence of 16-bit channels.

## What this package does not do

It works on values and format codes only. It does not open, read or save
workbook files, and has no notion of sheets, rows or cells beyond the value,
format code and type passed to `format_value`.

## Running the tests

```
pip install -e ".[test]"
pytest
```