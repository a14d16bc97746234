"""Spreadsheet number format codes and RGB/HSL colour conversion."""

__version__ = "0.1.0"
__all__ = ["numfmt", "hsl", "formatting"]