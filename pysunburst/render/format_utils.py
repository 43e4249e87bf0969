from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional

_NUMBER_PATTERN = re.compile(r"[0#][0#,]*(?:\.[0#]*)?|\.[0#]+")


@dataclass
class _Section:
    prefix: str
    suffix: str
    decimals: int
    optional_decimals: int
    grouping: bool
    percent: bool


def _parse_section(text: str) -> _Section:
    match = _NUMBER_PATTERN.search(text)
    if match is None:
        return _Section(text, "", 0, 0, False, "%" in text)
    number = match.group(0)
    int_part, _, dec_part = number.partition(".")
    prefix = text[: match.start()]
    suffix = text[match.end() :]
    return _Section(
        prefix=prefix,
        suffix=suffix,
        decimals=len(dec_part),
        optional_decimals=dec_part.count("#"),
        grouping="," in int_part,
        percent="%" in prefix or "%" in suffix,
    )


def fmt_general(x: float) -> str:
    if float(x).is_integer():
        return f"{int(x):,}"
    return f"{x:,.2f}"


class ValueFormatter:
    """Formats numbers with a host-style format string.

    Supports the subset of patterns the host emits for measure columns: up to
    three ``;``-separated sections (positive;negative;zero), ``0``/``#`` digit
    placeholders, ``,`` thousands grouping, a decimal part and ``%``. The
    negative section is applied to the absolute value, so it carries its own
    sign. Without a format string numbers use :func:`fmt_general`.
    """

    def __init__(self, format_string: Optional[str] = None) -> None:
        self.format_string = format_string
        self._sections: List[_Section] = (
            [_parse_section(s) for s in format_string.split(";")]
            if format_string
            else []
        )

    def format(self, value: Any) -> str:
        if value is None:
            return ""
        try:
            x = float(value)
        except (TypeError, ValueError):
            return str(value)
        if math.isnan(x) or math.isinf(x):
            return "NaN"
        if not self._sections:
            return fmt_general(x)
        section = self._sections[0]
        if x < 0 and len(self._sections) >= 2:
            section = self._sections[1]
            x = abs(x)
        elif x == 0 and len(self._sections) >= 3:
            section = self._sections[2]
        return section.prefix + self._format_number(x, section) + section.suffix

    @staticmethod
    def _format_number(x: float, section: _Section) -> str:
        if section.percent:
            x *= 100.0
        text = f"{x:{',' if section.grouping else ''}.{section.decimals}f}"
        if section.optional_decimals and "." in text:
            keep = section.decimals - section.optional_decimals
            int_part, dec_part = text.split(".")
            dec_part = dec_part.rstrip("0")
            if len(dec_part) < keep:
                dec_part = dec_part.ljust(keep, "0")
            text = f"{int_part}.{dec_part}" if dec_part else int_part
        return text


def get_formatted_value(value: float, formatter: ValueFormatter) -> str:
    """Format ``value``; negative values are never displayed."""
    return "" if value < 0 else formatter.format(value)
