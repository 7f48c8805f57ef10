"""
Locale-aware formatting backend.

LocaleFormatter describes the locale capability the formatters rely on
(currency, number, percent, relative time, ordinal plural category).
BabelFormatter implements it on top of Babel's CLDR data. The module keeps
one process-wide default instance that can be swapped with set_formatter().
"""

import copy
import math
import re
from datetime import timedelta
from functools import lru_cache
from typing import Optional, Protocol, Union
from decimal import Decimal

from babel import Locale
from babel.dates import format_timedelta
from babel.numbers import (
    NumberPattern,
    format_compact_currency,
    format_compact_decimal,
    format_currency,
    format_decimal,
    format_percent,
    format_scientific,
    get_decimal_symbol,
    get_exponential_symbol,
    get_plus_sign_symbol,
)

Number = Union[int, float, Decimal]

CURRENCY_CODE_RE = re.compile(r"[A-Za-z]{3}")

# Seconds per unit, matching the unit sizes used by babel.dates.format_timedelta
RELATIVE_UNIT_SECONDS = {
    "year": 31536000,
    "month": 2592000,
    "week": 604800,
    "day": 86400,
    "hour": 3600,
    "minute": 60,
    "second": 1,
}


class LocaleFormatter(Protocol):
    """Locale capability used by display_formatters.utils.formatters."""

    def format_currency(
        self,
        amount: Number,
        currency: str,
        locale: str,
        min_fraction_digits: int,
        max_fraction_digits: int,
        notation: str = "standard",
        compact_display: str = "short",
    ) -> str:
        ...

    def format_number(
        self,
        value: Number,
        locale: str,
        min_fraction_digits: int,
        max_fraction_digits: int,
        use_grouping: bool = True,
        notation: str = "standard",
        compact_display: str = "short",
    ) -> str:
        ...

    def format_percent(
        self,
        ratio: Number,
        locale: str,
        min_fraction_digits: int,
        max_fraction_digits: int,
        sign_always: bool = False,
    ) -> str:
        ...

    def format_relative(self, value: int, unit: str, locale: str) -> str:
        ...

    def ordinal_category(self, number: Number, locale: str) -> str:
        ...


@lru_cache(maxsize=64)
def parse_locale(identifier: str) -> Locale:
    """
    Parse a locale identifier written with '-' or '_' separators.

    Raises:
        ValueError: If the identifier is malformed
        babel.UnknownLocaleError: If CLDR has no data for it
    """
    return Locale.parse(identifier.strip().replace("-", "_"))


def _with_fraction(pattern: NumberPattern, min_digits: int, max_digits: int) -> NumberPattern:
    """Copy a locale pattern with explicit fraction digit bounds."""
    if not 0 <= min_digits <= max_digits:
        raise ValueError(
            f"Invalid fraction digits: min={min_digits}, max={max_digits}"
        )
    pattern = copy.copy(pattern)
    pattern.frac_prec = (min_digits, max_digits)
    return pattern


def _pad_fraction(formatted: str, min_digits: int, loc: Locale) -> str:
    """
    Pad the first number in `formatted` to at least `min_digits` decimals.

    Babel's compact formatters only take a maximum, so "$2M" becomes "$2.0M"
    for min_digits=1.
    """
    if min_digits <= 0:
        return formatted
    decimal_symbol = get_decimal_symbol(loc)

    def pad(match: "re.Match[str]") -> str:
        fraction = (match.group(2) or "").ljust(min_digits, "0")
        return f"{match.group(1)}{decimal_symbol}{fraction}"

    return re.sub(
        rf"(\d+)(?:{re.escape(decimal_symbol)}(\d+))?", pad, formatted, count=1
    )


class BabelFormatter:
    """
    LocaleFormatter backed by Babel (CLDR).

    Every method raises on invalid input (unknown locale, malformed
    currency code, unsupported notation); callers decide how to degrade.

    Example:
        >>> fmt = BabelFormatter()
        >>> fmt.format_currency(1234.5, "USD", "en-US", 2, 2)
        '$1,234.50'
        >>> fmt.format_relative(-2, "hour", "en-US")
        '2 hours ago'
    """

    def format_currency(
        self,
        amount: Number,
        currency: str,
        locale: str,
        min_fraction_digits: int,
        max_fraction_digits: int,
        notation: str = "standard",
        compact_display: str = "short",
    ) -> str:
        if not CURRENCY_CODE_RE.fullmatch(currency or ""):
            raise ValueError(f"Invalid currency code: {currency!r}")
        currency = currency.upper()
        loc = parse_locale(locale)

        if notation == "compact":
            # CLDR only ships the short style for compact currency
            formatted = format_compact_currency(
                amount,
                currency,
                format_type="short",
                locale=loc,
                fraction_digits=max_fraction_digits,
            )
            return _pad_fraction(formatted, min_fraction_digits, loc)
        if notation != "standard":
            raise ValueError(f"Unsupported currency notation: {notation!r}")

        pattern = _with_fraction(
            loc.currency_formats["standard"], min_fraction_digits, max_fraction_digits
        )
        return format_currency(
            amount, currency, format=pattern, locale=loc, currency_digits=False
        )

    def format_number(
        self,
        value: Number,
        locale: str,
        min_fraction_digits: int,
        max_fraction_digits: int,
        use_grouping: bool = True,
        notation: str = "standard",
        compact_display: str = "short",
    ) -> str:
        loc = parse_locale(locale)

        if notation == "compact":
            return format_compact_decimal(
                value,
                format_type=compact_display,
                locale=loc,
                fraction_digits=max_fraction_digits,
            )
        if notation == "scientific":
            return format_scientific(value, locale=loc)
        if notation == "engineering":
            return self._format_engineering(
                value, loc, min_fraction_digits, max_fraction_digits
            )
        if notation != "standard":
            raise ValueError(f"Unsupported notation: {notation!r}")

        pattern = _with_fraction(
            loc.decimal_formats[None], min_fraction_digits, max_fraction_digits
        )
        return format_decimal(
            value, format=pattern, locale=loc, group_separator=use_grouping
        )

    def _format_engineering(
        self, value: Number, loc: Locale, min_fraction_digits: int, max_fraction_digits: int
    ) -> str:
        """Scientific notation with the exponent floored to a multiple of 3."""
        d = Decimal(str(value))
        exponent = 0 if d.is_zero() else d.adjusted() - d.adjusted() % 3
        pattern = _with_fraction(
            loc.decimal_formats[None], min_fraction_digits, max_fraction_digits
        )
        mantissa = format_decimal(
            d.scaleb(-exponent), format=pattern, locale=loc, group_separator=False
        )
        return f"{mantissa}{get_exponential_symbol(loc)}{exponent}"

    def format_percent(
        self,
        ratio: Number,
        locale: str,
        min_fraction_digits: int,
        max_fraction_digits: int,
        sign_always: bool = False,
    ) -> str:
        loc = parse_locale(locale)
        pattern = _with_fraction(
            loc.percent_formats[None], min_fraction_digits, max_fraction_digits
        )
        formatted = format_percent(ratio, format=pattern, locale=loc)
        # Sign bit, not comparison: -0.0 already renders with a minus
        if sign_always and math.copysign(1, ratio) > 0:
            formatted = get_plus_sign_symbol(loc) + formatted
        return formatted

    def format_relative(self, value: int, unit: str, locale: str) -> str:
        """Render `value` units relative to now; negative values are in the past."""
        seconds = RELATIVE_UNIT_SECONDS[unit]
        # Infinite threshold pins the output to `unit` instead of Babel's own pick
        return format_timedelta(
            timedelta(seconds=value * seconds),
            granularity=unit,
            threshold=float("inf"),
            add_direction=True,
            locale=parse_locale(locale),
        )

    def ordinal_category(self, number: Number, locale: str) -> str:
        return parse_locale(locale).ordinal_form(number)


_default_formatter: LocaleFormatter = BabelFormatter()


def get_formatter() -> LocaleFormatter:
    """Return the process-wide LocaleFormatter."""
    return _default_formatter


def set_formatter(formatter: Optional[LocaleFormatter]) -> LocaleFormatter:
    """
    Replace the process-wide LocaleFormatter.

    Passing None restores a fresh BabelFormatter. Returns the previous
    formatter so callers (and tests) can restore it.
    """
    global _default_formatter
    previous = _default_formatter
    _default_formatter = formatter if formatter is not None else BabelFormatter()
    return previous
