"""
Utility functions for currency, number, date/time and text formatting.

Locale-aware helpers (delegate to utils.locale_formatter, degrade to a
fixed-format string when the locale backend fails):
- format_currency, format_number_with_abbreviation, format_percentage,
  format_decimal, format_relative_time, format_ordinal, format_number_range.

Fixed-format helpers:
- format_large_number, format_duration, format_file_size: unit abbreviation.
- truncate_text, format_address, format_hash: display truncation.
- format_apy, format_tvl: staking protocol figures.
- format_datetime: timezone-aware datetime formatting for display.
- safe_parse_number: lenient number extraction from user/API values.

None of these functions raise; invalid input maps to a fallback literal.
"""

import logging
import math
import re
from datetime import date, datetime, time
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Any, Optional, Union

import pytz

from display_formatters.config.settings import Settings
from .locale_formatter import LocaleFormatter, get_formatter

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]
DateLike = Union[datetime, date, str, int, float]

# Currency switches to compact notation from this magnitude on
COMPACT_CURRENCY_THRESHOLD = 1_000_000

# Below this magnitude numbers are shown in full
ABBREVIATION_THRESHOLD = 1000

LARGE_NUMBER_UNITS = [
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
]

DURATION_UNITS = [
    (31536000, "y"),   # year
    (2592000, "mo"),   # month
    (86400, "d"),      # day
    (3600, "h"),       # hour
    (60, "m"),         # minute
    (1, "s"),          # second
]

RELATIVE_TIME_UNITS = [
    ("year", 31536000),
    ("month", 2592000),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
]

FILE_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]

# CLDR ordinal plural category -> suffix, per language
ORDINAL_SUFFIXES = {
    "en": {"one": "st", "two": "nd", "few": "rd", "other": "th"},
    "fr": {"one": "er", "other": "e"},
}

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")
_NUMERIC_PREFIX_RE = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")

# Enough precision to quantize any finite float
_FIXED_CONTEXT = Context(prec=400)


def _finite(value: Any) -> Optional[Union[int, float]]:
    """Return value as int/float if it is a finite real number, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        # Ints beyond float range are treated like infinities
        try:
            float(value)
        except OverflowError:
            return None
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, Decimal):
        return float(value) if value.is_finite() else None
    return None


def _to_fixed(value: Number, digits: int = 2) -> str:
    """
    Render a number with a fixed count of decimals, rounding half up.

    Works on the exact binary value like JavaScript's toFixed, so
    1.005 -> "1.00" and 1.25 -> "1.3" (digits=2 and 1).
    """
    d = Decimal(value).quantize(
        Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT
    )
    # Normalize negative zero to plain zero for prettier display
    if value == 0:
        d = abs(d)
    return f"{d:f}"


def _plain(value: Number) -> str:
    """String form of a number without a trailing '.0' for whole floats."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def _localize(dt: datetime) -> datetime:
    """Attach/convert to the server timezone."""
    tz = Settings.SERVER_TZ
    if dt.tzinfo is None:
        # pytz-style timezone (has .localize) vs zoneinfo (no .localize)
        if hasattr(tz, "localize"):
            return tz.localize(dt)
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def _parse_iso(dt_str: str) -> datetime:
    """Parse ISO-8601, accepting the 'Z' (Zulu/UTC) suffix."""
    s = dt_str.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return datetime.fromisoformat(s)


def _parse_date(value: Any) -> Optional[datetime]:
    """
    Coerce a date-like value to an aware datetime.

    Accepts datetime, date (midnight), ISO strings and epoch milliseconds.
    Returns None when the value cannot be interpreted as a date.
    """
    if isinstance(value, datetime):
        return _localize(value) if value.tzinfo is None else value
    if isinstance(value, date):
        return _localize(datetime.combine(value, time()))
    if isinstance(value, str):
        try:
            dt = _parse_iso(value)
        except ValueError:
            return None
        return _localize(dt) if dt.tzinfo is None else dt
    millis = _finite(value)
    if millis is None:
        return None
    try:
        return datetime.fromtimestamp(millis / 1000, tz=pytz.UTC)
    except (OverflowError, OSError, ValueError):
        return None


def _language(locale: str) -> str:
    return re.split(r"[-_]", locale.strip(), maxsplit=1)[0].lower()


def _english_ordinal_suffix(num: Number) -> str:
    """English ordinal suffix: 11th-13th, otherwise by the last digit."""
    remainder = abs(int(num)) % 100
    if 11 <= remainder <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(remainder % 10, "th")


def format_currency(
    amount: Number,
    currency: Optional[str] = None,
    locale: Optional[str] = None,
    minimum_fraction_digits: int = 2,
    maximum_fraction_digits: int = 2,
    notation: str = "standard",
    compact_display: str = "short",
    *,
    formatter: Optional[LocaleFormatter] = None,
) -> str:
    """
    Format an amount as localized currency.

    Amounts with magnitude of at least one million always use compact
    notation with 1-2 fraction digits, whatever `notation` says.

    Args:
        amount: Amount to format
        currency: ISO 4217 code (default Settings.DEFAULT_CURRENCY)
        locale: Locale identifier, e.g. "en-US" (default Settings.DEFAULT_LOCALE)
        minimum_fraction_digits: Lower bound for decimals below the compact threshold
        maximum_fraction_digits: Upper bound for decimals below the compact threshold
        notation: "standard" or "compact"
        compact_display: "short" or "long" (compact currency is always short in CLDR)
        formatter: Locale backend override (default: get_formatter())

    Returns:
        Localized string, "$0.00" for NaN/Infinity, or "$<amount>" with two
        decimals when the locale backend fails

    Example:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(2_500_000)
        '$2.5M'
    """
    value = _finite(amount)
    if value is None:
        return "$0.00"

    try:
        use_compact = abs(value) >= COMPACT_CURRENCY_THRESHOLD
        return (formatter or get_formatter()).format_currency(
            value,
            currency or Settings.DEFAULT_CURRENCY,
            locale or Settings.DEFAULT_LOCALE,
            1 if use_compact else minimum_fraction_digits,
            2 if use_compact else maximum_fraction_digits,
            notation="compact" if use_compact else notation,
            compact_display=compact_display,
        )
    except Exception as e:
        logger.warning(f"Currency formatting error: {e}")
        return f"${_to_fixed(value, 2)}"


def format_number_with_abbreviation(
    num: Number,
    locale: Optional[str] = None,
    minimum_fraction_digits: int = 0,
    maximum_fraction_digits: int = 2,
    use_grouping: bool = True,
    notation: str = "compact",
    compact_display: str = "short",
    *,
    formatter: Optional[LocaleFormatter] = None,
) -> str:
    """
    Format a number, abbreviating (K, M, B, T) from 1000 on.

    Below 1000 the number is shown in full with the requested fraction
    digits; from 1000 on `notation` is applied with at most one decimal.
    Returns "0" for NaN/Infinity and the plain number on backend failure.
    """
    value = _finite(num)
    if value is None:
        return "0"

    fmt = formatter or get_formatter()
    loc = locale or Settings.DEFAULT_LOCALE
    try:
        if abs(value) < ABBREVIATION_THRESHOLD:
            return fmt.format_number(
                value,
                loc,
                minimum_fraction_digits,
                maximum_fraction_digits,
                use_grouping=use_grouping,
            )

        return fmt.format_number(
            value,
            loc,
            0,
            1,
            use_grouping=use_grouping,
            notation=notation,
            compact_display=compact_display,
        )
    except Exception as e:
        logger.warning(f"Number formatting error: {e}")
        return _plain(value)


def format_percentage(
    value: Number,
    locale: Optional[str] = None,
    minimum_fraction_digits: int = 2,
    maximum_fraction_digits: int = 2,
    show_sign: bool = False,
    *,
    formatter: Optional[LocaleFormatter] = None,
) -> str:
    """
    Format a percentage value (12.5 means 12.5%).

    The sign is always shown when `show_sign` is set, zero included.
    Returns "0.00%" for NaN/Infinity.
    """
    pct = _finite(value)
    if pct is None:
        return "0.00%"

    try:
        return (formatter or get_formatter()).format_percent(
            pct / 100,
            locale or Settings.DEFAULT_LOCALE,
            minimum_fraction_digits,
            maximum_fraction_digits,
            sign_always=show_sign,
        )
    except Exception as e:
        logger.warning(f"Percentage formatting error: {e}")
        return f"{_to_fixed(pct, 2)}%"


def format_decimal(
    num: Number,
    decimal_places: int = 2,
    locale: Optional[str] = None,
    *,
    formatter: Optional[LocaleFormatter] = None,
) -> str:
    """Format with exactly `decimal_places` decimals and no grouping."""
    value = _finite(num)
    if value is None:
        return _to_fixed(0, decimal_places)

    try:
        return (formatter or get_formatter()).format_number(
            value,
            locale or Settings.DEFAULT_LOCALE,
            decimal_places,
            decimal_places,
            use_grouping=False,
        )
    except Exception as e:
        logger.warning(f"Decimal formatting error: {e}")
        return _to_fixed(value, decimal_places)


def format_large_number(num: Number) -> str:
    """
    Abbreviate with T/B/M/K and one decimal; smaller numbers stay as is.

    Example:
        >>> format_large_number(1500)
        '1.5K'
        >>> format_large_number(-2_300_000)
        '-2.3M'
    """
    value = _finite(num)
    if value is None:
        return "0"

    abs_value = abs(value)
    for threshold, symbol in LARGE_NUMBER_UNITS:
        if abs_value >= threshold:
            return f"{_to_fixed(value / threshold, 1)}{symbol}"

    return _plain(value)


def format_duration(seconds: Number) -> str:
    """
    Format a duration in seconds as its largest whole unit.

    Only one unit is shown: 3661 -> "1h", 90 -> "1m". Months are 30 days
    and years 365 days. Negative or non-finite input gives "0s".
    """
    value = _finite(seconds)
    if value is None or value < 0:
        return "0s"

    for unit_seconds, label in DURATION_UNITS:
        if value >= unit_seconds:
            return f"{int(value // unit_seconds)}{label}"

    return "0s"


def format_relative_time(
    date_value: DateLike,
    locale: Optional[str] = None,
    now: Optional[datetime] = None,
    *,
    formatter: Optional[LocaleFormatter] = None,
) -> str:
    """
    Format a date relative to now, e.g. "2 hours ago" or "in 3 days".

    - Accepts datetime, date, ISO-8601 strings ('Z' suffix = UTC) and
      epoch milliseconds. Naive values are interpreted in Settings.SERVER_TZ.
    - The largest unit not exceeding the elapsed time is used, with the
      elapsed count floored.

    Args:
        date_value: Date to describe
        locale: Locale identifier (default Settings.DEFAULT_LOCALE)
        now: Reference time (default: current UTC time)
        formatter: Locale backend override (default: get_formatter())

    Returns:
        Localized relative phrase, "Invalid date" when `date_value` cannot
        be parsed, "Unknown" when formatting fails
    """
    try:
        target = _parse_date(date_value)
        if target is None:
            return "Invalid date"

        reference = _parse_date(now) if now is not None else datetime.now(pytz.UTC)
        diff_seconds = math.floor((reference - target).total_seconds())

        fmt = formatter or get_formatter()
        loc = locale or Settings.DEFAULT_LOCALE
        for unit, unit_seconds in RELATIVE_TIME_UNITS:
            if abs(diff_seconds) >= unit_seconds:
                value = diff_seconds // unit_seconds
                return fmt.format_relative(-value, unit, loc)

        return fmt.format_relative(0, "second", loc)
    except Exception as e:
        logger.warning(f"Relative time formatting error: {e}")
        return "Unknown"


def format_file_size(bytes_: Number) -> str:
    """Format a byte count with 1024-based units: 1023 -> "1023 B", 1536 -> "1.5 KB"."""
    size = _finite(bytes_)
    if size is None or size < 0:
        return "0 B"

    unit_index = 0
    while size >= 1024 and unit_index < len(FILE_SIZE_UNITS) - 1:
        size /= 1024
        unit_index += 1

    return f"{_to_fixed(size, 0 if unit_index == 0 else 1)} {FILE_SIZE_UNITS[unit_index]}"


def truncate_text(text: str, max_length: int, ellipsis: str = "...") -> str:
    """Cut `text` to `max_length` characters, ellipsis included."""
    if not text or len(text) <= max_length:
        return text

    return text[:max_length - len(ellipsis)] + ellipsis


def format_address(address: str, start_chars: int = 6, end_chars: int = 4) -> str:
    """
    Shorten a wallet/contract address to "start...end".

    Example:
        >>> format_address("0x1234567890abcdef")
        '0x1234...cdef'
    """
    if not address or len(address) <= start_chars + end_chars:
        return address

    return f"{address[:start_chars]}...{address[-end_chars:]}"


def format_hash(hash_: str, length: int = 8) -> str:
    """Shorten a transaction hash to its first `length` characters."""
    if not hash_:
        return ""
    if len(hash_) <= length:
        return hash_

    return f"{hash_[:length]}..."


def format_ordinal(
    num: Number,
    locale: Optional[str] = None,
    *,
    formatter: Optional[LocaleFormatter] = None,
) -> str:
    """
    Format a number with its ordinal suffix (1st, 2nd, 3rd, 11th, ...).

    The locale's ordinal plural category picks the suffix; languages
    without a suffix table use the English one. When the locale backend
    fails the English rule is applied directly. Non-finite input gives "0th".
    """
    value = _finite(num)
    if value is None:
        return "0th"

    loc = locale or Settings.DEFAULT_LOCALE
    try:
        category = (formatter or get_formatter()).ordinal_category(value, loc)
        suffixes = ORDINAL_SUFFIXES.get(_language(loc), ORDINAL_SUFFIXES["en"])
        return f"{_plain(value)}{suffixes.get(category, suffixes['other'])}"
    except Exception as e:
        logger.warning(f"Ordinal formatting error: {e}")
        return f"{_plain(value)}{_english_ordinal_suffix(value)}"


def safe_parse_number(value: Any) -> Union[int, float]:
    """
    Extract a number from an arbitrary value without raising.

    - Numbers pass through when finite (booleans are not numbers here).
    - Strings keep only digits, '.' and '-', then the leading numeric part
      is parsed: "$1,234.56" -> 1234.56, "12.5%" -> 12.5.
    - Everything else, and anything unparsable, gives 0.
    """
    if isinstance(value, str):
        match = _NUMERIC_PREFIX_RE.match(_NON_NUMERIC_RE.sub("", value))
        if not match:
            return 0
        parsed = float(match.group())
        return parsed if math.isfinite(parsed) else 0

    number = _finite(value)
    return number if number is not None else 0


def format_number_range(
    min_value: Number,
    max_value: Optional[Number] = None,
    **options: Any,
) -> str:
    """
    Format a numeric range as "min-max", "min+" (unbounded) or a single value.

    Both ends go through format_number_with_abbreviation with `options`.
    """
    def format_num(num: Number) -> str:
        return format_number_with_abbreviation(num, **options)

    if max_value is None or min_value == max_value:
        return format_num(min_value)

    if max_value == math.inf:
        return f"{format_num(min_value)}+"

    return f"{format_num(min_value)}-{format_num(max_value)}"


def format_apy(apy: Optional[Number]) -> str:
    """APY percentage with two decimals, clamped to "<0.01%" and ">1000%"."""
    value = _finite(apy)
    if value is None:
        # Infinities and out-of-range ints still clamp; NaN and non-numbers do not
        if isinstance(apy, Decimal) and apy.is_infinite() or isinstance(apy, float) and math.isinf(apy):
            return ">1000%" if apy > 0 else "<0.01%"
        if isinstance(apy, int) and not isinstance(apy, bool):
            return ">1000%" if apy > 0 else "<0.01%"
        return "N/A"
    if value < 0.01:
        return "<0.01%"
    if value > 1000:
        return ">1000%"

    return f"{_to_fixed(value, 2)}%"


def format_tvl(tvl: Optional[Number]) -> str:
    """
    Format Total Value Locked in dollars with B/M/K units and two decimals.

    Example:
        >>> format_tvl(1_250_000)
        '$1.25M'
        >>> format_tvl(0)
        '$0'
    """
    value = _finite(tvl)
    if value is None:
        return "N/A"
    if value == 0:
        return "$0"

    if value >= 1e9:
        return f"${_to_fixed(value / 1e9, 2)}B"
    if value >= 1e6:
        return f"${_to_fixed(value / 1e6, 2)}M"
    if value >= 1e3:
        return f"${_to_fixed(value / 1e3, 2)}K"

    return f"${_to_fixed(value, 2)}"


def format_datetime(
    dt_str: Optional[str],
    fmt: str = "%d.%m.%Y %H:%M:%S %Z",
    default: str = "unknown date"
) -> str:
    """
    Format ISO datetime string to server timezone for display.

    - Accepts ISO-8601 with or without timezone; also handles 'Z' suffix (UTC).
    - If input is naive (no tzinfo), it is interpreted in server timezone.
    - If input is aware, it is converted to server timezone.
    """
    if not dt_str:
        return default
    try:
        return _localize(_parse_iso(dt_str)).strftime(fmt)
    except Exception as e:
        logger.debug(f"Failed to parse/format datetime '{dt_str}': {e}")
        return default
