"""
Utility functions package.

Exposes locale-aware and fixed-format display helpers, plus the locale
backend hooks (get_formatter / set_formatter).
"""

import logging

from .formatters import (
    format_address,
    format_apy,
    format_currency,
    format_datetime,
    format_decimal,
    format_duration,
    format_file_size,
    format_hash,
    format_large_number,
    format_number_range,
    format_number_with_abbreviation,
    format_ordinal,
    format_percentage,
    format_relative_time,
    format_tvl,
    safe_parse_number,
    truncate_text,
)
from .locale_formatter import BabelFormatter, LocaleFormatter, get_formatter, set_formatter

# Fallback warnings stay silent until the host application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'BabelFormatter',
    'LocaleFormatter',
    'format_address',
    'format_apy',
    'format_currency',
    'format_datetime',
    'format_decimal',
    'format_duration',
    'format_file_size',
    'format_hash',
    'format_large_number',
    'format_number_range',
    'format_number_with_abbreviation',
    'format_ordinal',
    'format_percentage',
    'format_relative_time',
    'format_tvl',
    'get_formatter',
    'safe_parse_number',
    'set_formatter',
    'truncate_text',
]
