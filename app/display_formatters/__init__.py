"""
Display formatters.

Locale-aware currency, number, time and text helpers (utils), their
configuration (config) and logging setup for host applications (core).
"""
