"""
Configuration package.

This package provides formatting defaults (locale, currency, timezone)
and logging options via Settings class loaded from environment variables.
"""

from .settings import Settings, env_bool

__all__ = ['Settings', 'env_bool']
