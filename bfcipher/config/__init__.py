"""
Configuration Package

This package holds the library defaults, environment overrides and the
validation of caller-supplied keys, IVs and mode names.
"""

from .settings import (
    ConfigurationError, CipherSettings, Mode, DEFAULT_SETTINGS, VALID_MODES,
    load_settings, validate_key, validate_iv, configure_logging,
)

__all__ = [
    'ConfigurationError', 'CipherSettings', 'Mode', 'DEFAULT_SETTINGS', 'VALID_MODES',
    'load_settings', 'validate_key', 'validate_iv', 'configure_logging',
]
