"""
Settings and Configuration Errors

This module holds the library defaults, the environment overrides used by
the command line front end, and the validation of caller-supplied cipher
parameters (mode name, key, initialization vector).
"""

import os
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

# Cipher geometry shared by every layer
BLOCK_SIZE = 8          # Bytes per block
MIN_KEY_LENGTH = 1      # Shortest accepted key in bytes
MAX_KEY_LENGTH = 72     # Longest accepted key in bytes

# Library defaults, overridable through the environment
DEFAULT_SETTINGS = {
    'mode': 'cbc',          # Chaining mode used when none is given
    'log_level': 'WARNING', # Root log level for the command line
}

ENV_PREFIX = 'BFCIPHER_'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ConfigurationError(ValueError):
    """Raised when a key, IV or mode is rejected before any data is processed."""


class Mode(Enum):
    """Supported modes of operation."""
    ECB = 'ecb'
    CBC = 'cbc'
    CFB = 'cfb'

    @classmethod
    def parse(cls, name: Union[str, 'Mode']) -> 'Mode':
        """
        Look up a mode by name, ignoring case and surrounding whitespace.

        Raises:
            ConfigurationError: If the name is not a supported mode
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown mode '{name}', expected one of {', '.join(VALID_MODES)}") from None

    @property
    def requires_iv(self) -> bool:
        return self is not Mode.ECB


VALID_MODES = tuple(mode.value for mode in Mode)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Merge the library defaults with ``BFCIPHER_*`` environment variables.

    Args:
        environ: Mapping to read overrides from (default: ``os.environ``)

    Returns:
        A new settings dictionary

    Raises:
        ConfigurationError: If an override names an unknown mode or log level
    """
    if environ is None:
        environ = os.environ

    settings = dict(DEFAULT_SETTINGS)
    for name in settings:
        value = environ.get(ENV_PREFIX + name.upper())
        if value is not None and value.strip():
            settings[name] = value.strip()

    settings['mode'] = Mode.parse(settings['mode']).value

    settings['log_level'] = settings['log_level'].upper()
    if not isinstance(logging.getLevelName(settings['log_level']), int):
        raise ConfigurationError(f"Unknown log level '{settings['log_level']}'")

    return settings


def validate_key(key: bytes) -> bytes:
    """
    Check that a key is a byte string of 1 to 72 bytes.

    Args:
        key: Candidate key material

    Returns:
        The key as immutable bytes

    Raises:
        ConfigurationError: If the key has the wrong type or length
    """
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise ConfigurationError(f"Key must be bytes, got {type(key).__name__}")
    key = bytes(key)
    if not MIN_KEY_LENGTH <= len(key) <= MAX_KEY_LENGTH:
        raise ConfigurationError(
            f"Key must be between {MIN_KEY_LENGTH} and {MAX_KEY_LENGTH} bytes, got {len(key)}")
    return key


def validate_iv(iv: bytes) -> bytes:
    """
    Check that an initialization vector is exactly one block long.

    Args:
        iv: Candidate initialization vector

    Returns:
        The IV as immutable bytes

    Raises:
        ConfigurationError: If the IV is missing or has the wrong length
    """
    if iv is None:
        raise ConfigurationError("This mode requires an initialization vector")
    if not isinstance(iv, (bytes, bytearray, memoryview)):
        raise ConfigurationError(f"IV must be bytes, got {type(iv).__name__}")
    iv = bytes(iv)
    if len(iv) != BLOCK_SIZE:
        raise ConfigurationError(f"IV must be exactly {BLOCK_SIZE} bytes, got {len(iv)}")
    return iv


@dataclass
class CipherSettings:
    """Validated parameters for one encrypt or decrypt run."""
    mode: Mode
    key: bytes
    iv: Optional[bytes] = None

    def validate(self) -> 'CipherSettings':
        """Normalize and check every field, raising ConfigurationError on the first problem."""
        self.mode = Mode.parse(self.mode)
        self.key = validate_key(self.key)
        if self.mode.requires_iv:
            self.iv = validate_iv(self.iv)
        else:
            self.iv = None
        return self


def configure_logging(level: str = DEFAULT_SETTINGS['log_level']) -> None:
    """Install the root handler used by the command line entry point."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING),
                        format=LOG_FORMAT)
