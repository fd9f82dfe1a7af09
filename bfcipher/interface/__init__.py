"""
Interface Package

This package adapts user input to the cipher: hex parsing of keys and IVs
and the command line front end.
"""

from .hex_codec import hex_to_bytes, bytes_to_hex, parse_key, parse_iv
from .command_line import main

__all__ = ['hex_to_bytes', 'bytes_to_hex', 'parse_key', 'parse_iv', 'main']
