"""
Command Line Interface

Encrypts or decrypts one file into another:

    bfcipher -e plain.bin cipher.bin --mode cbc --key 0123456789abcdef --iv fedcba9876543210

Any of --mode, --key and --iv that is not given on the command line is
asked for interactively, repeating the question until the answer is valid.
"""

import argparse
import getpass
import logging
import sys
from typing import Callable, List, Optional, TypeVar

from ..block_modes.stream_modes import encrypt_stream, decrypt_stream
from ..config.settings import (
    ConfigurationError, CipherSettings, Mode, VALID_MODES, configure_logging, load_settings,
)
from .hex_codec import parse_iv, parse_key

logger = logging.getLogger(__name__)

T = TypeVar('T')

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='bfcipher',
        description='Encrypt or decrypt a file with Blowfish in ECB, CBC or CFB mode.')
    direction = parser.add_mutually_exclusive_group(required=True)
    direction.add_argument('-e', '--encrypt', action='store_true', help='encrypt INPUT into OUTPUT')
    direction.add_argument('-d', '--decrypt', action='store_true', help='decrypt INPUT into OUTPUT')
    parser.add_argument('input', metavar='INPUT', help='file to read')
    parser.add_argument('output', metavar='OUTPUT', help='file to write (overwritten)')
    parser.add_argument('-m', '--mode', type=str.lower, choices=VALID_MODES,
                        help='mode of operation (prompted for when omitted)')
    parser.add_argument('-k', '--key', help='key as 2 to 144 hex digits (prompted for when omitted)')
    parser.add_argument('-i', '--iv', help='IV as 16 hex digits, CBC and CFB only')
    parser.add_argument('--log-level', help='logging level (default: BFCIPHER_LOG_LEVEL or WARNING)')
    return parser


def _ask(question: str, parse: Callable[[str], T], read: Callable[[str], str]) -> T:
    # Keep asking until the answer parses; end of input aborts
    while True:
        try:
            answer = read(question)
        except EOFError:
            raise ConfigurationError(f"No answer for: {question.strip()}") from None
        try:
            return parse(answer)
        except ConfigurationError as e:
            print(f"Incorrect input: {e}")


def collect_settings(args: argparse.Namespace, defaults: dict,
                     read: Optional[Callable[[str], str]] = None,
                     read_secret: Optional[Callable[[str], str]] = None) -> CipherSettings:
    """
    Build validated settings from the arguments, prompting for anything missing.

    Raises:
        ConfigurationError: If a value given on the command line is invalid
            or an interactive answer cannot be read
    """
    read = read or input
    read_secret = read_secret or getpass.getpass

    if args.mode:
        mode = Mode.parse(args.mode)
    else:
        mode = _ask(f"Enter mode ({', '.join(VALID_MODES)}) [{defaults['mode']}]: ",
                    lambda text: Mode.parse(text.strip() or defaults['mode']), read)

    iv = None
    if mode.requires_iv:
        if args.iv is not None:
            iv = parse_iv(args.iv)
        else:
            iv = _ask("Enter iv (8 bytes, hex): ", parse_iv, read)
    elif args.iv is not None:
        logger.warning("ECB mode does not use an IV; ignoring --iv")

    if args.key is not None:
        key = parse_key(args.key)
    else:
        key = _ask("Enter password (1-72 bytes, hex): ", parse_key, read_secret)

    return CipherSettings(mode=mode, key=key, iv=iv).validate()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line tool.

    Returns:
        0 on success, 1 on an I/O error, 2 on a configuration error
    """
    args = build_parser().parse_args(argv)

    try:
        defaults = load_settings()
        configure_logging(args.log_level or defaults['log_level'])
        settings = collect_settings(args, defaults)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    run = encrypt_stream if args.encrypt else decrypt_stream
    try:
        with open(args.input, 'rb') as source, open(args.output, 'wb') as sink:
            run(settings.mode, source, sink, settings.key, settings.iv)
    except OSError as e:
        logger.error("I/O failure: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    print("Done.")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
