import builtins
import getpass

import pytest

from bfcipher.config import ConfigurationError, Mode
from bfcipher.interface import hex_to_bytes, bytes_to_hex, parse_key, parse_iv, main
from bfcipher.interface.command_line import (
    EXIT_OK, EXIT_IO_ERROR, EXIT_CONFIG_ERROR, build_parser, collect_settings,
)
from bfcipher.block_modes import encrypt

KEY_HEX = "0123456789abcdeff0e1d2c3b4a59687"
IV_HEX = "fedcba9876543210"


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    monkeypatch.delenv('BFCIPHER_MODE', raising=False)
    monkeypatch.delenv('BFCIPHER_LOG_LEVEL', raising=False)


class Answers:
    """Replays canned answers to interactive prompts."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.questions = []

    def __call__(self, question=''):
        self.questions.append(question)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


# ---------------------------------------------------------------------------
# Hex adapter
# ---------------------------------------------------------------------------

def test_hex_to_bytes_mixed_case():
    assert hex_to_bytes("Af901C") == bytes([0xAF, 0x90, 0x1C])


def test_hex_to_bytes_drops_unpaired_digit():
    assert hex_to_bytes("Af901Ce") == bytes([0xAF, 0x90, 0x1C])
    assert hex_to_bytes("f") == b""


def test_hex_to_bytes_strips_whitespace():
    assert hex_to_bytes("  00ff\n") == b"\x00\xff"


@pytest.mark.parametrize("text", ["xyz0", "00 11", "0x00"])
def test_hex_to_bytes_rejects_non_hex(text):
    with pytest.raises(ValueError):
        hex_to_bytes(text)


def test_bytes_to_hex():
    assert bytes_to_hex(b"\xaf\x90\x1c") == "af901c"


def test_parse_key():
    assert parse_key(KEY_HEX) == bytes.fromhex(KEY_HEX)
    assert parse_key(" 7f ") == b"\x7f"


@pytest.mark.parametrize("text", ["", "a", "zz", "00" * 73])
def test_parse_key_rejects(text):
    with pytest.raises(ConfigurationError):
        parse_key(text)


def test_parse_iv():
    assert parse_iv(IV_HEX.upper()) == bytes.fromhex(IV_HEX)


@pytest.mark.parametrize("text", [None, "", "00" * 7, "00" * 9, "gg" * 8])
def test_parse_iv_rejects(text):
    with pytest.raises(ConfigurationError):
        parse_iv(text)


# ---------------------------------------------------------------------------
# Settings collection
# ---------------------------------------------------------------------------

def _args(*extra):
    return build_parser().parse_args(['-e', 'in.bin', 'out.bin', *extra])


def test_collect_settings_from_arguments():
    args = _args('-m', 'CBC', '-k', KEY_HEX, '-i', IV_HEX)
    settings = collect_settings(args, {'mode': 'cbc'}, read=Answers(), read_secret=Answers())
    assert settings.mode is Mode.CBC
    assert settings.key == bytes.fromhex(KEY_HEX)
    assert settings.iv == bytes.fromhex(IV_HEX)


def test_collect_settings_prompts_for_missing_values():
    read = Answers('', IV_HEX)
    read_secret = Answers(KEY_HEX)
    settings = collect_settings(_args(), {'mode': 'cfb'}, read=read, read_secret=read_secret)

    assert settings.mode is Mode.CFB
    assert settings.iv == bytes.fromhex(IV_HEX)
    assert settings.key == bytes.fromhex(KEY_HEX)
    assert read.questions == ["Enter mode (ecb, cbc, cfb) [cfb]: ", "Enter iv (8 bytes, hex): "]
    assert read_secret.questions == ["Enter password (1-72 bytes, hex): "]


def test_collect_settings_repeats_invalid_answers(capsys):
    read = Answers('ofb', 'ecb')
    read_secret = Answers('not hex', '', KEY_HEX)
    settings = collect_settings(_args(), {'mode': 'cbc'}, read=read, read_secret=read_secret)

    assert settings.mode is Mode.ECB
    assert settings.iv is None
    assert len(read_secret.questions) == 3
    assert capsys.readouterr().out.count("Incorrect input") == 3


def test_collect_settings_ecb_skips_iv_prompt():
    read = Answers()
    settings = collect_settings(_args('-m', 'ecb', '-k', KEY_HEX), {'mode': 'cbc'},
                                read=read, read_secret=Answers())
    assert settings.iv is None
    assert read.questions == []


def test_collect_settings_end_of_input():
    with pytest.raises(ConfigurationError):
        collect_settings(_args('-m', 'ecb'), {'mode': 'cbc'},
                         read=Answers(), read_secret=Answers())


def test_collect_settings_bad_argument_is_not_prompted_again():
    with pytest.raises(ConfigurationError):
        collect_settings(_args('-m', 'cbc', '-k', KEY_HEX, '-i', 'abcd'), {'mode': 'cbc'},
                         read=Answers(), read_secret=Answers())


# ---------------------------------------------------------------------------
# Command line entry point
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("mode", ['ecb', 'cbc', 'cfb'])
def test_main_roundtrip(tmp_path, capsys, mode):
    plain = tmp_path / "plain.bin"
    cipher = tmp_path / "cipher.bin"
    restored = tmp_path / "restored.bin"
    plain.write_bytes(b"Attack at dawn, bring the sandwiches." * 3)

    options = ['-m', mode, '-k', KEY_HEX]
    if mode != 'ecb':
        options += ['-i', IV_HEX]

    assert main(['-e', str(plain), str(cipher), *options]) == EXIT_OK
    assert main(['-d', str(cipher), str(restored), *options]) == EXIT_OK
    assert restored.read_bytes() == plain.read_bytes()
    assert capsys.readouterr().out.count("Done.") == 2


def test_main_output_matches_library(tmp_path):
    plain = tmp_path / "plain.bin"
    cipher = tmp_path / "cipher.bin"
    plain.write_bytes(b"7654321 Now is the time for \x00")

    assert main(['-e', str(plain), str(cipher), '-m', 'cfb', '-k', KEY_HEX, '-i', IV_HEX]) == EXIT_OK
    assert cipher.read_bytes() == bytes.fromhex(
        "E73214A2822139CAF26ECF6D2EB9E76E3DA3DE04D1517200519D57A6C3")


def test_main_prompts_interactively(tmp_path, monkeypatch):
    plain = tmp_path / "plain.bin"
    cipher = tmp_path / "cipher.bin"
    plain.write_bytes(b"prompted")

    monkeypatch.setattr(builtins, 'input', Answers('cbc', IV_HEX))
    monkeypatch.setattr(getpass, 'getpass', Answers(KEY_HEX))

    assert main(['-e', str(plain), str(cipher)]) == EXIT_OK
    assert cipher.read_bytes() == encrypt(
        b"prompted", bytes.fromhex(KEY_HEX), 'cbc', bytes.fromhex(IV_HEX))


def test_main_uses_environment_default_mode(tmp_path, monkeypatch):
    plain = tmp_path / "plain.bin"
    cipher = tmp_path / "cipher.bin"
    plain.write_bytes(b"environment")

    monkeypatch.setenv('BFCIPHER_MODE', 'ecb')
    monkeypatch.setattr(builtins, 'input', Answers(''))

    assert main(['-e', str(plain), str(cipher), '-k', KEY_HEX]) == EXIT_OK
    assert cipher.read_bytes() == encrypt(b"environment", bytes.fromhex(KEY_HEX), 'ecb')


def test_main_bad_key_creates_no_output(tmp_path, capsys):
    plain = tmp_path / "plain.bin"
    cipher = tmp_path / "cipher.bin"
    plain.write_bytes(b"data")

    assert main(['-e', str(plain), str(cipher), '-m', 'ecb', '-k', '00' * 73]) == EXIT_CONFIG_ERROR
    assert not cipher.exists()
    assert "Error" in capsys.readouterr().err


def test_main_bad_environment_is_config_error(tmp_path, monkeypatch):
    monkeypatch.setenv('BFCIPHER_MODE', 'rot13')
    assert main(['-e', str(tmp_path / "a"), str(tmp_path / "b"), '-m', 'ecb', '-k', KEY_HEX]) \
        == EXIT_CONFIG_ERROR


def test_main_missing_input_is_io_error(tmp_path, capsys):
    result = main(['-e', str(tmp_path / "missing.bin"), str(tmp_path / "out.bin"),
                   '-m', 'ecb', '-k', KEY_HEX])
    assert result == EXIT_IO_ERROR
    assert "Error" in capsys.readouterr().err


def test_invalid_mode_argument_exits():
    with pytest.raises(SystemExit):
        main(['-e', 'in.bin', 'out.bin', '-m', 'ofb'])


def test_direction_is_required():
    with pytest.raises(SystemExit):
        main(['in.bin', 'out.bin'])
