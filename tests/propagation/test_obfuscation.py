import base64

import pytest

from cattrace.errors import DecodeError
from cattrace.propagation.obfuscation import Obfuscator


@pytest.mark.parametrize(
    "plaintext",
    [
        b"",
        b"x",
        b'{"NewRelicID":"1#1"}',
        bytes(range(256)),
        "café ☃".encode("utf-8"),
    ],
)
@pytest.mark.parametrize("key", ["abc", "a much longer key than most payloads", None, ""])
def test_deobfuscate_reverses_obfuscate(key, plaintext):
    obfuscator = Obfuscator(key)
    assert obfuscator.deobfuscate(obfuscator.obfuscate(plaintext)) == plaintext


def test_obfuscate_xors_with_repeating_key():
    # each byte XOR-ed with itself
    assert Obfuscator("abc").obfuscate(b"abcabc") == "AAAAAAAA"
    assert Obfuscator("abc").deobfuscate("AAAAAAAA") == b"abcabc"


def test_obfuscate_accepts_text():
    obfuscator = Obfuscator("abc")
    assert obfuscator.obfuscate("abc") == obfuscator.obfuscate(b"abc") == "AAAA"


def test_obfuscate_empty_input():
    assert Obfuscator("abc").obfuscate(b"") == ""
    assert Obfuscator("abc").deobfuscate("") == b""


@pytest.mark.parametrize("key", [None, ""])
def test_no_key_only_encodes(key):
    obfuscator = Obfuscator(key)
    assert obfuscator.obfuscate(b"hello") == "aGVsbG8="
    assert obfuscator.obfuscate(b"hello") == base64.b64encode(b"hello").decode("ascii")
    assert obfuscator.deobfuscate("aGVsbG8=") == b"hello"


def test_obfuscated_value_is_header_safe():
    token = Obfuscator("abc").obfuscate(bytes(range(256)) * 4)
    assert "\n" not in token
    assert token.isascii()


def test_different_keys_produce_different_tokens():
    assert Obfuscator("abc").obfuscate(b"payload") != Obfuscator("xyz").obfuscate(b"payload")


@pytest.mark.parametrize(
    "token",
    ["not base64!", "abc", "AAAA====", "AAAA=", "AAA==", "AA=A", "AA===", b"AAAA====", "éééé", "AA\nAA", "AA-_"],
)
def test_deobfuscate_malformed_token(token):
    with pytest.raises(DecodeError):
        Obfuscator("abc").deobfuscate(token)


def test_decode_error_is_value_error():
    with pytest.raises(ValueError):
        Obfuscator(None).deobfuscate("%%%")


@pytest.mark.parametrize("token,expected", [("AA==", b"\x00"), ("AAA=", b"\x00\x00"), (b"AAAA", b"\x00\x00\x00")])
def test_deobfuscate_accepts_padded_tokens(token, expected):
    assert Obfuscator(None).deobfuscate(token) == expected
