# tests/test_encoding.py
import base64

import pytest

from firebase_token.generator.encoding import b64url, encode_text, to_utf8
from firebase_token.generator.errors import EncodingFailure, TokenGenerationError


def test_header_encoding_matches_known_value():
    assert encode_text('{"alg":"HS256"}') == "eyJhbGciOiJIUzI1NiJ9"


@pytest.mark.parametrize("raw", [b"", b"a", b"ab", b"abc", b"abcd", bytes(range(256))])
def test_b64url_strips_padding_and_is_reversible(raw):
    encoded = b64url(raw)
    assert "=" not in encoded
    assert base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)) == raw


def test_b64url_uses_url_safe_alphabet():
    # 0xfb 0xff encodes to "+/8=" in the standard alphabet
    assert b64url(b"\xfb\xff") == "-_8"


def test_non_ascii_text_is_utf8_encoded():
    assert to_utf8("é") == b"\xc3\xa9"
    assert encode_text("é") == b64url(b"\xc3\xa9")


def test_lone_surrogate_raises_encoding_failure():
    with pytest.raises(EncodingFailure) as exc_info:
        encode_text("bad \ud800 text")
    assert isinstance(exc_info.value, TokenGenerationError)
    assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)
