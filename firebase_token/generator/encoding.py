# firebase_token/generator/encoding.py
import base64

from firebase_token.generator.errors import EncodingFailure

UTF8 = "utf-8"


def to_utf8(text: str) -> bytes:
    try:
        return text.encode(UTF8)
    except UnicodeEncodeError as e:
        # lone surrogates are the only way a str fails here
        raise EncodingFailure(f"Cannot encode text as UTF-8: {e.reason}") from e


def b64url(data: bytes) -> str:
    """Base64URL (RFC 4648 section 5) without '=' padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def encode_text(text: str) -> str:
    """Encode a JSON string like {"some":"data"} as Base64URL."""
    return b64url(to_utf8(text))
