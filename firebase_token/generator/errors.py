# firebase_token/generator/errors.py


class TokenGenerationError(Exception):
    """Base class for every failure raised while building a token."""


class UnsupportedType(TokenGenerationError, TypeError):
    """A claim value is not a str, bool, int, float or None."""

    def __init__(self, value: object, reason: str | None = None) -> None:
        self.value_type = type(value)
        detail = f"Unsupported type: {self.value_type!r}"
        if reason:
            detail = f"{detail} ({reason})"
        super().__init__(detail)


class InvalidKey(TokenGenerationError, ValueError):
    """The secret cannot be used as an HMAC-SHA256 key."""


class EncodingFailure(TokenGenerationError):
    """Text could not be encoded as UTF-8."""
