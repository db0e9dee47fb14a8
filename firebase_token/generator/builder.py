# firebase_token/generator/builder.py
"""
Firebase-specific HMAC signing of a JWT-like token.

Example usage:
    generator = FirebaseTokenGenerator(firebase_secret)
    generator.set_option("admin", True)
    generator.set_data("uid", "u1")
    token = generator.create_token()

The token is signed but not encrypted: anyone can read the claims by
decoding the middle segment.
"""
import hashlib
import hmac
import logging
import threading
import time
from collections.abc import Callable

from firebase_token.generator.claims import ScalarValue, build_claims
from firebase_token.generator.encoding import b64url, encode_text, to_utf8
from firebase_token.generator.errors import EncodingFailure, InvalidKey

log = logging.getLogger(__name__)

HEADER = '{"alg":"HS256"}'
TOKEN_VERSION = 0


class FirebaseTokenGenerator:
    version = TOKEN_VERSION
    header = HEADER

    def __init__(self, secret: str | bytes, clock: Callable[[], float] = time.time) -> None:
        self._secret = secret
        self._clock = clock
        self._lock = threading.Lock()
        self.data: dict[str, ScalarValue] = {}
        self.options: dict[str, ScalarValue] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(data={len(self.data)} keys, options={sorted(self.options)})"

    def set_data(self, name: str, value: ScalarValue) -> None:
        """Set a value under the "d" claim. Types are checked when the token is built."""
        with self._lock:
            self.data[name] = value

    def set_option(self, name: str, value: ScalarValue) -> None:
        """
        Set a top-level Firebase option, e.g.

         - admin (bool): bypass all Security Rules for this client
         - debug (bool): enable debug output from Security Rules
         - expires / notBefore (number): validity window, epoch seconds
        """
        with self._lock:
            self.options[name] = value

    def get_claims_string(self) -> str:
        with self._lock:
            data = dict(self.data)
            options = dict(self.options)
        # milliseconds, not the seconds JWT defines: Firebase expects ms here
        issued_at_ms = int(self._clock() * 1000)
        claims = build_claims(
            version=self.version,
            issued_at_ms=issued_at_ms,
            options=options,
            data=data,
        )
        log.debug("Claims: %s", claims)
        return claims

    def _key(self) -> bytes:
        if isinstance(self._secret, bytes):
            key = self._secret
        elif isinstance(self._secret, str):
            try:
                key = to_utf8(self._secret)
            except EncodingFailure as e:
                raise InvalidKey("Invalid HMAC key: secret is not valid UTF-8") from e
        else:
            raise InvalidKey(f"Invalid HMAC key: expected str or bytes, got {type(self._secret).__name__}")
        if not key:
            raise InvalidKey("Invalid HMAC key: secret is empty")
        return key

    def sign(self, signable_content: str) -> bytes:
        """Return the raw 32-byte HMAC-SHA256 digest of the content."""
        return hmac.new(self._key(), to_utf8(signable_content), hashlib.sha256).digest()

    def create_token(self) -> str:
        signing_input = f"{encode_text(self.header)}.{encode_text(self.get_claims_string())}"
        signature = b64url(self.sign(signing_input))
        return f"{signing_input}.{signature}"
