# firebase_token/generator/claims.py
"""
Minimal JSON rendering of Firebase claims.

Only flat maps of scalars are supported. This keeps the generator free of a
general JSON library; nested objects and arrays are rejected.
"""
import math
import re
from collections.abc import Mapping
from typing import Union

from firebase_token.generator.errors import UnsupportedType

ScalarValue = Union[str, bool, int, float, None]

_ESCAPE_RE = re.compile(r'[\x00-\x1f"\\]')
_SHORT_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _escape_char(match: re.Match) -> str:
    ch = match.group(0)
    return _SHORT_ESCAPES.get(ch) or f"\\u{ord(ch):04x}"


def quote(text: str) -> str:
    return '"' + _ESCAPE_RE.sub(_escape_char, text) + '"'


def encode_value(value: ScalarValue) -> str:
    """
    Convert a scalar to its JSON literal.

    bool is tested before int since it is an int subclass.
    """
    if value is None:
        return "null"
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        # the legacy generator wrote NaN/Infinity here, which no JSON parser accepts
        if not math.isfinite(value):
            raise UnsupportedType(value, "non-finite float")
        return str(value)
    raise UnsupportedType(value)


def map_to_json(entries: Mapping[str, ScalarValue]) -> str:
    """Render entries as comma-joined "key":value pairs, without braces."""
    parts = []
    for key, value in entries.items():
        if not isinstance(key, str):
            raise UnsupportedType(key, "claim names must be str")
        parts.append(f"{quote(key)}:{encode_value(value)}")
    return ",".join(parts)


def build_claims(
    *,
    version: int,
    issued_at_ms: int,
    options: Mapping[str, ScalarValue],
    data: Mapping[str, ScalarValue],
) -> str:
    # legacy verifiers expect the space after "v" and "iat"
    claims = [f'{{"v": {version},', f'"iat": {issued_at_ms},']
    if options:
        claims.append(map_to_json(options))
        claims.append(",")
    claims.append('"d":{')
    claims.append(map_to_json(data))
    claims.append("}}")
    return "".join(claims)
