"""Percent-encoding primitives shared by the DID and DID URL codecs.

Implements the octet encoding of RFC 3986 section 2.1. Producers always emit
upper-case hexadecimal digits, while consumers accept either case.
"""

import string
from typing import AbstractSet, Optional

HEX_DIGITS = "0123456789ABCDEF"

_HEX_VALUES = {c: i for i, c in enumerate(HEX_DIGITS)}
_HEX_VALUES.update({c.lower(): i for c, i in list(_HEX_VALUES.items()) if c.isalpha()})

# Method-specific identifier characters, excluding the escape and separator.
IDCHARS = frozenset(string.ascii_letters + string.digits + ".-_")

UNRESERVED = IDCHARS | frozenset("~")
SUB_DELIMS = frozenset("!$&'()*+,;=")

# RFC 3986 pchar, without pct-encoded.
PCHARS = UNRESERVED | SUB_DELIMS | frozenset(":@")

# Path segment content which never needs an escape.
SEGMENT_SAFE = PCHARS

# Query and fragment content which never needs an escape. The separators of
# name/value pairs are left out so that they can be carried as data.
QUERY_SAFE = (PCHARS | frozenset("/?")) - frozenset("&=+")
FRAGMENT_SAFE = PCHARS | frozenset("/?")


def decode_hex_pair(s: str, i: int) -> Optional[int]:
    """Decode the two hexadecimal digits at s[i:i+2].

    Args:
        s: Escaped text
        i: Offset of the first digit, i.e., one past the '%'

    Returns:
        The octet value, or None when the digits are absent or not hexadecimal
    """
    if i < 0 or i + 2 > len(s):
        return None
    hi = _HEX_VALUES.get(s[i])
    lo = _HEX_VALUES.get(s[i + 1])
    if hi is None or lo is None:
        return None
    return hi << 4 | lo


def encode(octet: int) -> str:
    """Percent-encode a single octet with upper-case digits."""
    return "%" + HEX_DIGITS[octet >> 4] + HEX_DIGITS[octet & 15]


def escape(data: bytes, safe: AbstractSet[str]) -> str:
    """Percent-encode every octet of data which is not in safe.

    The common case of nothing to escape returns without a builder.
    """
    i = 0
    for i, octet in enumerate(data):
        if chr(octet) not in safe:
            break
    else:
        return data.decode("ascii")

    parts = [data[:i].decode("ascii")]
    for octet in data[i:]:
        c = chr(octet)
        if c in safe:
            parts.append(c)
        else:
            parts.append(encode(octet))
    return "".join(parts)


def unescape(s: str) -> bytes:
    """Resolve percent-encodings on a best-effort basis.

    Malformed and incomplete percent-encodings pass as is. Characters outside
    of ASCII are taken in their UTF-8 encoding.
    """
    i = s.find("%")
    if i < 0:
        return s.encode("utf-8")

    buf = bytearray(s[:i].encode("utf-8"))
    while i < len(s):
        c = s[i]
        if c == "%":
            octet = decode_hex_pair(s, i + 1)
            if octet is not None:
                buf.append(octet)
                i += 3
                continue
        buf += c.encode("utf-8")
        i += 1
    return bytes(buf)


def is_valid_escape(s: str, i: int) -> bool:
    """Whether s[i] starts a complete percent-encoding."""
    return s[i] == "%" and decode_hex_pair(s, i + 1) is not None
