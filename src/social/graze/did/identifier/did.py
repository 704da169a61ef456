"""Decentralized Identifier syntax.

Parses, serializes and compares identifiers of the form
did:<method>:<method-specific-id>, as defined by W3C's DID Core
(https://www.w3.org/TR/did-core/). Comparison follows the "Normalization and
Comparison" rules of RFC 3986, section 6.
"""

from dataclasses import dataclass
import string
from typing import Tuple

from social.graze.did.identifier.errors import DIDSyntaxError, NotADIDError
from social.graze.did.identifier.escape import (
    IDCHARS,
    decode_hex_pair,
    escape,
)

PREFIX = "did:"

METHOD_CHARS = frozenset(string.ascii_lowercase + string.digits)


@dataclass(frozen=True)
class DID:
    """
    A parsed DID.

    The zero value DID() is the absent identifier of relative DID URLs. It
    never compares equal to anything.

    Attributes:
        method: Name of the applicable DID method, [a-z0-9]+
        spec_id: Method-specific identifier with any percent-encoding
            resolved. The content need not be valid text.
    """

    method: str = ""
    spec_id: bytes = b""

    @property
    def is_absent(self) -> bool:
        return not self.method or not self.spec_id

    def __str__(self) -> str:
        """Canonical form. Colons in the method-specific identifier are escaped."""
        if self.is_absent:
            return ""
        return PREFIX + self.method + ":" + escape(self.spec_id, IDCHARS)

    def equal(self, other: "DID") -> bool:
        """Whether other identifies the same subject."""
        if not isinstance(other, DID) or self.is_absent or other.is_absent:
            return False
        return self.method == other.method and self.spec_id == other.spec_id

    def equal_string(self, s: str) -> bool:
        """Whether DID s identifies the same subject, without parsing s first.

        Percent-encodings in s resolve on the fly, with hexadecimal digits in
        either case. Malformed input compares unequal.
        """
        if self.is_absent or not s.startswith(PREFIX):
            return False

        i = len(PREFIX)
        end = i + len(self.method)
        if s[i:end] != self.method or s[end : end + 1] != ":":
            return False
        i = end + 1

        for octet in self.spec_id:
            if i >= len(s):
                return False
            c = s[i]
            if c == "%":
                if decode_hex_pair(s, i + 1) != octet:
                    return False
                i += 3
            elif c in IDCHARS or c == ":":
                if ord(c) != octet:
                    return False
                i += 1
            else:
                return False

        # a colon can not terminate the method-specific identifier
        return i == len(s) and s[-1] != ":"


def parse_did(s: str) -> DID:
    """Parse s in full as a DID.

    Use parse_url for input with a path, query and/or fragment.

    Raises:
        DIDSyntaxError: when s does not conform to the DID syntax
    """
    method = parse_method(s)
    spec_id, end = parse_spec_id(s, len(PREFIX) + len(method) + 1)
    if end < len(s) or not spec_id:
        raise DIDSyntaxError(s, end)
    return DID(method=method, spec_id=spec_id)


def parse_method(s: str) -> str:
    """Read the scheme and the method name, including its ':' terminator."""
    for i, c in enumerate(PREFIX):
        if i >= len(s):
            raise DIDSyntaxError(s, i)
        if s[i] != c:
            raise DIDSyntaxError(s, i, NotADIDError())

    for i in range(len(PREFIX), len(s)):
        c = s[i]
        if c in METHOD_CHARS:
            continue
        if c == ":":
            # one or more characters required
            if i == len(PREFIX):
                raise DIDSyntaxError(s, i)
            return s[len(PREFIX) : i]
        raise DIDSyntaxError(s, i)

    # separator not found
    raise DIDSyntaxError(s, len(s))


def parse_spec_id(s: str, offset: int) -> Tuple[bytes, int]:
    """Read the method-specific identifier from s[offset:].

    Returns:
        The identifier with percent-encodings resolved, and the index of the
        first byte past the identifier

    Raises:
        DIDSyntaxError: on a malformed percent-encoding, or on a colon which
            terminates the identifier
    """
    i = offset
    while i < len(s):
        c = s[i]
        if c in IDCHARS:
            i += 1
        elif c == ":":
            _check_colon(s, i)
            i += 1
        elif c == "%":
            break
        else:
            return s[offset:i].encode("ascii"), i
    else:
        return s[offset:].encode("ascii"), len(s)

    # percent-encoding present; every 3-byte escape produces 1 byte
    buf = bytearray(s[offset:i].encode("ascii"))
    while i < len(s):
        c = s[i]
        if c in IDCHARS:
            buf.append(ord(c))
            i += 1
        elif c == ":":
            _check_colon(s, i)
            buf.append(ord(c))
            i += 1
        elif c == "%":
            octet = decode_hex_pair(s, i + 1)
            if octet is None:
                raise DIDSyntaxError(s, i)
            buf.append(octet)
            i += 3
        else:
            break
    return bytes(buf), i


def _check_colon(s: str, i: int) -> None:
    # must match: *( *idchar ":" ) 1*idchar
    if i + 1 >= len(s):
        raise DIDSyntaxError(s, i)
    c = s[i + 1]
    if c not in IDCHARS and c != ":" and c != "%":
        raise DIDSyntaxError(s, i)
