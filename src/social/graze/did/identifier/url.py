"""DID URL syntax.

A DID URL extends a DID with an optional path, query and fragment. Relative
references (without the DID) are supported, as they are common in DID
documents, e.g., "#key-1". The path, query and fragment are kept as written,
with their percent-encodings intact. Decoding happens in the accessors only.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
import re
from typing import Iterable, List, Optional, Tuple

from social.graze.did.identifier.did import (
    DID,
    PREFIX,
    parse_method,
    parse_spec_id,
)
from social.graze.did.identifier.errors import DIDSyntaxError
from social.graze.did.identifier.escape import (
    FRAGMENT_SAFE,
    PCHARS,
    QUERY_SAFE,
    SEGMENT_SAFE,
    decode_hex_pair,
    escape,
    unescape,
)

PATH_CHARS = PCHARS | frozenset("/")
QUERY_CHARS = PCHARS | frozenset("/?")

# RFC 3986, section 3.1
SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

_DOT_ESCAPE = re.compile(r"%2[eE]")


@dataclass
class Url:
    """
    A parsed DID URL.

    Attributes:
        did: The DID, or the absent DID() for a relative reference
        raw_path: Path as written, e.g., "/path%20name"
        raw_query: Query as written, including its "?" marker
        raw_fragment: Fragment as written, including its "#" marker
    """

    did: DID = field(default_factory=DID)
    raw_path: str = ""
    raw_query: str = ""
    raw_fragment: str = ""

    @property
    def is_relative(self) -> bool:
        return self.did.is_absent

    def __str__(self) -> str:
        return str(self.did) + self.raw_path + self.raw_query + self.raw_fragment

    def equal(self, other: "Url") -> bool:
        """Whether other addresses the same resource, conform RFC 3986, section 6.

        Duplicate query parameters compare in order of their appearance, i.e.,
        "?foo=1&foo=2" is not equal to "?foo=2&foo=1". Relative references never
        compare equal.
        """
        if not isinstance(other, Url) or self.is_relative or other.is_relative:
            return False
        return (
            self.did.equal(other.did)
            and _path_equal(self.raw_path, other.raw_path)
            and _query_params(self.raw_query) == _query_params(other.raw_query)
            and _fragment_octets(self.raw_fragment)
            == _fragment_octets(other.raw_fragment)
        )

    def equal_string(self, s: str) -> bool:
        """Whether DID URL s addresses the same resource. Malformed input compares unequal."""
        if self.is_relative:
            return False
        try:
            other = parse_url(s)
        except DIDSyntaxError:
            return False
        return self.equal(other)

    def path_segments(self) -> List[str]:
        """Each component from the path.

        Percent-encodings resolve on a best-effort basis. Malformed encodings
        pass as is. The return is equal to any sequence passed to
        set_path_segments.
        """
        if not self.raw_path:
            return []
        segments = self.raw_path.removeprefix("/").split("/")
        if segments[-1] == "":
            segments.pop()
        return [_decode(segment) for segment in segments]

    def set_path_segments(self, segments: Iterable[str]) -> None:
        """Replace the path. Unsafe characters, including "/", are percent-encoded."""
        segments = list(segments)
        if not segments:
            self.raw_path = ""
            return

        parts = ["/" + escape(_encode(segment), SEGMENT_SAFE) for segment in segments]
        if segments[-1] == "":
            parts.append("/")
        self.raw_path = "".join(parts)

    def path_with_escape(self, escape_char: str = "\\") -> str:
        """The path with any and all of its percent-encodings resolved.

        Encoded path separators ("%2F") are replaced by the escape character
        followed by a "/". Occurrences of the escape character, either plain or
        percent-encoded, are doubled. Malformed encodings pass as is.
        """
        if len(escape_char) != 1 or not escape_char.isascii():
            raise ValueError(f"escape must be one ASCII character, got {escape_char!r}")

        s = self.raw_path
        if escape_char not in s and "%" not in s:
            return s

        esc = escape_char.encode("ascii")
        buf = bytearray()
        i = 0
        while i < len(s):
            c = s[i]
            if c == escape_char:
                buf += esc + esc
                i += 1
                continue
            if c == "%":
                octet = decode_hex_pair(s, i + 1)
                if octet is not None:
                    if octet == esc[0]:
                        buf += esc + esc
                    elif octet == ord("/"):
                        buf += esc + b"/"
                    else:
                        buf.append(octet)
                    i += 3
                    continue
            buf += c.encode("utf-8")
            i += 1
        return buf.decode("utf-8", "surrogateescape")

    def query(self) -> List[Tuple[str, str]]:
        """Name-value pairs from the query, in order of appearance."""
        if len(self.raw_query) <= 1:
            return []
        pairs = []
        for param in self.raw_query[1:].split("&"):
            if not param:
                continue
            name, _, value = param.partition("=")
            pairs.append((_decode(name), _decode(value)))
        return pairs

    def set_query(self, pairs: Iterable[Tuple[str, str]]) -> None:
        """Replace the query. No pairs removes the query."""
        params = [
            escape(_encode(name), QUERY_SAFE) + "=" + escape(_encode(value), QUERY_SAFE)
            for name, value in pairs
        ]
        self.raw_query = "?" + "&".join(params) if params else ""

    def fragment(self) -> str:
        """The fragment with percent-encodings resolved on a best-effort basis."""
        return _decode(self.raw_fragment[1:])

    def set_fragment(self, value: Optional[str]) -> None:
        """Replace the fragment. None or the empty string removes the fragment."""
        if not value:
            self.raw_fragment = ""
        else:
            self.raw_fragment = "#" + escape(_encode(value), FRAGMENT_SAFE)

    def version_params(self) -> Tuple[Optional[str], Optional[datetime]]:
        """The standardised "versionId" and "versionTime" parameters.

        Raises:
            ValueError: on duplicate parameters, or on a malformed versionTime
        """
        version_ids = [value for name, value in self.query() if name == "versionId"]
        version_times = [value for name, value in self.query() if name == "versionTime"]
        if len(version_ids) > 1:
            raise ValueError("duplicate versionId in DID URL")
        if len(version_times) > 1:
            raise ValueError("duplicate versionTime in DID URL")

        version_time = None
        if version_times:
            try:
                version_time = datetime.fromisoformat(version_times[0])
            except ValueError as e:
                raise ValueError(f"versionTime in DID URL: {e}") from e
            if version_time.tzinfo is None:
                raise ValueError("versionTime in DID URL has no time zone offset")

        return next(iter(version_ids), None), version_time

    def set_version_params(
        self, version_id: Optional[str], version_time: Optional[datetime]
    ) -> None:
        """Install the standardised "versionId" and/or "versionTime" parameters.

        Parameters which are None remain untouched. Times are written in UTC.
        """
        replace = set()
        additions = []
        if version_id is not None:
            replace.add("versionId")
            additions.append(("versionId", version_id))
        if version_time is not None:
            replace.add("versionTime")
            utc = version_time.astimezone(timezone.utc)
            additions.append(("versionTime", utc.strftime("%Y-%m-%dT%H:%M:%SZ")))

        pairs = [(name, value) for name, value in self.query() if name not in replace]
        self.set_query(pairs + additions)


def parse_url(s: str) -> Url:
    """Parse s in full as a DID URL, or as a relative reference to one.

    Raises:
        DIDSyntaxError: when s does not conform to the DID URL syntax
    """
    if s.startswith(PREFIX):
        method = parse_method(s)
        spec_id, end = parse_spec_id(s, len(PREFIX) + len(method) + 1)
        if not spec_id or (end < len(s) and s[end] not in "/?#"):
            raise DIDSyntaxError(s, end)
        did = DID(method=method, spec_id=spec_id)
    else:
        did = DID()
        end = 0
        for i, c in enumerate(s):
            if c in "/?#":
                break
            # RFC 3986, section 4.2: mistaken for a scheme name
            if c == ":":
                raise DIDSyntaxError(s, i)

    path_end = _scan(s, end, PATH_CHARS, "?#")
    query_end = path_end
    if path_end < len(s) and s[path_end] == "?":
        query_end = _scan(s, path_end + 1, QUERY_CHARS, "#")
    if query_end < len(s):
        _scan(s, query_end + 1, QUERY_CHARS, "")

    return Url(
        did=did,
        raw_path=s[end:path_end],
        raw_query=s[path_end:query_end],
        raw_fragment=s[query_end:],
    )


def resolve_reference(base: DID, ref: str) -> str:
    """Resolve ref with base as the base URI, conform RFC 3986, section 5.

    References with a scheme are returned as is. Relative paths are merged
    under the root of the DID.

    Raises:
        DIDSyntaxError: when ref is not a valid relative DID URL
    """
    if SCHEME.match(ref):
        return ref

    ref_url = parse_url(ref)
    path = ref_url.raw_path
    if path:
        if not path.startswith("/"):
            path = "/" + path
        path = remove_dot_segments(path)

    return str(
        Url(
            did=base,
            raw_path=path,
            raw_query=ref_url.raw_query,
            raw_fragment=ref_url.raw_fragment,
        )
    )


def remove_dot_segments(path: str) -> str:
    """RFC 3986, section 5.2.4."""
    output: List[str] = []
    while path:
        if path.startswith("../"):
            path = path[3:]
        elif path.startswith("./"):
            path = path[2:]
        elif path.startswith("/./"):
            path = path[2:]
        elif path == "/.":
            path = "/"
        elif path.startswith("/../"):
            path = path[3:]
            if output:
                output.pop()
        elif path == "/..":
            path = "/"
            if output:
                output.pop()
        elif path in (".", ".."):
            path = ""
        else:
            i = path.find("/", 1 if path.startswith("/") else 0)
            if i < 0:
                i = len(path)
            output.append(path[:i])
            path = path[i:]
    return "".join(output)


def _scan(s: str, i: int, allowed: frozenset, stops: str) -> int:
    # returns the index of the first stop character, or len(s)
    while i < len(s):
        c = s[i]
        if c in stops:
            return i
        if c == "%":
            if decode_hex_pair(s, i + 1) is None:
                raise DIDSyntaxError(s, i)
            i += 3
            continue
        if c not in allowed:
            raise DIDSyntaxError(s, i)
        i += 1
    return len(s)


def _path_equal(s: str, t: str) -> bool:
    if s == t:
        return True
    return _normalized_segments(s) == _normalized_segments(t)


def _normalized_segments(raw_path: str) -> List[bytes]:
    # unreserved "." in percent-encoding first, as it affects dot-segments
    path = remove_dot_segments(_DOT_ESCAPE.sub(".", raw_path))
    return [unescape(segment) for segment in path.split("/")]


def _query_params(raw_query: str) -> Optional[List[Tuple[bytes, Optional[bytes]]]]:
    if not raw_query:
        return None
    params: List[Tuple[bytes, Optional[bytes]]] = []
    body = raw_query[1:]
    if not body:
        return params
    for param in body.split("&"):
        name, sep, value = param.partition("=")
        params.append((unescape(name), unescape(value) if sep else None))
    return params


def _fragment_octets(raw_fragment: str) -> Optional[bytes]:
    if not raw_fragment:
        return None
    return unescape(raw_fragment[1:])


def _encode(s: str) -> bytes:
    return s.encode("utf-8", "surrogateescape")


def _decode(s: str) -> str:
    return unescape(s).decode("utf-8", "surrogateescape")
