"""Errors of DID resolution.

Each error carries a numbered code in its message. The classes follow the
standardized DID resolution errors where one applies.
"""


class ResolutionError(Exception):
    """Base for any failure to resolve a DID document."""


class InvalidDIDError(ResolutionError):
    """The DID supplied to the resolution function does not conform to valid syntax."""

    def __init__(self) -> None:
        super().__init__("error-did-resolve-1000 invalid DID")


class NotFoundError(ResolutionError):
    """The resolver was unable to find the DID document resulting from the request."""

    def __init__(self) -> None:
        super().__init__("error-did-resolve-1001 DID not found")


class MediaTypeNotSupportedError(ResolutionError):
    """The representation requested via the Accept header is not supported."""

    def __init__(self) -> None:
        super().__init__("error-did-resolve-1002 DID representation not supported")


class DownloadTooLargeError(ResolutionError):
    """The response body reached the size limit before the document decoded."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            f"error-did-resolve-1003 DID document download reached the {limit} byte limit"
        )
        self.limit = limit


class UnexpectedStatusError(ResolutionError):
    """Any other non-successful HTTP status."""

    def __init__(self, status: str, url: str) -> None:
        super().__init__(
            f"error-did-resolve-1004 HTTP {status!r} for DID document URL {url}"
        )
        self.status = status
        self.url = url


class DocumentUnavailableError(ResolutionError):
    """Opaque transport or decoding failure. The cause is chained."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"error-did-resolve-1005 DID document {url} unavailable: {reason}")
        self.url = url
