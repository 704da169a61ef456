"""HTTP resolution of DID documents.

Fetches a DID document from a URL, with the standardized DID resolution
errors for the common failure cases. How a DID maps to its document URL is
up to the caller.
"""

import asyncio
from datetime import datetime
from email.utils import parsedate_to_datetime
import logging
from typing import Any, Optional, Tuple

from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout
import sentry_sdk

from social.graze.did.config import Settings
from social.graze.did.model.base import loads
from social.graze.did.model.document import JSON_MEDIA_TYPE, Document
from social.graze.did.model.errors import DocumentError
from social.graze.did.model.meta import Meta
from social.graze.did.resolve.errors import (
    DocumentUnavailableError,
    DownloadTooLargeError,
    InvalidDIDError,
    MediaTypeNotSupportedError,
    NotFoundError,
    UnexpectedStatusError,
)

logger = logging.getLogger(__name__)

ACCEPT = f"{JSON_MEDIA_TYPE}, application/did+ld+json;q=0.7, application/json;q=0.1"

# DID resolution error codes, as found in the "error" of response bodies
ERROR_CODES = {
    "invalidDid": InvalidDIDError,
    "notFound": NotFoundError,
    "representationNotSupported": MediaTypeNotSupportedError,
}

CHUNK_SIZE = 4096


class WebResolver:
    """
    Fetches DID documents over HTTP. One instance may serve any number of
    concurrent requests.
    """

    def __init__(self, session: ClientSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings if settings is not None else Settings()  # type: ignore

    async def fetch(self, url: str) -> Tuple[Document, Meta]:
        """Get the DID document at url.

        Args:
            url: Location of the document

        Returns:
            The document, with the metadata available from the response

        Raises:
            ResolutionError: on any failure
        """
        logger.debug("fetching DID document %s", url)
        try:
            async with self.session.get(
                url,
                headers={"Accept": ACCEPT, "User-Agent": self.settings.user_agent},
                timeout=ClientTimeout(total=self.settings.request_timeout),
            ) as resp:
                body, limit_reached = await self._read_body(resp)
                status = resp.status
                status_text = f"{resp.status} {resp.reason or ''}".rstrip()
                last_modified = resp.headers.get("Last-Modified")
        except (ClientError, asyncio.TimeoutError) as e:
            sentry_sdk.capture_exception(e)
            raise DocumentUnavailableError(url, str(e) or type(e).__name__) from e

        value, decode_error = _decode_json(body)

        error_code = _error_code(value)
        if error_code is not None:
            logger.info("DID document %s: error %r in response body", url, error_code)
            raise ERROR_CODES[error_code]()

        if status == 404:
            raise NotFoundError()
        if status == 406:
            raise MediaTypeNotSupportedError()
        if not 200 <= status < 300:
            raise UnexpectedStatusError(status_text, url)

        if decode_error is not None:
            if limit_reached:
                raise DownloadTooLargeError(self.settings.download_max) from decode_error
            raise DocumentUnavailableError(url, str(decode_error)) from decode_error

        try:
            document = Document.from_dict(value)
        except DocumentError as e:
            raise DocumentUnavailableError(url, str(e)) from e

        return document, Meta(updated=_parse_http_date(last_modified))

    async def _read_body(self, resp: ClientResponse) -> Tuple[bytes, bool]:
        """Read at most download_max bytes, and report whether the limit was reached."""
        limit = self.settings.download_max
        body = bytearray()
        async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
            body.extend(chunk)
            if len(body) >= limit:
                del body[limit:]
                return bytes(body), True
        return bytes(body), False


def _decode_json(body: bytes) -> Tuple[Any, Optional[ValueError]]:
    try:
        return loads(body), None
    except ValueError as e:
        # UnicodeDecodeError included
        return None, e


def _error_code(value: Any) -> Optional[str]:
    if not isinstance(value, dict):
        return None
    code = value.get("error")
    if isinstance(code, str) and code in ERROR_CODES:
        return code
    return None


def _parse_http_date(s: Optional[str]) -> Optional[datetime]:
    """Best-effort parsing of an HTTP date, e.g., from Last-Modified."""
    if not s:
        return None
    try:
        return parsedate_to_datetime(s)
    except (TypeError, ValueError):
        logger.debug("ignoring malformed HTTP date %r", s)
        return None
