"""
Configuration Module for DID Resolution

This module defines the settings of the HTTP resolver and its command-line
interface, using Pydantic for validation. Values load from environment
variables, with defaults suitable for interactive use.

Key configuration areas include:
- Debugging and error reporting
- Download limits and timeouts
- Client identification
"""

import logging
from typing import Final, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DOWNLOAD_MAX_DEFAULT: Final[int] = 1 << 16
"""Upper boundary for response bodies, 64 KiB."""

DOWNLOAD_MAX_CEILING: Final[int] = 1 << 30
"""Hard limit for response bodies when the boundary is disabled, 1 GiB."""


class Settings(BaseSettings):
    """
    Settings for DID document resolution.

    Environment variables map to the fields automatically, e.g., DOWNLOAD_MAX
    sets download_max.
    """

    debug: bool = False
    """
    Enable verbose logging.
    Set with DEBUG=true environment variable.
    """

    download_max: int = DOWNLOAD_MAX_DEFAULT
    """
    Upper boundary for the byte size of DID documents. Zero means the default
    of 64 KiB. Negative values disable the boundary, up to a hard limit of 1 GiB.
    Set with DOWNLOAD_MAX environment variable.
    """

    request_timeout: float = 10.0
    """
    Total time in seconds for a request, including the response body.
    Set with REQUEST_TIMEOUT environment variable.
    """

    user_agent: str = "social.graze.did"
    """
    User-Agent header on each request.
    Set with USER_AGENT environment variable.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    @field_validator("download_max", mode="after")
    @classmethod
    def normalize_download_max(cls, v: int) -> int:
        """
        Resolve the special values of download_max.

        Args:
            v: The configured boundary

        Returns:
            int: The effective boundary in bytes
        """
        if v == 0:
            return DOWNLOAD_MAX_DEFAULT
        if v < 0:
            logger.debug("download boundary disabled; hard limit applies")
            return DOWNLOAD_MAX_CEILING
        return v
