"""Semantic errors of DID documents, each with a numbered code."""

from typing import Optional


class DocumentError(ValueError):
    """
    Exception raised for DID documents which are semantically invalid.

    This exception class provides static methods for creating specific
    failure instances with appropriate error messages. Syntax errors of the
    identifiers inside a document are attached as the cause.
    """

    @staticmethod
    def not_an_object(kind: str) -> "DocumentError":
        """JSON value of a record is not an object."""
        return DocumentError(f"error-did-document-1000 DID {kind} JSON is not an object")

    @staticmethod
    def missing_property(kind: str, name: str) -> "DocumentError":
        """Required property absent from a record."""
        return DocumentError(
            f"error-did-document-1001 missing DID {kind} property {name!r}"
        )

    @staticmethod
    def malformed_property(
        kind: str, name: str, cause: Optional[object] = None
    ) -> "DocumentError":
        """Property value fails its decoder."""
        message = f"error-did-document-1002 broken DID {kind} property {name!r}"
        if cause is not None:
            message += f": {cause}"
        return DocumentError(message)

    @staticmethod
    def reserved_property(kind: str, name: str) -> "DocumentError":
        """Additional properties shadow a required property."""
        return DocumentError(
            f"error-did-document-1003 found required DID {kind} property {name!r} in additional set"
        )

    @staticmethod
    def no_service_type() -> "DocumentError":
        """Service without any type."""
        return DocumentError("error-did-document-1004 no DID service type set")

    @staticmethod
    def no_service_endpoint() -> "DocumentError":
        """Service without any endpoint."""
        return DocumentError("error-did-document-1005 no DID service endpoint set")

    @staticmethod
    def conflicting_method(id: str) -> "DocumentError":
        """Verification method identifier with differing content."""
        return DocumentError(
            f"error-did-document-1006 DID document has {id!r} embedded twice with differing content"
        )
