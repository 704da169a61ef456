"""Verification method lookups within DID documents.

Verification methods may be listed in the "verificationMethod" property of a
document, or they may be embedded in any of its verification relationships.
Relationships refer to methods by DID URL, frequently relative to the subject,
e.g., "#key-1".
"""

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional, Tuple

from social.graze.did.identifier.errors import DIDSyntaxError
from social.graze.did.identifier.url import Url, parse_url, resolve_reference
from social.graze.did.model.document import Document
from social.graze.did.model.errors import DocumentError
from social.graze.did.model.method import VerificationMethod

logger = logging.getLogger(__name__)


@dataclass
class EmbeddedVerificationMethods:
    """
    All verification methods of a document, keyed by their id as written.

    Attributes:
        document: The source of the methods
        per_id: Each method by the string value of its id
        absolute_ids: The id of each entry in per_id, resolved against the
            document subject
    """

    document: Document
    per_id: Dict[str, VerificationMethod] = field(default_factory=dict)
    absolute_ids: Dict[str, Url] = field(default_factory=dict)

    @classmethod
    def from_document(cls, document: Document) -> "EmbeddedVerificationMethods":
        """Index each verification method of document.

        A method may be present more than once, as long as its content is
        identical each time. Ids which are spelled differently but which
        address the same resource identify the same method.

        Raises:
            DocumentError: when an id is used for methods with differing content
        """
        index = cls(document=document)
        methods = list(document.verification_methods)
        for relationship in document.relationships().values():
            methods.extend(relationship.methods)

        for method in methods:
            key = str(method.id)
            absolute_id = parse_url(resolve_reference(document.subject, key))
            existing = index.per_id.get(key)
            if existing is None:
                existing = index._equivalent(absolute_id)
            if existing is None:
                index.per_id[key] = method
                index.absolute_ids[key] = absolute_id
            elif _same_content(existing, method):
                logger.debug("verification method %s embedded more than once", key)
            else:
                raise DocumentError.conflicting_method(key)
        return index

    def _equivalent(self, absolute_id: Url) -> Optional[VerificationMethod]:
        for key, other in self.absolute_ids.items():
            if other.equal(absolute_id):
                return self.per_id[key]
        return None

    def dereference(self, ref: str) -> Optional[VerificationMethod]:
        """The method which ref points to, if any.

        The reference may be relative to the document subject. Malformed
        references give None.
        """
        method = self.per_id.get(ref)
        if method is not None:
            return method

        try:
            s = resolve_reference(self.document.subject, ref)
            absolute_id = parse_url(s)
        except DIDSyntaxError:
            return None

        method = self.per_id.get(s)
        if method is not None:
            return method
        return self._equivalent(absolute_id)


def _same_content(a: VerificationMethod, b: VerificationMethod) -> bool:
    return (
        a.type == b.type
        and a.controller.equal(b.controller)
        and a.additional == b.additional
    )


def verification_method_refs(
    document: Document,
) -> Tuple[Dict[str, VerificationMethod], List[str]]:
    """Dereference each verification method referenced by document.

    Returns:
        The methods found by their reference as written, plus the references
        which did not resolve within document, in order of appearance

    Raises:
        DocumentError: when an id is used for methods with differing content
    """
    index = EmbeddedVerificationMethods.from_document(document)

    per_ref: Dict[str, VerificationMethod] = {}
    not_found: List[str] = []
    for relationship in document.relationships().values():
        for ref in relationship.refs:
            if ref in per_ref or ref in not_found:
                continue
            method = index.dereference(ref)
            if method is None:
                not_found.append(ref)
            else:
                per_ref[ref] = method
    return per_ref, not_found
