"""
Unit tests for verification method lookups in social.graze.did.resolve.methods

Tests cover the index of embedded methods, with deduplication and conflicts,
and the dereferencing of relative and absolute DID URLs.
"""

import logging

import pytest

from social.graze.did.model.document import Document
from social.graze.did.model.errors import DocumentError
from social.graze.did.resolve.methods import (
    EmbeddedVerificationMethods,
    verification_method_refs,
)

KEY = {
    "id": "did:example:123#key-1",
    "type": "Ed25519VerificationKey2020",
    "controller": "did:example:123",
    "publicKeyMultibase": "z6MkA",
}


class TestEmbeddedVerificationMethods:
    """Test suite for EmbeddedVerificationMethods class."""

    def test_index(self, example15):
        """Test methods embedded in relationships are indexed."""
        index = EmbeddedVerificationMethods.from_document(Document.from_dict(example15))
        assert list(index.per_id) == ["did:example:123456789abcdefghi#keys-2"]

    def test_duplicate_identical(self, caplog):
        """Test identical methods may be present more than once."""
        doc = Document.from_dict(
            {
                "id": "did:example:123",
                "verificationMethod": [KEY],
                "authentication": [KEY],
                "assertionMethod": [KEY],
            }
        )
        with caplog.at_level(logging.DEBUG, logger="social.graze.did.resolve.methods"):
            index = EmbeddedVerificationMethods.from_document(doc)
        assert len(index.per_id) == 1
        assert "embedded more than once" in caplog.text

    def test_duplicate_conflicting(self):
        """Test methods with the same id and differing content conflict."""
        doc = Document.from_dict(
            {
                "id": "did:example:123",
                "verificationMethod": [KEY],
                "authentication": [{**KEY, "publicKeyMultibase": "z6MkB"}],
            }
        )
        with pytest.raises(DocumentError, match="error-did-document-1006"):
            EmbeddedVerificationMethods.from_document(doc)

    def test_duplicate_conflicting_in_methods(self):
        """Test conflicts within verificationMethod are detected too."""
        doc = Document.from_dict(
            {
                "id": "did:example:123",
                "verificationMethod": [KEY, {**KEY, "type": "JsonWebKey2020"}],
            }
        )
        with pytest.raises(DocumentError, match="embedded twice with differing content"):
            EmbeddedVerificationMethods.from_document(doc)

    @pytest.mark.parametrize("other_id", ["did:example:123#key%2D1", "#key-1", "#%6Bey-1"])
    def test_equivalent_ids_conflicting(self, other_id):
        """Test differently spelled ids of the same method conflict on differing content."""
        doc = Document.from_dict(
            {
                "id": "did:example:123",
                "verificationMethod": [KEY, {**KEY, "id": other_id, "type": "JsonWebKey2020"}],
            }
        )
        with pytest.raises(DocumentError, match="error-did-document-1006"):
            EmbeddedVerificationMethods.from_document(doc)

    def test_equivalent_ids_identical(self):
        """Test differently spelled ids of identical methods are indexed once."""
        doc = Document.from_dict(
            {
                "id": "did:example:123",
                "verificationMethod": [KEY],
                "authentication": [{**KEY, "id": "#key%2D1"}],
            }
        )
        index = EmbeddedVerificationMethods.from_document(doc)
        assert list(index.per_id) == ["did:example:123#key-1"]
        assert index.dereference("#key%2D1") is index.per_id["did:example:123#key-1"]

    def test_relative_ids(self):
        """Test methods with relative ids dereference by absolute URL."""
        doc = Document.from_dict(
            {"id": "did:example:123", "verificationMethod": [{**KEY, "id": "#key-1"}]}
        )
        index = EmbeddedVerificationMethods.from_document(doc)
        assert index.dereference("did:example:123#key-1") is doc.verification_methods[0]


class TestDereference:
    """Test suite for EmbeddedVerificationMethods.dereference method."""

    @pytest.fixture
    def index(self):
        doc = Document.from_dict(
            {"id": "did:example:123", "verificationMethod": [KEY]}
        )
        return EmbeddedVerificationMethods.from_document(doc)

    @pytest.mark.parametrize(
        "ref",
        [
            "did:example:123#key-1",
            "#key-1",
            "#key%2D1",
            "did:example:%31%32%33#key-1",
        ],
    )
    def test_found(self, index, ref):
        """Test references resolve to the method, in any equivalent spelling."""
        method = index.dereference(ref)
        assert method is not None
        assert str(method.id) == "did:example:123#key-1"

    @pytest.mark.parametrize(
        "ref", ["#key-2", "did:example:456#key-1", "# #", "", "https://example.com/#key-1"]
    )
    def test_not_found(self, index, ref):
        """Test other and malformed references give None."""
        assert index.dereference(ref) is None


class TestVerificationMethodRefs:
    """Test suite for verification_method_refs function."""

    def test_relative_url(self, example9):
        """Test relative references map to the public key."""
        per_ref, not_found = verification_method_refs(Document.from_dict(example9))
        assert not_found == []
        assert list(per_ref) == ["#key-1"]
        assert (
            per_ref["#key-1"].additional_string("publicKeyMultibase")
            == "zH3C2AVvLMv6gmMNam3uVAjZpfkcJCwDwnZn6z3wXmqPV"
        )

    def test_not_found(self, example15):
        """Test references without method are reported once."""
        example15["assertionMethod"] = ["did:example:123456789abcdefghi#keys-1", "#keys-2"]
        per_ref, not_found = verification_method_refs(Document.from_dict(example15))
        assert not_found == ["did:example:123456789abcdefghi#keys-1"]
        assert str(per_ref["#keys-2"].id) == "did:example:123456789abcdefghi#keys-2"
