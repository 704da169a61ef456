"""
Shared test configuration and fixtures for DID tests.

Provides DID document samples, borrowed from the W3C DID Core recommendation
(https://www.w3.org/TR/did-core/), and settings independent of the environment.
"""

from typing import Any, Dict

import pytest

from social.graze.did.config import Settings


@pytest.fixture
def example9() -> Dict[str, Any]:
    """Document with a relative DID URL reference."""
    return {
        "@context": [
            "https://www.w3.org/ns/did/v1",
            "https://w3id.org/security/suites/ed25519-2020/v1",
        ],
        "id": "did:example:123456789abcdefghi",
        "verificationMethod": [
            {
                "id": "did:example:123456789abcdefghi#key-1",
                "type": "Ed25519VerificationKey2020",
                "controller": "did:example:123456789abcdefghi",
                "publicKeyMultibase": "zH3C2AVvLMv6gmMNam3uVAjZpfkcJCwDwnZn6z3wXmqPV",
            }
        ],
        "authentication": ["#key-1"],
    }


@pytest.fixture
def example10() -> Dict[str, Any]:
    """Minimal document."""
    return {"id": "did:example:123456789abcdefghijk"}


@pytest.fixture
def example11() -> Dict[str, Any]:
    """Document with a controller property."""
    return {
        "@context": "https://www.w3.org/ns/did/v1",
        "id": "did:example:123456789abcdefghi",
        "controller": "did:example:bcehfew7h32f32h7af3",
    }


@pytest.fixture
def example13() -> Dict[str, Any]:
    """Document with various verification method types."""
    return {
        "@context": [
            "https://www.w3.org/ns/did/v1",
            "https://w3id.org/security/suites/jws-2020/v1",
            "https://w3id.org/security/suites/ed25519-2020/v1",
        ],
        "id": "did:example:123456789abcdefghi",
        "verificationMethod": [
            {
                "id": "did:example:123#_Qq0UL2Fq651Q0Fjd6TvnYE-faHiOpRlPVQcY_-tA4A",
                "type": "JsonWebKey2020",
                "controller": "did:example:123",
                "publicKeyJwk": {
                    "crv": "Ed25519",
                    "x": "VCpo2LMLhn6iWku8MKvSLg2ZAoC-nlOyPVQaO3FxVeQ",
                    "kty": "OKP",
                    "kid": "_Qq0UL2Fq651Q0Fjd6TvnYE-faHiOpRlPVQcY_-tA4A",
                },
            },
            {
                "id": "did:example:123456789abcdefghi#keys-1",
                "type": "Ed25519VerificationKey2020",
                "controller": "did:example:pqrstuvwxyz0987654321",
                "publicKeyMultibase": "zH3C2AVvLMv6gmMNam3uVAjZpfkcJCwDwnZn6z3wXmqPV",
            },
        ],
    }


@pytest.fixture
def example15() -> Dict[str, Any]:
    """Authentication property with a reference and an embedded method."""
    return {
        "@context": [
            "https://www.w3.org/ns/did/v1",
            "https://w3id.org/security/suites/ed25519-2020/v1",
        ],
        "id": "did:example:123456789abcdefghi",
        "authentication": [
            "did:example:123456789abcdefghi#keys-1",
            {
                "id": "did:example:123456789abcdefghi#keys-2",
                "type": "Ed25519VerificationKey2020",
                "controller": "did:example:123456789abcdefghi",
                "publicKeyMultibase": "zH3C2AVvLMv6gmMNam3uVAjZpfkcJCwDwnZn6z3wXmqPV",
            },
        ],
    }


@pytest.fixture
def example20() -> Dict[str, Any]:
    """Usage of the service property, with a subject added."""
    return {
        "id": "did:example:123",
        "service": [
            {
                "id": "did:example:123#linked-domain",
                "type": "LinkedDomains",
                "serviceEndpoint": "https://bar.example.com",
            }
        ],
    }


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment."""
    return Settings(
        debug=False,
        download_max=0,
        request_timeout=5.0,
        user_agent="test-agent",
        sentry_dsn=None,
    )
