"""
Decentralized Identifiers

This package implements Decentralized Identifiers (DIDs) v1.0, with DID URLs,
DID documents and their verification methods, conform the W3C recommendation.

Key Components:
- identifier/: DID and DID URL syntax, serialization and RFC 3986 equivalence
- model/: DID documents, verification methods, services and metadata
- resolve/: Verification method dereferencing and HTTP resolution
- config.py: Settings for resolution

Identifiers compare with equal and equal_string rather than with string
equality, as percent-encoding permits multiple spellings of the same
identifier. Documents are plain JSON. JSON-LD processing is not supported.
"""
