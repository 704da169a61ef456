"""
Identifier Syntax

This package implements the grammar of Decentralized Identifiers (DIDs) and
DID URLs, together with their canonical serialization and RFC 3986 compliant
equivalence.

Key Components:
- escape.py: Percent-encoding primitives shared by all codecs
- did.py: DID parsing, serialization and comparison
- url.py: DID URL parsing, serialization, accessors and comparison, plus
  reference resolution against a DID
- errors.py: Syntax errors with byte-indexed diagnostics

Equivalence is deliberately distinct from string equality. Two identifiers
may differ in percent-encoding (hex case, or escaped versus plain octets) and
still identify the same subject. Everything in here is pure and synchronous.
"""
