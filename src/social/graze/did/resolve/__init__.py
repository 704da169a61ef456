"""
Document Resolution

This package dereferences verification methods within DID documents, and
fetches DID documents over HTTP.

Key Components:
- methods.py: Index of the embedded verification methods, with dereferencing
  of (relative) DID URLs
- web.py: HTTP resolution of DID documents
- errors.py: The standardized DID resolution errors
- __main__.py: CLI interface for resolution

Nothing in here retries. Retry policy, if any, belongs to the caller.
"""
