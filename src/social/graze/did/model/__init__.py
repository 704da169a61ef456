"""
Document Models

This package defines the data model of DID documents, together with the JSON
codec for their plain (non JSON-LD) representation, built on pydantic.

Key Models:
- document.py: Document with its verification relationships
- method.py: VerificationMethod, an extensible record
- service.py: Service and ServiceEndpoint, an extensible record
- meta.py: Metadata attached to a document by resolution
- base.py: Pydantic bases, the extensible record and exact-number JSON
- errors.py: Semantic errors with numbered codes

Extensible records keep any property they do not recognize in an additional
set, so that documents round-trip without losing extensions. Required
properties can never hide in that set.
"""
