"""DID documents.

JSON-LD is omitted by design. Documents are consumed and produced as plain
JSON, and "@context" passes as any other unrecognized property, i.e., it is
ignored.
"""

from typing import Any, ClassVar, Dict, List, Optional

from pydantic import (
    BaseModel,
    Field,
    InstanceOf,
    SerializerFunctionWrapHandler,
    ValidationInfo,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)

from social.graze.did.identifier.did import DID, parse_did
from social.graze.did.identifier.errors import DIDSyntaxError
from social.graze.did.identifier.url import parse_url, resolve_reference
from social.graze.did.model.base import (
    JSON_CONTEXT,
    JSONModel,
    encode_strings,
    is_json,
    strings_or_array,
)
from social.graze.did.model.method import VerificationMethod
from social.graze.did.model.service import Service

# W3C namespace URI, informational only
V1 = "https://www.w3.org/ns/did/v1"

# Media type for JSON document production and consumption.
JSON_MEDIA_TYPE = "application/did+json"

KIND = "document"

# JSON property names of the verification relationships, with their fields.
RELATIONSHIPS = {
    "authentication": "authentication",
    "assertionMethod": "assertion_method",
    "keyAgreement": "key_agreement",
    "capabilityInvocation": "capability_invocation",
    "capabilityDelegation": "capability_delegation",
}


class VerificationRelationship(BaseModel):
    """
    The relationship between a document subject and verification methods.

    Each verification method may be either embedded or referenced. Embedded
    methods are owned by the relationship. References are DID URLs, possibly
    relative to the document subject, as written.
    """

    methods: List[VerificationMethod] = Field(default_factory=list)
    refs: List[str] = Field(default_factory=list)

    @classmethod
    def from_json_value(cls, value: Any) -> Optional["VerificationRelationship"]:
        """Decode a JSON array mixing objects and strings, or null.

        Raises:
            pydantic.ValidationError: on any other shape, or on malformed entries
        """
        if value is None:
            return None
        return cls.model_validate(value, context=JSON_CONTEXT)

    @model_validator(mode="before")
    @classmethod
    def split_entries(cls, data: Any, info: ValidationInfo) -> Any:
        if not is_json(info):
            return data
        if not isinstance(data, list):
            raise ValueError("DID set of verification methods is not a JSON array nor null")

        methods: List[VerificationMethod] = []
        refs: List[str] = []
        for entry in data:
            if isinstance(entry, dict):
                methods.append(VerificationMethod.from_dict(entry))
            elif isinstance(entry, str):
                parse_url(entry)
                refs.append(entry)
            else:
                raise ValueError(
                    "DID set of verification methods entry is not a JSON object nor a JSON string"
                )
        return {"methods": methods, "refs": refs}

    @model_serializer(mode="wrap")
    def serialize_entries(self, handler: SerializerFunctionWrapHandler) -> List[Any]:
        """Embedded methods first, followed by the references."""
        relationship = handler(self)
        return [*relationship.get("methods", []), *relationship.get("refs", [])]

    def to_json_value(self) -> List[Any]:
        for method in self.methods:
            method.check()
        return self.model_dump(by_alias=True)


class Document(JSONModel):
    """
    The "core properties" of a DID document.

    Attributes:
        subject: The DID the document is about, i.e., the "id"
        also_known_as: URIs of other identifiers for the subject
        controllers: DIDs of the entities authorized to make changes, without
            duplicates
        verification_methods: Methods, such as cryptographic public keys,
            which can be used to authenticate or authorize interactions with
            the subject or associated parties
        authentication: How the subject is expected to be authenticated
        assertion_method: How the subject is expected to express claims
        key_agreement: How to generate encryption material in order to
            transmit confidential information intended for the subject
        capability_invocation: Methods which the subject might use to invoke
            a cryptographic capability
        capability_delegation: Methods which the subject might use to
            delegate a cryptographic capability to another party
        services: Ways of communicating with the subject or associated
            entities
    """

    KIND: ClassVar[str] = KIND

    subject: InstanceOf[DID] = Field(alias="id")
    also_known_as: List[str] = Field(default_factory=list, alias="alsoKnownAs")
    controllers: List[InstanceOf[DID]] = Field(default_factory=list, alias="controller")
    verification_methods: List[VerificationMethod] = Field(
        default_factory=list, alias="verificationMethod"
    )
    authentication: Optional[VerificationRelationship] = None
    assertion_method: Optional[VerificationRelationship] = Field(
        default=None, alias="assertionMethod"
    )
    key_agreement: Optional[VerificationRelationship] = Field(default=None, alias="keyAgreement")
    capability_invocation: Optional[VerificationRelationship] = Field(
        default=None, alias="capabilityInvocation"
    )
    capability_delegation: Optional[VerificationRelationship] = Field(
        default=None, alias="capabilityDelegation"
    )
    services: List[Service] = Field(default_factory=list, alias="service")

    @field_validator("subject", mode="before")
    @classmethod
    def parse_subject(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_did(value)
        return value

    @field_validator("also_known_as", mode="before")
    @classmethod
    def parse_also_known_as(cls, value: Any, info: ValidationInfo) -> Any:
        if not is_json(info):
            return value
        if value is None:
            return []
        return strings_or_array(value)

    @field_validator("controllers", mode="before")
    @classmethod
    def parse_controllers(cls, value: Any, info: ValidationInfo) -> Any:
        if not is_json(info):
            return value
        if value is None:
            return []
        value = strings_or_array(value)
        if isinstance(value, list):
            return [parse_did(v) if isinstance(v, str) else v for v in value]
        return value

    @field_validator("controllers")
    @classmethod
    def dedup_controllers(cls, value: List[DID]) -> List[DID]:
        unique: List[DID] = []
        for did in value:
            if not any(did.equal(other) for other in unique):
                unique.append(did)
        return unique

    @field_validator("verification_methods", mode="before")
    @classmethod
    def parse_verification_methods(cls, value: Any, info: ValidationInfo) -> Any:
        if not is_json(info):
            return value
        if value is None:
            return []
        if isinstance(value, list):
            return [VerificationMethod.from_dict(entry) for entry in value]
        return value

    @field_validator("services", mode="before")
    @classmethod
    def parse_services(cls, value: Any, info: ValidationInfo) -> Any:
        if not is_json(info):
            return value
        if value is None:
            return []
        if isinstance(value, list):
            return [Service.from_dict(entry) for entry in value]
        return value

    @field_serializer("subject")
    def serialize_subject(self, value: DID) -> str:
        return str(value)

    @field_serializer("controllers")
    def serialize_controllers(self, value: List[DID]) -> Any:
        return encode_strings([str(did) for did in value])

    @model_serializer(mode="wrap")
    def omit_empty(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        """Absent relationships and empty sets are left out."""
        doc = handler(self)
        return {
            name: value
            for name, value in doc.items()
            if value is not None and (value != [] or name in RELATIONSHIPS)
        }

    def check(self) -> None:
        """Raise DocumentError when any of the entries can not encode."""
        for method in self.verification_methods:
            method.check()
        for relationship in self.relationships().values():
            for method in relationship.methods:
                method.check()
        for service in self.services:
            service.check()

    def relationships(self) -> Dict[str, VerificationRelationship]:
        """Each verification relationship present, by its JSON property name."""
        present = {}
        for name, attr in RELATIONSHIPS.items():
            relationship = getattr(self, attr)
            if relationship is not None:
                present[name] = relationship
        return present

    def controlled_by(self, s: str) -> bool:
        """Whether any of the controllers equals DID s."""
        return any(did.equal_string(s) for did in self.controllers)

    def verification_method_or_none(self, ref: str) -> Optional[VerificationMethod]:
        """The entry from verification_methods which matches ref with its id.

        The reference may be relative to the subject. None covers both not
        found and malformed references.
        """
        try:
            s = resolve_reference(self.subject, ref)
        except DIDSyntaxError:
            return None

        for method in self.verification_methods:
            if method.id.equal_string(s):
                return method
        return None
