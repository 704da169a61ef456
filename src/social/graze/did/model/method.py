"""Verification methods of DID documents."""

from typing import Any, ClassVar

from pydantic import InstanceOf, field_serializer, field_validator

from social.graze.did.identifier.did import DID, parse_did
from social.graze.did.identifier.url import Url, parse_url
from social.graze.did.model.base import Record

KIND = "verification-method"


class VerificationMethod(Record):
    """
    A set of parameters that can be used together with a process to
    independently verify a proof.

    For example, a cryptographic public key can be used as a verification
    method with respect to a digital signature. In such usage, it verifies that
    the signer possessed the associated cryptographic private key.

    Attributes:
        id: DID URL of the method
        type: Verification method type, e.g., "Ed25519VerificationKey2020"
        controller: DID of the entity in control of the method
        additional: Any other properties, such as "publicKeyMultibase", with
            their decoded JSON values. Never contains the required names.
    """

    KIND: ClassVar[str] = KIND

    id: InstanceOf[Url]
    type: str
    controller: InstanceOf[DID]

    @field_validator("id", mode="before")
    @classmethod
    def parse_id(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_url(value)
        return value

    @field_validator("controller", mode="before")
    @classmethod
    def parse_controller(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_did(value)
        return value

    @field_serializer("id", "controller")
    def serialize_identifier(self, value: Any) -> str:
        return str(value)
