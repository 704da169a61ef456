"""Services of DID documents.

Services express ways of communicating with the DID subject or associated
entities. A service can be any type of service the DID subject wants to
advertise, including decentralized identity management services for further
discovery, authentication, authorization, or interaction.
"""

from typing import Any, ClassVar, Dict, List

from pydantic import (
    BaseModel,
    Field,
    ValidationInfo,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)
from yarl import URL

from social.graze.did.model.base import (
    JSON_CONTEXT,
    Record,
    encode_strings,
    is_json,
    strings_or_array,
)
from social.graze.did.model.errors import DocumentError

KIND = "service"


def check_uri_reference(s: str) -> str:
    """A valid URI, or a relative reference to one."""
    URL(s)
    return s


class ServiceEndpoint(BaseModel):
    """
    A string, a map, or a set composed of one or more strings and/or maps.

    All string values must be URI references conforming to RFC 3986. Maps
    are kept as their decoded JSON objects.
    """

    uri_refs: List[str] = Field(default_factory=list)
    objects: List[Dict[str, Any]] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.uri_refs) + len(self.objects)

    @classmethod
    def from_json_value(cls, value: Any) -> "ServiceEndpoint":
        """Decode a JSON string, object or array.

        Raises:
            pydantic.ValidationError: on any other shape, or on malformed URIs
        """
        return cls.model_validate(value, context=JSON_CONTEXT)

    @model_validator(mode="before")
    @classmethod
    def split_entries(cls, data: Any, info: ValidationInfo) -> Any:
        if not is_json(info):
            return data
        if isinstance(data, (str, dict)):
            data = [data]
        elif not isinstance(data, list):
            raise ValueError("DID service endpoint JSON is not a string nor a map nor a set")
        elif not data:
            raise ValueError("DID service endpoint JSON set empty")

        uri_refs: List[str] = []
        objects: List[Dict[str, Any]] = []
        for entry in data:
            if isinstance(entry, str):
                uri_refs.append(entry)
            elif isinstance(entry, dict):
                objects.append(entry)
            else:
                raise ValueError("DID service endpoint JSON set entry is not a string nor a map")
        return {"uri_refs": uri_refs, "objects": objects}

    @field_validator("uri_refs")
    @classmethod
    def check_uri_refs(cls, value: List[str]) -> List[str]:
        return [check_uri_reference(s) for s in value]

    @model_serializer(mode="plain")
    def serialize_entries(self) -> Any:
        entries: List[Any] = [*self.uri_refs, *self.objects]
        if len(entries) == 1:
            return entries[0]
        return entries

    def to_json_value(self) -> Any:
        """The bare string or map for exactly one entry, and an array otherwise.

        Strings come before maps.

        Raises:
            DocumentError: when the endpoint has no entries
        """
        if not len(self):
            raise DocumentError.no_service_endpoint()
        return self.model_dump()


class Service(Record):
    """
    A service entry of a DID document.

    Attributes:
        id: URI of the service, possibly relative to the DID subject
        types: One or more service types, e.g., ["LinkedDomains"]
        endpoint: Where to reach the service
        additional: Any other properties with their decoded JSON values.
            Never contains the required names.
    """

    KIND: ClassVar[str] = KIND

    id: str
    types: List[str] = Field(alias="type")
    endpoint: ServiceEndpoint = Field(alias="serviceEndpoint")

    @field_validator("id")
    @classmethod
    def check_id(cls, value: str) -> str:
        return check_uri_reference(value)

    @field_validator("types", mode="before")
    @classmethod
    def parse_types(cls, value: Any, info: ValidationInfo) -> Any:
        if is_json(info):
            return strings_or_array(value)
        return value

    @field_validator("types")
    @classmethod
    def check_types(cls, value: List[str], info: ValidationInfo) -> List[str]:
        if is_json(info) and not value:
            raise DocumentError.no_service_type()
        return value

    @field_serializer("types")
    def serialize_types(self, value: List[str]) -> Any:
        return encode_strings(value)

    def check(self) -> None:
        """Raise DocumentError when there is no type or no endpoint, or when
        additional contains a required property."""
        if not self.types:
            raise DocumentError.no_service_type()
        if not len(self.endpoint):
            raise DocumentError.no_service_endpoint()
        super().check()
