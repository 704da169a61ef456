"""DID document metadata, as produced by resolution."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from social.graze.did.identifier.did import DID, parse_did


class Meta(BaseModel):
    """Metadata of a resolved DID document. All properties are optional.

    Resolvers attach metadata to a document. Nothing in this package mutates
    it afterwards.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True, frozen=True, populate_by_name=True
    )

    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    deactivated: Optional[datetime] = None
    next_update: Optional[datetime] = Field(default=None, alias="nextUpdate")
    next_version_id: Optional[str] = Field(default=None, alias="nextVersionId")
    equivalent_ids: List[DID] = Field(default_factory=list, alias="equivalentId")
    canonical_id: Optional[DID] = Field(default=None, alias="canonicalId")

    @field_validator("equivalent_ids", mode="before")
    @classmethod
    def parse_equivalent_ids(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [parse_did(v) if isinstance(v, str) else v for v in value]
        return value

    @field_validator("canonical_id", mode="before")
    @classmethod
    def parse_canonical_id(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_did(value)
        return value

    @field_serializer("equivalent_ids")
    def serialize_equivalent_ids(self, value: List[DID]) -> List[str]:
        return [str(did) for did in value]

    @field_serializer("canonical_id")
    def serialize_canonical_id(self, value: Optional[DID]) -> Optional[str]:
        return None if value is None else str(value)
