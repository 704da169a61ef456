"""Pydantic models for the JSON representation of DID documents.

Models validate decoded JSON in a "json" context. Only in that context do the
shorthand forms apply, such as a single string in place of an array.
Construction from Python takes the fields as is.

Extensible records decode in two passes. First, the entire JSON object is
taken as the set of additional properties. Second, the required properties
are popped out of that set into typed fields. What remains are the genuine
extensions, which encode back after the required properties.

JSON numbers with a fraction or an exponent decode as Decimal, so that
extensions encode back with their exact text.
"""

import decimal
import json
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    ValidationError,
    ValidationInfo,
    model_serializer,
    model_validator,
)

from social.graze.did.model.errors import DocumentError

M = TypeVar("M", bound="JSONModel")

JSON_CONTEXT = {"json": True}


def is_json(info: ValidationInfo) -> bool:
    """Whether validation runs on decoded JSON."""
    return bool(info.context and info.context.get("json"))


def strings_or_array(value: Any) -> Any:
    """Accept a single JSON string in place of an array of strings."""
    if isinstance(value, str):
        return [value]
    return value


def encode_strings(values: List[str]) -> Any:
    """The bare string for exactly one entry, and an array otherwise."""
    if len(values) == 1:
        return values[0]
    return list(values)


def document_error(kind: str, e: ValidationError) -> DocumentError:
    """The DocumentError for the first failure of a validation.

    Errors of nested records pass as is.
    """
    error = e.errors()[0]
    cause = error.get("ctx", {}).get("error")
    if isinstance(cause, DocumentError):
        return cause

    loc = error["loc"]
    name = str(loc[0]) if loc else kind
    if error["type"] == "missing":
        return DocumentError.missing_property(kind, name)
    return DocumentError.malformed_property(kind, name, cause if cause is not None else error["msg"])


def loads(data: Union[str, bytes]) -> Any:
    """Decode JSON with exact numbers.

    Raises:
        ValueError: on malformed JSON, NaN and Infinity included
    """
    return json.loads(data, parse_float=decimal.Decimal, parse_constant=_reject_constant)


def dumps(value: Any) -> str:
    """Encode as compact JSON. Decimal numbers encode with their exact text.

    Raises:
        ValueError: on NaN and infinite numbers
    """
    return "".join(_iterencode(value))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"JSON {name} is not a number")


def _iterencode(value: Any) -> Iterator[str]:
    if isinstance(value, decimal.Decimal):
        if not value.is_finite():
            raise ValueError(f"JSON can not represent number {value}")
        yield str(value)
    elif isinstance(value, dict):
        yield "{"
        for i, (name, entry) in enumerate(value.items()):
            if i:
                yield ","
            yield json.dumps(str(name), ensure_ascii=False)
            yield ":"
            yield from _iterencode(entry)
        yield "}"
    elif isinstance(value, (list, tuple)):
        yield "["
        for i, entry in enumerate(value):
            if i:
                yield ","
            yield from _iterencode(entry)
        yield "]"
    else:
        yield json.dumps(value, ensure_ascii=False, allow_nan=False)


class JSONModel(BaseModel):
    """Base of the models which represent as a JSON object."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    KIND: ClassVar[str] = "object"

    @classmethod
    def from_dict(cls: Type[M], value: Any) -> M:
        """Decode a JSON object.

        Raises:
            DocumentError: on missing or malformed properties
        """
        if not isinstance(value, dict):
            raise DocumentError.not_an_object(cls.KIND)
        try:
            return cls.model_validate(
                value, context=JSON_CONTEXT, by_alias=True, by_name=False
            )
        except ValidationError as e:
            raise document_error(cls.KIND, e) from e

    @classmethod
    def from_json(cls: Type[M], data: Union[str, bytes]) -> M:
        """Decode JSON text.

        Raises:
            ValueError: on malformed JSON, e.g., json.JSONDecodeError
            DocumentError: on missing or malformed properties
        """
        return cls.from_dict(loads(data))

    def check(self) -> None:
        """Raise DocumentError when the model can not encode."""

    def to_dict(self) -> Dict[str, Any]:
        """Encode as a JSON object.

        Raises:
            DocumentError: when the model can not encode
        """
        self.check()
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        """Encode as compact JSON."""
        return dumps(self.to_dict())


class Record(JSONModel):
    """
    A JSON object with required properties, plus any number of extensions.

    Attributes:
        additional: Any other properties with their decoded JSON values.
            Never contains the required names.
    """

    additional: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def required_names(cls) -> List[str]:
        """The JSON names of the required properties, in encoding order."""
        return [
            field.alias or name
            for name, field in cls.model_fields.items()
            if name != "additional"
        ]

    @model_validator(mode="before")
    @classmethod
    def pop_required(cls, data: Any, info: ValidationInfo) -> Any:
        if not is_json(info) or not isinstance(data, dict):
            return data
        additional = dict(data)
        record = {
            name: additional.pop(name)
            for name in cls.required_names()
            if name in additional
        }
        record["additional"] = additional
        return record

    @model_serializer(mode="wrap")
    def merge_additional(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        record = handler(self)
        record.update(record.pop("additional", {}))
        return record

    def check(self) -> None:
        for name in self.required_names():
            if name in self.additional:
                raise DocumentError.reserved_property(self.KIND, name)

    def additional_string(self, name: str) -> Optional[str]:
        """The value of an additional property, if present as a JSON string."""
        value = self.additional.get(name)
        if isinstance(value, str):
            return value
        return None
