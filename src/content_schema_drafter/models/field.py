from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field


class FieldKind(str, Enum):
    input = "input"
    textarea = "textarea"
    texteditor = "texteditor"
    select = "select"
    toggle = "toggle"
    media = "media"
    repeater = "repeater"
    group = "group"
    relationship = "relationship"
    post_object = "post_object"
    post_related = "post_related"
    table = "table"


NESTED_FIELD_KINDS = frozenset({FieldKind.repeater.value, FieldKind.group.value})


class FieldExample(BaseModel):
    """A worked example attached to a field kind in the registry."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    label: str
    kind: str | None = Field(default=None, alias="field")
    multilanguage: bool | None = None
    attributes: dict[str, Any] = Field(default_factory=dict, alias="attribute")


class FieldTypeSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    kind: str
    allowed_attributes: tuple[str, ...] = Field(default=(), alias="attributes")
    required_attributes: tuple[str, ...] = Field(default=(), alias="requiredAttributes")
    defaults: Mapping[str, Any] = Field(default_factory=dict)
    examples: tuple[FieldExample, ...] = ()

    def describe(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "attributes": list(self.allowed_attributes),
            "required_attributes": list(self.required_attributes),
        }


class FieldDefinition(BaseModel):
    """A single field of a template section.

    ``attributes`` is the CMS ``attribute`` map. For ``repeater`` and ``group``
    kinds ``attributes["fields"]`` holds nested ``FieldDefinition`` instances,
    for ``table`` ``attributes["columns"]`` holds plain column mappings.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    label: str
    kind: str = Field(alias="field")
    multilanguage: bool | None = None
    attributes: dict[str, Any] = Field(default_factory=dict, alias="attribute")

    @property
    def nested_fields(self) -> Sequence["FieldDefinition"]:
        fields = self.attributes.get("fields") or ()
        return [item for item in fields if isinstance(item, FieldDefinition)]

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "label": self.label, "field": self.kind}
        if self.multilanguage is not None:
            payload["multilanguage"] = self.multilanguage
        if self.attributes:
            payload["attribute"] = dump_value(self.attributes)
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "FieldDefinition":
        """Build a field from its serialized form, converting nested fields too."""
        data = dict(payload)
        kind = data.pop("field", None) or data.pop("kind", None)
        attributes = dict(data.pop("attribute", None) or data.pop("attributes", None) or {})
        nested = attributes.get("fields")
        if isinstance(nested, list):
            attributes["fields"] = [
                item if isinstance(item, FieldDefinition) else cls.from_payload(item)
                for item in nested
            ]
        return cls(
            name=data.get("name"),
            label=data.get("label"),
            kind=kind,
            multilanguage=data.get("multilanguage"),
            attributes=attributes,
        )


def dump_value(value: Any) -> Any:
    if isinstance(value, FieldDefinition):
        return value.to_dict()
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, Mapping):
        return {key: dump_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [dump_value(item) for item in value]
    return value


__all__ = [
    "FieldDefinition",
    "FieldExample",
    "FieldKind",
    "FieldTypeSpec",
    "NESTED_FIELD_KINDS",
    "dump_value",
]
