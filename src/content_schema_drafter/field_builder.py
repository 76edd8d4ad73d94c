from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from pydantic import ValidationError

from .attributes import synthesize_attributes
from .dictionaries import REQUIRED_ATTRIBUTE_FALLBACKS
from .errors import InvalidFieldName, MissingRequiredAttribute, UnsupportedFieldKind
from .models.field import NESTED_FIELD_KINDS, FieldDefinition, FieldExample, FieldTypeSpec
from .registry import FieldTypeRegistry

logger = logging.getLogger(__name__)

_INVALID_NAME_CHARS = re.compile(r"[^a-z0-9_]")
_REPEATED_UNDERSCORES = re.compile(r"_+")

# Caller options consumed by the builder rather than copied into attributes.
RESERVED_OPTIONS = frozenset({"multilanguage", "inputType"})
EXAMPLE_GUARDED_ATTRIBUTES = frozenset({"placeholder", "caption"})

EXACT_NAME_SCORE = 15
NAME_CONTAINS_SCORE = 10
CONTEXT_SCORE = 8
OPTION_MATCH_SCORE = 5


def sanitize_name(value: object) -> str:
    """Lower-case ``value`` and reduce it to ``[a-z0-9_]`` without stray underscores."""
    if not isinstance(value, str):
        return ""
    name = _INVALID_NAME_CHARS.sub("_", value.strip().lower())
    return _REPEATED_UNDERSCORES.sub("_", name).strip("_")


@dataclass
class AttributeLayers:
    """Ordered attribute merge: synthesized < example < caller.

    ``placeholder`` and ``caption`` from the example only replace a
    synthesized value when the example text mentions the field name.
    Required attributes still missing after the merge are filled from the
    registry defaults, then from ``REQUIRED_ATTRIBUTE_FALLBACKS``.
    """

    field_name: str
    synthesized: Mapping[str, Any] = field(default_factory=dict)
    example: Mapping[str, Any] = field(default_factory=dict)
    caller: Mapping[str, Any] = field(default_factory=dict)

    def merge(self) -> dict[str, Any]:
        merged: dict[str, Any] = copy.deepcopy(dict(self.synthesized))
        for key, value in self.example.items():
            if key in EXAMPLE_GUARDED_ATTRIBUTES and key in merged and not self._mentions_field(value):
                continue
            merged[key] = copy.deepcopy(value)
        for key, value in self.caller.items():
            merged[key] = copy.deepcopy(value)
        return merged

    def _mentions_field(self, value: Any) -> bool:
        return isinstance(value, str) and self.field_name in value.lower()

    @staticmethod
    def fill_required(attributes: dict[str, Any], spec: FieldTypeSpec) -> dict[str, Any]:
        for attribute in spec.required_attributes:
            if attribute in attributes:
                continue
            if attribute in spec.defaults:
                attributes[attribute] = copy.deepcopy(spec.defaults[attribute])
            elif attribute in REQUIRED_ATTRIBUTE_FALLBACKS:
                attributes[attribute] = copy.deepcopy(REQUIRED_ATTRIBUTE_FALLBACKS[attribute])
            else:
                logger.error(
                    "Required attribute has no default",
                    extra={"field_kind": spec.kind, "attribute": attribute},
                )
                raise MissingRequiredAttribute(spec.kind, attribute)
        return attributes


def score_example(
    example: FieldExample,
    field_name: str,
    context: str,
    options: Mapping[str, Any],
) -> int:
    score = 0
    example_name = example.name.lower()
    if field_name in example_name:
        score += NAME_CONTAINS_SCORE
    if example_name == field_name:
        score += EXACT_NAME_SCORE
    if context and (context in example_name or context in example.label.lower()):
        score += CONTEXT_SCORE
    input_type = options.get("inputType")
    if input_type and example.attributes.get("type") == input_type:
        score += OPTION_MATCH_SCORE
    accept = options.get("accept")
    if isinstance(accept, (list, tuple)) and isinstance(example.attributes.get("accept"), (list, tuple)):
        overlap = set(accept) & set(example.attributes["accept"])
        score += OPTION_MATCH_SCORE * len(overlap)
    score += len(example.attributes)
    return score


def select_example(
    examples: Sequence[FieldExample],
    field_name: str,
    context: str = "",
    options: Mapping[str, Any] | None = None,
) -> FieldExample | None:
    """Pick the highest scoring example; ties keep the earliest one."""
    if not examples:
        return None
    options = options or {}
    context = (context or "").lower()
    best: FieldExample | None = None
    best_score = 0
    for example in examples:
        score = score_example(example, field_name, context, options)
        if score > best_score:
            best, best_score = example, score
    return best or examples[0]


class FieldBuilder:
    def __init__(
        self,
        registry: FieldTypeRegistry,
        *,
        synthesizer: Callable[[str, str, str], Mapping[str, Any]] = synthesize_attributes,
    ) -> None:
        self._registry = registry
        self._synthesize = synthesizer

    @property
    def registry(self) -> FieldTypeRegistry:
        return self._registry

    def build(
        self,
        name: object,
        label: object,
        kind: object,
        options: Mapping[str, Any] | None = None,
        context: str = "",
    ) -> FieldDefinition:
        if not isinstance(name, str) or not name.strip():
            raise InvalidFieldName(name)
        if not isinstance(label, str) or not label.strip():
            raise InvalidFieldName(label, "field label must be a non-empty string")
        spec = self._registry.lookup(kind)
        field_name = sanitize_name(name)
        if not field_name:
            raise InvalidFieldName(name, "nothing left after sanitizing")

        options = dict(options or {})
        context = (context or "").lower()
        example = select_example(spec.examples, field_name, context, options)

        layers = AttributeLayers(
            field_name=field_name,
            synthesized=self._synthesize(field_name, spec.kind, context),
            example=example.attributes if example else {},
            caller=self._caller_attributes(spec, options),
        )
        attributes = AttributeLayers.fill_required(layers.merge(), spec)

        if spec.kind in NESTED_FIELD_KINDS:
            attributes["fields"] = self._validate_nested(attributes.get("fields") or [])

        return FieldDefinition(
            name=field_name,
            label=label.strip(),
            kind=spec.kind,
            multilanguage=options["multilanguage"] if "multilanguage" in options else None,
            attributes=attributes,
        )

    def _caller_attributes(self, spec: FieldTypeSpec, options: Mapping[str, Any]) -> dict[str, Any]:
        attributes = {key: value for key, value in options.items() if key not in RESERVED_OPTIONS and value is not None}
        input_type = options.get("inputType")
        if input_type and "type" in spec.allowed_attributes and "type" not in attributes:
            attributes["type"] = input_type
        return attributes

    def _validate_nested(self, entries: Sequence[Any]) -> list[FieldDefinition]:
        nested: list[FieldDefinition] = []
        for entry in entries:
            if isinstance(entry, FieldDefinition):
                self._registry.lookup(entry.kind)
                nested.append(entry)
                continue
            if not isinstance(entry, Mapping):
                raise UnsupportedFieldKind(type(entry).__name__)
            self._registry.lookup(entry.get("field") or entry.get("kind"))
            try:
                nested.append(FieldDefinition.from_payload(entry))
            except ValidationError as exc:
                raise InvalidFieldName(entry.get("name"), f"invalid nested field: {exc.errors()[0]['msg']}") from exc
        return nested


def build_field(
    name: object,
    label: object,
    kind: object,
    options: Mapping[str, Any] | None,
    registry: FieldTypeRegistry,
    context: str = "",
) -> FieldDefinition:
    return FieldBuilder(registry).build(name, label, kind, options, context)


__all__ = [
    "AttributeLayers",
    "FieldBuilder",
    "build_field",
    "sanitize_name",
    "score_example",
    "select_example",
]
