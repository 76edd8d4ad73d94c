from __future__ import annotations

from typing import Any, Mapping, Sequence

from .field_builder import sanitize_name
from .models.validation import ValidationReport
from .registry import FieldTypeRegistry

TEMPLATE_KEYS = ("name", "label", "is_content", "multilanguage", "is_multiple", "description", "components")
COMPONENT_KEYS = ("keyName", "label", "section", "fields")
FIELD_KEYS = ("name", "label", "field")


def validate_template(document: Any, registry: FieldTypeRegistry) -> ValidationReport:
    """Check a serialized template against the registry's declared field kinds and required attributes."""
    errors: list[str] = []
    warnings: list[str] = []
    if not isinstance(document, Mapping):
        return ValidationReport(valid=False, errors=["Template must be a JSON object"])

    errors.extend(f"Missing required key: {key}" for key in TEMPLATE_KEYS if key not in document)
    components = document.get("components")
    if "components" in document and (not isinstance(components, Sequence) or isinstance(components, (str, bytes))):
        errors.append("components must be an array")
        components = None

    for index, component in enumerate(components or ()):
        where = f"Component {index}"
        if not isinstance(component, Mapping):
            errors.append(f"{where} must be an object")
            continue
        errors.extend(f"{where} missing required key: {key}" for key in COMPONENT_KEYS if key not in component)
        fields = component.get("fields")
        if isinstance(fields, Sequence) and not isinstance(fields, (str, bytes)):
            _validate_fields(fields, where, registry, errors, warnings)
        elif "fields" in component:
            errors.append(f"{where} fields must be an array")

    return ValidationReport(valid=not errors, errors=errors, warnings=warnings)


def _validate_fields(
    fields: Sequence[Any],
    where: str,
    registry: FieldTypeRegistry,
    errors: list[str],
    warnings: list[str],
) -> None:
    seen: set[str] = set()
    for index, field in enumerate(fields):
        location = f"{where}, Field {index}"
        if not isinstance(field, Mapping):
            errors.append(f"{location} must be an object")
            continue
        errors.extend(f"{location} missing required key: {key}" for key in FIELD_KEYS if key not in field)

        name = field.get("name")
        if isinstance(name, str):
            if name in seen:
                warnings.append(f"{location} duplicates field name '{name}'")
            seen.add(name)
            if sanitize_name(name) != name:
                warnings.append(f"{location} name '{name}' is not a sanitized identifier")

        kind = field.get("field")
        if "field" not in field:
            continue
        if kind not in registry:
            errors.append(f"{location} has unknown field type: {kind}")
            continue

        attributes = field.get("attribute") or {}
        if not isinstance(attributes, Mapping):
            errors.append(f"{location} attribute must be an object")
            continue
        for attribute in registry.lookup(kind).required_attributes:
            if attribute not in attributes:
                errors.append(f"{location} ({kind}) missing required attribute: {attribute}")

        nested = attributes.get("fields")
        if isinstance(nested, Sequence) and not isinstance(nested, (str, bytes)) and nested:
            _validate_fields(nested, f"{location} > {name}", registry, errors, warnings)


__all__ = ["validate_template"]
