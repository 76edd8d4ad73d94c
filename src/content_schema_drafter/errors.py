from __future__ import annotations


class SchemaDrafterError(RuntimeError):
    """Base class for errors raised while drafting template schemas."""


class UnsupportedFieldKind(SchemaDrafterError):
    """Raised when a field kind is not declared in the field-type registry."""

    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"Unsupported field type: {kind}")


class InvalidFieldName(SchemaDrafterError):
    """Raised when a field name or label is empty or cannot be sanitized."""

    def __init__(self, value: object, reason: str = "field name must be a non-empty string") -> None:
        self.value = value
        super().__init__(f"Invalid field name {value!r}: {reason}")


class MissingRequiredAttribute(SchemaDrafterError):
    """Raised when a required attribute has neither a value nor a known default."""

    def __init__(self, kind: str, attribute: str) -> None:
        self.kind = kind
        self.attribute = attribute
        super().__init__(f"Field type {kind!r} requires attribute {attribute!r} but no default is declared")


class RegistryLoadError(SchemaDrafterError):
    """Raised when a field-type registry document cannot be read or validated."""


class TemplateGenerationError(SchemaDrafterError):
    """Raised when a template cannot be generated from the supplied identifiers."""


__all__ = [
    "InvalidFieldName",
    "MissingRequiredAttribute",
    "RegistryLoadError",
    "SchemaDrafterError",
    "TemplateGenerationError",
    "UnsupportedFieldKind",
]
