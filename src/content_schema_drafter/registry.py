from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence

from pydantic import ValidationError

from .dictionaries import BUILTIN_FIELD_TYPES
from .errors import RegistryLoadError, UnsupportedFieldKind
from .models.field import FieldExample, FieldKind, FieldTypeSpec

logger = logging.getLogger(__name__)


class FieldTypeRegistry:
    """Catalog of field kinds with their allowed/required attributes and examples.

    Instances are read-only once built; pass them explicitly to every component
    that constructs fields.
    """

    def __init__(self, specs: Mapping[str, FieldTypeSpec]) -> None:
        self._specs = dict(specs)

    def lookup(self, kind: object) -> FieldTypeSpec:
        if not isinstance(kind, str) or kind not in self._specs:
            raise UnsupportedFieldKind(kind)
        return self._specs[kind]

    def examples_for(self, kind: str) -> Sequence[FieldExample]:
        return self.lookup(kind).examples

    def kinds(self) -> list[str]:
        return list(self._specs)

    def describe(self) -> list[dict[str, Any]]:
        return [spec.describe() for spec in self._specs.values()]

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, str) and kind in self._specs

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "FieldTypeRegistry":
        """Build a registry from ``{kind: {attributes, requiredAttributes, defaults, examples}}``.

        ``examples`` may be a list of example fields or a mapping of example
        key to example field.
        """
        if not isinstance(document, Mapping) or not document:
            raise RegistryLoadError("Registry document must be a non-empty object")
        specs: dict[str, FieldTypeSpec] = {}
        for kind, entry in document.items():
            if not isinstance(entry, Mapping):
                raise RegistryLoadError(f"Registry entry for {kind!r} must be an object")
            examples = entry.get("examples") or []
            if isinstance(examples, Mapping):
                examples = list(examples.values())
            try:
                specs[kind] = FieldTypeSpec.model_validate(
                    {
                        "kind": kind,
                        "attributes": tuple(entry.get("attributes", ())),
                        "requiredAttributes": tuple(entry.get("requiredAttributes", entry.get("required_attributes", ()))),
                        "defaults": dict(entry.get("defaults") or {}),
                        "examples": tuple(FieldExample.model_validate(item) for item in examples),
                    }
                )
            except (ValidationError, TypeError) as exc:
                raise RegistryLoadError(f"Invalid registry entry for {kind!r}: {exc}") from exc
        return cls(specs)


def read_registry(path: Path) -> FieldTypeRegistry:
    """Strict loader: raise ``RegistryLoadError`` on any failure."""
    try:
        with path.open("r", encoding="utf-8") as fp:
            document = json.load(fp)
    except (OSError, json.JSONDecodeError) as exc:
        raise RegistryLoadError(f"Unable to read field-type registry {path}: {exc}") from exc
    return FieldTypeRegistry.from_document(document)


def load_registry(path: Path | str | None) -> FieldTypeRegistry:
    """Load a registry from ``path``, degrading to the fallback registry on failure."""
    if path is None:
        return default_registry()
    try:
        registry = read_registry(Path(path))
    except RegistryLoadError as exc:
        logger.warning(
            "Falling back to minimal field-type registry",
            extra={"registry_path": str(path), "error": str(exc)},
        )
        return fallback_registry()
    logger.info("Loaded field-type registry", extra={"registry_path": str(path), "kinds": len(registry)})
    return registry


def fallback_registry() -> FieldTypeRegistry:
    """Minimal registry: the built-in kind names only, no attributes and no examples."""
    return FieldTypeRegistry({kind.value: FieldTypeSpec(kind=kind.value) for kind in FieldKind})


@lru_cache(maxsize=1)
def default_registry() -> FieldTypeRegistry:
    return FieldTypeRegistry(BUILTIN_FIELD_TYPES)


__all__ = [
    "FieldTypeRegistry",
    "default_registry",
    "fallback_registry",
    "load_registry",
    "read_registry",
]
