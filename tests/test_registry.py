import logging
from pathlib import Path

import pytest

from content_schema_drafter.errors import RegistryLoadError, UnsupportedFieldKind
from content_schema_drafter.models.field import FieldKind
from content_schema_drafter.registry import (
    FieldTypeRegistry,
    default_registry,
    fallback_registry,
    load_registry,
    read_registry,
)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
REGISTRY_PATH = DATA_DIR / "field-types" / "registry.json"


def test_default_registry_covers_every_kind():
    registry = default_registry()

    assert set(registry.kinds()) == {kind.value for kind in FieldKind}
    assert registry.lookup("input").required_attributes == ("type",)
    assert registry.lookup("post_related").required_attributes == ("api_prefix",)
    assert "select" in registry
    assert "unknown" not in registry
    assert default_registry() is registry


def test_lookup_unknown_kind_raises():
    with pytest.raises(UnsupportedFieldKind) as excinfo:
        default_registry().lookup("carousel")

    assert excinfo.value.kind == "carousel"
    assert "Unsupported field type: carousel" in str(excinfo.value)


def test_describe_lists_kinds_in_order():
    listing = default_registry().describe()

    assert listing[0] == {
        "type": "input",
        "attributes": ["type", "is_required", "placeholder", "defaultValue", "maxLength", "minLength"],
        "required_attributes": ["type"],
    }
    assert [entry["type"] for entry in listing] == default_registry().kinds()


def test_load_registry_from_data_file():
    registry = load_registry(REGISTRY_PATH)

    assert len(registry) == 12
    assert [example.name for example in registry.examples_for("input")] == ["title", "email", "phone", "website"]
    assert registry.examples_for("media")[1].attributes["resolution"]["minWidth"] == 1200
    assert registry.lookup("input").defaults == {"type": "text"}


def test_load_registry_falls_back_on_bad_file(tmp_path, caplog):
    broken = tmp_path / "registry.json"
    broken.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        registry = load_registry(broken)

    assert len(registry) == 12
    assert all(not registry.examples_for(kind) for kind in registry)
    assert all(not registry.lookup(kind).required_attributes for kind in registry)
    assert "Falling back" in caplog.text


def test_load_registry_without_path_uses_builtin():
    assert load_registry(None) is default_registry()


def test_read_registry_is_strict(tmp_path):
    with pytest.raises(RegistryLoadError):
        read_registry(tmp_path / "missing.json")


def test_from_document_rejects_malformed_entries():
    with pytest.raises(RegistryLoadError):
        FieldTypeRegistry.from_document({"input": ["type"]})
    with pytest.raises(RegistryLoadError):
        FieldTypeRegistry.from_document({})


def test_fallback_registry_has_kind_names_only():
    registry = fallback_registry()

    assert sorted(registry.kinds()) == sorted(kind.value for kind in FieldKind)
    assert registry.lookup("media").allowed_attributes == ()
