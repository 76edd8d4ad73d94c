import re

import pytest

from content_schema_drafter.errors import InvalidFieldName, MissingRequiredAttribute, UnsupportedFieldKind
from content_schema_drafter.field_builder import FieldBuilder, build_field, sanitize_name, select_example
from content_schema_drafter.models.field import FieldDefinition, FieldExample, FieldTypeSpec
from content_schema_drafter.registry import FieldTypeRegistry, default_registry

SANITIZED = re.compile(r"^[a-z0-9_]*$")


@pytest.fixture
def builder() -> FieldBuilder:
    return FieldBuilder(default_registry())


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Hero Title", "hero_title"),
        ("__CTA--Button__", "cta_button"),
        ("  email  ", "email"),
        ("Prix (€)", "prix"),
        ("a...b", "a_b"),
        ("!!!", ""),
    ],
)
def test_sanitize_name(raw, expected):
    sanitized = sanitize_name(raw)

    assert sanitized == expected
    assert SANITIZED.match(sanitized)
    assert "__" not in sanitized
    assert not sanitized.startswith("_") and not sanitized.endswith("_")
    assert sanitize_name(sanitized) == sanitized


def test_hero_media_gets_hero_resolution(builder):
    field = builder.build("hero_background_image", "Background Image", "media", {}, "hero")

    assert field.attributes["resolution"] == {"minWidth": 1200, "maxWidth": 1920, "minHeight": 600, "maxHeight": 1080}
    assert field.attributes["accept"] == ["image"]


def test_status_toggle_defaults(builder):
    field = builder.build("status", "Status", "toggle", {}, "contact")

    assert field.attributes["defaultValue"] is True
    assert field.attributes["caption"] == "Enable or disable the contact section"


def test_unsupported_kind(builder):
    with pytest.raises(UnsupportedFieldKind):
        builder.build("x", "X", "unknown_kind", {}, "")


@pytest.mark.parametrize(("name", "label"), [("", "Label"), ("title", ""), (None, "Label"), ("title", 3), ("!!!", "Bang")])
def test_invalid_names(builder, name, label):
    with pytest.raises(InvalidFieldName):
        builder.build(name, label, "input", {}, "")


def test_building_twice_is_deep_equal_and_unaliased(builder):
    first = builder.build("hero_image", "Hero Image", "media", {}, "hero")
    second = builder.build("hero_image", "Hero Image", "media", {}, "hero")
    assert first == second

    first.attributes["resolution"]["minWidth"] = 1
    third = builder.build("hero_image", "Hero Image", "media", {}, "hero")
    assert third.attributes["resolution"]["minWidth"] == 1200
    assert default_registry().lookup("media").examples[1].attributes["resolution"]["minWidth"] == 1200


def test_required_attributes_always_present(builder):
    registry = builder.registry
    for kind in registry.kinds():
        field = builder.build("sample", "Sample", kind, {}, "")
        for attribute in registry.lookup(kind).required_attributes:
            assert attribute in field.attributes, f"{kind} is missing {attribute}"


def test_required_fallbacks(builder):
    assert builder.build("tags", "Tags", "select", {}, "").attributes["options"][0] == {"label": "Option 1", "value": "option_1"}
    assert builder.build("related", "Related", "relationship", {}, "").attributes["filter"] == {
        "post_type": ["post"],
        "post_status": "publish",
    }
    assert builder.build("posts", "Posts", "post_related", {}, "").attributes["api_prefix"] == "/api/v1/"
    assert len(builder.build("prices", "Prices", "table", {}, "").attributes["columns"]) == 2


def test_caller_options_win(builder):
    field = builder.build("email", "Email", "input", {"placeholder": "Your email", "type": "text"}, "")

    assert field.attributes["placeholder"] == "Your email"
    assert field.attributes["type"] == "text"


def test_synthesized_placeholder_beats_unrelated_example(builder):
    field = builder.build("email", "Email", "input", {}, "")

    # example placeholder "user@example.com" does not mention "email"
    assert field.attributes["placeholder"] == "contact@example.com"
    assert field.attributes["type"] == "email"


def _headline_registry(placeholder: str) -> FieldTypeRegistry:
    example = FieldExample(
        name="headline",
        label="Headline",
        attributes={"placeholder": placeholder, "caption": "Shown above the fold"},
    )
    spec = FieldTypeSpec(kind="input", required_attributes=("type",), examples=(example,))
    return FieldTypeRegistry({"input": spec})


def test_example_placeholder_mentioning_field_wins():
    field = build_field("headline", "Headline", "input", {}, _headline_registry("Type the headline here"))

    assert field.attributes["placeholder"] == "Type the headline here"
    assert field.attributes["caption"] == "Shown above the fold"


def test_example_placeholder_not_mentioning_field_loses():
    field = build_field("headline", "Headline", "input", {}, _headline_registry("Type something"))

    assert field.attributes["placeholder"] == "Enter headline"


def test_input_type_option_maps_to_type(builder):
    field = builder.build("contact", "Contact", "input", {"inputType": "email"}, "")

    assert field.attributes["type"] == "email"
    assert "inputType" not in field.attributes


def test_multilanguage_only_when_supplied(builder):
    plain = builder.build("title", "Title", "input", {}, "")
    explicit = builder.build("title", "Title", "input", {"multilanguage": False}, "")

    assert plain.multilanguage is None
    assert "multilanguage" not in plain.to_dict()
    assert explicit.to_dict()["multilanguage"] is False
    assert "multilanguage" not in explicit.attributes


def test_nested_fields_are_validated(builder):
    field = builder.build(
        "faq",
        "FAQ",
        "repeater",
        {"fields": [{"name": "question", "label": "Question", "field": "input", "attribute": {"type": "text"}}]},
        "faq",
    )
    assert isinstance(field.attributes["fields"][0], FieldDefinition)
    assert field.to_dict()["attribute"]["fields"][0] == {
        "name": "question",
        "label": "Question",
        "field": "input",
        "attribute": {"type": "text"},
    }

    with pytest.raises(UnsupportedFieldKind):
        builder.build("faq", "FAQ", "group", {"fields": [{"name": "q", "label": "Q", "field": "bogus"}]}, "")


def test_repeater_without_fields_uses_example_fields(builder):
    field = builder.build("team_members", "Team Members", "repeater", {}, "team")

    assert [child.name for child in field.nested_fields] == ["name", "position", "bio", "photo"]
    assert (field.attributes["min"], field.attributes["max"]) == (1, 12)


def test_registry_defaults_before_hard_coded_fallbacks():
    spec = FieldTypeSpec(kind="clip", required_attributes=("accept",), defaults={"accept": ["video"]})
    registry = FieldTypeRegistry({"clip": spec, "still": FieldTypeSpec(kind="still", required_attributes=("accept",))})

    assert build_field("intro", "Intro", "clip", {}, registry).attributes == {"accept": ["video"]}
    assert build_field("cover", "Cover", "still", {}, registry).attributes == {"accept": ["image"]}


def test_missing_required_attribute_without_default():
    registry = FieldTypeRegistry({"rating": FieldTypeSpec(kind="rating", required_attributes=("scale",))})

    with pytest.raises(MissingRequiredAttribute) as excinfo:
        build_field("stars", "Stars", "rating", {}, registry)
    assert excinfo.value.attribute == "scale"


def test_select_example_scoring():
    plain = FieldExample(name="alpha", label="Alpha")
    other = FieldExample(name="beta", label="Beta")
    assert select_example([plain, other], "zeta") is plain

    rich = FieldExample(name="gamma", label="Gamma", attributes={"a": 1, "b": 2})
    assert select_example([plain, rich], "zeta") is rich

    tie_one = FieldExample(name="one", label="One", attributes={"a": 1})
    tie_two = FieldExample(name="two", label="Two", attributes={"b": 1})
    assert select_example([tie_one, tie_two], "zeta") is tie_one

    hero = FieldExample(name="hero_banner", label="Hero Banner")
    assert select_example([tie_one, hero], "zeta", context="hero") is hero

    typed = FieldExample(name="three", label="Three", attributes={"type": "email"})
    assert select_example([tie_one, typed], "zeta", options={"inputType": "email"}) is typed

    assert select_example([], "zeta") is None
