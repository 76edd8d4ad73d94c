import json
from pathlib import Path

import pytest

from content_schema_drafter.errors import TemplateGenerationError, UnsupportedFieldKind
from content_schema_drafter.generator import TemplateAssembler, TemplateGenerator
from content_schema_drafter.models.analysis import Archetype
from content_schema_drafter.models.section import Section
from content_schema_drafter.registry import default_registry
from content_schema_drafter.validator import validate_template

SAMPLES = Path(__file__).resolve().parent.parent / "data" / "samples"


def load_sample(name: str) -> str:
    return (SAMPLES / name).read_text(encoding="utf-8")


@pytest.fixture
def generator() -> TemplateGenerator:
    return TemplateGenerator()


def keys_of(result):
    return [section.key_name for section in result.template.components]


def fields_by_name(section: Section):
    return {field.name: field for field in section.fields}


def test_generate_template_from_presets(generator):
    result = generator.generate_template(
        "Landing Page",
        "Landing",
        sections=["navigation", "hero", "features", "gallery", "pricing", "footer"],
        include_cta=True,
        max_features=8,
        max_gallery_images=20,
    )
    template = result.template

    assert template.name == "landing_page"
    assert template.description == "Landing template"
    assert keys_of(result) == ["hero_section", "features_section", "gallery_section", "pricing_section"]
    assert [section.order for section in template.components] == [1, 2, 3, 4]

    hero, features, gallery, pricing = template.components
    cta = fields_by_name(hero)["cta_button"]
    assert cta.kind == "group"
    assert [field.name for field in cta.nested_fields] == ["label", "url"]
    assert fields_by_name(features)["features"].attributes["max"] == 8
    assert fields_by_name(gallery)["gallery_images"].attributes["max"] == 20
    assert fields_by_name(pricing)["pricing"].kind == "repeater"
    assert [analysis.archetype for analysis in result.analyses] == [Archetype.repeater]
    assert result.issues == []


def test_hero_without_cta(generator):
    result = generator.generate_template("landing", "Landing", sections=["hero"])

    assert "cta_button" not in fields_by_name(result.template.components[0])


def test_layout_sections_can_be_kept(generator):
    result = generator.generate_template("landing", "Landing", sections=["navigation", "hero"], is_exclude_sections=False)

    assert keys_of(result) == ["navigation_section", "hero_section"]
    keeping = TemplateGenerator(exclude_layout_sections=False)
    assert keys_of(keeping.generate_template("landing", "Landing", sections=["footer"])) == ["footer_section"]


def test_custom_section_uses_description_for_collections(generator):
    result = generator.generate_template(
        "agency",
        "Agency",
        sections=["case_studies"],
        description="Case studies with a see more link to the archive",
    )

    assert keys_of(result) == ["case_studies_section"]
    assert [post_type.slug for post_type in result.post_types] == ["case-studies"]


@pytest.mark.parametrize(("name", "label"), [("!!!", "Landing"), ("", "Landing"), (None, "Landing"), ("landing", "  ")])
def test_invalid_identifiers(generator, name, label):
    with pytest.raises(TemplateGenerationError):
        generator.generate_template(name, label, sections=["hero"])


def test_invalid_section_names_are_reported(generator):
    result = generator.generate_template("landing", "Landing", sections=["hero", "???"])

    assert keys_of(result) == ["hero_section"]
    assert result.issues == ["skipped invalid section name: '???'"]


def test_generate_from_markup_and_metadata(generator):
    result = generator.generate_from_markup(
        load_sample("landing.html"),
        json.loads(load_sample("metadata.json")),
        name="landing",
    )

    assert keys_of(result) == [
        "hero_section",
        "team_members_section",
        "projects_section",
        "contact_section",
        "photo_gallery_section",
        "testimonials_section",
        "pricing_section",
    ]
    archetypes = {analysis.section: analysis.archetype for analysis in result.analyses}
    assert archetypes == {
        "hero_section": Archetype.single,
        "team_members_section": Archetype.repeater,
        "projects_section": Archetype.post_collection,
        "contact_section": Archetype.group,
        "photo_gallery_section": Archetype.media_gallery,
        "testimonials_section": Archetype.post_collection,
        "pricing_section": Archetype.repeater,
    }
    assert [post_type.slug for post_type in result.post_types] == ["projects", "testimonials"]
    assert result.template.label == "Landing"
    assert validate_template(result.template.to_dict(), generator.registry).valid


def test_contact_group_keeps_form_controls(generator):
    result = generator.generate_from_markup(load_sample("landing.html"), name="landing")
    contact = next(section for section in result.template.components if section.key_name == "contact_section")

    group = fields_by_name(contact)["contact"]
    children = {field.name: field for field in group.nested_fields}
    assert children["email"].attributes["type"] == "email"
    assert children["email"].attributes["is_required"] is True
    assert children["message"].kind == "textarea"
    assert {"submit_text", "submit_link"} <= set(children)


def test_generate_from_json(generator):
    result = generator.generate_from_json(json.loads(load_sample("site.json")), "site")

    assert keys_of(result) == ["hero_section", "features_section", "about_section"]
    features = fields_by_name(result.template.components[1])["features"]
    assert [(field.name, field.kind) for field in features.nested_fields] == [
        ("icon", "media"),
        ("title", "input"),
        ("description", "textarea"),
    ]
    about = fields_by_name(result.template.components[2])["about"]
    nested = {field.name: field for field in about.nested_fields}
    assert nested["hiring"].kind == "toggle"
    assert nested["body"].kind == "texteditor"
    assert nested["contact_info"].kind == "group"
    assert nested["tags"].kind == "repeater"


def test_generate_from_prompt(generator):
    prompt = (
        'Create an AntiCMS v3 template called "agency" with hero, features, '
        "projects showcase with see more button, testimonials, and contact sections"
    )

    result = generator.generate_from_prompt(prompt)
    template = result.template

    assert template.name == "agency"
    assert template.description == prompt
    assert template.multilanguage is False
    assert template.is_content is False
    assert keys_of(result) == [
        "hero_section",
        "features_section",
        "projects_section",
        "testimonials_section",
        "contact_section",
    ]
    assert "cta_button" in fields_by_name(template.components[0])
    assert "projects" in [post_type.slug for post_type in result.post_types]


def test_prompt_flags_and_empty_prompt(generator):
    blog = generator.generate_from_prompt("A multilingual blog with news and an about us page")
    assert blog.template.is_content is True
    assert blog.template.multilanguage is True
    assert blog.template.name == "custom_template"

    empty = generator.generate_from_prompt("Something nice please")
    assert empty.template.components == []
    assert empty.issues == ["no known sections found in prompt"]


def test_generate_field(generator):
    field = generator.generate_field("Hero Title", "Hero Title", "input", multilanguage=True)

    assert field.to_dict() == {
        "name": "hero_title",
        "label": "Hero Title",
        "field": "input",
        "multilanguage": True,
        "attribute": {"type": "text", "placeholder": "Enter hero title", "maxLength": 100},
    }
    with pytest.raises(UnsupportedFieldKind):
        generator.generate_field("x", "X", "carousel")


def test_list_field_types(generator):
    assert len(generator.list_field_types()) == 12
    assert generator.registry is default_registry()


def test_assembler_orders_sections():
    assembler = TemplateAssembler()

    first = assembler.add(Section(key_name="a_section", label="A", order=5))
    second = assembler.add(Section(key_name="b_section", label="B", order=5))
    assembler.add(Section(key_name="c_section", label="C", order=9), order=1)
    assembler.add(Section(key_name="d_section", label="D", order=9), order=3)

    assert (first.order, second.order) == (1, 2)
    assert [(section.key_name, section.order) for section in assembler.sections] == [
        ("a_section", 1),
        ("c_section", 1),
        ("b_section", 2),
        ("d_section", 3),
    ]
    assert assembler.next_order() == 4


def test_model_dump_serializes_sections_as_strings(generator):
    dumped = generator.generate_template("landing", "Landing", sections=["hero", "contact"]).model_dump()

    assert [component["section"] for component in dumped["template"]["components"]] == ["1", "2"]
    assert dumped["template"]["components"][0]["keyName"] == "hero_section"
    assert dumped["post_types"] == []
    assert dumped["issues"] == []


def test_generate_template_skips_duplicate_sections(generator):
    result = generator.generate_template("landing", "Landing", sections=["hero", "hero_section", "features"])

    assert keys_of(result) == ["hero_section", "features_section"]
    assert result.issues == ["skipped duplicate section: hero_section"]


def test_json_section_named_status_has_unique_field_names(generator):
    result = generator.generate_from_json({"status": [{"a": "x", "b": "y"}] * 5}, "x")

    names = [field.name for field in result.template.components[0].fields]
    assert names == ["status", "status_2"]
    assert validate_template(result.template.to_dict(), generator.registry).warnings == []


def test_json_social_object_keeps_every_link(generator):
    result = generator.generate_from_json({"social": {"facebook": "https://fb.com/x", "twitter": "https://t.co/x"}}, "x")

    social = fields_by_name(result.template.components[0])["social"]
    assert social.kind == "group"
    assert [(field.name, field.kind) for field in social.nested_fields] == [("facebook", "input"), ("twitter", "input")]


def test_field_type_examples(generator):
    examples = generator.field_type_examples("media")

    assert examples[0] == {"name": "image", "label": "Image", "field": "media", "attribute": {"accept": ["image"]}}
    assert generator.field_type_examples("repeater")[0]["name"] == "items"
    with pytest.raises(UnsupportedFieldKind):
        generator.field_type_examples("carousel")
