import json
from pathlib import Path

from content_schema_drafter.ingestors.elements import assign_role, is_layout_section, section_from_name, section_key
from content_schema_drafter.ingestors.markup import MarkupIngestor
from content_schema_drafter.ingestors.metadata import MetadataIngestor
from content_schema_drafter.ingestors.prompt import PromptIngestor
from content_schema_drafter.ingestors.structured import StructuredIngestor, singular
from content_schema_drafter.models.section import ElementType

SAMPLES = Path(__file__).resolve().parent.parent / "data" / "samples"

AGENCY_PROMPT = (
    'Create an AntiCMS v3 template called "agency" with hero, features, '
    "projects showcase with see more button, testimonials, and contact sections"
)


def load_sample(name: str) -> str:
    return (SAMPLES / name).read_text(encoding="utf-8")


def test_role_assignment():
    assert assign_role(ElementType.text, "subtitle", "Short") == "description"
    assert assign_role(ElementType.text, "title", "x") == "heading"
    assert assign_role(ElementType.button, "cta", "Go") == "cta"
    assert assign_role(ElementType.text, None, "View more projects") == "see_more"
    assert assign_role(ElementType.text, None, "x" * 120) == "description"
    assert assign_role(ElementType.text, None, "y" * 60) == "subtitle"
    assert assign_role(ElementType.text, None, "Meet the team") == "heading"
    assert assign_role(ElementType.input, "work_email", "") == "email"


def test_section_names():
    assert section_key("Hero Section") == "hero"
    assert section_key("Case Studies") == "case_studies"
    assert is_layout_section("Main Navigation")
    assert is_layout_section("footer_section")
    assert not is_layout_section("about")


def test_markup_sections_in_document_order():
    sections = MarkupIngestor().parse(load_sample("landing.html"))

    assert [section.name for section in sections] == [
        "navigation",
        "hero",
        "team_members",
        "projects",
        "contact",
        "footer",
    ]


def test_markup_hero_elements():
    hero = MarkupIngestor().parse(load_sample("landing.html"))[1]

    assert [element.type for element in hero.elements] == [
        ElementType.text,
        ElementType.text,
        ElementType.image,
        ElementType.button,
    ]
    assert [element.role for element in hero.elements] == ["heading", "description", None, "cta"]
    assert hero.elements[3].attributes["href"] == "/start"
    assert hero.label == "Hero"


def test_markup_repeated_blocks_are_flagged():
    team = MarkupIngestor().parse(load_sample("landing.html"))[2]

    assert team.patterns.is_repeater
    assert team.patterns.has_image_grid
    assert len(team.elements) == 9
    assert sum(element.repeated for element in team.elements) == 6
    assert [element.name for element in team.elements if element.attributes["item"] == 0] == ["photo", "name", "position"]


def test_markup_form_controls():
    sections = MarkupIngestor().parse(load_sample("landing.html"))
    projects, contact = sections[3], sections[4]

    assert any(element.role == "see_more" for element in projects.elements)
    email = next(element for element in contact.elements if element.type is ElementType.input)
    assert email.role == "email"
    assert email.attributes == {"input_type": "email", "required": True}
    message = next(element for element in contact.elements if element.type is ElementType.textarea)
    assert message.attributes["placeholder"] == "Your message"


def test_markup_tolerates_unclosed_tags():
    sections = MarkupIngestor().parse('<div data-type="FRAME" data-name="Intro"><h2>Welcome<p>Some words')

    assert len(sections) == 1
    assert sections[0].name == "intro"
    assert sections[0].elements[0].content == "Welcome Some words"


def test_metadata_sections():
    metadata = json.loads(load_sample("metadata.json"))

    sections = MetadataIngestor().parse(metadata)

    assert [section.name for section in sections] == ["photo_gallery", "testimonials", "pricing"]
    gallery, testimonials, pricing = sections
    assert gallery.patterns.has_image_grid
    assert all(element.content != "draft" for element in gallery.elements)
    assert testimonials.patterns.is_repeater
    assert pricing.source == "metadata"


def test_metadata_nodes_response():
    frame = {
        "type": "FRAME",
        "name": "Newsletter",
        "children": [
            {"type": "TEXT", "name": "Title", "characters": "Stay in touch"},
            {"type": "INSTANCE", "name": "Email Input", "children": [{"type": "TEXT", "name": "Hint", "characters": "you@example.com"}]},
            {"type": "INSTANCE", "name": "Button", "children": [{"type": "TEXT", "name": "Label", "characters": "Subscribe"}]},
        ],
    }

    sections = MetadataIngestor().parse({"nodes": {"5:1": {"document": frame}}})

    assert len(sections) == 1
    assert [element.type for element in sections[0].elements] == [ElementType.text, ElementType.input, ElementType.button]
    assert sections[0].elements[2].content == "Subscribe"


def test_structured_payload():
    payload = json.loads(load_sample("site.json"))

    sections = StructuredIngestor().parse(payload)
    by_name = {section.name: section for section in sections}

    assert list(by_name) == ["hero", "features", "about", "footer"]
    assert [element.type for element in by_name["hero"].elements] == [
        ElementType.text,
        ElementType.text,
        ElementType.image,
        ElementType.button,
    ]
    features = by_name["features"]
    assert features.patterns.is_repeater
    assert len(features.elements) == 9
    assert sum(element.repeated for element in features.elements) == 6

    about = {element.name: element for element in by_name["about"].elements}
    assert about["founded"].attributes["value_kind"] == "number"
    assert about["hiring"].attributes["value_kind"] == "boolean"
    assert about["body"].attributes["value_kind"] == "html"
    assert about["contact_info"].structure == "group"
    assert [child.name for child in about["contact_info"].children] == ["email", "phone"]
    assert about["tags"].structure == "repeater"
    assert [child.name for child in about["tags"].children] == ["tag"]


def test_structured_flattens_plain_nested_objects():
    sections = StructuredIngestor().parse({"hero": {"media": {"image": "a.png"}, "title": "Hi"}})

    assert [element.name for element in sections[0].elements] == ["media_image", "title"]


def test_structured_social_object_becomes_group():
    sections = StructuredIngestor().parse({"social": {"facebook": "https://fb.com/x", "twitter": "https://t.co/x"}})

    (group,) = sections[0].elements
    assert sections[0].patterns.is_group
    assert (group.name, group.structure) == ("social", "group")
    assert [child.name for child in group.children] == ["facebook", "twitter"]


def test_singular():
    assert singular("tags") == "tag"
    assert singular("categories") == "category"
    assert singular("boxes") == "box"
    assert singular("news") == "news_item"


def test_prompt_intent():
    intent = PromptIngestor().parse(AGENCY_PROMPT)

    assert intent.name == "agency"
    assert intent.sections == ["hero", "features", "projects", "testimonials", "contact"]
    assert "projects" in intent.collections
    assert "hero" not in intent.collections
    assert intent.include_cta
    assert intent.template_type == "pages"
    assert not intent.multilanguage


def test_prompt_flags():
    intent = PromptIngestor().parse("A multilingual blog with news and an about us page")

    assert intent.sections == ["blog", "news", "about"]
    assert intent.template_type == "posts"
    assert intent.is_content
    assert intent.multilanguage
    assert not intent.include_cta
    assert intent.name is None


def test_prompt_sections_use_blueprints():
    ingestor = PromptIngestor()
    sections = ingestor.to_sections(ingestor.parse(AGENCY_PROMPT))
    projects = next(section for section in sections if section.name == "projects")

    assert projects.elements[-1].role == "see_more"
    assert projects.patterns.is_repeater


def test_section_from_unknown_name():
    section = section_from_name("Brand Story")

    assert section.name == "brand_story"
    assert section.label == "Brand Story Section"
    assert [element.role for element in section.elements] == ["heading", "subtitle"]
