from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .models.field import FieldExample, FieldKind, FieldTypeSpec


def _example(name: str, label: str, kind: FieldKind, attributes: Mapping[str, Any], **extra: Any) -> FieldExample:
    return FieldExample(name=name, label=label, kind=kind.value, attributes=dict(attributes), **extra)


BUILTIN_FIELD_TYPES: Mapping[str, FieldTypeSpec] = {
    FieldKind.input.value: FieldTypeSpec(
        kind=FieldKind.input.value,
        allowed_attributes=("type", "is_required", "placeholder", "defaultValue", "maxLength", "minLength"),
        required_attributes=("type",),
        defaults={"type": "text"},
        examples=(
            _example("title", "Title", FieldKind.input, {"placeholder": "Enter title", "maxLength": 100}, multilanguage=True),
            _example("email", "Email Address", FieldKind.input, {"type": "email", "placeholder": "user@example.com"}),
            _example("phone", "Phone", FieldKind.input, {"type": "tel", "placeholder": "+1 (555) 123-4567"}),
            _example("website", "Website URL", FieldKind.input, {"type": "url", "placeholder": "https://example.com"}),
            _example("price", "Price", FieldKind.input, {"type": "number", "placeholder": "0.00"}),
        ),
    ),
    FieldKind.textarea.value: FieldTypeSpec(
        kind=FieldKind.textarea.value,
        allowed_attributes=("rows", "cols", "max", "min", "placeholder", "is_required", "defaultValue", "caption"),
    ),
    FieldKind.texteditor.value: FieldTypeSpec(
        kind=FieldKind.texteditor.value,
        allowed_attributes=("type", "rows", "cols", "max", "min", "placeholder", "is_required", "defaultValue", "caption"),
        required_attributes=("type",),
        defaults={"type": "text"},
    ),
    FieldKind.select.value: FieldTypeSpec(
        kind=FieldKind.select.value,
        allowed_attributes=("options", "is_required", "placeholder", "caption", "defaultValue"),
        required_attributes=("options",),
    ),
    FieldKind.toggle.value: FieldTypeSpec(
        kind=FieldKind.toggle.value,
        allowed_attributes=("caption", "defaultValue"),
    ),
    FieldKind.media.value: FieldTypeSpec(
        kind=FieldKind.media.value,
        allowed_attributes=("accept", "resolution"),
        required_attributes=("accept",),
        defaults={"accept": ["image"]},
        examples=(
            _example("image", "Image", FieldKind.media, {"accept": ["image"]}),
            _example(
                "hero_image",
                "Hero Image",
                FieldKind.media,
                {"resolution": {"minWidth": 1200, "maxWidth": 1920, "minHeight": 600, "maxHeight": 1080}},
            ),
            _example("document", "Document", FieldKind.media, {"accept": ["document"]}),
            _example("video", "Video", FieldKind.media, {"accept": ["video"]}),
        ),
    ),
    FieldKind.repeater.value: FieldTypeSpec(
        kind=FieldKind.repeater.value,
        allowed_attributes=("fields", "min", "max", "caption"),
        required_attributes=("fields",),
        examples=(
            _example(
                "items",
                "Items",
                FieldKind.repeater,
                {
                    "fields": [
                        {"name": "title", "label": "Title", "field": "input", "multilanguage": True, "attribute": {"type": "text"}},
                        {"name": "description", "label": "Description", "field": "textarea", "multilanguage": True, "attribute": {"rows": 3}},
                    ]
                },
            ),
            _example(
                "team_members",
                "Team Members",
                FieldKind.repeater,
                {
                    "fields": [
                        {"name": "name", "label": "Name", "field": "input", "multilanguage": True, "attribute": {"type": "text", "is_required": True, "placeholder": "Full name"}},
                        {"name": "position", "label": "Position", "field": "input", "multilanguage": True, "attribute": {"type": "text", "placeholder": "Job title"}},
                        {"name": "bio", "label": "Bio", "field": "textarea", "multilanguage": True, "attribute": {"rows": 4, "max": 300, "placeholder": "Short bio"}},
                        {"name": "photo", "label": "Photo", "field": "media", "attribute": {"accept": ["image"]}},
                    ]
                },
            ),
        ),
    ),
    FieldKind.group.value: FieldTypeSpec(
        kind=FieldKind.group.value,
        allowed_attributes=("fields", "caption"),
        required_attributes=("fields",),
    ),
    FieldKind.relationship.value: FieldTypeSpec(
        kind=FieldKind.relationship.value,
        allowed_attributes=("filter", "min", "max", "api_url", "caption", "is_required"),
        required_attributes=("filter",),
    ),
    FieldKind.post_object.value: FieldTypeSpec(
        kind=FieldKind.post_object.value,
        allowed_attributes=("filter", "multiple", "caption", "is_required"),
        required_attributes=("filter",),
    ),
    FieldKind.post_related.value: FieldTypeSpec(
        kind=FieldKind.post_related.value,
        allowed_attributes=("api_prefix", "post_type", "min", "max", "caption", "is_required"),
        required_attributes=("api_prefix",),
    ),
    FieldKind.table.value: FieldTypeSpec(
        kind=FieldKind.table.value,
        allowed_attributes=("columns", "min", "max", "caption", "is_required"),
        required_attributes=("columns",),
    ),
}


REQUIRED_ATTRIBUTE_FALLBACKS: Mapping[str, Any] = {
    "type": "text",
    "accept": ["image"],
    "options": [
        {"label": "Option 1", "value": "option_1"},
        {"label": "Option 2", "value": "option_2"},
    ],
    "fields": [],
    "filter": {"post_type": ["post"], "post_status": "publish"},
    "api_prefix": "/api/v1/",
    "columns": [
        {"name": "column_1", "label": "Column 1", "type": "text"},
        {"name": "column_2", "label": "Column 2", "type": "text"},
    ],
}


COLLECTION_NOUNS: Sequence[str] = (
    "projects",
    "portfolio",
    "testimonials",
    "team",
    "news",
    "blog",
    "events",
    "products",
    "case_studies",
)

REPEATER_NAME_HINTS: Sequence[str] = ("list", "grid", "items", "cards", "gallery")
GROUP_NAME_HINTS: Sequence[str] = ("info", "contact", "details", "about", "profile")
SEE_MORE_PHRASES: Sequence[str] = ("see more", "view more", "browse all")
CAROUSEL_HINTS: Sequence[str] = ("carousel", "slider", "swiper", "slide")
IMAGE_GRID_HINTS: Sequence[str] = ("grid", "gallery", "masonry", "mosaic")
LAYOUT_SECTION_NAMES: Sequence[str] = ("navigation", "navbar", "nav", "header", "footer", "menu")
STRUCTURED_GROUP_HINTS: Sequence[str] = ("contact", "info", "social", "links")


# Prompt vocabulary: phrase -> canonical section name, scanned in order.
SECTION_KEYWORDS: Mapping[str, str] = {
    "hero": "hero",
    "banner": "hero",
    "about us": "about",
    "about": "about",
    "features": "features",
    "feature": "features",
    "services": "services",
    "gallery": "gallery",
    "slider": "slider",
    "carousel": "slider",
    "portfolio": "portfolio",
    "projects": "projects",
    "case studies": "case_studies",
    "testimonials": "testimonials",
    "testimonial": "testimonials",
    "reviews": "testimonials",
    "team": "team",
    "pricing": "pricing",
    "plans": "pricing",
    "faq": "faq",
    "news": "news",
    "blog": "blog",
    "events": "events",
    "products": "products",
    "clients": "clients",
    "partners": "clients",
    "newsletter": "newsletter",
    "contact": "contact",
}

CTA_PHRASES: Sequence[str] = ("cta", "call to action", "call-to-action", "button", "sign up", "get started")
POST_TEMPLATE_PHRASES: Sequence[str] = ("post", "posts", "article", "articles", "blog")
MULTILANGUAGE_PHRASES: Sequence[str] = ("multilingual", "multi-language", "multilanguage", "international")
SHOWCASE_PHRASES: Sequence[str] = ("see more", "view more")


@dataclass(frozen=True)
class ElementBlueprint:
    type: str
    name: str
    role: str | None = None
    content: str = ""


@dataclass(frozen=True)
class SectionBlueprint:
    """Prototype content for a named section when only the name is known."""

    key: str
    label: str
    elements: Sequence[ElementBlueprint] = ()
    item: Sequence[ElementBlueprint] = ()
    item_count: int = 3
    trailing: Sequence[ElementBlueprint] = ()
    carousel: bool = False


_HEADING = ElementBlueprint("text", "section_title", "heading", "Section Title")
_SEE_MORE = ElementBlueprint("button", "see_more", "see_more", "See more")


def _collection(key: str, label: str, item: Sequence[ElementBlueprint]) -> SectionBlueprint:
    return SectionBlueprint(key=key, label=label, elements=(_HEADING,), item=item, trailing=(_SEE_MORE,))


_POST_CARD = (
    ElementBlueprint("image", "thumbnail", None, "thumbnail.jpg"),
    ElementBlueprint("text", "title", "heading", "Post Title"),
    ElementBlueprint("text", "excerpt", "description", "A short excerpt that introduces the entry and invites the visitor to read on."),
)

SECTION_BLUEPRINTS: Mapping[str, SectionBlueprint] = {
    "hero": SectionBlueprint(
        key="hero",
        label="Hero Section",
        elements=(
            ElementBlueprint("text", "title", "heading", "Main Title"),
            ElementBlueprint("text", "subtitle", "description", "A supporting sentence that explains the main value proposition of the page."),
            ElementBlueprint("image", "background_image", None, "hero.jpg"),
        ),
    ),
    "about": SectionBlueprint(
        key="about",
        label="About Section",
        elements=(
            ElementBlueprint("text", "title", "heading", "About Us"),
            ElementBlueprint("text", "description", "description", "Tell visitors who you are, what you do and why it matters to them in a few sentences."),
            ElementBlueprint("image", "image", None, "about.jpg"),
        ),
    ),
    "features": SectionBlueprint(
        key="features",
        label="Features Section",
        elements=(_HEADING,),
        item=(
            ElementBlueprint("image", "feature_icon", None, "icon.svg"),
            ElementBlueprint("text", "feature_title", "heading", "Feature"),
            ElementBlueprint("text", "feature_description", "description", "Describe the feature and the benefit it brings."),
        ),
    ),
    "services": SectionBlueprint(
        key="services",
        label="Services Section",
        elements=(_HEADING,),
        item=(
            ElementBlueprint("image", "service_icon", None, "icon.svg"),
            ElementBlueprint("text", "service_title", "heading", "Service"),
            ElementBlueprint("text", "service_description", "description", "Explain what the service includes."),
        ),
    ),
    "gallery": SectionBlueprint(
        key="gallery",
        label="Gallery Section",
        elements=(_HEADING,),
        item=(ElementBlueprint("image", "image", None, "photo.jpg"),),
        item_count=6,
    ),
    "slider": SectionBlueprint(
        key="slider",
        label="Slider Section",
        item=(ElementBlueprint("image", "slide_image", None, "slide.jpg"),),
        item_count=2,
        carousel=True,
    ),
    "pricing": SectionBlueprint(
        key="pricing",
        label="Pricing Section",
        elements=(_HEADING,),
        item=(
            ElementBlueprint("text", "plan_name", "heading", "Starter"),
            ElementBlueprint("text", "price", None, "$19"),
            ElementBlueprint("text", "plan_features", "description", "Everything a small team needs to get going."),
            ElementBlueprint("button", "plan_button", "cta", "Choose plan"),
        ),
    ),
    "faq": SectionBlueprint(
        key="faq",
        label="FAQ Section",
        elements=(_HEADING,),
        item=(
            ElementBlueprint("text", "question", "heading", "Question?"),
            ElementBlueprint("text", "answer", "description", "A clear answer to the question asked by visitors."),
        ),
        item_count=4,
    ),
    "clients": SectionBlueprint(
        key="clients",
        label="Clients Section",
        elements=(_HEADING,),
        item=(ElementBlueprint("image", "client_logo", None, "logo.png"),),
        item_count=5,
    ),
    "newsletter": SectionBlueprint(
        key="newsletter",
        label="Newsletter Section",
        elements=(
            ElementBlueprint("text", "title", "heading", "Stay in touch"),
            ElementBlueprint("input", "email", "email", "Your email"),
            ElementBlueprint("button", "subscribe", "primary_cta", "Subscribe"),
        ),
    ),
    "contact": SectionBlueprint(
        key="contact",
        label="Contact Section",
        elements=(
            ElementBlueprint("text", "title", "heading", "Contact Us"),
            ElementBlueprint("input", "name", None, "Your name"),
            ElementBlueprint("input", "email", "email", "Your email"),
            ElementBlueprint("textarea", "message", None, "Your message"),
            ElementBlueprint("button", "submit", "primary_cta", "Send"),
        ),
    ),
    "testimonials": _collection(
        "testimonials",
        "Testimonials Section",
        (
            ElementBlueprint("text", "quote", "description", "Working with this team changed the way we deliver projects to our customers."),
            ElementBlueprint("text", "author", "label", "Jane Doe"),
            ElementBlueprint("image", "avatar", None, "avatar.jpg"),
        ),
    ),
    "team": _collection(
        "team",
        "Team Section",
        (
            ElementBlueprint("image", "photo", None, "member.jpg"),
            ElementBlueprint("text", "name", "heading", "Jane Doe"),
            ElementBlueprint("text", "position", "label", "Designer"),
        ),
    ),
    "projects": _collection("projects", "Projects Section", _POST_CARD),
    "portfolio": _collection("portfolio", "Portfolio Section", _POST_CARD),
    "case_studies": _collection("case_studies", "Case Studies Section", _POST_CARD),
    "news": _collection("news", "News Section", _POST_CARD),
    "blog": _collection("blog", "Blog Section", _POST_CARD),
    "events": _collection("events", "Events Section", _POST_CARD),
    "products": _collection("products", "Products Section", _POST_CARD),
}


@dataclass(frozen=True)
class FieldRecipe:
    name: str
    label: str
    kind: str
    options: Mapping[str, Any] = field(default_factory=dict)
    children: Sequence["FieldRecipe"] = ()


@dataclass(frozen=True)
class SectionPreset:
    key: str
    label: str
    fields: Sequence[FieldRecipe]


def _text(name: str, label: str, placeholder: str, **options: Any) -> FieldRecipe:
    return FieldRecipe(name, label, "input", {"multilanguage": True, "inputType": "text", "placeholder": placeholder, **options})


DEFAULT_SECTION_PRESETS: Mapping[str, SectionPreset] = {
    "hero": SectionPreset(
        key="hero_section",
        label="Hero Section",
        fields=(
            FieldRecipe("status", "Status", "toggle", {"caption": "Enable or disable the hero section", "defaultValue": True}),
            _text("title", "Title", "Enter main title", is_required=True, maxLength=100),
            FieldRecipe("subtitle", "Subtitle", "textarea", {"multilanguage": True, "rows": 3, "max": 200, "placeholder": "Enter subtitle"}),
            FieldRecipe(
                "background_image",
                "Background Image",
                "media",
                {
                    "accept": ["image"],
                    "resolution": {"minWidth": 1200, "maxWidth": 1920, "minHeight": 600, "maxHeight": 1080},
                },
            ),
        ),
    ),
    "features": SectionPreset(
        key="features_section",
        label="Features Section",
        fields=(
            _text("section_title", "Section Title", "Features section title"),
            FieldRecipe(
                "features",
                "Features",
                "repeater",
                {"min": 1, "max": 6},
                children=(
                    _text("feature_title", "Feature Title", "Feature name", is_required=True),
                    FieldRecipe(
                        "feature_description",
                        "Feature Description",
                        "textarea",
                        {"multilanguage": True, "rows": 3, "max": 150, "placeholder": "Feature description"},
                    ),
                    FieldRecipe("feature_icon", "Feature Icon", "media", {"accept": ["image"]}),
                ),
            ),
        ),
    ),
    "contact": SectionPreset(
        key="contact_section",
        label="Contact Section",
        fields=(
            _text("section_title", "Section Title", "Contact section title"),
            FieldRecipe(
                "contact_info",
                "Contact Information",
                "group",
                children=(
                    FieldRecipe("email", "Email", "input", {"inputType": "email", "placeholder": "contact@example.com"}),
                    FieldRecipe("phone", "Phone", "input", {"inputType": "text", "placeholder": "+1 (555) 123-4567"}),
                    FieldRecipe("address", "Address", "textarea", {"multilanguage": True, "rows": 3, "placeholder": "Company address"}),
                ),
            ),
        ),
    ),
    "gallery": SectionPreset(
        key="gallery_section",
        label="Gallery Section",
        fields=(
            _text("section_title", "Gallery Title", "Gallery section title"),
            FieldRecipe(
                "gallery_images",
                "Gallery Images",
                "repeater",
                {"min": 1, "max": 12},
                children=(
                    FieldRecipe(
                        "image",
                        "Image",
                        "media",
                        {
                            "accept": ["image"],
                            "resolution": {"minWidth": 400, "maxWidth": 1200, "minHeight": 300, "maxHeight": 800},
                        },
                    ),
                    _text("caption", "Image Caption", "Optional image caption"),
                ),
            ),
        ),
    ),
}

CTA_BUTTON_RECIPE = FieldRecipe(
    "cta_button",
    "Call to Action",
    "group",
    children=(
        _text("label", "Button Label", "Button text"),
        FieldRecipe("url", "URL", "input", {"inputType": "url", "placeholder": "https://example.com"}),
    ),
)


__all__ = [
    "BUILTIN_FIELD_TYPES",
    "CAROUSEL_HINTS",
    "COLLECTION_NOUNS",
    "CTA_BUTTON_RECIPE",
    "CTA_PHRASES",
    "DEFAULT_SECTION_PRESETS",
    "ElementBlueprint",
    "FieldRecipe",
    "GROUP_NAME_HINTS",
    "IMAGE_GRID_HINTS",
    "LAYOUT_SECTION_NAMES",
    "MULTILANGUAGE_PHRASES",
    "POST_TEMPLATE_PHRASES",
    "REPEATER_NAME_HINTS",
    "REQUIRED_ATTRIBUTE_FALLBACKS",
    "SECTION_BLUEPRINTS",
    "SECTION_KEYWORDS",
    "SEE_MORE_PHRASES",
    "SHOWCASE_PHRASES",
    "STRUCTURED_GROUP_HINTS",
    "SectionBlueprint",
    "SectionPreset",
]
