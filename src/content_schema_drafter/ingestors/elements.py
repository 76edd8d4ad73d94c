from __future__ import annotations

import re
from typing import Iterable, Sequence

from ..dictionaries import (
    CAROUSEL_HINTS,
    IMAGE_GRID_HINTS,
    LAYOUT_SECTION_NAMES,
    SECTION_BLUEPRINTS,
    SEE_MORE_PHRASES,
    ElementBlueprint,
)
from ..field_builder import sanitize_name
from ..models.section import ContentPatterns, ContentSection, Element, ElementType

HEADING_NAME_HINTS = ("title", "heading", "headline")
DESCRIPTION_NAME_HINTS = ("description", "subtitle", "subheading", "excerpt", "summary")
CTA_NAME_HINTS = ("cta", "button", "btn")
INPUT_ROLE_HINTS = (
    ("email", "email"),
    ("phone", "phone"),
    ("tel", "phone"),
    ("url", "url"),
    ("website", "url"),
    ("password", "password"),
)
NAVIGATION_NAME_HINTS = ("nav", "menu")

_CAPITALIZED_SENTENCE = re.compile(r"^[A-Z][^.!?]*[.!?]?$")
_SECTION_SUFFIX = "_section"


def section_key(name: str | None) -> str:
    """Sanitized section name without a trailing ``_section``."""
    key = sanitize_name(name or "")
    if key.endswith(_SECTION_SUFFIX):
        key = key[: -len(_SECTION_SUFFIX)]
    return key


def is_layout_section(name: str | None) -> bool:
    key = section_key(name)
    return key in LAYOUT_SECTION_NAMES or any(part in LAYOUT_SECTION_NAMES for part in key.split("_"))


def has_see_more(text: str | None) -> bool:
    lowered = (text or "").lower()
    return any(phrase in lowered for phrase in SEE_MORE_PHRASES)


def assign_role(element_type: ElementType, name: str | None, content: str) -> str | None:
    """Semantic role for an element: name hints first, then the shape of its content."""
    lowered = (name or "").lower()
    if element_type in (ElementType.input, ElementType.textarea):
        for hint, role in INPUT_ROLE_HINTS:
            if hint in lowered:
                return role
        return "label" if element_type is ElementType.input else None
    # "subtitle" contains "title"
    if any(hint in lowered for hint in DESCRIPTION_NAME_HINTS):
        return "description"
    if any(hint in lowered for hint in HEADING_NAME_HINTS):
        return "heading"
    if has_see_more(content) or has_see_more(lowered.replace("_", " ")):
        return "see_more"
    if any(hint in lowered for hint in CTA_NAME_HINTS):
        return "cta"
    if any(hint in lowered.split("_") for hint in NAVIGATION_NAME_HINTS):
        return "navigation"
    if element_type is ElementType.image:
        return None
    text = content.strip()
    if len(text) > 100:
        return "description"
    if len(text) > 50:
        return "subtitle"
    if element_type is ElementType.button:
        return "cta"
    if text and _CAPITALIZED_SENTENCE.match(text) and len(text.split()) <= 8:
        return "heading"
    return None


def make_element(
    element_type: ElementType | str,
    content: str = "",
    name: str | None = None,
    **attributes: object,
) -> Element:
    element_type = ElementType(element_type)
    clean_name = sanitize_name(name) or None
    return Element(
        type=element_type,
        content=content.strip(),
        name=clean_name,
        role=assign_role(element_type, clean_name, content),
        attributes={key: value for key, value in attributes.items() if value is not None},
    )


def item_signature(elements: Sequence[Element]) -> tuple[str, ...]:
    return tuple(element.type.value for element in elements)


def flatten_items(items: Sequence[Sequence[Element]]) -> list[Element]:
    """Mark items of a repeated block: every element carries its item index, items after the first are flagged."""
    flattened: list[Element] = []
    for index, item in enumerate(items):
        for element in item:
            attributes = {**element.attributes, "item": index}
            if index:
                attributes["repeat"] = True
            flattened.append(element.model_copy(update={"attributes": attributes}))
    return flattened


def repeated_items(blocks: Sequence[Sequence[Element]]) -> bool:
    """Two or more child blocks sharing one element signature."""
    signatures = [item_signature(block) for block in blocks if block]
    return len(signatures) >= 2 and len(set(signatures)) == 1


def detect_patterns(
    name: str,
    elements: Sequence[Element],
    *,
    hints: Iterable[str] = (),
    is_repeater: bool = False,
    is_group: bool = False,
) -> ContentPatterns:
    signal = " ".join([name, *hints]).lower()
    images = sum(1 for element in elements if element.type is ElementType.image)
    has_carousel = any(hint in signal for hint in CAROUSEL_HINTS)
    has_image_grid = images >= 3 and (
        any(hint in signal for hint in IMAGE_GRID_HINTS) or (is_repeater and not has_carousel)
    )
    return ContentPatterns(
        is_repeater=is_repeater,
        is_group=is_group,
        has_image_grid=has_image_grid,
        has_carousel=has_carousel,
    )


def _from_blueprint(blueprints: Sequence[ElementBlueprint]) -> list[Element]:
    elements = []
    for item in blueprints:
        element = make_element(item.type, item.content, item.name)
        if item.role and item.role != element.role:
            element = element.model_copy(update={"role": item.role})
        elements.append(element)
    return elements


def section_from_name(name: str, *, collection: bool = False, source: str = "prompt") -> ContentSection:
    """Prototype content for a section known only by name."""
    key = section_key(name)
    blueprint = SECTION_BLUEPRINTS.get(key)
    if blueprint is None:
        elements = [
            make_element(ElementType.text, "Section Title", "title"),
            make_element(
                ElementType.text,
                "Body copy for this section, describing its content in a couple of sentences for visitors.",
                "content",
            ),
        ]
        if collection:
            elements.append(make_element(ElementType.button, "See more", "see_more"))
        return ContentSection(
            name=key,
            label=f"{key.replace('_', ' ').title()} Section",
            elements=elements,
            patterns=detect_patterns(key, elements),
            source=source,
        )

    elements = _from_blueprint(blueprint.elements)
    items = [_from_blueprint(blueprint.item) for _ in range(blueprint.item_count if blueprint.item else 0)]
    elements.extend(flatten_items(items))
    if collection:
        elements.extend(_from_blueprint(blueprint.trailing) or [make_element(ElementType.button, "See more", "see_more")])
    hints = ("carousel",) if blueprint.carousel else ()
    return ContentSection(
        name=key,
        label=blueprint.label,
        elements=elements,
        patterns=detect_patterns(key, elements, hints=hints, is_repeater=len(items) > 1),
        source=source,
    )


__all__ = [
    "assign_role",
    "detect_patterns",
    "flatten_items",
    "has_see_more",
    "is_layout_section",
    "item_signature",
    "make_element",
    "repeated_items",
    "section_from_name",
    "section_key",
]
