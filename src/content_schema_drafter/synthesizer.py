from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from .attributes import humanize, suggest_options
from .dictionaries import FieldRecipe
from .errors import InvalidFieldName, MissingRequiredAttribute, SchemaDrafterError, UnsupportedFieldKind
from .field_builder import FieldBuilder, sanitize_name
from .ingestors.elements import section_key
from .models.analysis import Archetype, FieldSuggestion, SectionAnalysis
from .models.field import FieldDefinition
from .models.section import ContentSection, Element, ElementType, Section
from .models.template import PostTypeHint

logger = logging.getLogger(__name__)

TEXT_KINDS = frozenset({"input", "textarea", "texteditor"})
POST_RELATED_API_PREFIX = "/api/v1/"
POST_RELATED_BOUNDS = (1, 12)
SECTION_REPEATER_BOUNDS = (1, 8)
INPUT_TYPES_BY_ROLE = {"email": "email", "phone": "tel", "url": "url", "password": "password"}
FORM_FIELD_TYPES = ("text", "email", "tel", "url", "number", "textarea")
LONG_TEXT = 100


@dataclass
class SynthesizedSection:
    section: Section
    analysis: SectionAnalysis
    post_type: PostTypeHint | None = None
    issues: list[str] = field(default_factory=list)


def title_case(name: str) -> str:
    return humanize(name).title()


def derive_post_type(section_name: str) -> PostTypeHint:
    key = section_key(section_name) or sanitize_name(section_name)
    return PostTypeHint(name=title_case(key), slug=key.replace("_", "-"), original_section=section_name)


def suggestion(name: str, kind: str, label: str | None = None, children: Iterable[FieldSuggestion] = (), **options: Any) -> FieldSuggestion:
    if kind in TEXT_KINDS:
        options.setdefault("multilanguage", True)
    return FieldSuggestion(
        name=name,
        label=label or title_case(name),
        kind=kind,
        options={**suggest_options(name, kind), **options},
        children=list(children),
    )


def recipe_suggestion(recipe: FieldRecipe) -> FieldSuggestion:
    return FieldSuggestion(
        name=recipe.name,
        label=recipe.label,
        kind=recipe.kind,
        options=dict(recipe.options),
        children=[recipe_suggestion(child) for child in recipe.children],
    )


def status_suggestion() -> FieldSuggestion:
    return FieldSuggestion(name="status", label="Status", kind="toggle")


def generic_suggestions() -> list[FieldSuggestion]:
    return [
        status_suggestion(),
        suggestion("section_title", "input"),
        suggestion("content", "textarea"),
    ]


def element_suggestions(element: Element) -> list[FieldSuggestion]:
    """Field suggestions for one element; buttons yield a text and a link field."""
    if element.structure and element.children:
        base = element.name or element.structure
        children = unique_names(child for item in element.children for child in element_suggestions(item))
        return [suggestion(base, element.structure, element.attributes.get("label"), children)]

    match element.type:
        case ElementType.image:
            return [suggestion(element.name or "image", "media")]
        case ElementType.button:
            base = element.name or "button"
            return [suggestion(f"{base}_text", "input"), suggestion(f"{base}_link", "input", inputType="url")]
        case ElementType.input:
            input_type = INPUT_TYPES_BY_ROLE.get(element.role or "") or element.attributes.get("input_type")
            options = {"inputType": input_type} if input_type else {}
            if element.attributes.get("required"):
                options["is_required"] = True
            return [suggestion(element.name or element.role or "input", "input", **options)]
        case ElementType.textarea:
            return [suggestion(element.name or "message", "textarea")]
        case ElementType.text:
            return [_text_suggestion(element)]


def _text_suggestion(element: Element) -> FieldSuggestion:
    value_kind = element.attributes.get("value_kind")
    role = element.role
    fallback = {"heading": "title", "description": "description", "subtitle": "subtitle"}.get(role or "", "text")
    name = element.name or fallback
    if value_kind == "boolean":
        return FieldSuggestion(name=name, label=title_case(name), kind="toggle")
    if value_kind == "number":
        return suggestion(name, "input", inputType="number")
    if value_kind == "html":
        return suggestion(name, "texteditor")
    if role in ("description", "subtitle") or len(element.content) > LONG_TEXT:
        return suggestion(name, "textarea")
    return suggestion(name, "input")


def unique_names(suggestions: Iterable[FieldSuggestion]) -> list[FieldSuggestion]:
    result: list[FieldSuggestion] = []
    seen: set[str] = set()
    for item in suggestions:
        name = sanitize_name(item.name) or item.name
        candidate, counter = name, 2
        while candidate in seen:
            candidate, counter = f"{name}_{counter}", counter + 1
        seen.add(candidate)
        result.append(item if candidate == item.name else item.model_copy(update={"name": candidate}))
    return result


def item_elements(section: ContentSection) -> list[Element]:
    """Elements describing one item: the first repeated item when known, else every non-repeated element."""
    elements = [element for element in section.elements if element.role != "see_more"]
    first_item = [element for element in elements if element.attributes.get("item") == 0]
    if first_item:
        return first_item
    return [element for element in elements if not element.repeated]


class SectionSynthesizer:
    """Emit the field list of a classified section, building every field through the field builder."""

    def __init__(self, builder: FieldBuilder) -> None:
        self._builder = builder

    @property
    def builder(self) -> FieldBuilder:
        return self._builder

    def synthesize(self, section: ContentSection, analysis: SectionAnalysis, order: int) -> SynthesizedSection:
        key = section_key(section.name) or "section"
        issues: list[str] = []
        post_type = None
        try:
            if not section.elements:
                raise ValueError("section has no elements")
            if analysis.archetype is Archetype.post_collection:
                post_type = derive_post_type(section.name)
            suggestions = self.plan(section, analysis, post_type)
            if not suggestions:
                raise ValueError(f"no fields for archetype {analysis.archetype.value}")
            fields = self.build_fields(suggestions, key, issues)
            if not fields:
                raise ValueError("every field failed to build")
        except (SchemaDrafterError, ValueError) as exc:
            if isinstance(exc, MissingRequiredAttribute):
                logger.error("Registry misconfiguration while synthesizing section", extra={"section": key, "error": str(exc)})
            else:
                logger.warning("Degrading section to generic fields", extra={"section": key, "error": str(exc)})
            issues.append(f"{key}: {exc}; generic fields used")
            post_type = None
            suggestions = generic_suggestions()
            fields = self.build_fields(suggestions, key, issues)

        analysis = analysis.model_copy(update={"field_suggestions": suggestions})
        return SynthesizedSection(
            section=self.make_section(key, section.label, order, fields, section.block_hint),
            analysis=analysis,
            post_type=post_type,
            issues=issues,
        )

    def make_section(
        self,
        key: str,
        label: str | None,
        order: int,
        fields: Sequence[FieldDefinition],
        block_hint: str | None = None,
    ) -> Section:
        return Section(
            key_name=f"{key}_section",
            label=label or f"{title_case(key)} Section",
            order=order,
            fields=list(fields),
            block_hint=block_hint,
        )

    def plan(
        self,
        section: ContentSection,
        analysis: SectionAnalysis,
        post_type: PostTypeHint | None = None,
    ) -> list[FieldSuggestion]:
        key = section_key(section.name) or "section"
        match analysis.archetype:
            case Archetype.post_collection:
                post_type = post_type or derive_post_type(section.name)
                return self._plan_post_collection(key, post_type)
            case Archetype.repeater:
                return self._plan_repeater(key, section)
            case Archetype.group:
                return self._plan_group(key, section)
            case Archetype.media_gallery:
                return self._plan_media_gallery(section)
            case Archetype.form:
                return self._plan_form(section)
            case Archetype.single:
                return self._plan_single(section)

    def _plan_post_collection(self, key: str, post_type: PostTypeHint) -> list[FieldSuggestion]:
        minimum, maximum = POST_RELATED_BOUNDS
        posts = FieldSuggestion(
            name=f"{key}_posts",
            label=f"{post_type.name} Posts",
            kind="post_related",
            options={
                "post_type": post_type.slug,
                "api_prefix": POST_RELATED_API_PREFIX,
                "min": minimum,
                "max": maximum,
                "caption": f"Select {post_type.name.lower()} to display",
            },
        )
        return unique_names([status_suggestion(), posts])

    def _plan_repeater(self, key: str, section: ContentSection) -> list[FieldSuggestion]:
        minimum, maximum = SECTION_REPEATER_BOUNDS
        children = unique_names(item for element in item_elements(section) for item in element_suggestions(element))
        repeater = FieldSuggestion(
            name=key,
            label=title_case(key),
            kind="repeater",
            options={"min": minimum, "max": maximum},
            children=children,
        )
        # the section field yields its name to the status toggle
        return unique_names([status_suggestion(), repeater])

    def _plan_group(self, key: str, section: ContentSection) -> list[FieldSuggestion]:
        elements = [element for element in section.elements if not element.repeated and element.role != "see_more"]
        children = unique_names(item for element in elements for item in element_suggestions(element))
        group = FieldSuggestion(name=key, label=title_case(key), kind="group", children=children)
        return unique_names([status_suggestion(), group])

    def _plan_media_gallery(self, section: ContentSection) -> list[FieldSuggestion]:
        patterns = section.patterns
        suggestions = [suggestion("section_title", "input")]
        if patterns.has_image_grid:
            suggestions.append(
                suggestion(
                    "gallery_images",
                    "repeater",
                    children=[
                        suggestion("image", "media"),
                        suggestion("caption", "input"),
                        suggestion("alt_text", "input", "Alt Text"),
                    ],
                )
            )
        if patterns.has_carousel:
            suggestions.append(
                suggestion(
                    "slides",
                    "repeater",
                    children=[
                        suggestion("image", "media"),
                        suggestion("title", "input"),
                        suggestion("description", "textarea"),
                    ],
                )
            )
        return suggestions

    def _plan_form(self, section: ContentSection) -> list[FieldSuggestion]:
        suggestions = [
            suggestion("section_title", "input"),
            suggestion("form_description", "textarea"),
        ]
        if any(element.type is ElementType.input for element in section.elements):
            options = [{"label": value.title(), "value": value} for value in FORM_FIELD_TYPES]
            suggestions.append(
                suggestion(
                    "form_fields",
                    "repeater",
                    children=[
                        suggestion("label", "input"),
                        FieldSuggestion(name="type", label="Field Type", kind="select", options={"options": options}),
                        suggestion("placeholder", "input"),
                        FieldSuggestion(name="required", label="Required", kind="toggle"),
                    ],
                )
            )
        suggestions.append(suggestion("submit_button_text", "input", "Submit Button Text"))
        return suggestions

    def _plan_single(self, section: ContentSection) -> list[FieldSuggestion]:
        elements = section.elements
        texts = [element for element in elements if element.type is ElementType.text and not element.structure]
        suggestions: list[FieldSuggestion] = []
        if any(element.role == "heading" for element in texts):
            suggestions.append(suggestion("section_title", "input"))
        if any(element.role != "heading" for element in texts):
            suggestions.append(suggestion("content", "texteditor"))
        if any(element.type is ElementType.image for element in elements):
            suggestions.append(suggestion("image", "media"))
        if any(element.type is ElementType.button for element in elements):
            suggestions.append(suggestion("cta_text", "input", "CTA Text"))
            suggestions.append(suggestion("cta_link", "input", "CTA Link", inputType="url"))
        for element in elements:
            if element.structure and element.children:
                suggestions.extend(element_suggestions(element))
        return unique_names(suggestions)

    def build_fields(
        self,
        suggestions: Sequence[FieldSuggestion],
        context: str,
        issues: list[str],
    ) -> list[FieldDefinition]:
        """Build suggestions depth-first; a failing field falls back to a plain input or is skipped."""
        fields: list[FieldDefinition] = []
        for item in suggestions:
            options = dict(item.options)
            if item.children:
                options["fields"] = self.build_fields(item.children, context, issues)
            try:
                fields.append(self._builder.build(item.name, item.label, item.kind, options, context))
            except (UnsupportedFieldKind, InvalidFieldName) as exc:
                logger.warning(
                    "Field fallback",
                    extra={"section": context, "field_name": item.name, "field_kind": item.kind, "error": str(exc)},
                )
                issues.append(f"{context}.{item.name}: {exc}")
                fallback = self._fallback_field(item, context)
                if fallback is not None:
                    fields.append(fallback)
        return fields

    def _fallback_field(self, item: FieldSuggestion, context: str) -> FieldDefinition | None:
        try:
            return self._builder.build(item.name, item.label or title_case(item.name), "input", {}, context)
        except (UnsupportedFieldKind, InvalidFieldName):
            return None


__all__ = [
    "SectionSynthesizer",
    "SynthesizedSection",
    "derive_post_type",
    "element_suggestions",
    "generic_suggestions",
    "item_elements",
    "recipe_suggestion",
    "suggestion",
    "title_case",
]
