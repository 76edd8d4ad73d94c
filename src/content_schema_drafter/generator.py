from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from .classifier import SectionClassifier
from .dictionaries import CTA_BUTTON_RECIPE, DEFAULT_SECTION_PRESETS, SectionPreset
from .errors import TemplateGenerationError
from .field_builder import FieldBuilder, sanitize_name
from .ingestors.elements import is_layout_section, section_from_name, section_key
from .ingestors.markup import MarkupIngestor
from .ingestors.metadata import MetadataIngestor
from .ingestors.prompt import PromptIngestor
from .ingestors.structured import StructuredIngestor
from .models.analysis import AnalysisSummary
from .models.field import FieldDefinition
from .models.section import ContentSection, Section
from .models.template import PostTypeHint, Template
from .registry import FieldTypeRegistry, default_registry
from .synthesizer import SectionSynthesizer, recipe_suggestion, title_case

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_NAME = "custom_template"


@dataclass
class GenerationResult:
    template: Template
    post_types: list[PostTypeHint] = field(default_factory=list)
    analyses: list[AnalysisSummary] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)

    def model_dump(self) -> dict[str, object]:
        return {
            "template": self.template.to_dict(),
            "post_types": [post_type.model_dump() for post_type in self.post_types],
            "analyses": [analysis.model_dump(mode="json") for analysis in self.analyses],
            "issues": list(self.issues),
        }


class TemplateAssembler:
    """Collect sections in numeric order; sections added without an order are appended after the last one."""

    def __init__(self) -> None:
        self._sections: list[Section] = []

    @property
    def sections(self) -> list[Section]:
        return list(self._sections)

    def next_order(self) -> int:
        return max((section.order for section in self._sections), default=0) + 1

    def add(self, section: Section, order: int | None = None) -> Section:
        placed = section.model_copy(update={"order": order if order is not None else self.next_order()})
        self._sections.append(placed)
        # list.sort is stable, ties keep insertion order
        self._sections.sort(key=lambda item: item.order)
        return placed

    def build(
        self,
        *,
        name: str,
        label: str,
        description: str,
        is_content: bool = False,
        multilanguage: bool = True,
        is_multiple: bool = False,
    ) -> Template:
        return Template(
            name=name,
            label=label,
            description=description,
            is_content=is_content,
            multilanguage=multilanguage,
            is_multiple=is_multiple,
            components=self.sections,
        )


@dataclass
class _Run:
    assembler: TemplateAssembler = field(default_factory=TemplateAssembler)
    post_types: list[PostTypeHint] = field(default_factory=list)
    analyses: list[AnalysisSummary] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)
    keys: set[str] = field(default_factory=set)


class TemplateGenerator:
    def __init__(
        self,
        registry: FieldTypeRegistry | None = None,
        *,
        presets: Mapping[str, SectionPreset] = DEFAULT_SECTION_PRESETS,
        exclude_layout_sections: bool = True,
        classifier: SectionClassifier | None = None,
    ) -> None:
        self._registry = registry or default_registry()
        self._builder = FieldBuilder(self._registry)
        self._synthesizer = SectionSynthesizer(self._builder)
        self._classifier = classifier or SectionClassifier()
        self._presets = dict(presets)
        self._exclude_layout_sections = exclude_layout_sections
        self._markup = MarkupIngestor()
        self._metadata = MetadataIngestor()
        self._structured = StructuredIngestor()
        self._prompt = PromptIngestor()

    @property
    def registry(self) -> FieldTypeRegistry:
        return self._registry

    def generate_template(
        self,
        name: str,
        label: str,
        *,
        sections: Sequence[str] = (),
        description: str | None = None,
        is_content: bool = False,
        multilanguage: bool = True,
        is_multiple: bool = False,
        include_cta: bool = False,
        max_features: int = 6,
        max_gallery_images: int = 12,
        is_exclude_sections: bool | None = None,
    ) -> GenerationResult:
        template_name, template_label = self._identifiers(name, label)
        run = _Run()
        for section_name in self._included(sections, is_exclude_sections, run):
            key = section_key(section_name)
            if key in self._presets:
                self._add_preset(
                    run,
                    key,
                    include_cta=include_cta,
                    max_features=max_features,
                    max_gallery_images=max_gallery_images,
                )
                continue
            collection = self._prompt.mentions_collection(description or "", section_name)
            self._add_content(run, section_from_name(section_name, collection=collection, source="preset"))
        return self._finish(
            run,
            name=template_name,
            label=template_label,
            description=description,
            is_content=is_content,
            multilanguage=multilanguage,
            is_multiple=is_multiple,
        )

    def generate_from_markup(
        self,
        markup: str,
        metadata: Mapping[str, Any] | Sequence[Any] | None = None,
        *,
        name: str | None = None,
        label: str | None = None,
        description: str | None = None,
        is_exclude_sections: bool | None = None,
    ) -> GenerationResult:
        template_name, template_label = self._identifiers(name or DEFAULT_TEMPLATE_NAME, label)
        sections = self._merge_sections(self._markup.parse(markup), self._metadata.parse(metadata))
        return self._generate_sections(
            sections,
            name=template_name,
            label=template_label,
            description=description,
            is_exclude_sections=is_exclude_sections,
        )

    def generate_from_json(
        self,
        payload: Mapping[str, Any],
        name: str,
        label: str | None = None,
        *,
        description: str | None = None,
        is_exclude_sections: bool | None = None,
    ) -> GenerationResult:
        template_name, template_label = self._identifiers(name, label)
        return self._generate_sections(
            self._structured.parse(payload),
            name=template_name,
            label=template_label,
            description=description,
            is_exclude_sections=is_exclude_sections,
        )

    def generate_from_prompt(
        self,
        prompt: str,
        name: str | None = None,
        label: str | None = None,
        *,
        is_exclude_sections: bool | None = None,
    ) -> GenerationResult:
        intent = self._prompt.parse(prompt)
        template_name, template_label = self._identifiers(name or intent.name or DEFAULT_TEMPLATE_NAME, label)
        run = _Run()
        for section_name in self._included(intent.sections, is_exclude_sections, run):
            if section_name in self._presets and section_name not in intent.collections:
                self._add_preset(run, section_name, include_cta=intent.include_cta)
                continue
            self._add_content(
                run,
                section_from_name(section_name, collection=section_name in intent.collections, source="prompt"),
            )
        if not intent.sections:
            run.issues.append("no known sections found in prompt")
        return self._finish(
            run,
            name=template_name,
            label=template_label,
            description=(prompt or "").strip() or None,
            is_content=intent.is_content,
            multilanguage=intent.multilanguage,
            is_multiple=False,
        )

    def generate_field(
        self,
        name: object,
        label: object,
        kind: object,
        *,
        multilanguage: bool | None = None,
        attributes: Mapping[str, Any] | None = None,
        context: str = "",
    ) -> FieldDefinition:
        options = dict(attributes or {})
        if multilanguage is not None:
            options["multilanguage"] = multilanguage
        return self._builder.build(name, label, kind, options, context)

    def list_field_types(self) -> list[dict[str, Any]]:
        return self._registry.describe()

    def field_type_examples(self, kind: object) -> list[dict[str, Any]]:
        """Worked examples registered for ``kind``; raises UnsupportedFieldKind for unknown kinds."""
        return [
            example.model_dump(by_alias=True, exclude_none=True)
            for example in self._registry.examples_for(kind)
        ]

    def _identifiers(self, name: object, label: object | None) -> tuple[str, str]:
        if not isinstance(name, str) or not sanitize_name(name):
            raise TemplateGenerationError(f"Invalid template name: {name!r}")
        template_name = sanitize_name(name)
        if label is None:
            return template_name, title_case(template_name)
        if not isinstance(label, str) or not label.strip():
            raise TemplateGenerationError(f"Invalid template label: {label!r}")
        return template_name, label.strip()

    def _included(self, names: Iterable[str], is_exclude_sections: bool | None, run: _Run) -> list[str]:
        return [name for name in names if self._keep(name, is_exclude_sections, run)]

    def _keep(self, name: object, is_exclude_sections: bool | None, run: _Run) -> bool:
        exclude = self._exclude_layout_sections if is_exclude_sections is None else is_exclude_sections
        if not isinstance(name, str) or not section_key(name):
            run.issues.append(f"skipped invalid section name: {name!r}")
            return False
        if exclude and is_layout_section(name):
            logger.info("Excluding layout section", extra={"section": name})
            return False
        key = section_key(name)
        if key in run.keys:
            run.issues.append(f"skipped duplicate section: {key}_section")
            return False
        run.keys.add(key)
        return True

    def _merge_sections(
        self,
        markup_sections: list[ContentSection],
        metadata_sections: list[ContentSection],
    ) -> list[ContentSection]:
        merged = {section.name: section for section in markup_sections}
        for section in metadata_sections:
            current = merged.get(section.name)
            if current is None:
                merged[section.name] = section
                continue
            patterns = current.patterns.model_copy(
                update={
                    key: getattr(current.patterns, key) or getattr(section.patterns, key)
                    for key in ("is_repeater", "is_group", "has_image_grid", "has_carousel")
                }
            )
            merged[section.name] = current.model_copy(
                update={
                    "elements": current.elements or section.elements,
                    "label": current.label or section.label,
                    "patterns": patterns,
                }
            )
        return list(merged.values())

    def _generate_sections(
        self,
        sections: Sequence[ContentSection],
        *,
        name: str,
        label: str,
        description: str | None,
        is_exclude_sections: bool | None,
    ) -> GenerationResult:
        run = _Run()
        for section in sections:
            if self._keep(section.name, is_exclude_sections, run):
                self._add_content(run, section)
        if not sections:
            run.issues.append("no sections found in input")
        return self._finish(run, name=name, label=label, description=description)

    def _add_content(self, run: _Run, section: ContentSection) -> None:
        analysis = self._classifier.classify(section)
        result = self._synthesizer.synthesize(section, analysis, run.assembler.next_order())
        run.assembler.add(result.section)
        run.issues.extend(result.issues)
        run.analyses.append(
            AnalysisSummary(
                section=result.section.key_name,
                archetype=analysis.archetype,
                confidence=analysis.confidence,
                reasoning=list(analysis.reasoning),
            )
        )
        if result.post_type is not None and result.post_type not in run.post_types:
            run.post_types.append(result.post_type)

    def _add_preset(
        self,
        run: _Run,
        key: str,
        *,
        include_cta: bool = False,
        max_features: int = 6,
        max_gallery_images: int = 12,
    ) -> None:
        preset = self._presets[key]
        suggestions = [recipe_suggestion(recipe) for recipe in preset.fields]
        limits = {"features": max_features, "gallery_images": max_gallery_images}
        for index, item in enumerate(suggestions):
            if item.kind == "repeater" and item.name in limits:
                suggestions[index] = item.model_copy(update={"options": {**item.options, "max": limits[item.name]}})
        if include_cta and key == "hero":
            suggestions.append(recipe_suggestion(CTA_BUTTON_RECIPE))
        fields = self._synthesizer.build_fields(suggestions, key, run.issues)
        run.assembler.add(
            Section(key_name=preset.key, label=preset.label, order=run.assembler.next_order(), fields=fields)
        )

    def _finish(
        self,
        run: _Run,
        *,
        name: str,
        label: str,
        description: str | None,
        is_content: bool = False,
        multilanguage: bool = True,
        is_multiple: bool = False,
    ) -> GenerationResult:
        template = run.assembler.build(
            name=name,
            label=label,
            description=description or f"{label} template",
            is_content=is_content,
            multilanguage=multilanguage,
            is_multiple=is_multiple,
        )
        logger.info(
            "Generated template",
            extra={
                "template": name,
                "sections": len(template.components),
                "post_types": [post_type.slug for post_type in run.post_types],
                "issues": len(run.issues),
            },
        )
        return GenerationResult(template=template, post_types=run.post_types, analyses=run.analyses, issues=run.issues)


__all__ = ["GenerationResult", "TemplateAssembler", "TemplateGenerator"]
