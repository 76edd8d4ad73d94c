from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Sequence

from ..dictionaries import STRUCTURED_GROUP_HINTS
from ..field_builder import sanitize_name
from ..models.section import ContentSection, Element, ElementType
from .elements import detect_patterns, flatten_items, make_element, section_key

logger = logging.getLogger(__name__)

_IMAGE_VALUE = re.compile(r"\.(png|jpe?g|gif|svg|webp|avif)(\?.*)?$", re.I)
_HTML_VALUE = re.compile(r"<(p|br|ul|ol|strong|em|h[1-6])\b", re.I)
IMAGE_KEY_HINTS = ("image", "photo", "picture", "icon", "logo", "avatar", "thumbnail", "banner", "background")
BUTTON_KEY_HINTS = ("cta", "button", "btn")


def singular(name: str) -> str:
    if name.endswith(("ss", "us", "news")):
        return f"{name}_item"
    if name.endswith("ies") and len(name) > 3:
        return name[:-3] + "y"
    if name.endswith(("ses", "xes")):
        return name[:-2]
    if name.endswith("s") and len(name) > 1:
        return name[:-1]
    return f"{name}_item"


class StructuredIngestor:
    """Turn a JSON example payload keyed by section name into content sections."""

    def parse(self, payload: Mapping[str, Any]) -> list[ContentSection]:
        """Walk every top-level entry of ``payload``.

        Args:
            payload: JSON object keyed by section name

        Returns:
            List of ContentSection instances, one per usable top-level key
        """
        if not isinstance(payload, Mapping):
            return []
        sections: list[ContentSection] = []
        for key, value in payload.items():
            name = section_key(str(key))
            if not name:
                continue
            section = self._parse_section(name, value)
            if section is None:
                logger.warning("Skipping empty structured section", extra={"section": name})
                continue
            sections.append(section)
        return sections

    def _parse_section(self, name: str, value: Any) -> ContentSection | None:
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            items = [self._item_elements(name, item) for item in value]
            items = [item for item in items if item]
            if not items:
                return None
            elements = flatten_items(items)
            return ContentSection(
                name=name,
                elements=elements,
                patterns=detect_patterns(name, elements, is_repeater=True),
                source="structured",
            )
        if isinstance(value, Mapping):
            elements = self._object_elements(value)
            if not elements:
                return None
            is_group = len(value) > 1 and any(hint in name for hint in STRUCTURED_GROUP_HINTS)
            if is_group:
                elements = [Element(type=ElementType.text, name=name, structure="group", children=elements)]
            return ContentSection(
                name=name,
                elements=elements,
                patterns=detect_patterns(name, elements, is_group=is_group),
                source="structured",
            )
        element = self._primitive_element(name, value)
        if element is None:
            return None
        return ContentSection(
            name=name,
            elements=[element],
            patterns=detect_patterns(name, [element]),
            source="structured",
        )

    def _item_elements(self, parent: str, item: Any) -> list[Element]:
        if isinstance(item, Mapping):
            return self._object_elements(item)
        element = self._primitive_element(singular(parent), item)
        return [element] if element is not None else []

    def _object_elements(self, value: Mapping[str, Any], prefix: str = "") -> list[Element]:
        elements: list[Element] = []
        for raw_key, item in value.items():
            key = sanitize_name(str(raw_key))
            if not key:
                continue
            name = f"{prefix}_{key}" if prefix else key
            if isinstance(item, Mapping):
                if len(item) > 1 and any(hint in key for hint in STRUCTURED_GROUP_HINTS):
                    children = self._object_elements(item)
                    if children:
                        elements.append(Element(type=ElementType.text, name=name, structure="group", children=children))
                else:
                    elements.extend(self._object_elements(item, prefix=name))
            elif isinstance(item, Sequence) and not isinstance(item, (str, bytes)):
                element = self._array_element(name, item)
                if element is not None:
                    elements.append(element)
            else:
                element = self._primitive_element(name, item)
                if element is not None:
                    elements.append(element)
        return elements

    def _array_element(self, name: str, values: Sequence[Any]) -> Element | None:
        if not values:
            return None
        first = values[0]
        if isinstance(first, Mapping):
            children = self._object_elements(first)
        else:
            child = self._primitive_element(singular(name), first)
            children = [child] if child is not None else []
        if not children:
            return None
        return Element(
            type=ElementType.text,
            name=name,
            structure="repeater",
            children=children,
            attributes={"count": len(values)},
        )

    def _primitive_element(self, name: str, value: Any) -> Element | None:
        if value is None:
            return make_element(ElementType.text, "", name)
        if isinstance(value, bool):
            return make_element(ElementType.text, str(value).lower(), name, value_kind="boolean")
        if isinstance(value, (int, float)):
            return make_element(ElementType.text, str(value), name, value_kind="number")
        if not isinstance(value, str):
            return None
        lowered = name.lower()
        if _IMAGE_VALUE.search(value.strip()) or any(hint in lowered for hint in IMAGE_KEY_HINTS):
            return make_element(ElementType.image, value, name)
        if any(hint in lowered for hint in BUTTON_KEY_HINTS):
            return make_element(ElementType.button, value, name)
        if _HTML_VALUE.search(value):
            return make_element(ElementType.text, value, name, value_kind="html")
        return make_element(ElementType.text, value, name)


def sections_from_json(payload: Mapping[str, Any]) -> list[ContentSection]:
    return StructuredIngestor().parse(payload)


__all__ = ["StructuredIngestor", "sections_from_json", "singular"]
