from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from ..models.section import ContentSection, Element, ElementType
from .elements import (
    CTA_NAME_HINTS,
    detect_patterns,
    flatten_items,
    make_element,
    repeated_items,
    section_from_name,
    section_key,
)

logger = logging.getLogger(__name__)

CONTAINER_TYPES = frozenset({"FRAME", "GROUP", "SECTION", "COMPONENT", "COMPONENT_SET", "INSTANCE"})
SHAPE_TYPES = frozenset({"RECTANGLE", "ELLIPSE", "VECTOR", "POLYGON", "STAR", "IMAGE"})
IMAGE_NAME_HINTS = ("image", "img", "photo", "picture", "logo", "icon", "avatar", "thumbnail", "banner")
INPUT_NAME_HINTS = ("input", "field", "textbox")
TEXTAREA_NAME_HINTS = ("textarea", "message")


class MetadataIngestor:
    """Read a design-tool node tree (``document``/``nodes``/``children``) into sections.

    Top-level frames become sections. A lone page frame whose children are all
    frames is unwrapped so its children become the sections. A ``sections`` list
    of names is accepted as well and expanded into prototype sections.
    """

    def parse(self, metadata: Mapping[str, Any] | Sequence[Any] | None) -> list[ContentSection]:
        """Parse design metadata.

        Args:
            metadata: Node tree, ``{"nodes": {...}}`` response, list of nodes or
                ``{"sections": [...]}`` hints

        Returns:
            List of ContentSection instances
        """
        if not metadata:
            return []
        roots = self._section_nodes(self._roots(metadata))
        sections = [self._parse_section(node, index) for index, node in enumerate(roots, start=1)]
        known = {section.name for section in sections}
        hints = metadata.get("sections") if isinstance(metadata, Mapping) else None
        for name in hints or ():
            if isinstance(name, str) and section_key(name) and section_key(name) not in known:
                sections.append(section_from_name(name, source="metadata"))
                known.add(section_key(name))
        logger.debug("Parsed metadata sections", extra={"sections": [section.name for section in sections]})
        return sections

    def _roots(self, metadata: Mapping[str, Any] | Sequence[Any]) -> list[Mapping[str, Any]]:
        if isinstance(metadata, Sequence) and not isinstance(metadata, (str, bytes)):
            return [node for node in metadata if isinstance(node, Mapping)]
        if "nodes" in metadata and isinstance(metadata["nodes"], Mapping):
            return [
                entry.get("document", entry)
                for entry in metadata["nodes"].values()
                if isinstance(entry, Mapping)
            ]
        if "document" in metadata and isinstance(metadata["document"], Mapping):
            return [metadata["document"]]
        if "type" in metadata:
            return [metadata]
        return []

    def _section_nodes(self, roots: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
        nodes: list[Mapping[str, Any]] = []
        for root in roots:
            if root.get("type") in ("DOCUMENT", "CANVAS"):
                nodes.extend(self._section_nodes(self._children(root)))
            elif root.get("type") in CONTAINER_TYPES:
                nodes.append(root)
        if len(nodes) == 1:
            children = self._children(nodes[0])
            if len(children) > 1 and all(child.get("type") in CONTAINER_TYPES for child in children):
                return children
        return nodes

    def _children(self, node: Mapping[str, Any]) -> list[Mapping[str, Any]]:
        return [
            child
            for child in node.get("children") or ()
            if isinstance(child, Mapping) and child.get("visible", True) is not False
        ]

    def _parse_section(self, node: Mapping[str, Any], index: int) -> ContentSection:
        name = section_key(node.get("name")) or f"section_{index}"
        blocks: list[list[Element]] = []
        elements = self._walk_children(node, blocks)
        is_repeater = repeated_items(blocks)
        heading = next((element.content for element in elements if element.role == "heading"), None)
        raw_name = (node.get("name") or "").strip()
        return ContentSection(
            name=name,
            label=raw_name if raw_name and not raw_name.islower() else heading,
            elements=elements,
            patterns=detect_patterns(
                name,
                elements,
                hints=self._layout_hints(node),
                is_repeater=is_repeater,
                is_group=node.get("type") == "GROUP",
            ),
            source="metadata",
        )

    def _walk_children(self, node: Mapping[str, Any], blocks: list[list[Element]]) -> list[Element]:
        parts: list[Element | list[Element]] = []
        for child in self._children(node):
            element = self._parse_leaf(child)
            if element is not None:
                parts.append(element)
            elif child.get("type") in CONTAINER_TYPES:
                block = self._walk_children(child, [])
                if block:
                    parts.append(block)
        child_blocks = [part for part in parts if isinstance(part, list)]
        blocks.extend(child_blocks)
        repeated = repeated_items(child_blocks)
        elements: list[Element] = []
        flattened = False
        for part in parts:
            if isinstance(part, Element):
                elements.append(part)
            elif repeated:
                if not flattened:
                    elements.extend(flatten_items(child_blocks))
                    flattened = True
            else:
                elements.extend(part)
        return elements

    def _parse_leaf(self, node: Mapping[str, Any]) -> Element | None:
        node_type = node.get("type")
        name = node.get("name") or ""
        lowered = name.lower()
        if node_type == "TEXT":
            characters = node.get("characters") or ""
            return make_element(ElementType.text, characters, name) if characters.strip() else None
        if node_type in SHAPE_TYPES:
            if self._has_image_fill(node) or any(hint in lowered for hint in IMAGE_NAME_HINTS):
                return make_element(ElementType.image, name, name)
            return None
        if node_type not in CONTAINER_TYPES:
            return None
        if self._has_image_fill(node) and not self._children(node):
            return make_element(ElementType.image, name, name)
        if any(hint in lowered for hint in CTA_NAME_HINTS):
            return make_element(ElementType.button, self._text_of(node) or name, name)
        if any(hint in lowered for hint in TEXTAREA_NAME_HINTS):
            return make_element(ElementType.textarea, self._text_of(node), name)
        if any(hint in lowered for hint in INPUT_NAME_HINTS):
            return make_element(ElementType.input, self._text_of(node), name)
        return None

    def _has_image_fill(self, node: Mapping[str, Any]) -> bool:
        return any(isinstance(fill, Mapping) and fill.get("type") == "IMAGE" for fill in node.get("fills") or ())

    def _text_of(self, node: Mapping[str, Any]) -> str:
        if node.get("type") == "TEXT":
            return (node.get("characters") or "").strip()
        return " ".join(filter(None, (self._text_of(child) for child in self._children(node))))

    def _layout_hints(self, node: Mapping[str, Any]) -> list[str]:
        hints = [str(node.get("layoutMode") or "").lower()]
        if node.get("layoutWrap") == "WRAP":
            hints.append("grid")
        hints.extend((child.get("name") or "").lower() for child in self._children(node))
        return [hint for hint in hints if hint]


def sections_from_metadata(metadata: Mapping[str, Any] | Sequence[Any] | None) -> list[ContentSection]:
    return MetadataIngestor().parse(metadata)


__all__ = ["MetadataIngestor", "sections_from_metadata"]
