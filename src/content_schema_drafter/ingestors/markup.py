from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field

from ..models.section import ContentSection, Element, ElementType
from .elements import (
    CTA_NAME_HINTS,
    detect_patterns,
    flatten_items,
    make_element,
    repeated_items,
    section_key,
)

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<(/?)([a-zA-Z][\w-]*)([^>]*?)(/?)>", re.S)
_ATTR = re.compile(r"""([\w:-]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?""")
_COMMENT = re.compile(r"<!--.*?-->|<(script|style)\b.*?</\1\s*>", re.S | re.I)
_WHITESPACE = re.compile(r"\s+")

FRAME_TYPES = frozenset({"FRAME", "GROUP", "SECTION", "COMPONENT", "INSTANCE"})
SECTION_TAGS = frozenset({"section", "header", "footer", "nav", "main", "article", "aside"})
HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
TEXT_TAGS = HEADING_TAGS | {"p", "span", "a", "li", "label", "blockquote", "small", "strong", "em"}
VOID_TAGS = frozenset({"img", "input", "br", "hr", "meta", "link", "source", "wbr"})


@dataclass
class _Frame:
    tag: str
    name: str
    data_type: str | None
    hints: list[str] = field(default_factory=list)
    parts: list[Element | list[Element]] = field(default_factory=list)


@dataclass
class _Leaf:
    tag: str
    type: ElementType
    name: str | None
    text: list[str] = field(default_factory=list)
    attributes: dict[str, object] = field(default_factory=dict)


class MarkupIngestor:
    """Turn design-tool HTML exports into content sections.

    The export is scanned tag by tag; no DOM is built. Frames (elements with a
    ``data-type`` of FRAME/GROUP/SECTION/COMPONENT/INSTANCE, or sectioning
    tags) delimit sections and the blocks inside them, everything else is read
    as text, image, button, input or textarea content.
    """

    def parse(self, markup: str) -> list[ContentSection]:
        """Scan ``markup`` and return its top-level sections in document order.

        Args:
            markup: HTML exported from the design tool

        Returns:
            List of ContentSection instances
        """
        sections: list[ContentSection] = []
        stack: list[tuple[str, _Frame | _Leaf | None]] = []
        markup = _COMMENT.sub("", markup or "")

        position = 0
        for match in _TAG.finditer(markup):
            self._on_text(stack, markup[position : match.start()])
            position = match.end()
            closing, tag, raw_attributes, self_closing = match.groups()
            tag = tag.lower()
            if closing:
                self._close(stack, tag, sections)
                continue
            attributes = self._parse_attributes(raw_attributes)
            if tag in VOID_TAGS:
                self._on_void(stack, tag, attributes)
                continue
            entry = self._open(stack, tag, attributes)
            stack.append((tag, entry))
            if self_closing:
                self._close(stack, tag, sections)
        self._on_text(stack, markup[position:])
        while stack:
            self._close(stack, stack[-1][0], sections)

        logger.debug("Parsed markup sections", extra={"sections": [section.name for section in sections]})
        return sections

    def _parse_attributes(self, raw: str) -> dict[str, str]:
        return {
            name.lower(): html.unescape(double or single or bare)
            for name, double, single, bare in _ATTR.findall(raw or "")
        }

    def _open(self, stack: list, tag: str, attributes: dict[str, str]) -> _Frame | _Leaf | None:
        if self._current_leaf(stack) is not None:
            return None
        name = attributes.get("data-name") or attributes.get("id") or attributes.get("aria-label")
        data_type = (attributes.get("data-type") or "").upper() or None
        hint_text = " ".join(filter(None, [attributes.get("class"), attributes.get("data-layout")]))

        if tag == "button" or self._looks_like_button(tag, attributes):
            return _Leaf(tag, ElementType.button, name, attributes=self._link(attributes))
        if tag == "textarea":
            return _Leaf(tag, ElementType.textarea, name or attributes.get("name"), attributes={"placeholder": attributes.get("placeholder")})
        if data_type in FRAME_TYPES or tag in SECTION_TAGS:
            # Button components are exported as instances inside a section.
            if data_type in ("INSTANCE", "COMPONENT") and self._current_frame(stack) and self._named_like_cta(name):
                return _Leaf(tag, ElementType.button, name)
            frame_name = name or (tag if tag in SECTION_TAGS else "")
            return _Frame(tag, frame_name, data_type, hints=[hint_text] if hint_text else [])
        if tag in TEXT_TAGS:
            if self._named_like_cta(name):
                return _Leaf(tag, ElementType.button, name, attributes=self._link(attributes))
            return _Leaf(tag, ElementType.text, name, attributes={"heading": tag in HEADING_TAGS, **self._link(attributes)})
        return None

    def _looks_like_button(self, tag: str, attributes: dict[str, str]) -> bool:
        classes = attributes.get("class", "").lower()
        if attributes.get("role") == "button":
            return True
        return tag == "a" and ("btn" in classes or "button" in classes)

    def _named_like_cta(self, name: str | None) -> bool:
        lowered = (name or "").lower()
        return bool(lowered) and any(hint in lowered for hint in CTA_NAME_HINTS)

    def _link(self, attributes: dict[str, str]) -> dict[str, object]:
        return {"href": attributes["href"]} if attributes.get("href") else {}

    def _on_void(self, stack: list, tag: str, attributes: dict[str, str]) -> None:
        frame = self._current_frame(stack)
        if frame is None:
            return
        name = attributes.get("data-name") or attributes.get("name") or attributes.get("alt")
        if tag == "img":
            frame.parts.append(make_element(ElementType.image, attributes.get("src", ""), name or "image", alt=attributes.get("alt")))
        elif tag == "input":
            input_type = attributes.get("type", "text").lower()
            if input_type in ("submit", "button"):
                frame.parts.append(make_element(ElementType.button, attributes.get("value", "Submit"), name or "submit"))
            else:
                frame.parts.append(
                    make_element(
                        ElementType.input,
                        attributes.get("placeholder", ""),
                        name or input_type,
                        input_type=input_type,
                        required=True if "required" in attributes else None,
                    )
                )

    def _on_text(self, stack: list, raw: str) -> None:
        text = _WHITESPACE.sub(" ", html.unescape(raw)).strip()
        if not text or not stack:
            return
        leaf = self._current_leaf(stack)
        if leaf is not None:
            leaf.text.append(text)
            return
        frame = self._current_frame(stack)
        if frame is not None:
            frame.parts.append(make_element(ElementType.text, text))

    def _close(self, stack: list, tag: str, sections: list[ContentSection]) -> None:
        if not any(open_tag == tag for open_tag, _ in stack):
            return
        while stack:
            open_tag, entry = stack.pop()
            if isinstance(entry, _Leaf):
                self._emit_leaf(stack, entry)
            elif isinstance(entry, _Frame):
                self._emit_frame(stack, entry, sections)
            if open_tag == tag:
                return

    def _emit_leaf(self, stack: list, leaf: _Leaf) -> None:
        frame = self._current_frame(stack)
        if frame is None:
            return
        content = " ".join(leaf.text)
        attributes = dict(leaf.attributes)
        heading = attributes.pop("heading", False)
        if not content and leaf.type is not ElementType.textarea:
            return
        element = make_element(leaf.type, content, leaf.name, **attributes)
        if heading and element.role is None:
            element = element.model_copy(update={"role": "heading"})
        frame.parts.append(element)

    def _emit_frame(self, stack: list, frame: _Frame, sections: list[ContentSection]) -> None:
        parent = self._current_frame(stack)
        if parent is None:
            sections.append(self._build_section(frame, len(sections) + 1))
            return
        parent.hints.extend(frame.hints)
        elements = self._collapse(frame)
        if frame.data_type == "GROUP" and elements:
            parent.parts.append(
                [
                    Element(
                        type=ElementType.text,
                        name=section_key(frame.name) or "group",
                        structure="group",
                        children=elements,
                        attributes={"label": frame.name} if frame.name else {},
                    )
                ]
            )
        else:
            parent.parts.append(elements)

    def _collapse(self, frame: _Frame) -> list[Element]:
        blocks = [part for part in frame.parts if isinstance(part, list)]
        repeated = repeated_items(blocks)
        elements: list[Element] = []
        flattened = False
        for part in frame.parts:
            if isinstance(part, Element):
                elements.append(part)
            elif repeated:
                if not flattened:
                    elements.extend(flatten_items(blocks))
                    flattened = True
            else:
                elements.extend(part)
        return elements

    def _build_section(self, frame: _Frame, index: int) -> ContentSection:
        blocks = [part for part in frame.parts if isinstance(part, list)]
        is_repeater = repeated_items(blocks)
        elements = self._collapse(frame)
        name = section_key(frame.name) or f"section_{index}"
        heading = next((element.content for element in elements if element.role == "heading"), None)
        label = frame.name.strip() if frame.name and not frame.name.islower() else None
        return ContentSection(
            name=name,
            label=label or heading,
            elements=elements,
            patterns=detect_patterns(
                name,
                elements,
                hints=frame.hints,
                is_repeater=is_repeater,
                is_group=frame.data_type == "GROUP" or any(element.structure == "group" for element in elements),
            ),
            source="markup",
        )

    def _current_frame(self, stack: list) -> _Frame | None:
        for _, entry in reversed(stack):
            if isinstance(entry, _Frame):
                return entry
        return None

    def _current_leaf(self, stack: list) -> _Leaf | None:
        for _, entry in reversed(stack):
            if isinstance(entry, _Leaf):
                return entry
            if isinstance(entry, _Frame):
                return None
        return None


def sections_from_markup(markup: str) -> list[ContentSection]:
    return MarkupIngestor().parse(markup)


__all__ = ["MarkupIngestor", "sections_from_markup"]
