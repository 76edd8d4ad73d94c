from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..dictionaries import (
    CTA_PHRASES,
    MULTILANGUAGE_PHRASES,
    POST_TEMPLATE_PHRASES,
    SECTION_KEYWORDS,
    SHOWCASE_PHRASES,
)
from ..field_builder import sanitize_name
from ..models.section import ContentSection
from .elements import section_from_name

logger = logging.getLogger(__name__)

SEE_MORE_WINDOW = 25
_TEMPLATE_NAME = re.compile(r"""\b(?:called|named)\s+["'“]([^"'”]+)["'”]""", re.I)


def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(phrase)}\b")


def _contains_any(text: str, phrases) -> bool:
    return any(_phrase_pattern(phrase).search(text) for phrase in phrases)


@dataclass
class PromptIntent:
    sections: list[str] = field(default_factory=list)
    collections: set[str] = field(default_factory=set)
    include_cta: bool = False
    template_type: str = "pages"
    multilanguage: bool = False
    name: str | None = None

    @property
    def is_content(self) -> bool:
        return self.template_type == "posts"


class PromptIngestor:
    """Keyword scan of a free-text request for sections and template intent."""

    def __init__(self, *, keywords=SECTION_KEYWORDS, window: int = SEE_MORE_WINDOW) -> None:
        self._keywords = dict(keywords)
        self._window = window

    def parse(self, prompt: str) -> PromptIntent:
        text = (prompt or "").lower()
        intent = PromptIntent(
            include_cta=_contains_any(text, CTA_PHRASES),
            template_type="posts" if _contains_any(text, POST_TEMPLATE_PHRASES) else "pages",
            multilanguage=_contains_any(text, MULTILANGUAGE_PHRASES),
            name=self._template_name(prompt or ""),
        )
        for position, phrase, section in self._matches(text):
            if section not in intent.sections:
                intent.sections.append(section)
            if self._mentions_collection(text, position, phrase):
                intent.collections.add(section)
        logger.debug(
            "Parsed prompt intent",
            extra={
                "sections": intent.sections,
                "collections": sorted(intent.collections),
                "template_type": intent.template_type,
            },
        )
        return intent

    def to_sections(self, intent: PromptIntent) -> list[ContentSection]:
        return [
            section_from_name(name, collection=name in intent.collections, source="prompt")
            for name in intent.sections
        ]

    def _matches(self, text: str) -> list[tuple[int, str, str]]:
        found: list[tuple[int, str, str]] = []
        taken: list[range] = []
        # Longer phrases first so "about us" wins over "about".
        for phrase in sorted(self._keywords, key=len, reverse=True):
            for match in _phrase_pattern(phrase).finditer(text):
                span = range(match.start(), match.end())
                if any(match.start() in other or match.end() - 1 in other for other in taken):
                    continue
                taken.append(span)
                found.append((match.start(), phrase, self._keywords[phrase]))
        return sorted(found)

    def mentions_collection(self, prompt: str, section_name: str) -> bool:
        """True when a see-more cue or "<section> showcase" sits next to the section name."""
        text = (prompt or "").lower()
        for phrase in {section_name.lower(), section_name.lower().replace("_", " ")}:
            position = text.find(phrase)
            if phrase and position != -1 and self._mentions_collection(text, position, phrase):
                return True
        return False

    def _mentions_collection(self, text: str, position: int, phrase: str) -> bool:
        start = max(0, position - self._window)
        context = text[start : position + len(phrase) + self._window]
        if any(cue in context for cue in SHOWCASE_PHRASES):
            return True
        return f"{phrase} showcase" in context or f"{phrase}showcase" in context

    def _template_name(self, prompt: str) -> str | None:
        match = _TEMPLATE_NAME.search(prompt)
        if not match:
            return None
        return sanitize_name(match.group(1)) or None


__all__ = ["PromptIngestor", "PromptIntent"]
