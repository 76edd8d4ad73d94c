from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .dictionaries import COLLECTION_NOUNS, GROUP_NAME_HINTS, REPEATER_NAME_HINTS, SEE_MORE_PHRASES
from .ingestors.elements import section_key
from .models.analysis import Archetype, SectionAnalysis
from .models.section import ContentPatterns, ContentSection, Element, ElementType

logger = logging.getLogger(__name__)

POST_COLLECTION_THRESHOLD = 0.8
POST_SEE_MORE_WEIGHT = 0.8
POST_COLLECTION_NAME_WEIGHT = 0.6
POST_REPEATED_STRUCTURE_WEIGHT = 0.4

REPEATER_THRESHOLD = 0.7
REPEATER_PREFLAG_WEIGHT = 0.5
REPEATER_ELEMENT_COUNT_WEIGHT = 0.3
REPEATER_PATTERN_WEIGHT = 0.4
REPEATER_NAME_WEIGHT = 0.3
REPEATER_MIN_ELEMENTS = 3

GROUP_THRESHOLD = 0.6
GROUP_PREFLAG_WEIGHT = 0.4
GROUP_TYPE_VARIETY_WEIGHT = 0.3
GROUP_NAME_WEIGHT = 0.3
GROUP_MIN_DISTINCT_TYPES = 2

MEDIA_IMAGE_RATIO = 0.6
MEDIA_CONFIDENCE = 0.8
FORM_CONFIDENCE = 0.9
SINGLE_MIN_CONFIDENCE = 0.3
SINGLE_ELEMENT_PENALTY = 0.1

_PRECISION = 4


@dataclass
class Score:
    value: float = 0.0
    reasons: list[str] = field(default_factory=list)

    def add(self, weight: float, reason: str) -> None:
        self.value += weight
        self.reasons.append(reason)

    @property
    def clamped(self) -> float:
        return round(min(1.0, max(0.0, self.value)), _PRECISION)


def _distinct_types(elements: Sequence[Element]) -> int:
    return len({element.type for element in elements})


def _has_see_more(element: Element) -> bool:
    if element.role == "see_more":
        return True
    content = element.content.lower()
    return any(phrase in content for phrase in SEE_MORE_PHRASES)


def score_post_collection(section: ContentSection, patterns: ContentPatterns) -> Score:
    score = Score()
    elements = section.elements
    if any(_has_see_more(element) for element in elements):
        score.add(POST_SEE_MORE_WEIGHT, "has a see-more link")
    if section_key(section.name) in COLLECTION_NOUNS:
        score.add(POST_COLLECTION_NAME_WEIGHT, f"name '{section.name}' is a collection noun")
    if elements and _distinct_types(elements) < len(elements) / 3:
        score.add(POST_REPEATED_STRUCTURE_WEIGHT, "few element types for many elements")
    return score


def score_repeater(section: ContentSection, patterns: ContentPatterns) -> Score:
    score = Score()
    elements = section.elements
    name = section.name.lower()
    if patterns.is_repeater:
        score.add(REPEATER_PREFLAG_WEIGHT, "repeated blocks detected")
    if len(elements) > REPEATER_MIN_ELEMENTS:
        score.add(REPEATER_ELEMENT_COUNT_WEIGHT, f"{len(elements)} elements")
    if elements and _distinct_types(elements) < len(elements) / 2:
        score.add(REPEATER_PATTERN_WEIGHT, "element types repeat")
    if any(hint in name for hint in REPEATER_NAME_HINTS):
        score.add(REPEATER_NAME_WEIGHT, "name suggests a list")
    return score


def score_group(section: ContentSection, patterns: ContentPatterns) -> Score:
    score = Score()
    name = section.name.lower()
    if patterns.is_group:
        score.add(GROUP_PREFLAG_WEIGHT, "grouped content detected")
    if _distinct_types(section.elements) > GROUP_MIN_DISTINCT_TYPES:
        score.add(GROUP_TYPE_VARIETY_WEIGHT, "mixed element types")
    if any(hint in name for hint in GROUP_NAME_HINTS):
        score.add(GROUP_NAME_WEIGHT, "name suggests related details")
    return score


def image_ratio(elements: Sequence[Element]) -> float:
    if not elements:
        return 0.0
    return sum(1 for element in elements if element.type is ElementType.image) / len(elements)


def single_confidence(element_count: int) -> float:
    return round(max(SINGLE_MIN_CONFIDENCE, 1 - SINGLE_ELEMENT_PENALTY * element_count), _PRECISION)


Scorer = Callable[[ContentSection, ContentPatterns], Score]

# Fixed precedence: the first archetype reaching its threshold wins.
THRESHOLD_SCORERS: Sequence[tuple[Archetype, Scorer, float]] = (
    (Archetype.post_collection, score_post_collection, POST_COLLECTION_THRESHOLD),
    (Archetype.repeater, score_repeater, REPEATER_THRESHOLD),
    (Archetype.group, score_group, GROUP_THRESHOLD),
)


class SectionClassifier:
    """Pick the structural archetype of a content section."""

    def classify(self, section: ContentSection, patterns: ContentPatterns | None = None) -> SectionAnalysis:
        patterns = patterns or section.patterns
        elements = section.elements
        reasoning: list[str] = []

        for archetype, scorer, threshold in THRESHOLD_SCORERS:
            score = scorer(section, patterns)
            confidence = score.clamped
            reasoning.append(f"{archetype.value}: {confidence:.2f} ({', '.join(score.reasons) or 'no signal'})")
            if confidence >= threshold:
                return self._result(section, archetype, confidence, reasoning)

        ratio = image_ratio(elements)
        if ratio > MEDIA_IMAGE_RATIO:
            reasoning.append(f"media_gallery: image ratio {ratio:.2f}")
            return self._result(section, Archetype.media_gallery, MEDIA_CONFIDENCE, reasoning)

        if any(element.type is ElementType.input for element in elements):
            reasoning.append("form: input elements present")
            return self._result(section, Archetype.form, FORM_CONFIDENCE, reasoning)

        reasoning.append(f"single: {len(elements)} elements")
        return self._result(section, Archetype.single, single_confidence(len(elements)), reasoning)

    def _result(
        self,
        section: ContentSection,
        archetype: Archetype,
        confidence: float,
        reasoning: list[str],
    ) -> SectionAnalysis:
        logger.debug(
            "Classified section",
            extra={"section": section.name, "archetype": archetype.value, "confidence": confidence},
        )
        return SectionAnalysis(archetype=archetype, confidence=confidence, reasoning=reasoning)


def classify(section: ContentSection, patterns: ContentPatterns | None = None) -> SectionAnalysis:
    return SectionClassifier().classify(section, patterns)


__all__ = [
    "SectionClassifier",
    "Score",
    "classify",
    "image_ratio",
    "score_group",
    "score_post_collection",
    "score_repeater",
    "single_confidence",
]
