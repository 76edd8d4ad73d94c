from __future__ import annotations

from typing import Any, Sequence

HERO_RESOLUTION = {"minWidth": 1200, "maxWidth": 1920, "minHeight": 600, "maxHeight": 1080}
ICON_RESOLUTION = {"minWidth": 16, "maxWidth": 128, "minHeight": 16, "maxHeight": 128}
GALLERY_RESOLUTION = {"minWidth": 400, "maxWidth": 1200, "minHeight": 300, "maxHeight": 800}
THUMBNAIL_RESOLUTION = {"minWidth": 150, "maxWidth": 600, "minHeight": 150, "maxHeight": 600}

# (name/context hints, min, max), first match wins.
REPEATER_BOUNDS: Sequence[tuple[Sequence[str], int, int]] = (
    (("features",), 1, 8),
    (("gallery", "images"), 1, 24),
    (("testimonial",), 1, 6),
    (("team", "member"), 1, 12),
    (("pricing", "plan"), 1, 5),
)
DEFAULT_REPEATER_BOUNDS = (1, 10)


def _has(text: str, hints: Sequence[str]) -> bool:
    return any(hint in text for hint in hints)


def humanize(name: str) -> str:
    return " ".join(part for part in name.replace("-", "_").split("_") if part)


def synthesize_attributes(field_name: str, kind: str, context: str = "") -> dict[str, Any]:
    """Derive default attributes for a field from its name, kind and section context.

    The result only holds defaults; the field builder layers registry examples
    and caller options on top of it.
    """
    name = (field_name or "").lower()
    ctx = (context or "").lower()
    words = humanize(name)

    if kind == "input":
        return _input_attributes(name, words)
    if kind == "textarea":
        return _textarea_attributes(name, ctx, words)
    if kind == "texteditor":
        return {"type": "text", "placeholder": f"Write {words or 'content'} here"}
    if kind == "select":
        return {"placeholder": f"Select {words}".strip()}
    if kind == "media":
        return _media_attributes(name, ctx)
    if kind == "repeater":
        minimum, maximum = repeater_bounds(name, ctx)
        return {"min": minimum, "max": maximum, "caption": f"Add {words} items"}
    if kind == "group":
        return {"caption": f"{words.capitalize()} settings" if words else "Settings"}
    if kind == "toggle":
        if name == "status":
            return {"defaultValue": True, "caption": f"Enable or disable the {ctx or 'this'} section"}
        return {"defaultValue": False}
    if kind == "relationship":
        return {"min": 0, "max": 10, "caption": f"Select related {words}".strip()}
    if kind == "post_object":
        return {"multiple": False}
    if kind == "post_related":
        return {"caption": f"Related {words}".strip()}
    if kind == "table":
        return {"min": 1, "max": 20}
    return {}


def _input_attributes(name: str, words: str) -> dict[str, Any]:
    if "email" in name:
        return {"type": "email", "placeholder": "contact@example.com"}
    if "phone" in name or "tel" in name:
        return {"type": "tel", "placeholder": "+1 (555) 123-4567"}
    if _has(name, ("url", "website", "link")):
        return {"type": "url", "placeholder": "https://example.com"}
    if "number" in name or "count" in name:
        return {"type": "number", "placeholder": "0"}
    if "title" in name or "name" in name:
        return {"type": "text", "placeholder": f"Enter {words}", "maxLength": 100}
    return {"type": "text", "placeholder": f"Enter {words}".strip()}


def _textarea_attributes(name: str, ctx: str, words: str) -> dict[str, Any]:
    if "description" in name or "content" in name:
        return {"rows": 4, "max": 500, "placeholder": f"Enter {words}"}
    if "testimonial" in ctx:
        return {"rows": 4, "max": 500, "placeholder": f"Enter {words}".strip()}
    return {"rows": 3, "max": 200, "placeholder": f"Enter {words}".strip()}


def _media_attributes(name: str, ctx: str) -> dict[str, Any]:
    if "video" in name:
        return {"accept": ["video"]}
    if "document" in name or "file" in name:
        return {"accept": ["document"]}
    attributes: dict[str, Any] = {"accept": ["image"]}
    if _has(name, ("icon", "logo")):
        attributes["resolution"] = dict(ICON_RESOLUTION)
    elif _has(name, ("hero", "banner")) or "hero" in ctx:
        attributes["resolution"] = dict(HERO_RESOLUTION)
    elif "gallery" in ctx:
        attributes["resolution"] = dict(GALLERY_RESOLUTION)
    elif "thumbnail" in name:
        attributes["resolution"] = dict(THUMBNAIL_RESOLUTION)
    return attributes


def repeater_bounds(name: str, context: str = "") -> tuple[int, int]:
    signal = f"{name} {context}".lower()
    for hints, minimum, maximum in REPEATER_BOUNDS:
        if _has(signal, hints):
            return minimum, maximum
    return DEFAULT_REPEATER_BOUNDS


def suggest_options(field_name: str, kind: str) -> dict[str, Any]:
    """Caller-level options (``inputType``/``accept``) implied by a field name.

    Used by code that builds fields on the caller's behalf so the explicit
    options steer example selection and win over registry examples.
    """
    name = (field_name or "").lower()
    if kind == "input":
        input_type = _input_attributes(name, "")["type"]
        return {"inputType": input_type} if input_type != "text" else {}
    if kind == "media":
        return {"accept": list(_media_attributes(name, "")["accept"])}
    return {}


__all__ = ["humanize", "repeater_bounds", "suggest_options", "synthesize_attributes"]
