from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    environment: str = "dev"
    project_id: str | None = None
    registry_path: Path | None = None
    exclude_layout_sections: bool = True

    @property
    def use_cloud_logging(self) -> bool:
        return bool(self.project_id) and self.environment != "dev"


def load_settings() -> Settings:
    """Read settings from the environment.

    ENVIRONMENT, PROJECT_ID, FIELD_TYPES_REGISTRY_PATH and
    EXCLUDE_LAYOUT_SECTIONS are recognised.
    """
    registry_path = os.getenv("FIELD_TYPES_REGISTRY_PATH")
    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        project_id=os.getenv("PROJECT_ID") or None,
        registry_path=Path(registry_path) if registry_path else None,
        exclude_layout_sections=os.getenv("EXCLUDE_LAYOUT_SECTIONS", "true").strip().lower() in _TRUTHY,
    )


__all__ = ["Settings", "load_settings"]
