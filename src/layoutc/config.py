"""Configuration parsing for layoutc.yaml"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

CONFIG_FILE = "layoutc.yaml"

DEFAULT_EVENT_ATTRIBUTES = [
    "onClick",
    "onLongPress",
    "onPan",
    "onPinch",
    "onValueChange",
    "onSubmit",
]


@dataclass(frozen=True)
class ProjectPaths:
    """Absolute directories of one project."""

    root: Path
    layouts: Path
    styles: Path
    views: Path
    data: Path
    cache: Path


class ProjectConfig(BaseModel):
    """Root configuration from layoutc.yaml"""

    layouts_directory: str = "Layouts"
    styles_directory: str = "Styles"
    view_directory: str = "View"
    data_directory: str = "Data"
    cache_directory: str = ".layoutc_cache"
    partial_prefix: str = "_"
    # "tree" substitutes whole values after parsing, "text" replaces the raw source
    substitution: Literal["tree", "text"] = "tree"
    strict_bindings: bool = True
    workers: int = Field(default=1, ge=1)
    event_attributes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EVENT_ATTRIBUTES)
    )
    view_group: str = "View"
    data_group: str = "Data"

    class Config:
        extra = "allow"

    @classmethod
    def load(cls, root: Path) -> "ProjectConfig":
        """Load config from <root>/layoutc.yaml, or defaults if absent.

        Raises:
            ValueError: If the file is not a YAML mapping.
        """
        config_path = root / CONFIG_FILE
        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"{config_path} must contain a mapping")

        return cls.model_validate(data)

    def paths(self, root: Path) -> ProjectPaths:
        root = Path(root).resolve()
        return ProjectPaths(
            root=root,
            layouts=root / self.layouts_directory,
            styles=root / self.styles_directory,
            views=root / self.view_directory,
            data=root / self.data_directory,
            cache=root / self.cache_directory,
        )
