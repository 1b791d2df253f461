from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError


class IconSlot(BaseModel):
    dest: str
    width: int
    height: int


def _default_icon_slots() -> list[IconSlot]:
    return [
        IconSlot(dest=f"icon-{size}x{size}.png", width=size, height=size)
        for size in (1024, 512, 256, 128, 64, 32, 16)
    ]


class Settings(BaseModel):
    platform: str = "osx"
    icon_set_dir: str = "Images.xcassets/AppIcon.appiconset"
    icon_sizes: list[IconSlot] = Field(default_factory=_default_icon_slots)

    copy_merges: bool = True
    remove_xcuserdata: bool = True
    log_level: str = "INFO"


def load_config(path: Optional[str] = None) -> Settings:
    if not path:
        return Settings()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return Settings()
    try:
        data = yaml.safe_load(cfg_path.read_text()) or {}
        return Settings(**data)
    except (yaml.YAMLError, ValidationError, TypeError) as exc:
        raise ConfigError(f"Invalid settings file {cfg_path}: {exc}") from exc
