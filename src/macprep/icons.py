from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable

from .config import IconSlot
from .config_parser import ConfigParser
from .errors import PrepareError
from .log import get_logger

logger = get_logger(__name__)


def handle_icons(
    config: ConfigParser,
    platform_root: Path,
    platform: str,
    icon_set_dir: str,
    slots: Iterable[IconSlot],
) -> list[Path]:
    """Copy configured icons into the app icon set at fixed sizes."""
    icons = config.get_icons(platform)
    app_root = config.path.parent
    icon_set = platform_root / icon_set_dir
    copied: list[Path] = []
    for slot in slots:
        icon = icons.get_by_size(slot.width, slot.height) or icons.get_default()
        if not icon:
            continue
        src = app_root / icon.src
        dst = icon_set / slot.dest
        if not src.is_file():
            raise PrepareError(f"Icon not found: {src}")
        logger.debug("Copying icon from %s to %s", src, dst)
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dst)
        copied.append(dst)
    return copied
