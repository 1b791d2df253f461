"""Product rename for an Xcode project.

Only the ``PRODUCT_NAME`` build setting and plain-text occurrences of the old
name are touched; the rest of ``project.pbxproj`` is passed through as is.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path

from .errors import ProjectFileError
from .locations import ProjectLocations
from .log import get_logger

logger = get_logger(__name__)

PBXPROJ_HEADER = "// !$*UTF8*$!"

_OBJECTS_SECTION = re.compile(r"\bobjects\s*=\s*\{")
_PRODUCT_NAME = re.compile(r'(\bPRODUCT_NAME\s*=\s*)("(?:[^"\\]|\\.)*"|[^;\n]+)(;)')


def read_pbxproj(path: Path) -> str:
    try:
        contents = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ProjectFileError(f"Unable to read {path}: {exc}") from exc
    if not contents.lstrip().startswith(PBXPROJ_HEADER) or not _OBJECTS_SECTION.search(contents):
        raise ProjectFileError(f"An error occurred during parsing of {path}")
    return contents


def quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def update_product_name(contents: str, name: str) -> str:
    replacement = quote(name)
    return _PRODUCT_NAME.sub(
        lambda m: m.group(1) + replacement + m.group(3), contents
    )


def _move(source: Path, destination: Path) -> None:
    if not source.exists():
        return
    if destination.exists():
        raise ProjectFileError(f"Cannot rename {source}: {destination} already exists")
    shutil.move(str(source), str(destination))


def rename_project(
    locations: ProjectLocations, name: str, remove_xcuserdata: bool = True
) -> None:
    """Rename the product, its files and directories from the current name to ``name``.

    ``locations`` is updated in place to point at the renamed paths.
    """
    original = locations.project_name
    if name == original:
        logger.debug('OSX Product Name has not changed (still "%s")', original)
        return

    contents = read_pbxproj(locations.pbxproj)

    cordova_proj = locations.xcode_cordova_proj
    _move(cordova_proj / f"{original}-Info.plist", cordova_proj / f"{name}-Info.plist")
    _move(cordova_proj / f"{original}-Prefix.pch", cordova_proj / f"{name}-Prefix.pch")
    if remove_xcuserdata:
        shutil.rmtree(locations.xcode_proj_dir / "xcuserdata", ignore_errors=True)
    _move(locations.xcode_proj_dir, locations.root / f"{name}.xcodeproj")
    _move(cordova_proj, locations.root / name)
    locations.rename(name)

    # PRODUCT_NAME is set after the blanket rename
    contents = update_product_name(contents.replace(original, name), name)
    locations.pbxproj.write_text(contents, encoding="utf-8")
    logger.info(
        'Updated OSX Product Name and Xcode project file names from "%s" to "%s"',
        original,
        name,
    )
