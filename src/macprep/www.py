from __future__ import annotations

import shutil
from pathlib import Path

from .locations import AppProject, ProjectLocations
from .log import get_logger

logger = get_logger(__name__)


def _copy_contents(source: Path, destination: Path) -> None:
    if not source.is_dir():
        logger.debug("Nothing to copy from %s", source)
        return
    shutil.copytree(source, destination, dirs_exist_ok=True)


def update_www(
    app_project: AppProject,
    locations: ProjectLocations,
    platform: str,
    copy_merges: bool = True,
) -> None:
    """Rebuild the platform www from app www, platform_www and merges, in that order."""
    shutil.rmtree(locations.www, ignore_errors=True)
    locations.www.mkdir(parents=True, exist_ok=True)

    _copy_contents(app_project.www, locations.www)
    _copy_contents(locations.platform_www, locations.www)

    merges = app_project.merges(platform)
    if copy_merges and merges.is_dir():
        logger.debug('Found "merges" for %s platform. Copying over existing "www" files.', platform)
        _copy_contents(merges, locations.www)
