from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import Settings
from .config_parser import ConfigParser, update_config_file
from .errors import ConfigError
from .icons import handle_icons
from .info_plist import update_info_plist
from .locations import AppProject, ProjectLocations
from .log import get_logger
from .models import TransportSecurityPolicy
from .pbxproj import rename_project
from .www import update_www

logger = get_logger(__name__)


@dataclass
class PrepareResult:
    locations: ProjectLocations
    name: str
    ats: TransportSecurityPolicy
    icons: list[Path] = field(default_factory=list)

    def summary(self) -> dict:
        return {
            "status": "ok",
            "name": self.name,
            "project": str(self.locations.xcode_proj_dir),
            "ats": self.ats.to_plist(),
            "icons": len(self.icons),
        }


def update_project(
    config: ConfigParser, locations: ProjectLocations, settings: Settings
) -> tuple[str, TransportSecurityPolicy]:
    name = config.name()
    if not name:
        raise ConfigError(f"{config.path} has no <name>")
    # macOS file names are NFD
    name = unicodedata.normalize("NFD", name)

    policy = update_info_plist(locations.info_plist, config)
    rename_project(locations, name, remove_xcuserdata=settings.remove_xcuserdata)
    return name, policy


def prepare(
    app_project: AppProject,
    platform_root: Path,
    settings: Optional[Settings] = None,
) -> PrepareResult:
    """Bring the native project at ``platform_root`` in line with ``app_project``."""
    settings = settings or Settings()
    locations = ProjectLocations.discover(platform_root)
    source_config = ConfigParser(app_project.config_xml)

    config = update_config_file(source_config, locations, settings.platform)
    update_www(app_project, locations, settings.platform, copy_merges=settings.copy_merges)
    name, policy = update_project(config, locations, settings)
    icons = handle_icons(
        source_config,
        locations.xcode_cordova_proj,
        settings.platform,
        settings.icon_set_dir,
        settings.icon_sizes,
    )
    logger.info("Updated project %s successfully", locations.xcode_proj_dir)
    return PrepareResult(locations=locations, name=name, ats=policy, icons=icons)
