from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import PrepareError


@dataclass
class ProjectLocations:
    root: Path
    www: Path
    platform_www: Path
    default_config_xml: Path
    xcode_proj_dir: Path
    xcode_cordova_proj: Path

    @property
    def project_name(self) -> str:
        return self.xcode_cordova_proj.name

    @property
    def pbxproj(self) -> Path:
        return self.xcode_proj_dir / "project.pbxproj"

    @property
    def config_xml(self) -> Path:
        return self.xcode_cordova_proj / "config.xml"

    @property
    def info_plist(self) -> Path:
        return self.xcode_cordova_proj / f"{self.project_name}-Info.plist"

    def rename(self, name: str) -> None:
        self.xcode_cordova_proj = self.root / name
        self.xcode_proj_dir = self.root / f"{name}.xcodeproj"

    @classmethod
    def discover(cls, root: Path) -> "ProjectLocations":
        root = Path(root).resolve()
        if not root.is_dir():
            raise PrepareError(f"Platform directory not found: {root}")
        projects = sorted(p for p in root.glob("*.xcodeproj") if p.is_dir())
        if not projects:
            raise PrepareError(f"No .xcodeproj found in {root}")
        name = projects[0].stem
        return cls(
            root=root,
            www=root / "www",
            platform_www=root / "platform_www",
            default_config_xml=root / "cordova" / "defaults.xml",
            xcode_proj_dir=projects[0],
            xcode_cordova_proj=root / name,
        )


@dataclass
class AppProject:
    root: Path

    @property
    def www(self) -> Path:
        return self.root / "www"

    @property
    def config_xml(self) -> Path:
        return self.root / "config.xml"

    def merges(self, platform: str) -> Path:
        return self.root / "merges" / platform
