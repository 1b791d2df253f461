from __future__ import annotations

import copy
import shutil
from pathlib import Path
from typing import Iterator, Optional

from lxml import etree

from .errors import ConfigError
from .locations import ProjectLocations
from .log import get_logger
from .models import AccessRule, Icon, NavigationRule

logger = get_logger(__name__)

IDENTITY_ATTRIBUTES = ("name", "origin", "href", "src")
SINGLETONS = ("content", "author", "name")
UNMERGED = ("feature", "plugin", "engine")


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def _elements(parent: etree._Element, name: str) -> Iterator[etree._Element]:
    for child in parent:
        if isinstance(child.tag, str) and _local_name(child) == name:
            yield child


def _int_attr(element: etree._Element, key: str) -> Optional[int]:
    value = element.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class IconList(list):
    def get_by_size(self, width: int, height: int) -> Optional[Icon]:
        for icon in self:
            if icon.width is None and icon.height is None:
                continue
            if (icon.width is None or icon.width == width) and (
                icon.height is None or icon.height == height
            ):
                return icon
        return None

    def get_default(self) -> Optional[Icon]:
        default = None
        for icon in self:
            if icon.width is None and icon.height is None and icon.density is None:
                default = icon
        return default


class ConfigParser:
    """Read access to an app's config.xml."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        try:
            self.doc = etree.parse(str(self.path))
        except (OSError, etree.XMLSyntaxError) as exc:
            raise ConfigError(f"Unable to parse {self.path}: {exc}") from exc
        self.root = self.doc.getroot()

    def _text(self, name: str) -> Optional[str]:
        for element in _elements(self.root, name):
            return (element.text or "").strip()
        return None

    def name(self) -> Optional[str]:
        return self._text("name")

    def author(self) -> Optional[str]:
        return self._text("author")

    def package_name(self) -> Optional[str]:
        return self.root.get("id")

    def ios_cfbundle_identifier(self) -> Optional[str]:
        return self.root.get("ios-CFBundleIdentifier")

    def version(self) -> Optional[str]:
        return self.root.get("version")

    def ios_cfbundle_version(self) -> Optional[str]:
        return self.root.get("ios-CFBundleVersion")

    def get_icons(self, platform: Optional[str] = None) -> IconList:
        icons = IconList()
        for element in _elements(self.root, "icon"):
            owner = element.get("platform")
            if owner and owner != platform:
                continue
            icons.append(self._icon(element, owner))
        if platform:
            for block in _elements(self.root, "platform"):
                if block.get("name") != platform:
                    continue
                for element in _elements(block, "icon"):
                    icons.append(self._icon(element, platform))
        return icons

    @staticmethod
    def _icon(element: etree._Element, platform: Optional[str]) -> Icon:
        return Icon(
            src=element.get("src", ""),
            width=_int_attr(element, "width"),
            height=_int_attr(element, "height"),
            density=element.get("density"),
            platform=platform,
        )

    def get_accesses(self) -> list[AccessRule]:
        rules = []
        for element in _elements(self.root, "access"):
            origin = element.get("origin")
            if origin is None:
                logger.debug("Ignoring <access> without origin")
                continue
            rules.append(
                AccessRule(
                    origin=origin,
                    minimum_tls_version=element.get("minimum-tls-version"),
                    requires_forward_secrecy=element.get("requires-forward-secrecy"),
                )
            )
        return rules

    def get_allow_navigations(self) -> list[NavigationRule]:
        rules = []
        for element in _elements(self.root, "allow-navigation"):
            href = element.get("href")
            if href is None:
                logger.debug("Ignoring <allow-navigation> without href")
                continue
            rules.append(
                NavigationRule(
                    href=href,
                    minimum_tls_version=element.get("minimum-tls-version"),
                    requires_forward_secrecy=element.get("requires-forward-secrecy"),
                )
            )
        return rules

    def write(self) -> None:
        self.doc.write(str(self.path), xml_declaration=True, encoding="utf-8")


def _identity(element: etree._Element) -> tuple:
    if _local_name(element) in SINGLETONS:
        return (_local_name(element),)
    for key in IDENTITY_ATTRIBUTES:
        if element.get(key) is not None:
            return (_local_name(element), key, element.get(key))
    return (_local_name(element),)


def _merge_child(child: etree._Element, target: etree._Element) -> None:
    if _local_name(child) in UNMERGED:
        return
    identity = _identity(child)
    for existing in target:
        if isinstance(existing.tag, str) and _identity(existing) == identity:
            target.replace(existing, copy.deepcopy(child))
            return
    target.append(copy.deepcopy(child))


def merge_xml(source: etree._Element, target: etree._Element, platform: str) -> None:
    """Merge ``source`` into ``target``, source elements winning.

    Children of ``<platform name="{platform}">`` are merged as top-level
    elements; blocks for other platforms are dropped.
    """
    for key, value in source.attrib.items():
        target.set(key, value)
    for child in source:
        if not isinstance(child.tag, str):
            continue
        if _local_name(child) == "platform":
            if child.get("name") == platform:
                for platform_child in child:
                    if isinstance(platform_child.tag, str):
                        _merge_child(platform_child, target)
            continue
        _merge_child(child, target)


def update_config_file(
    source_config: ConfigParser, locations: ProjectLocations, platform: str
) -> ConfigParser:
    logger.debug('Generating config.xml from defaults for platform "%s"', platform)
    if not locations.default_config_xml.exists():
        raise ConfigError(f"Missing platform defaults: {locations.default_config_xml}")
    locations.config_xml.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(locations.default_config_xml, locations.config_xml)

    config = ConfigParser(locations.config_xml)
    merge_xml(source_config.root, config.root, platform)
    config.write()
    return config
