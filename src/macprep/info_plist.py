from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any, Optional
from xml.parsers.expat import ExpatError

from .ats import build_ats_policy
from .config_parser import ConfigParser
from .errors import ConfigError, ProjectFileError
from .log import get_logger
from .models import TransportSecurityPolicy

logger = get_logger(__name__)

ATS_KEY = "NSAppTransportSecurity"
AUTHOR_PLACEHOLDER = "--AUTHOR--"


def default_bundle_version(version: str) -> str:
    # "1.2.0-rc1" -> "1.2.0"
    return version.split("-")[0]


def read_plist(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            data = plistlib.load(handle)
    except (OSError, ValueError, ExpatError, plistlib.InvalidFileException) as exc:
        raise ProjectFileError(f"Unable to read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ProjectFileError(f"{path} does not contain a dictionary")
    return data


def write_plist(path: Path, data: dict[str, Any]) -> None:
    with path.open("wb") as handle:
        plistlib.dump(data, handle, sort_keys=False)


def apply_ats_policy(info: dict[str, Any], policy: TransportSecurityPolicy) -> None:
    """Replace the ATS dictionary, or drop it when the policy is empty."""
    if policy.is_empty():
        info.pop(ATS_KEY, None)
    else:
        info[ATS_KEY] = policy.to_plist()


def update_info_plist(
    path: Path,
    config: ConfigParser,
    policy: Optional[TransportSecurityPolicy] = None,
) -> TransportSecurityPolicy:
    version = config.version()
    if not version:
        raise ConfigError(f"{config.path} has no widget version")
    bundle_id = config.ios_cfbundle_identifier() or config.package_name()
    if not bundle_id:
        raise ConfigError(f"{config.path} has no widget id")

    info = read_plist(path)
    info["CFBundleIdentifier"] = bundle_id
    info["CFBundleShortVersionString"] = version
    info["CFBundleVersion"] = config.ios_cfbundle_version() or default_bundle_version(version)

    author = config.author()
    copyright_text = info.get("NSHumanReadableCopyright")
    if copyright_text and author:
        info["NSHumanReadableCopyright"] = copyright_text.replace(AUTHOR_PLACEHOLDER, author, 1)

    if policy is None:
        policy = build_ats_policy(config)
    apply_ats_policy(info, policy)

    write_plist(path, info)
    logger.debug('Wrote out OSX Bundle Identifier to "%s"', bundle_id)
    logger.debug('Wrote out OSX Bundle Version to "%s"', version)
    return policy
