import plistlib
from pathlib import Path

import pytest

from macprep.config_parser import ConfigParser
from macprep.errors import ConfigError, ProjectFileError
from macprep.info_plist import default_bundle_version, update_info_plist

FIXTURES = Path(__file__).parent / "fixtures"


def _write_config(path: Path, body: str, attrs: str = 'id="org.example.app" version="2.0.0"') -> ConfigParser:
    path.write_text(
        f'<?xml version="1.0"?>\n<widget {attrs} xmlns="http://www.w3.org/ns/widgets">{body}</widget>'
    )
    return ConfigParser(path)


def _load(path: Path) -> dict:
    with path.open("rb") as handle:
        return plistlib.load(handle)


def test_default_bundle_version_strips_label() -> None:
    assert default_bundle_version("1.2.0-rc1") == "1.2.0"
    assert default_bundle_version("3.0.1") == "3.0.1"


def test_update_info_plist_writes_metadata_and_ats(platform_root: Path) -> None:
    plist_path = platform_root / "HelloCordova" / "HelloCordova-Info.plist"
    policy = update_info_plist(plist_path, ConfigParser(FIXTURES / "config.xml"))

    info = _load(plist_path)
    assert info["CFBundleIdentifier"] == "org.example.hello"
    assert info["CFBundleShortVersionString"] == "1.2.0-rc1"
    assert info["CFBundleVersion"] == "1.2.0"
    assert info["NSHumanReadableCopyright"] == "Copyright (c) Example Team"
    assert info["NSAppTransportSecurity"] == {
        "NSExceptionDomains": {
            "apache.org": {"NSIncludesSubdomains": True},
            "example.com": {"NSExceptionAllowsInsecureHTTPLoads": True},
            "secure.example.com": {
                "NSExceptionMinimumTLSVersion": "TLSv1.1",
                "NSExceptionRequiresForwardSecrecy": False,
            },
        }
    }
    assert policy.to_plist() == info["NSAppTransportSecurity"]


def test_empty_policy_removes_stale_ats(platform_root: Path, tmp_path: Path) -> None:
    plist_path = platform_root / "HelloCordova" / "HelloCordova-Info.plist"
    config = _write_config(
        tmp_path / "config.xml", '<name>App</name><access origin="scheme:*" />'
    )
    policy = update_info_plist(plist_path, config)
    assert policy.is_empty()
    assert "NSAppTransportSecurity" not in _load(plist_path)


def test_ios_overrides_take_precedence(platform_root: Path, tmp_path: Path) -> None:
    plist_path = platform_root / "HelloCordova" / "HelloCordova-Info.plist"
    config = _write_config(
        tmp_path / "config.xml",
        '<access origin="*" />',
        attrs=(
            'id="org.example.app" version="2.0.0-beta" '
            'ios-CFBundleIdentifier="org.example.mac" ios-CFBundleVersion="42"'
        ),
    )
    update_info_plist(plist_path, config)
    info = _load(plist_path)
    assert info["CFBundleIdentifier"] == "org.example.mac"
    assert info["CFBundleVersion"] == "42"
    assert info["NSHumanReadableCopyright"] == "Copyright (c) --AUTHOR--"
    assert info["NSAppTransportSecurity"] == {"NSAllowsArbitraryLoads": True}


def test_missing_version_is_a_config_error(platform_root: Path, tmp_path: Path) -> None:
    plist_path = platform_root / "HelloCordova" / "HelloCordova-Info.plist"
    config = _write_config(tmp_path / "config.xml", "", attrs='id="org.example.app"')
    with pytest.raises(ConfigError):
        update_info_plist(plist_path, config)


def test_unreadable_plist_is_a_project_file_error(tmp_path: Path) -> None:
    plist_path = tmp_path / "Broken-Info.plist"
    plist_path.write_text("not a plist")
    config = _write_config(tmp_path / "config.xml", "")
    with pytest.raises(ProjectFileError):
        update_info_plist(plist_path, config)
