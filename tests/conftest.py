import plistlib
import shutil
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"

PBXPROJ = """// !$*UTF8*$!
{
	archiveVersion = 1;
	objects = {
		1D6058910D05DD3D006BFB54 /* HelloCordova.app */ = {isa = PBXFileReference; path = HelloCordova.app; sourceTree = BUILT_PRODUCTS_DIR; };
		8D1107310486CEB800E47090 /* HelloCordova-Info.plist */ = {isa = PBXFileReference; path = "HelloCordova/HelloCordova-Info.plist"; sourceTree = "<group>"; };
		C01FCF4F08A954540054247B /* Debug */ = {
			isa = XCBuildConfiguration;
			buildSettings = {
				INFOPLIST_FILE = "HelloCordova/HelloCordova-Info.plist";
				PRODUCT_NAME = HelloCordova;
			};
			name = Debug;
		};
		C01FCF5008A954540054247B /* Release */ = {
			isa = XCBuildConfiguration;
			buildSettings = {
				INFOPLIST_FILE = "HelloCordova/HelloCordova-Info.plist";
				PRODUCT_NAME = "$(TARGET_NAME)";
			};
			name = Release;
		};
	};
	rootObject = 29B97313FDCFA39411CA2CEA /* Project object */;
}
"""

DEFAULTS_XML = """<?xml version='1.0' encoding='utf-8'?>
<widget xmlns="http://www.w3.org/ns/widgets">
    <name>HelloCordova</name>
    <preference name="WindowSize" value="1024x768" />
</widget>
"""

INFO_PLIST = {
    "CFBundleIdentifier": "io.cordova.hellocordova",
    "CFBundleShortVersionString": "0.0.1",
    "CFBundleVersion": "0.0.1",
    "NSHumanReadableCopyright": "Copyright (c) --AUTHOR--",
    "NSAppTransportSecurity": {"NSAllowsArbitraryLoads": True},
}


@pytest.fixture
def platform_root(tmp_path: Path) -> Path:
    root = tmp_path / "platforms" / "osx"
    proj_dir = root / "HelloCordova.xcodeproj"
    (proj_dir / "xcuserdata" / "dev.xcuserdatad").mkdir(parents=True)
    (proj_dir / "project.pbxproj").write_text(PBXPROJ, encoding="utf-8")

    cordova_proj = root / "HelloCordova"
    cordova_proj.mkdir()
    with (cordova_proj / "HelloCordova-Info.plist").open("wb") as handle:
        plistlib.dump(INFO_PLIST, handle)
    (cordova_proj / "HelloCordova-Prefix.pch").write_text("// prefix\n")

    (root / "cordova").mkdir()
    (root / "cordova" / "defaults.xml").write_text(DEFAULTS_XML)
    (root / "platform_www").mkdir()
    (root / "platform_www" / "cordova.js").write_text("// platform cordova.js\n")
    (root / "www").mkdir()
    (root / "www" / "stale.js").write_text("// left over\n")
    return root


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    root = tmp_path / "app"
    root.mkdir()
    shutil.copyfile(FIXTURES / "config.xml", root / "config.xml")
    (root / "www" / "js").mkdir(parents=True)
    (root / "www" / "index.html").write_text("<html>app</html>")
    (root / "www" / "cordova.js").write_text("// app stub\n")
    (root / "www" / "js" / "app.js").write_text("// app\n")
    (root / "merges" / "osx" / "js").mkdir(parents=True)
    (root / "merges" / "osx" / "js" / "app.js").write_text("// osx app\n")
    (root / "res").mkdir()
    for name in ("icon.png", "icon-512.png", "icon-osx-128.png"):
        (root / "res" / name).write_bytes(name.encode())
    return root
