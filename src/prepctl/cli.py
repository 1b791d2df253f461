import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Optional

from macprep.ats import build_ats_policy
from macprep.config import load_config
from macprep.config_parser import ConfigParser
from macprep.errors import PrepareError
from macprep.locations import AppProject
from macprep.log import configure_logging
from macprep.prepare import prepare


def _print_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=True))
    sys.stdout.write("\n")


def run_prepare(project: str, platform_root: str, config_path: Optional[str]) -> int:
    try:
        settings = load_config(config_path)
        configure_logging(settings.log_level)
        result = prepare(AppProject(Path(project)), Path(platform_root), settings)
    except PrepareError as exc:
        _print_json({"status": "error", "error": str(exc)})
        return 1
    _print_json(result.summary())
    return 0


def run_ats(config_xml: str) -> int:
    try:
        policy = build_ats_policy(ConfigParser(Path(config_xml)))
    except PrepareError as exc:
        _print_json({"status": "error", "error": str(exc)})
        return 1
    _print_json({"status": "ok", "NSAppTransportSecurity": policy.to_plist()})
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="prepctl")
    parser.add_argument(
        "--config",
        default=os.getenv("MACPREP_CONFIG"),
        help="Path to a YAML settings file",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    prepare_parser = subparsers.add_parser(
        "prepare", help="Sync a native project with config.xml and www"
    )
    prepare_parser.add_argument("--project", default=".", help="App project root")
    prepare_parser.add_argument(
        "--platform-root", required=True, help="Native platform directory"
    )
    ats_parser = subparsers.add_parser(
        "ats", help="Print the App Transport Security policy for a config.xml"
    )
    ats_parser.add_argument("config_xml", help="Path to config.xml")

    args = parser.parse_args(argv)

    if args.command == "prepare":
        raise SystemExit(run_prepare(args.project, args.platform_root, args.config))
    if args.command == "ats":
        raise SystemExit(run_ats(args.config_xml))


if __name__ == "__main__":
    main()
