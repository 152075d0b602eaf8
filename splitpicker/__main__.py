"""
SplitPicker command line.

Usage:
  python -m splitpicker list [--locale de] [--json]
  python -m splitpicker search firefox
  python -m splitpicker launch /usr/share/applications/firefox.desktop
  python -m splitpicker launch /usr/bin/htop
"""

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from .desktop import parse_desktop_file
from .errors import DesktopEntryError, LaunchError
from .search import AppSearch
from .services.applications import ApplicationsService
from .utils.helpers import detect_locale, load_settings
from .utils.launch import launch_application


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="splitpicker",
        description="List and launch applications excluded from the VPN tunnel.",
    )
    parser.add_argument("--settings", type=Path, default=None, help="Settings TOML file.")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")

    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="List applications.")
    list_parser.add_argument("--locale", default=None, help="UI locale tag, e.g. de or pt_BR.")
    list_parser.add_argument("--json", action="store_true", help="Print a JSON array.")

    search_parser = commands.add_parser("search", help="Fuzzy search applications by name.")
    search_parser.add_argument("query")
    search_parser.add_argument("--locale", default=None, help="UI locale tag, e.g. de or pt_BR.")
    search_parser.add_argument("--json", action="store_true", help="Print a JSON array.")

    launch_parser = commands.add_parser("launch", help="Launch an application outside the tunnel.")
    launch_parser.add_argument("target", help="A .desktop file or an executable path.")

    return parser.parse_args(argv)


def _print_applications(applications, as_json: bool) -> None:
    if as_json:
        print(json.dumps([app.to_dict() for app in applications], indent=2))
        return

    for app in applications:
        warning = app.warning.value if app.warning else ""
        print(f"{app.name}\t{app.path}\t{app.icon or ''}\t{warning}")


def _launch(target: str, command: str) -> int:
    app = target
    if target.endswith(".desktop"):
        try:
            entry = parse_desktop_file(target)
        except (DesktopEntryError, OSError) as e:
            logger.error(f"Cannot read {target}: {e}")
            return 1
        if not entry.exec:
            logger.error(f"{target} has no Exec key")
            return 1
        app = entry

    try:
        launch_application(app, command)
    except LaunchError as e:
        logger.error(str(e))
        return 1
    return 0


def main(argv=None) -> int:
    args = _parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    settings = load_settings(args.settings)

    if args.command == "launch":
        return _launch(args.target, settings["launcher"]["command"])

    locale = args.locale if args.locale is not None else detect_locale()
    applications = ApplicationsService(settings=settings).get_applications(locale)

    if args.command == "search":
        applications = AppSearch.from_settings(settings).filter(applications, args.query)

    _print_applications(applications, args.json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
