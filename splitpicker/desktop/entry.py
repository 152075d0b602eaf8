"""
Desktop-Entry Source - Read installed application descriptors.

Scans the XDG application directories for .desktop files and parses the
[Desktop Entry] group of each one into a RawEntry.

Only the keys the picker needs are kept. Name[xx] and Icon[xx] variants
are collected per locale tag; every other key is ignored.

Example:
    for entry in read_entries():
        print(entry.path, entry.name, entry.exec)
"""

import configparser
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Mapping, Optional

from loguru import logger

from ..errors import DesktopEntryError

DESKTOP_ENTRY_GROUP = "Desktop Entry"

_DEFAULT_DATA_DIRS = "/usr/local/share:/usr/share"

# Key[locale] variants we keep (Name[de], Icon[pt_BR], ...)
_LOCALIZED_KEY = re.compile(r"^(Name|Icon)\[([^\]]+)\]$")

# Desktop Entry key -> RawEntry field
_STRING_KEYS = {
    "Type": "type",
    "Name": "name",
    "Exec": "exec",
    "Icon": "icon",
}
_BOOLEAN_KEYS = {
    "NoDisplay": "no_display",
    "Terminal": "terminal",
    "Hidden": "hidden",
}
_LIST_KEYS = {
    "OnlyShowIn": "only_show_in",
    "NotShowIn": "not_show_in",
}


@dataclass(frozen=True)
class LocalizedFields:
    """Per-locale overrides for the display name and icon."""
    name: Optional[str] = None
    icon: Optional[str] = None


@dataclass(frozen=True)
class RawEntry:
    """Parsed [Desktop Entry] group of one descriptor file."""
    path: str
    # Path relative to the applications/ directory, "/" replaced by "-"
    desktop_id: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    exec: Optional[str] = None
    icon: Optional[str] = None
    no_display: bool = False
    terminal: bool = False
    hidden: bool = False
    only_show_in: Optional[list[str]] = None
    not_show_in: Optional[list[str]] = None
    # Locale tag as written in the file (may carry stray whitespace)
    locales: dict[str, LocalizedFields] = field(default_factory=dict)


def application_directories(env: Optional[Mapping[str, str]] = None) -> list[Path]:
    """
    Get the directories that hold application .desktop files.

    Args:
        env: Environment mapping, defaults to os.environ

    Returns:
        $XDG_DATA_HOME/applications followed by <dir>/applications for
        every $XDG_DATA_DIRS entry, without duplicates
    """
    env = os.environ if env is None else env

    data_home = env.get("XDG_DATA_HOME")
    if not data_home:
        data_home = os.path.join(env.get("HOME", os.path.expanduser("~")), ".local", "share")

    data_dirs = env.get("XDG_DATA_DIRS") or _DEFAULT_DATA_DIRS

    directories = []
    for base in [data_home, *data_dirs.split(":")]:
        if not base:
            continue
        directory = Path(base) / "applications"
        if directory not in directories:
            directories.append(directory)

    return directories


def _walk_error(error: OSError) -> None:
    """os.walk error hook: missing directories are expected."""
    if isinstance(error, (FileNotFoundError, NotADirectoryError)):
        return
    logger.error(f"Failed to read application directory {error.filename}: {error}")


def list_entry_files(directories: Iterable[Path]) -> Iterator[Path]:
    """
    Yield every .desktop file below the given directories.

    Subdirectories are searched too (vendor prefixes such as kde4/).
    """
    for directory in directories:
        for root, dirnames, filenames in os.walk(directory, onerror=_walk_error):
            dirnames.sort()
            for filename in sorted(filenames):
                if filename.endswith(".desktop"):
                    yield Path(root) / filename


def desktop_file_id(directory: Path, path: Path) -> str:
    """kde4/dolphin.desktop below an applications/ directory -> kde4-dolphin.desktop"""
    return "-".join(Path(path).relative_to(directory).parts)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() == "true"


def _parse_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(";") if item.strip()]


def parse_desktop_file(path, desktop_id: Optional[str] = None) -> RawEntry:
    """
    Parse one .desktop file.

    Args:
        path: Path to the descriptor file
        desktop_id: Desktop file ID, defaults to the file name

    Returns:
        RawEntry with the recognised keys filled in

    Raises:
        DesktopEntryError: file is not valid key file syntax or has no
            [Desktop Entry] group
        OSError: file could not be opened
    """
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        delimiters=("=",),
        comment_prefixes=("#",),
        empty_lines_in_values=False,
    )
    parser.optionxform = str  # Keys are case sensitive

    try:
        with open(path, encoding="utf-8-sig") as f:
            parser.read_file(f)
    except (configparser.Error, UnicodeDecodeError) as e:
        raise DesktopEntryError(path, str(e)) from e

    if not parser.has_section(DESKTOP_ENTRY_GROUP):
        raise DesktopEntryError(path, f"missing [{DESKTOP_ENTRY_GROUP}] group")

    values = {}
    locales: dict[str, dict[str, str]] = {}

    for key, value in parser.items(DESKTOP_ENTRY_GROUP):
        if key in _STRING_KEYS:
            values[_STRING_KEYS[key]] = value
        elif key in _BOOLEAN_KEYS:
            values[_BOOLEAN_KEYS[key]] = _parse_bool(value)
        elif key in _LIST_KEYS:
            values[_LIST_KEYS[key]] = _parse_list(value)
        else:
            match = _LOCALIZED_KEY.match(key)
            if match:
                field_name, tag = match.groups()
                locales.setdefault(tag, {})[field_name.lower()] = value

    return RawEntry(
        path=os.path.abspath(path),
        desktop_id=desktop_id or os.path.basename(path),
        locales={tag: LocalizedFields(**fields) for tag, fields in locales.items()},
        **values,
    )


def read_entries(directories: Optional[Iterable[Path]] = None) -> list[RawEntry]:
    """
    Parse every installed descriptor, skipping files that fail.

    Args:
        directories: Application directories, defaults to
            application_directories()

    Returns:
        RawEntry list in directory scan order, each carrying its desktop
        file ID
    """
    if directories is None:
        directories = application_directories()

    entries = []
    for directory in directories:
        for path in list_entry_files([directory]):
            try:
                entries.append(parse_desktop_file(path, desktop_file_id(directory, path)))
            except (FileNotFoundError, NotADirectoryError):
                # Dangling symlink or file removed mid-scan
                continue
            except (DesktopEntryError, OSError) as e:
                logger.warning(f"Skipping desktop entry {path}: {e}")

    logger.debug(f"Read {len(entries)} desktop entries")
    return entries
