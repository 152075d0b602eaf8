"""
Desktop package - Freedesktop desktop entry handling.

Reading, visibility filtering, localization and quirk tagging of
installed application descriptors.
"""

from .entry import (
    LocalizedFields,
    RawEntry,
    application_directories,
    desktop_file_id,
    parse_desktop_file,
    read_entries,
)
from .localize import localize_name_and_icon
from .quirks import AppWarning, classify_exec
from .visibility import current_desktops, should_show

__all__ = [
    "AppWarning",
    "LocalizedFields",
    "RawEntry",
    "application_directories",
    "classify_exec",
    "current_desktops",
    "desktop_file_id",
    "localize_name_and_icon",
    "parse_desktop_file",
    "read_entries",
    "should_show",
]
