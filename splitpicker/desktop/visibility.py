"""
Visibility Filter - Decide whether a desktop entry belongs in the picker.

Follows the freedesktop Desktop Entry rules for Type, NoDisplay, Hidden,
OnlyShowIn and NotShowIn. Terminal apps and the VPN client itself are
left out as well since they cannot be meaningfully excluded.
"""

import os
from typing import Mapping, Optional, Sequence, Union

from .entry import RawEntry


def current_desktops(env: Optional[Mapping[str, str]] = None) -> list[str]:
    """
    Get the desktop environment identifiers for the running session.

    Embedding toolkits (Electron) overwrite XDG_CURRENT_DESKTOP and keep
    the real value in ORIGINAL_XDG_CURRENT_DESKTOP, so both are read.

    Returns:
        Identifiers such as ["ubuntu", "GNOME"], possibly empty
    """
    env = os.environ if env is None else env

    desktops = []
    for variable in ("ORIGINAL_XDG_CURRENT_DESKTOP", "XDG_CURRENT_DESKTOP"):
        value = env.get(variable)
        if value:
            desktops.extend(item for item in value.split(":") if item)

    return desktops


def _as_list(value: Union[str, Sequence[str], None]) -> Optional[list[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return list(value)


def should_show(entry: RawEntry, desktops: Sequence[str], own_name: str) -> bool:
    """
    Check whether an entry should be offered to the user.

    Args:
        entry: Parsed desktop entry
        desktops: Current desktop identifiers (see current_desktops)
        own_name: Display name of the VPN client, never listed

    Returns:
        True if the entry is a visible, launchable application
    """
    not_show_in = _as_list(entry.not_show_in)
    only_show_in = _as_list(entry.only_show_in)

    not_show_in_match = bool(not_show_in) and any(d in desktops for d in not_show_in)
    only_show_in_match = only_show_in is None or any(d in desktops for d in only_show_in)

    return (
        entry.type == "Application"
        and entry.name != own_name
        and entry.exec is not None
        and not entry.no_display
        and not entry.terminal
        and not entry.hidden
        and not not_show_in_match
        and only_show_in_match
    )
