"""
Locale Resolver - Swap in the localized Name and Icon of an entry.
"""

import dataclasses

from .entry import RawEntry


def localize_name_and_icon(entry: RawEntry, locale: str) -> RawEntry:
    """
    Apply the Name[locale]/Icon[locale] overrides of an entry.

    Only an exact tag match is used. Stored tags are trimmed first.

    Args:
        entry: Parsed desktop entry
        locale: Requested UI locale tag, e.g. "de" or "pt_BR"

    Returns:
        A copy with the localized name/icon, or the entry itself when
        there is no override for the locale
    """
    if not entry.locales:
        return entry

    overrides = {tag.strip(): fields for tag, fields in entry.locales.items()}
    localized = overrides.get(locale)
    if localized is None:
        return entry

    return dataclasses.replace(
        entry,
        name=localized.name if localized.name is not None else entry.name,
        icon=localized.icon if localized.icon is not None else entry.icon,
    )
