"""
Applications Service - Enumerate apps that can be excluded from the VPN.

Pipeline per call:
  read_entries -> dedupe by desktop file ID -> should_show
  -> localize_name_and_icon -> classify_exec
  -> icon resolution (one task per entry, run concurrently)

The icon theme is queried once per call and the search plan is shared
by every icon task. Nothing is cached between calls; every call reads
the filesystem again and builds fresh descriptors.
"""

import dataclasses
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from loguru import logger

from ..desktop import (
    AppWarning,
    RawEntry,
    classify_exec,
    current_desktops,
    localize_name_and_icon,
    read_entries,
    should_show,
)
from ..desktop.entry import application_directories
from ..utils.helpers import load_settings, locale_fallbacks
from .icons import IconSearchPlan, IconThemeResolver
from .notifier import EventNotifier


@dataclass(frozen=True)
class ApplicationDescriptor:
    """An application as shown in the split tunneling picker."""
    path: str
    name: str
    exec: str
    icon: Optional[str] = None
    warning: Optional[AppWarning] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "exec": self.exec,
            "icon": self.icon,
            "warning": self.warning.value if self.warning else None,
        }


class ApplicationsService:
    """
    Service for listing installed applications for split tunneling.

    Attributes:
        changed: EventNotifier carrying the latest list from refresh()

    Methods:
        get_applications(locale): Enumerate apps, sorted by name
        refresh(locale): Enumerate and publish to subscribers
    """

    def __init__(
        self,
        settings: Optional[Dict[str, Any]] = None,
        directories: Optional[Iterable[Path]] = None,
        env: Optional[Mapping[str, str]] = None,
        icon_resolver: Optional[IconThemeResolver] = None,
    ):
        self.settings = settings if settings is not None else load_settings()
        self.env = os.environ if env is None else env
        self.directories = list(directories) if directories is not None else application_directories(self.env)
        self.icon_resolver = icon_resolver or IconThemeResolver.from_settings(self.settings, self.env)
        self.changed: EventNotifier[list[ApplicationDescriptor]] = EventNotifier([])

    def get_applications(self, locale: str) -> list[ApplicationDescriptor]:
        """
        Enumerate the applications the user can pick.

        Args:
            locale: UI locale tag used for Name[xx]/Icon[xx]; "de_DE" falls
                back to "de"

        Returns:
            Descriptors sorted case-insensitively by name, one per desktop
            file ID
        """
        entries = self._collect_entries(locale)
        if not entries:
            return []

        # One theme query per enumeration, shared by all icon tasks
        plan = self.icon_resolver.build_plan(self.icon_resolver.query_theme())

        max_workers = max(1, self.settings["enumeration"]["max_workers"])
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            icons = list(pool.map(lambda entry: self._resolve_icon(entry, plan), entries))

        return [
            ApplicationDescriptor(
                path=entry.path,
                name=entry.name,
                exec=entry.exec,
                icon=icon,
                warning=classify_exec(entry.exec),
            )
            for entry, icon in zip(entries, icons)
        ]

    def refresh(self, locale: str) -> list[ApplicationDescriptor]:
        """
        Enumerate applications and notify subscribers of the new list.

        Emits:
            changed: With the freshly enumerated list
        """
        applications = self.get_applications(locale)
        self.changed.notify(applications)
        return applications

    def _collect_entries(self, locale: str) -> list[RawEntry]:
        """Deduplicate by desktop file ID, filter, localize and sort the raw entries."""
        desktops = current_desktops(self.env)
        own_name = self.settings["launcher"]["own_name"]
        locales = locale_fallbacks(locale)

        seen_ids = set()
        entries: Dict[str, RawEntry] = {}
        for entry in read_entries(self.directories):
            # First file with an ID wins, even when that file hides the app
            if entry.desktop_id in seen_ids or entry.path in entries:
                continue
            seen_ids.add(entry.desktop_id)

            if not should_show(entry, desktops, own_name):
                continue

            entry = self._localize(entry, locales)
            if not entry.name:
                logger.warning(f"Desktop entry {entry.path} has no Name, using file name")
                entry = dataclasses.replace(entry, name=Path(entry.path).stem)

            entries[entry.path] = entry

        logger.debug(f"{len(entries)} applications visible on desktops {desktops}")
        return sorted(entries.values(), key=lambda entry: entry.name.casefold())

    @staticmethod
    def _localize(entry: RawEntry, locales: list[str]) -> RawEntry:
        """Apply the overrides of the first locale tag the entry has."""
        for tag in locales:
            localized = localize_name_and_icon(entry, tag)
            if localized is not entry:
                return localized
        return entry

    def _resolve_icon(self, entry: RawEntry, plan: IconSearchPlan) -> Optional[str]:
        """Resolve one entry's icon. Failures only cost that entry its icon."""
        try:
            return self.icon_resolver.resolve(entry.icon, plan)
        except Exception:
            logger.exception(f"Failed to resolve icon {entry.icon!r} for {entry.path}")
            return None


# Singleton accessor
_applications_service_instance = None


def get_applications_service() -> ApplicationsService:
    """
    Get the singleton ApplicationsService instance.

    Returns:
        ApplicationsService: The global instance
    """
    global _applications_service_instance
    if _applications_service_instance is None:
        _applications_service_instance = ApplicationsService()
    return _applications_service_instance


def get_applications(locale: str) -> list[ApplicationDescriptor]:
    """Enumerate applications with the default service."""
    return get_applications_service().get_applications(locale)
