"""
Icon Theme Resolver - Turn an icon name into an icon file path.

Implements the lookup cascade of the freedesktop icon theme spec in a
simplified form:

  base dir  ->  theme  ->  size  ->  category  ->  <name>.<ext>

    ~/.icons                    Adwaita     scalable    apps
    ~/.local/share/icons        hicolor     256x256     ...
    $XDG_DATA_DIRS/icons        (any)       (any WxH)
    /usr/share/pixmaps

Every level is a stage of an IconSearchPlan. A stage lists directory
selectors: literal names are joined as-is, patterns are matched against
what actually exists in the current directory. Each directory visited is
also checked for the icon file itself, so /usr/share/pixmaps/foo.png is
found at the first level.

The desktop's configured theme is looked up once per enumeration with
gsettings and the resulting plan is shared by all entries.
"""

import os
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from loguru import logger

# Literal directory name or pattern matched against directory contents
DirectorySelector = Union[str, re.Pattern]

ANY_DIRECTORY = re.compile(r".*")
SIZE_DIRECTORY = re.compile(r"^\d+x\d+(@2x)?$")

_QUOTES = re.compile(r"^'|'$")

_DEFAULT_DATA_DIRS = "/usr/local/share:/usr/share"

THEME_QUERY_COMMAND = ["gsettings", "get", "org.gnome.desktop.interface", "icon-theme"]


@dataclass(frozen=True)
class IconSearchPlan:
    """
    Ordered stages of directory selectors.

    The first stage holds the absolute base directories; every later
    stage narrows the search one directory level deeper.
    """
    stages: tuple[tuple[DirectorySelector, ...], ...]


def match_directories(selectors: Sequence[DirectorySelector], contents: Sequence[str]) -> list[str]:
    """
    Expand a stage's selectors against a directory listing.

    Literal names are kept even if absent. Patterns yield every matching
    entry. Duplicates are dropped, first occurrence wins.
    """
    matches = []
    for selector in selectors:
        if isinstance(selector, str):
            matches.append(selector)
        else:
            matches.extend(item for item in contents if selector.match(item))

    return list(dict.fromkeys(matches))


def _list_directory(directory: Path, icon_name: str) -> Optional[list[str]]:
    try:
        return sorted(os.listdir(directory))
    except (FileNotFoundError, NotADirectoryError):
        return None
    except OSError as e:
        logger.error(f"Failed to open directory {directory} while searching for {icon_name} icon: {e}")
        return None


def find_icon(name: str, extensions: Sequence[str], plan: IconSearchPlan) -> Optional[str]:
    """
    Search the directory tree described by a plan for an icon file.

    Depth first: a base directory and everything below it is exhausted
    before the next base directory is opened.

    Args:
        name: Icon name without extension, e.g. "firefox"
        extensions: Extensions in order of preference, e.g. ["svg", "png"]
        plan: Directory stages to walk

    Returns:
        Path of the first <name>.<ext> found, or None
    """
    if not plan.stages:
        return None

    candidates = [f"{name}.{extension}" for extension in extensions]

    # Worklist of (directory, index of the stage that selects its children)
    stack = [(Path(base), 1) for base in reversed(plan.stages[0])]

    while stack:
        directory, next_stage = stack.pop()

        contents = _list_directory(directory, name)
        if contents is None:
            continue

        present = set(contents)
        for candidate in candidates:
            if candidate in present:
                return str(directory / candidate)

        if next_stage < len(plan.stages):
            children = match_directories(plan.stages[next_stage], contents)
            stack.extend((directory / child, next_stage + 1) for child in reversed(children))

    return None


def query_icon_theme(env: Optional[Mapping[str, str]] = None, timeout: Optional[float] = None) -> Optional[str]:
    """
    Ask the desktop which icon theme is configured.

    Runs gsettings with XDG_CURRENT_DESKTOP set to the session's original
    value, so an embedding toolkit's override does not select the wrong
    settings backend.

    Args:
        env: Environment mapping, defaults to os.environ
        timeout: Seconds to wait for gsettings, None waits forever

    Returns:
        Theme name, or None when it is unset or the query failed
    """
    env = os.environ if env is None else env

    desktop = env.get("ORIGINAL_XDG_CURRENT_DESKTOP")
    if desktop is None:
        desktop = env.get("XDG_CURRENT_DESKTOP", "")

    try:
        result = subprocess.run(
            THEME_QUERY_COMMAND,
            capture_output=True,
            text=True,
            timeout=timeout,
            env={**env, "XDG_CURRENT_DESKTOP": desktop},
        )
    except subprocess.TimeoutExpired:
        logger.error(f"Timed out after {timeout}s while retrieving icon theme")
        return None
    except OSError as e:
        logger.error(f"Error while retrieving icon theme: {e}")
        return None

    if result.returncode != 0:
        logger.error(f"Error while retrieving icon theme: {result.stderr.strip()}")
        return None

    theme = _QUOTES.sub("", result.stdout.strip())
    return theme or None


class IconThemeResolver:
    """
    Resolves icon names to files using the icon theme cascade.

    Methods:
        query_theme(): Configured theme name (runs gsettings)
        build_plan(theme): IconSearchPlan for a theme
        resolve(icon, plan): Icon file path or None
    """

    def __init__(
        self,
        extensions: Sequence[str] = ("svg", "png"),
        pixmaps_dir: str = "/usr/share/pixmaps",
        fallback_theme: str = "hicolor",
        preferred_sizes: Sequence[str] = ("scalable",),
        theme_query_timeout: Optional[float] = None,
        env: Optional[Mapping[str, str]] = None,
    ):
        self.extensions = list(extensions)
        self.pixmaps_dir = pixmaps_dir
        self.fallback_theme = fallback_theme
        self.preferred_sizes = list(preferred_sizes)
        self.theme_query_timeout = theme_query_timeout
        self.env = os.environ if env is None else env

    @classmethod
    def from_settings(cls, settings: dict, env: Optional[Mapping[str, str]] = None) -> "IconThemeResolver":
        """Create a resolver from the [icons] settings section."""
        icons = settings["icons"]
        return cls(
            extensions=icons["extensions"],
            pixmaps_dir=icons["pixmaps_dir"],
            fallback_theme=icons["fallback_theme"],
            preferred_sizes=icons["preferred_sizes"],
            theme_query_timeout=icons["theme_query_timeout"],
            env=env,
        )

    def base_directories(self) -> list[str]:
        """
        Get the top-level icon directories in search order.

        ~/.icons, ~/.local/share/icons (KDE Plasma), <dir>/icons for every
        $XDG_DATA_DIRS entry, then the pixmaps directory.
        """
        directories = []

        home = self.env.get("HOME")
        if home:
            directories.append(os.path.join(home, ".icons"))
            directories.append(os.path.join(home, ".local", "share", "icons"))

        data_dirs = self.env.get("XDG_DATA_DIRS") or _DEFAULT_DATA_DIRS
        directories.extend(os.path.join(d, "icons") for d in data_dirs.split(":") if d)

        directories.append(self.pixmaps_dir)
        return directories

    def query_theme(self) -> Optional[str]:
        return query_icon_theme(self.env, self.theme_query_timeout)

    def theme_directories(self, theme: Optional[str]) -> list[DirectorySelector]:
        """
        Get the theme stage: configured theme, fallback theme, any theme.

        A match in any installed theme is better than no icon at all.
        """
        themes: list[DirectorySelector] = [self.fallback_theme, ANY_DIRECTORY]
        if theme:
            themes.insert(0, theme)
        return themes

    def build_plan(self, theme: Optional[str]) -> IconSearchPlan:
        """Build the search plan for a configured theme (or None)."""
        return IconSearchPlan(stages=(
            tuple(self.base_directories()),
            tuple(self.theme_directories(theme)),
            # Preferred sizes first, other sizes if nothing matches
            (*self.preferred_sizes, SIZE_DIRECTORY),
            # All icon categories
            (ANY_DIRECTORY,),
        ))

    def resolve(self, icon: Optional[str], plan: IconSearchPlan) -> Optional[str]:
        """
        Resolve an Icon value to a file path.

        Args:
            icon: Icon key of a desktop entry (name or absolute path)
            plan: Search plan from build_plan()

        Returns:
            Absolute paths unchanged, the found file for names, else None
        """
        if not icon:
            return None
        if os.path.isabs(icon):
            return icon
        return find_icon(icon, self.extensions, plan)
