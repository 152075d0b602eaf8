"""
Quirk Classifier - Flag apps that misbehave when launched excluded.

Browsers and some terminals hand a new launch over to an already running
instance, so the excluded process exits right away and the window keeps
its tunnelled traffic. gnome-terminal starts its windows from a separate
server process. The picker still lists them but shows a warning.
"""

import os
from enum import Enum
from typing import Optional


class AppWarning(str, Enum):
    """Advisory shown next to an application in the picker."""
    LAUNCHES_IN_EXISTING_PROCESS = "launches-in-existing-process"
    LAUNCHES_ELSEWHERE = "launches-elsewhere"


LAUNCHES_IN_EXISTING_PROCESS = frozenset({
    "brave-browser-stable",
    "chromium-browser",
    "firefox",
    "firefox-esr",
    "google-chrome-stable",
    "mate-terminal",
    "opera",
    "xfce4-terminal",
})

LAUNCHES_ELSEWHERE = frozenset({
    "gnome-terminal",
})


def classify_exec(exec_template: Optional[str]) -> Optional[AppWarning]:
    """
    Get the warning for an Exec line, if any.

    Args:
        exec_template: Raw Exec value, e.g. "/usr/bin/firefox %u"

    Returns:
        AppWarning member, or None when the binary is not known to misbehave
    """
    if not exec_template or not exec_template.split():
        return None

    binary = os.path.basename(exec_template.split()[0])

    if binary in LAUNCHES_IN_EXISTING_PROCESS:
        return AppWarning.LAUNCHES_IN_EXISTING_PROCESS
    if binary in LAUNCHES_ELSEWHERE:
        return AppWarning.LAUNCHES_ELSEWHERE
    return None
