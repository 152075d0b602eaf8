"""
Launch Proxy - Start an application outside the VPN tunnel.

The actual exclusion is done by an external privileged launcher
(mullvad-exclude by default). This module only builds its argument
vector and spawns it detached.

Example:
    launch_application(descriptor)          # uses descriptor.exec
    launch_application("/usr/bin/htop")     # raw executable path
"""

import re
import shlex
import subprocess
from typing import Optional, Union

from loguru import logger

from ..errors import LaunchError

DEFAULT_LAUNCHER = "mullvad-exclude"

# Exec field codes the launcher would have to substitute (%u, %F, ...)
_FIELD_CODE = re.compile(r"%[cdDfFikmnNuUv]")


def format_exec(exec_template: str) -> list[str]:
    """
    Split an Exec template into arguments, dropping field codes.

    Args:
        exec_template: Raw Exec value, e.g. 'firefox %u'

    Returns:
        Argument list, e.g. ["firefox"]

    Raises:
        ValueError: unbalanced quoting in the template
    """
    return [arg for arg in shlex.split(exec_template) if not _FIELD_CODE.search(arg)]


def build_exclude_argv(app) -> list[str]:
    """
    Get the arguments to pass to the launcher.

    Args:
        app: Raw executable path (str) or an object with an `exec` template

    Returns:
        [path] for a raw path, the formatted Exec otherwise
    """
    if isinstance(app, str):
        return [app]
    return format_exec(app.exec)


def launch_application(app: Union[str, object], launcher: Optional[str] = None) -> subprocess.Popen:
    """
    Spawn the exclusion launcher for an application and return immediately.

    Args:
        app: Raw executable path or ApplicationDescriptor
        launcher: Launcher command, defaults to mullvad-exclude

    Returns:
        The detached Popen handle (not waited on)

    Raises:
        LaunchError: the Exec template could not be split or the
            launcher could not be spawned
    """
    launcher = launcher or DEFAULT_LAUNCHER

    try:
        argv = build_exclude_argv(app)
    except ValueError as e:
        logger.error(f"Malformed Exec for {app!r}: {e}")
        raise LaunchError([launcher], str(e)) from e

    command = [launcher, *argv]

    try:
        process = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        logger.exception(f"Failed to launch {command}")
        raise LaunchError(command, str(e)) from e

    logger.debug(f"Launched {command} (pid {process.pid})")
    return process
