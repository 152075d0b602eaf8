"""
Shared test fixtures for the SplitPicker test suite.

Provides temporary application directories, icon theme trees, and
settings files that use real file I/O (no mocking of the filesystem).
"""

import copy

import pytest
import toml

from splitpicker.utils.helpers import DEFAULT_SETTINGS


@pytest.fixture
def apps_dir(tmp_path):
    """An empty applications directory."""
    path = tmp_path / "share" / "applications"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def write_desktop(apps_dir):
    """Factory writing a .desktop file into apps_dir."""

    def _write(filename, body, directory=None):
        target = (directory or apps_dir) / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(body)
        return target

    return _write


@pytest.fixture
def make_icon(tmp_path):
    """Factory creating an (empty) icon file below tmp_path."""

    def _make(relative_path):
        target = tmp_path / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(b"")
        return target

    return _make


@pytest.fixture
def settings(tmp_path):
    """Default settings with the pixmaps directory inside tmp_path."""
    data = copy.deepcopy(DEFAULT_SETTINGS)
    data["icons"]["pixmaps_dir"] = str(tmp_path / "pixmaps")
    return data


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file overriding a few sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "launcher": {"command": "my-exclude"},
        "icons": {"extensions": ["png"], "theme_query_timeout": 1.5},
        "search": {"max_results": 5},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path


@pytest.fixture
def firefox_desktop():
    """A typical browser entry with localized names and an action group."""
    return """\
[Desktop Entry]
Version=1.0
Type=Application
Name=Firefox
Name[ de ]=Firefox Web-Browser
Name[fr]=Navigateur Firefox
Icon=firefox
Exec=firefox %u
Terminal=false
Categories=Network;WebBrowser;

[Desktop Action new-window]
Name=New Window
Exec=firefox --new-window %u
"""
