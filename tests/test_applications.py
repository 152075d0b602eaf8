"""
Tests for the ApplicationsService enumeration pipeline.

Uses real application and icon directories under tmp_path. The gsettings
theme query is patched.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from splitpicker.desktop.quirks import AppWarning
from splitpicker.services.applications import ApplicationDescriptor, ApplicationsService
from splitpicker.services.icons import IconThemeResolver


def _desktop(name, exec_template, icon=None, extra=""):
    lines = ["[Desktop Entry]", "Type=Application", f"Name={name}", f"Exec={exec_template}"]
    if icon:
        lines.append(f"Icon={icon}")
    return "\n".join(lines) + "\n" + extra


@pytest.fixture
def env(tmp_path):
    return {
        "HOME": str(tmp_path / "home"),
        "XDG_DATA_DIRS": str(tmp_path / "usr" / "share"),
        "XDG_CURRENT_DESKTOP": "GNOME",
    }


@pytest.fixture
def service(settings, apps_dir, env):
    return ApplicationsService(settings=settings, directories=[apps_dir], env=env)


@pytest.fixture
def theme_query():
    """Patch gsettings to report the Adwaita theme."""
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="'Adwaita'\n", stderr="")
    with patch("splitpicker.services.icons.subprocess.run", return_value=completed) as run:
        yield run


class TestGetApplications:
    """Test the full enumeration pipeline."""

    def test_sorted_case_insensitively(self, service, write_desktop, theme_query):
        write_desktop("b.desktop", _desktop("beta", "beta"))
        write_desktop("a.desktop", _desktop("Alpha", "alpha"))
        write_desktop("c.desktop", _desktop("Gamma", "gamma"))

        names = [app.name for app in service.get_applications("")]
        assert names == ["Alpha", "beta", "Gamma"]

    def test_paths_unique(self, settings, apps_dir, env, write_desktop, theme_query):
        write_desktop("a.desktop", _desktop("A", "a"))
        service = ApplicationsService(settings=settings, directories=[apps_dir, apps_dir], env=env)

        paths = [app.path for app in service.get_applications("")]
        assert len(paths) == len(set(paths)) == 1

    def test_user_copy_hides_system_entry(self, settings, tmp_path, env, write_desktop, firefox_desktop,
                                          theme_query):
        user_dir = tmp_path / "home" / ".local" / "share" / "applications"
        system_dir = tmp_path / "usr" / "share" / "applications"
        write_desktop("firefox.desktop", firefox_desktop, directory=system_dir)
        hidden = _desktop("Firefox", "firefox %u", extra="Hidden=true\n")
        write_desktop("firefox.desktop", hidden, directory=user_dir)
        write_desktop("gimp.desktop", _desktop("GIMP", "gimp-2.8"), directory=system_dir)
        write_desktop("gimp.desktop", _desktop("GIMP", "gimp-2.10"), directory=user_dir)

        service = ApplicationsService(settings=settings, directories=[user_dir, system_dir], env=env)
        apps = service.get_applications("")

        assert [(app.name, app.exec) for app in apps] == [("GIMP", "gimp-2.10")]
        assert apps[0].path == str(user_dir / "gimp.desktop")

    def test_vendor_prefix_is_part_of_the_id(self, settings, tmp_path, env, write_desktop, theme_query):
        user_dir = tmp_path / "home" / ".local" / "share" / "applications"
        system_dir = tmp_path / "usr" / "share" / "applications"
        write_desktop("kde4/dolphin.desktop", _desktop("Dolphin", "dolphin-old"), directory=system_dir)
        write_desktop("kde4-dolphin.desktop", _desktop("Dolphin", "dolphin"), directory=user_dir)
        write_desktop("dolphin.desktop", _desktop("Dolphin", "dolphin-other"), directory=system_dir)

        service = ApplicationsService(settings=settings, directories=[user_dir, system_dir], env=env)
        execs = sorted(app.exec for app in service.get_applications(""))

        assert execs == ["dolphin", "dolphin-other"]

    def test_hidden_entries_filtered(self, service, write_desktop, theme_query):
        write_desktop("shown.desktop", _desktop("Shown", "shown"))
        write_desktop("nodisplay.desktop", _desktop("NoDisplay", "x", extra="NoDisplay=true\n"))
        write_desktop("terminal.desktop", _desktop("Terminal", "x", extra="Terminal=true\n"))
        write_desktop("kde.desktop", _desktop("KDE only", "x", extra="OnlyShowIn=KDE;\n"))
        write_desktop("gnome.desktop", _desktop("GNOME only", "x", extra="OnlyShowIn=GNOME;\n"))
        write_desktop("own.desktop", _desktop("Mullvad VPN", "mullvad-vpn"))
        write_desktop("link.desktop", "[Desktop Entry]\nType=Link\nName=Link\nURL=https://example.com\n")

        names = [app.name for app in service.get_applications("")]
        assert names == ["GNOME only", "Shown"]

    def test_localized_names(self, service, write_desktop, firefox_desktop, theme_query):
        write_desktop("firefox.desktop", firefox_desktop)

        [app] = service.get_applications("de")
        assert app.name == "Firefox Web-Browser"

    def test_localized_names_fall_back_to_language(self, service, write_desktop, firefox_desktop, theme_query):
        write_desktop("firefox.desktop", firefox_desktop)

        [app] = service.get_applications("de_DE")
        assert app.name == "Firefox Web-Browser"

    def test_exact_locale_preferred_over_language(self, service, write_desktop, theme_query):
        write_desktop("files.desktop", _desktop("Files", "nautilus", extra="Name[pt]=Ficheiros\nName[pt_BR]=Arquivos\n"))

        assert [app.name for app in service.get_applications("pt_BR")] == ["Arquivos"]
        assert [app.name for app in service.get_applications("pt_PT")] == ["Ficheiros"]

    def test_warnings(self, service, write_desktop, theme_query):
        write_desktop("firefox.desktop", _desktop("Firefox", "firefox %u"))
        write_desktop("terminal.desktop", _desktop("Terminal", "gnome-terminal"))
        write_desktop("xterm.desktop", _desktop("XTerm", "xterm"))

        warnings = {app.name: app.warning for app in service.get_applications("")}
        assert warnings == {
            "Firefox": AppWarning.LAUNCHES_IN_EXISTING_PROCESS,
            "Terminal": AppWarning.LAUNCHES_ELSEWHERE,
            "XTerm": None,
        }

    def test_icons_resolved(self, service, write_desktop, make_icon, theme_query):
        adwaita = make_icon("usr/share/icons/Adwaita/scalable/apps/firefox.svg")
        pixmap = make_icon("pixmaps/mullvad-vpn.png")
        write_desktop("firefox.desktop", _desktop("Firefox", "firefox", icon="firefox"))
        write_desktop("client.desktop", _desktop("Client", "client", icon="mullvad-vpn"))
        write_desktop("abs.desktop", _desktop("Absolute", "abs", icon="/opt/abs/icon.png"))
        write_desktop("none.desktop", _desktop("Missing", "missing", icon="no-such-icon"))

        icons = {app.name: app.icon for app in service.get_applications("")}
        assert icons == {
            "Firefox": str(adwaita),
            "Client": str(pixmap),
            "Absolute": "/opt/abs/icon.png",
            "Missing": None,
        }

    def test_theme_queried_once(self, service, write_desktop, theme_query):
        for i in range(5):
            write_desktop(f"app{i}.desktop", _desktop(f"App {i}", "app", icon="app"))

        service.get_applications("")
        assert theme_query.call_count == 1

    def test_no_theme_query_without_applications(self, service, theme_query):
        assert service.get_applications("") == []
        theme_query.assert_not_called()

    def test_icon_failure_only_affects_one_entry(self, settings, apps_dir, env, write_desktop, theme_query):
        write_desktop("good.desktop", _desktop("Good", "good", icon="/icons/good.png"))
        write_desktop("bad.desktop", _desktop("Bad", "bad", icon="explode"))

        resolver = IconThemeResolver.from_settings(settings, env)
        real_resolve = resolver.resolve

        def resolve(icon, plan):
            if icon == "explode":
                raise RuntimeError("boom")
            return real_resolve(icon, plan)

        resolver.resolve = resolve
        service = ApplicationsService(settings=settings, directories=[apps_dir], env=env,
                                      icon_resolver=resolver)

        icons = {app.name: app.icon for app in service.get_applications("")}
        assert icons == {"Bad": None, "Good": "/icons/good.png"}

    def test_broken_entry_skipped(self, service, write_desktop, theme_query):
        write_desktop("good.desktop", _desktop("Good", "good"))
        write_desktop("broken.desktop", "garbage without a group\n")

        assert [app.name for app in service.get_applications("")] == ["Good"]

    def test_missing_name_uses_file_name(self, service, write_desktop, theme_query):
        write_desktop("nameless.desktop", "[Desktop Entry]\nType=Application\nExec=nameless\n")
        assert [app.name for app in service.get_applications("")] == ["nameless"]

    def test_fresh_descriptors_per_call(self, service, write_desktop, theme_query):
        write_desktop("a.desktop", _desktop("A", "a"))
        first = service.get_applications("")

        write_desktop("b.desktop", _desktop("B", "b"))
        second = service.get_applications("")

        assert [app.name for app in first] == ["A"]
        assert [app.name for app in second] == ["A", "B"]


class TestRefresh:
    """Test publishing enumerations to subscribers."""

    def test_refresh_notifies_subscribers(self, service, write_desktop, theme_query):
        write_desktop("a.desktop", _desktop("A", "a"))
        listener = MagicMock()
        service.changed.subscribe("panel", listener)

        applications = service.refresh("")

        listener.assert_called_with(applications)
        assert service.changed.latest_event == applications


class TestApplicationDescriptor:
    """Test the descriptor value object."""

    def test_to_dict(self):
        app = ApplicationDescriptor(
            path="/apps/firefox.desktop",
            name="Firefox",
            exec="firefox %u",
            icon="/icons/firefox.svg",
            warning=AppWarning.LAUNCHES_IN_EXISTING_PROCESS,
        )
        assert app.to_dict() == {
            "path": "/apps/firefox.desktop",
            "name": "Firefox",
            "exec": "firefox %u",
            "icon": "/icons/firefox.svg",
            "warning": "launches-in-existing-process",
        }

    def test_immutable(self):
        app = ApplicationDescriptor(path="/a.desktop", name="A", exec="a")
        with pytest.raises(AttributeError):
            app.name = "B"
