from inkspell.launcher import (
    _embedded_runner_for_command,
    _load_apps,
    _parse_command,
    _resolve_command,
    _restore_launcher_window,
)
from inkspell.spell.app import run_embedded as run_spell_embedded
from inkspell.typing.app import run_embedded as run_typing_embedded


def test_resolve_command_uses_active_interpreter_for_python(monkeypatch):
    monkeypatch.setattr("inkspell.launcher.sys.executable", "/opt/inkspell/.venv/bin/python3.11")
    command = _resolve_command(["python", "-m", "inkspell.spell.app"])
    assert command == ["/opt/inkspell/.venv/bin/python3.11", "-m", "inkspell.spell.app"]


def test_resolve_command_falls_back_to_python3_when_executable_missing(monkeypatch):
    monkeypatch.setattr("inkspell.launcher.sys.executable", "")
    monkeypatch.setattr(
        "inkspell.launcher.shutil.which",
        lambda name: "/usr/bin/python3" if name == "python3" else None,
    )
    command = _resolve_command(["python3", "-m", "inkspell.typing.app"])
    assert command == ["/usr/bin/python3", "-m", "inkspell.typing.app"]


def test_resolve_command_keeps_non_python_commands():
    assert _resolve_command(["/usr/bin/echo", "hello"]) == ["/usr/bin/echo", "hello"]
    assert _resolve_command([]) == []


def test_embedded_runner_for_known_modules():
    assert _embedded_runner_for_command(["python", "-m", "inkspell.spell.app"]) is run_spell_embedded
    assert _embedded_runner_for_command(["python", "-m", "inkspell.typing.app"]) is run_typing_embedded
    assert _embedded_runner_for_command(["python", "-m"]) is None
    assert _embedded_runner_for_command(["/usr/bin/other-game"]) is None


def test_load_apps_parses_string_and_list_commands():
    config = {
        "launcher": {
            "apps": [
                {"name": "Spell", "icon_path": "icons/spell.png", "command": "python -m inkspell.spell.app"},
                {"name": "Other", "command": ["/usr/bin/game", "--fast"]},
            ]
        }
    }
    apps = _load_apps(config)
    assert [app.name for app in apps] == ["Spell", "Other"]
    assert apps[0].command == ["python", "-m", "inkspell.spell.app"]
    assert apps[1].command == ["/usr/bin/game", "--fast"]
    assert apps[1].icon_path == ""


def test_parse_command_rejects_other_types():
    assert _parse_command(None) == []


def test_restore_launcher_window_reuses_existing_surface(monkeypatch):
    class FakeSurface:
        def get_rect(self):
            return "fake-rect"

    existing = FakeSurface()
    monkeypatch.setattr("inkspell.launcher.pygame.display.get_surface", lambda: existing)

    surface, rect = _restore_launcher_window()
    assert surface is existing
    assert rect == "fake-rect"


def test_restore_launcher_window_recreates_when_surface_missing(monkeypatch):
    monkeypatch.setattr("inkspell.launcher.pygame.display.get_surface", lambda: None)
    monkeypatch.setattr("inkspell.launcher.create_fullscreen_window", lambda: ("new-surface", "new-rect"))

    surface, rect = _restore_launcher_window()
    assert surface == "new-surface"
    assert rect == "new-rect"
