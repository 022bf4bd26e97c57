"""!
@brief Tests for web shortcut provisioning on the shared desktop.
"""

from __future__ import annotations

import pathlib
import sys

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from office_desktop_provisioner import constants, shortcut_writers, web_shortcuts  # noqa: E402

from test_shortcut_writers import FakeShell  # noqa: E402


def _make_exe(path: pathlib.Path) -> pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"MZ")
    return path


def test_find_browser_returns_first_existing_candidate(tmp_path) -> None:
    first = tmp_path / "x86" / "msedge.exe"
    second = _make_exe(tmp_path / "x64" / "msedge.exe")
    third = _make_exe(tmp_path / "chrome" / "chrome.exe")

    assert web_shortcuts.find_browser([first, second, third]) == second
    assert web_shortcuts.find_browser([first]) is None


def test_without_browser_writes_seven_internet_shortcuts(tmp_path) -> None:
    """!
    @brief Each ``.url`` file carries exactly one ``URL=`` line for its service.
    """

    desktop = tmp_path / "Public" / "Desktop"

    result = web_shortcuts.provision_web_shortcuts(desktop, [tmp_path / "missing.exe"], None)

    assert result.browser is None
    assert len(result.created) == 7
    for definition in constants.WEB_SHORTCUTS:
        path = desktop / f"{definition.name}.url"
        lines = path.read_bytes().decode("ascii").split("\r\n")
        url_lines = [line for line in lines if line.startswith("URL=")]
        assert url_lines == [f"URL={definition.url}"]
        assert f"IconFile={constants.FALLBACK_ICON_FILE}" in lines
        assert "IconIndex=1" in lines
    assert not list(desktop.glob("*.lnk"))


def test_internet_shortcuts_use_cached_icons(tmp_path) -> None:
    desktop = tmp_path / "Desktop"
    cache = tmp_path / "icons"
    cache.mkdir()
    (cache / "word.ico").write_bytes(b"\x00")

    web_shortcuts.provision_web_shortcuts(desktop, [], cache)

    word = (desktop / "Word.url").read_text(encoding="ascii")
    excel = (desktop / "Excel.url").read_text(encoding="ascii")
    assert f"IconFile={cache / 'word.ico'}" in word
    assert "IconIndex=0" in word
    assert "IconIndex=1" in excel


def test_provisioning_twice_is_idempotent(tmp_path) -> None:
    desktop = tmp_path / "Desktop"

    web_shortcuts.provision_web_shortcuts(desktop, [], None)
    first = {path.name: path.read_bytes() for path in desktop.iterdir()}
    web_shortcuts.provision_web_shortcuts(desktop, [], None)
    second = {path.name: path.read_bytes() for path in desktop.iterdir()}

    assert len(first) == 7
    assert first == second


def test_with_browser_writes_native_shortcuts(tmp_path) -> None:
    """!
    @brief A found browser becomes the exact target of every ``.lnk``.
    """

    desktop = tmp_path / "Desktop"
    browser = _make_exe(tmp_path / "Edge" / "msedge.exe")
    shell = FakeShell()

    result = web_shortcuts.provision_web_shortcuts(
        desktop,
        [browser, _make_exe(tmp_path / "Chrome" / "chrome.exe")],
        None,
        shell_factory=lambda: shell,
    )

    assert result.browser == browser
    assert len(shell.shortcuts) == 7
    assert {shortcut.TargetPath for shortcut in shell.shortcuts} == {str(browser)}
    assert [shortcut.Arguments for shortcut in shell.shortcuts] == [d.url for d in constants.WEB_SHORTCUTS]
    assert {shortcut.IconLocation for shortcut in shell.shortcuts} == {f"{browser},0"}
    assert {shortcut.WorkingDirectory for shortcut in shell.shortcuts} == {str(browser.parent)}
    assert sorted(path.name for path in result.created) == sorted(
        f"{d.name}.lnk" for d in constants.WEB_SHORTCUTS
    )
    assert not list(desktop.glob("*.url"))


def test_failed_shortcut_does_not_stop_the_rest(tmp_path) -> None:
    desktop = tmp_path / "Desktop"
    browser = _make_exe(tmp_path / "Edge" / "msedge.exe")
    shell = FakeShell()
    original = shell.CreateShortcut

    def picky(path):
        if path.endswith("Excel.lnk"):
            raise OSError("access denied")
        return original(path)

    shell.CreateShortcut = picky

    result = web_shortcuts.provision_web_shortcuts(desktop, [browser], None, shell_factory=lambda: shell)

    assert result.failed == ["Excel"]
    assert len(result.created) == 6


def test_missing_com_support_is_reported_per_shortcut(tmp_path) -> None:
    desktop = tmp_path / "Desktop"
    browser = _make_exe(tmp_path / "Edge" / "msedge.exe")

    def no_com():
        raise shortcut_writers.ShortcutWriterError("pywin32 missing")

    result = web_shortcuts.provision_web_shortcuts(desktop, [browser], None, shell_factory=no_com)

    assert result.created == []
    assert len(result.failed) == 7
    assert desktop.is_dir()
