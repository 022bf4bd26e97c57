"""!
@brief Tests for the ``.lnk`` and ``.url`` shortcut writers.
"""

from __future__ import annotations

import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from office_desktop_provisioner import shortcut_writers  # noqa: E402
from office_desktop_provisioner.constants import ShortcutDefinition  # noqa: E402
from office_desktop_provisioner.icons import IconLocation  # noqa: E402

OUTLOOK = ShortcutDefinition("Outlook", "https://outlook.office.com/mail/", "outlook.ico")


class FakeShortcut:
    """!
    @brief Stand-in for the COM ``WshShortcut`` object.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.TargetPath = ""
        self.Arguments = ""
        self.IconLocation = ""
        self.WorkingDirectory = ""
        self.Description = ""
        self.saved = False

    def Save(self) -> None:  # noqa: N802 - COM naming
        self.saved = True
        pathlib.Path(self.path).write_text(
            "|".join([self.TargetPath, self.Arguments, self.IconLocation, self.WorkingDirectory]),
            encoding="utf-8",
        )


class FakeShell:
    """!
    @brief Stand-in for ``WScript.Shell`` recording created shortcuts.
    """

    def __init__(self) -> None:
        self.shortcuts: list[FakeShortcut] = []

    def CreateShortcut(self, path: str) -> FakeShortcut:  # noqa: N802 - COM naming
        shortcut = FakeShortcut(path)
        self.shortcuts.append(shortcut)
        return shortcut


def test_render_internet_shortcut_uses_crlf() -> None:
    text = shortcut_writers.render_internet_shortcut(OUTLOOK, IconLocation(r"C:\Icons\outlook.ico", 0))

    assert text == (
        "[InternetShortcut]\r\n"
        "URL=https://outlook.office.com/mail/\r\n"
        "IconFile=C:\\Icons\\outlook.ico\r\n"
        "IconIndex=0\r\n"
    )


def test_internet_shortcut_writer_writes_single_byte_text(tmp_path) -> None:
    """!
    @brief ``.url`` files are ASCII with CRLF endings and no byte-order mark.
    """

    writer = shortcut_writers.InternetShortcutWriter()

    path = writer.write(tmp_path, OUTLOOK, IconLocation(r"C:\Windows\System32\shell32.dll", 1))

    assert path == tmp_path / "Outlook.url"
    payload = path.read_bytes()
    assert payload.startswith(b"[InternetShortcut]\r\n")
    assert b"IconIndex=1\r\n" in payload
    assert b"\n" not in payload.replace(b"\r\n", b"")
    payload.decode("ascii")


def test_internet_shortcut_writer_replaces_unencodable_characters(tmp_path) -> None:
    writer = shortcut_writers.InternetShortcutWriter()

    path = writer.write(tmp_path, OUTLOOK, IconLocation(r"C:\Icônes\outlook.ico", 0))

    assert b"IconFile=C:\\Ic?nes\\outlook.ico" in path.read_bytes()


def test_internet_shortcut_writer_overwrites(tmp_path) -> None:
    (tmp_path / "Outlook.url").write_text("stale", encoding="utf-8")
    writer = shortcut_writers.InternetShortcutWriter()

    path = writer.write(tmp_path, OUTLOOK, IconLocation("x.ico", 0))

    assert "stale" not in path.read_text(encoding="ascii")


def test_native_writer_sets_shortcut_properties(tmp_path) -> None:
    """!
    @brief ``.lnk`` shortcuts launch the browser with the service URL.
    """

    browser = tmp_path / "Edge" / "msedge.exe"
    shell = FakeShell()
    writer = shortcut_writers.NativeShortcutWriter(browser, shell_factory=lambda: shell)
    icon = IconLocation(r"C:\Icons\outlook.ico", 0)

    path = writer.write(tmp_path, OUTLOOK, icon)

    assert path == tmp_path / "Outlook.lnk"
    (shortcut,) = shell.shortcuts
    assert shortcut.path == str(path)
    assert shortcut.TargetPath == str(browser)
    assert shortcut.Arguments == OUTLOOK.url
    assert shortcut.IconLocation == r"C:\Icons\outlook.ico,0"
    assert shortcut.WorkingDirectory == str(browser.parent)
    assert shortcut.saved


def test_native_writer_creates_shell_once(tmp_path) -> None:
    created = []

    def factory():
        created.append(FakeShell())
        return created[-1]

    writer = shortcut_writers.NativeShortcutWriter(tmp_path / "chrome.exe", shell_factory=factory)
    writer.write(tmp_path, OUTLOOK, IconLocation("a.ico", 0))
    writer.write(tmp_path, OUTLOOK, IconLocation("a.ico", 0))

    assert len(created) == 1


def test_create_shell_requires_pywin32(monkeypatch) -> None:
    monkeypatch.setitem(sys.modules, "win32com", None)
    monkeypatch.setitem(sys.modules, "win32com.client", None)

    with pytest.raises(shortcut_writers.ShortcutWriterError):
        shortcut_writers._create_shell()


def test_select_writer_depends_on_browser(tmp_path) -> None:
    assert isinstance(shortcut_writers.select_writer(None), shortcut_writers.InternetShortcutWriter)
    native = shortcut_writers.select_writer(tmp_path / "msedge.exe")
    assert isinstance(native, shortcut_writers.NativeShortcutWriter)
    assert native.suffix == ".lnk"
