"""!
@brief Shortcut file writers.
@details Two interchangeable writers share the :class:`ShortcutWriter`
protocol. :class:`NativeShortcutWriter` produces ``.lnk`` files through the
``WScript.Shell`` COM object and launches the cloud service in a browser;
:class:`InternetShortcutWriter` produces plain-text ``.url`` files when no
browser is installed. The provisioner picks one writer per run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Protocol

from .constants import ShortcutDefinition
from .icons import IconLocation

INTERNET_SHORTCUT_ENCODING = "ascii"


class ShortcutWriterError(RuntimeError):
    """!
    @brief Raised when a shortcut file cannot be produced.
    """


class ShortcutWriter(Protocol):
    suffix: str

    def write(self, destination: Path, definition: ShortcutDefinition, icon: IconLocation) -> Path:
        """!
        @brief Write the shortcut for ``definition`` into ``destination``.
        @returns Path of the written shortcut file.
        """
        ...


def _create_shell() -> Any:
    """!
    @brief Create a ``WScript.Shell`` COM object.
    @throws ShortcutWriterError If pywin32 is missing or COM creation fails.
    """

    try:
        import win32com.client

        return win32com.client.Dispatch("WScript.Shell")
    except ImportError as e:
        raise ShortcutWriterError(
            "win32com is required to create .lnk shortcuts. Install with: pip install pywin32"
        ) from e
    except Exception as e:
        raise ShortcutWriterError(f"Failed to create WScript.Shell object: {e}") from e


class NativeShortcutWriter:
    """!
    @brief Write ``.lnk`` shortcuts that open a service URL in ``browser``.
    @details The target is the browser executable, the URL is passed as its
    argument, and the working directory is the browser's folder. The COM
    object is created lazily on first write; ``shell_factory`` lets callers
    substitute it.
    """

    suffix = ".lnk"

    def __init__(self, browser: Path, *, shell_factory: Callable[[], Any] = _create_shell) -> None:
        self.browser = Path(browser)
        self._shell_factory = shell_factory
        self._shell: Any | None = None

    def _get_shell(self) -> Any:
        if self._shell is None:
            self._shell = self._shell_factory()
        return self._shell

    def write(self, destination: Path, definition: ShortcutDefinition, icon: IconLocation) -> Path:
        path = Path(destination) / f"{definition.name}{self.suffix}"
        shortcut = self._get_shell().CreateShortcut(str(path))
        shortcut.TargetPath = str(self.browser)
        shortcut.Arguments = definition.url
        shortcut.IconLocation = str(icon)
        shortcut.WorkingDirectory = str(self.browser.parent)
        shortcut.Description = definition.name
        shortcut.Save()
        return path


def render_internet_shortcut(definition: ShortcutDefinition, icon: IconLocation) -> str:
    """!
    @brief Render the ``[InternetShortcut]`` document for ``definition``.
    @details Lines are joined with CRLF and the document ends with one.
    """

    lines = [
        "[InternetShortcut]",
        f"URL={definition.url}",
        f"IconFile={icon.path}",
        f"IconIndex={icon.index}",
    ]
    return "\r\n".join(lines) + "\r\n"


class InternetShortcutWriter:
    """!
    @brief Write plain-text ``.url`` shortcuts in a single-byte encoding.
    """

    suffix = ".url"

    def write(self, destination: Path, definition: ShortcutDefinition, icon: IconLocation) -> Path:
        path = Path(destination) / f"{definition.name}{self.suffix}"
        payload = render_internet_shortcut(definition, icon).encode(INTERNET_SHORTCUT_ENCODING, errors="replace")
        path.write_bytes(payload)
        return path


def select_writer(browser: Path | None, **native_options: Any) -> ShortcutWriter:
    """!
    @brief Pick the writer for this run based on browser presence.
    """

    if browser is not None:
        return NativeShortcutWriter(browser, **native_options)
    return InternetShortcutWriter()


__all__ = [
    "InternetShortcutWriter",
    "NativeShortcutWriter",
    "ShortcutWriter",
    "ShortcutWriterError",
    "render_internet_shortcut",
    "select_writer",
]
