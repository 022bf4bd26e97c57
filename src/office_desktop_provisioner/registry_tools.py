"""!
@brief Read-only registry helpers.
@details Thin ``winreg`` wrappers used by suite detection. Every reader
degrades to a default value when the key or value is missing, access is
denied, or the registry APIs are unavailable on the host.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

try:  # pragma: no cover - exercised through mocks on non-Windows platforms.
    import winreg
except ImportError:  # pragma: no cover - handled gracefully during tests.
    winreg = None  # type: ignore[assignment]


def _ensure_winreg() -> None:
    """!
    @brief Raise an informative error when ``winreg`` is unavailable.
    """

    if winreg is None:  # pragma: no cover - simplifies non-Windows test runs.
        raise FileNotFoundError("Windows registry APIs are unavailable on this platform")


@contextmanager
def open_key(root: int, path: str, access: int | None = None) -> Iterator[Any]:
    """!
    @brief Context manager that mirrors ``winreg.OpenKey`` while ensuring
    handles are closed correctly.
    """

    _ensure_winreg()
    access_mask = access if access is not None else winreg.KEY_READ  # type: ignore[union-attr]
    handle = winreg.OpenKey(root, path, 0, access_mask)  # type: ignore[union-attr]
    try:
        yield handle
    finally:
        winreg.CloseKey(handle)  # type: ignore[union-attr]


def read_access_64bit() -> int | None:
    """!
    @brief Access mask reading the native 64-bit registry view.
    @details A 32-bit interpreter on 64-bit Windows is otherwise redirected
    to ``WOW6432Node``. Returns ``None`` when ``winreg`` is unavailable.
    """

    if winreg is None:
        return None
    return winreg.KEY_READ | getattr(winreg, "KEY_WOW64_64KEY", 0)


def get_value(
    root: int,
    path: str,
    value_name: str,
    default: Any | None = None,
    *,
    access: int | None = None,
) -> Any | None:
    """!
    @brief Read ``value_name`` beneath ``root``/``path``.
    """

    try:
        _ensure_winreg()
        with open_key(root, path, access) as handle:
            value, _ = winreg.QueryValueEx(handle, value_name)  # type: ignore[union-attr]
            return value
    except FileNotFoundError:
        return default
    except OSError:
        return default


def key_exists(root: int, path: str, *, access: int | None = None) -> bool:
    try:
        _ensure_winreg()
        with open_key(root, path, access):
            return True
    except FileNotFoundError:
        return False
    except OSError:
        return False


def hive_name(root: int) -> str:
    """!
    @brief Provide a friendly identifier for a registry hive.
    """

    mapping = {
        getattr(winreg, "HKEY_LOCAL_MACHINE", 0x80000002): "HKLM",  # type: ignore[union-attr]
        getattr(winreg, "HKEY_CURRENT_USER", 0x80000001): "HKCU",  # type: ignore[union-attr]
        getattr(winreg, "HKEY_USERS", 0x80000003): "HKU",  # type: ignore[union-attr]
    }
    return mapping.get(root, hex(root))


__all__ = [
    "get_value",
    "hive_name",
    "key_exists",
    "open_key",
    "read_access_64bit",
]
