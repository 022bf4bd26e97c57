"""!
@brief Icon resolution for web shortcuts.
@details Picks the icon for a shortcut from, in order, the local icon cache,
the browser executable and the shell library fallback. Each tier is only
consulted when the previous one is unavailable.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from . import constants
from .constants import ShortcutDefinition


@dataclass(frozen=True)
class IconLocation:
    """!
    @brief Icon file and resource index used to decorate a shortcut.
    """

    path: str
    index: int

    def __str__(self) -> str:
        return f"{self.path},{self.index}"


def resolve_icon(
    definition: ShortcutDefinition,
    browser: Path | None = None,
    icon_cache: Path | None = None,
    *,
    fallback: IconLocation | None = None,
) -> IconLocation:
    """!
    @brief Resolve the icon for ``definition``.
    @param definition Shortcut whose ``icon`` names the cached icon file.
    @param browser Browser executable, when one was found.
    @param icon_cache Local icon cache directory, when available.
    @param fallback Last-resort icon; defaults to the shell library icon.
    """

    if icon_cache is not None:
        cached = Path(icon_cache) / definition.icon
        if cached.is_file():
            return IconLocation(str(cached), 0)

    if browser is not None and Path(browser).is_file():
        return IconLocation(str(browser), 0)

    if fallback is not None:
        return fallback
    return IconLocation(constants.FALLBACK_ICON_FILE, constants.FALLBACK_ICON_INDEX)


__all__ = ["IconLocation", "resolve_icon"]
