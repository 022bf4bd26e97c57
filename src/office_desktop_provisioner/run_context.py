"""!
@brief Run settings and per-run state.
@details :class:`ProvisionerSettings` gathers every fixed location the run
touches so phases receive them explicitly; :class:`RunContext` carries the
values produced by one phase and consumed by the next.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Tuple

from . import constants
from .detect import SuiteDetection


def _expand(path: str, env: Mapping[str, str], variable: str, default_root: str) -> str:
    """!
    @brief Re-root ``path`` from ``default_root`` onto ``%variable%`` when set.
    """

    value = env.get(variable)
    if value and path.lower().startswith(default_root.lower()):
        return value.rstrip("\\/") + path[len(default_root):]
    return path


@dataclass(frozen=True)
class ProvisionerSettings:
    """!
    @brief Fixed locations used by every phase of a run.
    """

    icon_cache: Path
    icon_share: Path
    users_root: Path
    shared_desktop: Path
    odt_executable: Path
    odt_config: Path
    browser_candidates: Tuple[Path, ...]
    fallback_icon: str = constants.FALLBACK_ICON_FILE
    registry_key: Tuple[int, str] = constants.C2R_CONFIGURATION_KEY
    cleanup_patterns: Tuple[str, ...] = constants.LEGACY_SHORTCUT_PATTERNS

    @classmethod
    def default(cls, env: Mapping[str, str] | None = None) -> "ProvisionerSettings":
        """!
        @brief Build settings from :mod:`constants`.
        @details ``%ProgramData%``, ``%PUBLIC%`` and ``%SystemRoot%`` relocate
        the matching defaults on hosts where Windows lives elsewhere.
        """

        environment = os.environ if env is None else env
        program_data = r"C:\ProgramData"
        return cls(
            icon_cache=Path(_expand(constants.ICON_CACHE, environment, "ProgramData", program_data)),
            icon_share=Path(constants.ICON_SHARE),
            users_root=Path(constants.USERS_ROOT),
            shared_desktop=Path(_expand(constants.SHARED_DESKTOP, environment, "PUBLIC", r"C:\Users\Public")),
            odt_executable=Path(_expand(constants.ODT_EXECUTABLE, environment, "ProgramData", program_data)),
            odt_config=Path(_expand(constants.ODT_REMOVE_CONFIG, environment, "ProgramData", program_data)),
            browser_candidates=tuple(Path(candidate) for candidate in constants.BROWSER_CANDIDATES),
            fallback_icon=_expand(constants.FALLBACK_ICON_FILE, environment, "SystemRoot", r"C:\Windows"),
        )


@dataclass
class RunContext:
    """!
    @brief State threaded through the five phases of one run.
    """

    settings: ProvisionerSettings
    icon_cache: Path | None = None
    suite: SuiteDetection | None = None
    desktop_roots: List[Path] = field(default_factory=list)
    removed_shortcuts: List[Path] = field(default_factory=list)
    uninstall_attempted: bool = False
    browser: Path | None = None
    created_shortcuts: List[Path] = field(default_factory=list)
    exit_code: int = constants.EXIT_OK

    @property
    def suite_found(self) -> bool:
        return bool(self.suite and self.suite.found)

    def summary(self) -> dict[str, object]:
        """!
        @brief Summarise the run for the ``run_complete`` event.
        """

        return {
            "suite_found": self.suite_found,
            "desktop_roots": [str(root) for root in self.desktop_roots],
            "removed": len(self.removed_shortcuts),
            "uninstall_attempted": self.uninstall_attempted,
            "browser": str(self.browser) if self.browser else None,
            "created": len(self.created_shortcuts),
            "exit_code": self.exit_code,
        }


__all__ = ["ProvisionerSettings", "RunContext"]
