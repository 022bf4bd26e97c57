"""!
@brief Static data for the Office Desktop Provisioner.
@details Centralises registry locations, suite markers, legacy shortcut
patterns, web shortcut definitions, browser candidates and the fixed paths
used by each phase so the run works from a single source of truth.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

try:  # pragma: no cover - Windows registry handles are optional on test hosts.
    import winreg
except ImportError:  # pragma: no cover - test scaffolding supplies substitutes.
    winreg = None  # type: ignore[assignment]


if winreg is not None:  # pragma: no branch - deterministic assignments.
    HKLM = winreg.HKEY_LOCAL_MACHINE
else:  # pragma: no cover - exercised implicitly in non-Windows CI.
    HKLM = 0x80000002


C2R_CONFIGURATION_KEY: Tuple[int, str] = (
    HKLM,
    r"SOFTWARE\Microsoft\Office\ClickToRun\Configuration",
)
"""!
@brief Registry key holding the Click-to-Run configuration values.
"""

C2R_RELEASE_IDS_VALUE = "ProductReleaseIds"

MODERN_SUITE_MARKERS: Tuple[str, ...] = ("o365", "m365")
"""!
@brief Lower-case substrings identifying a subscription suite release id.
"""

LEGACY_SHORTCUT_PATTERNS: Tuple[str, ...] = (
    "Word*.lnk",
    "Excel*.lnk",
    "PowerPoint*.lnk",
    "Outlook*.lnk",
    "Publisher*.lnk",
    "Microsoft Word*.lnk",
    "Microsoft Excel*.lnk",
    "Microsoft PowerPoint*.lnk",
    "Microsoft Outlook*.lnk",
    "Microsoft Publisher*.lnk",
)
"""!
@brief Filename globs of legacy application shortcuts removed from desktops.
@details Office 2010 named its shortcuts with a ``Microsoft`` prefix.
"""

USERS_ROOT = r"C:\Users"
SHARED_DESKTOP = r"C:\Users\Public\Desktop"

NON_USER_PROFILES: Tuple[str, ...] = ("public", "default", "default user", "all users")
"""!
@brief Profile folders under ``USERS_ROOT`` that do not belong to a user account.
"""

ICON_SHARE = r"\\deploy01\OfficeDeploy$\Icons"
ICON_CACHE = r"C:\ProgramData\OfficeWebShortcuts\Icons"
ICON_GLOB = "*.ico"

ODT_EXECUTABLE = r"C:\ProgramData\OfficeDeploy\setup.exe"
ODT_REMOVE_CONFIG = r"C:\ProgramData\OfficeDeploy\RemoveLegacyOffice.xml"
ODT_CONFIGURE_SWITCH = "/configure"

ODT_REMOVE_XML = """<Configuration>
  <Remove All="TRUE" />
  <Display Level="None" AcceptEULA="TRUE" />
</Configuration>
"""
"""!
@brief Fixed removal configuration written when none exists yet.
"""

BROWSER_CANDIDATES: Tuple[str, ...] = (
    r"C:\Program Files (x86)\Microsoft\Edge\Application\msedge.exe",
    r"C:\Program Files\Microsoft\Edge\Application\msedge.exe",
    r"C:\Program Files\Google\Chrome\Application\chrome.exe",
    r"C:\Program Files (x86)\Google\Chrome\Application\chrome.exe",
)
"""!
@brief Browser executables checked in order; the first one present is used.
"""

FALLBACK_ICON_FILE = r"C:\Windows\System32\shell32.dll"
FALLBACK_ICON_INDEX = 1

EXIT_OK = 0
EXIT_ODT_MISSING = 1


@dataclass(frozen=True)
class ShortcutDefinition:
    """!
    @brief One web shortcut placed on the shared desktop.
    """

    name: str
    url: str
    icon: str


WEB_SHORTCUTS: Tuple[ShortcutDefinition, ...] = (
    ShortcutDefinition("Word", "https://www.office.com/launch/word", "word.ico"),
    ShortcutDefinition("Excel", "https://www.office.com/launch/excel", "excel.ico"),
    ShortcutDefinition("PowerPoint", "https://www.office.com/launch/powerpoint", "powerpoint.ico"),
    ShortcutDefinition("Outlook", "https://outlook.office.com/mail/", "outlook.ico"),
    ShortcutDefinition("OneNote", "https://www.office.com/launch/onenote", "onenote.ico"),
    ShortcutDefinition("OneDrive", "https://www.office.com/launch/onedrive", "onedrive.ico"),
    ShortcutDefinition("SharePoint Online", "https://www.office.com/launch/sharepoint", "sharepoint.ico"),
)
