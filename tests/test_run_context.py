"""!
@brief Tests for run settings defaults and run summaries.
"""

from __future__ import annotations

import pathlib
import sys

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from office_desktop_provisioner import constants  # noqa: E402
from office_desktop_provisioner.detect import SuiteDetection  # noqa: E402
from office_desktop_provisioner.run_context import ProvisionerSettings, RunContext  # noqa: E402


def test_defaults_match_constants_without_environment() -> None:
    settings = ProvisionerSettings.default(env={})

    assert str(settings.icon_cache) == str(pathlib.Path(constants.ICON_CACHE))
    assert str(settings.shared_desktop) == str(pathlib.Path(constants.SHARED_DESKTOP))
    assert str(settings.odt_executable) == str(pathlib.Path(constants.ODT_EXECUTABLE))
    assert settings.fallback_icon == constants.FALLBACK_ICON_FILE
    assert [str(p) for p in settings.browser_candidates] == [str(pathlib.Path(c)) for c in constants.BROWSER_CANDIDATES]
    assert settings.cleanup_patterns == constants.LEGACY_SHORTCUT_PATTERNS


def test_defaults_follow_relocated_windows_folders() -> None:
    """!
    @brief ``%ProgramData%``, ``%PUBLIC%`` and ``%SystemRoot%`` relocate the defaults.
    """

    env = {"ProgramData": "D:\\ProgramData", "PUBLIC": "D:\\Users\\Public", "SystemRoot": "D:\\Windows"}

    settings = ProvisionerSettings.default(env=env)

    assert str(settings.icon_cache) == str(pathlib.Path(r"D:\ProgramData\OfficeWebShortcuts\Icons"))
    assert str(settings.odt_config) == str(pathlib.Path(r"D:\ProgramData\OfficeDeploy\RemoveLegacyOffice.xml"))
    assert str(settings.shared_desktop) == str(pathlib.Path(r"D:\Users\Public\Desktop"))
    assert settings.fallback_icon == r"D:\Windows\System32\shell32.dll"


def test_run_context_summary() -> None:
    context = RunContext(settings=ProvisionerSettings.default(env={}))
    assert context.suite_found is False

    context.suite = SuiteDetection(found=True, release_ids=("O365ProPlusRetail",), matches=("O365ProPlusRetail",))
    summary = context.summary()

    assert summary["suite_found"] is True
    assert summary["created"] == 0
    assert summary["exit_code"] == 0
