"""!
@brief Legacy suite removal through the Office Deployment Tool.
@details Checks for the staged ODT ``setup.exe``, writes the removal
configuration when none exists yet, and runs ``setup.exe /configure`` to
completion. A missing tool is the run's only hard failure; a non-zero exit
from the tool is reported and the run carries on.
"""

from __future__ import annotations

from pathlib import Path

from . import constants, exec_utils, logging_ext, safe_ops


def ensure_remove_config(config_path: Path | str, *, content: str = constants.ODT_REMOVE_XML) -> bool:
    """!
    @brief Write the removal configuration to ``config_path`` unless it already exists.
    @details An existing document is never overwritten so site-customised
    configurations survive.
    @returns ``True`` when a new document was written.
    """

    human_logger = logging_ext.get_human_logger()
    path = Path(config_path)

    if path.exists():
        human_logger.info("Using existing removal configuration %s", path)
        return False

    def _write() -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    result = safe_ops.attempt(
        _write,
        f"write removal configuration {path}",
        event="odt_config_write",
        extra={"path": str(path)},
    )
    if result.ok:
        human_logger.info("Wrote removal configuration %s", path)
    return result.ok


def build_command(odt_path: Path | str, config_path: Path | str) -> list[str]:
    """!
    @brief Compose the ``setup.exe /configure <config>`` command line.
    """

    return [str(odt_path), constants.ODT_CONFIGURE_SWITCH, str(config_path)]


def trigger_uninstall(odt_path: Path | str, config_path: Path | str) -> int:
    """!
    @brief Remove the legacy suite with the Office Deployment Tool.
    @details Waits for the tool without a timeout. The tool's own exit code is
    logged but not propagated: only a missing executable changes the run's
    exit code. The tool is not launched when the removal configuration
    cannot be written.
    @param odt_path Path to the staged ODT ``setup.exe``.
    @param config_path Path of the removal configuration document.
    @returns :data:`constants.EXIT_ODT_MISSING` when ``odt_path`` is absent,
    otherwise :data:`constants.EXIT_OK`.
    """

    human_logger = logging_ext.get_human_logger()
    machine_logger = logging_ext.get_machine_logger()

    odt_path = Path(odt_path)
    config_path = Path(config_path)

    if not odt_path.is_file():
        human_logger.error("Office Deployment Tool not found at %s; aborting", odt_path)
        machine_logger.error(
            "odt_missing",
            extra=logging_ext.build_event_extra("odt_missing", path=str(odt_path)),
        )
        return constants.EXIT_ODT_MISSING

    ensure_remove_config(config_path)
    if not config_path.is_file():
        human_logger.warning(
            "Removal configuration %s is unavailable; skipping Office Deployment Tool", config_path
        )
        machine_logger.warning(
            "odt_skipped",
            extra=logging_ext.build_event_extra("odt_skipped", path=str(odt_path), config_xml=str(config_path)),
        )
        return constants.EXIT_OK

    command = build_command(odt_path, config_path)
    result = exec_utils.run_command(
        command,
        event="odt_uninstall",
        timeout=None,
        human_message=f"Removing legacy Office suite: {' '.join(command)}",
        extra={"config_xml": str(config_path)},
    )

    if result.error is not None:
        human_logger.warning(
            "Unable to launch Office Deployment Tool: %s; continuing with shortcut provisioning",
            result.error,
        )
    elif result.returncode == 0:
        human_logger.info("Office Deployment Tool completed successfully")
    else:
        human_logger.warning(
            "Office Deployment Tool exited with code %d; continuing with shortcut provisioning",
            result.returncode,
        )
    return constants.EXIT_OK


__all__ = ["build_command", "ensure_remove_config", "trigger_uninstall"]
