"""!
@brief Primary entry point for the Office Desktop Provisioner.
@details Bootstraps logging and runs the five provisioning phases in order:
icon cache, suite detection, legacy shortcut cleanup, legacy suite removal
and web shortcut provisioning. The command line only controls logging; the
run itself is driven entirely by :mod:`constants`.
"""
from __future__ import annotations

import argparse
import logging
import pathlib
from typing import Iterable, Optional

from . import (
    constants,
    detect,
    fs_tools,
    logging_ext,
    odt_uninstall,
    version,
    web_shortcuts,
)
from .icons import IconLocation
from .run_context import ProvisionerSettings, RunContext


def build_arg_parser() -> argparse.ArgumentParser:
    """!
    @brief Create the argument parser.
    """

    parser = argparse.ArgumentParser(
        prog="office-desktop-provisioner",
        description="Remove legacy Office shortcuts and provision Microsoft 365 web shortcuts.",
    )
    metadata = version.build_info()
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"{metadata['version']} ({metadata['build']})",
    )
    parser.add_argument("--logdir", metavar="DIR", help="Directory for human/JSONL log output.")
    parser.add_argument("--json", action="store_true", help="Mirror structured events to stdout.")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--quiet", action="store_true", help="Minimal console output (errors only).")
    verbosity.add_argument("--verbose", action="store_true", help="Include per-file failures in the output.")
    return parser


def _resolve_log_directory(candidate: Optional[str]) -> pathlib.Path:
    """!
    @brief Determine the log directory, falling back to the platform default.
    """

    if candidate:
        return pathlib.Path(candidate).expanduser()
    return fs_tools.get_default_log_directory().expanduser()


def _bootstrap_logging(args: argparse.Namespace) -> tuple[logging.Logger, logging.Logger]:
    level = logging.DEBUG if args.verbose else logging.INFO
    console_level = logging.ERROR if args.quiet else level
    return logging_ext.setup_logging(
        _resolve_log_directory(args.logdir),
        json_to_stdout=args.json,
        level=level,
        console_level=console_level,
    )


def run_icon_phase(context: RunContext) -> None:
    settings = context.settings
    context.icon_cache = fs_tools.provision_icon_cache(settings.icon_cache, settings.icon_share)


def run_detection_phase(context: RunContext) -> None:
    context.suite = detect.detect_modern_suite(context.settings.registry_key)


def run_cleanup_phase(context: RunContext) -> None:
    """!
    @brief Remove legacy shortcuts from user desktops.
    @details The shared desktop is cleaned only when the modern suite is
    absent, leaving suite-managed shared shortcuts alone.
    """

    settings = context.settings
    context.desktop_roots = fs_tools.collect_desktop_roots(
        settings.users_root,
        settings.shared_desktop,
        include_shared=not context.suite_found,
    )
    context.removed_shortcuts = fs_tools.remove_matching_files(context.desktop_roots, settings.cleanup_patterns)
    logging_ext.get_human_logger().info(
        "Removed %d legacy shortcut(s) from %d desktop(s)",
        len(context.removed_shortcuts),
        len(context.desktop_roots),
    )


def run_uninstall_phase(context: RunContext) -> int:
    settings = context.settings
    context.uninstall_attempted = True
    return odt_uninstall.trigger_uninstall(settings.odt_executable, settings.odt_config)


def run_web_shortcut_phase(context: RunContext) -> None:
    settings = context.settings
    result = web_shortcuts.provision_web_shortcuts(
        settings.shared_desktop,
        settings.browser_candidates,
        context.icon_cache,
        fallback_icon=IconLocation(settings.fallback_icon, constants.FALLBACK_ICON_INDEX),
    )
    context.browser = result.browser
    context.created_shortcuts = result.created


def run(settings: ProvisionerSettings) -> RunContext:
    """!
    @brief Execute all phases against ``settings``.
    @details A detected modern suite ends the run after cleanup with exit
    code 0. A missing deployment tool ends it after cleanup with exit code 1.
    @param settings Locations used by the run.
    @returns The populated :class:`RunContext`.
    """

    human_logger = logging_ext.get_human_logger()
    machine_logger = logging_ext.get_machine_logger()
    context = RunContext(settings=settings)

    human_logger.info("Phase 1/5: provisioning icon cache")
    run_icon_phase(context)

    human_logger.info("Phase 2/5: detecting installed Office suite")
    run_detection_phase(context)

    human_logger.info("Phase 3/5: removing legacy desktop shortcuts")
    run_cleanup_phase(context)

    if context.suite_found:
        human_logger.info("Microsoft 365 is already installed; nothing left to do")
    else:
        human_logger.info("Phase 4/5: removing legacy Office suite")
        context.exit_code = run_uninstall_phase(context)
        if context.exit_code == constants.EXIT_OK:
            human_logger.info("Phase 5/5: provisioning web shortcuts on %s", settings.shared_desktop)
            run_web_shortcut_phase(context)

    machine_logger.info("run_complete", extra=logging_ext.build_event_extra("run_complete", summary=context.summary()))
    human_logger.info("Run complete with exit code %d", context.exit_code)
    return context


def main(argv: Optional[Iterable[str]] = None) -> int:
    """!
    @brief Console entry point.
    @returns Process exit code: 0 on success, 1 when the deployment tool is missing.
    """

    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _bootstrap_logging(args)
    return run(ProvisionerSettings.default()).exit_code


__all__ = ["build_arg_parser", "main", "run"]
