"""!
@brief Web shortcut provisioning on the shared desktop.
@details Finds an installed browser, selects the matching shortcut writer once
and writes one shortcut per cloud service, always overwriting existing files
so repeated runs converge on the same result.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, List, Sequence

from . import constants, fs_tools, icons, logging_ext, safe_ops, shortcut_writers
from .constants import ShortcutDefinition


@dataclass
class ProvisioningResult:
    """!
    @brief Summary of a web shortcut provisioning pass.
    """

    browser: Path | None
    created: List[Path] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def find_browser(candidates: Iterable[Path | str]) -> Path | None:
    """!
    @brief Return the first candidate browser executable that exists.
    """

    for candidate in candidates:
        path = Path(candidate)
        if path.is_file():
            return path
    return None


def provision_web_shortcuts(
    shared_desktop: Path,
    browser_candidates: Sequence[Path | str] = constants.BROWSER_CANDIDATES,
    icon_cache: Path | None = None,
    *,
    definitions: Sequence[ShortcutDefinition] = constants.WEB_SHORTCUTS,
    fallback_icon: icons.IconLocation | None = None,
    shell_factory: Callable[[], Any] | None = None,
) -> ProvisioningResult:
    """!
    @brief Create one shortcut per definition on ``shared_desktop``.
    @details When a browser is found each service gets a ``.lnk`` launching
    the browser with the service URL; otherwise a ``.url`` internet shortcut
    is written. A failed shortcut is logged and the rest are still written.
    @param shared_desktop Desktop folder visible to every local user.
    @param browser_candidates Browser executables checked in order.
    @param icon_cache Local icon cache, or ``None`` when unavailable.
    @param definitions Shortcuts to create.
    @param fallback_icon Icon used when neither cache nor browser provides one.
    @param shell_factory Optional ``WScript.Shell`` factory for the ``.lnk`` writer.
    """

    human_logger = logging_ext.get_human_logger()
    machine_logger = logging_ext.get_machine_logger()

    shared_desktop = Path(shared_desktop)
    fs_tools.ensure_directory(shared_desktop)

    browser = find_browser(browser_candidates)
    if browser is not None:
        human_logger.info("Using browser %s for web shortcuts", browser)
    else:
        human_logger.info("No supported browser found; writing internet shortcuts")

    native_options = {"shell_factory": shell_factory} if shell_factory is not None else {}
    writer = shortcut_writers.select_writer(browser, **native_options)
    result = ProvisioningResult(browser=browser)

    for definition in definitions:
        icon = icons.resolve_icon(definition, browser, icon_cache, fallback=fallback_icon)
        outcome = safe_ops.attempt(
            lambda item=definition, location=icon: writer.write(shared_desktop, item, location),
            f"create shortcut {definition.name}",
            event="shortcut_create",
            extra={"shortcut": definition.name, "url": definition.url},
        )
        if not outcome.ok or outcome.value is None:
            result.failed.append(definition.name)
            continue

        result.created.append(outcome.value)
        human_logger.info("Created %s", outcome.value)
        machine_logger.info(
            "shortcut_create",
            extra=logging_ext.build_event_extra(
                "shortcut_create",
                shortcut=definition.name,
                path=str(outcome.value),
                url=definition.url,
                icon=str(icon),
                kind=writer.suffix,
            ),
        )

    return result


__all__ = ["ProvisioningResult", "find_browser", "provision_web_shortcuts"]
