"""!
@brief Filesystem utilities for icon provisioning and shortcut cleanup.
@details Covers the local icon cache (phase 1), desktop root discovery and
legacy shortcut removal (phase 3), plus default log directory resolution.
Every mutation goes through :func:`office_desktop_provisioner.safe_ops.attempt`
so individual failures are logged and skipped.
"""
from __future__ import annotations

import fnmatch
import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Iterable, Iterator, List, Mapping, Sequence

from . import constants, logging_ext, safe_ops


def ensure_directory(path: Path) -> bool:
    """!
    @brief Create ``path`` (and parents) when missing.
    @returns ``True`` when the directory exists afterwards.
    """

    target = Path(path)
    if target.is_dir():
        return True
    result = safe_ops.attempt(
        lambda: target.mkdir(parents=True, exist_ok=True),
        f"create directory {target}",
        event="directory_create",
        extra={"path": str(target)},
    )
    if result.ok:
        logging_ext.get_human_logger().info("Created directory %s", target)
    return result.ok and target.is_dir()


def provision_icon_cache(
    cache_dir: Path,
    share_dir: Path,
    *,
    pattern: str = constants.ICON_GLOB,
) -> Path | None:
    """!
    @brief Ensure the local icon cache exists and refresh it from ``share_dir``.
    @details Files matching ``pattern`` are copied over any existing copies.
    An unreachable share is reported and skipped; a file that fails to copy is
    logged at debug level and skipped.
    @returns ``cache_dir`` when it exists after provisioning, otherwise ``None``.
    """

    human_logger = logging_ext.get_human_logger()
    machine_logger = logging_ext.get_machine_logger()

    cache_dir = Path(cache_dir)
    share_dir = Path(share_dir)

    if not ensure_directory(cache_dir):
        human_logger.warning("Icon cache %s is unavailable; shortcuts will use fallback icons", cache_dir)
        return None

    reachable = safe_ops.attempt(share_dir.is_dir, f"reach icon share {share_dir}", level=logging.DEBUG)
    if not reachable.value:
        human_logger.warning("Icon share %s is not reachable; keeping cached icons", share_dir)
        return cache_dir

    listing = safe_ops.attempt(lambda: sorted(share_dir.glob(pattern)), f"list icons in {share_dir}")
    copied = 0
    for source in listing.value or []:
        destination = cache_dir / source.name
        result = safe_ops.attempt(
            lambda src=source, dst=destination: shutil.copyfile(src, dst),
            f"copy icon {source.name}",
            level=logging.DEBUG,
        )
        if result.ok:
            copied += 1

    human_logger.info("Copied %d icon(s) from %s to %s", copied, share_dir, cache_dir)
    machine_logger.info(
        "icon_copy",
        extra=logging_ext.build_event_extra(
            "icon_copy",
            source=str(share_dir),
            destination=str(cache_dir),
            copied=copied,
            available=len(listing.value or []),
        ),
    )
    return cache_dir


def user_desktop_roots(
    users_root: Path,
    *,
    excluded: Sequence[str] = constants.NON_USER_PROFILES,
) -> List[Path]:
    """!
    @brief Return the ``Desktop`` folder of every user profile under ``users_root``.
    @details Profiles named in ``excluded`` (compared case-insensitively) are
    skipped so the shared desktop is never picked up implicitly. Folders are
    returned in sorted order whether or not the ``Desktop`` folder exists.
    """

    users_root = Path(users_root)
    skip = {name.lower() for name in excluded}
    listing = safe_ops.attempt(
        lambda: sorted(entry for entry in users_root.iterdir() if entry.is_dir()),
        f"enumerate user profiles in {users_root}",
    )
    return [profile / "Desktop" for profile in listing.value or [] if profile.name.lower() not in skip]


def collect_desktop_roots(
    users_root: Path,
    shared_desktop: Path,
    *,
    include_shared: bool,
) -> List[Path]:
    """!
    @brief Build the ordered list of desktop roots to clean.
    @details The shared desktop is appended only when ``include_shared`` is
    set, which the caller ties to the modern suite being absent so
    suite-managed shortcuts there are never touched.
    """

    roots = user_desktop_roots(users_root)
    if include_shared:
        roots.append(Path(shared_desktop))
    return roots


def _matches(name: str, patterns: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(fnmatch.fnmatchcase(lowered, pattern.lower()) for pattern in patterns)


def iter_matching_files(root: Path, patterns: Sequence[str]) -> Iterator[Path]:
    """!
    @brief Recursively yield files under ``root`` whose names match ``patterns``.
    @details Matching is case-insensitive on every platform. Directories that
    cannot be listed are skipped.
    """

    def _on_error(exc: OSError) -> None:
        logging_ext.get_human_logger().debug("Skipping unreadable directory: %s", exc)

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_on_error):
        for filename in filenames:
            if _matches(filename, patterns):
                yield Path(dirpath) / filename


def _unlink(target: Path) -> None:
    try:
        target.unlink()
    except PermissionError:
        os.chmod(target, stat.S_IWRITE)
        target.unlink()


def remove_matching_files(roots: Iterable[Path], patterns: Sequence[str]) -> List[Path]:
    """!
    @brief Delete every file matching ``patterns`` beneath each existing root.
    @details Missing roots are skipped. Read-only files have the attribute
    cleared before a second attempt. Failures are logged and do not stop the
    enumeration.
    @returns Paths that were deleted.
    """

    human_logger = logging_ext.get_human_logger()
    machine_logger = logging_ext.get_machine_logger()

    removed: List[Path] = []
    for raw in roots:
        root = Path(raw)
        if not root.is_dir():
            human_logger.debug("Skipping %s because it does not exist", root)
            continue

        human_logger.info("Cleaning legacy shortcuts in %s", root)
        for target in list(iter_matching_files(root, patterns)):
            result = safe_ops.attempt(
                lambda path=target: _unlink(path),
                f"remove {target}",
                event="shortcut_remove",
                level=logging.DEBUG,
                extra={"path": str(target)},
            )
            if not result.ok:
                continue
            removed.append(target)
            human_logger.info("Removed %s", target)
            machine_logger.info(
                "shortcut_remove",
                extra=logging_ext.build_event_extra("shortcut_remove", path=str(target)),
            )
    return removed


def get_default_log_directory(
    *,
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> Path:
    """!
    @brief Resolve the default log directory for the current host.
    @details Windows hosts log beneath ``%ProgramData%``; other hosts honour
    ``XDG_STATE_HOME`` and fall back to ``~/.local/state``.
    """

    environment = os.environ if env is None else env
    platform_name = platform or os.name

    if platform_name == "nt":
        base = environment.get("ProgramData") or environment.get("PROGRAMDATA") or r"C:\ProgramData"
        return Path(base) / "OfficeDesktopProvisioner" / "logs"

    state_home = environment.get("XDG_STATE_HOME")
    base_path = Path(state_home) if state_home else Path.home() / ".local" / "state"
    return base_path / "office-desktop-provisioner" / "logs"


__all__ = [
    "collect_desktop_roots",
    "ensure_directory",
    "get_default_log_directory",
    "iter_matching_files",
    "provision_icon_cache",
    "remove_matching_files",
    "user_desktop_roots",
]
