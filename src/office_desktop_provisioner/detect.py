"""!
@brief Office suite detection.
@details Reads the Click-to-Run configuration and decides whether a
subscription (Microsoft 365) suite is installed by matching the configured
product release identifiers against fixed markers. Detection fails open: an
unreadable or missing configuration means the legacy suite is assumed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Tuple

from . import constants, logging_ext, registry_tools


@dataclass(frozen=True)
class SuiteDetection:
    """!
    @brief Result of a suite detection pass.
    @details ``release_ids`` lists every identifier that was scanned and
    ``matches`` the ones containing a subscription marker.
    """

    found: bool
    release_ids: Tuple[str, ...] = ()
    matches: Tuple[str, ...] = ()


def parse_release_ids(raw: object) -> List[str]:
    """!
    @brief Normalise a ``ProductReleaseIds`` value into a list of identifiers.
    @details The value is a comma-separated ``REG_SZ`` on most hosts and a
    ``REG_MULTI_SZ`` list on some; both shapes are accepted. Empty entries are
    dropped.
    """

    if raw is None:
        return []
    if isinstance(raw, str):
        parts: Iterable[str] = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        parts = (piece for item in raw for piece in str(item).split(","))
    else:
        parts = str(raw).split(",")
    return [part.strip() for part in parts if part.strip()]


def match_modern_suite(
    release_ids: Sequence[str],
    markers: Sequence[str] = constants.MODERN_SUITE_MARKERS,
) -> Tuple[str, ...]:
    """!
    @brief Return the identifiers containing any marker, compared case-insensitively.
    """

    lowered = [marker.lower() for marker in markers]
    return tuple(rid for rid in release_ids if any(marker in rid.lower() for marker in lowered))


def _read_release_ids(hive: int, path: str) -> object:
    access = registry_tools.read_access_64bit()
    if not registry_tools.key_exists(hive, path, access=access):
        return None
    return registry_tools.get_value(hive, path, constants.C2R_RELEASE_IDS_VALUE, access=access)


def detect_modern_suite(
    registry_key: Tuple[int, str] = constants.C2R_CONFIGURATION_KEY,
    *,
    reader: Callable[[int, str], object] | None = None,
    markers: Sequence[str] = constants.MODERN_SUITE_MARKERS,
) -> SuiteDetection:
    """!
    @brief Determine whether a subscription Office suite is installed.
    @param registry_key ``(hive, path)`` of the Click-to-Run configuration key.
    @param reader Optional callable returning the raw ``ProductReleaseIds``
    value for ``(hive, path)``; defaults to a registry read.
    @param markers Substrings identifying a subscription release id.
    @returns :class:`SuiteDetection`; ``found`` is ``False`` whenever the value
    cannot be read.
    """

    human_logger = logging_ext.get_human_logger()
    machine_logger = logging_ext.get_machine_logger()

    hive, path = registry_key
    read = reader or _read_release_ids
    location = f"{registry_tools.hive_name(hive)}\\{path}"

    try:
        raw = read(hive, path)
        release_ids = parse_release_ids(raw)
        matches = match_modern_suite(release_ids, markers)
    except Exception as exc:  # noqa: BLE001 - detection fails open
        human_logger.warning("Unable to read %s: %s; assuming legacy suite", location, exc)
        machine_logger.warning(
            "suite_detection",
            extra=logging_ext.build_event_extra("suite_detection", found=False, key=location, error=str(exc)),
        )
        return SuiteDetection(found=False)

    if raw is None:
        human_logger.info("No Click-to-Run configuration at %s; assuming legacy suite", location)

    detection = SuiteDetection(found=bool(matches), release_ids=tuple(release_ids), matches=matches)
    if detection.found:
        human_logger.info("Microsoft 365 suite detected (%s)", ", ".join(matches))
    else:
        human_logger.info(
            "Microsoft 365 suite not detected (release ids: %s)",
            ", ".join(release_ids) or "none",
        )
    machine_logger.info(
        "suite_detection",
        extra=logging_ext.build_event_extra(
            "suite_detection",
            found=detection.found,
            key=location,
            release_ids=list(detection.release_ids),
            matches=list(detection.matches),
        ),
    )
    return detection


__all__ = [
    "SuiteDetection",
    "detect_modern_suite",
    "match_modern_suite",
    "parse_release_ids",
]
