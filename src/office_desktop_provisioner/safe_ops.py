"""!
@brief Best-effort operation wrapper.
@details Filesystem and registry calls made by the provisioner are never
allowed to abort the run. :func:`attempt` executes a callable, logs any
failure through the human and machine channels, and hands back an
:class:`OperationResult` so callers branch on the outcome instead of catching
exceptions themselves.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Mapping, TypeVar

from . import logging_ext

T = TypeVar("T")


@dataclass
class OperationResult(Generic[T]):
    """!
    @brief Outcome of a guarded operation.
    @details ``value`` holds the callable's return value when ``ok`` is
    ``True``; ``error`` holds the rendered exception otherwise.
    """

    ok: bool
    value: T | None = None
    error: str | None = None

    def __bool__(self) -> bool:
        return self.ok


def attempt(
    action: Callable[[], T],
    description: str,
    *,
    event: str | None = None,
    level: int = logging.WARNING,
    extra: Mapping[str, object] | None = None,
) -> OperationResult[T]:
    """!
    @brief Run ``action`` and convert any ``Exception`` into a logged failure.
    @param action Zero-argument callable performing the side effect.
    @param description Human-readable description, e.g. ``"copy icon x.ico"``.
    @param event Optional machine event name; ``<event>_failed`` is emitted on error.
    @param level Human log level used for failures. Per-item failures inside a
    loop are usually logged at ``DEBUG`` so they do not flood the console.
    @param extra Additional metadata merged into the machine event.
    @returns :class:`OperationResult` describing the outcome.
    """

    try:
        value = action()
    except Exception as exc:  # noqa: BLE001 - every failure is non-fatal here
        human_logger = logging_ext.get_human_logger()
        human_logger.log(level, "Unable to %s: %s", description, exc)
        if event:
            payload = dict(extra or {})
            payload["error"] = str(exc)
            logging_ext.get_machine_logger().warning(
                f"{event}_failed",
                extra=logging_ext.build_event_extra(f"{event}_failed", **payload),
            )
        return OperationResult(ok=False, error=str(exc))
    return OperationResult(ok=True, value=value)


__all__ = ["OperationResult", "attempt"]
