"""!
@brief Subprocess execution helper with a sanitised environment.
@details Centralises invocation of :func:`subprocess.run` so the deployment
tool launch emits consistent ``*_plan``/``*_result`` telemetry and never
inherits virtual environment variables from a frozen or venv-hosted
interpreter.
"""

from __future__ import annotations

import os
import subprocess
import time
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass

from . import logging_ext

_SANITIZE_BLOCKLIST = {
    "PYTHONPATH",
    "PYTHONHOME",
    "PYTHONWARNINGS",
    "VIRTUAL_ENV",
    "PIP_REQUIRE_VIRTUALENV",
    "CONDA_PREFIX",
    "CONDA_DEFAULT_ENV",
    "PYENV_VERSION",
    "POETRY_ACTIVE",
    "__PYVENV_LAUNCHER__",
}


@dataclass
class CommandResult:
    """!
    @brief Outcome information from :func:`run_command`.
    @details ``error`` is set when the process could not be started; the
    ``returncode`` is then ``127`` for a missing executable and ``1`` for any
    other launch failure.
    """

    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str
    duration: float
    error: str | None = None


def _build_result_payload(
    *,
    return_code: int,
    duration: float,
    stdout: str,
    stderr: str,
    error: str | None = None,
) -> dict[str, object]:
    return {
        "rc": return_code,
        "duration_ms": round(duration * 1000, 3),
        "stdout": stdout,
        "stderr": stderr,
        "error": error,
    }


def sanitize_environment(base_env: Mapping[str, str] | None = None) -> MutableMapping[str, str]:
    """!
    @brief Produce a subprocess environment stripped of virtualenv artefacts.
    @param base_env Source mapping to copy; defaults to the host environment.
    """

    source = os.environ if base_env is None else base_env
    environment: MutableMapping[str, str] = {str(k): str(v) for k, v in source.items() if v is not None}
    for key in _SANITIZE_BLOCKLIST:
        environment.pop(key, None)
    return environment


def run_command(
    command: Sequence[str],
    *,
    event: str,
    timeout: int | float | None = None,
    human_message: str | None = None,
    extra: Mapping[str, object] | None = None,
) -> CommandResult:
    """!
    @brief Execute ``command`` synchronously and record the outcome.
    @details Emits ``<event>_plan`` before launch and ``<event>_result`` after
    exit (``<event>_missing``/``<event>_error`` when the launch fails). Launch
    failures are returned as a :class:`CommandResult` rather than raised. With
    ``timeout=None`` the call waits for the process indefinitely.
    @param command Sequence of command arguments.
    @param event Base name for structured log events.
    @param timeout Optional timeout in seconds.
    @param human_message Optional message emitted before execution.
    @param extra Additional metadata merged into machine log payloads.
    """

    human_logger = logging_ext.get_human_logger()
    machine_logger = logging_ext.get_machine_logger()

    command_list = [str(part) for part in command]
    metadata: MutableMapping[str, object] = {"command": command_list, "timeout": timeout}
    if extra:
        metadata.update({key: value for key, value in extra.items() if key != "event"})
    machine_logger.info(f"{event}_plan", extra=logging_ext.build_event_extra(f"{event}_plan", **metadata))

    if human_message:
        human_logger.info(human_message)

    start = time.monotonic()
    try:
        completed = subprocess.run(  # noqa: S603 - intentional command execution
            command_list,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
            env=sanitize_environment(),
        )
    except FileNotFoundError as exc:
        duration = time.monotonic() - start
        human_logger.error("Command not found: %s", command_list[0])
        machine_logger.error(
            f"{event}_missing",
            extra=logging_ext.build_event_extra(
                f"{event}_missing",
                command=command_list,
                result=_build_result_payload(return_code=127, duration=duration, stdout="", stderr="", error=str(exc)),
            ),
        )
        return CommandResult(command_list, 127, "", "", duration, error=str(exc))
    except (OSError, subprocess.SubprocessError) as exc:
        duration = time.monotonic() - start
        human_logger.error("Failed to execute %s: %s", command_list[0], exc)
        machine_logger.error(
            f"{event}_error",
            extra=logging_ext.build_event_extra(
                f"{event}_error",
                command=command_list,
                result=_build_result_payload(return_code=1, duration=duration, stdout="", stderr="", error=str(exc)),
            ),
        )
        return CommandResult(command_list, 1, "", "", duration, error=str(exc))

    duration = time.monotonic() - start
    machine_logger.info(
        f"{event}_result",
        extra=logging_ext.build_event_extra(
            f"{event}_result",
            command=command_list,
            result=_build_result_payload(
                return_code=completed.returncode,
                duration=duration,
                stdout=str(completed.stdout or ""),
                stderr=str(completed.stderr or ""),
            ),
        ),
    )

    return CommandResult(
        command=command_list,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        duration=duration,
    )


__all__ = ["CommandResult", "run_command", "sanitize_environment"]
