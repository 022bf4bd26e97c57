"""!
@brief Shim entry point for the Office Desktop Provisioner.
@details Ensures the package in ``src/`` is importable before transferring
control to :func:`office_desktop_provisioner.main.main`. This is the script
handed to PyInstaller and to deployment tooling that runs the provisioner from
a source checkout.
"""
from __future__ import annotations

import os
import sys

__all__ = ["main"]

_REPO_ROOT = os.path.dirname(os.path.abspath(__file__))
_SRC_PATH = os.path.join(_REPO_ROOT, "src")


def _prepend_src_to_sys_path() -> None:
    """!
    @brief Prepend the repository ``src`` directory to ``sys.path``.
    """

    if os.path.isdir(_SRC_PATH) and _SRC_PATH not in sys.path:
        sys.path.insert(0, _SRC_PATH)


def main() -> int:
    """!
    @brief Invoke the package entry point after preparing ``sys.path``.
    @returns Exit status propagated from :func:`office_desktop_provisioner.main.main`.
    """

    _prepend_src_to_sys_path()
    from office_desktop_provisioner.main import main as package_main

    return package_main()


if __name__ == "__main__":  # pragma: no cover - manual invocation
    sys.exit(main())
