"""!
@brief Office Desktop Provisioner package root.
@details Modules under this namespace detect the installed Office suite,
remove legacy desktop shortcuts, trigger the legacy suite removal through the
Office Deployment Tool, and provision web shortcuts to the cloud services on
the shared desktop.
"""

__all__ = [
    "main",
    "run_context",
    "constants",
    "detect",
    "fs_tools",
    "registry_tools",
    "exec_utils",
    "odt_uninstall",
    "icons",
    "shortcut_writers",
    "web_shortcuts",
    "safe_ops",
    "logging_ext",
    "version",
]
