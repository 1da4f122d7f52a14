"""
Host adapters — how the engine reaches the installer that embeds it.

    from extdeps.adapters import ExtensionHost, ShellBuildHost
"""

from extdeps.adapters.base import ExtensionHost
from extdeps.adapters.shell.build import ShellBuildHost

__all__ = ["ExtensionHost", "ShellBuildHost"]
