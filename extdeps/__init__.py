"""
extdeps — prebuilt native-extension dependency engine.

Decides, per package name and version, which OS packages to install,
which prebuilt extension archives to unpack, or whether a freshly
built extension should itself be archived for reuse.
"""

__version__ = "0.1.0"
