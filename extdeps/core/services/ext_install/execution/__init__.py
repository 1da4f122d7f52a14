"""
L4 Execution — ``__init__.py`` re-exports all execution functions.

These WRITE to the system or the network: fetches, archive
extraction, child processes.
"""

from extdeps.core.services.ext_install.execution.archive import (  # noqa: F401
    GZIP_MAGIC,
    compress,
    decompress,
    extract_archive,
    pack,
    package_directory,
    unpack,
)
from extdeps.core.services.ext_install.execution.fetcher import Fetcher  # noqa: F401
from extdeps.core.services.ext_install.execution.manifest_cache import (  # noqa: F401
    ManifestCache,
)
from extdeps.core.services.ext_install.execution.package_installer import (  # noqa: F401
    PackageInstaller,
    render_install_command,
)
from extdeps.core.services.ext_install.execution.subprocess_runner import (  # noqa: F401
    run_command,
)
