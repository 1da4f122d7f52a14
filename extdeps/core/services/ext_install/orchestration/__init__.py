"""
L5 Orchestration — ``__init__.py`` re-exports top-level coordinators.

These are the entry points that host installers call.
"""

from extdeps.core.services.ext_install.orchestration.orchestrator import (  # noqa: F401
    SELF_PACKAGE_DIRECTIVE,
    BuildOrchestrator,
    parse_directive,
    select_strategy,
)
