"""
L2 Resolver — ``__init__.py`` re-exports resolution entry points.
"""

from extdeps.core.services.ext_install.resolver.dependency_resolver import (  # noqa: F401
    build_plan,
    plan_dependencies,
    resolve_spec,
    resolve_tokens,
)
