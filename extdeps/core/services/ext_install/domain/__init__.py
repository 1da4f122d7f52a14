"""
L1 Domain — ``__init__.py`` re-exports all pure domain functions.

No I/O, no subprocess: everything here depends only on its arguments.
"""

from extdeps.core.services.ext_install.domain.dependency_spec import (  # noqa: F401
    WILDCARD,
    DependencySpec,
    DependencySpecError,
    TokenList,
    VersionTable,
    Wildcard,
    dedupe_tokens,
    parse_dependency_spec,
)
from extdeps.core.services.ext_install.domain.templating import (  # noqa: F401
    classify_and_expand,
    expand_locator,
    force_raw_content,
    manifest_base,
)
from extdeps.core.services.ext_install.domain.tokens import (  # noqa: F401
    Token,
    TokenKind,
    classify,
    classify_tokens,
    is_remote,
)
from extdeps.core.services.ext_install.domain.version_requirement import (  # noqa: F401
    InvalidRequirementError,
    Requirement,
    Version,
)
