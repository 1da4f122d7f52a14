"""
Extension install service — layered like the rest of core/services:

    domain/         pure rules: versions, specs, tokens, templating
    resolver/       manifest entry → ordered tokens → dependency plan
    execution/      side effects: fetch, archives, OS packages, cache
    orchestration/  the build-mode state machine the host invokes

Import from the layer packages directly::

    from extdeps.core.services.ext_install.orchestration import BuildOrchestrator
"""
