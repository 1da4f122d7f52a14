"""
extdeps — CLI entrypoint.

Usage:
    python -m extdeps.main --help
    extdeps resolve nokogiri 1.16.2 --manifest https://host/deps/gems.yml
    extdeps build pg 1.5.4 --ext-dir ext/pg --directive +
    extdeps pack ext/pg --output pg-1.5.4.tar.gz
    extdeps unpack https://host/deps/pg-1.5.4.tar.gz ext/pg
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from extdeps import __version__
from extdeps.core.config.settings import Settings
from extdeps.core.errors import ExtdepsError
from extdeps.core.observability.logging_config import setup_logging_from_settings


def _fail(message: str) -> None:
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="extdeps")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress progress notices.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """extdeps — install prebuilt native extensions and their OS dependencies."""
    ctx.ensure_object(dict)
    try:
        settings = Settings.from_env()
    except ExtdepsError as e:
        _fail(str(e))
        return

    ctx.obj["settings"] = settings
    ctx.obj["quiet"] = quiet

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = None

    setup_logging_from_settings(settings, level=level)


# ── Resolve ─────────────────────────────────────────────────────


@cli.command()
@click.argument("name")
@click.argument("version")
@click.option("--manifest", "-m", "location", required=True, help="Manifest path or URL.")
@click.option("--compile", "compile_mode", is_flag=True, help="Plan as a compile (+) run.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve(
    ctx: click.Context,
    name: str,
    version: str,
    location: str,
    compile_mode: bool,
    as_json: bool,
) -> None:
    """Show what the manifest says about a package version."""
    from extdeps.core.models.package import PackageDescriptor
    from extdeps.core.services.ext_install.execution import Fetcher, ManifestCache
    from extdeps.core.services.ext_install.resolver import plan_dependencies

    settings: Settings = ctx.obj["settings"]
    package = PackageDescriptor(name=name, version=version)
    cache = ManifestCache(Fetcher(timeout=settings.fetch_timeout))

    try:
        manifest = cache.load(location)
        plan = plan_dependencies(manifest, package, cwd=os.getcwd(), compile_mode=compile_mode)
    except ExtdepsError as e:
        _fail(str(e))
        return

    if as_json:
        click.echo(json.dumps({
            "package": package.full_name,
            "resolved": plan is not None,
            "plan": plan.model_dump(mode="json") if plan else None,
        }, indent=2))
        return

    if plan is None:
        click.secho(f"⊘ No dependencies for {package.full_name}", fg="yellow")
        return

    click.secho(f"\n📦 {package.full_name}", fg="cyan", bold=True)
    click.echo(f"   OS packages: {' '.join(plan.packages) or '(none)'}")
    if plan.compile_mode:
        click.echo(f"   Build args:  {' '.join(plan.build_args or []) or '(none)'}")
    else:
        click.echo(f"   Extensions:  {len(plan.extensions)}")
        for locator in plan.extensions:
            click.echo(f"     • {locator}")
    click.echo()


# ── Build ───────────────────────────────────────────────────────


@cli.command()
@click.argument("name")
@click.argument("version")
@click.option(
    "--ext-dir", "-e", "ext_dir", required=True,
    type=click.Path(file_okay=False), help="Extension directory.",
)
@click.option("--directive", "-d", default=None, help="Mode directive (default: $EXT_DEPENDENCIES).")
@click.option("--build-cmd", default=None, help="Command that compiles the extension.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def build(
    ctx: click.Context,
    name: str,
    version: str,
    ext_dir: str,
    directive: str | None,
    build_cmd: str | None,
    as_json: bool,
) -> None:
    """Run the extension build for a package in the directive's mode."""
    from extdeps.adapters.shell.build import ShellBuildHost
    from extdeps.core.models.package import PackageDescriptor
    from extdeps.core.models.plan import BuildMode
    from extdeps.core.services.ext_install.execution import (
        Fetcher,
        ManifestCache,
        PackageInstaller,
    )
    from extdeps.core.services.ext_install.orchestration import select_strategy

    settings: Settings = ctx.obj["settings"]
    directive = directive if directive is not None else settings.directive
    host = ShellBuildHost(
        PackageDescriptor(name=name, version=version),
        ext_dir,
        build_command=build_cmd,
        quiet=ctx.obj.get("quiet", False) or as_json,
    )
    fetcher = Fetcher(timeout=settings.fetch_timeout)

    orchestrator = select_strategy(
        host,
        directive,
        ManifestCache(fetcher),
        fetcher=fetcher,
        installer_factory=lambda cmd: PackageInstaller(cmd, timeout=settings.install_timeout),
    )
    if orchestrator is None:
        if as_json:
            click.echo(json.dumps({"package": host.package.full_name, "mode": BuildMode.NOOP.value}))
        else:
            click.secho("⊘ No directive set; nothing to do", fg="yellow")
        return

    try:
        report = orchestrator.run(directive)
    except ExtdepsError as e:
        _fail(str(e))
        return

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    if report.packages_installed is False:
        click.secho("⚠️  OS package install failed; continuing", fg="yellow")
    click.secho(f"✅ {report.package} ({report.mode.value})", fg="green", bold=True)


# ── Archives ────────────────────────────────────────────────────


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--output", "-o", default=None, help="Tarball path (default: <dir>.tar.gz).")
def pack(directory: str, output: str | None) -> None:
    """Write DIRECTORY as a gzip-compressed tarball."""
    from extdeps.core.services.ext_install.execution import package_directory

    target = Path(output) if output else Path(f"{Path(directory).resolve().name}.tar.gz")
    try:
        path = package_directory(directory, target)
    except ExtdepsError as e:
        _fail(str(e))
        return
    click.secho(f"📦 Packaged {directory} as {path}", fg="green")


@cli.command()
@click.argument("location")
@click.argument("destination", type=click.Path(file_okay=False))
@click.pass_context
def unpack(ctx: click.Context, location: str, destination: str) -> None:
    """Fetch an archive (path or URL) and unpack it into DESTINATION."""
    from extdeps.core.services.ext_install.execution import Fetcher, extract_archive

    settings: Settings = ctx.obj["settings"]
    try:
        names = extract_archive(Fetcher(timeout=settings.fetch_timeout).fetch(location), destination)
    except ExtdepsError as e:
        _fail(str(e))
        return
    click.secho(f"📂 Extracted {len(names)} entries to {destination}", fg="green")


if __name__ == "__main__":
    cli()
