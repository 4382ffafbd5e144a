"""
devcert — CLI entrypoint.

Usage:
    devcert --help
    devcert ensure
    devcert status --json
    python -m devcert.main ensure --mock
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devcert import __version__
from devcert.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="devcert")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to devcert.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """devcert — local development TLS certificates for localhost."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=os.environ.get("DEVCERT_LOG_LEVEL"),
        ),
        log_file=os.environ.get("DEVCERT_LOG_FILE"),
        log_file_level=os.environ.get("DEVCERT_LOG_FILE_LEVEL"),
    )


def _load_context(ctx: click.Context):
    """Build the EnvironmentContext, or exit 1 on bad configuration."""
    from devcert.core.config.loader import ConfigError, load_config
    from devcert.core.context import build_context

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    return build_context(config)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--mock", is_flag=True, help="Use the mock certificate tool (no real execution).")
@click.pass_context
def ensure(ctx: click.Context, as_json: bool, mock: bool) -> None:
    """Create the local CA and localhost certificate if they are missing."""
    from devcert.core.use_cases.bootstrap import run_bootstrap

    env_ctx = _load_context(ctx)

    if mock:
        from devcert.adapters.mock import MockCertificateTool
        from devcert.core.models.result import StepResult

        result = run_bootstrap(
            env_ctx,
            tool_factory=lambda _profile: MockCertificateTool(),
            dependency_step=lambda _ctx: StepResult.skip(
                "install_dependency", "[mock] dependency check skipped"
            ),
            require_binary=False,
        )
    else:
        result = run_bootstrap(env_ctx)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    quiet = ctx.obj.get("quiet", False)
    mode_label = "[mock] " if mock else ""

    if result.already_complete:
        if not quiet:
            click.echo(f" 📜 {mode_label}Local development TLS certificate exists.")
        return

    if not result.ok:
        click.secho(f"❌ {mode_label}{result.error_kind.value}: {result.error}", fg="red", err=True)
        sys.exit(result.exit_code)

    if not quiet:
        click.secho(f" 📜 {mode_label}Local development TLS certificate created.", fg="green")
        click.echo(f"    Store: {result.store_dir}")
        if ctx.obj.get("verbose"):
            for step in result.steps:
                click.echo(f"    • {step.step}: {step.status}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show whether the certificate set is complete."""
    from devcert.core.use_cases.status import get_status

    result = get_status(_load_context(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho(f"\n📜 Certificate store: {result.store_dir}", fg="cyan", bold=True)
    click.echo(f"   Platform: {result.platform}")
    for name, path in result.artifacts.items():
        if name in result.missing:
            click.secho(f"   ✗ {name}", fg="red", nl=False)
            click.echo("  (missing)")
        else:
            click.secho(f"   ✓ {name}", fg="green", nl=False)
            click.echo(f"  → {path}")

    click.echo()
    if result.complete:
        click.secho("   Complete", fg="green", bold=True)
    else:
        click.secho("   Incomplete — run 'devcert ensure'", fg="yellow", bold=True)
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Describe the root CA and localhost certificates."""
    from devcert.core.use_cases.status import get_certificate_info

    certs = get_certificate_info(_load_context(ctx))

    if as_json:
        click.echo(json.dumps(certs, indent=2))
        return

    if not certs:
        click.secho("No certificates found — run 'devcert ensure'.", fg="yellow")
        sys.exit(1)

    for label, cert in certs.items():
        click.secho(f"\n🔐 {label}: {cert['path']}", fg="cyan", bold=True)
        if "error" in cert:
            click.secho(f"   {cert['error']}", fg="red")
            continue
        click.echo(f"   Subject:  {cert['subject']}")
        click.echo(f"   Issuer:   {cert['issuer']}")
        click.echo(f"   Valid:    {cert['not_before']} → {cert['not_after']}")
        if cert["names"]:
            click.echo(f"   Names:    {', '.join(cert['names'])}")
    click.echo()


@cli.command()
@click.pass_context
def paths(ctx: click.Context) -> None:
    """Print the localhost certificate and key paths (cert first)."""
    store = _load_context(ctx).store
    click.echo(str(store.leaf_cert))
    click.echo(str(store.leaf_key))


if __name__ == "__main__":
    cli()
