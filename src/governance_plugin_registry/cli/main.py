"""CLI entry point for governance-plugin-registry.

Invoked as::

    plugin-registry [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m governance_plugin_registry.cli.main

Commands
--------
- list      List registered plugins
- show      Show one plugin's metadata and defaults
- resolve   Print the effective configuration for a plugin and scope
- check     Check a plugin's version against a requirement
- validate  Validate a catalog file, listing every violation
- version   Show version information
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from governance_plugin_registry.errors import PluginRegistryError, SchemaError

if TYPE_CHECKING:
    from governance_plugin_registry.config.settings import RegistrySettings
    from governance_plugin_registry.resolution.engine import ResolutionEngine

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _engine(ctx: click.Context) -> tuple[RegistrySettings, ResolutionEngine]:
    """Build the resolution engine from the root command's options."""
    from governance_plugin_registry.config.settings import SettingsLoader, build_engine

    options: dict[str, Any] = ctx.obj or {}
    loader = SettingsLoader()
    try:
        config_path = options.get("config_path")
        settings = loader.load(Path(config_path)) if config_path else loader.defaults()
        if options.get("catalog_path"):
            settings = settings.model_copy(update={"catalog_path": Path(options["catalog_path"])})
        return settings, build_engine(settings)
    except SchemaError as exc:
        _print_schema_error(exc)
        sys.exit(1)
    except (OSError, ValueError) as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)


def _print_schema_error(exc: SchemaError) -> None:
    err_console.print(
        Panel(
            f"[red]INVALID[/red]  {exc.source or 'catalog'}: {len(exc.violations)} violation(s)",
            title="Catalog Validation",
            border_style="red",
        )
    )
    for violation in exc.violations:
        err_console.print(f"  [red]•[/red] {violation}")


def _set_path(target: dict[str, Any], dotted: str, value: object) -> None:
    """Assign ``value`` at ``dotted`` inside ``target``, creating mappings as needed."""
    parts = dotted.split(".")
    node = target
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


def _parse_value(raw_value: str) -> object:
    try:
        return json.loads(raw_value)
    except ValueError:
        return raw_value


def _build_overrides(override_json: str | None, set_pairs: tuple[str, ...]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if override_json:
        parsed = json.loads(override_json)
        if not isinstance(parsed, dict):
            raise click.BadParameter("--override must be a JSON object.")
        overrides = parsed
    for pair in set_pairs:
        if "=" not in pair:
            raise click.BadParameter(f"--set expects path=value, got {pair!r}.")
        path, _, raw_value = pair.partition("=")
        if not path.strip() or any(not part for part in path.strip().split(".")):
            raise click.BadParameter(f"--set path {path!r} is not a dotted key path.")
        _set_path(overrides, path.strip(), _parse_value(raw_value))
    return overrides


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="governance-plugin-registry")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Catalog YAML/JSON file. Defaults to the bundled catalog.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Registry settings YAML file.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
@click.pass_context
def cli(ctx: click.Context, catalog_path: str | None, config_path: str | None, log_level: str) -> None:
    """Governance plugin registry: list, inspect and resolve plugin configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"catalog_path": catalog_path, "config_path": config_path}


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from governance_plugin_registry import __version__

    console.print(
        Panel(
            f"[bold]governance-plugin-registry[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Plugin catalog and configuration resolver for governance spaces.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@cli.command(name="list")
@click.option(
    "--scope",
    type=click.Choice(["space", "proposal"]),
    default=None,
    help="Only list plugins that declare defaults for this scope.",
)
@click.pass_context
def list_command(ctx: click.Context, scope: str | None) -> None:
    """List registered plugins in catalog order."""
    _, engine = _engine(ctx)
    records = engine.store.with_scope(scope) if scope else list(engine.list_plugins())

    table = Table(title="Registered Plugins", box=box.SIMPLE_HEAVY)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Author")
    table.add_column("Version", justify="right", no_wrap=True)
    table.add_column("Scopes")
    for record in records:
        scopes = ", ".join(s for s in ("space", "proposal") if record.supports_scope(s))
        table.add_row(record.key, record.name, record.author or "-", record.version, scopes or "-")
    console.print(table)
    console.print(f"[dim]{len(records)} plugin(s)[/dim]")


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@cli.command(name="show")
@click.argument("key")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print raw JSON.")
@click.pass_context
def show_command(ctx: click.Context, key: str, as_json: bool) -> None:
    """Show one plugin's metadata and default templates."""
    _, engine = _engine(ctx)
    try:
        record = engine.get(key)
    except PluginRegistryError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(record.to_dict(), indent=2))
        return

    lines = [
        f"[bold]{record.name}[/bold]  v[cyan]{record.version}[/cyan]",
        f"  Key:     {record.key}",
        f"  Author:  {record.author or '-'}",
        f"  Website: {record.website or '-'}",
        f"  Icon:    {record.icon or '-'}",
    ]
    console.print(Panel("\n".join(lines), title="Plugin", border_style="blue"))
    for scope in ("space", "proposal"):
        defaults = record.scope_defaults(scope)
        rendered = "(none)" if defaults is None else json.dumps(defaults)
        console.print(f"  [bold]{scope}[/bold] defaults: {rendered}")


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


@cli.command(name="resolve")
@click.argument("key")
@click.option(
    "--scope",
    "-s",
    required=True,
    help="Scope to resolve: space or proposal.",
)
@click.option("--override", "override_json", default=None, help="Overrides as a JSON object.")
@click.option(
    "--set",
    "set_pairs",
    multiple=True,
    help="Override a dotted path, e.g. --set threshold=75. Values parse as JSON, otherwise as plain strings.",
)
@click.option("--strict", is_flag=True, default=False, help="Refuse shape changes at fixed paths.")
@click.pass_context
def resolve_command(
    ctx: click.Context,
    key: str,
    scope: str,
    override_json: str | None,
    set_pairs: tuple[str, ...],
    strict: bool,
) -> None:
    """Print the effective configuration for KEY in a scope."""
    _, engine = _engine(ctx)
    try:
        overrides = _build_overrides(override_json, set_pairs)
    except (json.JSONDecodeError, click.BadParameter) as exc:
        err_console.print(f"[red]Invalid overrides:[/red] {exc}")
        sys.exit(1)

    try:
        effective = engine.resolve(key, scope, overrides, strict=strict or None)
    except PluginRegistryError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    click.echo(json.dumps(effective, indent=2))


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("key")
@click.argument("requirement", required=False)
@click.pass_context
def check_command(ctx: click.Context, key: str, requirement: str | None) -> None:
    """Check KEY's version against REQUIREMENT (or the configured minimum)."""
    settings, engine = _engine(ctx)
    requirement = requirement or settings.required_versions.get(key)
    if requirement is None:
        err_console.print(f"[red]Error:[/red] no requirement given or configured for '{key}'.")
        sys.exit(1)

    try:
        compatible = engine.is_compatible(key, requirement)
    except PluginRegistryError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    version = engine.get(key).version
    if compatible:
        console.print(f"[green]COMPATIBLE[/green]  {key} v{version} satisfies {requirement}")
    else:
        console.print(f"[red]INCOMPATIBLE[/red]  {key} v{version} does not satisfy {requirement}")
    sys.exit(0 if compatible else 1)


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("catalog_file", type=click.Path(exists=True, dir_okay=False))
def validate_command(catalog_file: str) -> None:
    """Validate a catalog file, reporting every violation at once."""
    from governance_plugin_registry.registry.loader import CatalogLoader

    try:
        store = CatalogLoader().load(catalog_file)
    except SchemaError as exc:
        _print_schema_error(exc)
        sys.exit(1)

    console.print(
        Panel(
            f"[green]VALID[/green]  {catalog_file}\n"
            f"  Plugins: {len(store)}  Fingerprint: {store.fingerprint()[:12]}",
            title="Catalog Validation",
            border_style="green",
        )
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
