# typesynth/cli.py
"""
typesynth CLI -- Click commands with a rich-styled terminal UI.

Provides the ``typesynth`` console entry-point declared in pyproject.toml as
``typesynth.cli:cli``.  Commands:

- generate:  build an OpenAPI document from a catalog file or a Python module
- inspect:   list the types a catalog describes
- config:    show the effective SynthConfig

Rendered documents go to stdout (or ``--output``); status lines, warnings and
the banner go to stderr.
"""

from __future__ import annotations

import importlib
import io
import logging
import re
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape as _esc

from . import __version__
from . import cli_theme as theme
from .config import get_config
from .descriptors import CatalogError, TypeCatalog, TypeKind, load_catalog
from .document import build_document, to_json, to_yaml
from .utils.logging import log_build_complete, log_build_start, setup_logging

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _print_version(
    ctx: click.Context,
    _param: click.Parameter,
    value: bool,
) -> None:
    if not value or ctx.resilient_parsing:
        return
    theme.print_version(__version__, console)
    ctx.exit()


# ---------------------------------------------------------------------------
# Styled Click help
# ---------------------------------------------------------------------------


def _render_styled_help(plain: str, width: int = 80) -> str:
    """Re-render Click help with the theme colors + 2-space indent."""
    buf = io.StringIO()
    # Extra width avoids Rich re-wrapping lines after we add 2-space indent
    rc = Console(file=buf, force_terminal=True, width=width + 4, highlight=False)
    section: str | None = None

    for line in plain.splitlines():
        stripped = line.strip()
        if not stripped:
            rc.print()
            continue

        # Section headers (no leading whitespace in Click output)
        if line == stripped:
            if stripped.startswith("Usage:"):
                rest = stripped[6:].strip()
                rc.print(
                    f"  [bold {theme.TEAL}]Usage:[/bold {theme.TEAL}]"
                    f" [{theme.SAND}]{_esc(rest)}[/{theme.SAND}]"
                )
                section = None
                continue

            bare = stripped.rstrip(":")
            if bare in ("Options", "Commands", "Arguments"):
                rc.print(f"  [bold {theme.TEAL}]{stripped}[/bold {theme.TEAL}]")
                section = bare.lower()
                continue

        if section == "commands":
            m = re.match(r"^(\s+)(\S+)(\s{2,})(.+)$", line)
            if m:
                ind, name, gap, desc = m.groups()
                rc.print(
                    f"  {ind}[bold {theme.TEAL}]{_esc(name)}[/bold {theme.TEAL}]"
                    f"{gap}[{theme.MUTED}]{_esc(desc)}[/{theme.MUTED}]"
                )
                continue

        if section == "options":
            m = re.match(r"^(\s+)(-.+?)(\s{2,})(.+)$", line)
            if m:
                ind, flags, gap, desc = m.groups()
                rc.print(
                    f"  {ind}[{theme.SAND}]{_esc(flags)}[/{theme.SAND}]"
                    f"{gap}[{theme.MUTED}]{_esc(desc)}[/{theme.MUTED}]"
                )
                continue

        if section:
            rc.print(f"  [{theme.MUTED}]{_esc(line)}[/{theme.MUTED}]")
        else:
            rc.print(f"  [{theme.MUTED}]{_esc(stripped)}[/{theme.MUTED}]")

    return buf.getvalue()


class TypesynthGroup(click.Group):
    """Click group with styled help output."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        tmp = click.HelpFormatter(width=formatter.width)
        super().format_help(ctx, tmp)
        formatter.write(_render_styled_help(tmp.getvalue(), formatter.width or 80))

    def group(self, *args, **kwargs):
        kwargs.setdefault("cls", TypesynthGroup)
        return super().group(*args, **kwargs)

    def command(self, *args, **kwargs):
        kwargs.setdefault("cls", TypesynthCommand)
        return super().command(*args, **kwargs)


class TypesynthCommand(click.Command):
    """Click command with styled help output."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        tmp = click.HelpFormatter(width=formatter.width)
        super().format_help(ctx, tmp)
        formatter.write(_render_styled_help(tmp.getvalue(), formatter.width or 80))


# ---------------------------------------------------------------------------
# Main CLI group
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True, cls=TypesynthGroup)
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Session log level (default: TYPESYNTH_LOG_LEVEL or INFO).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Also print log records to stderr.")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], verbose: bool) -> None:
    """typesynth -- OpenAPI component schemas from type descriptors."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return
    cfg = get_config()
    setup_logging(level=log_level or cfg.log_level, log_dir=cfg.log_dir, console_output=verbose)
    theme.print_banner(__version__, console)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_source(catalog_path: Optional[Path], module_name: Optional[str]) -> tuple[TypeCatalog, str]:
    """Return the catalog and a label describing where it came from."""
    if module_name:
        from .reflect import catalog_from_module

        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise click.ClickException(f"Cannot import module {module_name!r}: {exc}")
        return catalog_from_module(module), f"module {module_name}"

    if catalog_path is None:
        raise click.UsageError("Provide either CATALOG_PATH or --module (not both).")
    try:
        return load_catalog(catalog_path), str(catalog_path)
    except CatalogError as exc:
        logger.error("Catalog loading failed: %s", exc)
        raise click.ClickException(str(exc))


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("catalog_path", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--module", "module_name", type=str, default=None, help="Describe the classes of an importable Python module instead of reading a catalog file.")
@click.option("--type", "type_names", multiple=True, help="Type to register (repeatable; default: every top-level type).")
@click.option("--format", "fmt", type=click.Choice(["yaml", "json"], case_sensitive=False), default=None, help="Output format (default: from --output suffix, else config).")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write the document to this file instead of stdout.")
@click.option("--discriminator", type=str, default=None, help="Discriminator property name for the requested variant sets.")
@click.option("--no-array-items", is_flag=True, default=False, help="Do not infer 'items' for list and set fields.")
@click.option("--no-enum-values", is_flag=True, default=False, help="Do not emit enumeration constants.")
@click.option("--title", type=str, default="API", show_default=True, help="Document info.title.")
@click.option("--api-version", type=str, default="1.0.0", show_default=True, help="Document info.version.")
def generate(
    catalog_path: Optional[Path],
    module_name: Optional[str],
    type_names: tuple[str, ...],
    fmt: Optional[str],
    output: Optional[Path],
    discriminator: Optional[str],
    no_array_items: bool,
    no_enum_values: bool,
    title: str,
    api_version: str,
) -> None:
    """Generate component schemas for the types in a catalog.

    \b
    Examples:
      typesynth generate types.yaml
      typesynth generate types.yaml --type Shape --discriminator kind -o api.json
      typesynth generate --module myapp.models --format json
    """
    if (catalog_path is None) == (module_name is None):
        raise click.UsageError("Provide either CATALOG_PATH or --module (not both).")

    catalog, source = _load_source(catalog_path, module_name)

    cfg = get_config()
    overrides: dict[str, bool] = {}
    if no_array_items:
        overrides["auto_generate_array_items"] = False
    if no_enum_values:
        overrides["auto_generate_enum_values"] = False
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    log_build_start(logger, source, list(type_names))
    result = build_document(
        catalog,
        type_names or None,
        title=title,
        version=api_version,
        config=cfg,
        discriminator=discriminator,
    )
    components = result.document.components
    schema_count = len(components.schemas or {}) if components else 0
    log_build_complete(logger, schema_count, [str(d) for d in result.diagnostics])

    if fmt is None:
        fmt = "json" if output is not None and output.suffix.lower() == ".json" else cfg.output_format
    text = to_json(result.document) if fmt.lower() == "json" else to_yaml(result.document)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        console.print(theme.ok(f"Wrote {schema_count} schemas to {output}"))
    else:
        click.echo(text)

    for diagnostic in result.diagnostics:
        console.print(theme.warn(_esc(str(diagnostic))))


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


@cli.command("inspect")
@click.argument("catalog_path", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--module", "module_name", type=str, default=None, help="Describe the classes of an importable Python module.")
def inspect_catalog(catalog_path: Optional[Path], module_name: Optional[str]) -> None:
    """List the types described by a catalog.

    \b
    Examples:
      typesynth inspect types.yaml
    """
    if (catalog_path is None) == (module_name is None):
        raise click.UsageError("Provide either CATALOG_PATH or --module (not both).")

    catalog, source = _load_source(catalog_path, module_name)

    theme.section(f"Types in {source}", console, uppercase=False)
    t = theme.make_table()
    t.add_column("Name", style=f"bold {theme.TEAL}", no_wrap=True)
    t.add_column("Kind", style=theme.SAND)
    t.add_column("Members")
    t.add_column("Description", style=theme.MUTED, ratio=1)

    for name in catalog.all_names():
        descriptor = catalog.get(name)
        if descriptor is None:
            continue
        if descriptor.kind is TypeKind.ENUMERATION:
            members = ", ".join(descriptor.constants)
        elif descriptor.kind is TypeKind.VARIANT_SET:
            members = ", ".join(v if isinstance(v, str) else v.name for v in descriptor.variants)
        else:
            members = ", ".join(f.name for f in descriptor.fields)
        t.add_row(name, descriptor.kind.value, _esc(members) or "-", _esc(descriptor.description or ""))

    console.print(t)
    console.print(theme.info(f"{len(catalog)} types"))


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@cli.group()
def config() -> None:
    """View typesynth configuration."""


@config.command("show")
def config_show() -> None:
    """Show current configuration.

    \b
    Examples:
      typesynth config show
    """
    cfg = get_config()
    dump = cfg.model_dump()

    theme.section("Synthesis", console, "01")
    t = theme.make_kv_table()
    t.add_row("auto_generate_array_items", str(dump["auto_generate_array_items"]))
    t.add_row("auto_generate_enum_values", str(dump["auto_generate_enum_values"]))
    t.add_row("discriminator_property_name", dump["discriminator_property_name"])
    t.add_row("infer_variants_from_nested", str(dump["infer_variants_from_nested"]))
    console.print(t)

    theme.section("Document", console, "02")
    t = theme.make_kv_table()
    t.add_row("openapi_version", dump["openapi_version"])
    t.add_row("output_format", theme.badge(dump["output_format"].upper()))
    console.print(t)

    theme.section("Paths & Logging", console, "03")
    t = theme.make_kv_table()
    t.add_row("home_dir", str(dump["home_dir"]))
    t.add_row("log_dir", str(cfg.log_dir))
    t.add_row("log_level", dump["log_level"])
    console.print(t)
    console.print()


if __name__ == "__main__":
    cli()
