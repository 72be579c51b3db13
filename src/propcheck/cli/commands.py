"""CLI commands for propcheck."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

import click
from rich.console import Console
from rich.table import Table

from propcheck import __version__
from propcheck.config import CheckConfig, load_config
from propcheck.core.property import Property
from propcheck.decorators import PropertySuite
from propcheck.errors import PropCheckError, PropertyNotFound
from propcheck.observability.logging import configure_logging
from propcheck.reporters import ConsoleReporter, JSONReporter, JUnitReporter
from propcheck.reporters.base import BaseReporter
from propcheck.runner.suite import run_suite

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool, config: CheckConfig) -> None:
    """Configure logging from the verbosity flag and the loaded config."""
    level = logging.DEBUG if verbose else config.log_level
    configure_logging(level=level, json_format=config.json_logs)


def load_module(target: str) -> ModuleType:
    """Import ``target`` as a dotted module name or a path to a ``.py`` file."""
    if target.endswith(".py") or "/" in target:
        path = Path(target)
        if not path.is_file():
            raise PropertyNotFound(f"No such file: {target}")
        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise PropertyNotFound(f"Cannot import {target}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = module
        spec.loader.exec_module(module)
        return module
    try:
        return importlib.import_module(target)
    except ModuleNotFoundError as e:
        raise PropertyNotFound(f"Cannot import module {target!r}: {e}", cause=e) from e


def discover_properties(target: str) -> dict[str, Property]:
    """Find the properties named by ``MODULE[:NAME]``.

    Collects every PropertySuite, module-level Property and
    ``@property_test`` function in the module.

    Raises:
        PropertyNotFound: If the module has no properties or NAME is unknown.
    """
    module_name, _, name = target.partition(":")
    module = load_module(module_name)

    found: dict[str, Property] = {}
    for attr, value in vars(module).items():
        if attr.startswith("_"):
            continue
        if isinstance(value, PropertySuite):
            found.update(value)
        elif isinstance(value, Property):
            found[attr] = value
        elif callable(value) and isinstance(getattr(value, "property", None), Property):
            found[attr] = value.property

    if not found:
        raise PropertyNotFound(f"No properties found in {module_name}")
    if name:
        if name not in found:
            raise PropertyNotFound(
                f"No property named {name!r} in {module_name}",
                suggestions=[f"Available: {', '.join(sorted(found))}"],
            )
        return {name: found[name]}
    return found


def _usage_error(error: PropCheckError, verbose: bool) -> click.ClickException:
    return click.ClickException(error.format_verbose() if verbose else str(error))


def _reporter(output_format: str, color: bool) -> BaseReporter:
    if output_format == "json":
        return JSONReporter()
    if output_format == "junit":
        return JUnitReporter()
    return ConsoleReporter(color=color)


@click.group()
@click.version_option(__version__, prog_name="propcheck")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging and detailed errors")
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Path to a YAML config file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """propcheck - property-based testing."""
    ctx.ensure_object(dict)
    try:
        config_obj = load_config(config)
    except PropCheckError as e:
        raise _usage_error(e, verbose) from e

    ctx.obj["config"] = config_obj
    ctx.obj["verbose"] = verbose
    setup_logging(verbose, config_obj)


@cli.command()
@click.argument("target")
@click.option("--seed", type=int, help="Seed to reproduce a previous run")
@click.option("--max-tests", type=int, help="Successful tests required to pass")
@click.option("--max-size", type=int, help="Largest size passed to generators")
@click.option("--max-discard-ratio", type=int, help="Discards allowed per required test")
@click.option("--workers", "-w", type=int, help="Properties to run in parallel")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["console", "json", "junit"]),
    default="console",
    help="Output format",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the report to a file")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors")
@click.pass_context
def run(
    ctx: click.Context,
    target: str,
    seed: int | None,
    max_tests: int | None,
    max_size: int | None,
    max_discard_ratio: int | None,
    workers: int | None,
    output_format: str,
    output: str | None,
    no_color: bool,
) -> None:
    """Run the properties in TARGET (MODULE or MODULE:NAME)."""
    try:
        options = {
            "seed": seed,
            "max_tests": max_tests,
            "max_size": max_size,
            "max_discard_ratio": max_discard_ratio,
            "workers": workers,
        }
        config: CheckConfig = ctx.obj["config"].with_overrides(**{k: v for k, v in options.items() if v is not None})
        properties = discover_properties(target)
    except PropCheckError as e:
        raise _usage_error(e, ctx.obj["verbose"]) from e

    logger.info(f"Discovered {len(properties)} properties in {target}")
    result = run_suite(properties, config)

    color = not no_color and output is None and click.get_text_stream("stdout").isatty()
    reporter = _reporter(output_format, color)
    if output:
        path = reporter.save(result.reports, output)
        click.echo(f"Report written to {path}", err=True)
    else:
        click.echo(reporter.generate(result.reports))

    ctx.exit(0 if result.passed else 1)


@cli.command(name="list")
@click.argument("target")
@click.pass_context
def list_properties(ctx: click.Context, target: str) -> None:
    """List the properties found in TARGET."""
    try:
        properties = discover_properties(target)
    except PropCheckError as e:
        raise _usage_error(e, ctx.obj["verbose"]) from e

    table = Table(title=f"Properties in {target}")
    table.add_column("Name", style="cyan")
    table.add_column("Property")
    for name, prop in properties.items():
        table.add_row(name, prop.description)
    Console().print(table)
