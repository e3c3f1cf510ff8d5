"""Stache CLI interface.

Commands:
- render: Render a template file with YAML/JSON data
- validate: Lint a template for malformed tags and sections
- init: Initialize stache configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml

from stache import __version__
from stache.config import StacheConfig, create_default_config, load_config
from stache.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="stache",
    help="Render Mustache templates",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: StacheConfig | None = None
_logger = get_logger("stache.cli")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"stache {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with timestamps"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress info messages (warnings and errors only)"),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option("--ci", help="Enable CI mode with JSON log output"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Stache - Mustache template renderer."""
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (ValueError, yaml.YAMLError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


def _load_data(path: Path | None) -> dict[str, Any]:
    """Load render data from a YAML or JSON file."""
    if path is None:
        return {}

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Data file must contain a mapping at the top level: {path}")
    return data


# =============================================================================
# render command
# =============================================================================


@app.command()
def render(
    template: Annotated[
        Path,
        typer.Argument(help="Template file to render", exists=True, dir_okay=False),
    ],
    data: Annotated[
        Path | None,
        typer.Option(
            "--data",
            "-d",
            help="YAML or JSON file with template values",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path (overrides config)"),
    ] = None,
    partials_dir: Annotated[
        Path | None,
        typer.Option("--partials-dir", "-p", help="Directory for {{> name}} partials"),
    ] = None,
    partials_ext: Annotated[
        str | None,
        typer.Option("--partials-ext", "-e", help="Extension appended to partial names"),
    ] = None,
    no_escape: Annotated[
        bool,
        typer.Option("--no-escape", help="Do not HTML-escape {{name}} output"),
    ] = False,
) -> None:
    """Render a template file.

    Exit codes:
        0: Rendered successfully
        1: Data, template, partial or lambda error
    """
    from dataclasses import replace

    from stache.context import mk_generic_context
    from stache.renderers.filters import empty_escape
    from stache.templates import RenderError, TemplateRenderer

    config = _config or StacheConfig()
    render_config = config.to_render_config()
    if partials_dir is not None:
        render_config = replace(render_config, template_dir=partials_dir)
    if partials_ext is not None:
        render_config = replace(render_config, template_ext=partials_ext)
    if no_escape:
        render_config = replace(render_config, escape=empty_escape)

    try:
        values = _load_data(data)
    except (OSError, ValueError, yaml.YAMLError) as e:
        _logger.error(f"Failed to load data: {e}")
        raise typer.Exit(1)

    try:
        renderer = TemplateRenderer(render_config)
        result = renderer.render_file(template, mk_generic_context(values))
    except RenderError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    output_path = output or (Path(config.output.path) if config.output.path else None)
    if output_path is None:
        typer.echo(result, nl=False)
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result)
    _logger.structured(
        logging.INFO,
        f"Wrote {len(result)} bytes to {output_path}",
        template=str(template),
        output=str(output_path),
        size=len(result),
    )


# =============================================================================
# validate command
# =============================================================================


@app.command()
def validate(
    template: Annotated[
        Path,
        typer.Argument(help="Template file to validate", exists=True, dir_okay=False),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output issues as JSON"),
    ] = False,
) -> None:
    """Validate a Mustache template.

    Reports unterminated tags, unclosed or stray sections and malformed
    set-delimiter tags.
    """
    from stache.templates import lint_template

    _logger.info(f"Validating template: {template}")
    issues = lint_template(template.read_bytes())

    if json_output:
        typer.echo(json.dumps([issue.to_dict() for issue in issues], indent=2))
    elif not issues:
        typer.echo(f"✅ Template is valid: {template}")
    else:
        typer.echo(f"❌ {len(issues)} issue(s) in {template}")
        for issue in issues:
            typer.echo(f"   • line {issue.line}: {issue.message} [{issue.kind}]")

    raise typer.Exit(1 if issues else 0)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Initialize stache configuration.

    Creates .stache/config.yaml and a .stache/partials/ directory.
    """
    stache_dir = Path(".stache")
    stache_dir.mkdir(exist_ok=True)

    partials_dir = stache_dir / "partials"
    partials_dir.mkdir(exist_ok=True)

    config_file = stache_dir / "config.yaml"
    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file} (use --force to overwrite)")
        raise typer.Exit(1)

    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")

    typer.echo("\n✅ Stache configuration initialized")
    typer.echo(f"   Config: {config_file}")
    typer.echo(f"   Partials: {partials_dir}/")


if __name__ == "__main__":
    app()
