"""Stache configuration system.

Configuration is YAML-based with CLI overrides (--partials-dir,
--partials-ext, --no-escape, --output).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.stache/config.yaml
3. ./stache.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from stache.models.render_config import RenderConfig
from stache.renderers.filters import ESCAPE_FUNCTIONS, get_escape_function


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class RenderSettings:
    """Render configuration as written in the config file.

    Attributes:
        escape: Escape function name ("html" or "none")
        partials_dir: Directory searched for partial templates
        partials_ext: Extension appended to partial names (e.g. ".mustache")
    """

    escape: str = "html"
    partials_dir: str | None = None
    partials_ext: str | None = None

    def __post_init__(self) -> None:
        """Validate render settings."""
        if self.escape not in ESCAPE_FUNCTIONS:
            raise ConfigError(
                f"Invalid escape function: {self.escape}. Valid: {sorted(ESCAPE_FUNCTIONS)}"
            )


@dataclass
class OutputSettings:
    """Output configuration.

    Attributes:
        path: Output file path (stdout if None)
    """

    path: str | None = None


@dataclass
class StacheConfig:
    """Top-level stache configuration.

    Attributes:
        render: Escaping and partial lookup
        output: Output destination
    """

    render: RenderSettings = field(default_factory=RenderSettings)
    output: OutputSettings = field(default_factory=OutputSettings)

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path

    def to_render_config(self) -> RenderConfig:
        """Build the immutable configuration used by the renderer.

        Relative partial directories are resolved against the config file's
        directory when a config file was loaded.
        """
        template_dir: Path | None = None
        if self.render.partials_dir:
            template_dir = Path(self.render.partials_dir)
            if not template_dir.is_absolute() and self._config_path is not None:
                base = self._config_path.parent
                if base.name == ".stache":
                    base = base.parent
                template_dir = base / template_dir

        return RenderConfig(
            escape=get_escape_function(self.render.escape),
            template_dir=template_dir,
            template_ext=self.render.partials_ext,
        )


# =============================================================================
# Environment Variable Substitution
# =============================================================================

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax, e.g. ${TEMPLATES_DIR}.

    Raises:
        ConfigError: If a referenced variable is not set
    """
    if isinstance(value, str):

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ConfigError(f"Environment variable not set: {var_name}")
            return env_value

        return _ENV_VAR_PATTERN.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.stache/config.yaml
    2. ./stache.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    start_path = (start_path or Path.cwd()).resolve()

    candidates = [
        start_path / ".stache" / "config.yaml",
        start_path / "stache.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> StacheConfig:
    """Load configuration from a dictionary.

    Raises:
        ConfigError: If a section is not a mapping or a value is invalid
    """
    data = substitute_env_vars(data)
    config = StacheConfig()

    if "render" in data:
        render_data = _section(data, "render")
        config.render = RenderSettings(
            escape=render_data.get("escape", config.render.escape),
            partials_dir=render_data.get("partials_dir"),
            partials_ext=render_data.get("partials_ext"),
        )

    if "output" in data:
        output_data = _section(data, "output")
        config.output = OutputSettings(path=output_data.get("path"))

    return config


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data[name] or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    return section


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> StacheConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        StacheConfig instance (defaults when no file is found)

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
        ConfigError: If the file contains invalid values
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path: Path | None = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is None:
        return StacheConfig()

    with open(found_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {found_path}")

    config = load_config_from_dict(data)
    config._config_path = found_path
    return config


def create_default_config() -> str:
    """Create default configuration YAML content."""
    return """# Stache Configuration

# Rendering
render:
  escape: "html"          # html (escape & \\ " ' < >) or none
  partials_dir: ".stache/partials"  # Directory for {{> name}} partials
  partials_ext: ".mustache" # Appended to partial names

# Output
output:
  # path: "out/index.html"  # Default: stdout
  path: null
"""
