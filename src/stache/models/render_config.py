"""Render configuration entity.

Holds the settings that stay fixed for one render invocation: the escape
function applied to plain variables and where partial templates live.
"""

from dataclasses import dataclass, field
from pathlib import Path

from stache.renderers.filters import EscapeFunc, empty_escape, html_escape


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for a single render.

    Attributes:
        escape: Escape function for ``{{name}}`` output (html_escape, empty_escape)
        template_dir: Directory searched for partials ({{> name}}), CWD if None
        template_ext: Extension appended verbatim to partial names (e.g. ".mustache")
    """

    escape: EscapeFunc = field(default=html_escape)
    template_dir: Path | None = None
    template_ext: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not callable(self.escape):
            raise ValueError(f"escape must be callable. Got: {self.escape!r}")

        if isinstance(self.template_dir, str):
            object.__setattr__(self, "template_dir", Path(self.template_dir))

    def partial_path(self, name: str) -> Path:
        """Build the file path for a partial template name.

        Args:
            name: Partial name as written in the tag (already trimmed)

        Returns:
            Path with the extension appended and the directory joined
        """
        file_name = name + (self.template_ext or "")
        if self.template_dir is None:
            return Path(file_name)
        return self.template_dir / file_name


def default_config() -> RenderConfig:
    """HTML escaping, partials relative to CWD, no partial extension."""
    return RenderConfig()


def no_escape_config(
    template_dir: Path | None = None,
    template_ext: str | None = None,
) -> RenderConfig:
    """Configuration that leaves variable output unescaped."""
    return RenderConfig(
        escape=empty_escape,
        template_dir=template_dir,
        template_ext=template_ext,
    )
