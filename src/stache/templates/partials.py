"""Partial template resolvers.

FilePartialResolver reads partials from disk using the configured
directory and extension. MappingPartialResolver serves them from memory.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from stache.models.render_config import RenderConfig
from stache.templates.base import PartialResolver, TemplateReadError
from stache.utils.encoding import decode_str, encode_str

logger = logging.getLogger(__name__)


class FilePartialResolver(PartialResolver):
    """Loads partials from files.

    The file name is the partial name with the extension appended verbatim,
    joined onto the template directory when one is configured.
    """

    def __init__(
        self,
        template_dir: Path | None = None,
        template_ext: str | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            template_dir: Directory holding partials (relative to CWD if None)
            template_ext: Extension appended to partial names, e.g. ".mustache"
        """
        self._config = RenderConfig(template_dir=template_dir, template_ext=template_ext)

    @classmethod
    def from_config(cls, config: RenderConfig) -> "FilePartialResolver":
        """Create a resolver from a render configuration."""
        return cls(template_dir=config.template_dir, template_ext=config.template_ext)

    def path_for(self, name: bytes) -> Path:
        """Return the file path a partial name maps to."""
        return self._config.partial_path(decode_str(name))

    def load(self, name: bytes) -> bytes | None:
        """Read the partial file, or return None if it does not exist."""
        path = self.path_for(name)

        if not path.is_file():
            logger.debug("Partial not found: %s", path)
            return None

        try:
            content = path.read_bytes()
        except OSError as e:
            raise TemplateReadError(path, f"Failed to read partial {path}: {e}") from e

        logger.debug("Loaded partial %s (%d bytes)", path, len(content))
        return content


class MappingPartialResolver(PartialResolver):
    """Serves partials from an in-memory mapping of name to template."""

    def __init__(self, partials: Mapping[str, str | bytes]) -> None:
        self._partials: dict[bytes, bytes] = {
            encode_str(name): content if isinstance(content, bytes) else encode_str(content)
            for name, content in partials.items()
        }

    def load(self, name: bytes) -> bytes | None:
        content = self._partials.get(name)
        if content is None:
            logger.debug("Partial not registered: %s", decode_str(name))
        return content
