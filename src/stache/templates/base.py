"""Partial resolver interface and render errors.

Template content never raises: unresolved names, malformed tags and missing
partials all degrade to literal or empty output. The exceptions below cover
failures of the surrounding effects (file reads, lambda callouts), which are
propagated to the caller of the render entry point.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class PartialResolver(ABC):
    """Maps a partial name ({{> name}}) to template content.

    Implementations return None for unknown names; a missing partial is not
    an error.
    """

    @abstractmethod
    def load(self, name: bytes) -> bytes | None:
        """Load partial content.

        Args:
            name: Partial name as written in the tag, trimmed

        Returns:
            Template bytes, or None if no such partial exists

        Raises:
            TemplateReadError: If the partial exists but cannot be read
        """
        pass


class RenderError(Exception):
    """Base class for errors raised while rendering."""


class TemplateReadError(RenderError):
    """Raised when a template or partial file cannot be read."""

    def __init__(self, path: Path, message: str | None = None) -> None:
        self.path = path
        self.message = message or f"Failed to read template: {path}"
        super().__init__(self.message)


class LambdaError(RenderError):
    """Raised when a section lambda fails."""

    def __init__(self, section: bytes, message: str) -> None:
        self.section = section
        full_message = f"Lambda for section '{section.decode('utf-8', 'replace')}' failed: {message}"
        super().__init__(full_message)
