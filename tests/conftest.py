"""Shared pytest fixtures for stache tests.

Fixtures are organized by category:
- Path fixtures: template and data fixture directories
- Context fixtures: ready-made contexts for renderer tests
- Render fixtures: helpers rendering text templates
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from stache.context import mk_generic_context
from stache.models import ABSENT, Context, ContextValue, RenderConfig, Variable
from stache.renderers.filters import empty_escape
from stache.templates import MappingPartialResolver, TemplateRenderer

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def templates_dir(fixtures_dir: Path) -> Path:
    """Return the path to template fixtures."""
    return fixtures_dir / "templates"


@pytest.fixture
def partials_dir(templates_dir: Path) -> Path:
    """Return the path to partial template fixtures."""
    return templates_dir / "partials"


@pytest.fixture
def data_dir(fixtures_dir: Path) -> Path:
    """Return the path to render data fixtures."""
    return fixtures_dir / "data"


# =============================================================================
# Context Fixtures
# =============================================================================


@pytest.fixture
def simple_context() -> Context:
    """Return a hand-written context binding name and unread."""

    def context(name: bytes) -> ContextValue:
        if name == b"name":
            return Variable("Haskell")
        if name == b"unread":
            return Variable(100)
        return ABSENT

    return context


# =============================================================================
# Render Fixtures
# =============================================================================


@pytest.fixture
def render() -> Callable[..., str]:
    """Return a helper rendering a text template against Python data.

    Usage:
        render("{{name}}", {"name": "x"}, partials={"p": "..."}, escape=False)
    """

    def _render(
        template: str,
        data: dict[str, Any] | None = None,
        partials: dict[str, str] | None = None,
        escape: bool = True,
    ) -> str:
        config = RenderConfig() if escape else RenderConfig(escape=empty_escape)
        resolver = MappingPartialResolver(partials or {})
        renderer = TemplateRenderer(config, partials=resolver)
        output = renderer.render(template.encode("utf-8"), mk_generic_context(data or {}))
        return output.decode("utf-8")

    return _render
