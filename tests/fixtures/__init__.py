"""Test fixtures for stache.

This package provides template and data files for integration tests.

Templates:
- templates/heroes.mustache: list section over records
- templates/page.mustache: partial inclusion, escaping, inverted section
- templates/broken.mustache: malformed tags for the linter
- templates/partials/: partials used by page.mustache
"""

from pathlib import Path

# Path to fixtures directory
FIXTURES_DIR = Path(__file__).parent

TEMPLATES_DIR = FIXTURES_DIR / "templates"
PARTIALS_DIR = TEMPLATES_DIR / "partials"
DATA_DIR = FIXTURES_DIR / "data"


def get_template(name: str) -> Path:
    """Get path to a template fixture.

    Raises:
        ValueError: If the template doesn't exist
    """
    path = TEMPLATES_DIR / name
    if not path.exists():
        raise ValueError(f"Template fixture not found: {name}")
    return path
