"""Entry point for running stache as a module.

Usage:
    python -m stache [command] [options]

Example:
    python -m stache render page.mustache --data page.yaml
    python -m stache validate page.mustache
"""

from stache.cli import app

if __name__ == "__main__":
    app()
