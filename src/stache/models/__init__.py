"""Stache data models.

This module exports the core entities used throughout the renderer:
- Context values: Variable, ListValue, BoolValue, Lambda, LambdaM, ABSENT
- RenderConfig: escape function and partial template location
"""

from stache.models.render_config import RenderConfig, default_config, no_escape_config
from stache.models.values import (
    ABSENT,
    BoolValue,
    Context,
    ContextValue,
    Lambda,
    LambdaM,
    ListValue,
    Variable,
    is_empty,
    render_value,
)

__all__ = [
    "ABSENT",
    "BoolValue",
    "Context",
    "ContextValue",
    "Lambda",
    "LambdaM",
    "ListValue",
    "RenderConfig",
    "Variable",
    "default_config",
    "is_empty",
    "no_escape_config",
    "render_value",
]
