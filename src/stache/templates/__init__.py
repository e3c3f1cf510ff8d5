"""Stache template rendering.

This module provides the single-pass Mustache renderer together with its
scanner, context resolver, partial resolvers and linter.
"""

from stache.templates.base import LambdaError, PartialResolver, RenderError, TemplateReadError
from stache.templates.lint import TemplateIssue, lint_template
from stache.templates.output import OutputBuffer
from stache.templates.partials import FilePartialResolver, MappingPartialResolver
from stache.templates.renderer import (
    TemplateRenderer,
    read_template,
    render_bytes,
    render_file,
    render_file_to_buffer,
    render_str,
    render_to_buffer,
)
from stache.templates.scanner import DEFAULT_DELIMITERS, Delimiters, Tag, find_tag

__all__ = [
    "DEFAULT_DELIMITERS",
    "Delimiters",
    "FilePartialResolver",
    "LambdaError",
    "MappingPartialResolver",
    "OutputBuffer",
    "PartialResolver",
    "RenderError",
    "Tag",
    "TemplateIssue",
    "TemplateReadError",
    "TemplateRenderer",
    "find_tag",
    "lint_template",
    "read_template",
    "render_bytes",
    "render_file",
    "render_file_to_buffer",
    "render_str",
    "render_to_buffer",
]
