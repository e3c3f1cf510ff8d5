"""Stache - Mustache templates for Python.

Renders ``{{tag}}`` templates against caller-supplied contexts in a single
pass over the template bytes, without an intermediate parse tree.

Simplest example:

    from stache import mk_generic_context, render_str

    render_str(
        "Hello, {{name}}!\\n\\nYou have {{unread}} unread messages.",
        mk_generic_context({"name": "Haskell", "unread": 100}),
    )

Core features:
- Variables ({{name}}, {{{name}}}, {{&name}}) with configurable escaping
- Sections and inverted sections over lists, flags and lambdas
- Array paths ({{list.0.field}})
- Set-delimiter tags ({{=<% %>=}}) and partials ({{> name}})
"""

__version__ = "0.1.0"
__author__ = "Stache Contributors"

from stache.context import mk_generic_context, mk_str_context, to_context_value
from stache.models import (
    ABSENT,
    BoolValue,
    Lambda,
    LambdaM,
    ListValue,
    RenderConfig,
    Variable,
    default_config,
    no_escape_config,
)
from stache.renderers.filters import empty_escape, html_escape
from stache.templates import (
    LambdaError,
    RenderError,
    TemplateReadError,
    TemplateRenderer,
    render_bytes,
    render_file,
    render_file_to_buffer,
    render_str,
    render_to_buffer,
)
from stache.utils.encoding import decode_str, encode_str

__all__ = [
    "ABSENT",
    "BoolValue",
    "Lambda",
    "LambdaError",
    "LambdaM",
    "ListValue",
    "RenderConfig",
    "RenderError",
    "TemplateReadError",
    "TemplateRenderer",
    "Variable",
    "decode_str",
    "default_config",
    "empty_escape",
    "encode_str",
    "html_escape",
    "mk_generic_context",
    "mk_str_context",
    "no_escape_config",
    "render_bytes",
    "render_file",
    "render_file_to_buffer",
    "render_str",
    "render_to_buffer",
    "to_context_value",
]
