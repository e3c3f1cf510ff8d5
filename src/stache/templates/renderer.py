"""Mustache template renderer.

Renders a template in a single pass, without building a parse tree:

1. The scanner finds the next tag under the current delimiters
2. The literal prefix is appended to the output
3. The tag is dispatched on its sigil (variable, section, partial, ...)
4. Rendering continues at the offset just past whatever the tag consumed

The scan advances an offset through the template instead of slicing off
the unread rest, so a render stays linear in the template size. Sections
and partials render their bodies recursively with their own context
stack; delimiter changes apply to the rest of the current text.
"""

import logging
from pathlib import Path

from stache.models.render_config import RenderConfig, default_config
from stache.models.values import (
    BoolValue,
    Context,
    ContextValue,
    Lambda,
    LambdaM,
    ListValue,
    Variable,
    render_value,
)
from stache.templates.base import LambdaError, PartialResolver, RenderError, TemplateReadError
from stache.templates.output import OutputBuffer
from stache.templates.partials import FilePartialResolver
from stache.templates.resolver import ContextStack, lookup_section, push_context, read_var
from stache.templates.scanner import (
    DEFAULT_DELIMITERS,
    Delimiters,
    Tag,
    drop_newline,
    find_close_section,
    find_tag,
    parse_delimiter_command,
    trim_all,
    trim_standalone,
)
from stache.utils.encoding import decode_str, encode_str

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """Renders Mustache templates against a context.

    Usage:
        renderer = TemplateRenderer(config)
        output = renderer.render(b"Hello, {{name}}!", context)
    """

    def __init__(
        self,
        config: RenderConfig | None = None,
        partials: PartialResolver | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            config: Render configuration (HTML escaping by default)
            partials: Partial resolver; files under config.template_dir if None
        """
        self.config = config or default_config()
        self._partials = partials or FilePartialResolver.from_config(self.config)

    def render(self, template: bytes, context: Context) -> bytes:
        """Render a template to bytes.

        Args:
            template: UTF-8 template text
            context: Root context

        Returns:
            Rendered output
        """
        return self.render_to_buffer(template, context).getvalue()

    def render_to_buffer(self, template: bytes, context: Context) -> OutputBuffer:
        """Render a template into a fresh output buffer."""
        if not isinstance(template, bytes):
            template = bytes(template)
        out = OutputBuffer()
        self._process(template, (context,), DEFAULT_DELIMITERS, out)
        logger.debug("Rendered %d template bytes into %d output bytes", len(template), len(out))
        return out

    def render_file(self, path: Path | str, context: Context) -> bytes:
        """Read a template file and render it.

        Raises:
            TemplateReadError: If the file cannot be read
        """
        return self.render_file_to_buffer(path, context).getvalue()

    def render_file_to_buffer(self, path: Path | str, context: Context) -> OutputBuffer:
        """Read a template file and render it into a fresh output buffer."""
        return self.render_to_buffer(read_template(path), context)

    # -------------------------------------------------------------------------
    # Dispatcher
    # -------------------------------------------------------------------------

    def _process(
        self,
        text: bytes,
        stack: ContextStack,
        delimiters: Delimiters,
        out: OutputBuffer,
    ) -> None:
        """Render text, appending to out, until no tag remains."""
        pos = 0
        while True:
            tag = find_tag(text, delimiters, pos)
            if tag is None:
                out.append(text[pos:])
                return

            out.append(text[pos : tag.start])
            pos, delimiters = self._render_tag(text, tag, stack, delimiters, out)

    def _render_tag(
        self,
        text: bytes,
        tag: Tag,
        stack: ContextStack,
        delimiters: Delimiters,
        out: OutputBuffer,
    ) -> tuple[int, Delimiters]:
        """Render a single tag.

        Returns:
            The offset to continue from and the delimiters to continue with
        """
        sigil = tag.sigil

        # Comment
        if sigil == b"!":
            return tag.end, delimiters

        # Unescaped variable
        if sigil == b"&" or (sigil == b"{" and delimiters.is_default):
            out.append(read_var(stack, trim_all(tag.body[1:])))
            return tag.end, delimiters

        # Section, inverted section
        if sigil in (b"#", b"^"):
            return self._render_section(text, tag, stack, delimiters, out), delimiters

        # Set delimiters
        if sigil == b"=":
            new_delimiters = parse_delimiter_command(tag.body)
            if new_delimiters is None:
                logger.debug("Ignoring malformed delimiter tag: %r", tag.body)
                return tag.end, delimiters
            logger.debug("Delimiters changed to %r %r", new_delimiters.open, new_delimiters.close)
            return trim_standalone(text, tag.end), new_delimiters

        # Partial
        if sigil == b">":
            content = self._partials.load(trim_all(tag.body[1:]))
            if content is not None:
                self._process(content, stack, delimiters, out)
            return trim_standalone(text, tag.end), delimiters

        # Escaped variable
        out.append(self.config.escape(read_var(stack, trim_all(tag.body))))
        return tag.end, delimiters

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def _render_section(
        self,
        text: bytes,
        tag: Tag,
        stack: ContextStack,
        delimiters: Delimiters,
        out: OutputBuffer,
    ) -> int:
        """Render a section or inverted section.

        Returns:
            The offset following the section's closing tag
        """
        name = tag.body[1:]
        found = find_close_section(text, name, delimiters, tag.end)
        if found is None:
            # Unclosed: drop the opening tag and carry on
            return tag.end

        close_at, after = found
        body = text[drop_newline(text, tag.end) : close_at]
        if b"\n" in body:
            after = drop_newline(text, after)

        value = lookup_section(stack, name)
        if tag.sigil == b"#":
            self._render_positive(name, value, body, stack, delimiters, out)
        elif _is_falsy(value):
            self._process(body, stack, delimiters, out)

        return after

    def _render_positive(
        self,
        name: bytes,
        value: ContextValue | None,
        body: bytes,
        stack: ContextStack,
        delimiters: Delimiters,
        out: OutputBuffer,
    ) -> None:
        """Render a ``#`` section body according to the probed value."""
        if isinstance(value, ListValue):
            for item in value.items:
                self._process(body, push_context(stack, item), delimiters, out)
        elif isinstance(value, Variable):
            if not value.is_empty:
                self._process(body, stack, delimiters, out)
        elif isinstance(value, BoolValue):
            if value.flag:
                self._process(body, stack, delimiters, out)
        elif isinstance(value, (Lambda, LambdaM)):
            out.append(render_value(_call_lambda(name, value, body)))


def _is_falsy(value: ContextValue | None) -> bool:
    """Decide whether an inverted section renders its body."""
    if value is None:
        return True
    if isinstance(value, ListValue):
        return len(value.items) == 0
    if isinstance(value, BoolValue):
        return not value.flag
    if isinstance(value, Variable):
        return value.is_empty
    return False


def _call_lambda(name: bytes, value: Lambda | LambdaM, body: bytes) -> object:
    """Invoke a section lambda with the raw section body.

    Raises:
        LambdaError: If the callout raises
    """
    kind = "effectful lambda" if isinstance(value, LambdaM) else "lambda"
    logger.debug("Calling %s for section %s", kind, decode_str(name))
    try:
        return value.func(body)
    except RenderError:
        raise
    except Exception as e:
        raise LambdaError(name, str(e)) from e


# =============================================================================
# Entry points
# =============================================================================


def read_template(path: Path | str) -> bytes:
    """Read a template file as bytes.

    Raises:
        TemplateReadError: If the file cannot be read
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except OSError as e:
        raise TemplateReadError(path, f"Failed to read template {path}: {e}") from e


def render_to_buffer(config: RenderConfig, template: bytes, context: Context) -> OutputBuffer:
    """Render a template into an output buffer."""
    return TemplateRenderer(config).render_to_buffer(template, context)


def render_file_to_buffer(
    config: RenderConfig,
    path: Path | str,
    context: Context,
) -> OutputBuffer:
    """Render a template file into an output buffer."""
    return TemplateRenderer(config).render_file_to_buffer(path, context)


def render_bytes(config: RenderConfig, template: bytes, context: Context) -> bytes:
    """Render an already encoded template.

    Args:
        config: Render configuration
        template: UTF-8 template bytes
        context: Root context

    Returns:
        Rendered bytes
    """
    return render_to_buffer(config, template, context).getvalue()


def render_file(config: RenderConfig, path: Path | str, context: Context) -> bytes:
    """Read a template file and render it.

    Raises:
        TemplateReadError: If the file cannot be read
    """
    return render_file_to_buffer(config, path, context).getvalue()


def render_str(
    template: str,
    context: Context,
    config: RenderConfig | None = None,
) -> str:
    """Render a text template and decode the result."""
    output = render_bytes(config or default_config(), encode_str(template), context)
    return decode_str(output)

