"""Template linter.

Rendering never fails on malformed templates; it passes broken tags through
or drops them. The linter walks a template with the same scanner and
delimiter rules, one section body at a time, and reports those spots so
they can be fixed up front.
"""

from dataclasses import dataclass

from stache.templates.scanner import (
    DEFAULT_DELIMITERS,
    Delimiters,
    find_close_section,
    find_tag,
    parse_delimiter_command,
)

# Issue kinds
UNTERMINATED_TAG = "unterminated_tag"
UNCLOSED_SECTION = "unclosed_section"
STRAY_CLOSE = "stray_close"
MISNESTED_CLOSE = "misnested_close"
NESTED_SAME_NAME = "nested_same_name"
MALFORMED_DELIMITERS = "malformed_delimiters"


@dataclass
class TemplateIssue:
    """A problem found in a template.

    Attributes:
        kind: Issue kind (one of the module constants)
        message: Human-readable description
        offset: Byte offset of the offending tag
        line: 1-based line number of the offending tag
    """

    kind: str
    message: str
    offset: int
    line: int = 1

    def to_dict(self) -> dict[str, str | int]:
        return {
            "kind": self.kind,
            "message": self.message,
            "offset": self.offset,
            "line": self.line,
        }


def lint_template(template: bytes) -> list[TemplateIssue]:
    """Report malformed tags and section structure problems.

    Section bodies are checked as their own scope, the way the renderer
    processes them: a delimiter change inside a body ends with the body.

    Args:
        template: Template bytes

    Returns:
        Issues in template order (empty if the template is clean)
    """
    issues: list[TemplateIssue] = []

    def report(kind: str, message: str, offset: int) -> None:
        line = template.count(b"\n", 0, offset) + 1
        issues.append(TemplateIssue(kind=kind, message=message, offset=offset, line=line))

    def walk(
        text: bytes,
        base: int,
        delimiters: Delimiters,
        open_sections: tuple[bytes, ...],
    ) -> None:
        pos = 0
        while True:
            tag = find_tag(text, delimiters, pos)
            if tag is None:
                start = text.find(delimiters.open, pos)
                if start != -1:
                    report(UNTERMINATED_TAG, "Tag is never closed", base + start)
                return

            offset = base + tag.start
            name = tag.body[1:]
            label = name.decode("utf-8", "replace")
            pos = tag.end

            if tag.sigil in (b"#", b"^"):
                found = find_close_section(text, name, delimiters, tag.end)
                if name in open_sections:
                    report(
                        NESTED_SAME_NAME,
                        f"Section '{label}' is nested inside a section of the same name; "
                        "the inner close tag ends the outer section",
                        offset,
                    )
                elif found is None:
                    if find_close_section(template, name, delimiters, base + tag.end):
                        report(
                            MISNESTED_CLOSE,
                            f"Section '{label}' is closed after its enclosing section ends",
                            offset,
                        )
                    else:
                        report(UNCLOSED_SECTION, f"Section '{label}' has no closing tag", offset)

                if found is not None:
                    close_at, after = found
                    body = text[tag.end : close_at]
                    walk(body, base + tag.end, delimiters, open_sections + (name,))
                    pos = after

            elif tag.sigil == b"/":
                report(STRAY_CLOSE, f"Close tag for '{label}' has no opening section", offset)

            elif tag.sigil == b"=":
                new_delimiters = parse_delimiter_command(tag.body)
                if new_delimiters is None:
                    report(MALFORMED_DELIMITERS, "Malformed set-delimiter tag is ignored", offset)
                else:
                    delimiters = new_delimiters

    walk(template, 0, DEFAULT_DELIMITERS, ())
    return issues
