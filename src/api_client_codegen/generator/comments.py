"""Make free-form documentation safe inside ``/** ... */`` blocks."""

import re

from pydantic import BaseModel, ConfigDict, Field

from api_client_codegen.description.base import ANY_CASE

ZERO_WIDTH_SPACE = "\u200b"
ELLIPSIS = "..."

HTML_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&amp;", "&"),  # last, so "&amp;lt;" decodes to "&lt;" and not "<"
)

_LINE_BREAK = re.compile(r"\r\n|\n|\r")
_WHITESPACE = re.compile(r"\s+")


class CommentConfig(BaseModel):
    """Limits applied to generated doc comments."""

    model_config = ConfigDict(alias_generator=ANY_CASE)

    max_length: int = Field(default=200, ge=4)
    max_lines: int = Field(default=5, ge=1)
    preserve_html_tags: bool = True  # False decodes &lt; &gt; ... before escaping
    preserve_line_breaks: bool = True


DEFAULT_CONFIG = CommentConfig()


def sanitize_single_line(comment: str | None, config: CommentConfig | None = None) -> str:
    """Collapse a comment to one escaped, length-limited line."""
    config = config or DEFAULT_CONFIG
    if not comment or not comment.strip():
        return ""

    text = comment.strip()
    if not config.preserve_html_tags:
        text = decode_html_entities(text)
    text = escape_comment_delimiters(text)
    text = _WHITESPACE.sub(" ", text).strip()
    return _truncate(text, config.max_length)


def sanitize_multi_line(comment: str | None, config: CommentConfig | None = None) -> list[str]:
    """Split a comment into escaped lines, at most ``max_lines`` plus an ellipsis line."""
    config = config or DEFAULT_CONFIG
    if not comment or not comment.strip():
        return []
    if not config.preserve_line_breaks:
        return [sanitize_single_line(comment, config)]

    lines = []
    for raw in _LINE_BREAK.split(comment):
        line = raw.strip()
        if not line:
            continue
        if not config.preserve_html_tags:
            line = decode_html_entities(line)
        line = escape_comment_delimiters(line)
        lines.append(_truncate(_WHITESPACE.sub(" ", line), config.max_length))

    if len(lines) > config.max_lines:
        return lines[: config.max_lines] + [ELLIPSIS]
    return lines


def escape_comment_delimiters(text: str) -> str:
    """Break up ``*/`` and ``/*`` with a zero-width space."""
    return text.replace("*/", f"*{ZERO_WIDTH_SPACE}/").replace("/*", f"/{ZERO_WIDTH_SPACE}*")


def decode_html_entities(text: str) -> str:
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def _truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS
