"""Content module: outgoing prompts and incoming reply content."""

from .builder import ReplyBuilder
from .prompt import (
    build_prompt,
    escape_html,
    escape_markdown_v2,
    resolve_project_directory,
)

__all__ = [
    "ReplyBuilder",
    "build_prompt",
    "escape_html",
    "escape_markdown_v2",
    "resolve_project_directory",
]
