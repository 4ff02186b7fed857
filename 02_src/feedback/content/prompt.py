"""Outgoing prompt rendering.

The summary written by the agent is sent verbatim so it can use whatever
markup the parse mode allows. Only the context header is escaped.
"""

import os
import re

_MARKDOWN_V2_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!])")


def escape_html(text: str) -> str:
    """Escape the characters Telegram's HTML mode treats as markup."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_markdown_v2(text: str) -> str:
    """Backslash-escape every MarkdownV2 special character."""
    return _MARKDOWN_V2_SPECIAL.sub(r"\\\1", text)


def resolve_project_directory(raw: str | None) -> str:
    """Absolute, normalized form of the project directory (default: cwd)."""
    value = str(raw or ".").strip()
    if not value:
        return os.path.abspath(".")
    return os.path.normpath(value) if os.path.isabs(value) else os.path.abspath(value)


def build_prompt(
    summary: str,
    project_directory: str,
    timeout_seconds: float,
    parse_mode: str | None = None,
) -> str:
    """Prefix the summary with a project/timeout header for the given parse mode."""
    if float(timeout_seconds).is_integer():
        timeout = str(int(timeout_seconds))
    else:
        timeout = str(timeout_seconds)

    if parse_mode == "HTML":
        header = [
            f"<b>Project directory:</b> <code>{escape_html(project_directory)}</code>",
            f"<b>Timeout (seconds):</b> <code>{escape_html(timeout)}</code>",
        ]
    elif parse_mode == "MarkdownV2":
        header = [
            f"*Project directory:* {escape_markdown_v2(project_directory)}",
            f"*Timeout \\(seconds\\):* {escape_markdown_v2(timeout)}",
        ]
    else:
        # Markdown (legacy) and plain text get an unformatted header
        header = [
            f"Project directory: {project_directory}",
            f"Timeout (seconds): {timeout}",
        ]

    return "\n".join(header) + "\n\n" + summary
