"""Styled one-line messages for CLI commands.

Every helper returns a string; commands decide where to echo it.
"""

from pathlib import Path

import click

_MARKS = {
    "success": ("✓", "green"),
    "error": ("✗", "red"),
    "warning": ("⚠", "yellow"),
}


def _marked(kind: str, text: str, prefix: str | None) -> str:
    mark, colour = _MARKS[kind]
    return f"{click.style(prefix or mark, fg=colour)} {text}"


def section_header(text: str) -> str:
    """``=== text ===`` in bold cyan, printed at the start of each pipeline step."""
    return click.style(f"=== {text} ===", fg='cyan', bold=True)


def success(text: str, prefix: str | None = None) -> str:
    return _marked("success", text, prefix)


def error(text: str, prefix: str | None = None) -> str:
    return _marked("error", text, prefix)


def warning(text: str, prefix: str | None = None) -> str:
    return _marked("warning", text, prefix)


def file_path(path: Path | str, label: str | None = None) -> str:
    """Indented absolute path, optionally preceded by a bullet and label."""
    shown = click.style(str(Path(path).resolve()), fg='yellow')
    if label is None:
        return f"  {shown}"
    return f"  {click.style('•', fg='blue')} {label}: {shown}"


def count_badge(count: int, label: str, color: str = 'cyan') -> str:
    """Bold coloured number followed by its label, e.g. ``12 SLNB``."""
    return f"{click.style(str(count), fg=color, bold=True)} {label}"


__all__ = ["section_header", "success", "error", "warning", "file_path", "count_badge"]
