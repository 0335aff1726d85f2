"""Progress lines for long-running loops (conflict repair, imports)."""

import logging

import click

logger = logging.getLogger(__name__)


def log_progress(
    processed: int,
    total: int | None,
    resolved: int = 0,
    remaining: int = 0,
    elapsed_seconds: float = 0.0,
    item_name: str = "passes"
) -> None:
    """Emit one INFO line such as ``300 passes processed | 4 remaining | 812.5 passes/s``.

    With a known ``total`` the head becomes ``processed/total item_name (pct%)``.
    Zero counters and a zero elapsed time are left out.
    """
    if total:
        head = f"{click.style(f'{processed}/{total}', fg='cyan')} {item_name} ({processed / total * 100:.0f}%)"
    else:
        head = f"{click.style(str(processed), fg='cyan')} {item_name} processed"

    segments = [head]
    if resolved:
        segments.append(click.style(f"{resolved} resolved", fg='green'))
    if remaining:
        segments.append(click.style(f"{remaining} remaining", fg='yellow'))
    if elapsed_seconds > 0:
        segments.append(f"{processed / elapsed_seconds:.1f} {item_name}/s")

    logger.info(" | ".join(segments))


__all__ = ["log_progress"]
