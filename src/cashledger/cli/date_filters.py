"""CLI helpers for date range resolution."""

from datetime import date

import click

from cashledger.utils.date_parser import get_date_range, parse_date


def _fail(ctx: click.Context, message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def _flag_names(period_flags: dict[str, bool]) -> str:
    return ", ".join(f"--{period}" for period in period_flags)


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve a date range from period flags or explicit start/end dates.

    At most one period flag may be set, and a period flag cannot be mixed
    with explicit dates. Either bound may stay None.
    """
    chosen = [period for period, is_set in period_flags.items() if is_set]

    if len(chosen) > 1:
        _fail(ctx, f"Only one period option ({_flag_names(period_flags)}) can be specified at a time.")
    if chosen and (start_date or end_date):
        _fail(ctx, "Period options cannot be combined with --start-date or --end-date.")
    if chosen:
        return get_date_range(chosen[0])

    bounds: list[date | None] = []
    for label, value in (("start", start_date), ("end", end_date)):
        if not value:
            bounds.append(None)
            continue
        try:
            bounds.append(parse_date(value))
        except ValueError as e:
            _fail(ctx, f"Invalid {label} date: {e}")

    start, end = bounds
    if start is not None and end is not None and start > end:
        _fail(ctx, "Start date must not be after end date.")
    return start, end
