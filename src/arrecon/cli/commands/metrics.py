"""Collections metrics command."""

import click
from arrecon.cli.date_filters import date_range_options, resolve_cli_as_of, resolve_cli_date_range
from arrecon.cli.error_handling import handle_domain_error
from arrecon.cli.report_options import (
    customer_filter_options,
    format_amount,
    load_transactions,
    source_option,
)
from arrecon.domain.errors import DomainError
from arrecon.domain.filters import build_report_filter
from arrecon.domain.metrics import PeriodMetricsService

SERIES = ("daily", "weekly", "monthly")


def _format_change(change: float) -> str:
    return f"{change:+.1f}%"


def _display_trend(trend):
    rows = [
        ("Total collected", "total", "total_change", "total_change_last_year", format_amount),
        ("Payments", "count", "count_change", "count_change_last_year", str),
        ("Customers", "customers", "customers_change", "customers_change_last_year", str),
        ("Average payment", "average", "average_change", "average_change_last_year", format_amount),
    ]
    with_last_year = trend.has_last_year_data

    header = f"\n{'':<22} {'Current':>16} {'Previous':>16} {'Change':>9}"
    if with_last_year:
        header += f" {'Last year':>16} {'Change':>9}"
    click.echo(header)
    click.echo("-" * (94 if with_last_year else 67))
    for label, attr, change, change_last_year, fmt in rows:
        line = (
            f"{label:<22} {fmt(getattr(trend.current, attr)):>16} "
            f"{fmt(getattr(trend.previous, attr)):>16} "
            f"{_format_change(getattr(trend, change)):>9}"
        )
        if with_last_year:
            line += (
                f" {fmt(getattr(trend.last_year, attr)):>16} "
                f"{_format_change(getattr(trend, change_last_year)):>9}"
            )
        click.echo(line)

    if not with_last_year:
        click.echo("No collections in the same window last year.")


def _display_series(name, metrics):
    click.echo(f"\n{name.capitalize()} collections")
    click.echo("-" * 76)
    click.echo(f"{'Period':<22} {'Current':>16} {'Previous':>16} {'Last year':>16}")
    click.echo("-" * 76)
    if not metrics:
        click.echo("No collections in this period.")
        return
    for metric in metrics:
        click.echo(
            f"{metric.label:<22} {format_amount(metric.current):>16} "
            f"{format_amount(metric.previous):>16} {format_amount(metric.last_year):>16}"
        )


@click.command("metrics")
@date_range_options
@click.option("--as-of", help="Reference date used when the ledger has no collections")
@click.option(
    "--series",
    type=click.Choice(SERIES),
    multiple=True,
    help="Series to show (repeatable, default: monthly)",
)
@customer_filter_options
@source_option
@click.pass_context
def metrics_report(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    as_of: str | None,
    series: tuple[str, ...],
    sales_rep: str | None,
    customers: tuple[str, ...],
    search: str | None,
    sources: tuple[str, ...],
):
    """Show net collections against the previous period and last year."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    as_of_day = resolve_cli_as_of(ctx, as_of)
    report_filter = build_report_filter(
        sales_rep=sales_rep, customers=customers, search=search, sources=sources
    )

    try:
        report = PeriodMetricsService().build_report(
            load_transactions(ctx),
            start_date=start,
            end_date=end,
            report_filter=report_filter,
            as_of=as_of_day,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nCollections from {report.start} to {report.end}")
    _display_trend(report.trend)

    for name in [s for s in SERIES if s in (series or ("monthly",))]:
        _display_series(name, getattr(report, name))


def register_commands(cli):
    """Register metrics command with main CLI."""
    cli.add_command(metrics_report)
