"""Collections rollup commands."""

import click
from arrecon.cli.date_filters import date_range_options, resolve_cli_date_range
from arrecon.cli.error_handling import handle_domain_error
from arrecon.cli.report_options import (
    customer_filter_options,
    format_amount,
    load_transactions,
    source_option,
)
from arrecon.domain.errors import DomainError
from arrecon.domain.filters import build_report_filter
from arrecon.domain.rollups import CollectionRollupService


@click.group("collections")
def collections_group():
    """Collections per customer, per sales rep and by invoice age."""
    pass


@collections_group.command("customers")
@date_range_options
@customer_filter_options
@source_option
@click.pass_context
def customer_collections(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    sales_rep: str | None,
    customers: tuple[str, ...],
    search: str | None,
    sources: tuple[str, ...],
):
    """List each customer's collections with source breakdown and payment gap."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    report_filter = build_report_filter(
        sales_rep=sales_rep, customers=customers, search=search, sources=sources
    )

    try:
        results = CollectionRollupService().customer_collections(
            load_transactions(ctx), start_date=start, end_date=end, report_filter=report_filter
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not results:
        click.echo("No collections found.")
        return

    for result in results:
        gap = "-" if result.gap_days is None else f"{result.gap_days} days"
        click.echo(
            f"\n{result.customer_name}: {format_amount(result.total)} "
            f"from {result.count} payment(s), gap {gap}"
        )
        click.echo(f"  Dates: {', '.join(d.strftime('%d/%m/%Y') for d in result.payment_dates)}")
        for label, amount in result.breakdown:
            click.echo(f"    {label:<12} {format_amount(amount):>14}")


@collections_group.command("reps")
@date_range_options
@customer_filter_options
@source_option
@click.pass_context
def rep_collections(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    sales_rep: str | None,
    customers: tuple[str, ...],
    search: str | None,
    sources: tuple[str, ...],
):
    """Show collections per sales rep and each rep's share."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    report_filter = build_report_filter(
        sales_rep=sales_rep, customers=customers, search=search, sources=sources
    )

    try:
        results = CollectionRollupService().sales_rep_collections(
            load_transactions(ctx), start_date=start, end_date=end, report_filter=report_filter
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not results:
        click.echo("No collections found.")
        return

    click.echo("-" * 86)
    click.echo(
        f"{'Sales rep':<24} {'Total':>16} {'Payments':>9} {'Customers':>10} "
        f"{'Average':>14} {'Share':>8}"
    )
    click.echo("-" * 86)
    for result in results:
        click.echo(
            f"{result.sales_rep[:24]:<24} {format_amount(result.total):>16} "
            f"{result.count:>9} {result.customer_count:>10} "
            f"{format_amount(result.average):>14} {result.share_percent:>7.1f}%"
        )


@collections_group.command("quality")
@date_range_options
@customer_filter_options
@source_option
@click.pass_context
def collection_quality(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    sales_rep: str | None,
    customers: tuple[str, ...],
    search: str | None,
    sources: tuple[str, ...],
):
    """Show how old the invoices were that collections settled."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    report_filter = build_report_filter(
        sales_rep=sales_rep, customers=customers, search=search, sources=sources
    )

    try:
        quality = CollectionRollupService().collection_quality(
            load_transactions(ctx), start_date=start, end_date=end, report_filter=report_filter
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\n{'Invoice age':<24} {'Collected':>16} {'Share':>8}")
    click.echo("-" * 50)
    for label, amount in quality.buckets:
        share = float(amount / quality.total * 100) if quality.total else 0.0
        click.echo(f"{label:<24} {format_amount(amount):>16} {share:>7.1f}%")
    click.echo("-" * 50)
    click.echo(f"{'Total':<24} {format_amount(quality.total):>16}")

    if quality.invoice_months:
        click.echo(f"\n{'Invoice month':<24} {'Collected':>16}")
        click.echo("-" * 41)
        for label, amount in quality.invoice_months:
            click.echo(f"{label:<24} {format_amount(amount):>16}")


def register_commands(cli):
    """Register collections commands with main CLI."""
    cli.add_command(collections_group)
