"""Aging and open item commands."""

import click
from arrecon.cli.date_filters import resolve_cli_as_of
from arrecon.cli.error_handling import handle_domain_error
from arrecon.cli.report_options import (
    customer_filter_options,
    format_amount,
    load_transactions,
)
from arrecon.domain.aging import AgingService
from arrecon.domain.entities import ZERO, AgingBucket, AgingMode
from arrecon.domain.errors import DomainError
from arrecon.domain.filters import build_report_filter


@click.command("aging")
@click.option("--as-of", help="Reference date for days overdue (default: today)")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in AgingMode]),
    default=AgingMode.SIMPLE.value,
    show_default=True,
    help="simple: newest invoices absorb the balance; group: age open matching groups",
)
@customer_filter_options
@click.pass_context
def aging_report(
    ctx,
    as_of: str | None,
    mode: str,
    sales_rep: str | None,
    customers: tuple[str, ...],
    search: str | None,
):
    """Show outstanding balances per customer by days overdue."""
    as_of_day = resolve_cli_as_of(ctx, as_of)
    report_filter = build_report_filter(sales_rep=sales_rep, customers=customers, search=search)

    try:
        summaries = AgingService().build_aging(
            load_transactions(ctx),
            as_of=as_of_day,
            mode=mode,
            report_filter=report_filter,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not summaries:
        click.echo("No customer balances found.")
        return

    headers = [b.value for b in AgingBucket] + ["Total"]
    click.echo(f"\nAging as of {as_of_day} ({mode} mode)")
    click.echo("-" * 132)
    click.echo(f"{'Customer':<30} " + " ".join(f"{h:>13}" for h in headers))
    click.echo("-" * 132)

    totals = {b: ZERO for b in AgingBucket}
    grand_total = ZERO
    for summary in summaries:
        amounts = [summary.bucket(b) for b in AgingBucket] + [summary.grand_total]
        click.echo(
            f"{summary.customer_name[:30]:<30} "
            + " ".join(f"{format_amount(a):>13}" for a in amounts)
        )
        for b in AgingBucket:
            totals[b] += summary.bucket(b)
        grand_total += summary.grand_total

    click.echo("-" * 132)
    footer = [totals[b] for b in AgingBucket] + [grand_total]
    click.echo(f"{'Total':<30} " + " ".join(f"{format_amount(a):>13}" for a in footer))


@click.command("open-items")
@click.option("--as-of", help="Reference date for days overdue (default: today)")
@customer_filter_options
@click.pass_context
def open_items(
    ctx,
    as_of: str | None,
    sales_rep: str | None,
    customers: tuple[str, ...],
    search: str | None,
):
    """List unmatched rows and open matching groups, newest first."""
    as_of_day = resolve_cli_as_of(ctx, as_of)
    report_filter = build_report_filter(sales_rep=sales_rep, customers=customers, search=search)

    try:
        items = AgingService().list_open_items(
            load_transactions(ctx), as_of=as_of_day, report_filter=report_filter
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not items:
        click.echo("No open items found.")
        return

    click.echo(f"\nFound {len(items)} open item(s) as of {as_of_day}:")
    click.echo("-" * 110)
    click.echo(
        f"{'Date':<12} {'Number':<14} {'Type':<16} {'Customer':<28} "
        f"{'Remaining':>14} {'Days':>6} {'Matching':<14}"
    )
    click.echo("-" * 110)
    for item in items:
        days = "" if item.days_overdue is None else str(item.days_overdue)
        click.echo(
            f"{str(item.date or ''):<12} {item.document_number[:14]:<14} "
            f"{item.transaction_type.value:<16} {item.customer_name[:28]:<28} "
            f"{format_amount(item.remaining):>14} {days:>6} {(item.matching_key or '')[:14]:<14}"
        )


def register_commands(cli):
    """Register aging commands with main CLI."""
    cli.add_command(aging_report)
    cli.add_command(open_items)
