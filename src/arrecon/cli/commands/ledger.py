"""Ledger viewing commands."""

import click
from arrecon.cli.report_options import format_amount
from arrecon.domain.classification import classify
from arrecon.domain.ledger import LedgerService


@click.group("ledger")
def ledger_group():
    """Inspect the loaded ledger."""
    pass


@ledger_group.command("list")
@click.option("--customer", help="Exact customer name")
@click.option("--sales-rep", help="Exact sales rep name")
@click.pass_context
def list_entries(ctx, customer: str | None, sales_rep: str | None):
    """List ledger rows with their derived transaction type."""
    service = LedgerService(ctx.obj["db"])
    transactions = service.list_transactions(customer_name=customer, sales_rep=sales_rep)

    if not transactions:
        click.echo("No ledger rows found.")
        return

    click.echo(f"\nFound {len(transactions)} row(s):")
    click.echo("-" * 118)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Number':<14} {'Type':<16} {'Customer':<28} "
        f"{'Debit':>12} {'Credit':>12} {'Matching':<12}"
    )
    click.echo("-" * 118)

    for txn in transactions:
        click.echo(
            f"{txn.id:<6} {str(txn.date or ''):<12} {txn.document_number[:14]:<14} "
            f"{classify(txn).value:<16} {txn.customer_name[:28]:<28} "
            f"{format_amount(txn.debit):>12} {format_amount(txn.credit):>12} "
            f"{(txn.matching_key or '')[:12]:<12}"
        )


@ledger_group.command("reps")
@click.pass_context
def list_reps(ctx):
    """List the sales reps present in the ledger."""
    reps = LedgerService(ctx.obj["db"]).list_sales_reps()
    if not reps:
        click.echo("No sales reps found.")
        return
    for rep in reps:
        click.echo(rep)


@ledger_group.command("clear")
@click.confirmation_option(prompt="Delete every ledger row?")
@click.pass_context
def clear_ledger(ctx):
    """Delete every ledger row."""
    deleted = LedgerService(ctx.obj["db"]).clear()
    click.echo(f"Deleted {deleted} ledger row(s).")


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group)
