"""Shared report options: customer and source filters, ledger loading."""

import click

from arrecon.domain.entities import Transaction
from arrecon.domain.ledger import LedgerService


def customer_filter_options(command):
    """Add --sales-rep, --customer and --search to a command."""
    command = click.option("--search", help="Case-insensitive customer name search")(command)
    command = click.option(
        "--customer",
        "customers",
        multiple=True,
        help="Customer name (repeatable; overrides --sales-rep and --search)",
    )(command)
    command = click.option("--sales-rep", help="Sales rep name")(command)
    return command


def source_option(command):
    """Add the repeatable --source payment-source filter to a command."""
    return click.option(
        "--source",
        "sources",
        multiple=True,
        help="Payment source: OB, Unmatched or an invoice month like Jan25 (repeatable)",
    )(command)


def load_transactions(ctx) -> list[Transaction]:
    """Load the whole ledger from the database attached to the context."""
    return LedgerService(ctx.obj["db"]).list_transactions()


def format_amount(amount) -> str:
    return f"{amount:,.2f}"
