"""Payment allocation command."""

import click
from arrecon.cli.report_options import format_amount, load_transactions
from arrecon.domain.allocation import AllocationService


@click.command("allocations")
@click.option("--customer", help="Only show payments of this customer (case-insensitive)")
@click.pass_context
def show_allocations(ctx, customer: str | None):
    """Show how each matched payment is split across the invoices it settles."""
    transactions = load_transactions(ctx)
    result = AllocationService().allocate(transactions)

    wanted = customer.strip().lower() if customer else None
    indices = [
        i
        for i in result.payment_indices()
        if wanted is None or transactions[i].customer_name.strip().lower() == wanted
    ]

    if not indices:
        click.echo("No allocated payments found.")
        return

    for index in indices:
        payment = transactions[index]
        click.echo(
            f"\n{payment.date or 'undated'}  {payment.document_number}  "
            f"{payment.customer_name}  [{payment.matching_key}]  "
            f"{format_amount(payment.credit - payment.debit)}"
        )
        for fragment in result.fragments_for(index):
            click.echo(
                f"    {fragment.source_label:<10} {fragment.source_type:<16} "
                f"{format_amount(fragment.amount):>14}"
            )


def register_commands(cli):
    """Register allocations command with main CLI."""
    cli.add_command(show_allocations)
