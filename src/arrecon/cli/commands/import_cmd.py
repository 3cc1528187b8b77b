"""Ledger CSV import command."""

import click
from arrecon.cli.error_handling import handle_domain_error
from arrecon.domain.ledger_import import LedgerImportService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--replace", is_flag=True, help="Delete the current ledger before importing")
@click.pass_context
def import_ledger(ctx, csv_file: str, replace: bool):
    """Import ledger rows from a CSV export of the ledger sheet.

    Expected headers (any case): Date, Due Date, Number, Customer Name,
    Sales Rep, Debit, Credit, Matching.
    """
    db = ctx.obj["db"]
    service = LedgerImportService(db)

    try:
        result = service.import_csv(csv_file_path=csv_file, replace=replace)
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nImport complete:")
    click.echo(f"  Imported: {result['imported']} rows")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_ledger)
