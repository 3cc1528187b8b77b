"""Main CLI entry point."""

import logging

import click
from arrecon.database.factories import create_sqlite_database

# Import and register all commands at module level
from arrecon.cli.commands import (
    import_cmd,
    ledger,
    allocations,
    aging,
    metrics,
    collections,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides ARRECON_DB_PATH environment variable)",
    envvar="ARRECON_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Arrecon - Accounts-receivable reconciliation.

    Load a customer ledger, allocate payments to the invoices they settle,
    age outstanding balances and analyse collections over time.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
import_cmd.register_commands(cli)
ledger.register_commands(cli)
allocations.register_commands(cli)
aging.register_commands(cli)
metrics.register_commands(cli)
collections.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
