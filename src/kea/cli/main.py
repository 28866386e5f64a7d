"""Main CLI entry point."""

import logging

import click

from kea.config import LedgerConfig
from kea.database.factories import create_sqlite_database
from kea.domain.account import AccountService

# Import and register all commands at module level
from kea.cli.commands import (
    account,
    add,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides KEA_DB_PATH environment variable)",
    envvar="KEA_DB_PATH",
)
@click.option(
    "--currency",
    help="Default currency code for new accounts (overrides KEA_DEFAULT_CURRENCY)",
    envvar="KEA_DEFAULT_CURRENCY",
)
@click.option("--verbose", "-v", is_flag=True, help="Log ledger operations to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, currency: str | None, verbose: bool):
    """Kea - personal double-entry bookkeeping.

    Keep accounts in a hierarchy (Assets, Liabilities, Equity, Revenue,
    Expenses) and record balanced transactions between them.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        env_config = LedgerConfig.from_env()
        config = LedgerConfig(
            default_currency=currency or env_config.default_currency,
            database_path=db_path or env_config.database_path,
            allow_reconciled_demotion=env_config.allow_reconciled_demotion,
        )
        db = create_sqlite_database(database_path=config.database_path)
        db.connect()
        db.initialize_schema()
        AccountService(db, config).ensure_system_accounts()
        ctx.obj["db"] = db
        ctx.obj["config"] = config
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
