"""Add transaction command."""

import click
from kea.cli.account_resolution import resolve_account_or_exit
from kea.cli.error_handling import handle_domain_error
from kea.domain.account import AccountService
from kea.domain.classifier import TransactionClassifier
from kea.domain.errors import DomainError
from kea.domain.transaction import TransactionService
from kea.utils.amount_parser import format_cents, parse_amount
from kea.utils.date_parser import format_timestamp, parse_timestamp


@click.command("add")
@click.option("--from", "from_account", required=True, help="Source account name or ID")
@click.option("--to", "to_account", required=True, help="Destination account name or ID")
@click.option("--amount", required=True, help="Positive amount moved (e.g., 42.50)")
@click.option("--description", required=True, help="Transaction description")
@click.option(
    "--date",
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday'); defaults to now",
)
@click.pass_context
def add_transaction(
    ctx,
    from_account: str,
    to_account: str,
    amount: str,
    description: str,
    date: str | None,
):
    """Add a simple two-split transaction.

    The destination account receives the amount and the source gives it up.

    Examples:
        kea add --from Assets:Bank:Checking --to Expenses:Food --amount 42.50 --description "Groceries"
        kea add --from Revenue:Salary --to Assets:Bank:Checking --amount 2500 --description "Paycheck"
    """
    db = ctx.obj["db"]
    config = ctx.obj.get("config")
    transaction_service = TransactionService(db, config)
    account_service = AccountService(db, config)

    source = resolve_account_or_exit(ctx, account_service, from_account)
    destination = resolve_account_or_exit(ctx, account_service, to_account)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    timestamp = 0
    if date is not None:
        try:
            timestamp = parse_timestamp(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        transaction_id, _ = transaction_service.create_simple_transaction(
            from_account=source.name,
            to_account=destination.name,
            amount=txn_amount,
            description=description,
            timestamp=timestamp,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    detail = transaction_service.get_transaction(transaction_id)
    category = TransactionClassifier().classify(detail.splits)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Date: {format_timestamp(detail.timestamp)}")
    click.echo(f"  From: {source.name}")
    click.echo(f"  To: {destination.name}")
    click.echo(f"  Amount: {format_cents(txn_amount, destination.currency)}")
    click.echo(f"  Category: {category.value}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
