"""Account management commands."""

import click
from kea.cli.account_resolution import resolve_account_or_exit
from kea.cli.error_handling import handle_domain_error
from kea.domain.account import AccountService
from kea.domain.balance import BalanceCalculator
from kea.domain.entities import AccountNode, AccountType
from kea.domain.errors import DomainError
from kea.utils.amount_parser import format_cents, parse_amount
from kea.utils.date_parser import parse_timestamp

TYPE_CHOICES = [t.name.lower() for t in AccountType] + [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(TYPE_CHOICES, case_sensitive=False),
    help="Account type (required for top-level accounts)",
)
@click.option("--parent", help="Full name of the parent account (e.g. 'Assets:Bank')")
@click.option("--currency", default="", help="Currency code (defaults to parent's or the default)")
@click.option("--description", default="", help="Account description")
@click.option("--balance", help="Opening balance for Asset and Liability accounts")
@click.option("--date", help="Opening balance date (YYYY-MM-DD or relative like 'today')")
@click.pass_context
def create_account(
    ctx,
    name: str,
    account_type: str | None,
    parent: str | None,
    currency: str,
    description: str,
    balance: str | None,
    date: str | None,
):
    """Create a new account.

    Top-level accounts are placed under the root for their type, subaccounts
    inherit the type of their parent.

    Examples:
        kea account create Bank --type asset
        kea account create Checking --parent Assets:Bank --balance 1500.00
        kea account create Groceries --type expense --description "Food at home"
    """
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj.get("config"))

    opening_amount = 0
    if balance is not None:
        try:
            opening_amount = parse_amount(balance)
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
        account, transaction_id = service.open_account(
            name=name,
            account_type=account_type,
            parent_name=parent,
            currency=currency,
            description=description,
            opening_balance=opening_amount,
            timestamp=timestamp,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account '{account.name}' (ID: {account.id})")
    if transaction_id is not None:
        click.echo(
            f"Opening balance {format_cents(opening_amount, account.currency)} "
            f"(transaction {transaction_id})"
        )


@account_group.command("list")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(TYPE_CHOICES, case_sensitive=False),
    help="Only accounts of this type",
)
@click.option("--tree", is_flag=True, help="Show accounts as a hierarchy")
@click.option("--all", "show_all", is_flag=True, help="Include hidden accounts")
@click.pass_context
def list_accounts(ctx, account_type: str | None, tree: bool, show_all: bool):
    """List accounts with their balances."""
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj.get("config"))
    calculator = BalanceCalculator(db)

    accounts = service.list_accounts(account_type=account_type, include_hidden=show_all)
    if not accounts:
        click.echo("No accounts found.")
        return

    balances = calculator.balances(accounts)

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    if tree:
        for node in service.build_tree(accounts):
            _echo_node(node, balances, depth=0)
        return

    for acc in accounts:
        amount = format_cents(balances[acc.id], acc.currency)
        click.echo(f"ID: {acc.id:3d} | {acc.type.name.capitalize():9s} | {acc.name:35s} | {amount:>16s}")


def _echo_node(node: AccountNode, balances: dict[int, int], depth: int) -> None:
    acc = node.account
    label = f"{'  ' * depth}{acc.leaf_name if depth else acc.name}"
    amount = format_cents(balances[acc.id], acc.currency)
    click.echo(f"{label:50s} {amount:>16s}")
    for child in node.children:
        _echo_node(child, balances, depth + 1)


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.option("--include-subaccounts", "-s", is_flag=True, help="Add the balances of all subaccounts")
@click.pass_context
def account_balance(ctx, account: str, include_subaccounts: bool) -> None:
    """Show the balance of an account.

    ACCOUNT can be a full account name or ID.

    Examples:
        kea account balance Assets:Bank:Checking
        kea account balance Assets:Bank --include-subaccounts
    """
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj.get("config"))
    calculator = BalanceCalculator(db)

    account_obj = resolve_account_or_exit(ctx, service, account)
    if include_subaccounts:
        balance = calculator.subtree_balance(account_obj.id)
    else:
        balance = calculator.account_balance(account_obj.id)
    click.echo(f"{account_obj.name}: {format_cents(balance, account_obj.currency)}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def delete_account(ctx, account: str) -> None:
    """Delete an account.

    ACCOUNT can be a full account name or ID.

    The account can only be deleted if no split references it and it has
    no subaccounts.

    Examples:
        kea account delete Expenses:Old
        kea account delete 7
    """
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj.get("config"))

    account_obj = resolve_account_or_exit(ctx, service, account)

    # Confirm deletion
    if not click.confirm(f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_obj.id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_obj.id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
