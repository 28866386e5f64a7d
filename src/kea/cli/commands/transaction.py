"""Transaction management commands."""

import click
from kea.cli.error_handling import handle_domain_error
from kea.domain.classifier import TransactionClassifier
from kea.domain.entities import SplitInput, TransactionInput, TransactionStatus
from kea.domain.errors import DomainError
from kea.domain.transaction import TransactionService
from kea.utils.amount_parser import format_cents, parse_amount
from kea.utils.date_parser import format_timestamp, parse_date, parse_timestamp, to_datetime

STATUS_CHOICES = [status.name.lower() for status in TransactionStatus]


def parse_split_option(value: str) -> SplitInput:
    """Parse ``ACCOUNT=AMOUNT[:MEMO]`` into a SplitInput.

    The account name may itself contain ':'; only the text after '=' is
    split into amount and memo.

    Raises:
        ValueError: If the value has no '=' or the amount is invalid
    """
    account_name, sep, rest = value.partition("=")
    if not sep or not account_name.strip():
        raise ValueError(f"Split '{value}' must look like ACCOUNT=AMOUNT[:MEMO]")
    amount_text, _, memo = rest.partition(":")
    return SplitInput(
        account_name=account_name.strip(),
        amount=parse_amount(amount_text),
        memo=memo.strip(),
    )


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--description", required=True, help="Transaction description")
@click.option(
    "--split",
    "splits",
    multiple=True,
    required=True,
    help="Split as ACCOUNT=AMOUNT[:MEMO]; repeat for each leg (amounts must sum to zero)",
)
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option(
    "--status",
    type=click.Choice(STATUS_CHOICES, case_sensitive=False),
    default="pending",
    help="Initial status",
)
@click.option("--external-id", help="External correlation ID (must be unique)")
@click.pass_context
def add_transaction(
    ctx,
    description: str,
    splits: tuple[str, ...],
    date: str | None,
    status: str,
    external_id: str | None,
) -> None:
    """Add a transaction with any number of splits.

    Examples:
        kea transaction add --description "Groceries" \\
            --split Expenses:Food=42.50 --split Assets:Bank:Checking=-42.50
        kea transaction add --description "Paycheck" --date 2024-01-31 \\
            --split Assets:Bank:Checking=2500 --split Revenue:Salary=-2500:January
    """
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj.get("config"))

    try:
        split_inputs = tuple(parse_split_option(value) for value in splits)
    except ValueError as e:
        click.echo(f"Error: Invalid split: {e}", err=True)
        ctx.exit(1)

    timestamp = 0
    if date is not None:
        try:
            timestamp = parse_timestamp(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        transaction_id = service.create_transaction(
            TransactionInput(
                description=description,
                splits=split_inputs,
                timestamp=timestamp,
                status=TransactionStatus[status.upper()],
                external_id=external_id,
            )
        )
        click.echo(f"Created transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--account", help="Only transactions touching this account (full name)")
@click.option("--limit", type=int, help="Maximum number of transactions")
@click.pass_context
def list_transactions(
    ctx, start_date: str | None, end_date: str | None, account: str | None, limit: int | None
):
    """List transactions, newest first, with their inferred category."""
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj.get("config"))
    classifier = TransactionClassifier()

    # Parse dates
    start = None
    if start_date:
        try:
            start = to_datetime(parse_date(start_date))
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = to_datetime(parse_date(end_date), end_of_day=True)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    try:
        transactions = service.list_transactions(
            limit=limit, account_name=account, start=start, end=end
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Status':<11} {'Category':<11} {'Account':<30} "
        f"{'Amount':>14} {'Description':<24}"
    )
    click.echo("-" * 110)

    for detail in transactions:
        summary = classifier.summarize(detail)
        amount_str = format_cents(summary.display_amount, summary.display_currency)
        click.echo(
            f"{detail.id:<6} {format_timestamp(detail.timestamp):<12} {detail.status.label:<11} "
            f"{summary.category.value:<11} {summary.display_account[:30]:<30} "
            f"{amount_str:>14} {detail.description[:24]:<24}"
        )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int) -> None:
    """Show a transaction and all of its splits."""
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj.get("config"))
    classifier = TransactionClassifier()

    try:
        detail = service.get_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nTransaction ID: {detail.id}")
    click.echo(f"  Date: {format_timestamp(detail.timestamp)}")
    click.echo(f"  Description: {detail.description}")
    click.echo(f"  Status: {detail.status.label}")
    click.echo(f"  Category: {classifier.classify(detail.splits).value}")
    if detail.external_id:
        click.echo(f"  External ID: {detail.external_id}")
    if not service.is_editable(detail):
        click.echo("  (read-only)")
    click.echo("  Splits:")
    for split in detail.splits:
        line = f"    {split.account_name:<40} {format_cents(split.amount, split.currency):>16}"
        if split.memo:
            line += f"  {split.memo}"
        click.echo(line)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        kea transaction delete 3
    """
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj.get("config"))

    # Confirm deletion
    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("clear")
@click.argument("transaction_id", type=int)
@click.pass_context
def clear_transaction(ctx, transaction_id: int) -> None:
    """Mark a transaction as cleared."""
    service = TransactionService(ctx.obj["db"], ctx.obj.get("config"))
    try:
        service.clear(transaction_id)
        click.echo(f"Transaction {transaction_id} cleared")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("reconcile")
@click.argument("transaction_id", type=int)
@click.pass_context
def reconcile_transaction(ctx, transaction_id: int) -> None:
    """Mark a transaction as reconciled. It cannot be changed afterwards."""
    service = TransactionService(ctx.obj["db"], ctx.obj.get("config"))
    try:
        service.reconcile(transaction_id)
        click.echo(f"Transaction {transaction_id} reconciled")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("status")
@click.argument("transaction_id", type=int)
@click.argument("status", type=click.Choice(STATUS_CHOICES, case_sensitive=False))
@click.pass_context
def set_transaction_status(ctx, transaction_id: int, status: str) -> None:
    """Set a transaction's status (pending, cleared or reconciled).

    Moving a reconciled transaction back requires KEA_ALLOW_DEMOTION=1.
    """
    service = TransactionService(ctx.obj["db"], ctx.obj.get("config"))
    new_status = TransactionStatus[status.upper()]
    try:
        service.set_status(transaction_id, new_status)
        click.echo(f"Transaction {transaction_id} is now {new_status.label}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("edit")
@click.argument("transaction_id", type=int)
@click.option("--description", help="New description")
@click.option("--date", help="New date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--amount", help="New amount for a 2-split transaction; both legs keep their sign")
@click.option(
    "--split",
    "splits",
    multiple=True,
    help="Replace all splits with ACCOUNT=AMOUNT[:MEMO]; repeat for each leg",
)
@click.pass_context
def edit_transaction(
    ctx,
    transaction_id: int,
    description: str | None,
    date: str | None,
    amount: str | None,
    splits: tuple[str, ...],
) -> None:
    """Edit a transaction.

    Only the given fields change. --amount and --split cannot be combined.

    Examples:
        kea transaction edit 4 --amount 55.00
        kea transaction edit 4 --description "Dinner" --date yesterday
        kea transaction edit 4 --split Expenses:Food=30 --split Expenses:Drinks=25 \\
            --split Assets:Bank:Checking=-55
    """
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj.get("config"))

    if amount is not None and splits:
        click.echo("Error: --amount and --split cannot be used together", err=True)
        ctx.exit(1)

    try:
        detail = service.get_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    timestamp = detail.timestamp
    if date is not None:
        try:
            timestamp = parse_timestamp(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        if amount is not None:
            try:
                new_amount = parse_amount(amount)
            except ValueError as e:
                click.echo(f"Error: Invalid amount format: {e}", err=True)
                ctx.exit(1)
            split_inputs = detail.with_amount_preserving_balance(new_amount).to_split_inputs()
        elif splits:
            try:
                split_inputs = [parse_split_option(value) for value in splits]
            except ValueError as e:
                click.echo(f"Error: Invalid split: {e}", err=True)
                ctx.exit(1)
        else:
            split_inputs = detail.to_split_inputs()

        service.update_complete(
            transaction_id,
            description=description if description is not None else detail.description,
            timestamp=timestamp,
            status=detail.status,
            splits=split_inputs,
        )
        click.echo(f"Updated transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
