"""Purchase tracking commands."""

import click
from fintrack.cli.date_filters import resolve_cli_date_range
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.entities import PurchasePriority, PurchaseStatus
from fintrack.domain.purchase import PurchaseService, filter_purchases
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.currency import format_currency
from fintrack.utils.date_parser import PERIODS, parse_date

STATUSES = [s.value for s in PurchaseStatus]
PRIORITIES = [p.value for p in PurchasePriority]


@click.group()
def purchase_group():
    """Track planned and completed purchases."""
    pass


@purchase_group.command("add")
@click.argument("item_name")
@click.option("--category", required=True, help="Purchase category")
@click.option("--price", required=True, help="Item price")
@click.option("--date", "purchase_date", default="today", help="Purchase date (default: today)")
@click.option("--status", type=click.Choice(STATUSES), default="planned")
@click.option("--priority", type=click.Choice(PRIORITIES), default="medium")
@click.option("--notes", help="Notes")
@click.pass_context
def add_purchase(
    ctx,
    item_name: str,
    category: str,
    price: str,
    purchase_date: str,
    status: str,
    priority: str,
    notes: str | None,
):
    """Record a purchase."""
    db = ctx.obj["db"]
    service = PurchaseService(db)

    try:
        purchase_id = service.add_purchase(
            item_name=item_name,
            category=category,
            price=parse_amount(price),
            purchase_date=parse_date(purchase_date),
            status=PurchaseStatus(status),
            priority=PurchasePriority(priority),
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added purchase '{item_name}' (ID: {purchase_id})")


@purchase_group.command("list")
@click.option("--category", help="Only this category")
@click.option("--status", type=click.Choice(STATUSES), help="Only this status")
@click.option("--priority", type=click.Choice(PRIORITIES), help="Only this priority")
@click.option("--search", help="Match item name or notes")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@click.option("--period", type=click.Choice(PERIODS), help="Named period")
@click.pass_context
def list_purchases(
    ctx,
    category: str | None,
    status: str | None,
    priority: str | None,
    search: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
):
    """List purchases."""
    db = ctx.obj["db"]
    service = PurchaseService(db)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    purchases = filter_purchases(
        service.list_purchases(),
        search=search,
        status=PurchaseStatus(status) if status else None,
        category=category,
        priority=PurchasePriority(priority) if priority else None,
        start_date=start,
        end_date=end,
    )
    if not purchases:
        click.echo("No purchases found.")
        return

    click.echo(
        f"\n{'ID':<6} {'Date':<12} {'Item':<24} {'Category':<18} {'Price':>12} "
        f"{'Status':<10} {'Priority':<8}"
    )
    click.echo("-" * 96)
    for p in purchases:
        click.echo(
            f"{p.id:<6} {str(p.purchase_date):<12} {p.item_name[:24]:<24} "
            f"{p.category[:18]:<18} {format_currency(p.price):>12} "
            f"{p.status.value:<10} {p.priority.value:<8}"
        )


@purchase_group.command("update")
@click.argument("purchase_id", type=int)
@click.option("--item-name", help="Item name")
@click.option("--category", help="Purchase category")
@click.option("--price", help="Item price")
@click.option("--date", "purchase_date", help="Purchase date")
@click.option("--status", type=click.Choice(STATUSES))
@click.option("--priority", type=click.Choice(PRIORITIES))
@click.option("--notes", help="Notes")
@click.pass_context
def update_purchase(
    ctx,
    purchase_id: int,
    item_name: str | None,
    category: str | None,
    price: str | None,
    purchase_date: str | None,
    status: str | None,
    priority: str | None,
    notes: str | None,
):
    """Update a purchase."""
    db = ctx.obj["db"]
    service = PurchaseService(db)

    changes = {}
    try:
        if item_name is not None:
            changes["item_name"] = item_name
        if category is not None:
            changes["category"] = category
        if price is not None:
            changes["price"] = parse_amount(price)
        if purchase_date is not None:
            changes["purchase_date"] = parse_date(purchase_date)
        if status is not None:
            changes["status"] = PurchaseStatus(status)
        if priority is not None:
            changes["priority"] = PurchasePriority(priority)
        if notes is not None:
            changes["notes"] = notes or None
        if not changes:
            click.echo("Nothing to update.")
            return
        service.update_purchase(purchase_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated purchase {purchase_id}")


@purchase_group.command("bulk-status")
@click.argument("status", type=click.Choice(STATUSES))
@click.argument("purchase_ids", type=int, nargs=-1, required=True)
@click.pass_context
def bulk_status(ctx, status: str, purchase_ids: tuple[int, ...]):
    """Set the status of several purchases at once."""
    db = ctx.obj["db"]
    service = PurchaseService(db)

    try:
        count = service.bulk_update_purchases(list(purchase_ids), status=PurchaseStatus(status))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Marked {count} purchase(s) as {status}")


@purchase_group.command("delete")
@click.argument("purchase_id", type=int)
@click.pass_context
def delete_purchase(ctx, purchase_id: int):
    """Delete a purchase."""
    db = ctx.obj["db"]
    try:
        PurchaseService(db).delete_purchase(purchase_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted purchase {purchase_id}")


@purchase_group.command("analytics")
@click.pass_context
def purchase_analytics(ctx):
    """Show spending on completed purchases."""
    db = ctx.obj["db"]
    analytics = PurchaseService(db).get_analytics()

    click.echo("\nPurchase analytics")
    click.echo("-" * 60)
    click.echo(f"Total spent:     {format_currency(analytics.total_spent)}")
    click.echo(f"This month:      {format_currency(analytics.monthly_spent)}")
    click.echo(
        f"Planned: {analytics.planned_count} | Purchased: {analytics.purchased_count} | "
        f"Cancelled: {analytics.cancelled_count}"
    )
    click.echo(f"Top category:    {analytics.top_category or '-'}")
    if analytics.category_breakdown:
        click.echo("-" * 60)
        for item in analytics.category_breakdown:
            click.echo(
                f"{item.category[:24]:<24} {format_currency(item.total_spent):>12} "
                f"{item.item_count:>4} item(s) {item.percentage:6.1f}%"
            )


@purchase_group.group("category")
def purchase_category_group():
    """Manage purchase categories and monthly budgets."""
    pass


@purchase_category_group.command("add")
@click.argument("name")
@click.option("--budget", default="0", help="Monthly budget (default: 0)")
@click.option("--color", default="#3B82F6", help="Display color")
@click.option("--description", help="Description")
@click.pass_context
def add_purchase_category(ctx, name: str, budget: str, color: str, description: str | None):
    """Add a purchase category."""
    db = ctx.obj["db"]
    try:
        category_id = PurchaseService(db).add_purchase_category(
            name, monthly_budget=parse_amount(budget), category_color=color,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created purchase category '{name}' (ID: {category_id})")


@purchase_category_group.command("list")
@click.pass_context
def list_purchase_categories(ctx):
    """List purchase categories."""
    db = ctx.obj["db"]
    categories = PurchaseService(db).list_purchase_categories()
    if not categories:
        click.echo("No purchase categories found.")
        return
    for cat in categories:
        click.echo(
            f"ID: {cat.id:3d} | {cat.category_name:24s} | "
            f"Budget: {format_currency(cat.monthly_budget)}"
        )


@purchase_category_group.command("update")
@click.argument("category_id", type=int)
@click.option("--name", help="New name")
@click.option("--budget", help="Monthly budget")
@click.option("--color", help="Display color")
@click.option("--description", help="Description")
@click.pass_context
def update_purchase_category(
    ctx,
    category_id: int,
    name: str | None,
    budget: str | None,
    color: str | None,
    description: str | None,
):
    """Update a purchase category."""
    db = ctx.obj["db"]
    changes = {}
    try:
        if name is not None:
            changes["category_name"] = name
        if budget is not None:
            changes["monthly_budget"] = parse_amount(budget)
        if color is not None:
            changes["category_color"] = color
        if description is not None:
            changes["description"] = description or None
        if not changes:
            click.echo("Nothing to update.")
            return
        PurchaseService(db).update_purchase_category(category_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated purchase category {category_id}")


@purchase_category_group.command("delete")
@click.argument("category_id", type=int)
@click.pass_context
def delete_purchase_category(ctx, category_id: int):
    """Delete a purchase category."""
    db = ctx.obj["db"]
    try:
        PurchaseService(db).delete_purchase_category(category_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted purchase category {category_id}")


def register_commands(cli):
    """Register purchase commands with main CLI."""
    cli.add_command(purchase_group, name="purchase")
