"""Category management commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.category import DEFAULT_COLOR, DEFAULT_ICON, CategoryService
from fintrack.domain.entities import TransactionType

CATEGORY_TYPES = [t.value for t in TransactionType]


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=click.Choice(CATEGORY_TYPES), help="Only this type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List default and custom categories."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    categories = service.list_categories(
        type=TransactionType(category_type) if category_type else None
    )
    click.echo("\nCategories:")
    for cat in categories:
        marker = " (default)" if cat.is_default else ""
        click.echo(f"{cat.id:>10s} | {cat.type.value:7s} | {cat.name}{marker}")


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type", "category_type", type=click.Choice(CATEGORY_TYPES), default="expense",
    help="Category type (default: expense)",
)
@click.option("--color", default=DEFAULT_COLOR, help="Display color")
@click.option("--icon", default=DEFAULT_ICON, help="Icon name")
@click.pass_context
def create_category(ctx, name: str, category_type: str, color: str, icon: str):
    """Create a new category.

    Expense categories also get a purchase category of the same name.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_id = service.create_category(
            name=name, type=TransactionType(category_type), color=color, icon=icon
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {category_type} category '{name}' (ID: {category_id})")


@category_group.command("delete")
@click.argument("category_id")
@click.pass_context
def delete_category(ctx, category_id: str):
    """Delete a custom category."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        service.delete_category(category_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category {category_id}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
