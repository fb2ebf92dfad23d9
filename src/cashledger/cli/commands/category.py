"""Category management commands."""

import click
from cashledger.cli.account_resolution import resolve_group_or_exit
from cashledger.cli.error_handling import handle_domain_error
from cashledger.domain.account import AccountService
from cashledger.domain.category import CategoryService, RESERVED_CATEGORY
from cashledger.domain.errors import DomainError


def _group_id(ctx, group: str | None) -> int | None:
    if not group:
        return None
    return resolve_group_or_exit(ctx, AccountService(ctx.obj["db"]), group)


def _resolve_category_or_exit(ctx, service: CategoryService, category: str, group_id: int | None) -> int:
    """Resolve category name or ID, or exit with a CLI error."""
    try:
        category_obj = service.get_category(int(category))
    except ValueError:
        category_obj = service.find_category(category, group_id)
    if category_obj is None:
        click.echo(f"Error: Category '{category}' not found", err=True)
        ctx.exit(1)
    return category_obj.id


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--group", help="Also show categories scoped to this account group")
@click.pass_context
def list_categories(ctx, group: str | None):
    """List global categories (plus those of --group)."""
    service = CategoryService(ctx.obj["db"])
    categories = service.list_categories(group_id=_group_id(ctx, group))
    if not categories:
        click.echo("No categories found. Run 'category init' to create default categories.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        scope = "" if cat.group_id is None else f" [group {cat.group_id}]"
        click.echo(f"{cat.name} (ID: {cat.id}){scope}")


@category_group.command("create")
@click.argument("name")
@click.option("--group", help="Scope the category to an account group (name or ID)")
@click.pass_context
def create_category(ctx, name: str, group: str | None):
    """Create a new category."""
    service = CategoryService(ctx.obj["db"])
    group_id = _group_id(ctx, group)
    try:
        category_id = service.create_category(name=name, group_id=group_id)
        click.echo(f"Created category '{name}' (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("init")
@click.option("--group", help="Create the defaults scoped to an account group (name or ID)")
@click.pass_context
def init_categories(ctx, group: str | None):
    """Create the default categories that don't exist yet."""
    service = CategoryService(ctx.obj["db"])
    created = service.ensure_default_categories(group_id=_group_id(ctx, group))
    click.echo(f"Created {created} default categories")


@category_group.command("rename")
@click.argument("category")
@click.argument("new_name")
@click.option("--group", help="Account group used to look up CATEGORY by name")
@click.pass_context
def rename_category(ctx, category: str, new_name: str, group: str | None):
    """Rename a category. CATEGORY can be a name or ID."""
    service = CategoryService(ctx.obj["db"])
    category_id = _resolve_category_or_exit(ctx, service, category, _group_id(ctx, group))
    try:
        service.rename_category(category_id, new_name)
        click.echo(f"Renamed category to '{new_name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("delete")
@click.argument("category")
@click.option("--group", help="Account group used to look up CATEGORY by name")
@click.pass_context
def delete_category(ctx, category: str, group: str | None):
    """Delete a category. CATEGORY can be a name or ID.

    Entries of the category are moved to the reserved category.
    """
    service = CategoryService(ctx.obj["db"])
    category_id = _resolve_category_or_exit(ctx, service, category, _group_id(ctx, group))
    try:
        moved = service.delete_category(category_id)
        click.echo(f"Deleted category '{category}', moved {moved} entries to '{RESERVED_CATEGORY}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
