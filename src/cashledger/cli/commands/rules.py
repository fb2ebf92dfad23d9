"""Category learning rule commands."""

import json

import click
from cashledger.domain.learning import CategoryLearningStore, DatabaseRuleStore


def _store(ctx) -> CategoryLearningStore:
    return CategoryLearningStore(DatabaseRuleStore(ctx.obj["db"]))


@click.group()
def rules_group():
    """Manage learned categorization rules."""
    pass


@rules_group.command("list")
@click.pass_context
def list_rules(ctx):
    """List learned rules, most used first."""
    rules = _store(ctx).rules()
    if not rules:
        click.echo("No learned rules.")
        return

    click.echo(f"{'Count':>5} | {'Pattern':30} | {'Category':15} | Example")
    click.echo("-" * 80)
    for rule in rules:
        click.echo(f"{rule.count:>5} | {rule.pattern[:30]:30} | {rule.category:15} | {rule.example_usage}")


@rules_group.command("learn")
@click.argument("usage")
@click.argument("category")
@click.pass_context
def learn_rule(ctx, usage: str, category: str):
    """File USAGE under CATEGORY for future imports."""
    rule = _store(ctx).learn(usage, category)
    if rule is None:
        click.echo("Error: Usage has no text to learn from", err=True)
        ctx.exit(1)
    click.echo(f"Learned '{rule.pattern}' -> {rule.category} (count {rule.count})")


@rules_group.command("suggest")
@click.argument("usage")
@click.pass_context
def suggest_category(ctx, usage: str):
    """Show the learned category for USAGE."""
    category = _store(ctx).suggest(usage)
    click.echo(category if category else "No suggestion.")


@rules_group.command("export")
@click.argument("output", type=click.File("w", encoding="utf-8"), default="-")
@click.pass_context
def export_rules(ctx, output):
    """Write rules as JSON records to OUTPUT (default: stdout)."""
    records = _store(ctx).export_records()
    json.dump(records, output, ensure_ascii=False, indent=2)
    output.write("\n")


@rules_group.command("import")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.pass_context
def import_rules(ctx, source):
    """Load rules from a JSON file written by 'rules export'."""
    try:
        records = json.load(source)
    except json.JSONDecodeError as e:
        click.echo(f"Error: Invalid rules file: {e}", err=True)
        ctx.exit(1)
    if not isinstance(records, list):
        click.echo("Error: Invalid rules file: expected a list of records", err=True)
        ctx.exit(1)

    stored = _store(ctx).import_records(r for r in records if isinstance(r, dict))
    click.echo(f"Imported {stored} rules")


def register_commands(cli):
    """Register rules commands with main CLI."""
    cli.add_command(rules_group, name="rules")
