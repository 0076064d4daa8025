"""
Management commands for setup and maintenance
"""
import click
from flask.cli import with_appcontext

from .extensions import db
from .repositories import SqlAlchemyStockRepository
from .seeders import seed_initial_stock
from .services.stock_adjustment import validate_item_ledger_sync


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create all stock ledger tables"""
    db.create_all()
    click.echo('✅ Database tables created')


@click.command('seed-stock')
@click.option('--force', is_flag=True, help='Seed again even if demonstration stock was already loaded')
@with_appcontext
def seed_stock_command(force):
    """Load demonstration stock items"""
    try:
        created = seed_initial_stock(force=force)
    except Exception as e:
        db.session.rollback()
        click.echo(f'❌ Error seeding stock: {str(e)}', err=True)
        raise
    if created:
        click.echo(f'✅ Seeded {created} stock items')
    else:
        click.echo('ℹ️  Stock already seeded (use --force to seed again)')


@click.command('validate-ledger')
@with_appcontext
def validate_ledger_command():
    """Check every item's batch total against its movement log"""
    repository = SqlAlchemyStockRepository(db.session)
    failures = 0
    items = repository.get_all()
    for item in items:
        is_valid, error_msg, _, _ = validate_item_ledger_sync(item)
        if not is_valid:
            failures += 1
            click.echo(f'❌ {item.id} ({item.name}): {error_msg}')

    if failures:
        click.echo(f'❌ {failures} of {len(items)} items out of sync')
        raise SystemExit(1)
    click.echo(f'✅ All {len(items)} items in sync with the movement log')


def register_commands(app):
    """Register CLI commands"""
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_stock_command)
    app.cli.add_command(validate_ledger_command)
