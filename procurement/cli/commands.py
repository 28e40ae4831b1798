"""Command line tools for procurement data maintenance."""

import asyncio
from pathlib import Path
from typing import Optional

import click
from tabulate import tabulate

from procurement.observability.logging import init_logging
from procurement.services.excel_export import EXPORTS, export_filename, export_resource
from procurement.services.vendor_service import VendorService
from procurement.settings import settings
from procurement.storage.db import close_database, get_session
from procurement.storage.files import get_file_store


@click.group()
@click.option('--log-level', default=None, help='Override LOG_LEVEL for this run')
def cli(log_level: Optional[str]):
    """Procurement data maintenance commands."""
    init_logging(log_level or settings.LOG_LEVEL, log_dir=None)


@cli.command()
@click.argument('resource', type=click.Choice(sorted(EXPORTS)))
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Workbook path (defaults to <resource>.xlsx)')
def export(resource: str, output: Optional[Path]):
    """Write RESOURCE to an Excel workbook."""

    async def run() -> bytes:
        try:
            async with get_session() as db:
                return await export_resource(db, resource)
        finally:
            await close_database()

    content = asyncio.run(run())
    target = output or Path(export_filename(resource))
    target.write_bytes(content)
    click.echo(f"✅ Exported {resource} to {target}")


@cli.command('reverify-vendors')
@click.option('--dry-run', is_flag=True, help='Show changes without saving them')
def reverify_vendors(dry_run: bool):
    """Recompute every vendor's verification status."""

    async def run() -> list[dict]:
        try:
            async with get_session() as db:
                return await VendorService(db, get_file_store()).reverify_all(dry_run=dry_run)
        finally:
            await close_database()

    changed = asyncio.run(run())
    if not changed:
        click.echo("All vendor statuses are up to date")
        return

    table_data = [
        [row["id_vendor"], row["nama_pt_cv"], row["previous"], row["current"]]
        for row in changed
    ]
    headers = ["Vendor", "Nama PT/CV", "Previous", "Current"]
    click.echo(tabulate(table_data, headers=headers, tablefmt="grid"))

    suffix = " (dry run, not saved)" if dry_run else ""
    click.echo(f"\n{len(changed)} vendor status(es) changed{suffix}")


if __name__ == '__main__':
    cli()
