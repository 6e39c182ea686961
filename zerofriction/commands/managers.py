"""Show which package manager zf would use."""

import click
from rich.table import Table

from zerofriction.pipeline.ui import console
from zerofriction.utils.error_handler import handle_exceptions


@click.command()
@handle_exceptions
@click.option("--root", default=".", help="Project root to search for lock files")
def managers(root):
    """Look for lock files and report the active package manager.

    Lock files are checked in priority order: pnpm-lock.yaml, yarn.lock,
    package-lock.json. Without any lock file npm is used."""
    import asyncio

    from zerofriction.package_managers import get_all_managers, select_manager

    async def scan_lock_files():
        candidates = get_all_managers(root)
        found = [(mgr, await mgr.detect_lock_file()) for mgr in candidates]
        active = await select_manager(root, managers=candidates)
        return found, active

    found, active = asyncio.run(scan_lock_files())

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2, 0, 0))
    table.add_column("Manager", style="cmd")
    table.add_column("Lock file", style="path")
    table.add_column("Present")
    table.add_column("Active")
    for mgr, present in found:
        table.add_row(
            mgr.manager_name,
            mgr.lock_file,
            "yes" if present else "no",
            "[success]*[/success]" if mgr is active else "",
        )

    console.print(table)
