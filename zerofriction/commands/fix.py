"""Detect dependency friction and install what can be installed."""

import click

from zerofriction.pipeline.ui import console, friction_table, print_header
from zerofriction.utils.error_handler import handle_exceptions
from zerofriction.utils.exit_codes import ExitCodes


@click.command()
@handle_exceptions
@click.argument("paths", nargs=-1)
@click.option("--root", default=".", help="Project root (where package.json lives)")
@click.option(
    "--check-package-json",
    is_flag=True,
    help="Also fix dependencies declared in package.json but not installed",
)
@click.option("--dry-run", is_flag=True, help="Print install commands without running them")
def fix(paths, root, check_package_json, dry_run):
    """Eliminate dependency friction through the active package manager.

    Detects friction exactly like 'zf detect', then installs each missing
    package with npm, yarn or pnpm (chosen from the lock file). Packages
    that need configuration (@types/*, eslint-*, babel-*, webpack-*) are
    left for a manual fix.

    Examples:
      zf fix                            # Detect and install
      zf fix --dry-run                  # Show what would be installed
      zf fix --check-package-json       # Also install declared-but-missing packages

    Exit Codes:
      0 = Everything eliminated (or nothing to do)
      2 = At least one point needs a manual fix"""
    import asyncio
    import sys

    from zerofriction.friction.batch import collect_source_files, detect_project
    from zerofriction.friction.dependency import create_detector

    async def run():
        detector = await create_detector(root)
        files = collect_source_files(root, paths)
        points = await detect_project(detector, files, check_package_json)
        results = {}
        if points and not dry_run:
            results = await detector.eliminate_all(points)
        return detector, points, results

    detector, points, results = asyncio.run(run())

    if not points:
        console.print("[success]No dependency friction found[/success]")
        return

    if dry_run:
        print_header("DRY RUN")
        console.print(friction_table(points))
        for point in points:
            if point.auto_installable and point.install_command:
                console.print(f"  [cmd]{point.install_command}[/cmd]", highlight=False)
        return

    print_header("ELIMINATION")
    for point in points:
        if results.get(point.id):
            console.print(f"  [success]FIXED[/success]  {point.dependency_name}", highlight=False)
        else:
            reason = "manual fix required" if not point.auto_installable else "install failed"
            console.print(
                f"  [error]FAILED[/error] {point.dependency_name} ({reason})",
                highlight=False,
            )

    stats = detector.get_dependency_stats()
    console.print(
        f"\nEliminated {stats.total_eliminated}/{stats.total_attempted} "
        f"({stats.elimination_rate:.0%}) with {stats.active_package_manager}"
    )

    if not all(results.values()):
        sys.exit(ExitCodes.ELIMINATION_FAILED)
