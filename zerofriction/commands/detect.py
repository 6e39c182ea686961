"""Detect dependency friction in a JavaScript/TypeScript project."""

import click

from zerofriction.pipeline.ui import console, friction_table, print_status_panel
from zerofriction.utils.error_handler import handle_exceptions
from zerofriction.utils.exit_codes import ExitCodes


@click.command()
@handle_exceptions
@click.argument("paths", nargs=-1)
@click.option("--root", default=".", help="Project root (where package.json lives)")
@click.option(
    "--check-package-json",
    is_flag=True,
    help="Also report dependencies declared in package.json but not installed",
)
@click.option("--json", "as_json", is_flag=True, help="Output friction points as JSON")
def detect(paths, root, check_package_json, as_json):
    """Find imports of packages that are neither declared nor installed.

    Scans import/require statements in .js/.jsx/.ts/.tsx/.mjs/.cjs files
    and resolves them against package.json and Node.js builtins. With no
    PATHS the whole tree under --root is scanned (node_modules excluded).

    Examples:
      zf detect                          # Scan the current project
      zf detect src/app.ts               # Scan a single file
      zf detect --check-package-json     # Include declared-but-missing packages
      zf detect --json                   # Machine-readable output

    Exit Codes:
      0 = No friction found
      1 = Friction found"""
    import asyncio
    import json
    import sys

    from zerofriction.friction.batch import collect_source_files, detect_project
    from zerofriction.friction.dependency import create_detector

    async def run():
        detector = await create_detector(root)
        files = collect_source_files(root, paths)
        points = await detect_project(detector, files, check_package_json)
        return detector, files, points

    detector, files, points = asyncio.run(run())

    if as_json:
        click.echo(json.dumps([p.to_dict() for p in points], indent=2))
    elif not points:
        print_status_panel(
            "CLEAN",
            f"No dependency friction in {len(files)} file(s)",
            f"Package manager: {detector.active_package_manager_name}",
            level="success",
        )
    else:
        console.print(friction_table(points))
        console.print(
            f"\n{len(points)} friction point(s) in {len(files)} file(s) "
            f"[dim](package manager: {detector.active_package_manager_name})[/dim]"
        )
        console.print("Run [cmd]zf fix[/cmd] to install what can be installed automatically.")

    if points:
        sys.exit(ExitCodes.FRICTION_FOUND)
