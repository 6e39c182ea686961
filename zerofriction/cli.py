"""zf CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click
from rich.table import Table

from zerofriction import __version__
from zerofriction.pipeline.ui import console


class VerboseGroup(click.Group):
    """Categorized help generated from the registered commands."""

    def format_commands(self, ctx, formatter):
        """Suppress the default listing (format_help prints categories instead)."""
        pass

    COMMAND_CATEGORIES = {
        "DETECTION": {
            "title": "DETECTION",
            "description": "Find imports that cannot be resolved",
            "commands": ["detect", "managers"],
            "command_meta": {
                "detect": {"use_when": "Build fails with 'Cannot find module'"},
                "managers": {"use_when": "Check which package manager zf will drive"},
            },
        },
        "ELIMINATION": {
            "title": "ELIMINATION",
            "description": "Install missing dependencies",
            "commands": ["fix"],
            "command_meta": {
                "fix": {"run_when": "After detect reports auto-installable points"},
            },
        },
    }

    def format_help(self, ctx, formatter):
        super().format_help(ctx, formatter)

        registered = {
            name: cmd
            for name, cmd in self.commands.items()
            if not getattr(cmd, "hidden", False)
        }

        console.print()
        console.rule("[bold]COMMANDS[/bold]")

        for category_data in self.COMMAND_CATEGORIES.values():
            console.print(f"\n[bold cyan]{category_data['title']}[/bold cyan]")
            console.print(f"[dim]{category_data['description']}[/dim]")

            table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
            table.add_column("Command", style="cmd", width=12)
            table.add_column("Description", style="white")
            table.add_column("Hint", style="dim", width=44)

            for cmd_name in category_data["commands"]:
                if cmd_name not in registered:
                    continue
                cmd = registered[cmd_name]

                first_line = (cmd.help or "").split("\n")[0].strip()
                period_idx = first_line.find(".")
                short_help = first_line[:period_idx] if period_idx > 0 else first_line

                cmd_meta = category_data.get("command_meta", {}).get(cmd_name, {})
                hint = ""
                if "use_when" in cmd_meta:
                    hint = f"USE: {cmd_meta['use_when']}"
                elif "run_when" in cmd_meta:
                    hint = f"RUN: {cmd_meta['run_when']}"

                table.add_row(cmd_name, short_help, hint)

            console.print(table)

        console.print()
        console.rule()
        console.print("For detailed options: [cmd]zf <command> --help[/cmd]")


@click.group(cls=VerboseGroup)
@click.version_option(version=__version__, prog_name="zf")
@click.help_option("-h", "--help")
def cli():
    """zf - Dependency friction detection and elimination

    \b
    QUICK START:
      zf detect                 # Report missing dependencies
      zf fix --dry-run          # Show the install commands
      zf fix                    # Install what can be installed

    \b
    For detailed options: zf <command> --help"""
    pass


from zerofriction.commands.detect import detect
from zerofriction.commands.fix import fix
from zerofriction.commands.managers import managers

cli.add_command(detect)
cli.add_command(fix)
cli.add_command(managers)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
