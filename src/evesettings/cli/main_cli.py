"""
Top-level CLI that registers the list, backup, copy and restore commands.
"""

import logging

import typer

from evesettings.cli.backup_cli import backup
from evesettings.cli.copy_cli import copy
from evesettings.cli.list_cli import list_characters
from evesettings.cli.restore_cli import restore
from evesettings.core.config import LOG_LEVEL

main_app = typer.Typer(
    help="Eve Settings Manager: list, copy, back up and restore EVE Online character settings "
         "(core_char_*.dat files) across accounts and installations.",
    no_args_is_help=True,
)


@main_app.callback()
def configure(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    logging.basicConfig(
        level=logging.DEBUG if debug else LOG_LEVEL.upper(),
        format="%(levelname)s %(name)s - %(message)s"
    )


main_app.command("list")(list_characters)
main_app.command("backup")(backup)
main_app.command("copy")(copy)
main_app.command("restore")(restore)


def main():
    main_app()

if __name__ == "__main__":
    main()
