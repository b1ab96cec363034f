# src/evesettings/cli/list_cli.py

import logging
from datetime import datetime

import typer
from rich.table import Table

from evesettings.cli.common import console, exit_with_error
from evesettings.core.errors import EveSettingsError
from evesettings.esi import ESIClient
from evesettings.eve import (
    detect_settings_directories,
    find_character_settings,
    get_possible_settings_paths,
)

logger = logging.getLogger(__name__)


def list_characters(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show additional details including full paths"),
):
    """
    List all detected EVE character settings files.

    Scans known EVE settings locations and shows character IDs with their names
    (resolved via ESI), modification times and, with --verbose, file paths.
    """
    try:
        dirs = detect_settings_directories()

        if not dirs:
            console.print("No EVE Online settings directories found.")
            console.print("\nSearched locations:")
            for path in get_possible_settings_paths():
                console.print(f"  - {path}", markup=False)
            return

        if verbose:
            console.print("Found settings directories:")
            for settings_dir in dirs:
                console.print(f"  - {settings_dir}", markup=False)
            console.print()

        characters = find_character_settings(dirs)
        if not characters:
            console.print("No character settings files found.")
            return

        with ESIClient() as client:
            names = client.batch_get_character_names(c.character_id for c in characters)

    except (EveSettingsError, OSError) as e:
        exit_with_error(e)

    # Most recently modified first, then by name
    rows = sorted(characters, key=lambda c: (-c.mod_time, names[c.character_id]))

    table = Table()
    table.add_column("Character ID", style="cyan")
    table.add_column("Name")
    table.add_column("Modified", style="green")
    if verbose:
        table.add_column("Path", overflow="fold")

    for c in rows:
        modified = datetime.fromtimestamp(c.mod_time).strftime("%Y-%m-%d %H:%M:%S")
        row = [str(c.character_id), names[c.character_id], modified]
        if verbose:
            row.append(c.file_path)
        table.add_row(*row)

    console.print(table)
    console.print(f"\nFound {len(characters)} character(s)")
