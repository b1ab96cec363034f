# src/evesettings/cli/copy_cli.py

import logging
from datetime import datetime

import typer

from evesettings.archive import CharacterBackup, create_backup
from evesettings.cli.common import confirm, console, exit_with_error
from evesettings.core.errors import CharacterNotFoundError, EveSettingsError
from evesettings.esi import ESIClient
from evesettings.eve import (
    CharacterSettings,
    copy_settings,
    create_character_settings_path,
    detect_settings_directories,
    find_character_settings,
)

logger = logging.getLogger(__name__)


def copy(
    source: str = typer.Option(..., "--from", help="Source character (ID or name)"),
    target: str = typer.Option(..., "--to", help="Target character (ID or name)"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite without confirmation"),
):
    """
    Copy settings from one character to another.

    Works across different accounts. The target's current settings are saved
    to a ZIP backup next to them before they are overwritten.
    """
    try:
        with ESIClient() as client:
            from_id = client.resolve_character(source)
            to_id = client.resolve_character(target)

            if from_id == to_id:
                exit_with_error("source and target are the same character")

            dirs = detect_settings_directories()
            if not dirs:
                exit_with_error("no EVE Online settings directories found")

            local_characters = find_character_settings(dirs)
            source_char = next((c for c in local_characters if c.character_id == from_id), None)
            if source_char is None:
                raise CharacterNotFoundError(from_id, f"source character {from_id} not found in local settings")
            target_char = next((c for c in local_characters if c.character_id == to_id), None)

            source_name = client.get_character_name_or_fallback(from_id)
            target_name = client.get_character_name_or_fallback(to_id)

        if target_char is None:
            target_path = create_character_settings_path(source_char, to_id)
            console.print("Target character settings file will be created at:")
            console.print(f"  {target_path}", markup=False)
        else:
            target_path = target_char.file_path

        if not force:
            console.print("\nAbout to copy settings:")
            console.print(f"  From: {source_name} ({from_id})", markup=False)
            console.print(f"  To:   {target_name} ({to_id})", markup=False)
            if target_char is not None:
                console.print(f"\n[bold yellow]WARNING:[/bold yellow] This will overwrite existing settings for {target_name}")
            if not confirm("Proceed?"):
                return

        if target_char is not None:
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            backup_path = target_char.settings_dir / f"backup_{to_id}_{stamp}.zip"
            create_backup(
                backup_path,
                [CharacterBackup.for_character(to_id, target_name, target_char.file_path)],
            )
            console.print(f"Backup created: {backup_path}", markup=False)

        copy_settings(
            source_char,
            CharacterSettings(character_id=to_id, file_path=str(target_path), mod_time=0),
        )

    except (EveSettingsError, OSError) as e:
        exit_with_error(e)

    console.print("\n[bold green]Settings copied successfully![/bold green]")
    console.print(f"  From: {source_name} ({from_id})", markup=False)
    console.print(f"  To:   {target_name} ({to_id})", markup=False)
