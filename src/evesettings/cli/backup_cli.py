# src/evesettings/cli/backup_cli.py

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import typer

from evesettings.archive import CharacterBackup, create_backup
from evesettings.cli.common import console, exit_with_error
from evesettings.core.errors import BackupWriteError, CharacterNotFoundError, EveSettingsError
from evesettings.esi import ESIClient
from evesettings.eve import CharacterSettings, detect_settings_directories, find_character_settings

logger = logging.getLogger(__name__)


def latest_per_character(characters: List[CharacterSettings]) -> List[CharacterSettings]:
    """Keep one file per character ID, the most recently modified one."""
    latest: Dict[int, CharacterSettings] = {}
    for c in characters:
        current = latest.get(c.character_id)
        if current is None:
            latest[c.character_id] = c
        elif c.mod_time > current.mod_time:
            logger.warning(f"Character {c.character_id} found in several installations; using {c.file_path}")
            latest[c.character_id] = c
        else:
            logger.warning(f"Character {c.character_id} found in several installations; using {current.file_path}")
    return list(latest.values())


def backup(
    character: Optional[str] = typer.Argument(None, help="Character ID or name"),
    all_characters: bool = typer.Option(False, "--all", help="Backup all characters"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path"),
):
    """
    Create a ZIP backup of character settings.

    Specify a character by ID or name, or use --all to back up every character.
    The backup includes metadata with character names and timestamps.
    """
    if not all_characters and not character:
        exit_with_error("please specify a character (ID or name) or use --all to backup all characters")

    output_path = output or Path(f"eve-backup-{datetime.now().strftime('%Y%m%d-%H%M%S')}.zip")

    try:
        dirs = detect_settings_directories()
        if not dirs:
            exit_with_error("no EVE Online settings directories found")

        local_characters = find_character_settings(dirs)
        if not local_characters:
            exit_with_error("no character settings files found")

        with ESIClient() as client:
            if all_characters:
                selected = latest_per_character(local_characters)
            else:
                character_id = client.resolve_character(character)
                selected = latest_per_character(
                    [c for c in local_characters if c.character_id == character_id]
                )
                if not selected:
                    raise CharacterNotFoundError(
                        character,
                        f"character '{character}' (ID: {character_id}) not found in local settings",
                    )

            names = client.batch_get_character_names(c.character_id for c in selected)

        records = [
            CharacterBackup.for_character(c.character_id, names[c.character_id], c.file_path)
            for c in selected
        ]

        try:
            create_backup(output_path, records)
        except BackupWriteError:
            output_path.unlink(missing_ok=True)
            raise

    except (EveSettingsError, OSError) as e:
        exit_with_error(e)

    console.print(f"Backup created: {output_path}", markup=False)
    console.print(f"Characters backed up: {len(records)}")
    for r in records:
        console.print(f"  - {r.character_name} ({r.character_id})", markup=False)
