# src/evesettings/cli/restore_cli.py

import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer

from evesettings.archive import BackupArchive, BackupMetadata, CharacterBackup, extract_character
from evesettings.cli.common import confirm, console, exit_with_error
from evesettings.core.errors import EveSettingsError
from evesettings.core.settings import payload_name
from evesettings.eve import detect_settings_directories

logger = logging.getLogger(__name__)


def select_characters(metadata: BackupMetadata, character: Optional[str]) -> List[CharacterBackup]:
    """Characters to restore: all of them, or the one matching an ID or name."""
    if not character:
        return list(metadata.characters)

    try:
        match = metadata.find_character(int(character))
    except ValueError:
        match = metadata.find_character_by_name(character)

    if match is None:
        exit_with_error(f"character '{character}' not found in backup")
    return [match]


def restore_destination(record: CharacterBackup, settings_dirs: List[Path]) -> Path:
    """Restore to the original path if it lies in a known settings directory,
    otherwise into the first settings directory found."""
    original = Path(record.original_path)
    if record.original_path and any(original.is_relative_to(d) for d in settings_dirs):
        return original
    return settings_dirs[0] / payload_name(record.character_id)


def restore(
    archive: Path = typer.Argument(..., help="Path to the backup zip file"),
    character: Optional[str] = typer.Option(None, "--character", "-c", help="Restore specific character (ID or name)"),
    force: bool = typer.Option(False, "--force", "-f", help="Restore without confirmation"),
):
    """
    Restore character settings from a ZIP backup file.

    By default every character in the backup is restored to its original
    location. Use --character to restore a single character.
    """
    try:
        backup_archive = BackupArchive(archive)
        metadata = backup_archive.metadata()
        stats = backup_archive.get_backup_stats()

        console.print(f"[bold]Backup file:[/bold] {archive}")
        console.print(f"[bold]Size:[/bold] {stats['archive_size'] // 1024} KB")
        console.print(f"[bold]Created:[/bold] {metadata.created_at}")
        console.print(f"[bold]Version:[/bold] {metadata.version}")
        console.print("[bold]Characters in backup:[/bold]")
        for c in metadata.characters:
            console.print(f"  - {c.character_name} ({c.character_id})", markup=False)
        if stats["payloads"] != stats["characters"]:
            console.print(
                f"[bold yellow]WARNING:[/bold yellow] backup lists {stats['characters']} character(s) "
                f"but holds {stats['payloads']} settings file(s)"
            )

        to_restore = select_characters(metadata, character)

        dirs = detect_settings_directories()
        if not dirs:
            exit_with_error("no EVE Online settings directories found - cannot restore")

        console.print("\nWill restore to:")
        destinations: Dict[int, Path] = {}
        for c in to_restore:
            destinations[c.character_id] = restore_destination(c, dirs)
            console.print(f"  {c.character_name} ({c.character_id}) -> {destinations[c.character_id]}", markup=False)

        if not force and not confirm("Proceed with restore?"):
            return

        for c in to_restore:
            extract_character(archive, c.character_id, destinations[c.character_id])
            console.print(f"Restored: {c.character_name} ({c.character_id})", markup=False)

    except (EveSettingsError, OSError) as e:
        exit_with_error(e)

    console.print(
        f"\n[bold green]Restore completed successfully![/bold green] {len(to_restore)} character(s) restored."
    )
