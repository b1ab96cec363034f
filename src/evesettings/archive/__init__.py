from evesettings.archive.backup_archive import (
    BackupArchive,
    create_backup,
    extract_all,
    extract_character,
    read_backup,
)
from evesettings.archive.schemas import BackupMetadata, CharacterBackup

__all__ = [
    "BackupArchive",
    "BackupMetadata",
    "CharacterBackup",
    "create_backup",
    "extract_all",
    "extract_character",
    "read_backup",
]
