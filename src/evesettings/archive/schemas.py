"""
Schemas for backup archive metadata.

The metadata record is stored as metadata.json inside every backup archive
and describes each character payload the archive holds.
"""

from typing import List

from pydantic import BaseModel, Field

from evesettings.core.settings import payload_name


class CharacterBackup(BaseModel):
    """One character settings file held in a backup."""
    character_id: int
    character_name: str = ""
    original_path: str = ""   # Advisory; used to pick the restore destination
    file_name: str = ""       # Stored payload name, derived from character_id

    @classmethod
    def for_character(cls, character_id: int, character_name: str, original_path: str) -> "CharacterBackup":
        return cls(
            character_id=character_id,
            character_name=character_name,
            original_path=original_path,
            file_name=payload_name(character_id),
        )


class BackupMetadata(BaseModel):
    """Contents of metadata.json."""
    created_at: str = ""      # RFC3339, set once by the writer
    version: str = ""         # Writer uses BACKUP_VERSION; readers accept anything
    characters: List[CharacterBackup] = Field(default_factory=list)

    def find_character(self, character_id: int):
        for character in self.characters:
            if character.character_id == character_id:
                return character
        return None

    def find_character_by_name(self, name: str):
        """Case-insensitive lookup by character name; first match wins."""
        wanted = name.casefold()
        for character in self.characters:
            if character.character_name.casefold() == wanted:
                return character
        return None
