"""
Discovery of settings directories and character settings files.
"""

import re
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from evesettings.core.settings import PAYLOAD_NAME_PATTERN, SETTINGS_DIR_PREFIX
from evesettings.eve.character import CharacterSettings
from evesettings.eve.paths import get_possible_settings_paths

logger = logging.getLogger(__name__)

CHAR_FILE_PATTERN = re.compile(PAYLOAD_NAME_PATTERN)


def detect_settings_directories(base_paths: Optional[Iterable[Path]] = None) -> List[Path]:
    """Find every <base>/<profile>/settings_* directory.

    Args:
        base_paths: Directories to search; defaults to the platform's known locations
    """
    if base_paths is None:
        base_paths = get_possible_settings_paths()

    settings_dirs = []
    for base_path in base_paths:
        base_path = Path(base_path)
        if not base_path.is_dir():
            continue

        try:
            profiles = sorted(p for p in base_path.iterdir() if p.is_dir())
        except OSError as e:
            logger.debug(f"Skipping {base_path}: {e}")
            continue

        for profile in profiles:
            try:
                entries = sorted(profile.iterdir())
            except OSError as e:
                logger.debug(f"Skipping {profile}: {e}")
                continue

            for entry in entries:
                if entry.is_dir() and entry.name.startswith(SETTINGS_DIR_PREFIX):
                    settings_dirs.append(entry)

    logger.debug(f"Found {len(settings_dirs)} settings director(ies)")
    return settings_dirs


def find_character_settings(settings_dirs: Iterable[Path]) -> List[CharacterSettings]:
    """Find all core_char_<id>.dat files in the given directories."""
    characters = []

    for settings_dir in settings_dirs:
        try:
            entries = sorted(Path(settings_dir).iterdir())
        except OSError as e:
            logger.debug(f"Skipping {settings_dir}: {e}")
            continue

        for entry in entries:
            match = CHAR_FILE_PATTERN.match(entry.name)
            if not match or not entry.is_file():
                continue

            try:
                stat = entry.stat()
            except OSError:
                continue

            characters.append(CharacterSettings(
                character_id=int(match.group(1)),
                file_path=str(entry),
                mod_time=int(stat.st_mtime),
            ))

    return characters


def find_character_by_id(
    character_id: int,
    settings_dirs: Optional[Iterable[Path]] = None,
) -> Optional[CharacterSettings]:
    """Find a character's settings file by ID, or None if there is none."""
    if settings_dirs is None:
        settings_dirs = detect_settings_directories()

    for character in find_character_settings(settings_dirs):
        if character.character_id == character_id:
            return character
    return None
