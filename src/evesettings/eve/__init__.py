from evesettings.eve.character import (
    CharacterSettings,
    copy_settings,
    create_character_settings_path,
)
from evesettings.eve.detector import (
    detect_settings_directories,
    find_character_by_id,
    find_character_settings,
)
from evesettings.eve.paths import get_possible_settings_paths

__all__ = [
    "CharacterSettings",
    "copy_settings",
    "create_character_settings_path",
    "detect_settings_directories",
    "find_character_by_id",
    "find_character_settings",
    "get_possible_settings_paths",
]
