"""
Project-wide constants that are unlikely to change at runtime.
"""

METADATA_FILE_NAME = "metadata.json"
BACKUP_VERSION = "1.0"

# Stored payload name inside a backup; also the on-disk settings file name
PAYLOAD_NAME_TEMPLATE = "core_char_{character_id}.dat"
PAYLOAD_NAME_PATTERN = r"^core_char_(\d+)\.dat$"
SETTINGS_DIR_PREFIX = "settings_"

FALLBACK_NAME_TEMPLATE = "Unknown ({character_id})"

COPY_CHUNK_SIZE = 64 * 1024

# Largest value representable as a signed 64-bit character ID
MAX_CHARACTER_ID = 2 ** 63 - 1


def payload_name(character_id: int) -> str:
    """Name of the payload entry for a character inside a backup archive."""
    return PAYLOAD_NAME_TEMPLATE.format(character_id=character_id)
