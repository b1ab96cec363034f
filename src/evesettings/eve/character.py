"""
Character settings files on disk.
"""

import os
import shutil
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel

from evesettings.core.settings import COPY_CHUNK_SIZE, payload_name

logger = logging.getLogger(__name__)


class CharacterSettings(BaseModel):
    """A core_char_<id>.dat file found in a settings directory."""
    character_id: int
    file_path: str
    mod_time: int  # Unix timestamp

    @property
    def settings_dir(self) -> Path:
        return Path(self.file_path).parent


def create_character_settings_path(reference: CharacterSettings, new_character_id: int) -> Path:
    """Path for a new character's settings file, beside the reference character's."""
    return reference.settings_dir / payload_name(new_character_id)


def copy_settings(
    source: CharacterSettings,
    target: CharacterSettings,
    backup_dir: Optional[Union[str, os.PathLike]] = None,
) -> Optional[Path]:
    """Copy one character's settings over another's.

    If backup_dir is given and the target file exists, a timestamped .bak copy
    is written there first.

    Returns:
        Path of the .bak file, if one was written
    """
    backup_path = None
    target_path = Path(target.file_path)

    if backup_dir is not None and target_path.exists():
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = Path(backup_dir) / f"core_char_{target.character_id}_{stamp}.dat.bak"
        _copy_file(target_path, backup_path)
        logger.info(f"Saved previous settings of {target.character_id} to {backup_path}")

    _copy_file(Path(source.file_path), target_path)
    logger.info(f"Copied settings {source.file_path} -> {target_path}")
    return backup_path


def _copy_file(src: Path, dst: Path) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    with open(src, "rb") as fsrc, open(dst, "wb") as fdst:
        shutil.copyfileobj(fsrc, fdst, COPY_CHUNK_SIZE)
