"""Backup archive reader and writer.

A backup is a ZIP file holding a metadata.json record plus one
core_char_<id>.dat entry per character. Payload names are derived from the
character ID, so the reader never needs an index to find a payload.
"""

import os
import shutil
import logging
import tempfile
import zipfile
import zlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from evesettings.archive.schemas import BackupMetadata, CharacterBackup
from evesettings.core.errors import (
    BackupEntryNotFoundError,
    BackupWriteError,
    InvalidBackupError,
)
from evesettings.core.settings import (
    BACKUP_VERSION,
    COPY_CHUNK_SIZE,
    METADATA_FILE_NAME,
    payload_name,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def create_backup(
    output_path: PathLike,
    characters: Sequence[CharacterBackup],
    files: Optional[Mapping[int, PathLike]] = None,
) -> BackupMetadata:
    """Create a ZIP backup containing the given character settings files.

    Args:
        output_path: Where to write the archive; an existing file is overwritten
        characters: Records to store, in the order they should appear in metadata
        files: Optional character_id -> source path mapping; when a character is
            missing from it, its original_path is read instead

    Returns:
        The metadata written to the archive

    Raises:
        ValueError: If a character ID appears more than once
        BackupWriteError: If a character's file could not be added. The archive
            is left partial and should be discarded.
        OSError: If the archive itself cannot be created
    """
    ids = [c.character_id for c in characters]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate character IDs in backup request")

    records = [
        c.model_copy(update={"file_name": payload_name(c.character_id)})
        for c in characters
    ]
    metadata = BackupMetadata(
        created_at=datetime.now(timezone.utc).astimezone().isoformat(timespec="seconds"),
        version=BACKUP_VERSION,
        characters=records,
    )
    files = files or {}
    output_path = Path(output_path)

    with zipfile.ZipFile(output_path, "w", compression=zipfile.ZIP_DEFLATED) as zipf:
        zipf.writestr(METADATA_FILE_NAME, metadata.model_dump_json(indent=2))

        for record in records:
            source = files.get(record.character_id, record.original_path)
            try:
                _add_file(zipf, Path(source), record.file_name)
            except OSError as e:
                logger.error(f"Failed to add character {record.character_id} from {source}: {e}")
                raise BackupWriteError(record.character_id, str(output_path), str(e)) from e
            logger.debug(f"Added {source} as {record.file_name}")

    logger.info(f"Created backup {output_path} with {len(records)} character(s)")
    return metadata


def read_backup(backup_path: PathLike) -> BackupMetadata:
    """Read and validate a backup file, returning its metadata."""
    return BackupArchive(backup_path).metadata()


def extract_character(backup_path: PathLike, character_id: int, dest_path: PathLike) -> Path:
    """Extract one character's settings from a backup to dest_path."""
    return BackupArchive(backup_path).extract_character(character_id, dest_path)


def extract_all(backup_path: PathLike, dest_dir: PathLike) -> List[Path]:
    """Extract every character payload in a backup into dest_dir."""
    return BackupArchive(backup_path).extract_all(dest_dir)


def _add_file(zipf: zipfile.ZipFile, src_path: Path, arcname: str) -> None:
    info = zipfile.ZipInfo.from_file(src_path, arcname=arcname)
    info.compress_type = zipfile.ZIP_DEFLATED

    with open(src_path, "rb") as src, zipf.open(info, "w") as dest:
        shutil.copyfileobj(src, dest, COPY_CHUNK_SIZE)


class BackupArchive:
    """Read access to a backup archive file."""

    def __init__(self, backup_path: PathLike):
        """Initialize with path to a backup ZIP file.

        Args:
            backup_path: Path to the backup zip file

        Raises:
            FileNotFoundError: If the backup file doesn't exist
            InvalidBackupError: If the file is not a valid ZIP file
        """
        self.backup_path = Path(backup_path)

        if not self.backup_path.is_file():
            raise FileNotFoundError(f"Backup file '{self.backup_path}' not found")

        # Validate it's a zip file
        with self._open():
            pass

    def _open(self) -> zipfile.ZipFile:
        try:
            return zipfile.ZipFile(self.backup_path, "r")
        except zipfile.BadZipFile as e:
            raise InvalidBackupError(
                f"'{self.backup_path}' is not a valid backup file: {e}",
                backup_path=str(self.backup_path),
            ) from e

    def metadata(self) -> BackupMetadata:
        """Load metadata.json from the archive.

        Raises:
            InvalidBackupError: If metadata.json is missing or cannot be parsed
        """
        with self._open() as zipf:
            try:
                info = zipf.getinfo(METADATA_FILE_NAME)
            except KeyError:
                raise InvalidBackupError(
                    "backup file is missing metadata", backup_path=str(self.backup_path)
                ) from None

            try:
                with zipf.open(info) as f:
                    raw = f.read()
                metadata = BackupMetadata.model_validate_json(raw)
            except (ValidationError, zipfile.BadZipFile, zlib.error) as e:
                raise InvalidBackupError(
                    f"failed to parse metadata: {e}", backup_path=str(self.backup_path)
                ) from e

        if metadata.version != BACKUP_VERSION:
            logger.warning(
                f"Backup {self.backup_path} has version '{metadata.version}', "
                f"expected '{BACKUP_VERSION}'; reading it anyway"
            )
        return metadata

    def payload_names(self) -> List[str]:
        """Names of every non-metadata entry in the archive."""
        with self._open() as zipf:
            return [
                info.filename for info in zipf.infolist()
                if info.filename != METADATA_FILE_NAME and not info.is_dir()
            ]

    def has_character(self, character_id: int) -> bool:
        return payload_name(character_id) in self.payload_names()

    def extract_character(self, character_id: int, dest_path: PathLike) -> Path:
        """Extract a single character's settings file.

        The destination is replaced atomically; a failed extraction leaves any
        previous file at dest_path untouched.

        Returns:
            Path to the extracted file

        Raises:
            BackupEntryNotFoundError: If the archive has no payload for character_id
        """
        dest_path = Path(dest_path)
        with self._open() as zipf:
            try:
                info = zipf.getinfo(payload_name(character_id))
            except KeyError:
                raise BackupEntryNotFoundError(character_id, str(self.backup_path)) from None

            self._extract_member(zipf, info, dest_path)

        logger.info(f"Extracted character {character_id} to {dest_path}")
        return dest_path

    def extract_all(self, dest_dir: PathLike) -> List[Path]:
        """Extract all character settings files into dest_dir.

        Stops at the first failure; files extracted before it stay on disk.

        Returns:
            Paths of the extracted files
        """
        dest_dir = Path(dest_dir)
        root = dest_dir.resolve()
        extracted = []

        with self._open() as zipf:
            for info in zipf.infolist():
                if info.filename == METADATA_FILE_NAME or info.is_dir():
                    continue

                target = dest_dir / info.filename
                if not target.resolve().is_relative_to(root):
                    raise InvalidBackupError(
                        f"entry '{info.filename}' would extract outside {dest_dir}",
                        backup_path=str(self.backup_path),
                    )

                self._extract_member(zipf, info, target)
                extracted.append(target)

        logger.info(f"Extracted {len(extracted)} file(s) from {self.backup_path} to {dest_dir}")
        return extracted

    def get_backup_stats(self) -> Dict[str, int]:
        """Get overall statistics about the backup."""
        metadata = self.metadata()
        return {
            "characters": len(metadata.characters),
            "payloads": len(self.payload_names()),
            "archive_size": self.backup_path.stat().st_size,
        }

    def _extract_member(self, zipf: zipfile.ZipFile, info: zipfile.ZipInfo, dest_path: Path) -> None:
        dest_path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=dest_path.parent, prefix=f".{dest_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as out, zipf.open(info) as src:
                shutil.copyfileobj(src, out, COPY_CHUNK_SIZE)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, dest_path)
        except (zipfile.BadZipFile, zlib.error) as e:
            _remove_quietly(tmp_name)
            raise InvalidBackupError(
                f"failed to read '{info.filename}': {e}", backup_path=str(self.backup_path)
            ) from e
        except BaseException:
            _remove_quietly(tmp_name)
            raise


def _remove_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
