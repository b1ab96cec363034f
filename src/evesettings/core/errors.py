"""
Error types for eve-settings-manager.

Every error raised by the archive store and the ESI client derives from
EveSettingsError and carries a machine-readable code plus a details dict,
so the CLI can print it and tests can match on the class.

Filesystem failures are not wrapped here: OSError already carries the path
and propagates as-is, except while writing a backup where BackupWriteError
chains it to name the character that failed.
"""

from typing import Any, Dict, Optional


class EveSettingsError(Exception):
    """Base exception for all eve-settings-manager errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "ESM_ERROR"
        self.details = details or {}


class NotFoundError(EveSettingsError):
    """Something that was asked for does not exist."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code or "NOT_FOUND", details=details)


class CharacterNotFoundError(NotFoundError):
    """Character is unknown to ESI or absent from the local settings."""

    def __init__(self, identifier: Any, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"character '{identifier}' not found",
            code="CHARACTER_NOT_FOUND",
            details={"identifier": identifier},
        )
        self.identifier = identifier


class BackupEntryNotFoundError(NotFoundError):
    """Backup archive holds no payload for the requested character."""

    def __init__(self, character_id: int, backup_path: Optional[str] = None) -> None:
        super().__init__(
            f"character {character_id} not found in backup",
            code="BACKUP_ENTRY_NOT_FOUND",
            details={"character_id": character_id, "backup_path": backup_path},
        )
        self.character_id = character_id


class ESIRemoteError(EveSettingsError):
    """ESI answered with a non-success status."""

    def __init__(self, status_code: int, target: Any) -> None:
        super().__init__(
            f"ESI returned status {status_code} for '{target}'",
            code="ESI_REMOTE_ERROR",
            details={"status_code": status_code, "target": target},
        )
        self.status_code = status_code
        self.target = target


class ESITransportError(EveSettingsError):
    """ESI could not be reached: connection failure or timeout."""

    def __init__(self, message: str, target: Any = None) -> None:
        super().__init__(message, code="ESI_TRANSPORT_ERROR", details={"target": target})
        self.target = target


class CorruptDataError(EveSettingsError):
    """Input could not be decoded."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code or "CORRUPT_DATA", details=details)


class InvalidBackupError(CorruptDataError):
    """File is not a usable backup: not a ZIP, or metadata missing or unreadable."""

    def __init__(self, message: str, backup_path: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="INVALID_BACKUP",
            details={"backup_path": backup_path},
        )
        self.backup_path = backup_path


class ESIDecodeError(CorruptDataError):
    """ESI response body was not the JSON we expected."""

    def __init__(self, message: str, target: Any = None) -> None:
        super().__init__(message, code="ESI_DECODE_ERROR", details={"target": target})
        self.target = target


class BackupWriteError(EveSettingsError):
    """A character payload could not be added to a backup.

    The archive being written is left partial and should be discarded.
    The underlying OSError is available as __cause__.
    """

    def __init__(self, character_id: int, output_path: Optional[str] = None, reason: str = "") -> None:
        message = f"failed to add character {character_id} to backup"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            code="BACKUP_WRITE_ERROR",
            details={"character_id": character_id, "output_path": output_path},
        )
        self.character_id = character_id
