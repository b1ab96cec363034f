"""
Tests for the esm command-line interface.

Local discovery runs against a temporary EVE directory and ESI is replaced
by an in-memory fake.
"""

import zipfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from evesettings.archive import CharacterBackup, create_backup, read_backup
from evesettings.cli.main_cli import main_app
from evesettings.core.errors import CharacterNotFoundError

runner = CliRunner()

NAMES = {111: "Alice", 222: "Bob"}


class FakeESIClient:
    """In-memory ESIClient replacement keyed by NAMES."""

    def __init__(self, *args, **kwargs):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        pass

    def resolve_character(self, identifier):
        if identifier.isdecimal() and int(identifier) > 0:
            return int(identifier)
        for character_id, name in NAMES.items():
            if name == identifier:
                return character_id
        raise CharacterNotFoundError(identifier)

    def get_character_name_or_fallback(self, character_id):
        return NAMES.get(character_id, f"Unknown ({character_id})")

    def batch_get_character_names(self, character_ids):
        return {cid: self.get_character_name_or_fallback(cid) for cid in character_ids}


@pytest.fixture
def settings_dir(tmp_path, monkeypatch):
    """A detected settings directory holding Alice's and Bob's settings."""
    base = tmp_path / "EVE"
    settings = base / "c_eve_sharedcache_tq_tranquility" / "settings_Default"
    settings.mkdir(parents=True)
    (settings / "core_char_111.dat").write_bytes(b"alice settings")
    (settings / "core_char_222.dat").write_bytes(b"bob settings")

    monkeypatch.setattr("evesettings.eve.detector.get_possible_settings_paths", lambda: [base])
    for module in ("list_cli", "backup_cli", "copy_cli"):
        monkeypatch.setattr(f"evesettings.cli.{module}.ESIClient", FakeESIClient)
    return settings


@pytest.fixture
def no_settings(tmp_path, monkeypatch):
    monkeypatch.setattr("evesettings.eve.detector.get_possible_settings_paths", lambda: [tmp_path / "nothing"])
    monkeypatch.setattr("evesettings.cli.list_cli.get_possible_settings_paths", lambda: [tmp_path / "nothing"])


def test_list(settings_dir):
    result = runner.invoke(main_app, ["list"])

    assert result.exit_code == 0, result.output
    assert "Alice" in result.output
    assert "Bob" in result.output
    assert "Found 2 character(s)" in result.output


def test_list_without_settings(no_settings):
    result = runner.invoke(main_app, ["list"])

    assert result.exit_code == 0
    assert "No EVE Online settings directories found" in result.output


def test_backup_all(settings_dir, tmp_path):
    output = tmp_path / "all.zip"

    result = runner.invoke(main_app, ["backup", "--all", "--output", str(output)])

    assert result.exit_code == 0, result.output
    metadata = read_backup(output)
    assert sorted((c.character_id, c.character_name) for c in metadata.characters) == [
        (111, "Alice"), (222, "Bob"),
    ]


def test_backup_by_name(settings_dir, tmp_path):
    output = tmp_path / "bob.zip"

    result = runner.invoke(main_app, ["backup", "Bob", "-o", str(output)])

    assert result.exit_code == 0, result.output
    characters = read_backup(output).characters
    assert [c.character_id for c in characters] == [222]
    assert characters[0].original_path == str(settings_dir / "core_char_222.dat")


def test_backup_requires_a_character(settings_dir):
    result = runner.invoke(main_app, ["backup"])

    assert result.exit_code == 1
    assert "--all" in result.output


def test_backup_unknown_local_character(settings_dir, tmp_path):
    output = tmp_path / "none.zip"

    result = runner.invoke(main_app, ["backup", "333", "-o", str(output)])

    assert result.exit_code == 1
    assert "not found in local settings" in result.output
    assert not output.exists()


def make_backup(settings_dir, tmp_path):
    archive = tmp_path / "backup.zip"
    create_backup(archive, [
        CharacterBackup.for_character(111, "Alice", str(settings_dir / "core_char_111.dat")),
        CharacterBackup.for_character(222, "Bob", str(settings_dir / "core_char_222.dat")),
    ])
    (settings_dir / "core_char_111.dat").write_bytes(b"changed alice")
    (settings_dir / "core_char_222.dat").write_bytes(b"changed bob")
    return archive


def test_restore_all(settings_dir, tmp_path):
    archive = make_backup(settings_dir, tmp_path)

    result = runner.invoke(main_app, ["restore", str(archive), "--force"])

    assert result.exit_code == 0, result.output
    assert "Size:" in result.output
    assert "WARNING" not in result.output
    assert "2 character(s) restored" in result.output
    assert (settings_dir / "core_char_111.dat").read_bytes() == b"alice settings"
    assert (settings_dir / "core_char_222.dat").read_bytes() == b"bob settings"


def test_restore_warns_when_payloads_are_missing(settings_dir, tmp_path):
    archive = make_backup(settings_dir, tmp_path)
    trimmed = tmp_path / "trimmed.zip"
    with zipfile.ZipFile(archive) as src, zipfile.ZipFile(trimmed, "w") as dst:
        for info in src.infolist():
            if info.filename != "core_char_222.dat":
                dst.writestr(info, src.read(info.filename))

    result = runner.invoke(main_app, ["restore", str(trimmed), "-c", "111", "-f"])

    assert result.exit_code == 0, result.output
    assert "backup lists 2 character(s) but holds 1 settings file(s)" in result.output
    assert (settings_dir / "core_char_111.dat").read_bytes() == b"alice settings"


def test_restore_single_character_by_name(settings_dir, tmp_path):
    archive = make_backup(settings_dir, tmp_path)

    result = runner.invoke(main_app, ["restore", str(archive), "-c", "bob", "-f"])

    assert result.exit_code == 0, result.output
    assert (settings_dir / "core_char_111.dat").read_bytes() == b"changed alice"
    assert (settings_dir / "core_char_222.dat").read_bytes() == b"bob settings"


def test_restore_to_foreign_path_uses_detected_dir(settings_dir, tmp_path):
    archive = tmp_path / "foreign.zip"
    source = tmp_path / "elsewhere" / "core_char_555.dat"
    source.parent.mkdir()
    source.write_bytes(b"from another machine")
    create_backup(archive, [CharacterBackup.for_character(555, "Carol", str(source))])

    result = runner.invoke(main_app, ["restore", str(archive), "--force"])

    assert result.exit_code == 0, result.output
    assert (settings_dir / "core_char_555.dat").read_bytes() == b"from another machine"


def test_restore_cancelled(settings_dir, tmp_path):
    archive = make_backup(settings_dir, tmp_path)

    result = runner.invoke(main_app, ["restore", str(archive)], input="n\n")

    assert result.exit_code == 0
    assert "Operation cancelled." in result.output
    assert (settings_dir / "core_char_111.dat").read_bytes() == b"changed alice"


def test_restore_unknown_character(settings_dir, tmp_path):
    archive = make_backup(settings_dir, tmp_path)

    result = runner.invoke(main_app, ["restore", str(archive), "-c", "Nobody", "-f"])

    assert result.exit_code == 1
    assert "not found in backup" in result.output


def test_restore_invalid_archive(settings_dir, tmp_path):
    bogus = tmp_path / "bogus.zip"
    bogus.write_bytes(b"not a zip")

    result = runner.invoke(main_app, ["restore", str(bogus), "-f"])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_copy_over_existing_character(settings_dir):
    result = runner.invoke(main_app, ["copy", "--from", "Alice", "--to", "222", "--force"])

    assert result.exit_code == 0, result.output
    assert (settings_dir / "core_char_222.dat").read_bytes() == b"alice settings"

    backups = list(settings_dir.glob("backup_222_*.zip"))
    assert len(backups) == 1
    assert [c.character_name for c in read_backup(backups[0]).characters] == ["Bob"]


def test_copy_to_new_character(settings_dir):
    result = runner.invoke(main_app, ["copy", "--from", "111", "--to", "333", "--force"])

    assert result.exit_code == 0, result.output
    assert (settings_dir / "core_char_333.dat").read_bytes() == b"alice settings"
    assert not list(settings_dir.glob("backup_*.zip"))


def test_copy_cancelled(settings_dir):
    result = runner.invoke(main_app, ["copy", "--from", "111", "--to", "222"], input="n\n")

    assert result.exit_code == 0
    assert (settings_dir / "core_char_222.dat").read_bytes() == b"bob settings"


def test_copy_missing_source(settings_dir):
    result = runner.invoke(main_app, ["copy", "--from", "999", "--to", "222", "-f"])

    assert result.exit_code == 1
    assert "not found in local settings" in result.output


def test_debug_flag(settings_dir):
    result = runner.invoke(main_app, ["--debug", "list"])

    assert result.exit_code == 0, result.output
    assert "Found 2 character(s)" in result.output


def test_verbose_is_not_a_root_flag(settings_dir):
    result = runner.invoke(main_app, ["--verbose", "list"])

    assert result.exit_code != 0
