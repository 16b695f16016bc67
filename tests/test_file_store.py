"""Unit tests for the served-directory file store."""

from pathlib import Path

import pytest

from errors import ResourceNotFoundError
from file_store import FileStore


def test_write_then_read_round_trips(tmp_path: Path) -> None:
    store = FileStore(tmp_path)

    written = store.write("foo.txt", b"hello")

    assert written == 5
    assert store.read("foo.txt") == b"hello"


def test_root_is_resolved_absolute(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    store = FileStore(".")

    assert store.root == tmp_path.resolve()


def test_nested_filename_inside_root_is_allowed(tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "inner").write_bytes(b"deep")

    assert FileStore(tmp_path).read("sub/inner") == b"deep"


@pytest.mark.parametrize("filename", ["../secret", "sub/../../secret", "", "."])
def test_names_outside_root_are_not_found(tmp_path: Path, filename: str) -> None:
    store = FileStore(tmp_path / "served")
    (tmp_path / "served").mkdir()
    (tmp_path / "secret").write_bytes(b"hidden")

    with pytest.raises(ResourceNotFoundError):
        store.read(filename)


def test_absolute_name_outside_root_is_rejected(tmp_path: Path) -> None:
    store = FileStore(tmp_path)

    with pytest.raises(ResourceNotFoundError):
        store.write("/etc/should-not-write", b"x")


def test_reading_a_directory_is_not_found(tmp_path: Path) -> None:
    (tmp_path / "folder").mkdir()

    with pytest.raises(ResourceNotFoundError):
        FileStore(tmp_path).read("folder")


def test_nul_byte_in_name_is_not_found(tmp_path: Path) -> None:
    with pytest.raises(ResourceNotFoundError):
        FileStore(tmp_path).read("bad\x00name")
