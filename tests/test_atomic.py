from __future__ import annotations

import os
from pathlib import Path
import stat
from typing import BinaryIO

import pytest

from mdsmith.core.atomic import AtomicFile, atomic_write
from mdsmith.core.exceptions import AtomicWriteError


def _leftovers(directory: Path) -> list[Path]:
    return [path for path in directory.iterdir() if path.name.endswith(".tmp")]


def test_atomic_write_replaces_content(tmp_path: Path) -> None:
    target = tmp_path / "doc.md"
    target.write_bytes(b"old")

    atomic_write(target, b"new")

    assert target.read_bytes() == b"new"
    assert _leftovers(tmp_path) == []


def test_atomic_write_creates_missing_target(tmp_path: Path) -> None:
    target = tmp_path / "doc.html"
    atomic_write(target, b"<html></html>")
    assert target.read_bytes() == b"<html></html>"


def test_temporary_file_lives_next_to_target(tmp_path: Path) -> None:
    target = tmp_path / "doc.md"
    staged = AtomicFile(target)
    handle = staged.open()
    try:
        assert staged.temp_path is not None
        assert staged.temp_path.parent == tmp_path
        assert staged.temp_path.name.startswith(".doc.md.")
        handle.write(b"data")
    finally:
        assert staged.discard() is None
    assert _leftovers(tmp_path) == []
    assert not target.exists()


def test_existing_permissions_are_preserved(tmp_path: Path) -> None:
    target = tmp_path / "doc.md"
    target.write_bytes(b"old")
    target.chmod(0o640)

    atomic_write(target, b"new")

    assert stat.S_IMODE(target.stat().st_mode) == 0o640


def test_new_file_honours_umask(tmp_path: Path) -> None:
    previous = os.umask(0o027)
    try:
        atomic_write(tmp_path / "doc.md", b"new")
    finally:
        os.umask(previous)
    assert stat.S_IMODE((tmp_path / "doc.md").stat().st_mode) == 0o640


def test_content_is_synced_before_rename(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    real_fsync = os.fsync
    real_replace = os.replace

    def fsync(fd: int) -> None:
        calls.append("fsync")
        real_fsync(fd)

    def replace(src: str | Path, dst: str | Path) -> None:
        calls.append("replace")
        real_replace(src, dst)

    monkeypatch.setattr(os, "fsync", fsync)
    monkeypatch.setattr(os, "replace", replace)

    atomic_write(tmp_path / "doc.md", b"new")

    assert calls == ["fsync", "replace"]


def test_sync_failure_leaves_target_untouched(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    target = tmp_path / "doc.md"
    target.write_bytes(b"old")

    def fail(_fd: int) -> None:
        raise OSError(5, "Input/output error")

    monkeypatch.setattr(os, "fsync", fail)

    with pytest.raises(AtomicWriteError) as excinfo:
        atomic_write(target, b"new")

    assert target.read_bytes() == b"old"
    assert _leftovers(tmp_path) == []
    assert excinfo.value.target == target
    assert excinfo.value.cleanup_error is None
    assert isinstance(excinfo.value.__cause__, OSError)


class _FailingWriter:
    def __init__(self, handle: BinaryIO) -> None:
        self._handle = handle

    def write(self, _data: bytes) -> int:
        raise OSError(28, "No space left on device")

    def __getattr__(self, name: str) -> object:
        return getattr(self._handle, name)


def test_write_failure_leaves_target_and_directory_untouched(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    target = tmp_path / "doc.md"
    target.write_bytes(b"old")
    os.utime(target, ns=(1_000_000_000, 1_000_000_000))
    before = target.stat().st_mtime_ns
    listing = sorted(os.listdir(tmp_path))
    real_fdopen = os.fdopen

    def fdopen(fd: int, *args: object, **kwargs: object) -> _FailingWriter:
        return _FailingWriter(real_fdopen(fd, *args, **kwargs))

    monkeypatch.setattr(os, "fdopen", fdopen)

    with pytest.raises(AtomicWriteError, match="No space left on device") as excinfo:
        atomic_write(target, b"new")

    assert target.read_bytes() == b"old"
    assert target.stat().st_mtime_ns == before
    assert sorted(os.listdir(tmp_path)) == listing
    assert excinfo.value.target == target
    assert isinstance(excinfo.value.__cause__, OSError)


def test_rename_failure_removes_temporary_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    target = tmp_path / "doc.md"
    target.write_bytes(b"old")

    def fail(_src: str | Path, _dst: str | Path) -> None:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(os, "replace", fail)

    with pytest.raises(AtomicWriteError, match="Failed to write"):
        atomic_write(target, b"new")

    assert target.read_bytes() == b"old"
    assert _leftovers(tmp_path) == []


def test_cleanup_failure_is_attached_to_primary_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    target = tmp_path / "doc.md"
    target.write_bytes(b"old")

    def fail_replace(_src: str | Path, _dst: str | Path) -> None:
        raise OSError(28, "No space left on device")

    def fail_unlink(_path: str | Path) -> None:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(os, "replace", fail_replace)
    monkeypatch.setattr(os, "unlink", fail_unlink)

    with pytest.raises(AtomicWriteError) as excinfo:
        atomic_write(target, b"new")

    error = excinfo.value
    assert "No space left on device" in str(error)
    assert isinstance(error.cleanup_error, PermissionError)
    assert any("cleanup also failed" in note for note in error.__notes__)
    assert target.read_bytes() == b"old"


def test_exception_inside_block_discards_staged_content(tmp_path: Path) -> None:
    target = tmp_path / "doc.md"
    target.write_bytes(b"old")

    with pytest.raises(ValueError, match="boom"), AtomicFile(target) as handle:
        handle.write(b"partial")
        raise ValueError("boom")

    assert target.read_bytes() == b"old"
    assert _leftovers(tmp_path) == []


def test_commit_without_open_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        AtomicFile(tmp_path / "doc.md").commit()
