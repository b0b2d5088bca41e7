from __future__ import annotations

from pathlib import Path

from kti.rename import safe_rename, target_path


def test_target_path_replaces_last_extension(tmp_path: Path):
    assert target_path(tmp_path / "photo.png", "jpg") == tmp_path / "photo.jpg"
    assert target_path(tmp_path / "a.tar.gz", "pdf") == tmp_path / "a.tar.pdf"


def test_target_path_appends_when_missing(tmp_path: Path):
    assert target_path(tmp_path / "photo", "jpg") == tmp_path / "photo.jpg"
    assert target_path(tmp_path / ".cache", "png") == tmp_path / ".cache.png"


def test_rename_moves_file(tmp_path: Path):
    fp = tmp_path / "song.wav"
    fp.write_bytes(b"ID3")
    new = safe_rename(fp, "mp3")
    assert new == tmp_path / "song.mp3"
    assert not fp.exists()
    assert new.read_bytes() == b"ID3"


def test_rename_noop_when_extension_matches(tmp_path: Path):
    fp = tmp_path / "song.mp3"
    fp.write_bytes(b"ID3")
    assert safe_rename(fp, "mp3") is None
    assert fp.exists()


def test_rename_refuses_to_overwrite(tmp_path: Path):
    fp = tmp_path / "clip.mov"
    fp.write_bytes(b"new")
    existing = tmp_path / "clip.mp4"
    existing.write_bytes(b"old")

    result = safe_rename(fp, "mp4")
    assert isinstance(result, FileExistsError)
    assert fp.read_bytes() == b"new"
    assert existing.read_bytes() == b"old"


def test_rename_missing_source_returns_error(tmp_path: Path):
    result = safe_rename(tmp_path / "gone.png", "jpg")
    assert isinstance(result, OSError)
