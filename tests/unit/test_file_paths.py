"""Unit tests for photoshoot.utils.file_paths — flat-file storage."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from photoshoot.utils import file_paths
from photoshoot.utils.file_paths import (
  StorageError,
  output_filename,
  remove_file,
  safe_filename,
  save_output,
  save_upload,
  to_public_url,
  upload_filename,
)


class TestFilenames:
  @pytest.mark.parametrize(
    ("original", "expected"),
    [
      ("mug.png", "mug.png"),
      ("my product shot.jpg", "my_product_shot.jpg"),
      ("../../etc/passwd", "passwd"),
      ("C:\\photos\\bag.webp", "bag.webp"),
      ("café*?.png", "caf.png"),
      ("...", "upload"),
      ("", "upload"),
    ],
  )
  def test_safe_filename(self, original, expected):
    assert safe_filename(original) == expected

  def test_upload_filename_is_timestamped(self):
    assert re.fullmatch(r"\d{13}-mug\.png", upload_filename("mug.png"))

  def test_output_filename_extension(self):
    assert output_filename("image/jpeg").endswith("-generated.jpg")
    assert output_filename("image/webp").endswith("-generated.webp")

  @pytest.mark.parametrize("mime_type", [None, "", "application/octet-stream"])
  def test_output_filename_defaults_to_png(self, mime_type):
    assert re.fullmatch(r"\d{13}-generated\.png", output_filename(mime_type))


class TestStorage:
  def test_save_upload_creates_directory(self, temp_dir: Path):
    path = save_upload(temp_dir / "uploads", "mug.png", b"abc")
    assert path.parent == temp_dir / "uploads"
    assert path.read_bytes() == b"abc"

  def test_save_output(self, temp_dir: Path):
    path = save_output(temp_dir / "outputs", b"img", "image/png")
    assert path.name.endswith("-generated.png")
    assert path.read_bytes() == b"img"

  def test_write_failure_raises_storage_error(self, temp_dir: Path):
    blocker = temp_dir / "blocked"
    blocker.write_bytes(b"")
    with pytest.raises(StorageError):
      save_output(blocker, b"img")

  def test_remove_file(self, temp_dir: Path):
    path = temp_dir / "gone.png"
    path.write_bytes(b"x")
    assert remove_file(path) is True
    assert not path.exists()
    assert remove_file(path) is False
    assert remove_file(None) is False

  def test_to_public_url(self, temp_dir: Path):
    path = temp_dir / "outputs" / "1-generated.png"
    assert to_public_url(temp_dir / "outputs", "/outputs/", path) == "/outputs/1-generated.png"

  def test_timestamps_use_milliseconds(self, monkeypatch):
    monkeypatch.setattr(file_paths.time, "time_ns", lambda: 1_700_000_000_123_456_789)
    assert upload_filename("a.png") == "1700000000123-a.png"

  def test_same_millisecond_writes_do_not_overwrite(self, temp_dir: Path, monkeypatch):
    monkeypatch.setattr(file_paths.time, "time_ns", lambda: 1_700_000_000_123_456_789)

    first = save_output(temp_dir, b"first")
    second = save_output(temp_dir, b"second")

    assert first.name == "1700000000123-generated.png"
    assert second.name == "1700000000123-generated-1.png"
    assert first.read_bytes() == b"first"
    assert second.read_bytes() == b"second"
