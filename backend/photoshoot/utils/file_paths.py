from __future__ import annotations

import logging
import re
import time
from pathlib import Path

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")

_EXTENSIONS = {
  "image/png": "png",
  "image/jpeg": "jpg",
  "image/jpg": "jpg",
  "image/webp": "webp",
  "image/gif": "gif",
}


class StorageError(Exception):
  """Raised when a file cannot be written to local storage."""


def _timestamp_ms() -> int:
  return time.time_ns() // 1_000_000


def safe_filename(original: str) -> str:
  name = Path(original.replace("\\", "/")).name
  name = re.sub(r"\s+", "_", name)
  name = _UNSAFE_CHARS.sub("", name).lstrip(".")
  return name or "upload"


def upload_filename(original: str) -> str:
  return f"{_timestamp_ms()}-{safe_filename(original)}"


def output_filename(mime_type: str | None) -> str:
  extension = _EXTENSIONS.get((mime_type or "").lower(), "png")
  return f"{_timestamp_ms()}-generated.{extension}"


def _write(path: Path, data: bytes) -> Path:
  """Write to a new file, never replacing one stored by another request."""
  try:
    path.parent.mkdir(parents=True, exist_ok=True)
    candidate = path
    counter = 1
    while True:
      try:
        with candidate.open("xb") as file:
          file.write(data)
        return candidate
      except FileExistsError:
        candidate = path.with_name(f"{path.stem}-{counter}{path.suffix}")
        counter += 1
  except OSError as error:
    raise StorageError(f"Failed to write {path.name}") from error


def save_upload(upload_dir: Path, original: str, data: bytes) -> Path:
  return _write(upload_dir / upload_filename(original), data)


def save_output(output_dir: Path, data: bytes, mime_type: str | None = None) -> Path:
  path = _write(output_dir / output_filename(mime_type), data)
  logger.info(f"Image saved: {path}")
  return path


def remove_file(path: Path | None) -> bool:
  if path is None or not path.exists():
    return False
  try:
    path.unlink()
  except OSError as error:
    logger.warning(f"Could not remove {path}: {error}")
    return False
  return True


def to_public_url(root_dir: Path, mount: str, file_path: Path) -> str:
  relative = file_path.resolve().relative_to(root_dir.resolve())
  return f"/{mount.strip('/')}/{relative.as_posix()}"
