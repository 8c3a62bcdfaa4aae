from __future__ import annotations

from dataclasses import dataclass


class UploadValidationError(Exception):
  """Raised when an uploaded file is not an acceptable product image."""


@dataclass(slots=True)
class ValidatedUpload:
  filename: str
  content_type: str
  data: bytes


def validate_upload(
  *,
  filename: str | None,
  content_type: str | None,
  data: bytes | None,
  max_bytes: int,
) -> ValidatedUpload:
  if data is None or filename is None:
    raise UploadValidationError("No image uploaded")

  if not (content_type or "").startswith("image/"):
    raise UploadValidationError("Only image files are allowed!")

  if not data:
    raise UploadValidationError("Uploaded image is empty")

  if len(data) > max_bytes:
    limit_mb = max_bytes / (1024 * 1024)
    raise UploadValidationError(f"File size must be less than {limit_mb:g}MB")

  return ValidatedUpload(filename=filename, content_type=content_type, data=data)
