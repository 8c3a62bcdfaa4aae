from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)


class GeminiServiceError(Exception):
  """Raised when Gemini requests fail."""

  def __init__(self, message: str, original_error: Exception | None = None, is_quota_error: bool = False):
    super().__init__(message)
    self.original_error = original_error
    self.is_quota_error = is_quota_error


def _is_quota_error(error: Exception) -> bool:
  """Check if error is a quota/rate limit error."""
  text = f"{error} {error!r}".lower()
  return any(marker in text for marker in ("429", "quota", "resource_exhausted", "rate limit"))


@dataclass(slots=True)
class GeneratedImage:
  data: bytes
  mime_type: str = "image/png"
  text: list[str] = field(default_factory=list)


@dataclass
class GeminiService:
  api_key: Optional[str]
  image_model: str = "gemini-2.5-flash-image"
  _client: Optional[genai.Client] = field(default=None, init=False, repr=False)

  @property
  def client(self) -> genai.Client:
    if self._client is None:
      if not self.api_key:
        raise GeminiServiceError("Google AI API key missing, set GEMINI_API_KEY or GOOGLE_API_KEY")
      self._client = genai.Client(api_key=self.api_key)
    return self._client

  def generate_scene_image(self, prompt: str, image_bytes: bytes, mime_type: str = "image/png") -> GeneratedImage:
    """Send the product image with a scene prompt and return the generated image.

    The request carries the prompt as the first part and the product image
    as inline data. Exactly one call is made.
    """
    if not image_bytes:
      raise GeminiServiceError("No product image data to send")

    parts = [
      types.Part(text=prompt),
      types.Part(
        inline_data=types.Blob(
          data=image_bytes,
          mime_type=mime_type,
        )
      ),
    ]

    client = self.client
    try:
      logger.info("Sending request to Gemini with model: %s", self.image_model)
      response = client.models.generate_content(
        model=self.image_model,
        contents=types.Content(role="user", parts=parts),
      )
    except Exception as error:
      logger.error(f"Gemini image generation failed: {error}")
      raise GeminiServiceError(
        f"Gemini image generation failed: {error}",
        original_error=error,
        is_quota_error=_is_quota_error(error),
      ) from error

    logger.info("Response received from Gemini")
    return _extract_generated_image(response)


def _extract_generated_image(response: Any) -> GeneratedImage:
  """Pull the first inline image out of the first candidate.

  Text parts that precede the image are logged and kept alongside it.
  """
  candidates = getattr(response, "candidates", None)
  if not candidates:
    raise GeminiServiceError("No response candidate returned")

  content = getattr(candidates[0], "content", None)
  parts = getattr(content, "parts", None) or []

  texts: list[str] = []
  for part in parts:
    text = getattr(part, "text", None)
    if text:
      logger.info(f"Text response: {text[:200]}")
      texts.append(text)
      continue

    inline_data = getattr(part, "inline_data", None)
    if inline_data is None or getattr(inline_data, "data", None) is None:
      continue

    data = _decode(inline_data.data)
    if data:
      mime_type = getattr(inline_data, "mime_type", None) or "image/png"
      logger.info(f"Extracted {len(data)} bytes of generated image ({mime_type})")
      return GeneratedImage(data=data, mime_type=mime_type, text=texts)

  raise GeminiServiceError("No image data returned from model")


def _decode(data: bytes | str) -> bytes | None:
  if isinstance(data, bytes):
    return data
  try:
    return base64.b64decode(data, validate=True)
  except (binascii.Error, ValueError) as error:
    logger.warning(f"Failed to decode base64 image data: {error}")
    return None
