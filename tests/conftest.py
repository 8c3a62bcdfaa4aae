"""Shared pytest fixtures for photoshoot tests."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# The application module mounts its storage directories at import time.
_RUNTIME_DIR = Path(tempfile.mkdtemp(prefix="photoshoot-tests-"))
os.environ.setdefault("UPLOAD_DIR", str(_RUNTIME_DIR / "uploads"))
os.environ.setdefault("OUTPUT_DIR", str(_RUNTIME_DIR / "outputs"))
os.environ.setdefault("PUBLIC_DIR", str(_RUNTIME_DIR / "public"))

from fastapi.testclient import TestClient  # noqa: E402
from google.genai import types  # noqa: E402

from photoshoot.config import Settings  # noqa: E402
from photoshoot.main import app, get_gemini_service, get_settings  # noqa: E402
from photoshoot.services.gemini import GeminiService  # noqa: E402

from .fakes import FakeClient, FakeModels, image_part, make_response  # noqa: E402


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
  """Create a temporary directory that is removed after the test."""
  temp_path = Path(tempfile.mkdtemp())
  try:
    yield temp_path
  finally:
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
  return Settings(
    _env_file=None,
    GEMINI_API_KEY="test-key",
    IMAGE_MODEL="gemini-2.5-flash-image",
    UPLOAD_DIR=temp_dir / "uploads",
    OUTPUT_DIR=temp_dir / "outputs",
    PUBLIC_DIR=temp_dir / "public",
    MAX_UPLOAD_BYTES=1024,
  )


@pytest.fixture
def fake_models() -> FakeModels:
  return FakeModels(response=make_response(types.Part(text="Here is your photo."), image_part()))


@pytest.fixture
def gemini(fake_models: FakeModels) -> GeminiService:
  service = GeminiService(api_key="test-key", image_model="gemini-2.5-flash-image")
  service._client = FakeClient(fake_models)
  return service


@pytest.fixture
def test_client(test_settings: Settings, gemini: GeminiService) -> Generator[TestClient, None, None]:
  """FastAPI test client wired to temporary storage and the fake Gemini client."""
  app.dependency_overrides[get_settings] = lambda: test_settings
  app.dependency_overrides[get_gemini_service] = lambda: gemini
  try:
    with TestClient(app) as client:
      yield client
  finally:
    app.dependency_overrides.clear()
