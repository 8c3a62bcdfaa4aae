from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True)

  gemini_api_key: Optional[str] = Field(None, validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"))
  image_model: str = Field("gemini-2.5-flash-image", alias="IMAGE_MODEL")
  backend_host: str = Field("0.0.0.0", alias="BACKEND_HOST")
  backend_port: int = Field(5000, validation_alias=AliasChoices("BACKEND_PORT", "PORT"))
  upload_dir: Path = Field(Path("./uploads"), alias="UPLOAD_DIR")
  output_dir: Path = Field(Path("./outputs"), alias="OUTPUT_DIR")
  public_dir: Path = Field(Path("./public"), alias="PUBLIC_DIR")
  max_upload_bytes: int = Field(10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
  log_level: str = Field("INFO", alias="LOG_LEVEL")

  @validator("upload_dir", "output_dir", "public_dir", pre=True)
  def _ensure_path(cls, value: Any) -> Path:
    return Path(value).resolve()


settings = Settings()


def ensure_directories(current: Settings = settings) -> None:
  current.upload_dir.mkdir(parents=True, exist_ok=True)
  current.output_dir.mkdir(parents=True, exist_ok=True)
