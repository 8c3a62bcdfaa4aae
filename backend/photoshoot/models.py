from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SceneSummary(BaseModel):
  id: str
  description: str


class CatalogItem(BaseModel):
  id: str
  name: str
  description: str


class ApiStatus(BaseModel):
  message: str
  status: Literal["running"] = "running"
  scenes: list[str]
  demographics: list[str]
  model: str
  endpoint: str = "POST /api/upload"


class GenerationResponse(CamelModel):
  success: Literal[True] = True
  message: str = "Image generated successfully"
  original_image: str
  generated_image: str
  model: str
  scene_type: str
  demographic: str
  prompt: str
  notes: Optional[list[str]] = None


class ErrorResponse(BaseModel):
  success: Literal[False] = False
  error: str
