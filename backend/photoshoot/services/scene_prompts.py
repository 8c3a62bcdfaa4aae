from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SceneId = Literal["studio", "lifestyle", "outdoor", "creative"]
DemographicId = Literal["none", "young_woman", "young_man", "mature_woman", "mature_man", "diverse_group"]

DEFAULT_SCENE: SceneId = "studio"
DEFAULT_DEMOGRAPHIC: DemographicId = "none"


@dataclass(frozen=True)
class CatalogEntry:
  id: str
  name: str
  description: str
  prompt: str


SCENES: dict[SceneId, CatalogEntry] = {
  "studio": CatalogEntry(
    id="studio",
    name="Studio",
    description="Product in a clean white studio background, soft lighting, professional e-commerce photo.",
    prompt=(
      "professional product photography, clean white studio background, soft lighting, "
      "sharp focus, high detail, e-commerce style"
    ),
  ),
  "lifestyle": CatalogEntry(
    id="lifestyle",
    name="Lifestyle",
    description="Product being used by people in a natural indoor home setting with warm light.",
    prompt=(
      "lifestyle product photography, natural indoor home setting, warm lighting, "
      "people using the product, cozy atmosphere, realistic"
    ),
  ),
  "outdoor": CatalogEntry(
    id="outdoor",
    name="Outdoor",
    description="Product in a bright outdoor park or travel setting, with natural daylight and greenery.",
    prompt=(
      "outdoor product photography, bright natural daylight, park setting, greenery, "
      "travel vibe, natural background"
    ),
  ),
  "creative": CatalogEntry(
    id="creative",
    name="Creative",
    description="Product in an artistic, bold, colorful, creative advertising style composition.",
    prompt=(
      "creative advertising photography, artistic composition, bold colors, dramatic lighting, "
      "innovative, eye-catching, professional product shot"
    ),
  ),
}

DEMOGRAPHICS: dict[DemographicId, CatalogEntry] = {
  "none": CatalogEntry(
    id="none",
    name="Product only",
    description="No model in the shot, the product is the only subject.",
    prompt="",
  ),
  "young_woman": CatalogEntry(
    id="young_woman",
    name="Young woman",
    description="A woman in her twenties presenting the product.",
    prompt="featuring a woman in her twenties naturally holding or using the product",
  ),
  "young_man": CatalogEntry(
    id="young_man",
    name="Young man",
    description="A man in his twenties presenting the product.",
    prompt="featuring a man in his twenties naturally holding or using the product",
  ),
  "mature_woman": CatalogEntry(
    id="mature_woman",
    name="Mature woman",
    description="A woman in her fifties presenting the product.",
    prompt="featuring a woman in her fifties naturally holding or using the product",
  ),
  "mature_man": CatalogEntry(
    id="mature_man",
    name="Mature man",
    description="A man in his fifties presenting the product.",
    prompt="featuring a man in his fifties naturally holding or using the product",
  ),
  "diverse_group": CatalogEntry(
    id="diverse_group",
    name="Diverse group",
    description="A small, diverse group of adults enjoying the product together.",
    prompt="featuring a small diverse group of adults of different ages and ethnicities enjoying the product together",
  ),
}


def _compose(scene: CatalogEntry, demographic: CatalogEntry) -> str:
  subject = f"{scene.prompt}, {demographic.prompt}" if demographic.prompt else scene.prompt
  return (
    f"Place the product from the provided image into a new photograph: {subject}. "
    "Keep the product's exact shape, colors, labels and proportions unchanged."
  )


PROMPTS: dict[tuple[SceneId, DemographicId], str] = {
  (scene_id, demographic_id): _compose(scene, demographic)
  for scene_id, scene in SCENES.items()
  for demographic_id, demographic in DEMOGRAPHICS.items()
}


def resolve_scene(value: str | None) -> SceneId:
  key = (value or "").strip().lower()
  return key if key in SCENES else DEFAULT_SCENE


def resolve_demographic(value: str | None) -> DemographicId:
  key = (value or "").strip().lower()
  return key if key in DEMOGRAPHICS else DEFAULT_DEMOGRAPHIC


def build_prompt(scene: str | None, demographic: str | None = None) -> str:
  return PROMPTS[(resolve_scene(scene), resolve_demographic(demographic))]


def list_scenes() -> list[CatalogEntry]:
  return list(SCENES.values())


def list_demographics() -> list[CatalogEntry]:
  return list(DEMOGRAPHICS.values())
