from __future__ import annotations

import logging
from pathlib import Path
from typing import List, TypedDict

from langgraph.graph import StateGraph, START, END

from .config import Settings
from .services.gemini import GeminiService
from .services.scene_prompts import build_prompt, resolve_demographic, resolve_scene
from .utils.file_paths import save_output

logger = logging.getLogger(__name__)


class WorkflowState(TypedDict, total=False):
  upload_path: str
  upload_mime_type: str
  scene_type: str
  demographic: str
  resolved_scene: str
  resolved_demographic: str
  prompt: str
  generated_image_data: bytes
  generated_mime_type: str
  generated_image_path: str
  model_text: List[str]


def run_workflow(
  *,
  upload_path: Path,
  upload_mime_type: str,
  scene_type: str,
  demographic: str,
  settings: Settings,
  gemini: GeminiService,
) -> WorkflowState:
  """Run the single-shot generation flow using LangGraph StateGraph."""
  builder = StateGraph(WorkflowState)

  builder.add_node("select_prompt", _select_prompt_node)
  builder.add_node("generate_image", _make_generate_node(gemini))
  builder.add_node("save_output", _make_save_node(settings))

  builder.add_edge(START, "select_prompt")
  builder.add_edge("select_prompt", "generate_image")
  builder.add_edge("generate_image", "save_output")
  builder.add_edge("save_output", END)

  graph = builder.compile()

  initial_state: WorkflowState = {
    "upload_path": str(upload_path),
    "upload_mime_type": upload_mime_type,
    "scene_type": scene_type,
    "demographic": demographic,
  }

  return graph.invoke(initial_state)


def _select_prompt_node(state: WorkflowState) -> dict:
  scene = resolve_scene(state.get("scene_type"))
  demographic = resolve_demographic(state.get("demographic"))
  logger.info(f"Generating {scene} image with demographic {demographic}")
  return {
    "resolved_scene": scene,
    "resolved_demographic": demographic,
    "prompt": build_prompt(scene, demographic),
  }


def _make_generate_node(gemini: GeminiService):
  def node(state: WorkflowState) -> dict:
    image_bytes = Path(state["upload_path"]).read_bytes()
    generated = gemini.generate_scene_image(
      state["prompt"],
      image_bytes,
      mime_type=state.get("upload_mime_type") or "image/png",
    )
    return {
      "generated_image_data": generated.data,
      "generated_mime_type": generated.mime_type,
      "model_text": generated.text,
    }

  return node


def _make_save_node(settings: Settings):
  def node(state: WorkflowState) -> dict:
    output_path = save_output(
      settings.output_dir,
      state["generated_image_data"],
      state.get("generated_mime_type"),
    )
    return {"generated_image_path": str(output_path)}

  return node
