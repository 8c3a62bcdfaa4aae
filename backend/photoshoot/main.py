from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from .config import Settings, ensure_directories, settings
from .models import ApiStatus, CatalogItem, ErrorResponse, GenerationResponse, SceneSummary
from .services.gemini import GeminiService, GeminiServiceError
from .services.scene_prompts import DEFAULT_DEMOGRAPHIC, DEFAULT_SCENE, list_demographics, list_scenes
from .services.uploads import UploadValidationError, ValidatedUpload, validate_upload
from .utils.file_paths import StorageError, remove_file, safe_filename, save_upload, to_public_url
from .workflow import WorkflowState, run_workflow

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


app = FastAPI(title="AI Photoshoot Generator")

app.add_middleware(
  CORSMiddleware,
  allow_origins=["*"],
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)


ensure_directories(settings)


gemini_service = GeminiService(api_key=settings.gemini_api_key, image_model=settings.image_model)


def get_settings() -> Settings:
  return settings


def get_gemini_service() -> GeminiService:
  return gemini_service


@app.get("/api", response_model=ApiStatus)
async def api_status(current: Settings = Depends(get_settings)) -> ApiStatus:
  return ApiStatus(
    message=f"AI Photoshoot Generator (Google AI {current.image_model})",
    scenes=[scene.id for scene in list_scenes()],
    demographics=[demographic.id for demographic in list_demographics()],
    model=current.image_model,
  )


@app.get("/api/scenes", response_model=list[SceneSummary])
async def scenes() -> list[SceneSummary]:
  return [SceneSummary(id=scene.id, description=scene.description) for scene in list_scenes()]


@app.get("/api/scene-types", response_model=list[CatalogItem])
async def scene_types() -> list[CatalogItem]:
  return [CatalogItem(id=scene.id, name=scene.name, description=scene.description) for scene in list_scenes()]


@app.get("/api/demographics", response_model=list[CatalogItem])
async def demographics() -> list[CatalogItem]:
  return [
    CatalogItem(id=demographic.id, name=demographic.name, description=demographic.description)
    for demographic in list_demographics()
  ]


@app.get("/uploads/{filename}")
async def uploaded_file(filename: str, current: Settings = Depends(get_settings)) -> FileResponse:
  return _stored_file(current.upload_dir, filename)


@app.get("/outputs/{filename}")
async def generated_file(filename: str, current: Settings = Depends(get_settings)) -> FileResponse:
  return _stored_file(current.output_dir, filename)


def _stored_file(root_dir: Path, filename: str) -> FileResponse:
  path = root_dir / filename
  if safe_filename(filename) != filename or not path.is_file():
    raise HTTPException(status_code=404, detail="File not found")
  return FileResponse(path)


@app.post(
  "/api/upload",
  response_model=GenerationResponse,
  response_model_exclude_none=True,
  responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_product_image(
  product_image: Optional[UploadFile] = File(None, alias="productImage"),
  scene_type: Optional[str] = Form(None, alias="sceneType"),
  demographic: Optional[str] = Form(None),
  current: Settings = Depends(get_settings),
  gemini: GeminiService = Depends(get_gemini_service),
) -> GenerationResponse:
  # One byte past the limit is enough for validation to reject it.
  data = await product_image.read(current.max_upload_bytes + 1) if product_image is not None else None

  try:
    upload = validate_upload(
      filename=product_image.filename if product_image is not None else None,
      content_type=product_image.content_type if product_image is not None else None,
      data=data,
      max_bytes=current.max_upload_bytes,
    )
  except UploadValidationError as error:
    logger.warning(f"Rejected upload: {error}")
    raise HTTPException(status_code=400, detail=str(error)) from error

  requested_scene = scene_type or DEFAULT_SCENE
  requested_demographic = demographic or DEFAULT_DEMOGRAPHIC

  try:
    upload_path, state = await run_in_threadpool(
      _store_and_generate,
      upload=upload,
      scene_type=requested_scene,
      demographic=requested_demographic,
      settings=current,
      gemini=gemini,
    )
  except (GeminiServiceError, StorageError) as error:
    logger.error(f"Upload error: {error}", exc_info=True)
    raise HTTPException(status_code=500, detail=str(error)) from error
  except Exception as error:  # pragma: no cover
    logger.error(f"Unexpected error: {error}", exc_info=True)
    raise HTTPException(status_code=500, detail=str(error) or "Image generation failed") from error

  return GenerationResponse(
    original_image=to_public_url(current.upload_dir, "uploads", upload_path),
    generated_image=to_public_url(current.output_dir, "outputs", Path(state["generated_image_path"])),
    model=gemini.image_model,
    scene_type=requested_scene,
    demographic=requested_demographic,
    prompt=state["prompt"],
    notes=state.get("model_text") or None,
  )


def _store_and_generate(
  *,
  upload: ValidatedUpload,
  scene_type: str,
  demographic: str,
  settings: Settings,
  gemini: GeminiService,
) -> tuple[Path, WorkflowState]:
  """Store the upload and run the workflow; the upload is removed if either step fails."""
  upload_path: Path | None = None
  try:
    upload_path = save_upload(settings.upload_dir, upload.filename, upload.data)
    state = run_workflow(
      upload_path=upload_path,
      upload_mime_type=upload.content_type,
      scene_type=scene_type,
      demographic=demographic,
      settings=settings,
      gemini=gemini,
    )
  except Exception:
    remove_file(upload_path)
    raise
  return upload_path, state


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
  return JSONResponse(
    status_code=exc.status_code,
    content=ErrorResponse(error=str(exc.detail)).model_dump(),
  )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
  messages = "; ".join(str(item.get("msg", "")) for item in exc.errors())
  return JSONResponse(
    status_code=400,
    content=ErrorResponse(error=messages or "Invalid request").model_dump(),
  )


if settings.public_dir.is_dir():
  app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")


def main() -> None:
  logger.info(f"Server running at http://localhost:{settings.backend_port}")
  uvicorn.run(app, host=settings.backend_host, port=settings.backend_port)


if __name__ == "__main__":
  main()
