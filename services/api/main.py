from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from content_schema_drafter.config import load_settings
from content_schema_drafter.errors import (
    InvalidFieldName,
    MissingRequiredAttribute,
    TemplateGenerationError,
    UnsupportedFieldKind,
)
from content_schema_drafter.generator import GenerationResult, TemplateGenerator
from content_schema_drafter.logging_config import set_trace_id, setup_logging
from content_schema_drafter.models.validation import ValidationReport
from content_schema_drafter.registry import load_registry
from content_schema_drafter.validator import validate_template

logger = logging.getLogger(__name__)


class GenerateTemplateRequest(BaseModel):
    name: str
    label: str
    description: str | None = None
    sections: list[str] = Field(default_factory=list)
    is_content: bool = False
    multilanguage: bool = True
    is_multiple: bool = False
    include_cta: bool = False
    max_features: int = Field(default=6, ge=1)
    max_gallery_images: int = Field(default=12, ge=1)
    is_exclude_sections: bool | None = None


class MarkupRequest(BaseModel):
    markup: str
    metadata: dict[str, Any] | list[Any] | None = Field(default=None, description="Optional design metadata node tree")
    name: str | None = None
    label: str | None = None
    description: str | None = None
    is_exclude_sections: bool | None = None


class JsonRequest(BaseModel):
    payload: dict[str, Any]
    name: str
    label: str | None = None
    description: str | None = None
    is_exclude_sections: bool | None = None


class PromptRequest(BaseModel):
    prompt: str
    name: str | None = None
    label: str | None = None
    is_exclude_sections: bool | None = None


class GenerateFieldRequest(BaseModel):
    name: str
    label: str
    field_type: str
    multilanguage: bool | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    context: str = ""


class ValidateTemplateRequest(BaseModel):
    template_json: dict[str, Any]


settings = load_settings()

setup_logging(
    environment=settings.environment,
    project_id=settings.project_id,
    use_cloud_logging=settings.use_cloud_logging,
)

app = FastAPI(title="Content Schema Drafter API", version="0.1.0")

generator = TemplateGenerator(
    load_registry(settings.registry_path),
    exclude_layout_sections=settings.exclude_layout_sections,
)

FIELD_ERRORS = (UnsupportedFieldKind, InvalidFieldName, MissingRequiredAttribute)


@app.middleware("http")
async def trace_context(request: Request, call_next):
    header = request.headers.get("X-Cloud-Trace-Context")
    trace = header.split("/", 1)[0] if header else None
    if trace and settings.project_id:
        trace = f"projects/{settings.project_id}/traces/{trace}"
    set_trace_id(trace)
    return await call_next(request)


async def _run(func, *args: Any, **kwargs: Any) -> GenerationResult:
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    except TemplateGenerationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except FIELD_ERRORS as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.post("/v1/templates:generate")
async def generate_template(request: GenerateTemplateRequest) -> dict[str, Any]:
    result = await _run(
        generator.generate_template,
        request.name,
        request.label,
        sections=request.sections,
        description=request.description,
        is_content=request.is_content,
        multilanguage=request.multilanguage,
        is_multiple=request.is_multiple,
        include_cta=request.include_cta,
        max_features=request.max_features,
        max_gallery_images=request.max_gallery_images,
        is_exclude_sections=request.is_exclude_sections,
    )
    return result.model_dump()


@app.post("/v1/templates:from-markup")
async def generate_from_markup(request: MarkupRequest) -> dict[str, Any]:
    result = await _run(
        generator.generate_from_markup,
        request.markup,
        request.metadata,
        name=request.name,
        label=request.label,
        description=request.description,
        is_exclude_sections=request.is_exclude_sections,
    )
    return result.model_dump()


@app.post("/v1/templates:from-json")
async def generate_from_json(request: JsonRequest) -> dict[str, Any]:
    result = await _run(
        generator.generate_from_json,
        request.payload,
        request.name,
        request.label,
        description=request.description,
        is_exclude_sections=request.is_exclude_sections,
    )
    return result.model_dump()


@app.post("/v1/templates:from-prompt")
async def generate_from_prompt(request: PromptRequest) -> dict[str, Any]:
    result = await _run(
        generator.generate_from_prompt,
        request.prompt,
        request.name,
        request.label,
        is_exclude_sections=request.is_exclude_sections,
    )
    return result.model_dump()


@app.post("/v1/fields:generate")
async def generate_field(request: GenerateFieldRequest) -> dict[str, Any]:
    try:
        field = generator.generate_field(
            request.name,
            request.label,
            request.field_type,
            multilanguage=request.multilanguage,
            attributes=request.attributes,
            context=request.context,
        )
    except FIELD_ERRORS as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return field.to_dict()


@app.post("/v1/templates:validate", response_model=ValidationReport)
async def validate(request: ValidateTemplateRequest) -> ValidationReport:
    report = validate_template(request.template_json, generator.registry)
    if not report.valid:
        logger.info("Template failed validation", extra={"errors": len(report.errors)})
    return report


@app.get("/v1/field-types")
async def list_field_types() -> dict[str, Any]:
    return {"field_types": generator.list_field_types()}


@app.get("/v1/field-types/{kind}/examples")
async def field_type_examples(kind: str) -> dict[str, Any]:
    try:
        examples = generator.field_type_examples(kind)
    except UnsupportedFieldKind as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"type": kind, "examples": examples}


@app.get("/health")
async def healthcheck() -> JSONResponse:
    return JSONResponse({"status": "ok", "field_types": len(generator.registry)})
