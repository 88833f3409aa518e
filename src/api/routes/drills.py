"""Drill extraction endpoints."""

import json
import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException
from pydantic import BaseModel, Field

from src.api.config import settings
from src.pipeline.extract import extract_drill_from_content
from src.pipeline.normalize import normalize_drill_schema
from src.pipeline.sanitize import sanitize_json_text
from src.schemas.drill import DrillModel, DrillSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/drills", tags=["drills"])


class ExtractRequest(BaseModel):
    content: str = Field(..., description="Raw assistant message text")


class ExtractResponse(DrillModel):
    clean_content: str = Field(..., description="Message text safe to display")
    drill: DrillSchema | None = Field(None, description="First drill found")
    drills: list[DrillSchema] = Field(
        default_factory=list, description="All drills in document order"
    )
    count: int = 0


class SanitizeRequest(BaseModel):
    text: str


class SanitizeResponse(BaseModel):
    text: str
    parseable: bool


@router.post("/extract", response_model=ExtractResponse)
async def extract_drills(body: ExtractRequest):
    """Extract drill diagrams from an assistant message."""
    if len(body.content) > settings.max_content_chars:
        raise HTTPException(
            status_code=413,
            detail=f"Content exceeds {settings.max_content_chars} characters",
        )

    result = extract_drill_from_content(body.content)
    return ExtractResponse(
        clean_content=result.clean_content,
        drill=result.drill,
        drills=result.drills,
        count=len(result.drills),
    )


@router.post("/normalize", response_model=DrillSchema)
async def normalize_drill(body: Any = Body(...)):
    """Normalize one already-parsed drill object."""
    drill = normalize_drill_schema(body)
    if drill is None:
        raise HTTPException(status_code=422, detail="Not a drill-shaped object")
    return drill


@router.post("/sanitize", response_model=SanitizeResponse)
async def sanitize_text(body: SanitizeRequest):
    """Apply the JSON text repairs and report whether the result parses."""
    cleaned = sanitize_json_text(body.text)
    try:
        json.loads(cleaned)
        parseable = True
    except (ValueError, RecursionError):
        parseable = False
    return SanitizeResponse(text=cleaned, parseable=parseable)
