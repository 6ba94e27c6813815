from __future__ import annotations
from typing import Any, Dict, List, Literal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..formatter import Block, format_content
from ..rendering import render_html, render_text
from ..settings import settings

router = APIRouter(prefix="/interventions", tags=["interventions"])


class FormatRequest(BaseModel):
	content: str


class FormatResponse(BaseModel):
	blocks: List[Block]


class RenderRequest(BaseModel):
	content: str
	output: Literal["html", "text"] = "html"


def _checked_content(content: str) -> str:
	if len(content) > settings.max_content_chars:
		raise HTTPException(
			status_code=413,
			detail=f"content exceeds {settings.max_content_chars} characters",
		)
	return content


@router.post("/format", response_model=FormatResponse)
def format_intervention(req: FormatRequest):
	return FormatResponse(blocks=format_content(_checked_content(req.content)))


@router.post("/render")
def render_intervention(req: RenderRequest) -> Dict[str, Any]:
	blocks = format_content(_checked_content(req.content))
	rendered = render_html(blocks) if req.output == "html" else render_text(blocks)
	return {"output": req.output, "rendered": rendered}
