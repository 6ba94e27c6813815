from __future__ import annotations
from typing import Any, Dict

from fastapi import APIRouter

from ..formatter import format_content
from ..recommendations import (
	FollowUpRequest,
	RecommendationRequest,
	follow_up_assistance,
	generate_recommendations,
)
from ..rendering import blocks_to_json

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post("/generate")
async def generate(req: RecommendationRequest) -> Dict[str, Any]:
	result = await generate_recommendations(req)
	payload = result.model_dump()
	payload["blocks"] = blocks_to_json(format_content(result.recommendations))
	return payload


@router.post("/follow-up")
async def follow_up(req: FollowUpRequest) -> Dict[str, Any]:
	result = await follow_up_assistance(req)
	payload = result.model_dump()
	payload["blocks"] = blocks_to_json(format_content(result.assistance))
	return payload
