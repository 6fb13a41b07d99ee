# landlord_hub/routers/guidance.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_gateway
from ..schemas import GuidanceIn, NarrativeOut
from ..services.ai_gateway import GUIDANCE_PROMPTS, AIGateway, AIServiceError

router = APIRouter(prefix="/guidance", tags=["guidance"])


@router.get("/prompts", response_model=list[str])
def example_prompts():
    return list(GUIDANCE_PROMPTS)


@router.post("", response_model=NarrativeOut)
async def ask(payload: GuidanceIn, gateway: AIGateway = Depends(get_gateway)):
    try:
        text = await gateway.get_guidance(payload.prompt)
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"text": text}
