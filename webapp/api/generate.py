# webapp/api/generate.py

from fastapi import APIRouter, Depends, Request
from typing import Dict

from resume.models import GenerationRequest
from resume.tailoring import GenerationOrchestrator
from webapp.auth import get_current_user
from webapp.deps import get_orchestrator, rate_limit

router = APIRouter()


@router.post("", dependencies=[Depends(rate_limit("generate"))])
async def generate_resume(
    request: Request,
    payload: GenerationRequest,
    user: dict = Depends(get_current_user),
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator)
) -> Dict:
    """Tailor a resume to a job description"""
    return await orchestrator.generate(
        user["user_id"],
        payload,
        is_disconnected=request.is_disconnected
    )
