# webapp/api/generations.py

import asyncio
from fastapi import APIRouter, Depends, Request
from typing import Dict

from database.db_manager import DatabaseManager
from resume.diff import compute_line_diff, diff_summary
from resume.errors import NotFoundError
from webapp.auth import get_current_user
from webapp.deps import get_db

router = APIRouter()


def serialize_generation(record: Dict) -> Dict:
    """Shape a stored generation for the API"""
    return {
        "id": record['generation_id'],
        "jobDescription": record['job_description'],
        "originalResume": record['original_resume'],
        "generatedResume": record['generated_resume'],
        "insights": record['insights'],
        "tone": record['tone'],
        "seniority": record['seniority'],
        "format": record['format'],
        "includeCoverLetter": record['include_cover_letter'],
        "createdAt": record['created_at'],
    }


@router.get("")
async def list_generations(
    request: Request,
    user: dict = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db)
) -> Dict:
    """Most recent generations of the current user"""
    limit = request.app.state.tailoring_config.history_limit
    records = await asyncio.to_thread(db.list_generations, user["user_id"], limit)
    return {"generations": [serialize_generation(r) for r in records]}


@router.get("/{generation_id}/diff")
async def get_generation_diff(
    generation_id: int,
    user: dict = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db)
) -> Dict:
    """Line diff between the submitted and the tailored resume"""
    record = await asyncio.to_thread(db.get_generation, user["user_id"], generation_id)
    if record is None:
        raise NotFoundError("Generation not found")

    segments = compute_line_diff(record['original_resume'], record['generated_resume'])
    return {
        "id": record['generation_id'],
        "summary": diff_summary(segments),
        "segments": [s.to_dict() for s in segments],
    }
