# webapp/api/admin.py

import asyncio
import logging
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, StrictBool
from typing import Dict

from database.db_manager import DatabaseManager
from resume.errors import NotFoundError
from webapp.auth import require_admin
from webapp.deps import get_db

router = APIRouter(dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


class ProStatusUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)
    is_pro: StrictBool = Field(alias="isPro")


def serialize_admin_user(user: Dict) -> Dict:
    return {
        "id": user['user_id'],
        "email": user['email'],
        "name": user.get('name'),
        "isPro": user['is_pro'],
        "resumeCount": user['resume_count'],
        "createdAt": user.get('created_at'),
        "generationCount": user.get('generation_count'),
    }


@router.get("/stats")
async def get_stats(db: DatabaseManager = Depends(get_db)) -> Dict:
    """Get overview statistics"""
    stats = await asyncio.to_thread(db.get_statistics)
    return {"stats": stats}


@router.get("/users")
async def list_users(db: DatabaseManager = Depends(get_db)) -> Dict:
    """List all accounts"""
    users = await asyncio.to_thread(db.list_users)
    return {"users": [serialize_admin_user(u) for u in users]}


@router.patch("/users")
async def update_pro_status(
    update: ProStatusUpdate,
    db: DatabaseManager = Depends(get_db)
) -> Dict:
    """Grant or revoke Pro for an account"""
    user = await asyncio.to_thread(db.set_pro_status, update.user_id, update.is_pro)
    if user is None:
        raise NotFoundError("User not found")

    logger.info(f"Admin set is_pro={update.is_pro} for {update.user_id}")
    return {"user": serialize_admin_user(user)}
