from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.models.profile import Profile

router = APIRouter()


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Check if service is ready (database reachable and profiles table readable)."""
    try:
        await db.execute(select(Profile.id).limit(1))
        return {"status": "ready", "database": "connected"}
    except SQLAlchemyError as e:
        return {"status": "not_ready", "database": "disconnected", "error": str(e)}
