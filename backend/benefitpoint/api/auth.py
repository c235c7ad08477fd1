"""Login stub. There are no user accounts; every login proceeds to the dashboard."""
import logging
from typing import Optional
from fastapi import APIRouter

from benefitpoint.schemas.base import CamelModel

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


@router.post("/login")
def login(payload: Optional[LoginRequest] = None):
    username = payload.username if payload else None
    logger.info("Login stub used by %s", username or "anonymous")
    return {"success": True, "redirectTo": "/dashboard"}
