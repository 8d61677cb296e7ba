"""
Auth API routes.
"""

from fastapi import APIRouter, Depends, Response
from typing import Optional
import logging

from ..services.auth import CurrentUser, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sign-out", status_code=204)
async def sign_out(user: Optional[CurrentUser] = Depends(get_current_user)):
    """Sign out. Identity lives with the client, so nothing is cleared here."""
    if user is not None:
        logger.info(f"User {user.id} signed out")
    return Response(status_code=204)
