"""
Auth collaborator for the SlothBoost web backend.

Identity comes from the X-User-Id header set by the fronting auth layer.
No header means an anonymous visitor: the question flow still works, but
saving and history are unavailable.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException


@dataclass(frozen=True)
class CurrentUser:
    id: str


async def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> Optional[CurrentUser]:
    """Dependency returning the signed-in user, or None."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return CurrentUser(id=x_user_id.strip())


async def require_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> CurrentUser:
    """Dependency for endpoints that need a signed-in user."""
    user = await get_current_user(x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Sign in required")
    return user
