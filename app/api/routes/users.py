"""
Role probe routes.

Let clients confirm that a token carries the expected role.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.permissions import require_admin, require_user
from app.core.security import TokenData
from app.schemas.auth import MessageResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/user", response_model=MessageResponse)
def user_route(current_user: Annotated[TokenData, Depends(require_user)]):
    return {"message": "User route is working"}


@router.get("/admin", response_model=MessageResponse)
def admin_route(current_user: Annotated[TokenData, Depends(require_admin)]):
    return {"message": "Admin route is working"}
