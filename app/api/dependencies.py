"""
Shared FastAPI dependencies.
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from app.core.database import get_session
from app.services.auth_service import AuthService
from app.services.leave_service import LeaveService

SessionDep = Annotated[Session, Depends(get_session)]


def get_leave_service(session: SessionDep) -> LeaveService:
    return LeaveService(session)


def get_auth_service(session: SessionDep) -> AuthService:
    return AuthService(session)


LeaveServiceDep = Annotated[LeaveService, Depends(get_leave_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
