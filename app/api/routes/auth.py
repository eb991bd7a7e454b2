"""
Authentication routes: registration and login.
"""

from fastapi import APIRouter, status

from app.api.dependencies import AuthServiceDep
from app.api.errors import raise_service_error
from app.schemas.auth import LoginRequest, LoginResponse, MessageResponse, RegisterRequest

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, auth: AuthServiceDep):
    """
    Register a new account.

    **Responses**:
    - 201: account created
    - 400: name or password missing, or name length outside 2-50
    - 409: name already taken
    """
    result = auth.register(data)
    if result.error:
        raise_service_error(result.error)
    return {"message": f"User {result.account.name} registered successfully"}


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, auth: AuthServiceDep):
    """
    Log in and receive a bearer token valid for one hour.

    **Responses**:
    - 200: token issued
    - 400: name or password missing
    - 404: unknown name
    - 401: wrong password
    """
    result = auth.login(data)
    if result.error:
        raise_service_error(result.error)
    return {"message": f"Login {result.account.name} successful", "token": result.token}
