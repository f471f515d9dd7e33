# services/university_directory/api/auth_router.py
from fastapi import APIRouter, Depends

from services.university_directory.controllers.auth_service import AuthService, get_auth_service
from services.university_directory.schemas.auth import LoginRequest, LoginResponse
from shared.exceptions import AuthenticationError

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    result = await service.login(payload)
    if result is None:
        raise AuthenticationError("Invalid email or password")
    return result
