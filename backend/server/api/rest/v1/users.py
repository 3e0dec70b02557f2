from __future__ import annotations

from fastapi import APIRouter, Depends

from application.users import UserService
from domain.user import AuthenticatedUser
from infrastructure.security import JwtTokenCodec
from server.api.rest.dependencies import get_current_user, get_token_codec, get_user_service
from server.models.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserOut,
)

router = APIRouter(prefix="/api/v1", tags=["users-v1"])


@router.post("/users/register", status_code=201, response_model=RegisterResponse)
async def register(
    req: RegisterRequest,
    service: UserService = Depends(get_user_service),
) -> RegisterResponse:
    user = await service.create_user(
        username=req.username or "",
        email=req.email or "",
        password=req.password or "",
    )
    return RegisterResponse(message="Registration successful.", user=UserOut.from_domain(user))


@router.post("/users/login", response_model=TokenResponse)
async def login(
    req: LoginRequest,
    service: UserService = Depends(get_user_service),
    codec: JwtTokenCodec = Depends(get_token_codec),
) -> TokenResponse:
    user = await service.authenticate(username=req.username, password=req.password)
    return TokenResponse(access_token=codec.issue(user))


@router.get("/users/me", response_model=UserOut)
async def read_me(
    user: AuthenticatedUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> UserOut:
    return UserOut.from_domain(await service.get_user(user_id=user.user_id))


@router.post("/users/change-password", response_model=MessageResponse)
async def change_password(
    req: ChangePasswordRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    await service.change_password(user_id=user.user_id, password=req.password or "")
    return MessageResponse(message="Password successfully changed.")


@router.delete("/users/me", response_model=MessageResponse)
async def delete_me(
    user: AuthenticatedUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    await service.delete_user(user_id=user.user_id)
    return MessageResponse(message="User successfully deleted.")
