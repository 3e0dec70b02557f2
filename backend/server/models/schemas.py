from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.user import User
from domain.watchlist import Comment, Watchlist


class WatchlistCreateRequest(BaseModel):
    # Clients send `listName`; snake_case is accepted too.
    model_config = ConfigDict(populate_by_name=True)

    list_name: Optional[Any] = Field(default=None, alias="listName", description="List name (must not be blank)")


class WatchlistUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    list_name: Optional[Any] = Field(default=None, alias="listName", description="New list name (optional)")
    # Left untyped so a non-boolean is rejected by the service with a 400.
    is_public: Optional[Any] = Field(default=None, alias="isPublic", description="Visibility flag (optional)")


class CommentRequest(BaseModel):
    comment: Optional[str] = Field(default=None, description="Comment text")


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    password: Optional[str] = None


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    comment_id: str
    user_id: str
    username: str
    text: str
    date_posted: Optional[datetime] = None

    @classmethod
    def from_domain(cls, comment: Comment) -> "CommentOut":
        return cls.model_validate(comment, from_attributes=True)


class WatchlistOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    list_id: str
    owner_user_id: str
    list_name: str
    is_public: bool = False
    collaborators: List[str] = Field(default_factory=list)
    likes: List[str] = Field(default_factory=list)
    comments: List[CommentOut] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, watchlist: Watchlist) -> "WatchlistOut":
        return cls.model_validate(watchlist, from_attributes=True)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    username: str
    email: str
    liked_lists: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls.model_validate(user, from_attributes=True)


class MessageResponse(BaseModel):
    message: str


class WatchlistEnvelope(BaseModel):
    message: str
    watchlist: WatchlistOut


class CommentEnvelope(BaseModel):
    message: str
    comment: CommentOut


class LikeResponse(BaseModel):
    message: str
    action: str


class RegisterResponse(BaseModel):
    message: str
    user: UserOut


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ErrorResponse(BaseModel):
    error: str
