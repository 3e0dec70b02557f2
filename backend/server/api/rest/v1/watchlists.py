from __future__ import annotations

from fastapi import APIRouter, Depends

from application.watchlist import WatchlistService
from domain.errors import AuthorizationError
from domain.user import AuthenticatedUser
from server.api.rest.dependencies import get_current_user, get_watchlist_service
from server.models.schemas import (
    CommentEnvelope,
    CommentOut,
    CommentRequest,
    LikeResponse,
    WatchlistCreateRequest,
    WatchlistEnvelope,
    WatchlistOut,
    WatchlistUpdateRequest,
)

router = APIRouter(prefix="/api/v1", tags=["watchlists-v1"])


def _envelope(result: dict) -> WatchlistEnvelope:
    return WatchlistEnvelope(
        message=result["message"],
        watchlist=WatchlistOut.from_domain(result["watchlist"]),
    )


@router.post("/watchlists", status_code=201, response_model=WatchlistEnvelope)
async def create_watchlist(
    req: WatchlistCreateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistEnvelope:
    watchlist = await service.create_watchlist(owner_user_id=user.user_id, list_name=req.list_name or "")
    return WatchlistEnvelope(
        message="watchlist creation successful.",
        watchlist=WatchlistOut.from_domain(watchlist),
    )


@router.get("/watchlists/{list_id}", response_model=WatchlistOut)
async def get_watchlist(
    list_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistOut:
    watchlist = await service.get_watchlist(user_id=user.user_id, list_id=list_id)
    if watchlist is None:
        raise AuthorizationError("User does not have permission to get this watchlist")
    return WatchlistOut.from_domain(watchlist)


@router.put("/watchlists/{list_id}", response_model=WatchlistEnvelope)
async def update_watchlist(
    list_id: str,
    req: WatchlistUpdateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistEnvelope:
    result = await service.update_watchlist(
        user_id=user.user_id,
        list_id=list_id,
        list_name=req.list_name,
        is_public=req.is_public,
    )
    return _envelope(result)


@router.patch("/watchlists/{list_id}/likes", response_model=LikeResponse)
async def like_watchlist(
    list_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
) -> LikeResponse:
    action = await service.like_watchlist(user_id=user.user_id, list_id=list_id)
    return LikeResponse(message=f"List has been successfully {action}", action=action)


@router.put("/watchlists/{list_id}/comments", response_model=CommentEnvelope)
async def comment_on_watchlist(
    list_id: str,
    req: CommentRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
) -> CommentEnvelope:
    result = await service.comment_on_watchlist(
        user_id=user.user_id,
        username=user.username,
        list_id=list_id,
        comment=req.comment,
    )
    return CommentEnvelope(message=result["message"], comment=CommentOut.from_domain(result["comment"]))


@router.delete("/watchlists/{list_id}/comments/{comment_id}", response_model=WatchlistEnvelope)
async def delete_comment_on_watchlist(
    list_id: str,
    comment_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistEnvelope:
    # Authenticated, but the service does not restrict who may delete.
    _ = user
    result = await service.delete_comment_on_watchlist(list_id=list_id, comment_id=comment_id)
    return _envelope(result)


@router.put("/watchlists/{list_id}/collaborators/{collaborator_id}", response_model=WatchlistEnvelope)
async def add_collaborator(
    list_id: str,
    collaborator_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistEnvelope:
    result = await service.add_collaborator(
        owner_user_id=user.user_id,
        list_id=list_id,
        collaborator_user_id=collaborator_id,
    )
    return _envelope(result)


@router.delete("/watchlists/{list_id}/collaborators/{collaborator_id}", response_model=WatchlistEnvelope)
async def remove_collaborator(
    list_id: str,
    collaborator_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistEnvelope:
    result = await service.remove_collaborator(
        owner_user_id=user.user_id,
        list_id=list_id,
        collaborator_user_id=collaborator_id,
    )
    return _envelope(result)
