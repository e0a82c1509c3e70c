"""
API endpoints for user accounts.

Provides the current user's profile, user lookup and search, administrative
role changes and deletion, and profile image uploads.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, File, HTTPException, Query, Response, UploadFile, status

from musichub.core.database.entities.users import UserRole
from musichub.core.logging_config import get_logger
from musichub.core.models.io.users import ChangeRoleRequest, UserDto, UserSearchResult
from musichub.server.services.deps import AdminClaims, CurrentClaims, UserServiceDep

logger = get_logger(__name__)

router = APIRouter(tags=["users"])


@router.get(
    "/me",
    response_model=UserDto,
    summary="Current User",
    description="Retrieve the profile of the authenticated user.",
    responses={
        401: {"description": "Missing or invalid token"},
        404: {"description": "User no longer exists"},
    },
)
async def get_me(claims: CurrentClaims, service: UserServiceDep) -> UserDto:
    user = await service.get_by_id(claims.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get(
    "/search",
    response_model=List[UserSearchResult],
    summary="Search Users",
    description="Case-insensitive username search. Queries shorter than two characters return an empty list.",
)
async def search_users(service: UserServiceDep, q: Optional[str] = Query(default=None)) -> List[UserSearchResult]:
    """
    Search users by username.

    - **q**: Part of the username to look for.
    """
    return await service.search_users(q)


@router.get(
    "",
    response_model=List[UserDto],
    summary="List Users",
    description="List all users. Admin only.",
    responses={403: {"description": "Caller is not an admin"}},
)
async def list_users(_: AdminClaims, service: UserServiceDep) -> List[UserDto]:
    return await service.get_all()


@router.get(
    "/{user_id}",
    response_model=UserDto,
    summary="Get User",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: int, service: UserServiceDep) -> UserDto:
    user = await service.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
    return user


@router.put(
    "/{user_id}/role",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Change Role",
    description="Change a user's role. Admin only.",
    responses={400: {"description": "User not found"}, 403: {"description": "Caller is not an admin"}},
)
async def change_role(user_id: int, body: ChangeRoleRequest, claims: AdminClaims, service: UserServiceDep) -> Response:
    ok, error = await service.change_role(user_id, body.role)
    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    logger.info(f"Admin {claims.user_id} changed role of user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete User",
    description="Delete a user and the playlists they host. Admin only.",
    responses={400: {"description": "User not found"}, 403: {"description": "Caller is not an admin"}},
)
async def delete_user(user_id: int, claims: AdminClaims, service: UserServiceDep) -> Response:
    ok, error = await service.delete(user_id)
    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    logger.info(f"Admin {claims.user_id} deleted user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{user_id}/profile-image",
    response_model=UserDto,
    summary="Upload Profile Image",
    description="Upload a profile image (jpg, jpeg, png, gif, webp; at most 5 MB).",
    responses={
        400: {"description": "No file, invalid type or too large"},
        401: {"description": "Missing or invalid token"},
        403: {"description": "Not the owner and not an admin or host"},
        404: {"description": "User not found"},
    },
)
async def upload_profile_image(
    user_id: int,
    claims: CurrentClaims,
    service: UserServiceDep,
    file: Optional[UploadFile] = File(default=None),
) -> UserDto:
    """
    Upload a profile image for a user.

    Users can change their own image; admins and hosts can change anyone's.

    - **user_id**: Owner of the image.
    - **file**: Multipart image file.
    """
    if claims.user_id != user_id and claims.role not in (UserRole.ADMIN, UserRole.HOST):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to change this profile image")
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")

    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")
    try:
        user = await service.update_profile_image(user_id, file.filename, content)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
    return user
