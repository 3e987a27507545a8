"""Profile API routes.

Static paths (``search``, ``batch``, ``me``) are declared before the
``{profile_id}`` paths so they are never captured as ids. The ``/me``
routes are the canonical way to change a profile; the id-based mutation
routes are kept as deprecated aliases that only accept the caller's own id.
"""

from typing import Any

from fastapi import APIRouter, Body, File, Query, UploadFile, status

from src.api.deps import CurrentUser, ProfileServiceDep
from src.schemas.profile import (
    AvatarResponse,
    AvatarUpload,
    BatchRequest,
    ProfileCreate,
    ProfileResponse,
    ProfileSummary,
    ProfileUpdate,
)

router = APIRouter(prefix="/profiles", tags=["profiles"])


async def _read_upload(file: UploadFile | None) -> AvatarUpload | None:
    if file is None:
        return None
    return AvatarUpload(
        data=await file.read(),
        content_type=file.content_type,
        filename=file.filename,
    )


@router.get(
    "/search",
    response_model=list[ProfileSummary],
    summary="Search profiles",
    description="Case-insensitive substring search over username, first and last name.",
    responses={400: {"description": "Query missing or empty"}},
)
async def search_profiles(
    service: ProfileServiceDep,
    query: str | None = Query(default=None, description="Text to search for"),
    limit: int | None = Query(default=None, description="Maximum number of results"),
) -> list[ProfileSummary]:
    """Search profiles by username, first or last name."""
    return await service.search(query, limit)


@router.post(
    "/batch",
    response_model=list[ProfileSummary],
    summary="Get profiles by ids",
    description="Returns summaries for the given ids; unknown ids are omitted.",
    responses={400: {"description": "userIds missing or not a list"}},
)
async def get_profiles_batch(
    service: ProfileServiceDep,
    body: Any = Body(default=None, description="Object carrying a `userIds` list"),
) -> list[ProfileSummary]:
    """Get summaries for a batch of profile ids.

    Any body that is not a JSON object counts as missing `userIds`.
    """
    request = BatchRequest.model_validate(body) if isinstance(body, dict) else BatchRequest()
    return await service.get_batch(request.user_ids)


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current user's profile",
    description="Returns the authenticated user's profile information.",
)
async def get_my_profile(user: CurrentUser, service: ProfileServiceDep) -> ProfileResponse:
    """Get the authenticated user's profile.

    Raises:
        NotFoundError: 404 if the caller has no profile yet.
    """
    return await service.get_me(user.user_id)


@router.post(
    "/me",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create current user's profile",
    description="Creates the authenticated user's profile with a generated default avatar.",
    responses={
        400: {"description": "Username missing"},
        409: {"description": "Profile exists or username taken"},
    },
)
async def create_my_profile(
    user: CurrentUser,
    service: ProfileServiceDep,
    data: ProfileCreate | None = Body(default=None),
) -> ProfileResponse:
    """Create the authenticated user's profile."""
    return await service.create_for_owner(user.user_id, data or ProfileCreate())


@router.patch(
    "/me",
    response_model=ProfileResponse,
    summary="Update current user's profile",
    description="Updates the authenticated user's profile with the provided fields.",
    responses={404: {"description": "Profile not found"}, 409: {"description": "Username taken"}},
)
async def update_my_profile(
    data: ProfileUpdate,
    user: CurrentUser,
    service: ProfileServiceDep,
) -> ProfileResponse:
    """Update the authenticated user's profile."""
    return await service.update_profile(user.user_id, user.user_id, data)


@router.api_route(
    "/me/avatar",
    methods=["PATCH", "POST"],
    response_model=AvatarResponse,
    summary="Replace current user's avatar",
    description="Uploads a new avatar image (multipart field `avatar`).",
    responses={400: {"description": "File missing or empty"}, 404: {"description": "Profile not found"}},
)
async def update_my_avatar(
    user: CurrentUser,
    service: ProfileServiceDep,
    avatar: UploadFile | None = File(default=None, description="Avatar image"),
) -> AvatarResponse:
    """Replace the authenticated user's avatar."""
    avatar_url = await service.replace_avatar(user.user_id, user.user_id, await _read_upload(avatar))
    return AvatarResponse(avatar_url=avatar_url)


@router.get(
    "/{profile_id}",
    response_model=ProfileResponse,
    summary="Get a profile",
    responses={404: {"description": "Profile not found"}},
)
async def get_profile(profile_id: str, service: ProfileServiceDep) -> ProfileResponse:
    """Get any profile by id."""
    return await service.get_by_id(profile_id)


@router.patch(
    "/{profile_id}",
    response_model=ProfileResponse,
    summary="Update a profile",
    description="Alias of `PATCH /profiles/me`; the id must be the caller's own.",
    deprecated=True,
    responses={403: {"description": "Not the profile owner"}, 404: {"description": "Profile not found"}},
)
async def update_profile(
    profile_id: str,
    data: ProfileUpdate,
    user: CurrentUser,
    service: ProfileServiceDep,
) -> ProfileResponse:
    """Update a profile addressed by id."""
    return await service.update_profile(user.user_id, profile_id, data)


@router.post(
    "/{profile_id}/avatar",
    response_model=AvatarResponse,
    summary="Replace a profile's avatar",
    description="Alias of `PATCH /profiles/me/avatar`; the id must be the caller's own.",
    deprecated=True,
    responses={403: {"description": "Not the profile owner"}, 404: {"description": "Profile not found"}},
)
async def update_avatar(
    profile_id: str,
    user: CurrentUser,
    service: ProfileServiceDep,
    avatar: UploadFile | None = File(default=None, description="Avatar image"),
) -> AvatarResponse:
    """Replace the avatar of a profile addressed by id."""
    avatar_url = await service.replace_avatar(user.user_id, profile_id, await _read_upload(avatar))
    return AvatarResponse(avatar_url=avatar_url)
