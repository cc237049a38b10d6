"""Profile API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.profile import (
    GrantXpRequest,
    ProfileDetailResponse,
    ProfileResponse,
    TaskListResponse,
    TaskResponse,
    UpgradeStatRequest,
)
from core.rate_limit import limiter
from domain.entities.profile import Profile
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


def _detail(profile: Profile, service: ProfileService) -> ProfileDetailResponse:
    return ProfileDetailResponse(
        data=ProfileResponse.from_entity(profile, service.base_xp, service.scaling)
    )


@router.get(
    "",
    response_model=ProfileDetailResponse,
    summary="Get the current user's profile",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the authenticated user's profile, creating it on first access."""
    profile = await service.get_or_create(user.id)
    return _detail(profile, service)


@router.get(
    "/tasks",
    response_model=TaskListResponse,
    summary="List the current user's tasks",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_tasks(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> TaskListResponse:
    """Get the user's tasks with their XP rewards and completion state."""
    tasks = await service.list_tasks(user.id)
    return TaskListResponse(data=[TaskResponse.from_entity(task) for task in tasks])


@router.post(
    "/grant-xp",
    response_model=ProfileDetailResponse,
    summary="Complete a task",
    responses={
        200: {"description": "Task completed and XP applied"},
        404: {"model": ErrorResponse, "description": "Task not found"},
        409: {"model": ErrorResponse, "description": "Task already completed or concurrent write"},
        503: {"model": ErrorResponse, "description": "Profile storage unavailable"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def grant_xp(
    request: Request,
    body: GrantXpRequest,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Mark a task done and apply its XP reward. Each task pays out once."""
    profile = await service.grant_task_completion(user.id, body.task_id)
    return _detail(profile, service)


@router.post(
    "/upgrade-stat",
    response_model=ProfileDetailResponse,
    summary="Spend a level point",
    responses={
        200: {"description": "Stat upgraded"},
        400: {"model": ErrorResponse, "description": "Unknown stat or no level points"},
        409: {"model": ErrorResponse, "description": "Concurrent write"},
        503: {"model": ErrorResponse, "description": "Profile storage unavailable"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def upgrade_stat(
    request: Request,
    body: UpgradeStatRequest,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Spend one level point to raise strength, stamina or agility by one."""
    profile = await service.spend_level_point(user.id, body.stat)
    return _detail(profile, service)
