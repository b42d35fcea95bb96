"""
User Routes: group membership and edit counts
"""

from fastapi import APIRouter, Depends, Query
from typing import Annotated, Optional

from .dependencies import get_extensions
from .models import GroupUsersResponse, EditCountResponse
from ..auth.security import require_scopes
from ..auth.models import CallerContext
from ..wiki.extensions import ApiExtensions

router = APIRouter(tags=["users"])


@router.get(
    "/groups/{group}/users",
    response_model=GroupUsersResponse,
    summary="List the members of a user group (first 500)",
)
async def group_users(
    group: str,
    caller: Annotated[CallerContext, Depends(require_scopes("page_read"))],
    extensions: Annotated[ApiExtensions, Depends(get_extensions)],
) -> GroupUsersResponse:
    users = await extensions.get_users_in_group(group)
    return GroupUsersResponse(group=group, users=users)


@router.get(
    "/users/{user_name}/edit-count",
    response_model=EditCountResponse,
    summary="Count a user's edits in a time range",
)
async def edit_count(
    user_name: str,
    caller: Annotated[CallerContext, Depends(require_scopes("page_read"))],
    extensions: Annotated[ApiExtensions, Depends(get_extensions)],
    start: Optional[str] = Query(default=None, description="Oldest timestamp, e.g. 2024-01-01T00:00:00Z"),
    end: Optional[str] = Query(default=None, description="Newest timestamp"),
) -> EditCountResponse:
    total = await extensions.get_total_edits_by_user(user_name, start, end)
    return EditCountResponse(user=user_name, start=start, end=end, total=total)
