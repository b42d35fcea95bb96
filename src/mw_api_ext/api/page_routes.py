"""
Page Routes: edit a page, read its current wikitext

Security Model:
- Editing requires the `page_write` scope
- Reading requires the `page_read` scope
- MediaWiki failures are mapped to HTTP errors by the handlers in
  `core.errors`
"""

from fastapi import APIRouter, Depends, Query, status
from typing import Annotated, Optional

from .dependencies import get_extensions
from .models import EditPageRequest, EditPageResponse, PageTextResponse
from ..auth.security import require_scopes
from ..auth.models import CallerContext
from ..wiki.extensions import ApiExtensions

router = APIRouter(tags=["pages"])


@router.post(
    "/actions/edit-page",
    response_model=EditPageResponse,
    status_code=status.HTTP_200_OK,
    summary="Edit a MediaWiki page",
    description="Submits an `action=edit` request. Requires the `page_write` scope.",
)
async def edit_page(
    req: EditPageRequest,
    caller: Annotated[CallerContext, Depends(require_scopes("page_write"))],
    extensions: Annotated[ApiExtensions, Depends(get_extensions)],
) -> EditPageResponse:
    """
    Apply an edit on behalf of an authenticated caller.

    Returns
    -------
    EditPageResponse
        The server's edit outcome, passed through unmodified.
    """
    result = await extensions.edit_page(req.to_edit_info())
    return EditPageResponse(edit=result)


@router.get(
    "/pages/text",
    response_model=PageTextResponse,
    summary="Fetch the current wikitext of a page",
)
async def page_text(
    caller: Annotated[CallerContext, Depends(require_scopes("page_read"))],
    extensions: Annotated[ApiExtensions, Depends(get_extensions)],
    title: Optional[str] = Query(default=None, min_length=1),
) -> PageTextResponse:
    resolved = title or extensions.context.page_name
    text = await extensions.get_current_page_text(resolved)
    return PageTextResponse(title=resolved, text=text, exists=text is not None)
