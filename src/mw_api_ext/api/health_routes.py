from fastapi import APIRouter
from ..config import settings
from .dependencies import get_mw_client

router = APIRouter(tags=["health"])

@router.get("/health")
def health():
    return {
        "status": "ok",
        "mw_api": str(settings.mw_api_base_url),
        "default_page": settings.default_page_name,
        "signed_requests": get_mw_client().signs_requests,
    }
