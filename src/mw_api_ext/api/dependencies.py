from functools import lru_cache

from ..wiki.api_client import MediaWikiClient
from ..wiki.context import build_context
from ..wiki.extensions import ApiExtensions


@lru_cache
def get_mw_client() -> MediaWikiClient:
    return MediaWikiClient()


@lru_cache
def get_extensions() -> ApiExtensions:
    client = get_mw_client()
    return ApiExtensions(client, build_context(client))
