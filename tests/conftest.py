"""
Shared fixtures.

Env bootstrap must run before any application import so that
``mw_api_ext.config.settings`` sees the test values.
"""

import os

os.environ.setdefault("MW_API_BASE_URL", "https://wiki.example.org/w/api.php")
os.environ.setdefault("JWT_CLIENT_TO_EXT_SECRET", "test-secret-client-to-ext-must-be-long-enough")
os.environ.pop("JWT_EXT_TO_MW_SECRET", None)

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402

from mw_api_ext.wiki.api_client import MediaWikiClient  # noqa: E402
from mw_api_ext.wiki.context import WikiContext  # noqa: E402
from mw_api_ext.wiki.extensions import ApiExtensions  # noqa: E402


@pytest.fixture
def mw_client():
    client = MagicMock(spec=MediaWikiClient)
    client.get = AsyncMock()
    client.post = AsyncMock()
    client.raw_get = AsyncMock()
    return client


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def context(notifier):
    return WikiContext(
        page_name="Current Page",
        token_provider=AsyncMock(return_value="csrf-token+\\"),
        notifier=notifier,
    )


@pytest.fixture
def extensions(mw_client, context):
    return ApiExtensions(mw_client, context)
