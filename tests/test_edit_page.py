import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from mw_api_ext.wiki.api_client import MediaWikiApiError, MediaWikiRequestError
from mw_api_ext.wiki.extensions import ApiExtensions
from mw_api_ext.wiki.handlers import StructuredHandler

EDIT_RESULT = {"result": "Success", "pageid": 42, "title": "Sandbox", "newrevid": 1001}


@pytest.mark.asyncio
async def test_transmitted_params_override_fixed_fields_and_drop_done(extensions, mw_client):
    mw_client.post.return_value = {"edit": EDIT_RESULT}

    await extensions.edit_page({
        "title": "Sandbox",
        "text": "hello",
        "summary": "test",
        "format": "xml",
        "action": "delete",
        "token": "stale",
        "done": lambda result: None,
    })

    mw_client.post.assert_awaited_once_with({
        "title": "Sandbox",
        "text": "hello",
        "summary": "test",
        "format": "json",
        "action": "edit",
        "token": "csrf-token+\\",
    })


@pytest.mark.asyncio
async def test_title_defaults_to_context_page(extensions, mw_client):
    mw_client.post.return_value = {"edit": EDIT_RESULT}

    await extensions.edit_page({"appendtext": "more"})

    sent = mw_client.post.await_args.args[0]
    assert sent["title"] == "Current Page"
    assert "done" not in sent


@pytest.mark.asyncio
@pytest.mark.parametrize("done", [
    None,
    lambda result: None,
    {"success": MagicMock()},
    {"success": MagicMock(), "apiError": MagicMock(), "unknownError": MagicMock()},
    {},
    42,
    "not a handler",
    {"success": "not callable"},
])
async def test_edit_is_sent_and_returned_whatever_done_holds(extensions, mw_client, done):
    mw_client.post.return_value = {"edit": EDIT_RESULT}

    result = await extensions.edit_page({"title": "Sandbox", "text": "x", "done": done})

    assert result == EDIT_RESULT
    mw_client.post.assert_awaited_once_with({
        "title": "Sandbox",
        "text": "x",
        "format": "json",
        "action": "edit",
        "token": "csrf-token+\\",
    })


@pytest.mark.asyncio
async def test_simple_handler_receives_result(extensions, mw_client):
    mw_client.post.return_value = {"edit": EDIT_RESULT}
    done = MagicMock()

    await extensions.edit_page({"text": "x", "done": done})

    done.assert_called_once_with(EDIT_RESULT)


@pytest.mark.asyncio
async def test_structured_success_hook_may_be_async(extensions, mw_client):
    mw_client.post.return_value = {"edit": EDIT_RESULT}
    success = AsyncMock()

    await extensions.edit_page({"text": "x", "done": StructuredHandler(success=success)})

    success.assert_awaited_once_with(EDIT_RESULT)


@pytest.mark.asyncio
async def test_failure_without_handler_logs_code_and_info(extensions, mw_client, caplog):
    mw_client.post.side_effect = MediaWikiApiError("editconflict", "Edit conflict.")

    with caplog.at_level(logging.ERROR, logger="mwext.extensions"):
        with pytest.raises(MediaWikiApiError):
            await extensions.edit_page({"text": "x"})

    assert 'code: "editconflict"' in caplog.text
    assert 'info: "Edit conflict."' in caplog.text


@pytest.mark.asyncio
async def test_transport_failure_without_handler_logs_http_code(extensions, mw_client, caplog):
    mw_client.post.side_effect = MediaWikiRequestError("MediaWiki request failed: ConnectError")

    with caplog.at_level(logging.ERROR, logger="mwext.extensions"):
        with pytest.raises(MediaWikiRequestError):
            await extensions.edit_page({"text": "x"})

    assert 'code: "http"' in caplog.text


@pytest.mark.asyncio
async def test_api_error_hook_called_once_with_error(extensions, mw_client):
    error = {"code": "badtoken", "info": "Invalid CSRF token."}
    mw_client.post.side_effect = MediaWikiApiError("badtoken", "Invalid CSRF token.", error)
    api_error = MagicMock()
    unknown_error = MagicMock()

    with pytest.raises(MediaWikiApiError):
        await extensions.edit_page({
            "text": "x",
            "done": {"api_error": api_error, "unknown_error": unknown_error},
        })

    api_error.assert_called_once_with(error)
    unknown_error.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_error_hook_on_transport_failure(extensions, mw_client):
    mw_client.post.side_effect = MediaWikiRequestError("timeout")
    api_error = MagicMock()
    unknown_error = MagicMock()

    with pytest.raises(MediaWikiRequestError):
        await extensions.edit_page({
            "text": "x",
            "done": {"api_error": api_error, "unknown_error": unknown_error},
        })

    unknown_error.assert_called_once_with()
    api_error.assert_not_called()


@pytest.mark.asyncio
async def test_simple_handler_not_called_on_failure(extensions, mw_client, caplog):
    mw_client.post.side_effect = MediaWikiApiError("protectedpage", "Protected.")
    done = MagicMock()

    with caplog.at_level(logging.ERROR, logger="mwext.extensions"):
        with pytest.raises(MediaWikiApiError):
            await extensions.edit_page({"text": "x", "done": done})

    done.assert_not_called()
    assert "edit failed" not in caplog.text


@pytest.mark.asyncio
async def test_token_failure_is_an_edit_failure(mw_client, context):
    failing = context.model_copy(update={
        "token_provider": AsyncMock(side_effect=MediaWikiRequestError("token fetch failed")),
    })
    extensions = ApiExtensions(mw_client, failing)
    unknown_error = MagicMock()

    with pytest.raises(MediaWikiRequestError):
        await extensions.edit_page({"text": "x", "done": {"unknown_error": unknown_error}})

    mw_client.post.assert_not_awaited()
    unknown_error.assert_called_once_with()


@pytest.mark.asyncio
async def test_camel_case_api_error_hook(extensions, mw_client):
    error = {"code": "editconflict", "info": "Edit conflict."}
    mw_client.post.side_effect = MediaWikiApiError("editconflict", "Edit conflict.", error)
    api_error = MagicMock()

    with pytest.raises(MediaWikiApiError):
        await extensions.edit_page({"text": "x", "done": {"apiError": api_error}})

    mw_client.post.assert_awaited_once()
    assert "done" not in mw_client.post.await_args.args[0]
    api_error.assert_called_once_with(error)


@pytest.mark.asyncio
@pytest.mark.parametrize("make_done", [
    lambda hook: hook,
    lambda hook: {"success": hook},
])
async def test_failing_success_hook_keeps_edit_result(extensions, mw_client, caplog, make_done):
    mw_client.post.return_value = {"edit": {"result": "Success", "newrevid": 9}}
    hook = MagicMock(side_effect=RuntimeError("handler bug"))

    with caplog.at_level(logging.ERROR, logger="mwext.extensions"):
        result = await extensions.edit_page({"text": "x", "done": make_done(hook)})

    assert result == {"result": "Success", "newrevid": 9}
    hook.assert_called_once_with(result)
    assert "completion hook" in caplog.text
    assert "handler bug" in caplog.text


@pytest.mark.asyncio
async def test_failing_error_hook_keeps_original_error(extensions, mw_client, caplog):
    mw_client.post.side_effect = MediaWikiApiError("badtoken", "Invalid CSRF token.")
    api_error = AsyncMock(side_effect=RuntimeError("handler bug"))

    with caplog.at_level(logging.ERROR, logger="mwext.extensions"):
        with pytest.raises(MediaWikiApiError) as excinfo:
            await extensions.edit_page({"text": "x", "done": {"api_error": api_error}})

    assert excinfo.value.code == "badtoken"
    api_error.assert_awaited_once()
    assert "handler bug" in caplog.text
