import http
import logging
from unittest.mock import AsyncMock

import gidgethub
import pytest

from sandbox_ci import metrics
from sandbox_ci.github import GitHub
from sandbox_ci.models import BuildEvent


@pytest.fixture
def gh():
    return AsyncMock()


@pytest.mark.asyncio
async def test_post_status_payload(gh, config, context):
    provider = GitHub(gh, config)

    await provider.post_status(context, BuildEvent.pending)

    gh.post.assert_called_once_with(
        "/repos/test_org/test_repo/statuses/abc123",
        data={
            "state": "pending",
            "target_url": "http://feature-login--test-repo.sandbox.example.com",
            "description": "Building sandbox environment...",
            "context": "docksal/sandbox",
        },
    )


@pytest.mark.asyncio
async def test_post_status_failure_uses_github_vocabulary(gh, config, context):
    provider = GitHub(gh, config)

    await provider.post_status(context, BuildEvent.failure)

    payload = gh.post.call_args.kwargs["data"]
    assert payload["state"] == "failure"


@pytest.mark.asyncio
async def test_post_status_without_sandbox_url(gh, config, context):
    provider = GitHub(gh, config)
    context = context.model_copy(update={"sandbox_url": ""})

    await provider.post_status(context, BuildEvent.success)

    payload = gh.post.call_args.kwargs["data"]
    assert "target_url" not in payload


@pytest.mark.asyncio
async def test_post_comment(gh, config, context):
    provider = GitHub(gh, config)

    await provider.post_comment(context, "Sandbox environment: http://x")

    gh.post.assert_called_once_with(
        "/repos/test_org/test_repo/issues/42/comments",
        data={"body": "Sandbox environment: http://x"},
    )


@pytest.mark.asyncio
async def test_api_error_is_not_raised(gh, config, context, caplog):
    caplog.set_level(logging.WARNING, logger="sandbox_ci")
    gh.post.side_effect = gidgethub.BadRequest(http.HTTPStatus.UNPROCESSABLE_ENTITY)
    provider = GitHub(gh, config)

    before = (
        metrics.registry.get_sample_value(
            "sandbox_ci_notification_errors_total",
            {"provider": "github", "kind": "status", "error_type": "BadRequest"},
        )
        or 0
    )

    await provider.post_status(context, BuildEvent.success)

    assert "GitHub status update failed" in caplog.text
    after = metrics.registry.get_sample_value(
        "sandbox_ci_notification_errors_total",
        {"provider": "github", "kind": "status", "error_type": "BadRequest"},
    )
    assert after == before + 1


@pytest.mark.asyncio
async def test_debug_echoes_response(gh, config, context, caplog, monkeypatch):
    caplog.set_level(logging.INFO, logger="sandbox_ci")
    monkeypatch.setattr(config, "DEBUG", True)
    gh.post.return_value = {"id": 1, "state": "success"}
    provider = GitHub(gh, config)

    await provider.post_status(context, BuildEvent.success)

    assert "GitHub response: {'id': 1, 'state': 'success'}" in caplog.text


@pytest.mark.asyncio
async def test_sterile_mode_skips_call(gh, config, context, monkeypatch):
    monkeypatch.setattr(config, "STERILE", True)
    provider = GitHub(gh, config)

    await provider.post_status(context, BuildEvent.success)

    gh.post.assert_not_called()


def test_require_credentials(gh, config, monkeypatch):
    from sandbox_ci.exceptions import MissingCredentialError

    provider = GitHub(gh, config)
    provider.require_credentials()

    monkeypatch.setattr(config, "GITHUB_TOKEN", "")
    with pytest.raises(MissingCredentialError) as excinfo:
        provider.require_credentials()
    assert excinfo.value.token_name == "GITHUB_TOKEN"
