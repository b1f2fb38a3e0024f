from typing import Any

import aiohttp

from sandbox_ci import utils
from sandbox_ci.bitbucket.models import BuildStatusPayload, PullRequestCommentForm
from sandbox_ci.config import Config
from sandbox_ci.log import logger
from sandbox_ci.models import BuildContext, BuildEvent
from sandbox_ci.provider import StatusProvider

API_URL = "https://api.bitbucket.org/2.0"
LEGACY_API_URL = "https://api.bitbucket.org/1.0"
WEB_URL = "https://bitbucket.org"


class Bitbucket(StatusProvider):
    name = "bitbucket"
    display_name = "Bitbucket"
    token_name = "BITBUCKET_TOKEN"

    def __init__(self, session: aiohttp.ClientSession, config: Config):
        super().__init__(config)
        self.session = session

    @property
    def auth(self) -> aiohttp.BasicAuth:
        user, _, password = self.token.partition(":")
        return aiohttp.BasicAuth(user, password)

    def get_status_url(self, context: BuildContext) -> str:
        return (
            f"{API_URL}/repositories/{context.repo_owner}/{context.repo_name}"
            f"/commit/{context.commit_hash}/statuses/build"
        )

    def get_commit_page_url(self, context: BuildContext) -> str:
        return (
            f"{WEB_URL}/{context.repo_owner}/{context.repo_name}"
            f"/commits/{context.commit_hash}"
        )

    def get_comment_url(self, context: BuildContext) -> str:
        return (
            f"{LEGACY_API_URL}/repositories/{context.repo_owner}/{context.repo_name}"
            f"/pullrequests/{context.pr_number}/comments"
        )

    async def _post(self, url: str, **kwargs: Any) -> None:
        async with self.session.post(url, auth=self.auth, **kwargs) as resp:
            body = await resp.text()
            if self.config.DEBUG:
                logger.info("Bitbucket response (%d): %s", resp.status, body)
            resp.raise_for_status()

    async def post_status(self, context: BuildContext, event: BuildEvent) -> None:
        payload = BuildStatusPayload(
            key=self.config.STATUS_CONTEXT,
            state=utils.bitbucket_state(event),
            description=utils.event_description(event),
            # Bitbucket rejects a build status without a link
            url=context.sandbox_url or self.get_commit_page_url(context),
        ).model_dump()

        url = self.get_status_url(context)
        await self._deliver(
            "status", event.value, url, payload, lambda: self._post(url, json=payload)
        )

    async def post_comment(self, context: BuildContext, text: str) -> None:
        form = PullRequestCommentForm(content=text).model_dump()

        url = self.get_comment_url(context)
        await self._deliver(
            "comment",
            BuildEvent.success.value,
            url,
            form,
            lambda: self._post(url, data=form),
        )
