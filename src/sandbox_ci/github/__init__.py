from typing import Any

import aiohttp
import gidgethub
from gidgethub import aiohttp as gh_aiohttp
from gidgethub.abc import GitHubAPI

from sandbox_ci import utils
from sandbox_ci.config import Config
from sandbox_ci.github.models import CommitStatusPayload, IssueCommentPayload
from sandbox_ci.log import logger
from sandbox_ci.models import BuildContext, BuildEvent
from sandbox_ci.provider import StatusProvider


class GitHub(StatusProvider):
    name = "github"
    display_name = "GitHub"
    token_name = "GITHUB_TOKEN"

    transport_errors = StatusProvider.transport_errors + (gidgethub.GitHubException,)

    def __init__(self, gh: GitHubAPI, config: Config):
        super().__init__(config)
        self.gh = gh

    @classmethod
    def from_session(cls, session: aiohttp.ClientSession, config: Config) -> "GitHub":
        gh = gh_aiohttp.GitHubAPI(
            session,
            "sandbox-ci",
            oauth_token=config.GITHUB_TOKEN or None,
        )
        return cls(gh, config)

    def get_repo_url(self, context: BuildContext) -> str:
        return f"/repos/{context.repo_owner}/{context.repo_name}"

    def get_status_url(self, context: BuildContext) -> str:
        return f"{self.get_repo_url(context)}/statuses/{context.commit_hash}"

    def get_comment_url(self, context: BuildContext) -> str:
        return f"{self.get_repo_url(context)}/issues/{context.pr_number}/comments"

    async def _post(self, url: str, data: dict[str, Any]) -> None:
        response = await self.gh.post(url, data=data)
        if self.config.DEBUG:
            logger.info("GitHub response: %s", response)

    async def post_status(self, context: BuildContext, event: BuildEvent) -> None:
        payload = CommitStatusPayload(
            state=utils.github_state(event),
            target_url=context.sandbox_url or None,
            description=utils.event_description(event),
            context=self.config.STATUS_CONTEXT,
        ).model_dump(exclude_none=True)

        url = self.get_status_url(context)
        await self._deliver(
            "status", event.value, url, payload, lambda: self._post(url, payload)
        )

    async def post_comment(self, context: BuildContext, text: str) -> None:
        payload = IssueCommentPayload(body=text).model_dump()

        url = self.get_comment_url(context)
        await self._deliver(
            "comment",
            BuildEvent.success.value,
            url,
            payload,
            lambda: self._post(url, payload),
        )
