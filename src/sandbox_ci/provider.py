from typing import Any, Awaitable, Callable

import aiohttp

from sandbox_ci import metrics
from sandbox_ci.config import Config
from sandbox_ci.exceptions import MissingCredentialError
from sandbox_ci.log import logger
from sandbox_ci.models import BuildContext, BuildEvent, RepoService


class StatusProvider:
    """
    Common behaviour of the source-control hosts we report to.

    Subclasses implement `post_status` and `post_comment` and route the actual
    HTTP call through `_deliver`, which owns sterile mode, metrics and the
    best-effort error policy.
    """

    name: str = ""
    display_name: str = ""
    token_name: str = ""

    # Errors that mean "the call did not go through"
    transport_errors: tuple[type[BaseException], ...] = (
        aiohttp.ClientError,
        TimeoutError,
    )

    def __init__(self, config: Config):
        self.config = config

    @property
    def token(self) -> str:
        return getattr(self.config, self.token_name)

    def require_credentials(self) -> None:
        if not self.token:
            raise MissingCredentialError(self.token_name)

    async def post_status(self, context: BuildContext, event: BuildEvent) -> None:
        raise NotImplementedError

    async def post_comment(self, context: BuildContext, text: str) -> None:
        raise NotImplementedError

    async def _deliver(
        self,
        kind: str,
        label: str,
        url: str,
        payload: Any,
        send: Callable[[], Awaitable[Any]],
    ) -> None:
        logger.debug("Posting %s %s to %s: %s", self.display_name, kind, url, payload)

        if self.config.STERILE:
            logger.info(
                "STERILE mode: would post %s %s to %s", self.display_name, kind, url
            )
            metrics.notifications_skipped_total.labels("sterile").inc()
            return

        try:
            with metrics.track_notification(self.name, kind):
                await send()
        except self.transport_errors as e:
            # Notifications are best effort and must never fail the build
            logger.warning("%s %s update failed: %s", self.display_name, kind, e)
            return

        metrics.notifications_total.labels(self.name, kind, label).inc()


def select_provider(
    service: str, session: aiohttp.ClientSession, config: Config
) -> StatusProvider | None:
    from sandbox_ci.bitbucket import Bitbucket
    from sandbox_ci.github import GitHub

    if service == RepoService.github:
        return GitHub.from_session(session, config)
    if service == RepoService.bitbucket:
        return Bitbucket(session, config)

    logger.debug("No provider for repository service '%s'", service)
    return None
