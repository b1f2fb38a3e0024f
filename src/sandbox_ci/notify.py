import click

from sandbox_ci import metrics, utils
from sandbox_ci.config import Config
from sandbox_ci.exceptions import MissingCredentialError
from sandbox_ci.log import logger
from sandbox_ci.models import BuildContext, BuildEvent
from sandbox_ci.provider import StatusProvider


def should_comment(event: BuildEvent, context: BuildContext, config: Config) -> bool:
    if event != BuildEvent.success:
        return False
    if not config.ENABLE_PR_COMMENT:
        logger.debug("PR comments are disabled")
        return False
    if not context.pr_number:
        logger.debug("Not a pull request build, no comment")
        metrics.notifications_skipped_total.labels("no_pr").inc()
        return False
    if not context.sandbox_url:
        logger.debug("Sandbox URL is unknown, no comment")
        return False
    return True


async def notify(
    event: BuildEvent,
    context: BuildContext,
    config: Config,
    provider: StatusProvider | None,
) -> int:
    """
    Report `event` for the current build to the active provider.

    At most one status call and one PR comment call are made. Every failure
    mode is logged and swallowed so the calling pipeline keeps going; the
    return value is always 0.
    """
    logger.debug("Build event: %s", event)

    if provider is None:
        metrics.notifications_skipped_total.labels("unknown_provider").inc()
        return 0

    try:
        provider.require_credentials()
    except MissingCredentialError as e:
        # Always on stdout, whatever the log level
        click.echo(f"Notice: {e}. Skipping {provider.display_name} status update.")
        logger.debug("No credentials for %s, nothing sent", provider.name)
        metrics.notifications_skipped_total.labels("missing_credentials").inc()
        return 0

    if config.ENABLE_STATUS_API:
        await provider.post_status(context, event)
    else:
        logger.debug("Status API updates are disabled")
        metrics.notifications_skipped_total.labels("disabled").inc()

    if should_comment(event, context, config):
        await provider.post_comment(context, utils.pr_comment_text(context.sandbox_url))

    return 0
