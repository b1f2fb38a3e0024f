import asyncio
import functools
import os
from typing import Mapping

import aiohttp
import click
import pydantic
from pydantic_settings import SettingsError

from sandbox_ci import metrics
from sandbox_ci.config import Config
from sandbox_ci.environment import resolve_context
from sandbox_ci.exceptions import InvalidConfigurationError, UnrecoverableError
from sandbox_ci.log import logger, setup_logging
from sandbox_ci.models import BuildEvent
from sandbox_ci.notify import notify
from sandbox_ci.provider import select_provider
from sandbox_ci.remote import RemoteHost
from sandbox_ci.sandbox import SandboxInitializer, SandboxState

USAGE = "Usage: build-notify <pending|success|failure>"


def load_config() -> Config:
    try:
        config = Config()
    except (pydantic.ValidationError, SettingsError) as exc:
        raise InvalidConfigurationError(str(exc)) from exc
    setup_logging(config.log_level)
    if config.DEBUG:
        config.print_config()
    return config


async def run_notify(
    event: BuildEvent, config: Config, environ: Mapping[str, str] | None = None
) -> int:
    context = resolve_context(config, environ)
    async with aiohttp.ClientSession() as session:
        provider = select_provider(context.repo_service, session, config)
        return await notify(event, context, config, provider)


async def run_sandbox_init(
    config: Config, environ: Mapping[str, str] | None = None
) -> SandboxState:
    context = resolve_context(config, environ)
    runner = RemoteHost.from_config(config, context.remote_build_dir)
    async with aiohttp.ClientSession() as session:
        provider = select_provider(context.repo_service, session, config)
        notifier = functools.partial(
            notify, context=context, config=config, provider=provider
        )
        initializer = SandboxInitializer(config.SANDBOX_INIT_STEPS, runner, notifier)
        return await initializer.run()


def finish(config: Config) -> None:
    if config.METRICS_TEXTFILE:
        logger.debug("Writing metrics to %s", config.METRICS_TEXTFILE)
        metrics.write_metrics(config.METRICS_TEXTFILE)


@click.command(
    "build-notify",
    context_settings={"ignore_unknown_options": True},
    add_help_option=False,
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def build_notify(args: tuple[str, ...]) -> None:
    """Post the build status (and sandbox URL) to GitHub or Bitbucket."""
    try:
        event = BuildEvent(args[0] if args else "")
    except ValueError:
        click.echo(USAGE)
        return

    try:
        config = load_config()
        asyncio.run(run_notify(event, config, os.environ))
    except UnrecoverableError as exc:
        # build-notify exits 0 on setup errors too
        click.echo(f"Notice: {exc}. Skipping build notification.")
        return
    finish(config)


@click.command("sandbox-init")
def sandbox_init() -> None:
    """Build the sandbox on the Docksal host and report the outcome."""
    try:
        config = load_config()
        state = asyncio.run(run_sandbox_init(config, os.environ))
    except UnrecoverableError as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(1) from exc
    finish(config)

    if state != SandboxState.succeeded:
        raise SystemExit(1)


@click.group()
def main() -> None:
    """Docksal sandbox CI helpers."""


main.add_command(build_notify)
main.add_command(sandbox_init)


if __name__ == "__main__":
    main()
