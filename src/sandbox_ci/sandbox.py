import asyncio
from enum import StrEnum
from typing import Awaitable, Callable, Sequence

from sandbox_ci import metrics
from sandbox_ci.log import logger
from sandbox_ci.models import BuildEvent
from sandbox_ci.remote import RemoteHost


class SandboxState(StrEnum):
    not_started = "NOT_STARTED"
    building = "BUILDING"
    succeeded = "SUCCEEDED"
    failed = "FAILED"


Notifier = Callable[[BuildEvent], Awaitable[int]]


class SandboxInitializer:
    """
    Build a sandbox by running the remote steps in order.

    `pending` is reported before the first step. The first step that exits
    non-zero reports `failure` and stops the build; later steps never run.
    `success` is reported only after every step has passed. A step that cannot
    be started counts as a failed step.
    """

    def __init__(self, steps: Sequence[str], runner: RemoteHost, notifier: Notifier):
        self.steps = list(steps)
        self.runner = runner
        self.notifier = notifier
        self.state = SandboxState.not_started

    async def _run_step(self, step: str) -> int:
        try:
            return await asyncio.to_thread(self.runner.run, step)
        except Exception:
            logger.exception("Step '%s' could not be run", step)
            return 1

    async def _report(self, event: BuildEvent) -> None:
        try:
            await self.notifier(event)
        except Exception:
            logger.exception("Reporting '%s' for the sandbox build failed", event)

    async def run(self) -> SandboxState:
        self.state = SandboxState.building
        await self._report(BuildEvent.pending)

        for index, step in enumerate(self.steps, start=1):
            logger.info("Sandbox build step %d/%d: %s", index, len(self.steps), step)
            exit_code = await self._run_step(step)

            if exit_code != 0:
                logger.error("Step '%s' exited with code %d", step, exit_code)
                metrics.sandbox_steps_total.labels("failure").inc()
                self.state = SandboxState.failed
                await self._report(BuildEvent.failure)
                return self.state

            metrics.sandbox_steps_total.labels("success").inc()

        self.state = SandboxState.succeeded
        await self._report(BuildEvent.success)
        return self.state
