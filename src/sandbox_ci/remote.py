import shlex
import subprocess

from sandbox_ci.config import Config
from sandbox_ci.exceptions import MissingConfigurationError
from sandbox_ci.log import logger

# Exit codes a shell reports for a missing or unrunnable command
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126


class RemoteHost:
    """Runs build commands inside the sandbox codebase on the Docksal host."""

    def __init__(self, host: str, user: str, port: int, build_dir: str):
        self.host = host
        self.user = user
        self.port = port
        self.build_dir = build_dir

    @classmethod
    def from_config(cls, config: Config, build_dir: str) -> "RemoteHost":
        if not config.DOCKSAL_HOST:
            raise MissingConfigurationError(
                "DOCKSAL_HOST must be set to run remote build steps"
            )
        return cls(
            host=config.DOCKSAL_HOST,
            user=config.DOCKSAL_HOST_USER,
            port=config.DOCKSAL_HOST_SSH_PORT,
            build_dir=build_dir,
        )

    def ssh_command(self, command: str) -> list[str]:
        return [
            "ssh",
            "-p",
            str(self.port),
            f"{self.user}@{self.host}",
            f"cd {shlex.quote(self.build_dir)} && {command}",
        ]

    def run(self, command: str) -> int:
        """Run one command remotely and return its exit code."""
        args = self.ssh_command(command)
        logger.info("Running on %s: %s", self.host, command)
        logger.debug("Command line: %s", " ".join(args))
        try:
            # Output goes straight to the CI log
            result = subprocess.run(args, check=False)
        except FileNotFoundError:
            logger.error("ssh is not installed, cannot run: %s", command)
            return COMMAND_NOT_FOUND
        except OSError as e:
            logger.error("Could not start ssh for %s: %s", command, e)
            return COMMAND_NOT_EXECUTABLE
        return result.returncode
