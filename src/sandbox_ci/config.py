from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from sandbox_ci.log import logger


class Config(BaseSettings):
    # An exported but empty variable counts as unset, like `${VAR:-default}`
    model_config = SettingsConfigDict(env_ignore_empty=True)

    SECRET_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"GITHUB_TOKEN", "BITBUCKET_TOKEN"}
    )

    GIT_REPO_SERVICE: str = ""
    GIT_REPO_OWNER: str = ""
    GIT_REPO_NAME: str = ""
    GIT_COMMIT_HASH: str = ""
    GIT_BRANCH_NAME: str = ""
    GIT_PR_NUMBER: str = ""

    GITHUB_TOKEN: str = ""
    # username:app_password
    BITBUCKET_TOKEN: str = ""

    SANDBOX_DOMAIN: str = ""

    DOCKSAL_HOST: str = ""
    DOCKSAL_HOST_USER: str = "build"
    DOCKSAL_HOST_SSH_PORT: int = 22
    REMOTE_BUILD_BASE: str = "/home/build/builds"
    REMOTE_BUILD_DIR: str = ""

    SANDBOX_INIT_STEPS: list[str] = ["fin project reset -f", "fin init"]

    STATUS_CONTEXT: str = "docksal/sandbox"

    ENABLE_STATUS_API: bool = True
    ENABLE_PR_COMMENT: bool = False

    DEBUG: bool = False

    STERILE: bool = False

    OVERRIDE_LOGGING: Literal[
        "CRITICAL",
        "FATAL",
        "ERROR",
        "WARNING",
        "WARN",
        "INFO",
        "DEBUG",
        "NOTSET",
    ] = "INFO"

    METRICS_TEXTFILE: str = ""

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.DEBUG else self.OVERRIDE_LOGGING

    def masked_settings(self) -> dict[str, object]:
        """Settings as a dict, with tokens reduced to whether they are set."""
        settings: dict[str, object] = {}
        for name, value in self.model_dump().items():
            if name in self.SECRET_FIELDS:
                value = "set" if value else "unset"
            settings[name] = value
        return settings

    def print_config(self):
        logger.info("Sandbox CI settings:")
        for name, value in sorted(self.masked_settings().items()):
            logger.info("  %s=%s", name, value)
