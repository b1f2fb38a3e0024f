"""
Resolve the build context for one invocation.

Values come from two places: explicit `GIT_*` settings on `Config`, and the
variables a CI platform exports for every build. Explicit settings always win,
so a pipeline can override any detected value.
"""

import os
from typing import Mapping

from sandbox_ci.config import Config
from sandbox_ci.exceptions import InvalidRepositoryError
from sandbox_ci.log import logger
from sandbox_ci.models import BuildContext, CIPlatform, RepoService
from sandbox_ci.utils import safe_name


def detect_platform(environ: Mapping[str, str]) -> CIPlatform | None:
    if environ.get("CIRCLECI"):
        return CIPlatform.circleci
    if environ.get("BITBUCKET_BUILD_NUMBER"):
        return CIPlatform.bitbucket
    if environ.get("GITHUB_ACTIONS"):
        return CIPlatform.github_actions
    return None


def service_from_url(repo_url: str) -> str:
    if "github.com" in repo_url:
        return RepoService.github.value
    if "bitbucket.org" in repo_url:
        return RepoService.bitbucket.value
    return ""


def _last_path_segment(url: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1] if url else ""


def _circleci_values(environ: Mapping[str, str]) -> dict[str, str]:
    pr_number = environ.get("CIRCLE_PR_NUMBER") or _last_path_segment(
        environ.get("CIRCLE_PULL_REQUEST", "")
    )
    return {
        "repo_service": service_from_url(environ.get("CIRCLE_REPOSITORY_URL", "")),
        "repo_owner": environ.get("CIRCLE_PROJECT_USERNAME", ""),
        "repo_name": environ.get("CIRCLE_PROJECT_REPONAME", ""),
        "commit_hash": environ.get("CIRCLE_SHA1", ""),
        "branch_name": environ.get("CIRCLE_BRANCH", ""),
        "pr_number": pr_number,
    }


def _bitbucket_values(environ: Mapping[str, str]) -> dict[str, str]:
    return {
        "repo_service": RepoService.bitbucket.value,
        "repo_owner": environ.get("BITBUCKET_REPO_OWNER", ""),
        "repo_name": environ.get("BITBUCKET_REPO_SLUG", ""),
        "commit_hash": environ.get("BITBUCKET_COMMIT", ""),
        "branch_name": environ.get("BITBUCKET_BRANCH", ""),
        "pr_number": environ.get("BITBUCKET_PR_ID", ""),
    }


def _github_actions_values(environ: Mapping[str, str]) -> dict[str, str]:
    owner, name = "", ""
    repository = environ.get("GITHUB_REPOSITORY", "")
    if repository:
        if repository.count("/") != 1:
            raise InvalidRepositoryError(
                f"GITHUB_REPOSITORY is not in owner/name format: {repository}"
            )
        owner, name = repository.split("/")

    # refs/pull/<number>/merge
    pr_number = ""
    ref_parts = environ.get("GITHUB_REF", "").split("/")
    if len(ref_parts) == 4 and ref_parts[:2] == ["refs", "pull"]:
        pr_number = ref_parts[2]

    return {
        "repo_service": RepoService.github.value,
        "repo_owner": owner,
        "repo_name": name,
        "commit_hash": environ.get("GITHUB_SHA", ""),
        "branch_name": environ.get("GITHUB_HEAD_REF")
        or environ.get("GITHUB_REF_NAME", ""),
        "pr_number": pr_number,
    }


def platform_values(
    platform: CIPlatform | None, environ: Mapping[str, str]
) -> dict[str, str]:
    if platform == CIPlatform.circleci:
        return _circleci_values(environ)
    if platform == CIPlatform.bitbucket:
        return _bitbucket_values(environ)
    if platform == CIPlatform.github_actions:
        return _github_actions_values(environ)
    return {}


def sandbox_domain(config: Config, repo_name: str, branch_name: str) -> str:
    if config.SANDBOX_DOMAIN:
        return config.SANDBOX_DOMAIN
    if not (config.DOCKSAL_HOST and repo_name and branch_name):
        return ""
    return f"{safe_name(branch_name)}--{safe_name(repo_name)}.{config.DOCKSAL_HOST}"


def remote_build_dir(config: Config, repo_name: str, branch_name: str) -> str:
    if config.REMOTE_BUILD_DIR:
        return config.REMOTE_BUILD_DIR
    return f"{config.REMOTE_BUILD_BASE}/{safe_name(repo_name)}-{safe_name(branch_name)}"


def resolve_context(
    config: Config, environ: Mapping[str, str] | None = None
) -> BuildContext:
    if environ is None:
        environ = os.environ

    platform = detect_platform(environ)
    logger.debug("Detected CI platform: %s", platform)
    detected = platform_values(platform, environ)

    explicit = {
        "repo_service": config.GIT_REPO_SERVICE,
        "repo_owner": config.GIT_REPO_OWNER,
        "repo_name": config.GIT_REPO_NAME,
        "commit_hash": config.GIT_COMMIT_HASH,
        "branch_name": config.GIT_BRANCH_NAME,
        "pr_number": config.GIT_PR_NUMBER,
    }

    values = {key: explicit[key] or detected.get(key, "") for key in explicit}
    logger.debug("Resolved repository values: %s", values)

    domain = sandbox_domain(config, values["repo_name"], values["branch_name"])

    return BuildContext(
        repo_service=values["repo_service"].lower(),
        repo_owner=values["repo_owner"],
        repo_name=values["repo_name"],
        commit_hash=values["commit_hash"],
        branch_name=values["branch_name"],
        pr_number=values["pr_number"] or None,
        sandbox_url=f"http://{domain}" if domain else "",
        remote_build_dir=remote_build_dir(
            config, values["repo_name"], values["branch_name"]
        ),
        ci_platform=platform,
    )
