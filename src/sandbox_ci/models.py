from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class BuildEvent(StrEnum):
    pending = "pending"
    success = "success"
    failure = "failure"


class RepoService(StrEnum):
    github = "github"
    bitbucket = "bitbucket"


class CIPlatform(StrEnum):
    circleci = "circleci"
    bitbucket = "bitbucket"
    github_actions = "github-actions"


class BuildContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Kept as a plain string: an unknown service is skipped, not rejected
    repo_service: str
    repo_owner: str
    repo_name: str
    commit_hash: str
    branch_name: str = ""
    pr_number: str | None = None
    sandbox_url: str = ""
    remote_build_dir: str = ""
    ci_platform: CIPlatform | None = None
