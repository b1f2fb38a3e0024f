import pytest

from sandbox_ci.config import Config
from sandbox_ci.log import logger
from sandbox_ci.models import BuildContext, CIPlatform


@pytest.fixture
def config():
    config = Config(
        GIT_REPO_SERVICE="github",
        GIT_REPO_OWNER="test_org",
        GIT_REPO_NAME="test_repo",
        GIT_COMMIT_HASH="abc123",
        GIT_BRANCH_NAME="feature/login",
        GIT_PR_NUMBER="",
        GITHUB_TOKEN="gh_token",
        BITBUCKET_TOKEN="bb_user:bb_password",
        SANDBOX_DOMAIN="",
        DOCKSAL_HOST="sandbox.example.com",
        DOCKSAL_HOST_USER="build",
        DOCKSAL_HOST_SSH_PORT=22,
        REMOTE_BUILD_BASE="/home/build/builds",
        REMOTE_BUILD_DIR="",
        SANDBOX_INIT_STEPS=["fin project reset -f", "fin init"],
        STATUS_CONTEXT="docksal/sandbox",
        ENABLE_STATUS_API=True,
        ENABLE_PR_COMMENT=True,
        DEBUG=False,
        STERILE=False,
        OVERRIDE_LOGGING="DEBUG",
        METRICS_TEXTFILE="",
    )

    logger.setLevel(config.OVERRIDE_LOGGING)

    return config


@pytest.fixture
def context():
    return BuildContext(
        repo_service="github",
        repo_owner="test_org",
        repo_name="test_repo",
        commit_hash="abc123",
        branch_name="feature/login",
        pr_number="42",
        sandbox_url="http://feature-login--test-repo.sandbox.example.com",
        remote_build_dir="/home/build/builds/test-repo-feature-login",
        ci_platform=CIPlatform.circleci,
    )


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    # Handlers created under CliRunner point at streams that are closed now
    logger.handlers.clear()
