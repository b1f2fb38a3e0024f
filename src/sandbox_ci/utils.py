import re

from sandbox_ci.models import BuildEvent

_UNSAFE_CHARS = re.compile(r"[^a-z0-9]")


def safe_name(value: str) -> str:
    """Lowercase `value` and replace anything outside [a-z0-9] with a dash."""
    return _UNSAFE_CHARS.sub("-", value.lower())


def event_description(event: BuildEvent) -> str:
    if event == BuildEvent.pending:
        description = "Building sandbox environment..."
    elif event == BuildEvent.success:
        description = "Sandbox environment is ready"
    elif event == BuildEvent.failure:
        description = "Sandbox environment build failed"
    else:
        raise ValueError(f"Unknown event {event}")
    return description


def github_state(event: BuildEvent) -> str:
    if event in (BuildEvent.pending, BuildEvent.success, BuildEvent.failure):
        return event.value
    raise ValueError(f"Unknown event {event}")


def bitbucket_state(event: BuildEvent) -> str:
    if event == BuildEvent.pending:
        state = "INPROGRESS"
    elif event == BuildEvent.success:
        state = "SUCCESSFUL"
    elif event == BuildEvent.failure:
        state = "FAILED"
    else:
        raise ValueError(f"Unknown event {event}")
    return state


def pr_comment_text(sandbox_url: str) -> str:
    return f"Sandbox environment: {sandbox_url}"
