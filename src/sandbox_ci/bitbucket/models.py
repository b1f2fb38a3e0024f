from pydantic import BaseModel


class BuildStatusPayload(BaseModel):
    key: str
    state: str  # INPROGRESS|SUCCESSFUL|FAILED
    description: str
    url: str


class PullRequestCommentForm(BaseModel):
    # Sent form-encoded to the legacy 1.0 API
    content: str
