from pydantic import BaseModel


class CommitStatusPayload(BaseModel):
    state: str  # pending|success|failure|error
    target_url: str | None = None
    description: str
    context: str


class IssueCommentPayload(BaseModel):
    body: str
