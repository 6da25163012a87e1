"""gitpr configuration schema definitions."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BRANCH_PREFIX = "pr-"
DEFAULT_REVIEW_SIGNATURE = "Just starting reviewing :)"


class FileConfig(BaseModel):
    """Contents of the YAML configuration file.

    Every key is optional; missing values are filled from the environment,
    command-line options or the local repository.
    """

    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = Field(None, description="GitHub login used as the head owner of new pull requests")
    token: Optional[str] = Field(None, description="GitHub personal access token")
    owner: Optional[str] = Field(None, description="Default repository owner")
    repo: Optional[str] = Field(None, description="Default repository name")
    branch_prefix: str = Field(DEFAULT_BRANCH_PREFIX, description="Prefix for local review branches")
    review_signature: Optional[str] = Field(None, description="Comment posted when starting a review")
    ssh: bool = Field(False, description="Fetch review branches over SSH instead of HTTPS")


class SessionContext(BaseModel):
    """Read-only settings for one gitpr invocation."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(description="Authenticated GitHub login")
    token: Optional[str] = Field(None, description="GitHub personal access token")
    owner: str = Field(description="Repository owner")
    repo: str = Field(description="Repository name")
    branch_prefix: str = Field(DEFAULT_BRANCH_PREFIX, description="Prefix for local review branches")
    review_signature: Optional[str] = Field(None, description="Comment posted when starting a review")
    ssh: bool = Field(False, description="Fetch review branches over SSH instead of HTTPS")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def comment_body(self) -> str:
        return self.review_signature or DEFAULT_REVIEW_SIGNATURE

    def redacted(self) -> dict:
        """Settings as a dict with the token masked, for display."""
        data = self.model_dump()
        if data.get("token"):
            data["token"] = data["token"][:4] + "..."
        return data
