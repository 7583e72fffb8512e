"""Pydantic schemas for parsing GitHub API responses.

These schemas map directly to the GitHub REST API response structure and
keep only the fields the activity services read. Unknown fields are ignored.
See: https://docs.github.com/en/rest
"""

from pydantic import BaseModel, Field


class GitHubOwner(BaseModel):
    """Repository owner (user or organization)."""

    login: str = Field(description="GitHub username or org name")
    id: int | None = Field(default=None, description="GitHub account ID")


class GitHubRepository(BaseModel):
    """GitHub repository object.

    Maps to: GET /repositories/{id}, GET /users/{user}/repos, and the
    ``repository`` field of commit search results (which omits counts).
    """

    id: int = Field(description="Stable repository ID")
    name: str = Field(description="Repository name")
    full_name: str = Field(description="owner/name")
    owner: GitHubOwner = Field(description="Repository owner")
    default_branch: str | None = Field(default=None, description="Default branch name")
    fork: bool = Field(default=False, description="Whether the repository is a fork")
    stargazers_count: int = Field(default=0, description="Star count")
    forks_count: int = Field(default=0, description="Fork count")


class GitHubCommitSearchItem(BaseModel):
    """Item from GET /search/commits."""

    sha: str = Field(description="Commit SHA")
    repository: GitHubRepository = Field(description="Repository containing the commit")


class GitHubCommitRef(BaseModel):
    """Commit entry from GET /repos/{owner}/{repo}/commits."""

    sha: str = Field(description="Commit SHA")


class GitHubCommitStats(BaseModel):
    """Line statistics of a single commit."""

    additions: int = Field(default=0, description="Lines added")
    deletions: int = Field(default=0, description="Lines deleted")
    total: int = Field(default=0, description="Total line changes")


class GitHubCommitFile(BaseModel):
    """File touched by a commit."""

    filename: str = Field(description="File path")
    additions: int = Field(default=0, description="Lines added")
    deletions: int = Field(default=0, description="Lines deleted")


class GitHubCommitDetail(BaseModel):
    """Single commit from GET /repos/{owner}/{repo}/commits/{ref}."""

    sha: str = Field(description="Commit SHA")
    stats: GitHubCommitStats = Field(
        default_factory=GitHubCommitStats, description="Line statistics"
    )
    files: list[GitHubCommitFile] = Field(default_factory=list, description="Touched files")

    def touches_any(self, prefixes: tuple[str, ...]) -> bool:
        """Whether any touched file path starts with one of ``prefixes``."""
        return any(f.filename.startswith(prefixes) for f in self.files)


class GitHubTreeEntry(BaseModel):
    """Entry of a git tree."""

    path: str = Field(description="Path relative to the repository root")
    type: str = Field(description="blob, tree, or commit")
    sha: str = Field(description="Object SHA")
    size: int | None = Field(default=None, description="Blob size in bytes")


class GitHubTree(BaseModel):
    """Recursive tree from GET /repos/{owner}/{repo}/git/trees/{sha}?recursive=1."""

    sha: str = Field(description="Tree SHA")
    tree: list[GitHubTreeEntry] = Field(default_factory=list, description="Tree entries")
    truncated: bool = Field(default=False, description="True if GitHub truncated the listing")

    @property
    def blobs(self) -> list[GitHubTreeEntry]:
        return [entry for entry in self.tree if entry.type == "blob"]


class GitHubBlob(BaseModel):
    """Blob from GET /repos/{owner}/{repo}/git/blobs/{sha}."""

    sha: str = Field(description="Blob SHA")
    content: str = Field(default="", description="Encoded content")
    encoding: str = Field(default="base64", description="Content encoding")


class GitHubTrafficViews(BaseModel):
    """Traffic summary from GET /repos/{owner}/{repo}/traffic/views."""

    count: int = Field(default=0, description="Total views in the last 14 days")
    uniques: int = Field(default=0, description="Unique visitors in the last 14 days")
