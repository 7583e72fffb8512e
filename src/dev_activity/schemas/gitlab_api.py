"""Pydantic schemas for parsing GitLab API responses.

See: https://docs.gitlab.com/ee/api/rest/
"""

from pydantic import BaseModel, Field


class GitLabUser(BaseModel):
    """User from GET /users?username=."""

    id: int = Field(description="GitLab user ID")
    username: str = Field(description="GitLab username")
    name: str | None = Field(default=None, description="Display name")


class GitLabEventAuthor(BaseModel):
    """Author embedded in an event."""

    name: str | None = Field(default=None, description="Display name used on commits")


class GitLabEvent(BaseModel):
    """Event from GET /users/{id}/events."""

    project_id: int | None = Field(default=None, description="Project the event belongs to")
    action_name: str | None = Field(default=None, description="e.g. 'pushed to'")
    author: GitLabEventAuthor | None = Field(default=None, description="Event author")


class GitLabProject(BaseModel):
    """Project from GET /projects/{id}."""

    id: int = Field(description="Project ID")
    name: str = Field(description="Project name")
    path_with_namespace: str = Field(default="", description="namespace/project")
    star_count: int = Field(default=0, description="Star count")
    forks_count: int = Field(default=0, description="Fork count")

