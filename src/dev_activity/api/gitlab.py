"""GitLab activity queries built on the resilient client."""

from __future__ import annotations

from contextlib import aclosing
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import quote

from dev_activity.logging import get_logger
from dev_activity.schemas import GitLabEvent, GitLabProject, GitLabUser

from .exceptions import ApiHttpError, ApiResponseError
from .outcomes import SkipOutcome, validate_items

if TYPE_CHECKING:
    from .client import ResilientApiClient

logger = get_logger(__name__)


@dataclass
class PushedProjects:
    """Projects a user pushed to, in discovery order."""

    projects: dict[int, GitLabProject] = field(default_factory=dict)
    """Project info keyed by project ID."""

    author_name: str | None = None
    """Display name from the first event, used to filter commits by author."""


class GitLabActivityService:
    """Read-only queries describing one developer's GitLab activity."""

    def __init__(self, client: ResilientApiClient, *, per_page: int = 100) -> None:
        self._client = client
        self._per_page = per_page

    @property
    def client(self) -> ResilientApiClient:
        return self._client

    async def find_user_id(self, username: str) -> int | None:
        """Look up a user ID by username (None if no such user)."""
        outcome = await self._client.fetch_json(f"/users?username={quote(username)}")
        if isinstance(outcome, SkipOutcome):
            return None
        users = outcome.parse_items(GitLabUser)
        if not users:
            logger.warning("User '{}' not found on GitLab", username)
            return None
        logger.info("User '{}' found on GitLab (id: {})", username, users[0].id)
        return users[0].id

    async def get_project(self, project_id: int) -> GitLabProject | None:
        """Fetch project info; HTTP errors and unusable payloads yield None."""
        try:
            outcome = await self._client.fetch_json(f"/projects/{project_id}")
        except ApiHttpError as e:
            logger.warning("Error fetching project info for ID {}: HTTP {}", project_id, e.status)
            return None
        if isinstance(outcome, SkipOutcome):
            return None
        try:
            return outcome.parse(GitLabProject)
        except ApiResponseError as e:
            logger.warning("Skipping project {}: {}", project_id, e)
            return None

    async def pushed_projects(self, user_id: int, repo_limit: int) -> PushedProjects:
        """Discover up to ``repo_limit`` distinct projects from push events."""
        template = (
            f"/users/{user_id}/events?action=pushed&per_page={{per_page}}&page={{page}}"
        )
        result = PushedProjects()
        seen: set[int] = set()

        async with aclosing(
            self._client.iter_pages(template, per_page=self._per_page, max_pages=0)
        ) as pages:
            async for _page, items in pages:
                for event in validate_items(GitLabEvent, items, template):
                    if result.author_name is None and event.author and event.author.name:
                        result.author_name = event.author.name
                    if event.project_id is None or event.project_id in seen:
                        continue
                    seen.add(event.project_id)
                    project = await self.get_project(event.project_id)
                    if project is not None:
                        result.projects[event.project_id] = project
                    if len(result.projects) >= repo_limit:
                        break
                if len(result.projects) >= repo_limit:
                    break

        return result

    async def count_commits(self, project_id: int, author_name: str) -> int:
        """Count commits by ``author_name`` across all pages."""
        template = (
            f"/projects/{project_id}/repository/commits?author={quote(author_name)}"
            "&per_page={per_page}&page={page}"
        )
        total = 0
        async with aclosing(
            self._client.iter_pages(template, per_page=self._per_page, max_pages=0)
        ) as pages:
            async for _page, items in pages:
                total += len(items)
        return total
