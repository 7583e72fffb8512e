"""GitHub activity queries built on the resilient client.

Every method issues its requests sequentially through one
``ResilientApiClient`` so rate-limit pressure stays predictable.
"""

from __future__ import annotations

import base64
import re
from contextlib import aclosing
from typing import TYPE_CHECKING
from urllib.parse import quote

from dev_activity.logging import get_logger
from dev_activity.schemas import (
    GitHubBlob,
    GitHubCommitDetail,
    GitHubCommitRef,
    GitHubCommitSearchItem,
    GitHubRepository,
    GitHubTrafficViews,
    GitHubTree,
)

from .client import GITHUB_COMMIT_SEARCH
from .exceptions import ApiHttpError, ApiResponseError, ApiTransportError
from .outcomes import SkipOutcome, validate_items, validate_model

if TYPE_CHECKING:
    from .client import ResilientApiClient

logger = get_logger(__name__)

# Extensions treated as code/text when counting lines
CODE_EXTENSIONS = (
    ".js",
    ".ts",
    ".jsx",
    ".tsx",
    ".py",
    ".java",
    ".c",
    ".cpp",
    ".h",
    ".hpp",
    ".cs",
    ".go",
    ".rs",
    ".rb",
    ".php",
    ".html",
    ".css",
    ".json",
    ".md",
    ".sh",
    ".yml",
    ".yaml",
    ".xml",
    ".swift",
    ".kt",
    ".m",
    ".pl",
    ".scala",
    ".sql",
    ".txt",
)

PRODUCTION_PREFIXES = ("src/", "lib/")
MAX_BLOB_SIZE = 1_000_000
BINARY_THRESHOLD = 0.1

_LAST_PAGE = re.compile(r'[?&]page=(\d+)>; rel="last"')
_NON_PRINTABLE = re.compile(r"[^\x09-\x0d\x20-\x7e]")


def is_code_file(path: str) -> bool:
    return path.endswith(CODE_EXTENSIONS)


def looks_binary(content: str) -> bool:
    """More than 10% non-printable characters."""
    if not content:
        return False
    return len(_NON_PRINTABLE.findall(content)) / len(content) > BINARY_THRESHOLD


def last_page_from_link(link: str | None) -> int | None:
    """Page number of the ``rel="last"`` entry of a Link header."""
    if not link:
        return None
    match = _LAST_PAGE.search(link)
    return int(match.group(1)) if match else None


class GitHubActivityService:
    """Read-only queries describing one developer's GitHub activity.

    Usage:
        async with github_client() as client:
            service = GitHubActivityService(client)
            repos = await service.search_commit_repositories("octocat", repo_limit=5)
    """

    def __init__(self, client: ResilientApiClient, *, per_page: int = 100) -> None:
        self._client = client
        self._per_page = per_page

    @property
    def client(self) -> ResilientApiClient:
        return self._client

    # -------------------------------------------------------------------------
    # Repository discovery
    # -------------------------------------------------------------------------
    async def list_user_repos(self, username: str) -> list[GitHubRepository]:
        """List every public repository owned by ``username`` (all pages)."""
        template = f"/users/{quote(username)}/repos?per_page={{per_page}}&page={{page}}"
        items = await self._client.paginate(template, per_page=self._per_page, max_pages=0)
        return validate_items(GitHubRepository, items, template)

    async def search_commit_repositories(
        self,
        username: str,
        repo_limit: int,
    ) -> list[GitHubRepository]:
        """Find distinct repositories containing commits authored by ``username``.

        Uses commit search (preview media type), deduplicating by repository
        ID in first-seen order. Stops once ``repo_limit`` repositories are
        known or the page bound is reached.
        """
        template = (
            f"/search/commits?q=author:{quote(username)}&per_page={{per_page}}&page={{page}}"
        )
        repos: dict[int, GitHubRepository] = {}

        async with aclosing(
            self._client.iter_pages(
                template,
                per_page=self._per_page,
                items_key="items",
                accept=GITHUB_COMMIT_SEARCH,
            )
        ) as pages:
            async for page, items in pages:
                for item in validate_items(GitHubCommitSearchItem, items, template):
                    repos.setdefault(item.repository.id, item.repository)
                    if len(repos) >= repo_limit:
                        break
                logger.info("Commit search page {}: {} distinct repo(s)", page, len(repos))
                if len(repos) >= repo_limit:
                    break

        return list(repos.values())

    async def get_repository(self, repo_id: int) -> GitHubRepository | None:
        """Fetch a repository by its stable ID (None for a 409)."""
        outcome = await self._client.fetch_json(f"/repositories/{repo_id}")
        if isinstance(outcome, SkipOutcome):
            return None
        return outcome.parse(GitHubRepository)

    async def get_repository_by_name(self, owner: str, repo: str) -> GitHubRepository | None:
        outcome = await self._client.fetch_json(f"/repos/{owner}/{repo}")
        if isinstance(outcome, SkipOutcome):
            return None
        return outcome.parse(GitHubRepository)

    # -------------------------------------------------------------------------
    # Commits
    # -------------------------------------------------------------------------
    async def count_user_commits(self, owner: str, repo: str, username: str) -> int:
        """Count commits by ``username`` with a single request.

        Requests one commit per page; the ``rel="last"`` page number of the
        Link header is then the commit count. Without a Link header the page
        length (0 or 1) is the count.
        """
        outcome = await self._client.fetch_json(
            f"/repos/{owner}/{repo}/commits?author={quote(username)}&per_page=1"
        )
        if isinstance(outcome, SkipOutcome):
            return 0
        last_page = last_page_from_link(outcome.link)
        if last_page is not None:
            return last_page
        return len(outcome.as_list())

    async def user_has_commits_on_branch(
        self,
        repo_full_name: str,
        branch: str,
        username: str,
    ) -> bool | None:
        """Whether ``branch`` has a commit by ``username``.

        Returns:
            True/False, or None when the repository is empty or the branch
            is missing (409)
        """
        outcome = await self._client.fetch_json(
            f"/repos/{repo_full_name}/commits?sha={quote(branch)}"
            f"&author={quote(username)}&per_page=1"
        )
        if isinstance(outcome, SkipOutcome):
            return None
        return len(outcome.as_list()) > 0

    async def list_user_commits(
        self,
        owner: str,
        repo: str,
        branch: str,
        username: str,
    ) -> list[GitHubCommitRef]:
        """List commits by ``username`` on ``branch`` (bounded by max_pages)."""
        template = (
            f"/repos/{owner}/{repo}/commits?author={quote(username)}&sha={quote(branch)}"
            "&per_page={per_page}&page={page}"
        )
        items = await self._client.paginate(template, per_page=self._per_page)
        return validate_items(GitHubCommitRef, items, template)

    async def get_commit_stats(self, owner: str, repo: str, sha: str) -> GitHubCommitDetail:
        """Fetch a commit with its line statistics and touched files."""
        outcome = await self._client.fetch_json(f"/repos/{owner}/{repo}/commits/{sha}")
        if isinstance(outcome, SkipOutcome):
            return GitHubCommitDetail(sha=sha)
        return outcome.parse(GitHubCommitDetail)

    # -------------------------------------------------------------------------
    # Repository metrics
    # -------------------------------------------------------------------------
    async def count_contributors(self, owner: str, repo: str) -> int:
        template = f"/repos/{owner}/{repo}/contributors?per_page={{per_page}}&page={{page}}"
        contributors = await self._client.paginate(template, per_page=self._per_page)
        return len(contributors)

    async def get_traffic_views(self, owner: str, repo: str) -> int | None:
        """Views over the last 14 days, or None when unavailable.

        The traffic API requires push access; HTTP and transport errors are
        reported as "not available" rather than raised.
        """
        try:
            outcome = await self._client.fetch_json(f"/repos/{owner}/{repo}/traffic/views")
        except (ApiHttpError, ApiTransportError) as e:
            logger.debug("Traffic views unavailable for {}/{}: {}", owner, repo, e)
            return None
        if isinstance(outcome, SkipOutcome):
            return None
        return outcome.parse(GitHubTrafficViews).count

    # -------------------------------------------------------------------------
    # Lines of code
    # -------------------------------------------------------------------------
    async def get_blob_text(self, repo_full_name: str, blob_sha: str) -> str:
        """Fetch a blob and decode it as UTF-8 (empty for non-base64 blobs)."""
        outcome = await self._client.fetch_json(f"/repos/{repo_full_name}/git/blobs/{blob_sha}")
        if isinstance(outcome, SkipOutcome):
            return ""
        blob = outcome.parse(GitHubBlob)
        if blob.encoding != "base64":
            return ""
        return base64.b64decode(blob.content).decode("utf-8", errors="replace")

    async def count_lines_in_repo(self, repo_full_name: str, branch: str) -> int:
        """Count lines of code/text files at the head of ``branch``.

        Skips blobs over 1 MB, files without a code extension, content that
        looks binary, and individual files that fail to download.
        """
        head = await self._client.fetch_json(f"/repos/{repo_full_name}/commits/{quote(branch)}")
        if isinstance(head, SkipOutcome):
            return 0
        sha = head.parse(GitHubCommitDetail).sha

        tree_outcome = await self._client.fetch_json(
            f"/repos/{repo_full_name}/git/trees/{sha}?recursive=1"
        )
        if isinstance(tree_outcome, SkipOutcome):
            return 0
        tree = validate_model(GitHubTree, tree_outcome.data, tree_outcome.url)
        if tree.truncated:
            logger.warning(
                "Tree listing for {} is truncated; line count is partial", repo_full_name
            )

        total = 0
        for blob in tree.blobs:
            if blob.size is not None and blob.size > MAX_BLOB_SIZE:
                continue
            if not is_code_file(blob.path):
                continue
            try:
                content = await self.get_blob_text(repo_full_name, blob.sha)
            except (ApiHttpError, ApiTransportError, ApiResponseError) as e:
                logger.debug("Skipping {} in {}: {}", blob.path, repo_full_name, e)
                continue
            if looks_binary(content):
                continue
            total += content.count("\n") + 1
        return total
