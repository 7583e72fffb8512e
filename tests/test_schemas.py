"""Contract tests for GitHub and GitLab payload schemas."""

import pytest
from pydantic import ValidationError

from dev_activity.schemas import (
    GitHubCommitDetail,
    GitHubCommitSearchItem,
    GitHubRepository,
    GitHubTree,
    GitLabEvent,
    GitLabProject,
)
from tests.factories import (
    make_commit_detail,
    make_commit_search_item,
    make_github_repo,
    make_gitlab_event,
    make_gitlab_project,
    make_tree,
    make_tree_entry,
)


class TestGitHubRepository:
    def test_parses_and_ignores_unknown_fields(self) -> None:
        repo = GitHubRepository.model_validate(make_github_repo(archived=True))

        assert repo.full_name == "octocat/hello-world"
        assert not hasattr(repo, "archived")

    def test_search_item_repository_has_default_counts(self) -> None:
        item = GitHubCommitSearchItem.model_validate(
            make_commit_search_item("abc", make_github_repo())
        )

        assert item.repository.id == 1296269
        assert item.repository.stargazers_count == 0
        assert item.repository.default_branch is None

    def test_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            GitHubRepository.model_validate({"name": "x", "full_name": "o/x", "owner": {}})


class TestGitHubCommitDetail:
    @pytest.mark.parametrize(
        ("files", "expected"),
        [
            (["src/main.go"], True),
            (["lib/util.rb", "README.md"], True),
            (["docs/src/guide.md"], False),
            ([], False),
        ],
    )
    def test_touches_production_code(self, files: list[str], expected: bool) -> None:
        detail = GitHubCommitDetail.model_validate(make_commit_detail(files=files))

        assert detail.touches_any(("src/", "lib/")) is expected


class TestGitHubTree:
    def test_blobs_excludes_trees_and_submodules(self) -> None:
        tree = GitHubTree.model_validate(
            make_tree(
                [
                    make_tree_entry("src", "t", entry_type="tree"),
                    make_tree_entry("src/a.py", "b"),
                    make_tree_entry("vendor/lib", "c", entry_type="commit"),
                ],
                truncated=True,
            )
        )

        assert [b.path for b in tree.blobs] == ["src/a.py"]
        assert tree.truncated


class TestGitLabSchemas:
    def test_event(self) -> None:
        event = GitLabEvent.model_validate(make_gitlab_event(5, author_name="Some One"))

        assert event.project_id == 5
        assert event.author is not None
        assert event.author.name == "Some One"

    def test_event_without_project(self) -> None:
        assert GitLabEvent.model_validate({"action_name": "joined"}).project_id is None

    def test_project(self) -> None:
        project = GitLabProject.model_validate(make_gitlab_project(9, "tool"))

        assert project.path_with_namespace == "someone/tool"
        assert project.forks_count == 1
