"""Tests for GitLabActivityService."""

import httpx
import pytest

from dev_activity.api import ApiRateLimitError, GitLabActivityService
from tests.conftest import Router
from tests.factories import json_response, make_gitlab_event, make_gitlab_project


@pytest.fixture
def router() -> Router:
    return Router()


@pytest.fixture
def service(make_client, router) -> GitLabActivityService:
    return GitLabActivityService(make_client(router))


class TestFindUser:
    async def test_found(self, service, router):
        router.add("/users", json_response([{"id": 7, "username": "someone", "name": "Some One"}]))

        async with service.client:
            assert await service.find_user_id("someone") == 7

        assert router.requests[0].url.params["username"] == "someone"

    async def test_not_found(self, service, router):
        router.add("/users", json_response([]))

        async with service.client:
            assert await service.find_user_id("nobody") is None


class TestGetProject:
    async def test_project(self, service, router):
        router.add("/projects/42", json_response(make_gitlab_project(42)))

        async with service.client:
            project = await service.get_project(42)

        assert project is not None
        assert project.path_with_namespace == "someone/widgets"
        assert project.star_count == 3

    async def test_http_error_is_none(self, service, router):
        router.add("/projects/42", httpx.Response(404))

        async with service.client:
            assert await service.get_project(42) is None

    async def test_payload_missing_fields_is_none(self, service, router):
        router.add("/projects/42", json_response({"id": 42}))

        async with service.client:
            assert await service.get_project(42) is None


class TestPushedProjects:
    async def test_dedupes_and_limits(self, service, router):
        router.add(
            "/users/7/events",
            json_response(
                [
                    make_gitlab_event(1, author_name="Some One"),
                    make_gitlab_event(1, author_name="Other Name"),
                    make_gitlab_event(None),
                    make_gitlab_event(2),
                    make_gitlab_event(3),
                ]
            ),
        )
        for project_id in (1, 2, 3):
            router.add(
                f"/projects/{project_id}",
                json_response(make_gitlab_project(project_id, f"p{project_id}")),
            )

        async with service.client:
            pushed = await service.pushed_projects(7, repo_limit=2)

        assert list(pushed.projects) == [1, 2]
        assert pushed.author_name == "Some One"
        assert "/projects/3" not in router.paths
        assert router.requests[0].url.params["action"] == "pushed"

    async def test_unreadable_project_is_dropped(self, service, router):
        router.add("/users/7/events", json_response([make_gitlab_event(1), make_gitlab_event(2)]))
        router.add("/projects/1", httpx.Response(404))
        router.add("/projects/2", json_response(make_gitlab_project(2, "p2")))

        async with service.client:
            pushed = await service.pushed_projects(7, repo_limit=5)

        assert list(pushed.projects) == [2]

    async def test_malformed_project_is_dropped(self, service, router):
        router.add("/users/7/events", json_response([make_gitlab_event(1), make_gitlab_event(2)]))
        router.add("/projects/1", json_response({"id": 1}))
        router.add("/projects/2", json_response(make_gitlab_project(2, "p2")))

        async with service.client:
            pushed = await service.pushed_projects(7, repo_limit=5)

        assert list(pushed.projects) == [2]
        assert "/projects/2" in router.paths

    async def test_no_events(self, service, router):
        router.add("/users/7/events", json_response([]))

        async with service.client:
            pushed = await service.pushed_projects(7, repo_limit=5)

        assert pushed.projects == {}
        assert pushed.author_name is None


class TestCountCommits:
    async def test_sums_all_pages(self, make_client):
        pages: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params["page"])
            pages.append(page)
            assert request.url.params["author"] == "Some One"
            body = {1: [{"id": "a"}, {"id": "b"}], 2: [{"id": "c"}]}.get(page, [])
            return json_response(body)

        service = GitLabActivityService(make_client(handler), per_page=2)
        async with service.client:
            assert await service.count_commits(42, "Some One") == 3

        assert pages == [1, 2]

    async def test_rate_limit_propagates(self, make_client, sleep_recorder):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, headers={"retry-after": "1"})

        service = GitLabActivityService(make_client(handler))
        async with service.client:
            with pytest.raises(ApiRateLimitError):
                await service.count_commits(42, "Some One")

        assert sleep_recorder.calls == [1.0] * 5
