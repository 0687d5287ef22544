"""Tests for GitLab client construction and project discovery."""

from typing import Any
from unittest.mock import MagicMock, call, patch

import gitlab.exceptions
import pytest
import requests.exceptions

from glr.client import GitlabProjectLister, connect, normalize_proxy, normalize_url
from glr.exceptions import ConfigError, DiscoveryError
from tests.factories import project_record


class FakeProject:
    def __init__(self, record: dict[str, Any]) -> None:
        self.attributes = record


class FakeBatch:
    """One page as python-gitlab's RESTObjectList exposes it."""

    def __init__(self, paths: list[str], next_page: int | None) -> None:
        self._items = [FakeProject(project_record(p)) for p in paths]
        self.next_page = next_page

    def __iter__(self):
        return iter(self._items)


def _pages(*pages: list[str]) -> list[FakeBatch]:
    """Batches for consecutive pages; the last one reports no next page."""
    return [
        FakeBatch(paths, i + 1 if i < len(pages) else None)
        for i, paths in enumerate(pages, start=1)
    ]


def _query(c) -> dict[str, Any]:
    return c.kwargs["query_parameters"]


@pytest.mark.unit
class TestNormalize:
    def test_api_base_url(self) -> None:
        assert normalize_url("https://gitlab.example.com/api/v4") == "https://gitlab.example.com"
        assert normalize_url("https://gitlab.example.com/api/v4/") == "https://gitlab.example.com"

    def test_instance_url(self) -> None:
        assert normalize_url("https://gitlab.example.com") == "https://gitlab.example.com"
        assert normalize_url("gitlab.example.com") == "https://gitlab.example.com"

    def test_proxy(self) -> None:
        assert normalize_proxy("127.0.0.1:8080") == "http://127.0.0.1:8080"
        with pytest.raises(ConfigError):
            normalize_proxy("http://")


@pytest.mark.unit
class TestGitlabProjectLister:
    """Tests for GitlabProjectLister."""

    def test_pages_until_no_next_page(self, logger) -> None:
        gl = MagicMock()
        gl.projects.list.side_effect = _pages(["g/a", "g/b"], ["g/c"], ["g/d"])

        repos = GitlabProjectLister(gl, logger=logger).collect_projects(per_page=2)

        assert [r.path_with_namespace for r in repos] == ["g/a", "g/b", "g/c", "g/d"]
        calls = gl.projects.list.call_args_list
        assert [_query(c)["page"] for c in calls] == [1, 2, 3]
        assert all(_query(c)["per_page"] == 2 for c in calls)
        assert all(c.kwargs["iterator"] is True and c.kwargs["get_next"] is False for c in calls)

    def test_next_page_zero_stops(self, logger) -> None:
        gl = MagicMock()
        gl.projects.list.return_value = FakeBatch(["g/a"], 0)

        repos = GitlabProjectLister(gl, logger=logger).collect_projects()
        assert len(repos) == 1
        assert gl.projects.list.call_count == 1

    def test_archived_filter_on_global_listing(self, logger) -> None:
        gl = MagicMock()
        gl.projects.list.side_effect = _pages(["g/a"])
        GitlabProjectLister(gl, logger=logger).collect_projects(archived=False)
        assert _query(gl.projects.list.call_args)["archived"] == "false"

    def test_no_archived_filter_by_default(self, logger) -> None:
        gl = MagicMock()
        gl.projects.list.side_effect = _pages(["g/a"])
        GitlabProjectLister(gl, logger=logger).collect_projects()
        assert "archived" not in _query(gl.projects.list.call_args)

    def test_group_listing_carries_no_archived_filter(self, logger) -> None:
        gl = MagicMock()
        group_projects = gl.groups.get.return_value.projects
        group_projects.list.side_effect = _pages(["teamA/svc"])

        GitlabProjectLister(gl, logger=logger).collect_projects(["teamA"], archived=False)

        assert "archived" not in _query(group_projects.list.call_args)
        gl.projects.list.assert_not_called()

    def test_groups_swept_sequentially_without_dedup(self, logger) -> None:
        gl = MagicMock()
        group_projects = gl.groups.get.return_value.projects
        group_projects.list.side_effect = [
            *_pages(["teamA/svc"], ["teamA/shared"]),
            *_pages(["teamA/shared", "teamB/tool"]),
        ]

        repos = GitlabProjectLister(gl, logger=logger).collect_projects(["teamA", "teamB/sub"])

        assert [r.path_with_namespace for r in repos] == ["teamA/svc", "teamA/shared", "teamA/shared", "teamB/tool"]
        assert gl.groups.get.call_args_list == [
            call("teamA", lazy=True),
            call("teamA", lazy=True),
            call("teamB/sub", lazy=True),
        ]
        assert [_query(c)["page"] for c in group_projects.list.call_args_list] == [1, 2, 1]

    def test_page_error_aborts_discovery(self, logger) -> None:
        gl = MagicMock()
        gl.projects.list.side_effect = [
            _pages(["g/a"], ["g/b"])[0],
            gitlab.exceptions.GitlabListError("Internal Server Error", response_code=500),
        ]

        with pytest.raises(DiscoveryError, match="listing projects"):
            GitlabProjectLister(gl, logger=logger).collect_projects()

    def test_connection_error_aborts_discovery(self, logger) -> None:
        gl = MagicMock()
        gl.groups.get.return_value.projects.list.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(DiscoveryError):
            GitlabProjectLister(gl, logger=logger).collect_projects(["teamA"])


@pytest.mark.unit
class TestConnect:
    """Tests for connect()."""

    def test_anonymous_client_skips_auth(self, logger) -> None:
        with patch("glr.client.Gitlab") as gitlab_cls:
            connect("https://gitlab.example.com/api/v4", "", logger=logger)
        kwargs = gitlab_cls.call_args.kwargs
        assert kwargs["url"] == "https://gitlab.example.com"
        assert kwargs["private_token"] is None
        gitlab_cls.return_value.auth.assert_not_called()

    def test_token_authenticates(self, logger) -> None:
        with patch("glr.client.Gitlab") as gitlab_cls:
            connect("https://gitlab.example.com", "s3cr3t", timeout=5, logger=logger)
        kwargs = gitlab_cls.call_args.kwargs
        assert kwargs["private_token"] == "s3cr3t"
        assert kwargs["timeout"] == 5
        assert kwargs["ssl_verify"] is True
        gitlab_cls.return_value.auth.assert_called_once()

    def test_no_timeout_by_default(self, logger) -> None:
        with patch("glr.client.Gitlab") as gitlab_cls:
            connect("https://gitlab.example.com", "t", logger=logger)
        assert gitlab_cls.call_args.kwargs["timeout"] is None

    def test_proxy_session(self, logger) -> None:
        with patch("glr.client.Gitlab") as gitlab_cls:
            connect("https://gitlab.example.com", "t", proxy="127.0.0.1:8080", logger=logger)
        session = gitlab_cls.call_args.kwargs["session"]
        assert session.proxies["https"] == "http://127.0.0.1:8080"

    def test_tls_failure_is_fatal_without_retry(self, logger) -> None:
        client = MagicMock()
        client.auth.side_effect = requests.exceptions.SSLError("bad cert")
        with patch("glr.client.Gitlab", return_value=client) as gitlab_cls:
            with pytest.raises(DiscoveryError, match="creating gitlab client"):
                connect("https://gitlab.example.com", "glpat-secret", logger=logger)
        assert gitlab_cls.call_count == 1
        assert client.auth.call_count == 1

    def test_verification_disabled_only_on_request(self, logger) -> None:
        with patch("glr.client.Gitlab") as gitlab_cls:
            connect("https://gitlab.example.com", "t", ssl_verify=False, logger=logger)
        assert gitlab_cls.call_count == 1
        assert gitlab_cls.call_args.kwargs["ssl_verify"] is False

    def test_auth_failure(self, logger) -> None:
        client = MagicMock()
        client.auth.side_effect = gitlab.exceptions.GitlabAuthenticationError("401 Unauthorized", response_code=401)
        with patch("glr.client.Gitlab", return_value=client):
            with pytest.raises(DiscoveryError):
                connect("https://gitlab.example.com", "bad", logger=logger)
