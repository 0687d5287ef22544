# glr/client.py
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from typing import Any
from urllib.parse import urlparse

import gitlab.exceptions
import requests.exceptions
import urllib3
from gitlab import Gitlab
from requests import Session

from glr.exceptions import ConfigError, DiscoveryError
from glr.models import RepositoryDescriptor
from glr.utils import terminal_utils
from glr.utils.logging_utils import get_logger

DEFAULT_PER_PAGE: int = 100

# page number -> (items on that page, next page number or None)
PageFetcher = Callable[[int], tuple[list[dict[str, Any]], int | None]]


def normalize_url(url: str) -> str:
    """
    Turn a GitLab API base URL into the instance root python-gitlab expects.

    "https://gitlab.example.com/api/v4/" -> "https://gitlab.example.com"
    A missing scheme defaults to https.
    """
    u = url.strip().rstrip("/")
    if "://" not in u:
        u = f"https://{u}"
    if u.endswith("/api/v4"):
        u = u[: -len("/api/v4")]
    return u


def normalize_proxy(proxy: str) -> str:
    p = proxy.strip()
    if not p:
        return p
    if "://" not in p:
        p = f"http://{p}"
    parsed = urlparse(p)
    if not parsed.scheme or not parsed.netloc:
        raise ConfigError(f"Invalid proxy URL: {proxy!r}. Example: http://127.0.0.1:8080")
    return p


def connect(
        url: str,
        token: str | None,
        *,
        timeout: float | None = None,
        proxy: str | None = None,
        ssl_verify: bool = True,
        logger: logging.Logger | None = None,
) -> Gitlab:
    """
    Create a GitLab API client, authenticating when a token is configured.

    Without a token the client is anonymous and only sees public projects.
    A TLS failure is fatal; certificate checks are only skipped when the
    caller passes ssl_verify=False up front. `timeout` None waits forever.

    Raises:
        DiscoveryError: If the client cannot be created or authenticated.
        ConfigError: If the proxy URL is invalid.
    """
    logger = logger or get_logger()
    url = normalize_url(url)
    logger.debug("Connecting to GitLab: %s", url)

    kwargs: dict[str, Any] = {
        "url": url,
        "private_token": token or None,
        "timeout": timeout,
        "ssl_verify": ssl_verify,
    }

    if proxy:
        proxy = normalize_proxy(proxy)
        session = Session()
        session.proxies.update({"http": proxy, "https": proxy})
        kwargs["session"] = session

    if not ssl_verify:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        logger.warning("TLS certificate verification is disabled for %s", url)

    try:
        gl = Gitlab(**kwargs)
        if token:
            gl.auth()
            logger.debug("Authenticated to GitLab: %s", url)
        return gl
    except (gitlab.exceptions.GitlabError, requests.exceptions.RequestException) as e:
        raise DiscoveryError(f"creating gitlab client: {e}") from e


class GitlabProjectLister:
    """
    Paginated project discovery on top of a python-gitlab client.

    Every listing walks pages until GitLab reports no next page. A failure on
    any page aborts the whole discovery; partial listings are never returned.
    """

    def __init__(self, gl: Gitlab, logger: logging.Logger | None = None) -> None:
        self._gl = gl
        self.logger = logger or get_logger()

    @staticmethod
    def _page(manager: Any, page: int, per_page: int, **filters: str) -> tuple[list[dict[str, Any]], int | None]:
        # get_next=False stops the RESTObjectList at this page; paging is
        # driven by _collect() through next_page. page/per_page travel as
        # query_parameters since python-gitlab ignores `page` with iterator=True.
        batch = manager.list(
            iterator=True,
            get_next=False,
            query_parameters={"page": page, "per_page": per_page, **filters},
        )
        return [p.attributes for p in batch], batch.next_page or None

    def list_group_projects(
            self,
            group: str | int,
            page: int,
            per_page: int = DEFAULT_PER_PAGE,
    ) -> tuple[list[dict[str, Any]], int | None]:
        """One page of the projects of `group` (id or full path)."""
        return self._page(self._gl.groups.get(group, lazy=True).projects, page, per_page)

    def list_all_projects(
            self,
            page: int,
            per_page: int = DEFAULT_PER_PAGE,
            archived: bool | None = None,
    ) -> tuple[list[dict[str, Any]], int | None]:
        """
        One page of every project the token can see.

        archived: None lists everything, False asks GitLab to leave archived
        projects out, True returns only archived projects.
        """
        filters: dict[str, str] = {}
        if archived is not None:
            filters["archived"] = "true" if archived else "false"
        return self._page(self._gl.projects, page, per_page, **filters)

    def _collect(self, label: str, fetch: PageFetcher) -> list[RepositoryDescriptor]:
        out: list[RepositoryDescriptor] = []
        lay = terminal_utils.bar_layout()

        with terminal_utils.mk_counter(lay=lay) as pbar:
            terminal_utils.set_desc(pbar, f"Listing {label}", lay)
            page: int | None = 1
            while page:
                items, page = fetch(page)
                out.extend(RepositoryDescriptor.from_api(p) for p in items)
                pbar.update(len(items))
                terminal_utils.set_desc(
                    pbar,
                    terminal_utils.animate(f"Listing {label}", terminal_utils.LIST_PROJECTS_ANIM_FRAMES, pbar.n),
                    lay,
                )

        self.logger.debug("Listed %s projects from %s.", len(out), label)
        return out

    def collect_projects(
            self,
            groups: Iterable[str] = (),
            *,
            per_page: int = DEFAULT_PER_PAGE,
            archived: bool | None = None,
    ) -> list[RepositoryDescriptor]:
        """
        Discover repositories in `groups`, or everything accessible when empty.

        Groups are swept one after another and their results concatenated;
        a project reachable through two groups is listed twice. The archived
        filter only applies to the global listing.

        Raises:
            DiscoveryError: On any API error; no partial result is returned.
        """
        groups = list(groups)
        start = time.perf_counter()
        projects: list[RepositoryDescriptor] = []

        try:
            if groups:
                for group in groups:
                    projects.extend(
                        self._collect(
                            f"group: {group}",
                            lambda page, g=group: self.list_group_projects(g, page, per_page),
                        )
                    )
            else:
                projects = self._collect(
                    "accessible projects",
                    lambda page: self.list_all_projects(page, per_page, archived),
                )
        except (gitlab.exceptions.GitlabError, requests.exceptions.RequestException) as e:
            raise DiscoveryError(f"listing projects: {e}") from e

        self.logger.info(
            "Discovered %s projects in %s seconds.",
            len(projects),
            round(time.perf_counter() - start, 2),
        )
        return projects
