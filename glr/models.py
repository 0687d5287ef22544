# glr/models.py
"""
Data model of the reindex pipeline.

RepositoryDescriptor is the reduced view of a GitLab project the pipeline
works with. IndexSpec / RepoSpec / Metadata / CloneOptions mirror the
livegrep index configuration schema and know how to render themselves to
the JSON-ready dicts the writer persists.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# Variable the fetch/clone step reads the clone password from. The token
# itself is never written into a specification.
PASSWORD_ENV: str = "GITLAB_TOKEN"

DEFAULT_URL_PATTERN: str = "https://gitlab.com/{name}/-/blob/{version}/{path}#L{lno}"


def _drop_empty(record: dict[str, Any]) -> dict[str, Any]:
    """Remove zero values ("", 0, [], None, {}) the way the livegrep schema omits them."""
    return {k: v for k, v in record.items() if v not in ("", 0, None) and v != [] and v != {}}


@dataclass(frozen=True, slots=True)
class RepositoryDescriptor:
    """
    Minimal description of a remote repository.

    Attributes:
        path_with_namespace: Namespace-qualified path, e.g. "teamA/svc". Unique key.
        ssh_url_to_repo: SSH clone URL.
        http_url_to_repo: HTTPS clone URL.
        web_url: Browser URL of the project.
        forked_from: Namespace-qualified path of the fork parent, None if not a fork.
        archived: Whether the project is archived on GitLab.
    """
    path_with_namespace: str
    ssh_url_to_repo: str = ""
    http_url_to_repo: str = ""
    web_url: str = ""
    forked_from: str | None = None
    archived: bool = False

    @property
    def is_fork(self) -> bool:
        return self.forked_from is not None

    @classmethod
    def from_api(cls, project: Mapping[str, Any]) -> RepositoryDescriptor:
        """
        Reduce a project record of the GitLab projects API to a descriptor.

        GitLab includes `forked_from_project` only for forks.
        """
        forked_from: str | None = None
        if fork_data := project.get("forked_from_project"):
            forked_from = fork_data.get("path_with_namespace") or str(fork_data.get("id", ""))

        return cls(
            path_with_namespace=project["path_with_namespace"],
            ssh_url_to_repo=project.get("ssh_url_to_repo") or "",
            http_url_to_repo=project.get("http_url_to_repo") or "",
            web_url=project.get("web_url") or "",
            forked_from=forked_from,
            archived=bool(project.get("archived", False)),
        )


@dataclass(frozen=True, slots=True)
class Metadata:
    github: str = ""  # web URL; field name fixed by the livegrep schema
    remote: str = ""
    url_pattern: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty({
            "github": self.github,
            "remote": self.remote,
            "url_pattern": self.url_pattern,
        })


@dataclass(frozen=True, slots=True)
class CloneOptions:
    depth: int = 0
    username: str = ""
    password_env: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty({
            "depth": self.depth,
            "username": self.username,
            "password_env": self.password_env,
        })


@dataclass(frozen=True, slots=True)
class RepoSpec:
    """One repository entry of the index specification."""
    path: str
    name: str
    revisions: tuple[str, ...] = ()
    metadata: Metadata | None = None
    clone_options: CloneOptions | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty({
            "path": self.path,
            "name": self.name,
            "revisions": list(self.revisions),
            "metadata": self.metadata.to_dict() if self.metadata else None,
            "clone_options": self.clone_options.to_dict() if self.clone_options else None,
        })


@dataclass(slots=True)
class IndexSpec:
    """Root of the generated specification: display name plus ordered repositories."""
    name: str
    repositories: list[RepoSpec] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty({
            "name": self.name,
            "repositories": [r.to_dict() for r in self.repositories],
        })
