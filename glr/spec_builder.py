# glr/spec_builder.py
from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterable

from glr.models import (
    DEFAULT_URL_PATTERN,
    PASSWORD_ENV,
    CloneOptions,
    IndexSpec,
    Metadata,
    RepoSpec,
    RepositoryDescriptor,
)
from glr.revisions import RevisionVerifier
from glr.utils.logging_utils import get_logger


def password_env_for(token: str | None) -> str:
    """Name of the env variable carrying the clone password, or "" without a token."""
    return PASSWORD_ENV if token else ""


def repo_path(root_dir: str, path_with_namespace: str) -> str:
    """Local clone location for a repository."""
    return posixpath.join(root_dir, path_with_namespace)


def build_repo_spec(
        repo: RepositoryDescriptor,
        root_dir: str,
        revision: str,
        *,
        use_http: bool = False,
        password_env: str = "",
        depth: int = 0,
        http_username: str = "git",
        url_pattern: str = DEFAULT_URL_PATTERN,
) -> RepoSpec:
    """Map one descriptor to its RepoSpec."""
    remote = repo.http_url_to_repo if use_http else repo.ssh_url_to_repo

    return RepoSpec(
        path=repo_path(root_dir, repo.path_with_namespace),
        name=repo.path_with_namespace,
        revisions=(revision,),
        metadata=Metadata(
            github=repo.web_url,
            remote=remote,
            url_pattern=url_pattern,
        ),
        clone_options=CloneOptions(
            depth=depth,
            username=http_username,
            password_env=password_env,
        ),
    )


def build_index_spec(
        name: str,
        root_dir: str,
        repos: Iterable[RepositoryDescriptor],
        revision: str,
        *,
        use_http: bool = False,
        password_env: str = "",
        depth: int = 0,
        http_username: str = "git",
        url_pattern: str = DEFAULT_URL_PATTERN,
        verifier: RevisionVerifier | None = None,
        logger: logging.Logger | None = None,
) -> IndexSpec:
    """
    Build the index specification for already filtered and sorted repositories.

    Args:
        name: Display name stored in the specification.
        root_dir: Directory holding the local clones.
        repos: Repositories in the order they should appear.
        revision: Revision to index in every repository.
        use_http: Use the HTTPS clone URL as remote instead of SSH.
        password_env: Env variable name the clone step reads the password from.
        depth: Shallow clone depth, 0 for full history.
        http_username: Username used for HTTPS clones.
        url_pattern: Template for links to the source on GitLab.
        verifier: When given, repositories whose local clone cannot resolve
            `revision` are left out.

    Returns:
        IndexSpec with one RepoSpec per kept repository, in input order.
    """
    logger = logger or get_logger()
    spec = IndexSpec(name=name)

    for r in repos:
        if verifier is not None and not verifier.has_revision(r.path_with_namespace, revision):
            logger.info("Skipping missing revision repo=%s rev=%s", r.path_with_namespace, revision)
            continue

        spec.repositories.append(
            build_repo_spec(
                r,
                root_dir,
                revision,
                use_http=use_http,
                password_env=password_env,
                depth=depth,
                http_username=http_username,
                url_pattern=url_pattern,
            )
        )

    return spec
