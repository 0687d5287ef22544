# glr/filters.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from glr.ignorelist import IgnoreSet
from glr.models import RepositoryDescriptor
from glr.utils.logging_utils import get_logger


@dataclass(frozen=True, slots=True)
class FilterPolicy:
    """
    Rules deciding which discovered repositories make it into the index.

    Attributes:
        exclude_forks: Drop repositories that were forked from another project.
        exclude_archived: Drop archived repositories. Enforced by the listing
            query (see GitlabProjectLister.collect_projects), not re-checked
            by filter_repos().
        ignore: Namespace-qualified paths that are never indexed.
    """
    exclude_forks: bool = False
    exclude_archived: bool = False
    ignore: IgnoreSet | None = None


def filter_repos(
        repos: Iterable[RepositoryDescriptor],
        policy: FilterPolicy,
        logger: logging.Logger | None = None,
) -> list[RepositoryDescriptor]:
    """
    Apply fork and ignore-list policy, preserving discovery order.

    Fork exclusion is checked first, so a fork that is also ignore-listed is
    reported as an excluded fork.
    """
    logger = logger or get_logger()
    out: list[RepositoryDescriptor] = []

    for r in repos:
        if policy.exclude_forks and r.is_fork:
            logger.info("Excluding fork %s, was forked from %s", r.path_with_namespace, r.forked_from)
            continue
        if policy.ignore is not None and r.path_with_namespace in policy.ignore:
            continue
        out.append(r)

    return out


def sort_repos(repos: Iterable[RepositoryDescriptor]) -> list[RepositoryDescriptor]:
    """Return repositories ordered by namespace-qualified path."""
    return sorted(repos, key=lambda r: r.path_with_namespace)
